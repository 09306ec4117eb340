from __future__ import annotations

import re
from typing import Any
from urllib.parse import parse_qs, unquote, urlparse

import pytest
import requests

from speciesfill.wiki_client import WikiClient

WIKIPEDIA_API = "https://en.wikipedia.org/w/api.php"
WIKIDATA_API = "https://www.wikidata.org/w/api.php"
SUMMARY_URL = re.compile(r"https://en\.wikipedia\.org/api/rest_v1/page/summary/")


def query_params(request) -> dict[str, str]:
    return {k: v[0] for k, v in parse_qs(urlparse(request.url).query).items()}


def summary_title(request) -> str:
    return unquote(urlparse(request.url).path.rsplit("/", 1)[1]).replace("_", " ")


def _params(**expected: str):
    # exact, case-sensitive match on the decoded query string
    def match(request) -> bool:
        params = query_params(request)
        return all(params.get(k) == v for k, v in expected.items())

    return match


def taxon_claim(name: str) -> list[dict]:
    return [{"mainsnak": {"snaktype": "value", "datavalue": {"value": name, "type": "string"}}}]


def population_claim(amount: str) -> list[dict]:
    return [
        {
            "mainsnak": {
                "snaktype": "value",
                "datavalue": {"value": {"amount": amount, "unit": "1"}, "type": "quantity"},
            }
        }
    ]


def summary_payload(
    title: str,
    extract: str | None = None,
    thumbnail: str | None = None,
    kind: str = "standard",
) -> dict:
    payload: dict[str, Any] = {"type": kind, "title": title}
    if extract is not None:
        payload["extract"] = extract
    if thumbnail is not None:
        payload["thumbnail"] = {"source": thumbnail, "width": 320, "height": 240}
    return payload


_ENDPOINTS = {
    "search": (WIKIPEDIA_API, _params(list="search")),
    "pageprops": (WIKIPEDIA_API, _params(prop="pageprops")),
    "summary": (SUMMARY_URL, None),
    "wbsearchentities": (WIKIDATA_API, _params(action="wbsearchentities")),
    "wbgetentities": (WIKIDATA_API, _params(action="wbgetentities")),
}


class Wikimedia:
    """
    Registers Wikipedia and Wikidata answers on the requests_mock fixture.
    Unregistered lookups answer "nothing found". requests_mock prefers the
    latest registration, so fail() overrides earlier answers.
    """

    def __init__(self, mocker) -> None:
        self.mocker = mocker
        mocker.get(WIKIPEDIA_API, additional_matcher=_params(list="search"),
                   json={"query": {"search": []}})
        mocker.get(WIKIPEDIA_API, additional_matcher=_params(prop="pageprops"),
                   json={"query": {"pages": {"-1": {"ns": 0, "missing": ""}}}})
        mocker.get(SUMMARY_URL, status_code=404, json={"type": "not_found"})
        mocker.get(WIKIDATA_API, additional_matcher=_params(action="wbsearchentities"),
                   json={"search": []})
        mocker.get(WIKIDATA_API, additional_matcher=_params(action="wbgetentities"),
                   json={"entities": {}})

    def search(self, query: str, hits: list[tuple[str, int | None]]) -> None:
        results = [{"ns": 0, "title": title, "pageid": pageid} for title, pageid in hits]
        self.mocker.get(
            WIKIPEDIA_API,
            additional_matcher=_params(list="search", srsearch=query),
            json={"batchcomplete": "", "query": {"search": results}},
        )

    def summary(self, title: str, payload: dict) -> None:
        self.mocker.get(
            SUMMARY_URL,
            additional_matcher=lambda request: summary_title(request) == title,
            json=payload,
        )

    def page_entity(self, page_id: int, qid: str) -> None:
        page = {"pageid": page_id, "ns": 0, "pageprops": {"wikibase_item": qid}}
        self.mocker.get(
            WIKIPEDIA_API,
            additional_matcher=_params(prop="pageprops", pageids=str(page_id)),
            json={"query": {"pages": {str(page_id): page}}},
        )

    def title_entity(self, title: str, qid: str) -> None:
        page = {"pageid": 1, "ns": 0, "title": title, "pageprops": {"wikibase_item": qid}}
        self.mocker.get(
            WIKIPEDIA_API,
            additional_matcher=_params(prop="pageprops", titles=title),
            json={"query": {"pages": {"1": page}}},
        )

    def entity_search(self, text: str, qid: str) -> None:
        self.mocker.get(
            WIKIDATA_API,
            additional_matcher=_params(action="wbsearchentities", search=text),
            json={"search": [{"id": qid, "label": text}]},
        )

    def entity(self, qid: str, claims: Any) -> None:
        self.mocker.get(
            WIKIDATA_API,
            additional_matcher=_params(action="wbgetentities", ids=qid),
            json={"entities": {qid: {"id": qid, "type": "item", "claims": claims}}},
        )

    def fail(self, *endpoints: str) -> None:
        for endpoint in endpoints:
            url, matcher = _ENDPOINTS[endpoint]
            self.mocker.get(url, additional_matcher=matcher, status_code=503,
                            json={"error": "unavailable"})

    @property
    def calls(self) -> list[tuple[str, dict[str, str]]]:
        return [
            (request.url.split("?", 1)[0], query_params(request))
            for request in self.mocker.request_history
        ]

    def endpoints(self) -> list[str]:
        names = []
        for url, params in self.calls:
            if "/page/summary/" in url:
                names.append("summary")
            elif params.get("action") == "query":
                names.append("search" if params.get("list") == "search" else "pageprops")
            else:
                names.append(params.get("action", ""))
        return names


@pytest.fixture
def wikimedia(requests_mock) -> Wikimedia:
    return Wikimedia(requests_mock)


@pytest.fixture
def client(wikimedia: Wikimedia) -> WikiClient:
    return WikiClient(session=requests.Session(), user_agent="speciesfill-tests/0.0")
