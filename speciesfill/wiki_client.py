# speciesfill/wiki_client.py
from __future__ import annotations
import logging
import os
from urllib.parse import quote
from typing import Any, Literal, Mapping, Optional

import requests

from speciesfill import config
from speciesfill.errors import ParseFailure, SourceUnavailable

LanguageCode = Literal["en", "ko", "es", "de", "fr", "ja", "zh"]

logger = logging.getLogger(__name__)


class WikiClient:
    """
    Thin JSON-over-HTTP wrapper shared by the Wikipedia and Wikidata lookups.
    Respects Wikimedia UA etiquette and turns transport problems into
    SourceUnavailable and malformed bodies into ParseFailure.
    """

    def __init__(
        self,
        language: LanguageCode = config.DEFAULT_LANG,  # type: ignore[assignment]
        *,
        session: Optional[requests.Session] = None,
        timeout: float = config.DEFAULT_TIMEOUT,
        user_agent: Optional[str] = None,
    ) -> None:
        self.language = language
        self.timeout = timeout
        self.session = session or requests.Session()
        self.user_agent = (
            user_agent or os.environ.get(config.USER_AGENT_ENV) or config.DEFAULT_UA
        )

    @property
    def wikipedia_api(self) -> str:
        return config.WIKIPEDIA_API.format(lang=self.language)

    def summary_url(self, title: str) -> str:
        # REST expects the page key: spaces become underscores, "/" must be escaped
        key = quote(title.replace(" ", "_"), safe="")
        return config.WIKIPEDIA_SUMMARY.format(lang=self.language, title=key)

    def get_json(
        self, url: str, params: Optional[Mapping[str, Any]] = None, *, source: str
    ) -> dict[str, Any]:
        """
        GET `url` and return the decoded JSON object.
        `source` labels the endpoint family in errors and logs.
        """
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }
        logger.debug("GET %s params=%s", url, dict(params or {}))
        try:
            resp = self.session.get(
                url, headers=headers, params=params, timeout=self.timeout
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise SourceUnavailable(source, str(exc)) from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise ParseFailure(source, "response is not JSON") from exc

        if not isinstance(data, dict):
            raise ParseFailure(source, f"expected a JSON object, got {type(data).__name__}")
        return data
