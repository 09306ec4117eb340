# speciesfill/resolver.py
from __future__ import annotations
import itertools
import logging
import re
from dataclasses import replace
from typing import Optional

from speciesfill.datatypes import Candidate, EntityFacts, Resolution, Status
from speciesfill.errors import (
    NoArticleFound,
    ParseFailure,
    SearchUnavailable,
    SummaryUnavailable,
)
from speciesfill.population import parse_population
from speciesfill.search import choose_article
from speciesfill.wiki_client import WikiClient
from speciesfill.wikidata import lookup_entity_facts

logger = logging.getLogger(__name__)

# "Panthera tigris": capitalised genus, lowercase epithet
BINOMIAL = re.compile(r"[A-Z][a-z]+ [a-z]+")


def looks_binomial(title: str) -> bool:
    return BINOMIAL.fullmatch(title) is not None


def merge_candidate(
    title: str,
    extract_text: Optional[str],
    thumbnail_url: Optional[str],
    facts: EntityFacts,
) -> Candidate:
    """
    Combine the chosen article with its Wikidata facts.
    Structured values outrank anything derived from prose or title shape.
    """
    population = facts.population
    if population is None:
        population = parse_population(extract_text)

    scientific_name = facts.scientific_name
    if scientific_name is None and looks_binomial(title):
        scientific_name = title

    return Candidate(
        scientific_name=scientific_name,
        common_name=title,
        description=extract_text,
        image_url=thumbnail_url,
        population=population,
    )


def resolve(query: str, *, client: Optional[WikiClient] = None) -> Resolution:
    """
    Turn a free-text species name into a best-effort Candidate.

    Never raises for source problems: the returned Resolution carries a
    Status, and a found article with missing fields is still a success.
    """
    query = (query or "").strip()
    if not query:
        return Resolution(candidate=Candidate(), status=Status.EMPTY_QUERY, query=query)

    client = client or WikiClient()

    try:
        hit, summary = choose_article(client, query)
    except NoArticleFound:
        status = Status.NO_ARTICLE_FOUND
    except (SearchUnavailable, ParseFailure) as exc:
        logger.warning("Search failed for %r: %s", query, exc)
        status = Status.SEARCH_UNAVAILABLE
    except SummaryUnavailable as exc:
        logger.warning("No summary available for %r: %s", query, exc)
        status = Status.SUMMARY_UNAVAILABLE
    else:
        facts = lookup_entity_facts(client, summary.title, hit.page_id, query)
        candidate = merge_candidate(
            summary.title, summary.extract_text, summary.thumbnail_url, facts
        )
        status = Status.COMPLETE if candidate.is_complete else Status.PARTIAL
        logger.info("Resolved %r -> %r (%s)", query, summary.title, status.value)
        return Resolution(candidate=candidate, status=status, query=query)

    logger.info("Could not resolve %r (%s)", query, status.value)
    return Resolution(candidate=Candidate(), status=status, query=query)


class ResolutionSession:
    """
    Issues resolver runs on behalf of one caller (e.g. one form).

    Every Resolution is stamped with an increasing token; when runs overlap,
    is_current() tells the caller whether a result has been superseded and
    should be discarded instead of written into its state.
    """

    def __init__(self, client: Optional[WikiClient] = None) -> None:
        self._client = client
        self._tokens = itertools.count(1)
        self._latest = 0

    def resolve(self, query: str) -> Resolution:
        token = next(self._tokens)
        self._latest = token
        result = resolve(query, client=self._client)
        return replace(result, token=token)

    def is_current(self, resolution: Resolution) -> bool:
        return resolution.token == self._latest
