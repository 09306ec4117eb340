# speciesfill/search.py
from __future__ import annotations
import logging
from typing import Any, Optional

from speciesfill import config
from speciesfill.datatypes import ArticleSummary, SearchHit
from speciesfill.errors import (
    NoArticleFound,
    ParseFailure,
    SearchUnavailable,
    SourceUnavailable,
    SummaryUnavailable,
)
from speciesfill.wiki_client import WikiClient

logger = logging.getLogger(__name__)

SEARCH_SOURCE = "wikipedia.search"
SUMMARY_SOURCE = "wikipedia.summary"


def _parse_search(data: dict[str, Any]) -> list[SearchHit]:
    """
    Validate an action=query&list=search body: {"query": {"search": [{title, pageid}, ...]}}
    """
    query = data.get("query")
    if not isinstance(query, dict):
        raise ParseFailure(SEARCH_SOURCE, "missing 'query' object")
    results = query.get("search")
    if not isinstance(results, list):
        raise ParseFailure(SEARCH_SOURCE, "missing 'query.search' list")

    hits: list[SearchHit] = []
    for item in results:
        if not isinstance(item, dict):
            raise ParseFailure(SEARCH_SOURCE, "search result is not an object")
        title = item.get("title")
        if not isinstance(title, str) or not title:
            raise ParseFailure(SEARCH_SOURCE, "search result without a title")
        page_id = item.get("pageid")
        hits.append(
            SearchHit(
                title=title,
                page_id=page_id if isinstance(page_id, int) and page_id > 0 else None,
            )
        )
    return hits


def search_pages(
    client: WikiClient, query: str, *, limit: int = config.DEFAULT_SEARCH_LIMIT
) -> list[SearchHit]:
    """
    Full-text search for a free-form query, in relevance order.

    - 'limit' is clamped to [1, 50].
    - Raises SearchUnavailable when the call fails, ParseFailure when the
      body is not a search result list.
    """
    limit = max(1, min(50, limit))
    params = {
        "action": "query",
        "list": "search",
        "srsearch": query,
        "srlimit": str(limit),
        "format": "json",
    }
    try:
        data = client.get_json(client.wikipedia_api, params, source=SEARCH_SOURCE)
    except SourceUnavailable as exc:
        raise SearchUnavailable(exc.detail) from exc
    return _parse_search(data)


def _parse_summary(data: dict[str, Any], title: str) -> ArticleSummary:
    extract = data.get("extract")
    if extract is not None and not isinstance(extract, str):
        raise ParseFailure(SUMMARY_SOURCE, "'extract' is not a string")

    thumb_url: Optional[str] = None
    thumb = data.get("thumbnail") or {}
    if isinstance(thumb, dict):
        source = thumb.get("source")
        if isinstance(source, str) and source:
            thumb_url = source if not source.startswith("//") else f"https:{source}"

    # "titles.normalized" is the resolved page title with spaces; fall back to "title"
    titles = data.get("titles") if isinstance(data.get("titles"), dict) else {}
    resolved = titles.get("normalized") or data.get("title")
    if not isinstance(resolved, str) or not resolved.strip():
        resolved = title

    return ArticleSummary(
        title=resolved.replace("_", " ").strip(),
        extract_text=(extract.strip() or None) if extract else None,
        thumbnail_url=thumb_url,
        is_disambiguation=data.get("type") == "disambiguation",
    )


def fetch_summary(client: WikiClient, title: str) -> ArticleSummary:
    """
    Fetch the REST summary of one article.
    Raises SourceUnavailable or ParseFailure.
    """
    data = client.get_json(client.summary_url(title), source=SUMMARY_SOURCE)
    return _parse_summary(data, title)


def choose_article(
    client: WikiClient,
    query: str,
    *,
    candidates: int = config.SUMMARY_CANDIDATES,
) -> tuple[SearchHit, ArticleSummary]:
    """
    Search, then pick the first top hit whose summary is not a disambiguation page.

    When every top hit is a disambiguation page (or unusable), the first hit's
    summary is returned whatever its type so the caller still gets something.
    Raises NoArticleFound, SearchUnavailable, ParseFailure or SummaryUnavailable.
    """
    hits = search_pages(client, query)
    if not hits:
        raise NoArticleFound(query)

    fetched: dict[int, ArticleSummary] = {}
    for idx, hit in enumerate(hits[:candidates]):
        try:
            summary = fetch_summary(client, hit.title)
        except (SourceUnavailable, ParseFailure) as exc:
            logger.warning("Skipping summary for %r: %s", hit.title, exc)
            continue
        fetched[idx] = summary
        if summary.is_disambiguation:
            logger.debug("Skipping disambiguation page %r", hit.title)
            continue
        logger.info("Chose article %r for query %r", hit.title, query)
        return hit, summary

    first = hits[0]
    if 0 in fetched:
        logger.info("No specific article in top hits; falling back to %r", first.title)
        return first, fetched[0]

    try:
        summary = fetch_summary(client, first.title)
    except (SourceUnavailable, ParseFailure) as exc:
        raise SummaryUnavailable(str(exc)) from exc
    logger.info("No specific article in top hits; falling back to %r", first.title)
    return first, summary
