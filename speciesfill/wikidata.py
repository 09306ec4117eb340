# speciesfill/wikidata.py
from __future__ import annotations
import logging
import math
import re
from typing import Any, Optional

from speciesfill import config
from speciesfill.datatypes import EntityFacts
from speciesfill.errors import ParseFailure, SourceUnavailable
from speciesfill.fallback import Step, first_success
from speciesfill.wiki_client import WikiClient

logger = logging.getLogger(__name__)

PAGEPROPS_SOURCE = "wikipedia.pageprops"
ENTITY_SEARCH_SOURCE = "wikidata.search"
ENTITY_SOURCE = "wikidata.entity"

_QID = re.compile(r"Q[1-9]\d*")


def _checked_qid(value: Any, source: str) -> str:
    if not isinstance(value, str) or not _QID.fullmatch(value.strip()):
        raise ParseFailure(source, f"not an entity id: {value!r}")
    return value.strip()


# ---------------------------------------------------------------------------
# Entity id lookups. Each returns None when the source simply has no answer.
# ---------------------------------------------------------------------------


def _entity_id_from_pageprops(data: dict[str, Any]) -> Optional[str]:
    query = data.get("query")
    if not isinstance(query, dict):
        raise ParseFailure(PAGEPROPS_SOURCE, "missing 'query' object")
    pages = query.get("pages")
    # formatversion=1 keys pages by id, formatversion=2 returns a list
    if isinstance(pages, dict):
        pages = list(pages.values())
    if not isinstance(pages, list):
        raise ParseFailure(PAGEPROPS_SOURCE, "missing 'query.pages'")

    for page in pages:
        if not isinstance(page, dict) or "missing" in page or "invalid" in page:
            continue
        props = page.get("pageprops") or {}
        if isinstance(props, dict) and props.get("wikibase_item"):
            return _checked_qid(props["wikibase_item"], PAGEPROPS_SOURCE)
    return None


def entity_id_for_page_id(client: WikiClient, page_id: int) -> Optional[str]:
    params = {
        "action": "query",
        "prop": "pageprops",
        "ppprop": "wikibase_item",
        "pageids": str(page_id),
        "format": "json",
    }
    data = client.get_json(client.wikipedia_api, params, source=PAGEPROPS_SOURCE)
    return _entity_id_from_pageprops(data)


def entity_id_for_title(client: WikiClient, title: str) -> Optional[str]:
    params = {
        "action": "query",
        "prop": "pageprops",
        "ppprop": "wikibase_item",
        "titles": title,
        "redirects": "1",
        "format": "json",
    }
    data = client.get_json(client.wikipedia_api, params, source=PAGEPROPS_SOURCE)
    return _entity_id_from_pageprops(data)


def entity_id_by_search(client: WikiClient, text: str) -> Optional[str]:
    """
    Free-text Wikidata entity search; takes the top hit.
    """
    params = {
        "action": "wbsearchentities",
        "search": text,
        "language": client.language,
        "type": "item",
        "limit": "1",
        "format": "json",
    }
    data = client.get_json(config.WIKIDATA_API, params, source=ENTITY_SEARCH_SOURCE)
    results = data.get("search")
    if not isinstance(results, list):
        raise ParseFailure(ENTITY_SEARCH_SOURCE, "missing 'search' list")
    if not results:
        return None
    top = results[0]
    if not isinstance(top, dict):
        raise ParseFailure(ENTITY_SEARCH_SOURCE, "search result is not an object")
    return _checked_qid(top.get("id"), ENTITY_SEARCH_SOURCE)


def entity_id_steps(
    client: WikiClient, title: str, page_id: Optional[int], query: str
) -> list[Step[str]]:
    """
    The ordered lookup chain: page id, title, search on title, search on query.
    The page id step is left out when the hit carried no page id.
    """
    steps: list[Step[str]] = []
    if page_id is not None:
        steps.append(Step("pageprops:pageid", lambda: entity_id_for_page_id(client, page_id)))
    steps.append(Step("pageprops:title", lambda: entity_id_for_title(client, title)))
    steps.append(Step("search:title", lambda: entity_id_by_search(client, title)))
    steps.append(Step("search:query", lambda: entity_id_by_search(client, query)))
    return steps


def resolve_entity_id(
    client: WikiClient, title: str, page_id: Optional[int], query: str
) -> Optional[str]:
    return first_success(entity_id_steps(client, title, page_id, query))


# ---------------------------------------------------------------------------
# Claims
# ---------------------------------------------------------------------------


def _claim_values(claims: dict[str, Any], prop: str) -> list[Any]:
    raw = claims.get(prop) or []
    if not isinstance(raw, list):
        raise ParseFailure(ENTITY_SOURCE, f"'{prop}' is not a list")
    values: list[Any] = []
    for claim in raw:
        if not isinstance(claim, dict):
            continue
        snak = claim.get("mainsnak") or {}
        datavalue = snak.get("datavalue") if isinstance(snak, dict) else None
        if isinstance(datavalue, dict) and "value" in datavalue:
            values.append(datavalue["value"])
    return values


def taxon_name_from_claims(claims: dict[str, Any]) -> Optional[str]:
    values = _claim_values(claims, config.PROP_TAXON_NAME)
    if not values or not isinstance(values[0], str):
        return None
    return values[0].strip() or None


def parse_amount(amount: Any) -> Optional[int]:
    """
    Wikidata quantity amounts are signed decimal strings ("+12000").
    Only finite, positive values are accepted; rounded half-up.
    """
    if not isinstance(amount, str):
        return None
    text = amount.strip()
    if text.startswith("+"):
        text = text[1:]
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    rounded = int(math.floor(number + 0.5))
    return rounded if rounded > 0 else None


def population_from_claims(claims: dict[str, Any]) -> Optional[int]:
    values = _claim_values(claims, config.PROP_POPULATION)
    if not values or not isinstance(values[0], dict):
        return None
    return parse_amount(values[0].get("amount"))


def fetch_entity_facts(client: WikiClient, entity_id: str) -> EntityFacts:
    """
    Read taxon name (P225) and population (P1082) off one entity.
    Raises SourceUnavailable or ParseFailure.
    """
    params = {
        "action": "wbgetentities",
        "ids": entity_id,
        "props": "claims",
        "format": "json",
    }
    data = client.get_json(config.WIKIDATA_API, params, source=ENTITY_SOURCE)
    entities = data.get("entities")
    if not isinstance(entities, dict):
        raise ParseFailure(ENTITY_SOURCE, "missing 'entities' object")
    entity = entities.get(entity_id)
    if not isinstance(entity, dict) or "missing" in entity:
        return EntityFacts()
    claims = entity.get("claims") or {}
    if not isinstance(claims, dict):
        raise ParseFailure(ENTITY_SOURCE, "'claims' is not an object")

    return EntityFacts(
        scientific_name=taxon_name_from_claims(claims),
        population=population_from_claims(claims),
    )


def lookup_entity_facts(
    client: WikiClient, title: str, page_id: Optional[int], query: str
) -> EntityFacts:
    """
    Resolve the Wikidata entity for the chosen article and read its facts.
    Never raises: structured knowledge is optional, so any failure yields EntityFacts().
    """
    entity_id = resolve_entity_id(client, title, page_id, query)
    if entity_id is None:
        logger.info("No Wikidata entity for %r", title)
        return EntityFacts()

    try:
        facts = fetch_entity_facts(client, entity_id)
    except (SourceUnavailable, ParseFailure) as exc:
        logger.warning("Could not read facts for %s: %s", entity_id, exc)
        return EntityFacts()
    logger.debug("Facts for %s: %s", entity_id, facts)
    return facts
