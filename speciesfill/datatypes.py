# speciesfill/datatypes.py
from __future__ import annotations
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any


@dataclass(frozen=True, slots=True)
class SearchHit:
    """
    A single Wikipedia full-text search result (action=query&list=search)
    """

    title: str
    page_id: int | None = None


@dataclass(frozen=True, slots=True)
class ArticleSummary:
    """
    Descriptive payload of one article (REST /page/summary/{title}).
    """

    title: str
    extract_text: str | None
    thumbnail_url: str | None
    is_disambiguation: bool


@dataclass(frozen=True, slots=True)
class EntityFacts:
    """
    The subset of Wikidata claims we understand.
    EntityFacts() means nothing could be read.
    """

    scientific_name: str | None = None
    population: int | None = None  # always > 0 when set


@dataclass(frozen=True, slots=True)
class Candidate:
    """
    Best-effort species record for one query.
    Every field is optional; nothing is filled unless a source produced it.
    """

    scientific_name: str | None = None
    common_name: str | None = None
    description: str | None = None
    image_url: str | None = None
    population: int | None = None

    @property
    def is_complete(self) -> bool:
        return all(getattr(self, f.name) is not None for f in fields(self))

    def as_form_defaults(self) -> dict[str, Any]:
        """
        Field names used by the species add/edit form.
        """
        return {
            "scientific_name": self.scientific_name,
            "common_name": self.common_name,
            "description": self.description,
            "image": self.image_url,
            "total_population": self.population,
        }


class Status(str, Enum):
    COMPLETE = "complete"
    PARTIAL = "partial"
    EMPTY_QUERY = "empty_query"
    NO_ARTICLE_FOUND = "no_article_found"
    SEARCH_UNAVAILABLE = "search_unavailable"
    SUMMARY_UNAVAILABLE = "summary_unavailable"


_MESSAGES: dict[Status, str] = {
    Status.COMPLETE: "Article found. All fields have been autofilled.",
    Status.PARTIAL: "Article found. Fields have been autofilled.",
    Status.EMPTY_QUERY: "Please enter a species name to search.",
    Status.NO_ARTICLE_FOUND: "No Wikipedia article matches your search term.",
    Status.SEARCH_UNAVAILABLE: "Wikipedia search is unavailable right now. Please try again.",
    Status.SUMMARY_UNAVAILABLE: "Could not retrieve the article summary.",
}


@dataclass(frozen=True, slots=True)
class Resolution:
    """
    Outcome of one resolver run.
    `token` orders runs issued through the same ResolutionSession (0 = unsequenced).
    """

    candidate: Candidate
    status: Status
    query: str
    token: int = 0

    @property
    def ok(self) -> bool:
        return self.status in (Status.COMPLETE, Status.PARTIAL)

    @property
    def message(self) -> str:
        return _MESSAGES[self.status]
