# speciesfill/errors.py
from __future__ import annotations


class SpeciesFillError(Exception):
    """Base class for every error raised inside the resolver."""


class SourceUnavailable(SpeciesFillError):
    """
    An outbound call failed: network error or non-success HTTP status.
    `source` names the endpoint family (e.g. "wikipedia.search").
    """

    def __init__(self, source: str, detail: str = "") -> None:
        self.source = source
        self.detail = detail
        super().__init__(f"{source} unavailable: {detail}" if detail else f"{source} unavailable")


class SearchUnavailable(SourceUnavailable):
    def __init__(self, detail: str = "") -> None:
        super().__init__("wikipedia.search", detail)


class SummaryUnavailable(SourceUnavailable):
    def __init__(self, detail: str = "") -> None:
        super().__init__("wikipedia.summary", detail)


class ParseFailure(SpeciesFillError):
    """A response body did not have the expected shape."""

    def __init__(self, source: str, detail: str = "") -> None:
        self.source = source
        self.detail = detail
        super().__init__(f"unexpected payload from {source}: {detail}")


class NoArticleFound(SpeciesFillError):
    """The encyclopedia search returned no hits at all."""

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__(f"no article found for {query!r}")
