# speciesfill/fallback.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Optional, TypeVar

from speciesfill.errors import ParseFailure, SourceUnavailable

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Step(Generic[T]):
    """
    One fallible attempt in a fallback chain.
    `run` returns a value, or None when it found nothing.
    """

    name: str
    run: Callable[[], Optional[T]]


def first_success(steps: Iterable[Step[T]]) -> Optional[T]:
    """
    Evaluate steps left to right and return the first non-None result.

    Source and parse failures count as "found nothing" and move on to the
    next step; any other exception propagates.
    """
    for step in steps:
        try:
            value = step.run()
        except (SourceUnavailable, ParseFailure) as exc:
            logger.warning("Step %s failed: %s", step.name, exc)
            continue
        if value is not None:
            logger.debug("Step %s succeeded", step.name)
            return value
        logger.debug("Step %s found nothing", step.name)
    return None
