# speciesfill/population.py
from __future__ import annotations
import math
import re
from typing import Optional

# approximation qualifiers that may precede the number ("about 3,200", "~500")
_QUAL = (
    r"(?:(?:about|around|approximately|approx\.|roughly|nearly|almost|just\s+over|over|under"
    r"|more\s+than|fewer\s+than|less\s+than|up\s+to|at\s+least|some|an\s+estimated|~)\s*)?"
)
_NUM = r"(?P<num>\d[\d,]*(?:\.\d+)?)"
# a bare "m" only counts when attached to the number ("3.5M"), not "500 m above sea level"
_UNIT = r"(?:\s*(?P<unit>thousand|million|billion|bn|k)\b|(?P<attached_unit>m)\b)?"
_VALUE = _QUAL + _NUM + _UNIT

_MULTIPLIERS = {
    None: 1,
    "thousand": 1_000,
    "k": 1_000,
    "million": 1_000_000,
    "m": 1_000_000,
    "billion": 1_000_000_000,
    "bn": 1_000_000_000,
}

# Order matters: the first pattern that yields a positive value wins,
# so the most explicit phrasing comes first.
POPULATION_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        # "estimated population of 1.5 million", "estimated wild population ~2,000"
        r"estimated\s+(?:total\s+|wild\s+|global\s+|world\s+)?population\s+(?:size\s+)?"
        r"(?:of\s+|is\s+|was\s+|at\s+)?" + _VALUE,
        # "population is estimated at 40,000"
        r"population\s+(?:size\s+)?(?:is|was|has\s+been)\s+estimated\s+(?:at\s+|to\s+be\s+)?"
        + _VALUE,
        # "population of about 3,200", "population: 800"
        r"population\s*(?:size\s+)?(?::\s*|of\s+|is\s+|was\s+|at\s+|stands\s+at\s+)?" + _VALUE,
        # "3,200 mature individuals", "only 500 remaining"
        _VALUE
        + r"\s+(?:mature\s+|adult\s+|wild\s+|breeding\s+)?"
        r"(?:individuals|animals|specimens|remaining|remain|left)\b",
    )
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_population(text: Optional[str]) -> Optional[int]:
    """
    Extract a population estimate from free-form prose.

    Patterns in POPULATION_PATTERNS are tried in order; the first one that
    produces a finite, positive number wins. Thousands separators are
    stripped and unit words (thousand/k, million or an attached m, billion/bn) scale the
    value. Returns None when nothing usable is found.
    """
    if not text:
        return None

    for pattern in POPULATION_PATTERNS:
        m = pattern.search(text)
        if m is None:
            continue

        try:
            number = float(m.group("num").replace(",", ""))
        except ValueError:
            continue

        unit = m.group("unit") or m.group("attached_unit")
        scaled = number * _MULTIPLIERS[unit.lower() if unit else None]
        if not math.isfinite(scaled):
            continue
        value = _round_half_up(scaled)
        if value <= 0:
            continue
        return value

    return None
