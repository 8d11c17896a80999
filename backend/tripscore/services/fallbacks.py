"""
Last-resort location guesses for legacy records.

These are only consulted when a visit carries no usable continent or country
field. Both heuristics are approximate: the bounding boxes overlap (the Middle
East and North Africa fall into several of them) and keyword matching only
knows a handful of names.
"""
import re
from typing import List, Optional, Tuple

from .clustering import is_valid_coordinate
from .normalizer import (
    AFRICA,
    ANTARCTICA,
    ASIA,
    AUSTRALIA,
    EUROPE,
    NORTH_AMERICA,
    SOUTH_AMERICA,
    UNKNOWN_CONTINENT,
)

# (continent, min_lat, max_lat, min_lng, max_lng), checked in order
CONTINENT_BOUNDING_BOXES: List[Tuple[str, float, float, float, float]] = [
    (ASIA, -10, 80, 25, 180),
    (EUROPE, 35, 70, -10, 40),
    (NORTH_AMERICA, 5, 85, -170, -50),
    (SOUTH_AMERICA, -60, 15, -85, -30),
    (AFRICA, -40, 40, -20, 50),
    (AUSTRALIA, -50, -10, 110, 180),
]

CONTINENT_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    (ASIA, ("asia", "india", "china", "japan", "thailand", "singapore", "malaysia", "indonesia")),
    (EUROPE, ("europe", "france", "germany", "italy", "spain", "uk", "united kingdom", "england", "london")),
    (NORTH_AMERICA, ("north america", "united states", "usa", "canada", "mexico", "new york",
                     "california", "texas")),
    (SOUTH_AMERICA, ("south america", "brazil", "argentina", "chile", "peru", "colombia")),
    (AFRICA, ("africa", "egypt", "nigeria", "kenya", "morocco")),
    (AUSTRALIA, ("australia", "new zealand", "fiji", "papua", "samoa", "tonga")),
    (ANTARCTICA, ("antarctica",)),
]

COUNTRY_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("Australia", ("australia",)),
    ("New Zealand", ("new zealand",)),
    ("Fiji", ("fiji",)),
    ("Papua New Guinea", ("papua new guinea",)),
    ("Samoa", ("samoa",)),
    ("Tonga", ("tonga",)),
    ("India", ("india",)),
    ("China", ("china",)),
    ("Japan", ("japan",)),
    ("Thailand", ("thailand",)),
    ("Singapore", ("singapore",)),
    ("Malaysia", ("malaysia",)),
    ("Indonesia", ("indonesia",)),
    ("France", ("france",)),
    ("Germany", ("germany",)),
    ("Italy", ("italy",)),
    ("Spain", ("spain",)),
    ("United Kingdom", ("united kingdom", "uk", "england")),
    ("United States", ("united states", "usa")),
    ("Canada", ("canada",)),
    ("Mexico", ("mexico",)),
    ("Brazil", ("brazil",)),
    ("Argentina", ("argentina",)),
    ("Chile", ("chile",)),
    ("Peru", ("peru",)),
    ("Colombia", ("colombia",)),
    ("Egypt", ("egypt",)),
    ("South Africa", ("south africa",)),
    ("Nigeria", ("nigeria",)),
    ("Kenya", ("kenya",)),
    ("Morocco", ("morocco",)),
]


def _contains_word(text: str, phrase: str) -> bool:
    return re.search(rf"\b{re.escape(phrase)}\b", text) is not None


def continent_from_coordinates(lat, lng) -> str:
    """Rough continent guess from a bounding box table."""
    if not is_valid_coordinate(lat, lng):
        return UNKNOWN_CONTINENT
    for continent, min_lat, max_lat, min_lng, max_lng in CONTINENT_BOUNDING_BOXES:
        if min_lat <= lat <= max_lat and min_lng <= lng <= max_lng:
            return continent
    if lat <= -60:
        return ANTARCTICA
    return UNKNOWN_CONTINENT


def continent_from_address(address: Optional[str]) -> str:
    """Keyword match over a free-text address."""
    if not address:
        return UNKNOWN_CONTINENT
    text = address.lower()
    for continent, keywords in CONTINENT_KEYWORDS:
        if any(_contains_word(text, keyword) for keyword in keywords):
            return continent
    return UNKNOWN_CONTINENT


def country_from_address(address: Optional[str]) -> Optional[str]:
    """Keyword match over a free-text address, ``None`` when nothing matches."""
    if not address:
        return None
    text = address.lower()
    # Longest keywords first
    for country, keywords in sorted(COUNTRY_KEYWORDS, key=lambda item: -max(len(k) for k in item[1])):
        if any(_contains_word(text, keyword) for keyword in keywords):
            return country
    return None
