"""Rule-based named entity extraction.

Runs a blank spaCy English pipeline with an ``entity_ruler`` only; no
statistical model is loaded. Patterns cover five categories:

- people: honorific + capitalised name, or a known given name + surname
- places: gazetteer of countries, US states and large cities, plus
  "<Name> City/County/..." suffix forms
- organizations: capitalised words ending in a corporate suffix
- dates: month/weekday names, relative days, years, numeric dates
- values: currency symbol + number, or number + currency word

Overlapping matches resolve to the longest span. Results keep text order.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional

import spacy
from spacy.language import Language

from data_enricher.core.errors import AnalyzerError
from data_enricher.core.models import EntitiesResult

logger = logging.getLogger(__name__)

LABEL_TO_CATEGORY = {
    "PERSON": "people",
    "GPE": "places",
    "ORG": "organizations",
    "DATE": "dates",
    "MONEY": "values",
}

HONORIFICS = ["mr", "mr.", "mrs", "mrs.", "ms", "ms.", "dr", "dr.", "prof", "prof.", "sir", "madam", "miss", "lord", "lady"]

GIVEN_NAMES = [
    "James", "John", "Robert", "Michael", "William", "David", "Richard", "Joseph", "Thomas", "Charles",
    "Mary", "Patricia", "Jennifer", "Linda", "Elizabeth", "Barbara", "Susan", "Jessica", "Sarah", "Karen",
    "Daniel", "Matthew", "Anthony", "Mark", "Paul", "Steven", "Andrew", "Joshua", "Kevin", "Brian",
    "Emily", "Emma", "Olivia", "Sophia", "Anna", "Laura", "Maria", "Julia", "Alice", "Grace",
    "Steve", "Bill", "Tim", "Elon", "Jeff", "Satya", "Sundar", "Larry", "Sergey", "Ada",
]

ORG_SUFFIXES = [
    "inc", "inc.", "corp", "corp.", "corporation", "co", "co.", "company", "ltd", "ltd.", "limited",
    "llc", "plc", "gmbh", "ag", "sa", "group", "holdings", "foundation", "institute", "university",
    "bank", "association", "agency", "labs", "technologies",
]

PLACE_SUFFIXES = ["City", "County", "Province", "Island", "Islands", "Valley", "Bay", "Beach"]

PLACES = [
    "United States", "United Kingdom", "Canada", "Mexico", "Brazil", "Argentina", "France", "Germany",
    "Spain", "Portugal", "Italy", "Netherlands", "Belgium", "Switzerland", "Austria", "Sweden", "Norway",
    "Denmark", "Finland", "Poland", "Ireland", "Russia", "China", "Japan", "India", "Australia",
    "New Zealand", "South Africa", "Egypt", "Nigeria", "Kenya", "Turkey", "Israel", "South Korea",
    "Indonesia", "Singapore", "America", "Europe", "Asia", "Africa", "USA", "UK", "EU",
    "California", "Texas", "Florida", "Washington", "Oregon", "Nevada", "Arizona", "Colorado", "Illinois",
    "Ohio", "Michigan", "Georgia", "Virginia", "Massachusetts", "New Jersey", "Pennsylvania",
    "New York", "Los Angeles", "San Francisco", "Seattle", "Chicago", "Boston", "Houston", "Miami",
    "Atlanta", "Denver", "Austin", "Dallas", "London", "Paris", "Berlin", "Madrid", "Lisbon", "Rome",
    "Amsterdam", "Dublin", "Vienna", "Zurich", "Stockholm", "Oslo", "Moscow", "Tokyo", "Beijing",
    "Shanghai", "Hong Kong", "Delhi", "Mumbai", "Bangalore", "Sydney", "Melbourne", "Toronto",
    "Vancouver", "Montreal", "Mexico City", "Sao Paulo", "Buenos Aires", "Cairo", "Dubai", "Seoul",
    "Cupertino", "Silicon Valley",
]

MONTHS = [
    "January", "February", "March", "April", "May", "June", "July", "August", "September",
    "October", "November", "December", "Jan", "Feb", "Mar", "Apr", "Jun", "Jul", "Aug", "Sep",
    "Sept", "Oct", "Nov", "Dec",
]
WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
RELATIVE_DAYS = ["today", "tomorrow", "yesterday", "tonight"]

CURRENCY_WORDS = [
    "dollar", "dollars", "usd", "euro", "euros", "eur", "pound", "pounds", "gbp", "yen", "cent",
    "cents", "bucks", "rupees", "inr",
]
MAGNITUDES = ["thousand", "million", "billion", "trillion", "k", "m", "bn"]


def build_patterns() -> List[Dict[str, Any]]:
    """Return the entity_ruler pattern list."""
    patterns: List[Dict[str, Any]] = []

    # people
    patterns.append({"label": "PERSON", "pattern": [{"LOWER": {"IN": HONORIFICS}}, {"IS_TITLE": True, "OP": "+"}]})
    patterns.append({"label": "PERSON", "pattern": [{"TEXT": {"IN": GIVEN_NAMES}}, {"IS_TITLE": True, "OP": "?"}]})

    # places
    patterns.extend({"label": "GPE", "pattern": name} for name in PLACES)
    patterns.append({"label": "GPE", "pattern": [{"IS_TITLE": True, "OP": "+"}, {"TEXT": {"IN": PLACE_SUFFIXES}}]})

    # organizations
    patterns.append({"label": "ORG", "pattern": [{"IS_TITLE": True, "OP": "+"}, {"LOWER": {"IN": ORG_SUFFIXES}}]})
    patterns.append({"label": "ORG", "pattern": [{"LOWER": {"IN": ["university", "bank"]}}, {"LOWER": "of"}, {"IS_TITLE": True, "OP": "+"}]})

    # dates
    patterns.append({"label": "DATE", "pattern": [
        {"TEXT": {"IN": MONTHS}},
        {"TEXT": {"REGEX": r"^\d{1,2}(st|nd|rd|th)?$"}, "OP": "?"},
        {"ORTH": ",", "OP": "?"},
        {"TEXT": {"REGEX": r"^(1[5-9]|20)\d{2}$"}, "OP": "?"},
    ]})
    patterns.append({"label": "DATE", "pattern": [{"TEXT": {"REGEX": r"^\d{1,2}(st|nd|rd|th)?$"}}, {"LOWER": "of", "OP": "?"}, {"TEXT": {"IN": MONTHS}}]})
    patterns.append({"label": "DATE", "pattern": [{"TEXT": {"IN": WEEKDAYS}}]})
    patterns.append({"label": "DATE", "pattern": [{"LOWER": {"IN": RELATIVE_DAYS}}]})
    patterns.append({"label": "DATE", "pattern": [{"LOWER": {"IN": ["last", "next", "this"]}}, {"LOWER": {"IN": ["week", "month", "year", "decade", "century"]}}]})
    patterns.append({"label": "DATE", "pattern": [{"TEXT": {"REGEX": r"^(1[5-9]|20)\d{2}s?$"}}]})
    patterns.append({"label": "DATE", "pattern": [{"TEXT": {"REGEX": r"^\d{1,2}[/.]\d{1,2}[/.]\d{2,4}$"}}]})
    # ISO dates: the tokenizer splits hyphens between digits
    patterns.append({"label": "DATE", "pattern": [{"SHAPE": "dddd"}, {"ORTH": "-"}, {"SHAPE": "dd"}, {"ORTH": "-"}, {"SHAPE": "dd"}]})

    # values
    patterns.append({"label": "MONEY", "pattern": [
        {"IS_CURRENCY": True},
        {"LIKE_NUM": True},
        {"LOWER": {"IN": MAGNITUDES}, "OP": "?"},
    ]})
    patterns.append({"label": "MONEY", "pattern": [
        {"LIKE_NUM": True},
        {"LOWER": {"IN": MAGNITUDES}, "OP": "?"},
        {"LOWER": {"IN": CURRENCY_WORDS}},
    ]})
    return patterns


class EntityExtractor:
    """Rule-based extractor for people, places, organizations, dates and values.

    The spaCy pipeline is built lazily on first use and shared by all calls.
    """

    def __init__(self, language: str = "en", extra_patterns: Optional[List[Dict[str, Any]]] = None):
        self.language = language
        self._extra_patterns = list(extra_patterns or [])
        self._nlp: Optional[Language] = None
        self._lock = threading.Lock()

    def _ensure_pipeline(self) -> Language:
        if self._nlp is not None:
            return self._nlp
        with self._lock:
            if self._nlp is None:
                try:
                    nlp = spacy.blank(self.language)
                    ruler = nlp.add_pipe("entity_ruler")
                    ruler.add_patterns(build_patterns() + self._extra_patterns)
                except (ImportError, KeyError, ValueError) as e:
                    raise AnalyzerError("entities", f"could not build spaCy pipeline for {self.language!r}: {e}") from e
                logger.info("Built rule-based entity pipeline (%d patterns)", len(ruler.patterns))
                self._nlp = nlp
        return self._nlp

    def analyze(self, text: str) -> EntitiesResult:
        doc = self._ensure_pipeline()(text or "")
        buckets: Dict[str, List[str]] = {name: [] for name in LABEL_TO_CATEGORY.values()}
        for ent in doc.ents:
            category = LABEL_TO_CATEGORY.get(ent.label_)
            if category is not None:
                buckets[category].append(ent.text)
        return EntitiesResult(**buckets)


__all__ = ["EntityExtractor", "build_patterns", "LABEL_TO_CATEGORY"]
