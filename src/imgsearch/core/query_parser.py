"""
Rule-based parser turning a free-text photo query into a FilterPredicate.

The parser is an ordered list of passes. Each pass is a pure function that
receives the query text and the predicate built so far, and returns a new
predicate. A pass that finds nothing returns its input unchanged, so later
passes win where they overlap (month over year, relative phrase over both).

    >>> parse_query("photos from march 2023").to_dict()
    {'dateFrom': '2023-03-01T00:00:00+00:00', 'dateTo': '2023-04-01T00:00:00+00:00', 'descriptionSubstring': 'photos march 2023'}
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from functools import lru_cache

from ..logging_config import get_logger
from ..models.filters import FilterPredicate
from ..utils.datetime_utils import get_current_timestamp, year_window

logger = get_logger(__name__)

MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

TAG_VOCABULARY = (
    "beach",
    "mountain",
    "city",
    "restaurant",
    "museum",
    "park",
    "sunset",
    "sunrise",
    "nature",
    "urban",
    "food",
    "selfie",
    "group",
    "landscape",
    "architecture",
    "ocean",
    "forest",
)

STOPWORDS = ("in", "at", "from", "to", "with", "my", "the", "and", "or", "but")

# Priority order, not position in the query
LOCATION_PREPOSITIONS = ("in", "at", "from", "to", "visit", "trip to", "vacation in")

CONNECTOR_WORDS = ("with", "in", "on", "during")

# Words that can make up a date phrase; a location capture made only of these is discarded
RELATIVE_DATE_WORDS = ("last", "this", "next", "year")


@dataclass(frozen=True)
class ParserConfig:
    """Vocabulary and word lists driving the parser."""

    tag_vocabulary: tuple[str, ...] = TAG_VOCABULARY
    stopwords: tuple[str, ...] = STOPWORDS
    location_prepositions: tuple[str, ...] = LOCATION_PREPOSITIONS
    connector_words: tuple[str, ...] = CONNECTOR_WORDS
    month_names: tuple[str, ...] = MONTH_NAMES
    relative_date_words: tuple[str, ...] = RELATIVE_DATE_WORDS
    min_description_length: int = 3


DEFAULT_PARSER_CONFIG = ParserConfig()

YEAR_PATTERN = re.compile(r"\b(20\d{2})\b")
PERSON_PATTERN = re.compile(r"\bwith\s+my\s+(\w+)", re.IGNORECASE)
WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclass(frozen=True)
class _CompiledPatterns:
    month: re.Pattern[str]
    locations: tuple[re.Pattern[str], ...]
    stopwords: re.Pattern[str]


@dataclass(frozen=True)
class QueryText:
    """The query as seen by every pass."""

    original: str
    lowered: str
    current_year: int
    config: ParserConfig

    @property
    def patterns(self) -> _CompiledPatterns:
        return _compile_patterns(self.config)


ParsePass = Callable[[QueryText, FilterPredicate], FilterPredicate]


def _phrase_pattern(phrase: str) -> str:
    return r"\s+".join(re.escape(word) for word in phrase.split())


@lru_cache(maxsize=16)
def _compile_patterns(config: ParserConfig) -> _CompiledPatterns:
    months = "|".join(re.escape(name) for name in config.month_names)
    connectors = "|".join(re.escape(word) for word in config.connector_words)
    stopwords = "|".join(re.escape(word) for word in config.stopwords)

    # Capture ends before a connector word, punctuation or the end of the query
    location_patterns = tuple(
        re.compile(rf"\b{_phrase_pattern(preposition)}\s+([\w\s]+?)(?=\s+(?:{connectors})\b|\s*[^\w\s]|\s*$)")
        for preposition in config.location_prepositions
    )

    return _CompiledPatterns(
        month=re.compile(rf"\b({months})\b"),
        locations=location_patterns,
        stopwords=re.compile(rf"\b(?:{stopwords})\b", re.IGNORECASE),
    )


def _explicit_year(text: QueryText) -> int | None:
    match = YEAR_PATTERN.search(text.lowered)
    return int(match.group(1)) if match else None


def _month_window(year: int, month: int) -> tuple[datetime, datetime]:
    start = datetime(year, month, 1, tzinfo=UTC)
    if month == 12:
        return start, datetime(year + 1, 1, 1, tzinfo=UTC)
    return start, datetime(year, month + 1, 1, tzinfo=UTC)


def apply_explicit_year(text: QueryText, predicate: FilterPredicate) -> FilterPredicate:
    """A ``20xx`` token selects that whole year."""
    year = _explicit_year(text)
    if year is None:
        return predicate

    date_from, date_to = year_window(year)
    return replace(predicate, date_from=date_from, date_to=date_to)


def apply_month_name(text: QueryText, predicate: FilterPredicate) -> FilterPredicate:
    """A month name narrows to that month of the explicit year, or of the current year."""
    match = text.patterns.month.search(text.lowered)
    if match is None:
        return predicate

    month = text.config.month_names.index(match.group(1)) + 1
    year = _explicit_year(text) or text.current_year

    date_from, date_to = _month_window(year, month)
    return replace(predicate, date_from=date_from, date_to=date_to)


def apply_relative_phrase(text: QueryText, predicate: FilterPredicate) -> FilterPredicate:
    """``last year`` / ``this year`` replace any date window found so far."""
    if "last year" in text.lowered:
        year = text.current_year - 1
    elif "this year" in text.lowered:
        year = text.current_year
    else:
        return predicate

    date_from, date_to = year_window(year)
    return replace(predicate, date_from=date_from, date_to=date_to)


def _is_date_phrase(phrase: str, config: ParserConfig) -> bool:
    date_words = set(config.month_names) | set(config.relative_date_words)
    return all(word in date_words or YEAR_PATTERN.fullmatch(word) for word in phrase.split())


def apply_location_phrase(text: QueryText, predicate: FilterPredicate) -> FilterPredicate:
    """The phrase after the highest-priority preposition that yields one."""
    for pattern in text.patterns.locations:
        for match in pattern.finditer(text.lowered):
            phrase = match.group(1).strip()
            if phrase and not _is_date_phrase(phrase, text.config):
                return replace(predicate, location_substring=phrase)

    return predicate


def apply_person_reference(text: QueryText, predicate: FilterPredicate) -> FilterPredicate:
    """``with my <word>`` keeps ``<word>`` as typed, for the caller to resolve."""
    match = PERSON_PATTERN.search(text.original)
    if match is None:
        return predicate
    return replace(predicate, person_reference=match.group(1))


def apply_tags(text: QueryText, predicate: FilterPredicate) -> FilterPredicate:
    """Vocabulary words contained anywhere in the query, in vocabulary order."""
    tags = tuple(tag for tag in text.config.tag_vocabulary if tag.lower() in text.lowered)
    if not tags:
        return predicate
    return replace(predicate, tags=tags)


def apply_description(text: QueryText, predicate: FilterPredicate) -> FilterPredicate:
    """Whatever is left once location, tags and stopwords are removed."""
    remainder = text.original

    removed = [predicate.location_substring] if predicate.location_substring else []
    removed.extend(predicate.tags)
    for fragment in removed:
        remainder = re.sub(re.escape(fragment), "", remainder, flags=re.IGNORECASE)

    remainder = text.patterns.stopwords.sub("", remainder)
    remainder = WHITESPACE_PATTERN.sub(" ", remainder).strip()

    if len(remainder) < text.config.min_description_length:
        return predicate
    return replace(predicate, description_substring=remainder)


PARSE_PASSES: tuple[ParsePass, ...] = (
    apply_explicit_year,
    apply_month_name,
    apply_relative_phrase,
    apply_location_phrase,
    apply_person_reference,
    apply_tags,
    apply_description,
)


def parse_query(
    query: str,
    config: ParserConfig = DEFAULT_PARSER_CONFIG,
    today: date | None = None,
) -> FilterPredicate:
    """
    Parse a free-text query into a FilterPredicate.

    Never raises: text that matches nothing yields an empty predicate.

    Args:
        query: Raw search phrase as typed by the user
        config: Word lists to parse with
        today: Reference date for "this year", "last year" and bare month names
               (defaults to the current UTC date)

    Returns:
        FilterPredicate with every field the query supports
    """
    if not isinstance(query, str) or not query.strip():
        return FilterPredicate()

    current_year = (today or get_current_timestamp()).year
    text = QueryText(original=query, lowered=query.lower(), current_year=current_year, config=config)

    predicate = FilterPredicate()
    for parse_pass in PARSE_PASSES:
        predicate = parse_pass(text, predicate)

    logger.debug("query_parsed", query=query, filters=predicate.to_dict())
    return predicate
