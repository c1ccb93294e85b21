"""
Natural language filter parsing
===============================

Turns free text such as "single word palindromic strings" or
"strings longer than 10 that contain the third vowel" into a FilterPredicate.

This is a keyword matcher, not a grammar: the text is lowercased, split on
whitespace, and scanned once from left to right. At every position the rules
below are tried in order. A rule that only sets a flag lets the following
rules look at the same token; the first rule that consumes extra tokens
moves the cursor past them.

1. palindrome cue         "palindromic", "palindromes"
2. upper length bound     "shorter than 10"  -> max_length 9
3. lower length bound     "longer than 10"   -> min_length 11
4. exact length           "exactly 5"        -> min_length 5, max_length 5
5. ordinal character      "third vowel"      -> contains_character "i"
6. word count             "single word", "3 words", "3-word"
7. contained character    "containing the letter z", "with z"
"""

import logging
import re
import string
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional

from app.filters import FilterPredicate

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\S+")
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

# numbers in phrases must fit a 32-bit storage column
INT_MIN = -2**31
INT_MAX = 2**31 - 1

VOWELS = ("a", "e", "i", "o", "u")
CONSONANTS = tuple(c for c in string.ascii_lowercase if c not in VOWELS)
LETTERS = tuple(string.ascii_lowercase)

ORDINALS = {
    "first": 1, "1st": 1,
    "second": 2, "2nd": 2,
    "third": 3, "3rd": 3,
    "fourth": 4, "4th": 4,
    "fifth": 5, "5th": 5,
    "sixth": 6, "6th": 6,
    "seventh": 7, "7th": 7,
    "eighth": 8, "8th": 8,
    "ninth": 9, "9th": 9,
    "tenth": 10, "10th": 10,
}

UPPER_BOUND_CUES = ("short", "small", "less")
LOWER_BOUND_CUES = ("long", "big", "great", "more", "large")

# what follows an ordinal -> the alphabet it indexes into
ORDINAL_TARGETS = {
    "vowel": VOWELS,
    "consonant": CONSONANTS,
    "alphabet": LETTERS,
    "letter": LETTERS,
}


class QueryParseError(ValueError):
    pass


class NoConstraintsRecognized(QueryParseError):
    """The scan finished without setting any filter."""


class ConflictingFilters(QueryParseError):
    """The scan produced filters that no string can satisfy."""


@dataclass(frozen=True)
class ParsedQuery:
    original: str
    filters: FilterPredicate


class Tokens:
    """Lowercased whitespace-separated words of a text. Can be iterated repeatedly."""

    def __init__(self, text: str):
        self._text = text.lower()

    def __iter__(self) -> Iterator[str]:
        return (m.group(0) for m in _TOKEN_RE.finditer(self._text))


def tokenize(text: str) -> Tokens:
    return Tokens(text)


def _parse_int(token: str) -> Optional[int]:
    if not _INTEGER_RE.fullmatch(token):
        return None
    n = int(token)
    if not INT_MIN <= n <= INT_MAX:
        return None
    return n


def _parse_ordinal(token: str) -> Optional[int]:
    if token in ORDINALS:
        return ORDINALS[token]
    if token.endswith(("th", "st", "nd", "rd")):
        digits = token.rstrip(string.ascii_letters)
        if digits.isascii() and digits.isdigit():
            return int(digits)
    return None


# Each rule gets the token list, the cursor and the fields collected so far.
# It returns how many tokens after the cursor it consumed (0 for none).
Rule = Callable[[List[str], int, Dict], int]


def _palindrome_rule(tokens, i, found):
    if "palindro" in tokens[i]:
        found["is_palindrome"] = True
    return 0


def _comparison(tokens, i, cues):
    """Value n of "<cue> than n" at the cursor, if present."""
    if not any(cue in tokens[i] for cue in cues):
        return None
    if i + 2 >= len(tokens) or tokens[i + 1] != "than":
        return None
    return _parse_int(tokens[i + 2])


def _upper_bound_rule(tokens, i, found):
    n = _comparison(tokens, i, UPPER_BOUND_CUES)
    if n is None:
        return 0
    found["max_length"] = n - 1
    return 2


def _lower_bound_rule(tokens, i, found):
    n = _comparison(tokens, i, LOWER_BOUND_CUES)
    if n is None:
        return 0
    found["min_length"] = n + 1
    return 2


def _exact_length_rule(tokens, i, found):
    if tokens[i] not in ("exactly", "equals") or i + 1 >= len(tokens):
        return 0
    n = _parse_int(tokens[i + 1])
    if n is None:
        return 0
    found["min_length"] = n
    found["max_length"] = n
    return 1


def _ordinal_character_rule(tokens, i, found):
    if i + 1 >= len(tokens):
        return 0
    position = _parse_ordinal(tokens[i])
    alphabet = ORDINAL_TARGETS.get(tokens[i + 1])
    if position is None or alphabet is None:
        return 0
    if not 1 <= position <= len(alphabet):
        return 0
    found["contains_character"] = alphabet[position - 1]
    return 1


def _word_count_rule(tokens, i, found):
    token = tokens[i]
    following = tokens[i + 1] if i + 1 < len(tokens) else None

    if token == "single" or (token == "one" and following == "word"):
        found["word_count"] = 1
        return 1 if following in ("word", "words") else 0

    n = _parse_int(token)
    if n is not None:
        if following in ("word", "words"):
            found["word_count"] = n
            return 1
        return 0

    if token.endswith("-word"):
        n = _parse_int(token[: -len("-word")])
        if n is not None:
            found["word_count"] = n
    return 0


def _contains_character_rule(tokens, i, found):
    if "contain" not in tokens[i] and tokens[i] != "with":
        return 0

    if i + 2 < len(tokens) and tokens[i + 1] in ("the", "a"):
        # "containing the letter z"; an article without letter/character is not a match
        if tokens[i + 2] in ("letter", "character") and i + 3 < len(tokens):
            found["contains_character"] = tokens[i + 3][0]
            return 3
        return 0

    if i + 1 < len(tokens):
        found["contains_character"] = tokens[i + 1][0]
        return 1
    return 0


RULES: List[Rule] = [
    _palindrome_rule,
    _upper_bound_rule,
    _lower_bound_rule,
    _exact_length_rule,
    _ordinal_character_rule,
    _word_count_rule,
    _contains_character_rule,
]


def parse_natural_language_query(query: str) -> ParsedQuery:
    """
    Parse natural language query into a filter predicate.

    Examples:
    - "all single word palindromic strings" -> {word_count: 1, is_palindrome: true}
    - "strings longer than 10 characters" -> {min_length: 11}
    - "strings containing the letter z" -> {contains_character: "z"}

    Raises NoConstraintsRecognized when nothing in the text matched a rule and
    ConflictingFilters when the resulting length bounds cannot both hold.
    """
    tokens = list(tokenize(query))
    found: Dict = {}

    index = 0
    while index < len(tokens):
        for rule in RULES:
            consumed = rule(tokens, index, found)
            if consumed:
                index += consumed
                break
        index += 1

    if not found:
        raise NoConstraintsRecognized("Unable to parse any valid filters")

    min_length = found.get("min_length")
    max_length = found.get("max_length")
    if min_length is not None and max_length is not None and min_length > max_length:
        raise ConflictingFilters(
            f"Conflicting filters: min_length {min_length} > max_length {max_length}"
        )

    filters = FilterPredicate(**found)
    logger.debug(f"Interpreted {query!r} as {filters.to_dict()}")
    return ParsedQuery(original=query, filters=filters)
