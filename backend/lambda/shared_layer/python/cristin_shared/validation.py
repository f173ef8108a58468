"""cristin_shared.validation — Query/path parameter validation.

Pure functions over the raw ``queryStringParameters`` / ``pathParameters``
dicts of an API Gateway event. Failures raise ``ValidationError`` with the
message for the offending parameter; nothing is silently corrected except
filling in defaults for absent optional parameters.
"""

from __future__ import annotations

import re
from typing import Mapping, Optional

from .errors import (
    ERROR_MESSAGE_INVALID_PATH_PARAMETER_FOR_ID,
    ERROR_MESSAGE_LANGUAGE_INVALID,
    ERROR_MESSAGE_NUMBER_OF_RESULTS_VALUE_INVALID,
    ERROR_MESSAGE_PAGE_VALUE_INVALID,
    ERROR_MESSAGE_TITLE_MISSING_OR_HAS_ILLEGAL_CHARACTERS,
    ValidationError,
)
from .models import LookupRequest, SearchRequest

VALID_LANGUAGE_CODES = ("nb", "en")
DEFAULT_LANGUAGE_CODE = "nb"
FIRST_PAGE = 1
DEFAULT_NUMBER_OF_RESULTS = 5

TITLE = "title"
LANGUAGE = "language"
PAGE = "page"
NUMBER_OF_RESULTS = "results"
PER_PAGE = "per_page"
ID = "id"

_EXTRA_TITLE_CHARACTERS = frozenset("-,.")
_POSITIVE_INTEGER_RE = re.compile(r"^[0-9]+$")


def _is_valid_title_character(char: str) -> bool:
    return char.isspace() or char.isalpha() or char.isdecimal() or char in _EXTRA_TITLE_CHARACTERS


def is_valid_title(title: Optional[str]) -> bool:
    if not title:
        return False
    return all(_is_valid_title_character(char) for char in title)


def _parse_positive_int(raw: str) -> Optional[int]:
    raw = raw.strip()
    if not _POSITIVE_INTEGER_RE.match(raw):
        return None
    value = int(raw)
    return value if value > 0 else None


def _valid_language(params: Mapping[str, str]) -> str:
    language = params.get(LANGUAGE)
    if language is None:
        return DEFAULT_LANGUAGE_CODE
    if language not in VALID_LANGUAGE_CODES:
        raise ValidationError(ERROR_MESSAGE_LANGUAGE_INVALID)
    return language


def _valid_positive_int(raw: Optional[str], default: int, message: str) -> int:
    if raw is None:
        return default
    value = _parse_positive_int(raw)
    if value is None:
        raise ValidationError(message)
    return value


def validate_search(query_params: Optional[Mapping[str, str]]) -> SearchRequest:
    params = query_params or {}

    title = params.get(TITLE)
    if not is_valid_title(title):
        raise ValidationError(ERROR_MESSAGE_TITLE_MISSING_OR_HAS_ILLEGAL_CHARACTERS)

    language = _valid_language(params)
    page = _valid_positive_int(params.get(PAGE), FIRST_PAGE, ERROR_MESSAGE_PAGE_VALUE_INVALID)

    raw_results = params.get(NUMBER_OF_RESULTS)
    if raw_results is None:
        raw_results = params.get(PER_PAGE)
    results = _valid_positive_int(
        raw_results, DEFAULT_NUMBER_OF_RESULTS, ERROR_MESSAGE_NUMBER_OF_RESULTS_VALUE_INVALID
    )

    return SearchRequest(title=title, language=language, page=page, results_per_page=results)


def validate_lookup(
    path_params: Optional[Mapping[str, str]],
    query_params: Optional[Mapping[str, str]] = None,
) -> LookupRequest:
    raw_id = (path_params or {}).get(ID)
    project_id = _parse_positive_int(raw_id) if raw_id is not None else None
    if project_id is None:
        raise ValidationError(ERROR_MESSAGE_INVALID_PATH_PARAMETER_FOR_ID)
    return LookupRequest(id=project_id, language=_valid_language(query_params or {}))
