"""Parsing and validation of raw model output.

The completion service is asked for bare JSON but often wraps it in
markdown fences. Output is unwrapped, parsed, and then validated against the
expected schema so shape errors surface here instead of at display time.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, TypeVar, Union

from pydantic import BaseModel, ValidationError

from appeal_copilot.errors import MalformedResponseJSON
from appeal_copilot.models import AppealPackage, ExtractedRecord

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^\s*```(?:json)?[ \t]*\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```\s*$")
_FENCE_LINE = re.compile(r"^[ \t]*```[\w-]*[ \t]*$\n?", re.MULTILINE)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class Ok:
    value: Any


@dataclass(frozen=True)
class Err:
    error: MalformedResponseJSON


ParseResult = Union[Ok, Err]


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json (or ```) marker and a trailing ``` marker."""
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def parse_json(raw_text: str) -> ParseResult:
    """Unwrap and parse model output without raising.

    Args:
        raw_text: Text exactly as returned by the completion service.

    Returns:
        ``Ok(value)`` with the decoded JSON, or ``Err(error)`` carrying a
        ``MalformedResponseJSON`` with the raw text for diagnostics.
    """
    cleaned = strip_code_fences(raw_text)
    try:
        return Ok(json.loads(cleaned))
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse model output as JSON: %s", exc)
        return Err(MalformedResponseJSON(f"invalid JSON ({exc.msg})", raw_text))


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def _parse_object(
    raw_text: str,
    model: type[ModelT],
    prepare: Callable[[dict[str, Any]], dict[str, Any]] | None = None,
) -> ModelT:
    result = parse_json(raw_text)
    if isinstance(result, Err):
        raise result.error

    value = result.value
    if not isinstance(value, dict):
        logger.warning("%s response is %s, not a JSON object", model.__name__, type(value).__name__)
        raise MalformedResponseJSON("expected a JSON object", raw_text)

    if prepare is not None:
        value = prepare(value)

    try:
        return model.model_validate(value)
    except ValidationError as exc:
        reason = _describe(exc)
        logger.warning("%s response failed validation: %s", model.__name__, reason)
        raise MalformedResponseJSON(reason, raw_text) from exc


def clean_letter(letter: str) -> str:
    """Drop stray code-fence lines and surrounding whitespace from a letter."""
    return _FENCE_LINE.sub("", letter).strip()


def _prepare_appeal(value: dict[str, Any]) -> dict[str, Any]:
    letter = value.get("appealLetter")
    if isinstance(letter, str):
        value = {**value, "appealLetter": clean_letter(letter)}
    return value


def parse_extracted_record(raw_text: str) -> ExtractedRecord:
    """Parse extraction output into an ``ExtractedRecord``.

    Raises:
        MalformedResponseJSON: If the text is not a JSON object or a field
            has the wrong type.
    """
    return _parse_object(raw_text, ExtractedRecord)


def parse_appeal_package(raw_text: str) -> AppealPackage:
    """Parse generation output into an ``AppealPackage``.

    Raises:
        MalformedResponseJSON: If the text is not a JSON object, a field has
            the wrong type, or the appeal letter is missing or empty.
    """
    return _parse_object(raw_text, AppealPackage, prepare=_prepare_appeal)
