"""
Helpers for turning raw generator output into something the app can use.

Generator text may carry reasoning blocks, prose around the payload, fenced
code blocks, or several bracketed spans where only one is real JSON. The
cleaner strips the reasoning markup; the extractor finds the first balanced
JSON object or array that actually parses.
"""

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)

REASONING_TAGS = ("think", "thinking", "reasoning")

_TAG_ALTERNATION = "|".join(REASONING_TAGS)
_PAIRED_BLOCK = re.compile(
    rf"<({_TAG_ALTERNATION})\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL
)
_ORPHAN_CLOSER = re.compile(rf"^.*</(?:{_TAG_ALTERNATION})\s*>", re.IGNORECASE | re.DOTALL)
_ORPHAN_OPENER = re.compile(rf"<(?:{_TAG_ALTERNATION})\b[^>]*>.*$", re.IGNORECASE | re.DOTALL)
_EXCESS_NEWLINES = re.compile(r"\r?\n(?:[ \t]*\r?\n){2,}")

_ARRAY_SPAN = re.compile(r"\[[\s\S]*?\]")
_OBJECT_SPAN = re.compile(r"\{[\s\S]*?\}")
_CLOSERS = {"[": "]", "{": "}"}


def clean_response(text: Optional[str]) -> str:
    """Remove reasoning blocks and squeeze blank lines. Safe to apply twice."""
    if not text:
        return ""
    cleaned = _PAIRED_BLOCK.sub("", text)
    cleaned = _ORPHAN_CLOSER.sub("", cleaned)
    cleaned = _ORPHAN_OPENER.sub("", cleaned)
    cleaned = _EXCESS_NEWLINES.sub("\n\n", cleaned)
    return cleaned.strip()


@dataclass(frozen=True)
class ExtractedPayload:
    text: str
    value: Any

    @property
    def is_array(self) -> bool:
        return isinstance(self.value, list)


class ScanState(Enum):
    normal = "normal"
    in_string = "in_string"
    escape_pending = "escape_pending"


def _try_parse(candidate: str) -> Optional[ExtractedPayload]:
    try:
        return ExtractedPayload(text=candidate, value=json.loads(candidate))
    except ValueError:
        return None


def _opening_positions(text: str, start: int = 0) -> Iterator[int]:
    for index in range(start, len(text)):
        if text[index] in _CLOSERS:
            yield index


def _first_opening(text: str) -> int:
    return next(_opening_positions(text), -1)


def balanced_end(text: str, start: int) -> int:
    """
    Walk forward from an opening bracket and return the index where nesting
    returns to zero, or -1 if the span never closes. Brackets inside string
    literals do not count.
    """
    opener = text[start]
    closer = _CLOSERS[opener]
    depth = 0
    state = ScanState.normal
    for index in range(start, len(text)):
        char = text[index]
        if state is ScanState.escape_pending:
            state = ScanState.in_string
            continue
        if state is ScanState.in_string:
            if char == "\\":
                state = ScanState.escape_pending
            elif char == '"':
                state = ScanState.normal
            continue
        if char == '"':
            state = ScanState.in_string
        elif char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return index
    return -1


def _fast_path(text: str) -> Optional[ExtractedPayload]:
    first = _first_opening(text)
    if first < 0:
        return None
    for pattern in (_ARRAY_SPAN, _OBJECT_SPAN):
        match = pattern.search(text, first)
        if match and match.start() == first:
            return _try_parse(match.group(0))
    return None


def _scan(text: str) -> Optional[ExtractedPayload]:
    for start, end in candidate_spans(text):
        found = _try_parse(text[start : end + 1])
        if found is not None:
            return found
    return None


def candidate_spans(text: str) -> Iterator[Tuple[int, int]]:
    """Yield (start, end) of every balanced span, in the order they are tried."""
    for start in _opening_positions(text):
        end = balanced_end(text, start)
        if end >= 0:
            yield start, end


def extract_structured_payload(raw_text: Optional[str]) -> Optional[ExtractedPayload]:
    """
    Find the JSON payload inside generator output.

    Candidates are tried from the earliest opening bracket onwards, so an
    outer object or array wins over the values nested inside it. Returns
    None when nothing parses; never raises.
    """
    cleaned = clean_response(raw_text)
    if not cleaned:
        return None
    found = _fast_path(cleaned) or _scan(cleaned)
    if found is None:
        logger.debug("No JSON payload found in %d chars of generator output", len(cleaned))
    return found
