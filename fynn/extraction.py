"""
Structured Text Extractor

Pulls the first syntactically balanced JSON object or array out of
generated text that may carry code fences or commentary around it.

The balanced scan is a three-state automaton (NORMAL / IN_STRING /
ESCAPED). It tracks only the bracket pair chosen by the first opener,
ignores brackets inside strings, and lets a backslash consume exactly
one following character. Nested brackets are not a regular language,
so no regular expression is involved in the scan.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

_OPENING_FENCE = re.compile(r"^```[A-Za-z0-9_+.-]*\s*")
_CLOSING_FENCE = re.compile(r"\s*```$")

_PAIRS = {
    "{": "}",
    "[": "]",
}


class _ScanState(Enum):
    NORMAL    = "normal"
    IN_STRING = "string"
    ESCAPED   = "escaped"


@dataclass(frozen=True)
class ExtractionResult:
    text: Optional[str]

    @property
    def found(self) -> bool:
        return self.text is not None


NOT_FOUND = ExtractionResult(text=None)


def strip_fences(text: str) -> str:
    """Remove one leading fence (with optional language tag) and one trailing fence."""
    cleaned = text.strip()
    cleaned = _OPENING_FENCE.sub("", cleaned, count=1)
    cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def _first_opener(text: str) -> Optional[Tuple[int, str]]:
    positions = [(text.find(ch), ch) for ch in _PAIRS]
    positions = [(idx, ch) for idx, ch in positions if idx != -1]
    if not positions:
        return None
    return min(positions)


def _scan_balanced(text: str, start: int, opener: str, closer: str) -> Optional[str]:
    depth = 0
    state = _ScanState.NORMAL
    resume = _ScanState.NORMAL  # state to return to after an escaped char

    for i in range(start, len(text)):
        char = text[i]

        if state is _ScanState.ESCAPED:
            state = resume
            continue

        if char == "\\":
            resume = state
            state = _ScanState.ESCAPED
            continue

        if char == '"':
            state = _ScanState.NORMAL if state is _ScanState.IN_STRING else _ScanState.IN_STRING
            continue

        if state is _ScanState.IN_STRING:
            continue

        if char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return text[start:i + 1]

    return None


def extract_json_text(text: str) -> ExtractionResult:
    """
    Locate the first balanced `{...}` or `[...]` span in `text`.

    Whichever opener appears first decides the expected pair. Anything
    after the first complete value is ignored. Returns NOT_FOUND when
    there is no opener or the value never closes; never raises.
    """
    if not isinstance(text, str):
        return NOT_FOUND

    cleaned = strip_fences(text)
    opener = _first_opener(cleaned)
    if opener is None:
        return NOT_FOUND

    start, open_char = opener
    span = _scan_balanced(cleaned, start, open_char, _PAIRS[open_char])
    if span is None:
        return NOT_FOUND
    return ExtractionResult(text=span)
