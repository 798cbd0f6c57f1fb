"""
Citation artifact stripping for generated text.

Search-enabled completions sprinkle markdown-style numeric citations through
their output ("[1]", "[2](https://...)", "[3]: https://..."). These are removed
before text reaches the transcript, and the whitespace they leave behind is
tidied up. Code (fenced blocks and inline spans) is left untouched.
"""

import re
from typing import List, Tuple

# Removal order matters: definitions, then images, then inline links, then bare markers
CITATION_DEFINITION_RE = re.compile(r"^\[\d+\]:[ \t]*https?://\S+[ \t]*\r?(?:\n|$)", re.MULTILINE)
CITATION_IMAGE_RE = re.compile(r"!\[\d+\]\([^)]*\)")
CITATION_WITH_URL_RE = re.compile(r"\[\d+\]\([^)]*\)")
CITATION_STANDALONE_RE = re.compile(r"\[\d+\]")

HORIZONTAL_RUN_RE = re.compile(r"[ \t]{2,}")
TRAILING_BEFORE_NEWLINE_RE = re.compile(r"[ \t]+(\r?\n)")
TRAILING_AT_END_RE = re.compile(r"[ \t]+\Z")
EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")

# An unterminated fence runs to the end of the text (partially streamed code)
CODE_RE = re.compile(r"```.*?(?:```|\Z)|`[^`\n]+`", re.DOTALL)


def _split_code(text: str) -> List[Tuple[bool, str]]:
    """Split text into (is_code, segment) pairs."""
    segments: List[Tuple[bool, str]] = []
    pos = 0
    for match in CODE_RE.finditer(text):
        if match.start() > pos:
            segments.append((False, text[pos : match.start()]))
        segments.append((True, match.group(0)))
        pos = match.end()
    if pos < len(text):
        segments.append((False, text[pos:]))
    return segments


def _strip_definitions(text: str, at_line_start: bool) -> str:
    if at_line_start:
        return CITATION_DEFINITION_RE.sub("", text)
    # A segment after a code span starts mid-line
    head, newline, rest = text.partition("\n")
    return head + newline + CITATION_DEFINITION_RE.sub("", rest)


def _clean_prose(text: str, at_line_start: bool, at_end: bool) -> str:
    text = _strip_definitions(text, at_line_start)
    text = CITATION_IMAGE_RE.sub("", text)
    text = CITATION_WITH_URL_RE.sub("", text)
    text = CITATION_STANDALONE_RE.sub("", text)

    text = HORIZONTAL_RUN_RE.sub(" ", text)
    text = TRAILING_BEFORE_NEWLINE_RE.sub(r"\1", text)
    if at_end:
        text = TRAILING_AT_END_RE.sub("", text)
    text = EXCESS_NEWLINES_RE.sub("\n\n", text)
    return text


def _single_pass(text: str) -> str:
    segments = _split_code(text)
    parts = []
    for i, (is_code, segment) in enumerate(segments):
        if is_code:
            parts.append(segment)
        else:
            at_line_start = not parts or parts[-1].endswith("\n")
            parts.append(_clean_prose(segment, at_line_start=at_line_start, at_end=i == len(segments) - 1))
    return "".join(parts)


def strip_citation_artifacts(value: str) -> str:
    """
    Remove citation artifacts and normalize the leftover whitespace.

    Every substitution shortens the text, so repeating the pass until nothing
    changes terminates, and the result is a fixed point:
    strip_citation_artifacts(strip_citation_artifacts(x)) == strip_citation_artifacts(x).

    Args:
        value: Raw generated text (may be a partially streamed buffer)

    Returns:
        Cleaned text
    """
    if not value:
        return ""

    current = value
    while True:
        cleaned = _single_pass(current)
        if cleaned == current:
            return cleaned
        current = cleaned
