"""Text positions and word lookup for editor requests."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Position:
    """A 0-based line and UTF-16 character offset."""

    line: int = 0
    character: int = 0


@dataclass(frozen=True)
class Range:
    start: Position = field(default_factory=Position)
    end: Position = field(default_factory=Position)


def _utf16_units(text: str) -> int:
    """Number of UTF-16 code units needed to encode ``text``."""
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def split_lines(text: str) -> list[str]:
    """Split on newlines, dropping a trailing carriage return and final empty line."""
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [p[:-1] if p.endswith("\r") else p for p in parts]


def utf16_col_to_char_idx(line: str, character: int) -> int:
    """Map a UTF-16 column to a character index, never splitting a character."""
    utf16_col = 0
    for idx, ch in enumerate(line):
        if utf16_col >= character:
            return idx
        nxt = utf16_col + _utf16_units(ch)
        if nxt > character:
            return idx
        utf16_col = nxt
    return len(line)


def char_idx_to_utf16_col(line: str, char_idx: int) -> int:
    """Map a character index to its UTF-16 column."""
    return _utf16_units(line[: max(char_idx, 0)])


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_."


def get_word_at_position(text: str, line: int, character: int) -> str:
    """The identifier-like word around a position; a leading '@' is kept."""
    lines = split_lines(text)
    if line >= len(lines):
        return ""
    line_text = lines[line]
    col = utf16_col_to_char_idx(line_text, character)

    start = col
    while start > 0 and (_is_word_char(line_text[start - 1]) or line_text[start - 1] == "@"):
        start -= 1
    end = col
    while end < len(line_text) and _is_word_char(line_text[end]):
        end += 1
    return line_text[start:end]