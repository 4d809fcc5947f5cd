"""Completion candidates and cursor context for editor requests."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

from loomlang.builtin_spec import (
    BUILTIN_DIRECTIVES,
    BUILTIN_FUNCTIONS,
    KEYWORDS,
    MEMBER_FIELDS,
)
from loomlang.lsp.text import (
    Position,
    Range,
    char_idx_to_utf16_col,
    split_lines,
    utf16_col_to_char_idx,
)

_IMPORT_KEYWORD = "@import"
_DEFAULT_STD_MODULES = ("std.csv", "std.out", "std.http")


class CompletionItemKind(IntEnum):
    """The kinds of completion item used here, with their protocol numbers."""

    FUNCTION = 3
    FIELD = 5
    MODULE = 9
    KEYWORD = 14
    FILE = 17
    FOLDER = 19


@dataclass(frozen=True)
class MarkupContent:
    value: str
    kind: str = "markdown"


@dataclass(frozen=True)
class TextEdit:
    range: Range
    new_text: str


@dataclass
class CompletionItem:
    label: str
    kind: Optional[CompletionItemKind] = None
    detail: Optional[str] = None
    documentation: Optional[MarkupContent] = None
    insert_text: Optional[str] = None
    filter_text: Optional[str] = None
    text_edit: Optional[TextEdit] = None


def _line_at(text: str, line: int) -> Optional[str]:
    lines = split_lines(text)
    if line < 0 or line >= len(lines):
        return None
    return lines[line]


def extract_import_prefix(text: str, line: int, character: int) -> Optional[tuple[str, int]]:
    """The partial path of an ``@import`` string before the cursor.

    Returns ``(prefix, content_start_column)`` where the column is the 0-based
    UTF-16 column just after the opening quote, or None outside an import path.
    """
    line_text = _line_at(text, line)
    if line_text is None:
        return None
    before_cursor = line_text[: utf16_col_to_char_idx(line_text, character)]

    import_pos = before_cursor.rfind(_IMPORT_KEYWORD)
    if import_pos < 0:
        return None
    after_import_start = import_pos + len(_IMPORT_KEYWORD)
    quote_pos = before_cursor.find('"', after_import_start)
    if quote_pos < 0:
        return None
    prefix_start = quote_pos + 1
    prefix = before_cursor[prefix_start:]
    if '"' in prefix:
        return None
    return prefix, char_idx_to_utf16_col(line_text, prefix_start)


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_.@"


def get_signature_context(text: str, line: int, character: int) -> Optional[tuple[str, int]]:
    """The name of the call enclosing the cursor and the active argument index."""
    lines = split_lines(text)
    if line < 0 or line >= len(lines):
        return None

    depth = 0
    param_index = 0
    end = utf16_col_to_char_idx(lines[line], character)
    for current_line in range(line, -1, -1):
        line_text = lines[current_line]
        if current_line != line:
            end = len(line_text)
        end = min(end, len(line_text))
        for i in range(end - 1, -1, -1):
            ch = line_text[i]
            if ch == ")":
                depth += 1
            elif ch == "(":
                depth -= 1
                if depth < 0:
                    before_paren = line_text[:i].rstrip()
                    name_start = len(before_paren)
                    while name_start > 0 and _is_name_char(before_paren[name_start - 1]):
                        name_start -= 1
                    name = before_paren[name_start:]
                    return (name, param_index) if name else None
            elif ch == "," and depth == 0:
                param_index += 1
    return None


def _is_escaped_quote(line_text: str, quote_idx: int) -> bool:
    slashes = len(line_text[:quote_idx]) - len(line_text[:quote_idx].rstrip("\\"))
    return slashes % 2 == 1


def extract_string_literal_prefix(
    text: str, line: int, character: int
) -> Optional[tuple[str, int]]:
    """The contents of an open path literal before the cursor.

    Returns ``(prefix, content_start_column)``, or None when the cursor is not
    inside a path literal (string literals start with an escaped quote).
    """
    line_text = _line_at(text, line)
    if line_text is None:
        return None
    cursor = utf16_col_to_char_idx(line_text, character)

    in_string = False
    escaped = False
    quote_start = 0
    is_path_literal = False
    for idx, ch in enumerate(line_text[:cursor]):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
            quote_start = idx
            is_path_literal = not _is_escaped_quote(line_text, idx)

    if not (in_string and is_path_literal):
        return None
    content_start = quote_start + 1
    return line_text[content_start:cursor], char_idx_to_utf16_col(line_text, content_start)


def _uri_to_path(uri: str) -> Optional[Path]:
    parsed = urlparse(uri)
    if parsed.scheme != "file" or parsed.netloc not in ("", "localhost"):
        return None
    if not parsed.path:
        return None
    return Path(url2pathname(parsed.path))


def _document_dir(uri: str) -> Optional[Path]:
    path = _uri_to_path(uri)
    if path is None or path.parent == path:
        return None
    return path.parent


def _split_prefix(prefix: str) -> tuple[str, str]:
    if "/" in prefix:
        rel_dir, _, name_prefix = prefix.rpartition("/")
        return rel_dir, name_prefix
    return "", prefix


def _scan(directory: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as entries:
            return list(entries)
    except OSError:
        return []


def _is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir()
    except OSError:
        return False


def _replace_range(line: int, start_col: int, end_col: int) -> Range:
    return Range(Position(line, start_col), Position(line, end_col))


def _local_import_candidates(base_dir: Path, prefix: str) -> list[str]:
    rel_dir, name_prefix = _split_prefix(prefix)
    search_dir = base_dir / rel_dir if rel_dir else base_dir
    found: set[str] = set()
    for entry in _scan(search_dir):
        if not entry.name.startswith(name_prefix):
            continue
        if _is_dir(entry):
            found.add(f"{rel_dir}/{entry.name}/" if rel_dir else f"{entry.name}/")
            continue
        path = Path(entry.path)
        if path.suffix != ".loom":
            continue
        found.add(f"{rel_dir}/{path.stem}" if rel_dir else path.stem)
    return sorted(found)


def _std_modules_in(std_dir: Path, rel: tuple[str, ...], out: set[str]) -> None:
    for entry in _scan(std_dir):
        if _is_dir(entry):
            _std_modules_in(Path(entry.path), rel + (entry.name,), out)
            continue
        path = Path(entry.path)
        if path.suffix != ".loom":
            continue
        parts = ["std", *rel]
        if path.stem != "mod":
            parts.append(path.stem)
        out.add(".".join(parts))


def _std_import_candidates(base_dir: Path, prefix: str) -> list[str]:
    modules = set(_DEFAULT_STD_MODULES)
    for ancestor in (base_dir, *base_dir.parents):
        std_dir = ancestor / "std"
        if std_dir.is_dir():
            _std_modules_in(std_dir, (), modules)
    return sorted(m for m in modules if m.startswith(prefix))


def file_completion_items(
    uri: str, prefix: str, line: int, content_start_col: int, cursor_col: int
) -> list[CompletionItem]:
    """Files and folders matching a partial path, relative to the document."""
    base_dir = _document_dir(uri)
    if base_dir is None:
        return []
    rel_dir, name_prefix = _split_prefix(prefix)
    if not rel_dir:
        search_dir = Path("/") if prefix.startswith("/") else base_dir
    elif rel_dir.startswith("/"):
        search_dir = Path(rel_dir)
    else:
        search_dir = base_dir / rel_dir

    replace_range = _replace_range(line, content_start_col, cursor_col)
    items: list[CompletionItem] = []
    for entry in _scan(search_dir):
        name = entry.name
        if not name.startswith(name_prefix):
            continue
        rel = f"{rel_dir}/{name}" if rel_dir else name
        if _is_dir(entry):
            items.append(
                CompletionItem(
                    label=f"{name}/",
                    kind=CompletionItemKind.FOLDER,
                    filter_text=f"{rel}/",
                    text_edit=TextEdit(replace_range, f"{rel}/"),
                )
            )
        else:
            items.append(
                CompletionItem(
                    label=name,
                    kind=CompletionItemKind.FILE,
                    filter_text=rel,
                    text_edit=TextEdit(replace_range, rel),
                )
            )
    items.sort(key=lambda item: item.label)
    return items


def import_completion_items(
    uri: str, prefix: str, line: int, content_start_col: int, cursor_col: int
) -> list[CompletionItem]:
    """Local modules, folders and std modules matching a partial import path."""
    base_dir = _document_dir(uri)
    if base_dir is None:
        return []
    labels = set(_local_import_candidates(base_dir, prefix))
    if not prefix or prefix.startswith("std"):
        labels.update(_std_import_candidates(base_dir, prefix))

    replace_range = _replace_range(line, content_start_col, cursor_col)
    return [
        CompletionItem(
            label=label,
            kind=CompletionItemKind.FOLDER if label.endswith("/") else CompletionItemKind.MODULE,
            filter_text=label,
            text_edit=TextEdit(replace_range, label),
        )
        for label in sorted(labels)
    ]


def _directive_items() -> list[CompletionItem]:
    return [
        CompletionItem(
            label=spec.name,
            kind=CompletionItemKind.KEYWORD,
            detail=spec.signature,
            documentation=MarkupContent(spec.description),
            insert_text=spec.name,
        )
        for spec in BUILTIN_DIRECTIVES
    ]


def completion_items_for_trigger(trigger: Optional[str]) -> list[CompletionItem]:
    """The static completion list for a trigger character."""
    if trigger == "@":
        return _directive_items()
    if trigger == ".":
        return [
            CompletionItem(label=name, kind=CompletionItemKind.FIELD, detail=desc)
            for name, desc in MEMBER_FIELDS
        ]
    items = _directive_items()
    items.extend(
        CompletionItem(label=name, kind=CompletionItemKind.KEYWORD, detail=desc)
        for name, desc in KEYWORDS
    )
    items.extend(
        CompletionItem(
            label=spec.name,
            kind=CompletionItemKind.FUNCTION,
            detail=spec.signature,
            documentation=MarkupContent(spec.description),
        )
        for spec in BUILTIN_FUNCTIONS
    )
    return items