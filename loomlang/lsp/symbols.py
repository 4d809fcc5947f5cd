"""Document symbols, symbol lookup at a cursor, and range conversion."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from loomlang.ast import (
    BinaryOp,
    Branch,
    Comment,
    DirectiveFlow,
    FunctionCall,
    FunctionDef,
    ImportStmt,
    Lambda,
    ObjectLiteral,
    PipeFlow,
    Program,
    SecretCall,
    Span,
    UnaryOp,
)
from loomlang.lsp.text import Position, Range


class SymbolKind(IntEnum):
    """The kinds of document symbol used here, with their protocol numbers."""

    MODULE = 2
    FUNCTION = 12
    EVENT = 24


@dataclass
class DocumentSymbol:
    name: str
    kind: SymbolKind
    range: Range
    selection_range: Range
    detail: Optional[str] = None


def lsp_range_from_span(span: Span) -> Range:
    """Convert a 1-based span to a 0-based range, clamping at zero."""
    return Range(
        Position(max(span.start.line - 1, 0), max(span.start.col - 1, 0)),
        Position(max(span.end.line - 1, 0), max(span.end.col - 1, 0)),
    )


def full_document_range(text: str) -> Range:
    """A range from the start of the text to just after its last character."""
    line = text.count("\n")
    last_newline = text.rfind("\n")
    character = len(text) - (last_newline + 1)
    return Range(Position(0, 0), Position(line, character))


def _contains(span: Span, pos: Position) -> bool:
    return span.contains_zero_based(pos.line, pos.character)


def _expression_symbol(expr, pos: Position) -> Optional[str]:
    match expr:
        case FunctionCall():
            return expr.name if _contains(expr.span, pos) else None
        case SecretCall():
            return "secret" if _contains(expr.span, pos) else None
        case Lambda(body=body):
            return _expression_symbol(body, pos)
        case BinaryOp(left=left, right=right):
            found = _expression_symbol(left, pos)
            return found if found is not None else _expression_symbol(right, pos)
        case UnaryOp(operand=operand):
            return _expression_symbol(operand, pos)
        case ObjectLiteral(entries=entries):
            for _, value in entries:
                found = _expression_symbol(value, pos)
                if found is not None:
                    return found
            return None
        case _:
            return None


def _node_symbol(node, pos: Position) -> Optional[str]:
    """Symbol in a pipe source or destination."""
    if isinstance(node, DirectiveFlow):
        return node.name if _contains(node.span, pos) else None
    if isinstance(node, Branch):
        return _branch_symbol(node, pos)
    return _expression_symbol(node, pos)


def _branch_symbol(branch: Branch, pos: Position) -> Optional[str]:
    if not _contains(branch.span, pos):
        return None
    for item in branch.items:
        if isinstance(item, PipeFlow):
            found = _flow_symbol(item, pos)
            if found is not None:
                return found
    return None


def _flow_or_branch_symbol(body, pos: Position) -> Optional[str]:
    if isinstance(body, Branch):
        return _branch_symbol(body, pos)
    return _flow_symbol(body, pos)


def _flow_symbol(flow: PipeFlow, pos: Position) -> Optional[str]:
    if not _contains(flow.span, pos):
        return None
    found = _node_symbol(flow.source, pos)
    if found is not None:
        return found
    for _, dest in flow.operations:
        found = _node_symbol(dest, pos)
        if found is not None:
            return found
    on_fail = flow.on_fail
    if on_fail is not None and _contains(on_fail.span, pos):
        return _flow_or_branch_symbol(on_fail.handler, pos)
    return None


def find_symbol_at_position(program: Program, pos: Position) -> Optional[str]:
    """The name of the directive, call, import or function under the cursor."""
    for stmt in program.statements:
        if isinstance(stmt, Comment) or not _contains(stmt.span, pos):
            continue
        if isinstance(stmt, ImportStmt):
            return stmt.path
        if isinstance(stmt, FunctionDef):
            found = _flow_or_branch_symbol(stmt.body, pos)
            return found if found is not None else stmt.name
        if isinstance(stmt, PipeFlow):
            found = _flow_symbol(stmt, pos)
            if found is not None:
                return found
    return None


def _pipe_label(flow: PipeFlow) -> str:
    source = flow.source
    if isinstance(source, DirectiveFlow):
        if source.alias is not None:
            return f"@{source.name} as {source.alias}"
        return f"@{source.name}"
    if isinstance(source, FunctionCall):
        return source.name
    return repr(source)[:40]


def document_symbols(program: Program) -> list[DocumentSymbol]:
    """An outline of imports, functions and pipelines; comments are left out."""
    symbols: list[DocumentSymbol] = []
    for stmt in program.statements:
        if isinstance(stmt, ImportStmt):
            label = f'@import "{stmt.path}"'
            if stmt.alias is not None:
                label += f" as {stmt.alias}"
            kind, detail = SymbolKind.MODULE, stmt.path
        elif isinstance(stmt, FunctionDef):
            label = f"{stmt.name}({', '.join(stmt.parameters)})"
            kind, detail = SymbolKind.FUNCTION, "function"
        elif isinstance(stmt, PipeFlow):
            label = _pipe_label(stmt)
            kind, detail = SymbolKind.EVENT, "pipeline"
        else:
            continue
        rng = lsp_range_from_span(stmt.span)
        symbols.append(
            DocumentSymbol(name=label, kind=kind, range=rng, selection_range=rng, detail=detail)
        )
    return symbols