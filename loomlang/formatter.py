"""Canonical source formatting for Loom programs."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Iterable, Optional

from loomlang.ast import (
    BinaryOp,
    BooleanLiteral,
    Branch,
    Comment,
    DirectiveFlow,
    FunctionCall,
    FunctionDef,
    Identifier,
    ImportStmt,
    Lambda,
    MemberAccess,
    NamedArgument,
    NumberLiteral,
    ObjectKeyKind,
    ObjectLiteral,
    PathLiteral,
    PipeFlow,
    Program,
    SecretCall,
    StringLiteral,
    UnaryOp,
)

DEFAULT_MAX_WIDTH = 100
_CONTINUATION_INDENT_LEVELS = 1
_INDENT = "    "

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _escape_string_literal_contents(raw: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in raw)


def _format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _first_line(text: str) -> str:
    line = text.split("\n", 1)[0]
    return line[:-1] if line.endswith("\r") else line


class Formatter:
    """Renders a program back to source text, wrapping long pipe chains."""

    def __init__(self, max_width: int = DEFAULT_MAX_WIDTH) -> None:
        self.max_width = max(max_width, 1)
        self.indent_level = 0
        self._parts: list[str] = []

    @property
    def output(self) -> str:
        """Everything formatted so far."""
        return "".join(self._parts)

    def format_program(self, program: Program) -> str:
        """Append the formatted program to the output and return the output."""
        for stmt in program.statements:
            self._format_statement(stmt)
        return self.output

    # -- buffer helpers -------------------------------------------------

    def _push(self, text: str) -> None:
        self._parts.append(text)

    def _push_indent(self) -> None:
        self._push(_INDENT * self.indent_level)

    def _push_newline(self) -> None:
        self._push("\n")

    def _push_continuation_indent(self) -> None:
        self._push(_INDENT * (self.indent_level + _CONTINUATION_INDENT_LEVELS))

    def _current_line_len(self) -> int:
        tail: list[str] = []
        for part in reversed(self._parts):
            if "\n" in part:
                tail.append(part.rsplit("\n", 1)[1])
                break
            tail.append(part)
        return _byte_len("".join(reversed(tail)))

    def _child(self) -> Formatter:
        child = Formatter(self.max_width)
        child.indent_level = self.indent_level
        return child

    # -- statements -----------------------------------------------------

    def _format_comments(self, comments: Iterable[str]) -> None:
        for comment in comments:
            self._push(comment.strip())
            self._push_newline()
            self._push_indent()

    def _format_statement(self, stmt) -> None:
        match stmt:
            case ImportStmt():
                self._push_indent()
                self._format_comments(stmt.comments)
                self._push(f'@import "{stmt.path}"')
                if stmt.alias is not None:
                    self._push(f" as {stmt.alias}")
                self._push_newline()
            case PipeFlow():
                self._push_indent()
                self._format_comments(stmt.comments)
                self._format_pipe_flow(stmt, False)
                self._push_newline()
            case FunctionDef():
                self._push_indent()
                self._format_comments(stmt.comments)
                self._push(f"{stmt.name}({', '.join(stmt.parameters)}) => ")
                is_branch = isinstance(stmt.body, Branch)
                if is_branch:
                    self._push("[")
                    self._push_newline()
                    self.indent_level += 1
                self._format_flow_or_branch(stmt.body, True)
                if is_branch:
                    self.indent_level -= 1
                    self._push_indent()
                    self._push("]")
                    self._push_newline()
            case Comment():
                self._push_indent()
                self._push(stmt.text.strip())
                self._push_newline()
            case _:
                raise TypeError(f"cannot format statement {stmt!r}")

    def _format_flow_or_branch(self, body, inline: bool) -> None:
        if isinstance(body, Branch):
            items = body.items
            last = len(items) - 1
            for i, item in enumerate(items):
                self._push_indent()
                if isinstance(item, Comment):
                    self._push(item.text.strip())
                else:
                    self._format_comments(item.comments)
                    self._format_pipe_flow(item, True)
                    if any(isinstance(nxt, PipeFlow) for nxt in items[i + 1 :]):
                        self._push(",")
                if i < last:
                    self._push_newline()
            self._push_newline()
        else:
            if not inline:
                self._push_indent()
            self._format_pipe_flow(body, inline)
            self._push_newline()

    def _format_pipe_flow(self, flow: PipeFlow, is_inside_branch: bool) -> None:
        source = self._child()
        source._format_node(flow.source)
        self._push(source.output)

        for op, dest in flow.operations:
            op_text = op.value
            child = self._child()
            child._format_node(dest)
            dest_text = child.output
            segment_len = len(op_text) + 1 + _byte_len(_first_line(dest_text))
            should_wrap = (
                "\n" not in dest_text
                and self._current_line_len() + 1 + segment_len > self.max_width
            )
            if should_wrap:
                self._push_newline()
                self._push_continuation_indent()
                self._push(f"{op_text} {dest_text}")
            else:
                self._push(f" {op_text} {dest_text}")

        on_fail = flow.on_fail
        if on_fail is None:
            return
        self._push(" on_fail ")
        if on_fail.alias is not None:
            self._push(f"as {on_fail.alias} ")
        is_branch = isinstance(on_fail.handler, Branch)
        if is_branch:
            self._push(">> [")
            self._push_newline()
            self.indent_level += 1
        else:
            self._push(">> ")
        self._format_flow_or_branch(on_fail.handler, not is_branch)
        if is_branch:
            self.indent_level -= 1
            self._push_indent()
            self._push("]")
            if not is_inside_branch:
                self._push_newline()

    # -- sources, destinations and expressions --------------------------

    def _format_node(self, node) -> None:
        if isinstance(node, Branch):
            self._push("[")
            self._push_newline()
            self.indent_level += 1
            self._format_flow_or_branch(node, True)
            self.indent_level -= 1
            self._push_indent()
            self._push("]")
        elif isinstance(node, DirectiveFlow):
            self._format_call("@" + node.name, node.arguments, node.named_arguments, node.alias)
        else:
            self._format_expression(node)

    def _format_arguments(
        self, arguments: list, named_arguments: list[NamedArgument]
    ) -> None:
        first = True
        for arg in arguments:
            if not first:
                self._push(", ")
            self._format_expression(arg)
            first = False
        for named in named_arguments:
            if not first:
                self._push(", ")
            self._push(f"{named.name}: ")
            self._format_expression(named.value)
            first = False

    def _format_call(
        self,
        name: str,
        arguments: list,
        named_arguments: list[NamedArgument],
        alias: Optional[str],
    ) -> None:
        self._push(name)
        if arguments or named_arguments:
            self._push("(")
            self._format_arguments(arguments, named_arguments)
            self._push(")")
        if alias is not None:
            self._push(f" as {alias}")

    def _format_expression(self, expr) -> None:
        match expr:
            case PathLiteral(value=path):
                self._push(f'"{path}"')
            case StringLiteral(value=text):
                self._push('\\"' + _escape_string_literal_contents(text) + '"')
            case NumberLiteral(value=number):
                self._push(_format_number(number))
            case BooleanLiteral(value=flag):
                self._push("true" if flag else "false")
            case Identifier(name=name):
                self._push(name)
            case ObjectLiteral(entries=entries):
                self._push("{")
                for idx, (key, value) in enumerate(entries):
                    if key.kind is ObjectKeyKind.IDENTIFIER:
                        self._push(key.value)
                    elif key.kind is ObjectKeyKind.PATH:
                        self._push(f'"{key.value}"')
                    else:
                        self._push('\\"' + _escape_string_literal_contents(key.value) + '"')
                    self._push(": ")
                    self._format_expression(value)
                    if idx + 1 < len(entries):
                        self._push(", ")
                self._push("}")
            case BinaryOp(left=left, op=op, right=right):
                self._format_expression(left)
                self._push(f" {op} ")
                self._format_expression(right)
            case UnaryOp(op=op, operand=operand):
                self._push(op)
                self._format_expression(operand)
            case Lambda(param=param, body=body):
                self._push(f"{param} >> ")
                self._format_expression(body)
            case FunctionCall():
                self._format_call(expr.name, expr.arguments, expr.named_arguments, expr.alias)
            case SecretCall():
                self._push("@secret(")
                self._format_arguments(expr.arguments, expr.named_arguments)
                self._push(")")
            case MemberAccess(parts=parts):
                self._push(".".join(parts))
            case _:
                raise TypeError(f"cannot format expression {expr!r}")


def format_program(program: Program, max_width: int = DEFAULT_MAX_WIDTH) -> str:
    """Format a whole program as source text."""
    return Formatter(max_width).format_program(program)