"""Syntax tree for Loom scripts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class SourcePos:
    """A 1-based line and column in a source text; zero means unknown."""

    line: int = 0
    col: int = 0


@dataclass(frozen=True)
class Span:
    """The inclusive extent of a node in the source text."""

    start: SourcePos = field(default_factory=SourcePos)
    end: SourcePos = field(default_factory=SourcePos)

    def contains_zero_based(self, line: int, character: int) -> bool:
        """Tell whether a 0-based line and character fall inside this span."""
        if self.start.line == 0 or self.end.line == 0:
            return False
        line_1 = line + 1
        col_1 = character + 1
        if line_1 < self.start.line or line_1 > self.end.line:
            return False
        if self.start.line == self.end.line:
            return self.start.col <= col_1 <= self.end.col
        if line_1 == self.start.line:
            return col_1 >= self.start.col
        if line_1 == self.end.line:
            return col_1 <= self.end.col
        return True


@dataclass
class Comment:
    """A comment kept in the tree so that it survives formatting."""

    text: str


@dataclass
class PathLiteral:
    value: str


@dataclass
class StringLiteral:
    value: str


@dataclass
class NumberLiteral:
    value: float


@dataclass
class BooleanLiteral:
    value: bool


class ObjectKeyKind(Enum):
    IDENTIFIER = "identifier"
    PATH = "path"
    STRING = "string"


@dataclass
class ObjectKey:
    """A key of an object literal, remembering how it was written."""

    kind: ObjectKeyKind
    value: str

    def as_map_key(self) -> str:
        """The key text used when the object is built."""
        return self.value


@dataclass
class Identifier:
    name: str


@dataclass
class ObjectLiteral:
    entries: list[tuple[ObjectKey, Expression]] = field(default_factory=list)


@dataclass
class BinaryOp:
    left: Expression
    op: str
    right: Expression


@dataclass
class UnaryOp:
    op: str
    operand: Expression


@dataclass
class Lambda:
    param: str
    body: Expression
    span: Span = field(default_factory=Span)


@dataclass
class MemberAccess:
    parts: list[str] = field(default_factory=list)


@dataclass
class NamedArgument:
    name: str
    value: Expression


@dataclass
class FunctionCall:
    name: str
    arguments: list[Expression] = field(default_factory=list)
    named_arguments: list[NamedArgument] = field(default_factory=list)
    alias: Optional[str] = None
    span: Span = field(default_factory=Span)


@dataclass
class SecretCall:
    arguments: list[Expression] = field(default_factory=list)
    named_arguments: list[NamedArgument] = field(default_factory=list)
    span: Span = field(default_factory=Span)


@dataclass
class DirectiveFlow:
    name: str
    arguments: list[Expression] = field(default_factory=list)
    named_arguments: list[NamedArgument] = field(default_factory=list)
    alias: Optional[str] = None
    span: Span = field(default_factory=Span)


class PipeOp(Enum):
    """The pipe operators, valued by their source text."""

    SAFE = ">>"
    FORCE = ">>>"
    MOVE = "->"


@dataclass
class Branch:
    """A bracketed list of flows run from the same input."""

    items: list[BranchItem] = field(default_factory=list)
    span: Span = field(default_factory=Span)


@dataclass
class OnFail:
    handler: FlowOrBranch
    alias: Optional[str] = None
    span: Span = field(default_factory=Span)


@dataclass
class PipeFlow:
    source: Source
    operations: list[tuple[PipeOp, Destination]] = field(default_factory=list)
    on_fail: Optional[OnFail] = None
    comments: list[str] = field(default_factory=list)
    span: Span = field(default_factory=Span)


@dataclass
class ImportStmt:
    path: str
    alias: Optional[str] = None
    comments: list[str] = field(default_factory=list)
    span: Span = field(default_factory=Span)


@dataclass
class FunctionDef:
    name: str
    parameters: list[str]
    body: FlowOrBranch
    comments: list[str] = field(default_factory=list)
    span: Span = field(default_factory=Span)


@dataclass
class Program:
    statements: list[Statement] = field(default_factory=list)
    span: Span = field(default_factory=Span)


Literal = Union[PathLiteral, StringLiteral, NumberLiteral, BooleanLiteral]
Expression = Union[
    PathLiteral,
    StringLiteral,
    NumberLiteral,
    BooleanLiteral,
    Identifier,
    ObjectLiteral,
    BinaryOp,
    UnaryOp,
    Lambda,
    FunctionCall,
    SecretCall,
    MemberAccess,
]
Source = Union[DirectiveFlow, FunctionCall, Expression]
Destination = Union[Branch, DirectiveFlow, FunctionCall, Expression]
BranchItem = Union[PipeFlow, Comment]
FlowOrBranch = Union[PipeFlow, Branch]
Statement = Union[ImportStmt, PipeFlow, FunctionDef, Comment]