import pytest

from loomlang.ast import (
    Branch,
    Comment,
    FunctionCall,
    Identifier,
    ObjectKey,
    ObjectKeyKind,
    PathLiteral,
    PipeFlow,
    PipeOp,
    SourcePos,
    Span,
    StringLiteral,
)


def make_span(sl, sc, el, ec):
    return Span(SourcePos(sl, sc), SourcePos(el, ec))


def test_default_span_contains_nothing():
    assert Span().contains_zero_based(0, 0) is False


def test_span_with_zero_end_line_contains_nothing():
    span = Span(SourcePos(1, 1), SourcePos(0, 0))
    assert span.contains_zero_based(0, 0) is False


@pytest.mark.parametrize(
    "line, character, expected",
    [(0, 2, True), (0, 4, True), (0, 6, True), (0, 1, False), (0, 7, False), (1, 4, False)],
)
def test_single_line_span(line, character, expected):
    span = make_span(1, 3, 1, 7)
    assert span.contains_zero_based(line, character) is expected


@pytest.mark.parametrize(
    "line, character, expected",
    [
        (1, 4, True),
        (1, 3, False),
        (1, 100, True),
        (2, 0, True),
        (3, 0, True),
        (3, 2, True),
        (3, 3, False),
        (0, 10, False),
        (4, 0, False),
    ],
)
def test_multi_line_span(line, character, expected):
    span = make_span(2, 5, 4, 3)
    assert span.contains_zero_based(line, character) is expected


@pytest.mark.parametrize("kind", list(ObjectKeyKind))
def test_object_key_map_key_ignores_kind(kind):
    assert ObjectKey(kind, "amount").as_map_key() == "amount"


@pytest.mark.parametrize(
    "text, expected",
    [(">>", PipeOp.SAFE), (">>>", PipeOp.FORCE), ("->", PipeOp.MOVE)],
)
def test_pipe_op_text(text, expected):
    assert PipeOp(text) is expected


def test_pipe_op_lookup_by_text():
    assert PipeOp("->") is PipeOp.MOVE


def test_pipe_op_rejects_unknown_text():
    with pytest.raises(ValueError):
        PipeOp("=>")


def test_nodes_compare_by_value():
    a = PipeFlow(
        source=PathLiteral("in.txt"),
        operations=[(PipeOp.SAFE, FunctionCall("print", [Identifier("x")]))],
    )
    b = PipeFlow(
        source=PathLiteral("in.txt"),
        operations=[(PipeOp.SAFE, FunctionCall("print", [Identifier("x")]))],
    )
    assert a == b
    b.operations.append((PipeOp.FORCE, StringLiteral("y")))
    assert a != b


def test_default_lists_are_independent():
    first = Branch()
    second = Branch()
    first.items.append(Comment("# note"))
    assert second.items == []
    assert first.items == [Comment("# note")]


def test_function_call_defaults():
    call = FunctionCall("missing")
    assert call.arguments == []
    assert call.named_arguments == []
    assert call.alias is None
    assert call.span == Span()