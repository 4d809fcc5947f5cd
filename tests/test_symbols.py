from loomlang.ast import (
    BinaryOp,
    Branch,
    Comment,
    DirectiveFlow,
    FunctionCall,
    FunctionDef,
    Identifier,
    ImportStmt,
    NumberLiteral,
    OnFail,
    PathLiteral,
    PipeFlow,
    PipeOp,
    Program,
    SecretCall,
    SourcePos,
    Span,
    StringLiteral,
)
from loomlang.lsp.symbols import (
    SymbolKind,
    document_symbols,
    find_symbol_at_position,
    full_document_range,
    lsp_range_from_span,
)
from loomlang.lsp.text import Position, Range


def span(line, c1, c2, end_line=None):
    return Span(SourcePos(line, c1), SourcePos(end_line or line, c2))


def test_lsp_range_from_span_shifts_to_zero_based():
    rng = lsp_range_from_span(span(2, 5, 7, end_line=3))
    assert rng == Range(Position(1, 4), Position(2, 6))


def test_lsp_range_from_default_span_clamps_to_zero():
    assert lsp_range_from_span(Span()) == Range(Position(0, 0), Position(0, 0))


def test_full_document_range_counts_lines_and_characters():
    assert full_document_range("ab\ncd") == Range(Position(0, 0), Position(1, 2))
    assert full_document_range("") == Range(Position(0, 0), Position(0, 0))
    assert full_document_range("abc\n").end == Position(1, 0)


def test_import_path_is_found():
    program = Program([ImportStmt("util.math", alias="m", span=span(1, 1, 25))])
    assert find_symbol_at_position(program, Position(0, 3)) == "util.math"
    assert find_symbol_at_position(program, Position(1, 3)) is None


def test_directive_in_pipe_is_found():
    flow = PipeFlow(
        source=PathLiteral("in.txt"),
        operations=[(PipeOp.SAFE, DirectiveFlow("csv.parse", span=span(1, 13, 22)))],
        span=span(1, 1, 22),
    )
    program = Program([flow])
    assert find_symbol_at_position(program, Position(0, 14)) == "csv.parse"
    assert find_symbol_at_position(program, Position(0, 2)) is None


def test_secret_and_binary_operand_are_found():
    expr = BinaryOp(
        Identifier("x"),
        "+",
        SecretCall(arguments=[StringLiteral("KEY")], span=span(1, 5, 20)),
    )
    program = Program([PipeFlow(source=expr, span=span(1, 1, 20))])
    assert find_symbol_at_position(program, Position(0, 6)) == "secret"


def test_function_falls_back_to_its_name():
    body = PipeFlow(
        source=FunctionCall("print", [NumberLiteral(1.0)], span=span(1, 15, 22)),
        span=span(1, 15, 22),
    )
    func = FunctionDef("greet", ["a"], body, span=span(1, 1, 22))
    program = Program([func])
    assert find_symbol_at_position(program, Position(0, 16)) == "print"
    assert find_symbol_at_position(program, Position(0, 1)) == "greet"


def test_branch_destination_and_on_fail_are_searched():
    inner = PipeFlow(
        source=DirectiveFlow("log", span=span(2, 5, 8)),
        span=span(2, 5, 8),
    )
    handler = PipeFlow(
        source=FunctionCall("print", span=span(3, 20, 30)),
        span=span(3, 20, 30),
    )
    flow = PipeFlow(
        source=PathLiteral("x"),
        operations=[(PipeOp.SAFE, Branch([Comment("# c"), inner], span=span(1, 8, 2, end_line=3)))],
        on_fail=OnFail(handler, span=span(3, 3, 30)),
        span=span(1, 1, 30, end_line=3),
    )
    program = Program([flow])
    assert find_symbol_at_position(program, Position(1, 5)) == "log"
    assert find_symbol_at_position(program, Position(2, 22)) == "print"


def test_document_symbols_outline():
    watch = DirectiveFlow("watch", [PathLiteral(".")], alias="event")
    program = Program(
        [
            Comment("# header"),
            ImportStmt("util", alias="u", span=span(2, 1, 18)),
            FunctionDef(
                "greet",
                ["a", "b"],
                PipeFlow(source=Identifier("a")),
                span=span(3, 1, 20),
            ),
            PipeFlow(source=watch, span=span(4, 1, 30)),
            PipeFlow(source=FunctionCall("print")),
        ]
    )
    symbols = document_symbols(program)
    assert [s.name for s in symbols] == [
        '@import "util" as u',
        "greet(a, b)",
        "@watch as event",
        "print",
    ]
    assert [s.kind for s in symbols] == [
        SymbolKind.MODULE,
        SymbolKind.FUNCTION,
        SymbolKind.EVENT,
        SymbolKind.EVENT,
    ]
    assert symbols[0].detail == "util"
    assert symbols[1].detail == "function"
    assert symbols[2].detail == "pipeline"
    assert symbols[0].range == lsp_range_from_span(span(2, 1, 18))
    assert all(s.range == s.selection_range for s in symbols)


def test_expression_pipeline_label_is_truncated():
    long_path = "a" * 80
    program = Program([PipeFlow(source=PathLiteral(long_path))])
    (symbol,) = document_symbols(program)
    assert len(symbol.name) == 40
    assert symbol.name.startswith("PathLiteral(")


def test_import_without_alias_label():
    program = Program([ImportStmt("std.http")])
    assert document_symbols(program)[0].name == '@import "std.http"'