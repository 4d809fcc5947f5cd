# loomlang

Building blocks for tooling around Loom, a small language for file-processing
pipelines such as:

```
"orders.csv" >> @csv.parse >> filter(row >> row.amount > 1000) >> "high_value.csv"
```

The package has no third-party dependencies.

## What is in it

- `loomlang.ast`: the syntax tree as dataclasses: `Program`, `PipeFlow`,
  `FunctionDef`, `ImportStmt`, `Comment`, `Branch`, `OnFail`, `DirectiveFlow`,
  `FunctionCall`, `SecretCall`, the literals (`PathLiteral`, `StringLiteral`,
  `NumberLiteral`, `BooleanLiteral`), the other expressions (`Identifier`,
  `ObjectLiteral`, `BinaryOp`, `UnaryOp`, `Lambda`, `MemberAccess`), the
  `PipeOp` enum (`>>`, `>>>`, `->`), and `SourcePos` / `Span`.
  `Span.contains_zero_based(line, character)` tells whether a 0-based editor
  position lies inside a 1-based span.
- `loomlang.builtin_spec`: the catalogue of built-in directives
  (`BUILTIN_DIRECTIVES`), built-in functions (`BUILTIN_FUNCTIONS`), keywords
  (`KEYWORDS`) and common member fields (`MEMBER_FIELDS`), with the lookups
  `find_directive`, `find_builtin_function`, `is_known_runtime_directive`,
  `required_std_module_for_directive` and `is_known_builtin_function`.
- `loomlang.formatter`: a canonical pretty-printer. `format_program(program, max_width=100)`
  returns the source text; a pipe segment that would push a line past
  `max_width` is moved to a continuation line indented one level deeper.
  `Formatter(max_width)` does the same work, and its `format_program` appends
  to `Formatter.output`.
- `loomlang.lsp.text`: `Position` and `Range` (0-based, UTF-16 columns),
  `split_lines`, `utf16_col_to_char_idx`, `char_idx_to_utf16_col` and
  `get_word_at_position`.
- `loomlang.lsp.completion`: cursor-context helpers
  (`extract_import_prefix`, `extract_string_literal_prefix`,
  `get_signature_context`) and completion lists (`file_completion_items`,
  `import_completion_items` for `file://` URIs, and
  `completion_items_for_trigger` for `@`, `.` or no trigger), returned as
  `CompletionItem` dataclasses.
- `loomlang.lsp.symbols`: `document_symbols` (an outline of imports, functions
  and pipelines), `find_symbol_at_position` (the name under the cursor),
  `lsp_range_from_span` and `full_document_range`.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from loomlang.ast import DirectiveFlow, PathLiteral, PipeFlow, PipeOp, Program
from loomlang.formatter import format_program

flow = PipeFlow(
    source=PathLiteral("input.txt"),
    operations=[(PipeOp.SAFE, DirectiveFlow(name="log"))],
)
print(format_program(Program(statements=[flow]), 100), end="")
# "input.txt" >> @log
```

Looking up built-in documentation:

```python
from loomlang.builtin_spec import find_directive

spec = find_directive("read")
print(spec.signature)  # @read(path)
```

Completion at a cursor:

```python
from loomlang.lsp.completion import extract_import_prefix

print(extract_import_prefix('@import "std.c', 0, 14))  # ('std.c', 9)
```

## What it does not do

The package works on syntax trees that are built in code. It does not parse
Loom source text, does not validate programs, and does not run them: there is
no interpreter, no command-line tool and no language server process. The
`loomlang.lsp` modules compute the answers an editor would ask for (words,
completions, symbols, ranges) as plain Python objects; sending them over a
protocol connection is left to the caller.