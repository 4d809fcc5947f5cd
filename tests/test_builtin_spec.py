import pytest

from loomlang.builtin_spec import (
    BUILTIN_DIRECTIVES,
    BUILTIN_FUNCTIONS,
    KEYWORDS,
    MEMBER_FIELDS,
    find_builtin_function,
    find_directive,
    is_known_builtin_function,
    is_known_runtime_directive,
    required_std_module_for_directive,
)


@pytest.mark.parametrize(
    "name", ["watch", "atomic", "lines", "csv.parse", "log", "read", "write", "secret", "filter", "map"]
)
def test_runtime_directives_are_known(name):
    assert is_known_runtime_directive(name) is True


@pytest.mark.parametrize("name", ["http.post", "import", "foo.parse", ""])
def test_non_runtime_directives_are_unknown(name):
    assert is_known_runtime_directive(name) is False


def test_required_std_module():
    assert required_std_module_for_directive("http.post") == "http"
    assert required_std_module_for_directive("read") is None
    assert required_std_module_for_directive("foo.parse") is None


@pytest.mark.parametrize("name", ["filter", "map", "print", "concat", "exists"])
def test_builtin_functions_known(name):
    assert is_known_builtin_function(name) is True


def test_unknown_function():
    assert is_known_builtin_function("missing") is False


def test_find_directive_signature():
    spec = find_directive("read")
    assert spec.signature == "@read(path)"
    assert find_directive("nope") is None


def test_find_builtin_function_signature():
    spec = find_builtin_function("concat")
    assert spec.signature == "concat(a, b, ...)"
    assert find_builtin_function("nope") is None


def test_names_are_unique():
    for spec in BUILTIN_DIRECTIVES:
        assert find_directive(spec.name) is spec
    for spec in BUILTIN_FUNCTIONS:
        assert find_builtin_function(spec.name) is spec


def test_signatures_start_with_name():
    for spec in BUILTIN_DIRECTIVES:
        assert find_directive(spec.name).signature.startswith("@" + spec.name)
    for spec in BUILTIN_FUNCTIONS:
        assert find_builtin_function(spec.name).signature.startswith(spec.name + "(")


def test_keywords_and_fields_are_not_builtins():
    for name, _ in KEYWORDS:
        assert is_known_builtin_function(name) is False
        assert find_directive(name) is None
    for name, _ in MEMBER_FIELDS:
        assert is_known_runtime_directive(name) is False