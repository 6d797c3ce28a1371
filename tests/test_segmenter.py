from notecell.core.segmenter import is_open, split_blocks, split_by_indent


def test_top_level_lines_are_separate_blocks() -> None:
    assert split_blocks("x = 1\ny = 2") == ["x = 1", "y = 2"]


def test_indented_lines_stay_with_their_opening_line() -> None:
    code = "def f():\n    x = 1\n\n    return x\nprint(f())"
    assert split_blocks(code) == ["def f():\n    x = 1\n\n    return x", "print(f())"]


def test_blank_lines_between_blocks_are_dropped() -> None:
    assert split_blocks("x = 1\n\n\ny = 2\n\n") == ["x = 1", "y = 2"]


def test_directive_and_import_lines_are_single_blocks() -> None:
    assert split_blocks("import os\n:t os\nos.sep") == ["import os", ":t os", "os.sep"]


def test_parenthesized_import_spans_lines() -> None:
    code = "from os import (\n    path,\n    sep,\n)\nx = 1"
    assert split_blocks(code) == ["from os import (\n    path,\n    sep,\n)", "x = 1"]


def test_clause_keywords_continue_the_block() -> None:
    code = "if x:\n    a = 1\nelse:\n    a = 2\nprint(a)"
    assert split_blocks(code) == ["if x:\n    a = 1\nelse:\n    a = 2", "print(a)"]


def test_open_brackets_continue_at_column_zero() -> None:
    code = "x = [\n1,\n2,\n]\nprint(x)"
    assert split_blocks(code) == ["x = [\n1,\n2,\n]", "print(x)"]


def test_annotation_is_glued_to_following_definition() -> None:
    code = "f: Callable[[int], int]\ndef f(x):\n    return x + 1"
    assert split_blocks(code) == [code]


def test_annotation_is_not_glued_to_directive() -> None:
    assert split_blocks("x: int\n:t x") == ["x: int", ":t x"]


def test_decorators_are_glued_to_definition() -> None:
    code = "@first\n@second\ndef f():\n    pass\nf()"
    assert split_blocks(code) == ["@first\n@second\ndef f():\n    pass", "f()"]


def test_split_by_indent_returns_remaining_lines() -> None:
    assert split_by_indent(["a", "  b", "c"]) == ("a\n  b", ["c"])


def test_is_open_detects_unfinished_text() -> None:
    assert is_open("x = (1,")
    assert is_open('s = """start')
    assert not is_open("x = (1, 2)")
