from notecell.core.joiner import declared_name, join_multiline_declarations
from notecell.core.types import Declaration, Import, Statement


def test_declared_name_skips_keywords_and_decorators() -> None:
    assert declared_name("f: int") == "f"
    assert declared_name("def f(x):\n    return x") == "f"
    assert declared_name("async def g():\n    pass") == "g"
    assert declared_name("class Foo(Base):\n    pass") == "Foo"
    assert declared_name("@dec\ndef h():\n    pass") == "h"
    assert declared_name("type Alias = int") == "Alias"
    assert declared_name("typed: int") == "typed"


def test_adjacent_declarations_of_same_name_join_in_order() -> None:
    commands = [Declaration("x: int"), Declaration("x: int = 5"), Statement("print(x)")]
    assert join_multiline_declarations(commands) == [Declaration("x: int\nx: int = 5"), Statement("print(x)")]


def test_non_declarations_are_never_grouped() -> None:
    commands = [Statement("x"), Statement("x"), Import("import os"), Import("import os")]
    assert join_multiline_declarations(commands) == commands


def test_declarations_split_by_other_commands_stay_apart() -> None:
    commands = [Declaration("x: int"), Statement("pass"), Declaration("x: int = 1")]
    assert join_multiline_declarations(commands) == commands
