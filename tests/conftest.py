import pytest

from cyk import CYKAlgorithm
from grammar import Grammar


def build(grammar: Grammar) -> Grammar:
    for nt in "SABC":
        grammar.add_non_terminal(nt)
    grammar.add_terminal("a")
    grammar.add_terminal("b")
    grammar.set_start_symbol("S")
    for lhs, rhs in [
        ("S", "AB"),
        ("S", "BC"),
        ("A", "BA"),
        ("A", "a"),
        ("B", "CC"),
        ("B", "b"),
        ("C", "AB"),
        ("C", "a"),
    ]:
        grammar.add_production(lhs, rhs)
    return grammar


@pytest.fixture
def grammar() -> Grammar:
    return build(Grammar())


@pytest.fixture
def algorithm() -> CYKAlgorithm:
    return build(CYKAlgorithm())
