import pytest

from grammar import (
    CYKError,
    DuplicateProduction,
    DuplicateSymbol,
    Grammar,
    GrammarNotReady,
    InvalidSymbol,
    NotInCNF,
    UnknownSymbol,
)


@pytest.mark.parametrize("symbol", ["a", "1", "+", "AB", "", None])
def test_add_non_terminal_rejects_non_uppercase(symbol):
    g = Grammar()
    with pytest.raises(InvalidSymbol):
        g.add_non_terminal(symbol)
    assert g.nonterminals == []


@pytest.mark.parametrize("symbol", ["A", "1", "-", "ab", "", None])
def test_add_terminal_rejects_non_lowercase(symbol):
    g = Grammar()
    with pytest.raises(InvalidSymbol):
        g.add_terminal(symbol)
    assert g.terminals == []


def test_duplicate_symbols():
    g = Grammar()
    g.add_non_terminal("S")
    g.add_terminal("a")
    with pytest.raises(DuplicateSymbol):
        g.add_non_terminal("S")
    with pytest.raises(DuplicateSymbol):
        g.add_terminal("a")
    assert g.nonterminals == ["S"]
    assert g.terminals == ["a"]


def test_symbols_keep_insertion_order():
    g = Grammar()
    for nt in "SZAB":
        g.add_non_terminal(nt)
    for t in "zba":
        g.add_terminal(t)
    assert g.nonterminals == ["S", "Z", "A", "B"]
    assert g.terminals == ["z", "b", "a"]


def test_errors_are_value_errors():
    assert issubclass(InvalidSymbol, CYKError)
    assert issubclass(CYKError, ValueError)


def test_set_start_symbol():
    g = Grammar()
    g.add_non_terminal("S")
    g.add_non_terminal("A")
    with pytest.raises(UnknownSymbol):
        g.set_start_symbol("B")
    assert g.start is None
    g.set_start_symbol("S")
    g.set_start_symbol("A")
    assert g.start == "A"


def test_production_head_must_be_declared(grammar):
    with pytest.raises(UnknownSymbol):
        grammar.add_production("D", "a")
    with pytest.raises(UnknownSymbol):
        grammar.add_production("a", "a")


@pytest.mark.parametrize(
    "body",
    ["", "A", "c", "ab", "aB", "AD", "ABC", "abc"],
)
def test_production_body_must_be_cnf(grammar, body):
    before = grammar.get_grammar()
    with pytest.raises(NotInCNF):
        grammar.add_production("S", body)
    assert grammar.get_grammar() == before


def test_duplicate_production_compared_by_value(grammar):
    # Built at runtime so it is not the same object as the stored body
    body = "".join(["A", "B"])
    with pytest.raises(DuplicateProduction):
        grammar.add_production("S", body)
    with pytest.raises(DuplicateProduction):
        grammar.add_production("A", "a")
    # Same body under another head is fine
    grammar.add_production("B", "a")
    assert grammar.get_productions("B") == "B::=CC|b|a"


def test_production_body_as_sequence(grammar):
    grammar.add_production("S", ["C", "C"])
    assert grammar.get_productions("S") == "S::=AB|BC|CC"
    with pytest.raises(DuplicateProduction):
        grammar.add_production("S", ("A", "B"))


@pytest.mark.parametrize("body", [["A", None], [1, 2], ("a", b"b"), None, 7])
def test_production_body_with_non_string_symbols(grammar, body):
    before = grammar.get_grammar()
    with pytest.raises(NotInCNF):
        grammar.add_production("S", body)
    assert grammar.get_grammar() == before


def test_get_productions(grammar):
    assert grammar.get_productions("S") == "S::=AB|BC"
    assert grammar.get_productions("A") == "A::=BA|a"
    assert grammar.get_productions("a") == ""
    assert grammar.get_productions("Z") == ""


def test_get_grammar_lists_non_terminals_in_order(grammar):
    assert grammar.get_grammar() == (
        "S::=AB|BC\n"
        "A::=BA|a\n"
        "B::=CC|b\n"
        "C::=AB|a\n"
    )


def test_get_grammar_with_partial_productions():
    g = Grammar()
    g.add_non_terminal("S")
    g.add_non_terminal("A")
    g.add_non_terminal("B")
    g.add_terminal("a")
    g.add_production("S", "AA")
    g.add_production("A", "a")
    assert g.get_grammar() == "S::=AA\nA::=a\n\n"


def test_remove_grammar_resets_state(grammar):
    grammar.remove_grammar()
    assert grammar == Grammar()
    assert grammar.get_grammar() == ""

    # Symbols can be declared again after a reset
    grammar.add_non_terminal("S")
    grammar.add_terminal("a")
    grammar.set_start_symbol("S")
    grammar.add_production("S", "a")
    assert grammar.get_grammar() == "S::=a\n"


def test_copy_is_independent(grammar):
    clone = grammar.copy()
    assert clone == grammar
    clone.add_production("S", "CC")
    assert grammar.get_productions("S") == "S::=AB|BC"


def test_compile_requires_start_and_productions():
    g = Grammar()
    g.add_non_terminal("S")
    g.add_terminal("a")
    with pytest.raises(GrammarNotReady):
        g.compile()
    g.set_start_symbol("S")
    with pytest.raises(GrammarNotReady):
        g.compile()
    g.add_production("S", "a")
    assert g.compile().start == "S"

    h = Grammar()
    h.add_non_terminal("S")
    h.add_terminal("a")
    h.add_production("S", "a")
    with pytest.raises(GrammarNotReady):
        h.compile()


def test_compile_uses_dense_bits(grammar):
    g = grammar.compile()
    assert g.nonterminals == ("A", "B", "C", "S")
    # A -> a and C -> a
    assert g.unary["a"] == 0b0101
    assert g.unary["b"] == 0b0010
    assert (0b0001, 0b0010, 0b1000) in g.binary  # S -> AB
    assert g.symbols(0b1101) == ("A", "C", "S")
    with pytest.raises(TypeError):
        g.unary["c"] = 1


def test_str(grammar):
    text = str(grammar)
    assert "Non-terminals: {S, A, B, C}" in text
    assert "Start symbol: S" in text
    assert "S -> AB | BC" in text


def test_from_string():
    g = Grammar.from_string(
        """
        # Hopcroft & Ullman example
        START: S
        S ::= AB | BC
        A -> BA | a
        B → CC | b
        C -> AB | a
        """
    )
    assert g.nonterminals == ["S", "A", "B", "C"]
    assert g.terminals == ["a", "b"]
    assert g.start == "S"
    assert g.get_productions("B") == "B::=CC|b"


def test_from_string_declarations_fix_order():
    g = Grammar.from_string(
        "NONTERMINALS: A S\nTERMINALS: b a\nS -> AA\nA -> a | b\n"
    )
    assert g.nonterminals == ["A", "S"]
    assert g.terminals == ["b", "a"]
    assert g.start == "S"


def test_from_string_start_defaults_to_first_head():
    g = Grammar.from_string("X -> YY\nY -> y\n")
    assert g.start == "X"


def test_from_string_errors():
    with pytest.raises(NotInCNF):
        Grammar.from_string("S -> aB\nB -> b\n")
    with pytest.raises(ValueError):
        Grammar.from_string("# nothing here\n")
    with pytest.raises(ValueError):
        Grammar.from_string("S = a\n")


def test_from_file(tmp_path):
    path = tmp_path / "g.txt"
    path.write_text("S -> AA | a\nA -> a\n", encoding="utf-8")
    g = Grammar.from_file(str(path))
    assert g.get_grammar() == "S::=AA|a\nA::=a\n"
