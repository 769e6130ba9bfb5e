from dataclasses import dataclass
from typing_extensions import *

from graphviz import Digraph

from grammar import CompiledGrammar, Grammar, InvalidWordSymbol


@dataclass(frozen=True)
class ParseTable:
    """
    Triangular CYK table for one word.

    rows[s - 1][i] is the bitmask of non-terminals deriving word[i:i + s];
    row s has len(word) - s + 1 cells.
    """

    word: str
    grammar: CompiledGrammar
    rows: Tuple[Tuple[int, ...], ...]

    def cell(self, i: int, span: int) -> Tuple[str, ...]:
        if span < 1 or i < 0 or i + span > len(self.word):
            raise IndexError(f"No cell for offset {i}, span {span} in {self.word!r}")
        return self.grammar.symbols(self.rows[span - 1][i])

    def cells(self) -> List[Tuple[str, ...]]:
        """Every cell, span 1 first and by increasing offset within a span."""
        return [self.grammar.symbols(mask) for row in self.rows for mask in row]

    def accepts(self) -> bool:
        if not self.rows:
            return False
        return bool(self.rows[-1][0] & self.grammar.bit(self.grammar.start))


# ---------------------------------------------------------------------- #
# CYK engine
# ---------------------------------------------------------------------- #


def _check_word(g: CompiledGrammar, word: str):
    for symbol in word:
        if symbol not in g.terminals:
            raise InvalidWordSymbol(
                f"Word {word!r} contains {symbol!r}, which is not a declared terminal"
            )


def _combine(g: CompiledGrammar, left: int, right: int) -> int:
    heads = 0
    if left and right:
        for b, c, a in g.binary:
            if left & b and right & c:
                heads |= a
    return heads


def _compute(g: CompiledGrammar, word: str) -> ParseTable:
    n = len(word)
    if n == 0:
        return ParseTable(word=word, grammar=g, rows=())

    # Length 1 substrings
    rows: List[List[int]] = [[g.unary.get(a, 0) for a in word]]

    # Length > 1 substrings: split word[i:i+s] into word[i:i+k] + word[i+k:i+s]
    for s in range(2, n + 1):
        row: List[int] = []
        for i in range(n - s + 1):
            mask = 0
            for k in range(1, s):
                mask |= _combine(g, rows[k - 1][i], rows[s - k - 1][i + k])
            row.append(mask)
        rows.append(row)

    return ParseTable(word=word, grammar=g, rows=tuple(tuple(r) for r in rows))


def compute_table(grammar: Grammar, word: str) -> ParseTable:
    g = grammar.compile()
    _check_word(g, word)
    return _compute(g, word)


def is_derived(grammar: Grammar, word: str) -> bool:
    """
    CYK membership test: True iff word is in L(grammar).

    CNF has no epsilon rules, so the empty word is never derived.
    """
    g = grammar.compile()
    _check_word(g, word)
    if not word:
        return False
    return _compute(g, word).accepts()


# ---------------------------------------------------------------------- #
# Table formatting
# ---------------------------------------------------------------------- #


def format_table(table: ParseTable) -> str:
    lines = []
    for row in table.rows:
        cells = ["".join(table.grammar.symbols(mask)) for mask in row]
        lines.append("\t".join(cells) + "\n")
    return "".join(lines)


def render_table(grammar: Grammar, word: str) -> str:
    """
    Tab-separated CYK table, one line per span, terminal row first.

    Cells list their non-terminals in alphabetical order; an empty cell is
    an empty field.
    """
    return format_table(compute_table(grammar, word))


def table_to_graphviz(
    grammar: Grammar,
    word: str,
    filename: str = "cyk_table",
    view: bool = True,
    render: bool = True,
) -> Digraph:
    """Generate a Graphviz view of the CYK triangle, one rank per span."""
    table = compute_table(grammar, word)
    g = table.grammar
    n = len(word)

    dot = Digraph(
        name="CYK",
        format="png",
        graph_attr={
            "rankdir": "BT",
            "splines": "true",
            "nodesep": "0.4",
            "ranksep": "0.8",
            "label": f"CYK table for '{word}'",
            "labelloc": "t",
            "fontsize": "14",
            "fontname": "Arial",
            "bgcolor": "white",
            "pad": "0.5",
            "dpi": "300",
        },
        node_attr={
            "shape": "box",
            "fontsize": "14",
            "fontname": "Arial",
            "style": "filled",
            "fillcolor": "lightblue",
            "color": "black",
            "penwidth": "2",
        },
        edge_attr={
            "fontsize": "12",
            "fontname": "Arial",
            "arrowsize": "0.8",
            "penwidth": "1.5",
            "color": "black",
        },
    )

    def node_id(i: int, s: int) -> str:
        return f"c{i}_{s}"

    for s, row in enumerate(table.rows, start=1):
        with dot.subgraph() as rank:
            rank.attr(rank="same")
            for i, mask in enumerate(row):
                syms = g.symbols(mask)
                label = "{" + ",".join(syms) + "}" if syms else "∅"
                if s == 1:
                    label = f"{word[i]}\n{label}"
                fill = "lightgreen" if s == n and mask & g.bit(g.start) else "lightblue"
                if not mask:
                    fill = "white"
                rank.node(node_id(i, s), label=label, fillcolor=fill)

    for s in range(2, n + 1):
        for i in range(n - s + 1):
            for k in range(1, s):
                if _combine(g, table.rows[k - 1][i], table.rows[s - k - 1][i + k]):
                    dot.edge(node_id(i, k), node_id(i, s))
                    dot.edge(node_id(i + k, s - k), node_id(i, s))

    if render:
        dot.render(filename, view=view, cleanup=True)
    return dot


class CYKAlgorithm(Grammar):
    """
    A grammar that answers CYK queries about itself.

    `cells` holds the flattened table of the most recent query and is
    rebuilt by every is_derived / render_table call.
    """

    def __init__(self):
        super().__init__()
        self.cells: List[Tuple[str, ...]] = []

    def is_derived(self, word: str) -> bool:
        self.cells = []
        g = self.compile()
        _check_word(g, word)
        if not word:
            return False
        table = _compute(g, word)
        self.cells = table.cells()
        return table.accepts()

    def render_table(self, word: str) -> str:
        self.cells = []
        table = compute_table(self, word)
        self.cells = table.cells()
        return format_table(table)

    def remove_grammar(self):
        super().remove_grammar()
        self.cells = []
