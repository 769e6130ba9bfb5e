from copy import deepcopy
from dataclasses import dataclass
from types import MappingProxyType
from typing_extensions import *


class CYKError(ValueError):
    """Base class for every grammar construction and CYK query failure."""


class InvalidSymbol(CYKError):
    pass


class DuplicateSymbol(CYKError):
    pass


class UnknownSymbol(CYKError):
    pass


class NotInCNF(CYKError):
    pass


class DuplicateProduction(CYKError):
    pass


class InvalidWordSymbol(CYKError):
    pass


class GrammarNotReady(CYKError):
    pass


def is_non_terminal_symbol(symbol: Any) -> bool:
    return isinstance(symbol, str) and len(symbol) == 1 and symbol.isupper()


def is_terminal_symbol(symbol: Any) -> bool:
    return isinstance(symbol, str) and len(symbol) == 1 and symbol.islower()


@dataclass(frozen=True)
class CompiledGrammar:
    """
    Read-only view of a CNF grammar, shaped for the CYK inner loop.

    Every non-terminal gets a dense bit index (its position in
    `nonterminals`, which is sorted), so a set of non-terminals is a plain
    int mask and reads back in alphabetical order.

    unary:  terminal -> mask of heads A with A -> terminal
    binary: (left_bit, right_bit, head_bit) for every A -> BC
    """

    nonterminals: Tuple[str, ...]
    terminals: Tuple[str, ...]
    start: str
    unary: Mapping[str, int]
    binary: Tuple[Tuple[int, int, int], ...]

    def bit(self, symbol: str) -> int:
        return 1 << self.nonterminals.index(symbol)

    def symbols(self, mask: int) -> Tuple[str, ...]:
        """Non-terminals in `mask`, in alphabetical order."""
        return tuple(
            nt for idx, nt in enumerate(self.nonterminals) if mask >> idx & 1
        )


class Grammar:
    def __init__(self):
        self.nonterminals: List[str] = []
        self.terminals: List[str] = []
        self.start: Optional[str] = None
        self.productions: Dict[str, List[str]] = {}

    # ------------------------------------------------------------------ #
    # Basic symbol / production management
    # ------------------------------------------------------------------ #

    def add_non_terminal(self, symbol: str):
        if not is_non_terminal_symbol(symbol):
            raise InvalidSymbol(f"Non-terminal must be one uppercase letter: {symbol!r}")
        if symbol in self.nonterminals:
            raise DuplicateSymbol(f"Non-terminal already declared: {symbol}")
        self.nonterminals.append(symbol)

    def add_terminal(self, symbol: str):
        if not is_terminal_symbol(symbol):
            raise InvalidSymbol(f"Terminal must be one lowercase letter: {symbol!r}")
        if symbol in self.terminals:
            raise DuplicateSymbol(f"Terminal already declared: {symbol}")
        self.terminals.append(symbol)

    def set_start_symbol(self, symbol: str):
        if symbol not in self.nonterminals:
            raise UnknownSymbol(f"Start symbol is not a declared non-terminal: {symbol!r}")
        self.start = symbol

    def _validate_production(self, lhs: str, rhs: str):
        """Raise unless lhs -> rhs is a CNF rule over the declared symbols."""
        if lhs not in self.nonterminals:
            raise UnknownSymbol(f"Production head is not a declared non-terminal: {lhs!r}")

        if len(rhs) == 1:
            if rhs not in self.terminals:
                raise NotInCNF(f"{lhs} -> {rhs}: a single symbol must be a declared terminal")
        elif len(rhs) == 2:
            if rhs[0] not in self.nonterminals or rhs[1] not in self.nonterminals:
                raise NotInCNF(f"{lhs} -> {rhs}: a pair must be two declared non-terminals")
        else:
            raise NotInCNF(f"{lhs} -> {rhs}: body must have one or two symbols")

        if rhs in self.productions.get(lhs, []):
            raise DuplicateProduction(f"Production already defined: {lhs} -> {rhs}")

    def add_production(self, lhs: str, rhs: Union[str, List[str]]):
        if not isinstance(rhs, str):
            if not isinstance(rhs, (list, tuple)) or not all(
                isinstance(symbol, str) for symbol in rhs
            ):
                raise NotInCNF(f"{lhs} -> {rhs!r}: body symbols must be strings")
            rhs = "".join(rhs)

        self._validate_production(lhs, rhs)
        self.productions.setdefault(lhs, []).append(rhs)

    def remove_grammar(self):
        self.nonterminals = []
        self.terminals = []
        self.start = None
        self.productions = {}

    # ------------------------------------------------------------------ #
    # Introspection / pretty-printing
    # ------------------------------------------------------------------ #

    def get_productions(self, nonterminal: str) -> str:
        bodies = self.productions.get(nonterminal)
        if not bodies:
            return ""
        return f"{nonterminal}::=" + "|".join(bodies)

    def get_grammar(self) -> str:
        return "".join(self.get_productions(nt) + "\n" for nt in self.nonterminals)

    def __str__(self):
        result = "Grammar (CNF)\n"
        result += f"  Non-terminals: {{{', '.join(self.nonterminals)}}}\n"
        result += f"  Terminals: {{{', '.join(self.terminals)}}}\n"
        result += f"  Start symbol: {self.start or '-'}\n"
        result += "  Productions:\n"

        for lhs in self.nonterminals:
            if lhs in self.productions:
                result += f"    {lhs} -> {' | '.join(self.productions[lhs])}\n"

        return result

    def __eq__(self, other):
        if not isinstance(other, Grammar):
            return NotImplemented
        return (
            self.nonterminals == other.nonterminals
            and self.terminals == other.terminals
            and self.start == other.start
            and self.productions == other.productions
        )

    def copy(self) -> "Grammar":
        new_grammar = Grammar()
        new_grammar.nonterminals = list(self.nonterminals)
        new_grammar.terminals = list(self.terminals)
        new_grammar.start = self.start
        new_grammar.productions = deepcopy(self.productions)
        return new_grammar

    def compile(self) -> CompiledGrammar:
        """Freeze the grammar for a CYK run; it must have a start symbol and rules."""
        if not self.productions:
            raise GrammarNotReady("Grammar has no productions")
        if self.start is None:
            raise GrammarNotReady("Grammar has no start symbol")

        nonterminals = tuple(sorted(self.nonterminals))
        index = {nt: idx for idx, nt in enumerate(nonterminals)}
        unary: Dict[str, int] = {}
        binary: List[Tuple[int, int, int]] = []

        for lhs in self.nonterminals:
            head = 1 << index[lhs]
            for rhs in self.productions.get(lhs, []):
                if len(rhs) == 1:
                    unary[rhs] = unary.get(rhs, 0) | head
                else:
                    binary.append((1 << index[rhs[0]], 1 << index[rhs[1]], head))

        return CompiledGrammar(
            nonterminals=nonterminals,
            terminals=tuple(self.terminals),
            start=self.start,
            unary=MappingProxyType(unary),
            binary=tuple(binary),
        )

    # ------------------------------------------------------------------ #
    # Parsing from file / string (simplified format)
    # ------------------------------------------------------------------ #

    @classmethod
    def from_file(cls, filename: str) -> "Grammar":
        with open(filename, "r", encoding="utf-8") as f:
            content = f.read()
        return cls.from_string(content)

    @classmethod
    def from_string(cls, content: str) -> "Grammar":
        return cls._parse_simplified_format(content)

    @classmethod
    def _parse_simplified_format(cls, content: str) -> "Grammar":
        declared_nt: List[str] = []
        declared_t: List[str] = []
        specified_start = None
        productions: List[Tuple[str, List[str]]] = []

        # First pass: collect declarations and productions
        for line in content.strip().split("\n"):
            if "#" in line:
                line = line[: line.index("#")]
            line = line.strip()

            if not line:
                continue

            if line.startswith("START:"):
                specified_start = line.split(":", 1)[1].strip()
                continue

            if line.startswith("NON_TERMINALS:") or line.startswith("NONTERMINALS:"):
                declared_nt.extend(line.split(":", 1)[1].split())
                continue

            if line.startswith("TERMINALS:"):
                declared_t.extend(line.split(":", 1)[1].split())
                continue

            if "->" in line or "→" in line or "::=" in line:
                line = line.replace("→", "->").replace("::=", "->")
                lhs, rhs_alternatives = line.split("->", 1)
                lhs = lhs.strip()
                if lhs.startswith("<") and lhs.endswith(">"):
                    lhs = lhs[1:-1]
                bodies = [
                    "".join(rhs.split()) for rhs in rhs_alternatives.split("|")
                ]
                productions.append((lhs, bodies))
                continue

            raise ValueError(f"Cannot parse grammar line: {line!r}")

        g = cls()

        for nt in declared_nt:
            g.add_non_terminal(nt)
        for t in declared_t:
            g.add_terminal(t)

        # Second pass: auto-declare remaining symbols by letter case
        for lhs, bodies in productions:
            for symbol in lhs + "".join(bodies):
                if symbol in g.nonterminals or symbol in g.terminals:
                    continue
                if is_non_terminal_symbol(symbol):
                    g.add_non_terminal(symbol)
                elif is_terminal_symbol(symbol):
                    g.add_terminal(symbol)

        if specified_start:
            start_symbol = specified_start
        elif "S" in g.nonterminals:
            start_symbol = "S"
        elif productions:
            start_symbol = productions[0][0]
        else:
            raise ValueError("No productions found or unable to determine start symbol")

        g.set_start_symbol(start_symbol)

        for lhs, bodies in productions:
            for rhs in bodies:
                g.add_production(lhs, rhs)

        return g
