from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Set, Tuple


class SymbolKind(Enum):
	TERMINAL = auto()
	IDENTIFIER = auto()
	END_OF_INPUT = auto()
	NONTERMINAL = auto()
	# Only ever appears inside FIRST sets.
	EMPTY = auto()


@dataclass(frozen=True)
class Symbol:
	kind: SymbolKind
	name: str

	@property
	def is_nonterminal(self) -> bool:
		return self.kind is SymbolKind.NONTERMINAL

	def __str__(self) -> str:
		return self.name

	def __repr__(self) -> str:
		return f"{self.kind.name.lower()}:{self.name}"


EPS = "ε"
NAME_MARKER = "NAME"
EOF_MARKER = "END_OF_FILE"

IDENTIFIER = Symbol(SymbolKind.IDENTIFIER, NAME_MARKER)
END_OF_INPUT = Symbol(SymbolKind.END_OF_INPUT, EOF_MARKER)
EMPTY = Symbol(SymbolKind.EMPTY, EPS)

_MARKERS = frozenset({NAME_MARKER, EOF_MARKER})


def Terminal(name: str) -> Symbol:
	return Symbol(SymbolKind.TERMINAL, name)


def Nonterminal(name: str) -> Symbol:
	return Symbol(SymbolKind.NONTERMINAL, name)


def symbol_key(sym: Symbol) -> Tuple[int, str]:
	"""Deterministic ordering: kind first, then name."""
	return (sym.kind.value, sym.name)


def sorted_symbols(symbols: Iterable[Symbol]) -> List[Symbol]:
	return sorted(symbols, key=symbol_key)


@dataclass(frozen=True)
class Production:
	lhs: str
	rhs: Tuple[Symbol, ...]

	@property
	def is_empty(self) -> bool:
		return len(self.rhs) == 0

	def __str__(self) -> str:
		if self.is_empty:
			return f"{self.lhs} -> {EPS}"
		return f"{self.lhs} -> " + " ".join(str(s) for s in self.rhs)


@dataclass(frozen=True)
class Grammar:
	"""
	Immutable grammar: nonterminal name -> ordered alternatives, plus the
	reserved keyword vocabulary.

	The alternative index (position inside ``rules[name]``) is what the
	parsing table stores. Nothing here checks that references resolve; that
	is the validator's job.
	"""

	start: str
	rules: Mapping[str, Tuple[Production, ...]]
	vocabulary: FrozenSet[str] = field(default_factory=frozenset)

	def __post_init__(self) -> None:
		rules = {name: tuple(alts) for name, alts in self.rules.items()}
		object.__setattr__(self, "rules", MappingProxyType(rules))
		# The markers are never keywords, so the vocabulary cannot shadow them.
		object.__setattr__(self, "vocabulary", frozenset(self.vocabulary) - _MARKERS)

	@property
	def nonterminals(self) -> Tuple[str, ...]:
		return tuple(self.rules.keys())

	@property
	def terminals(self) -> Set[Symbol]:
		terms: Set[Symbol] = {Terminal(t) for t in self.vocabulary}
		terms.add(IDENTIFIER)
		terms.add(END_OF_INPUT)
		return terms

	@property
	def productions(self) -> Tuple[Production, ...]:
		return tuple(p for alts in self.rules.values() for p in alts)

	def alternatives(self, name: str) -> Tuple[Production, ...]:
		return self.rules[name]

	def is_declared(self, sym: Symbol) -> bool:
		if sym.kind is SymbolKind.NONTERMINAL:
			return sym.name in self.rules
		if sym.kind is SymbolKind.TERMINAL:
			return sym.name in self.vocabulary
		return sym.kind in (SymbolKind.IDENTIFIER, SymbolKind.END_OF_INPUT)

	def __str__(self) -> str:
		return "\n".join(str(p) for p in self.productions)


def build_grammar(*, start: str, rules: Mapping[str, Sequence[Sequence[Symbol]]], vocabulary: Iterable[str] = ()) -> Grammar:
	"""Build a Grammar from already-resolved symbol sequences."""
	resolved: Dict[str, Tuple[Production, ...]] = {}
	for name, alts in rules.items():
		resolved[name] = tuple(Production(name, tuple(alt)) for alt in alts)
	return Grammar(start=start, rules=resolved, vocabulary=frozenset(vocabulary))


def resolve_reference(ref: str, vocabulary: FrozenSet[str], *, prefix: str = "e") -> Symbol:
	"""
	Map one textual symbol reference of the definition format to a Symbol.

	Reserved tokens win over the nonterminal prefix, so a keyword such as
	``End`` or ``Else`` stays a terminal even though it starts with ``E``.
	"""
	if ref == NAME_MARKER:
		return IDENTIFIER
	if ref == EOF_MARKER:
		return END_OF_INPUT
	if ref in vocabulary:
		return Terminal(ref)
	if prefix and ref.startswith(prefix) and len(ref) > len(prefix):
		return Nonterminal(ref[len(prefix) :])
	return Terminal(ref)


def load_grammar(
	definition: Mapping[str, Sequence[Sequence[str]]],
	tokens: Iterable[str],
	*,
	start: str,
	prefix: str = "e",
) -> Grammar:
	"""
	Load the nested-list definition format, e.g.:

	  Program    : [['eStatements', 'END_OF_FILE']]
	  Statements : [['eStatement', 'eStatements'], []]

	``tokens`` is the reserved keyword vocabulary; duplicates collapse.
	"""
	vocabulary = frozenset(tokens)
	rules: Dict[str, List[List[Symbol]]] = {}
	for name, alts in definition.items():
		rules[name] = [[resolve_reference(ref, vocabulary, prefix=prefix) for ref in alt] for alt in alts]
	return build_grammar(start=start, rules=rules, vocabulary=vocabulary)


_EPS_SPELLINGS = {"ε", "eps", "epsilon"}
_EOF_SPELLINGS = {"$", EOF_MARKER}


def parse_grammar_lines(*, start: str, lines: Sequence[str], tokens: Optional[Iterable[str]] = None) -> Grammar:
	"""
	Parse a small CFG given as production lines, e.g.:

	  E  -> T E'
	  E' -> + T E' | ε
	  T  -> F T'

	Notes:
	- Nonterminals are inferred from LHS symbols; repeated LHS lines append alternatives.
	- Alternatives can be separated by '|'.
	- Epsilon can be written as 'ε', 'eps', or 'epsilon' (case-insensitive).
	- 'NAME' is the identifier class, '$' or 'END_OF_FILE' the end of input.
	- Without ``tokens``, every other right-hand name becomes a reserved terminal.
	"""
	raw: List[Tuple[str, List[str]]] = []
	order: List[str] = []

	for raw_line in lines:
		line = (raw_line or "").strip()
		if not line or line.startswith("#") or line.startswith("//"):
			continue
		if "->" not in line:
			raise ValueError(f"Invalid production (missing '->'): {raw_line}")
		lhs, rhs = line.split("->", 1)
		lhs = lhs.strip()
		if not lhs:
			raise ValueError(f"Invalid production (empty LHS): {raw_line}")
		if lhs not in order:
			order.append(lhs)
		raw.append((lhs, [p.strip() for p in rhs.split("|")]))

	nonterminals = set(order)
	alternatives: Dict[str, List[List[str]]] = {nt: [] for nt in order}
	for lhs, alts in raw:
		for alt in alts:
			names = [t for t in alt.split() if t.strip() and t.lower() not in _EPS_SPELLINGS]
			alternatives[lhs].append(names)

	if tokens is None:
		inferred: Set[str] = set()
		for alts in alternatives.values():
			for names in alts:
				for n in names:
					if n not in nonterminals and n != NAME_MARKER and n not in _EOF_SPELLINGS:
						inferred.add(n)
		vocabulary = frozenset(inferred)
	else:
		vocabulary = frozenset(tokens)

	def resolve(n: str) -> Symbol:
		if n in nonterminals:
			return Nonterminal(n)
		if n == NAME_MARKER:
			return IDENTIFIER
		if n in _EOF_SPELLINGS:
			return END_OF_INPUT
		return Terminal(n)

	rules = {nt: [[resolve(n) for n in names] for names in alts] for nt, alts in alternatives.items()}
	return build_grammar(start=start, rules=rules, vocabulary=vocabulary)
