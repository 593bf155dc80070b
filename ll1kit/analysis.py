"""
Grammar analysis pipeline: validation -> FIRST -> FOLLOW -> LL(1) table.

Every stage is a pure function of its inputs; the results are immutable and
can be shared by any number of parsers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Set, Tuple

from .config import Settings
from .diagnostics import Diagnostic, DiagnosticCode, DiagnosticEngine, Severity
from .errors import FixpointDivergence, NonTerminatingGrammar, TableConflict, UndeclaredSymbol
from .grammar import EMPTY, Grammar, Production, Symbol, SymbolKind, sorted_symbols

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Validator


def check_declared(grammar: Grammar) -> None:
	if grammar.start not in grammar.rules:
		raise UndeclaredSymbol(None, grammar.start)
	for p in grammar.productions:
		for sym in p.rhs:
			if sym.kind is SymbolKind.EMPTY or not grammar.is_declared(sym):
				raise UndeclaredSymbol(p.lhs, sym.name)


def _alternative_productive(p: Production, productive: Dict[str, bool]) -> bool:
	# Only the leading symbol is inspected.
	if p.is_empty:
		return True
	head = p.rhs[0]
	if head.is_nonterminal:
		return productive[head.name]
	return True


def compute_productive(grammar: Grammar) -> Dict[str, bool]:
	"""
	Fixpoint over "every alternative starts with a terminal, is empty, or
	starts with an already productive nonterminal".
	"""
	productive: Dict[str, bool] = {nt: False for nt in grammar.nonterminals}

	changed = True
	while changed:
		changed = False
		for nt, alts in grammar.rules.items():
			if productive[nt] or not alts:
				continue
			if all(_alternative_productive(p, productive) for p in alts):
				productive[nt] = True
				changed = True

	return productive


def validate_grammar(grammar: Grammar) -> Dict[str, bool]:
	check_declared(grammar)
	productive = compute_productive(grammar)
	for nt in grammar.nonterminals:
		if not productive[nt]:
			raise NonTerminatingGrammar(nt)
	log.info("grammar '%s' validated: %d nonterminals", grammar.start, len(productive))
	return productive


# ---------------------------------------------------------------------------
# FIRST sets


def _first_of_sequence(seq: Sequence[Symbol], *, first: Mapping[str, Set[Symbol]]) -> Set[Symbol]:
	"""
	FIRST(seq) computed left-to-right.
	Returns terminals plus EMPTY (if the entire sequence can derive epsilon).
	"""
	out: Set[Symbol] = set()
	for sym in seq:
		if not sym.is_nonterminal:
			out.add(sym)
			return out
		f = first.get(sym.name, set())
		out |= f - {EMPTY}
		if EMPTY not in f:
			return out
	out.add(EMPTY)
	return out


@dataclass(frozen=True)
class FirstSets:
	# alternatives[n][i] is FIRST of alternative i of n.
	alternatives: Mapping[str, Tuple[FrozenSet[Symbol], ...]]
	merged: Mapping[str, FrozenSet[Symbol]]

	def of(self, name: str) -> FrozenSet[Symbol]:
		return self.merged[name]

	def of_alternative(self, name: str, index: int) -> FrozenSet[Symbol]:
		return self.alternatives[name][index]

	def of_sequence(self, seq: Sequence[Symbol]) -> FrozenSet[Symbol]:
		return frozenset(_first_of_sequence(seq, first=self.merged))

	def nullable(self, name: str) -> bool:
		return EMPTY in self.merged[name]


def compute_first_sets(grammar: Grammar, diagnostics: Optional[DiagnosticEngine] = None) -> FirstSets:
	first: Dict[str, Set[Symbol]] = {nt: set() for nt in grammar.nonterminals}

	changed = True
	while changed:
		changed = False
		for p in grammar.productions:
			before = len(first[p.lhs])
			first[p.lhs] |= _first_of_sequence(p.rhs, first=first)
			if len(first[p.lhs]) != before:
				changed = True

	alternatives = {
		nt: tuple(frozenset(_first_of_sequence(p.rhs, first=first)) for p in alts)
		for nt, alts in grammar.rules.items()
	}
	result = FirstSets(
		alternatives=MappingProxyType(alternatives),
		merged=MappingProxyType({nt: frozenset(s) for nt, s in first.items()}),
	)
	if diagnostics is not None:
		report_first_ambiguities(result, diagnostics)
	return result


def report_first_ambiguities(first: FirstSets, diagnostics: DiagnosticEngine) -> None:
	"""Advisory only; the table builder has the final say."""
	for nt, per_alt in first.alternatives.items():
		seen: Dict[Symbol, int] = {}
		reported: Set[Symbol] = set()
		for index, symbols in enumerate(per_alt):
			for sym in sorted_symbols(symbols):
				if sym in seen and sym not in reported:
					reported.add(sym)
					log.warning("'%s' has '%s' in alternatives %d and %d", nt, sym, seen[sym], index)
					diagnostics.report(
						Severity.WARNING,
						DiagnosticCode.AMBIGUOUS_FIRST_SET,
						f"Nonterminal '{nt}' has '{sym}' token in multiple alternatives",
						nonterminal=nt,
						symbol=sym.name,
						hint=f"alternatives {seen[sym]} and {index}",
					)
				seen.setdefault(sym, index)


# ---------------------------------------------------------------------------
# FOLLOW sets


@dataclass(frozen=True)
class FollowSets:
	sets: Mapping[str, FrozenSet[Symbol]]
	passes: int
	# Snapshot of every follow set after each pass, in pass order.
	history: Tuple[Mapping[str, FrozenSet[Symbol]], ...]

	def of(self, name: str) -> FrozenSet[Symbol]:
		return self.sets[name]

	def added_in(self, pass_index: int) -> Dict[str, List[Symbol]]:
		"""Nonterminal -> symbols newly added during the given pass (0-based)."""
		after = self.history[pass_index]
		before = self.history[pass_index - 1] if pass_index > 0 else {}
		out: Dict[str, List[Symbol]] = {}
		for nt, syms in after.items():
			new = syms - before.get(nt, frozenset())
			if new:
				out[nt] = sorted_symbols(new)
		return out


def follow_pass_limit(grammar: Grammar) -> int:
	# Every pass but the last adds at least one terminal somewhere.
	return len(grammar.nonterminals) * len(grammar.terminals) + 1


def compute_follow_sets(
	grammar: Grammar,
	first: FirstSets,
	*,
	max_passes: Optional[int] = None,
	diagnostics: Optional[DiagnosticEngine] = None,
) -> FollowSets:
	follow: Dict[str, Set[Symbol]] = {nt: set() for nt in grammar.nonterminals}
	history: List[Mapping[str, FrozenSet[Symbol]]] = []
	limit = max_passes if max_passes is not None else follow_pass_limit(grammar)
	passes = 0

	changed = True
	while changed:
		if passes >= limit:
			raise FixpointDivergence(passes)
		passes += 1
		changed = False
		for p in grammar.productions:
			for i, sym in enumerate(p.rhs):
				if not sym.is_nonterminal:
					continue

				before = len(follow[sym.name])
				first_beta = first.of_sequence(p.rhs[i + 1 :])

				follow[sym.name] |= first_beta - {EMPTY}
				if EMPTY in first_beta:
					follow[sym.name] |= follow[p.lhs]

				if len(follow[sym.name]) != before:
					changed = True

		history.append(MappingProxyType({nt: frozenset(s) for nt, s in follow.items()}))
		log.debug("follow pass %d: changed=%s", passes, changed)

	log.info("follow sets converged after %d passes", passes)
	if diagnostics is not None:
		diagnostics.report(
			Severity.INFO,
			DiagnosticCode.FOLLOW_PASSES,
			f"FOLLOW sets converged after {passes} passes",
		)
	return FollowSets(
		sets=MappingProxyType({nt: frozenset(s) for nt, s in follow.items()}),
		passes=passes,
		history=tuple(history),
	)


# ---------------------------------------------------------------------------
# Parsing table


@dataclass(frozen=True)
class ParsingTable:
	"""
	table[NonTerminal][Terminal] = alternative index
	"""

	cells: Mapping[str, Mapping[Symbol, int]]

	def lookup(self, nonterminal: str, terminal: Symbol) -> Optional[int]:
		return self.cells.get(nonterminal, {}).get(terminal)

	def row(self, nonterminal: str) -> Mapping[Symbol, int]:
		return self.cells.get(nonterminal, MappingProxyType({}))

	def entries(self) -> List[Tuple[str, Symbol, int]]:
		out: List[Tuple[str, Symbol, int]] = []
		for nt, row in self.cells.items():
			for sym in sorted_symbols(row):
				out.append((nt, sym, row[sym]))
		return out


def selector_set(production: Production, first: FirstSets, follow: FollowSets) -> FrozenSet[Symbol]:
	"""Lookahead terminals that select this alternative."""
	first_rhs = first.of_sequence(production.rhs)
	selectors = set(first_rhs - {EMPTY})
	if EMPTY in first_rhs:
		selectors |= follow.of(production.lhs)
	return frozenset(selectors)


def build_parsing_table(grammar: Grammar, first: FirstSets, follow: FollowSets) -> ParsingTable:
	table: Dict[str, Dict[Symbol, int]] = {nt: {} for nt in grammar.nonterminals}

	for nt, alts in grammar.rules.items():
		for index, p in enumerate(alts):
			for a in sorted_symbols(selector_set(p, first, follow)):
				existing = table[nt].get(a)
				if existing is not None and existing != index:
					raise TableConflict(nt, a.name, existing, index)
				table[nt][a] = index

	log.info("parsing table built: %d cells", sum(len(r) for r in table.values()))
	return ParsingTable(cells=MappingProxyType({nt: MappingProxyType(row) for nt, row in table.items()}))


# ---------------------------------------------------------------------------
# Pipeline


@dataclass(frozen=True)
class Analysis:
	grammar: Grammar
	first: FirstSets
	follow: FollowSets
	table: ParsingTable
	diagnostics: Tuple[Diagnostic, ...]

	@property
	def warnings(self) -> List[Diagnostic]:
		return [d for d in self.diagnostics if d.severity is Severity.WARNING]


def reachable_nonterminals(grammar: Grammar) -> List[str]:
	seen: List[str] = []
	pending = [grammar.start]
	while pending:
		nt = pending.pop()
		if nt in seen or nt not in grammar.rules:
			continue
		seen.append(nt)
		for p in grammar.rules[nt]:
			for sym in p.rhs:
				if sym.is_nonterminal:
					pending.append(sym.name)
	return seen


def analyze(grammar: Grammar, settings: Optional[Settings] = None) -> Analysis:
	settings = settings or Settings()
	diagnostics = DiagnosticEngine()

	validate_grammar(grammar)
	first = compute_first_sets(grammar, diagnostics)
	follow = compute_follow_sets(
		grammar, first, max_passes=settings.max_follow_passes, diagnostics=diagnostics
	)
	table = build_parsing_table(grammar, first, follow)

	return Analysis(
		grammar=grammar,
		first=first,
		follow=follow,
		table=table,
		diagnostics=tuple(diagnostics.items),
	)
