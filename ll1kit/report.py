"""
Analysis artifacts as JSON-safe structures and CSV text.

Reports:
  - FIRST:  nonterminal -> sorted terminal names (ε when nullable)
  - FOLLOW: nonterminal -> sorted terminal names
  - table:  nonterminal -> {terminal name: alternative index}
"""

from __future__ import annotations

import csv
import io
from typing import Any, Dict, List

from .analysis import Analysis, FirstSets, FollowSets, ParsingTable
from .diagnostics import Diagnostic
from .grammar import Grammar, sorted_symbols


def first_report(first: FirstSets) -> Dict[str, List[str]]:
	return {nt: [s.name for s in sorted_symbols(syms)] for nt, syms in first.merged.items()}


def first_by_alternative_report(first: FirstSets) -> Dict[str, List[List[str]]]:
	return {
		nt: [[s.name for s in sorted_symbols(syms)] for syms in per_alt]
		for nt, per_alt in first.alternatives.items()
	}


def follow_report(follow: FollowSets) -> Dict[str, List[str]]:
	return {nt: [s.name for s in sorted_symbols(syms)] for nt, syms in follow.sets.items()}


def table_report(table: ParsingTable) -> Dict[str, Dict[str, int]]:
	out: Dict[str, Dict[str, int]] = {}
	for nt, row in table.cells.items():
		out[nt] = {sym.name: row[sym] for sym in sorted_symbols(row)}
	return out


def grammar_report(grammar: Grammar) -> Dict[str, Any]:
	return {
		"start": grammar.start,
		"nonterminals": list(grammar.nonterminals),
		"terminals": [s.name for s in sorted_symbols(grammar.terminals)],
		"productions": [str(p) for p in grammar.productions],
	}


def diagnostic_report(d: Diagnostic) -> Dict[str, Any]:
	return {
		"severity": d.severity.name,
		"code": d.code.value,
		"message": d.message,
		"nonterminal": d.nonterminal,
		"symbol": d.symbol,
		"hint": d.hint,
	}


def analysis_report(analysis: Analysis) -> Dict[str, Any]:
	return {
		"grammar": grammar_report(analysis.grammar),
		"first": first_report(analysis.first),
		"first_by_alternative": first_by_alternative_report(analysis.first),
		"follow": follow_report(analysis.follow),
		"follow_passes": analysis.follow.passes,
		"table": table_report(analysis.table),
		"diagnostics": [diagnostic_report(d) for d in analysis.diagnostics],
	}


def table_to_csv(analysis: Analysis) -> str:
	"""One row per nonterminal, one column per terminal; cells hold the selected production."""
	grammar = analysis.grammar
	terms = sorted_symbols(grammar.terminals)

	buf = io.StringIO()
	w = csv.writer(buf)
	w.writerow(["NonTerminal"] + [t.name for t in terms])
	for nt in grammar.nonterminals:
		row: List[str] = [nt]
		for t in terms:
			index = analysis.table.lookup(nt, t)
			row.append(str(grammar.rules[nt][index]) if index is not None else "")
		w.writerow(row)
	return buf.getvalue()


def sets_to_csv(title: str, sets: Dict[str, List[str]]) -> str:
	buf = io.StringIO()
	w = csv.writer(buf)
	w.writerow([title, "Symbols (sorted)"])
	for nt, syms in sets.items():
		w.writerow([nt, " ".join(syms)])
	return buf.getvalue()
