from __future__ import annotations

import pytest

from ll1kit.analysis import analyze, reachable_nonterminals, selector_set
from ll1kit.errors import TableConflict
from ll1kit.grammar import EMPTY, END_OF_INPUT, Terminal, parse_grammar_lines
from ll1kit.report import table_report


def test_repeat_table(repeat):
	assert table_report(repeat.table) == {
		"S": {"a": 0, "end": 0},
		"A": {"a": 0, "end": 1},
	}


def test_first_first_conflict():
	g = parse_grammar_lines(start="S", lines=["S -> a b | a c"])
	with pytest.raises(TableConflict) as info:
		analyze(g)
	err = info.value
	assert (err.nonterminal, err.terminal, err.existing, err.incoming) == ("S", "a", 0, 1)


def test_first_follow_conflict():
	g = parse_grammar_lines(start="S", lines=["S -> A a $", "A -> a | ε"])
	with pytest.raises(TableConflict) as info:
		analyze(g)
	err = info.value
	assert (err.nonterminal, err.terminal, err.existing, err.incoming) == ("A", "a", 0, 1)


def test_empty_alternative_selected_by_follow(assignment):
	assert assignment.table.lookup("E'", Terminal(";")) == 1
	assert assignment.table.lookup("E'", Terminal(")")) == 1
	assert assignment.table.lookup("E'", Terminal("+")) == 0
	assert assignment.table.lookup("E'", END_OF_INPUT) is None


def test_table_totality(statements):
	grammar = statements.grammar
	for nt in reachable_nonterminals(grammar):
		expected = set(statements.first.of(nt) - {EMPTY})
		if statements.first.nullable(nt):
			expected |= statements.follow.of(nt)
		assert set(statements.table.row(nt)) == expected
		for sym, index in statements.table.row(nt).items():
			assert sym in selector_set(grammar.rules[nt][index], statements.first, statements.follow)


def test_every_nonterminal_reachable(statements):
	assert sorted(reachable_nonterminals(statements.grammar)) == sorted(statements.grammar.nonterminals)


def test_table_is_read_only(repeat):
	with pytest.raises(TypeError):
		repeat.table.cells["S"] = {}
	with pytest.raises(TypeError):
		repeat.table.cells["S"][Terminal("a")] = 1


def test_entries_are_sorted(repeat):
	assert [(nt, sym.name, i) for nt, sym, i in repeat.table.entries()] == [
		("S", "a", 0),
		("S", "end", 0),
		("A", "a", 0),
		("A", "end", 1),
	]
