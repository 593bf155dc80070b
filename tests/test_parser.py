from __future__ import annotations

import pytest

from ll1kit.analysis import analyze
from ll1kit.config import Settings
from ll1kit.errors import NestingTooDeep, TokenMismatch, UndeclaredSymbol, UnexpectedToken
from ll1kit.grammar import END_OF_INPUT, IDENTIFIER, Terminal, parse_grammar_lines
from ll1kit.parser import ParserState, PredictiveParser, parse_tokens, parse_with


def feed_all(parser, tokens):
	return [parser.feed(t) for t in tokens]


def test_initial_state(repeat):
	parser = PredictiveParser.from_analysis(repeat)
	assert parser.stack == (ParserState("S"),)
	assert not parser.accepted


def test_repeated_tokens_are_consumed(repeat):
	parser = PredictiveParser.from_analysis(repeat)
	consumed = feed_all(parser, ["a", "a", "end"])
	assert [c.symbol for c in consumed] == [Terminal("a"), Terminal("a"), Terminal("end")]
	assert [c.depth for c in consumed] == [2, 3, 0]
	assert parser.stack == ()
	assert parser.accepted


def test_empty_repetition(repeat):
	parser = PredictiveParser.from_analysis(repeat)
	parser.feed("end")
	assert parser.accepted


def test_end_of_stream_after_completion(repeat):
	parser = PredictiveParser.from_analysis(repeat)
	feed_all(parser, ["a", "end"])
	c = parser.feed(None)
	assert c.symbol == END_OF_INPUT
	assert parser.accepted


def test_trailing_input_after_completion(repeat):
	parser = PredictiveParser.from_analysis(repeat)
	parser.feed("end")
	with pytest.raises(UnexpectedToken) as info:
		parser.feed("a")
	assert info.value.nonterminal is None


def test_unexpected_token_names_nonterminal(repeat):
	parser = PredictiveParser.from_analysis(repeat)
	parser.feed("a")
	with pytest.raises(UnexpectedToken) as info:
		parser.feed("b")
	assert info.value.nonterminal == "A"
	assert info.value.token == IDENTIFIER.name
	assert info.value.lexeme == "b"


def test_unexpected_token_at_start(repeat):
	parser = PredictiveParser.from_analysis(repeat)
	with pytest.raises(UnexpectedToken) as info:
		parser.feed("b")
	assert info.value.nonterminal == "S"


def test_token_mismatch():
	g = parse_grammar_lines(start="S", lines=["S -> a b $"])
	a = analyze(g)
	parser = PredictiveParser.from_analysis(a)
	parser.feed("a")
	with pytest.raises(TokenMismatch) as info:
		parser.feed("c")
	assert info.value.expected == "b"
	assert info.value.actual == "NAME"
	assert info.value.lexeme == "c"


def test_failed_parser_stays_halted_until_reset(repeat):
	parser = PredictiveParser.from_analysis(repeat)
	with pytest.raises(UnexpectedToken) as first:
		parser.feed("b")
	with pytest.raises(UnexpectedToken) as again:
		parser.feed("a")
	assert again.value is first.value
	assert parser.error is first.value
	parser.reset()
	feed_all(parser, ["a", "end"])
	assert parser.accepted


def test_reset_matches_fresh_parser(repeat):
	used = PredictiveParser.from_analysis(repeat)
	feed_all(used, ["a", "a"])
	used.reset()
	fresh = PredictiveParser.from_analysis(repeat)
	assert used.stack == fresh.stack
	for token in ["a", "end"]:
		assert used.feed(token) == fresh.feed(token)
		assert used.stack == fresh.stack


def test_parsers_share_one_table(repeat):
	one = PredictiveParser.from_analysis(repeat)
	two = PredictiveParser.from_analysis(repeat)
	one.feed("a")
	two.feed("end")
	one.feed("a")
	one.feed("end")
	assert one.accepted and two.accepted
	assert repeat.table.lookup("S", Terminal("a")) == 0


def test_undecided_frame_does_not_consume(repeat):
	parser = PredictiveParser.from_analysis(repeat)
	parser.feed("a")
	assert parser.stack == (ParserState("S", 0, 0), ParserState("A", 0, 1))


def test_unknown_start_symbol(repeat):
	with pytest.raises(UndeclaredSymbol):
		PredictiveParser(repeat.grammar, repeat.table, "Nope")


def test_stack_depth_guard(repeat):
	parser = PredictiveParser.from_analysis(repeat, settings=Settings(max_stack_depth=2))
	parser.feed("a")
	with pytest.raises(NestingTooDeep):
		parser.feed("a")


def test_statement_program(statements):
	program = "Function add x y End Return x Add y End".split()
	result = parse_with(statements, program)
	assert result.accepted, result.error
	assert result.consumed == len(program) + 1


@pytest.mark.parametrize(
	"source",
	[
		"x Equal x Add 1",
		"add Of 1 + 3 2 End",
		"If x Is Less Than 3 Then x Equal x + 1 End EndIf",
		"While x Is Equal To y x Equal y End",
		"",
	],
)
def test_statement_inputs_accepted(statements, source):
	result = parse_with(statements, source.split())
	assert result.accepted, result.error


def test_statement_missing_name(statements):
	result = parse_with(statements, ["Function", "End"])
	assert not result.accepted
	assert result.error == "Mismatch: expected 'NAME' but found 'End'"
	assert result.consumed == 1


def test_statement_truncated_input(statements):
	result = parse_with(statements, "If x Then".split())
	assert not result.accepted
	assert result.error.startswith("No rule for M[Statements, END_OF_FILE]")


def test_parse_tokens_trace(assignment):
	result = parse_tokens(assignment.grammar, assignment.table, "x = 1 + y ;".split())
	assert result.accepted
	assert result.steps[0].action == "init"
	assert result.steps[0].stack == ["S"]
	assert result.steps[0].remaining_input == ["x", "=", "1", "+", "y", ";", "END_OF_FILE"]
	assert result.steps[1].action == "S -> NAME = E ; END_OF_FILE"
	assert result.steps[-1].action == "pop S"
	actions = [s.action for s in result.steps]
	assert "match x" in actions and "match END_OF_FILE" in actions


def test_parse_tokens_without_trace(assignment):
	result = parse_tokens(assignment.grammar, assignment.table, "x = ( y ;".split(), trace=False)
	assert not result.accepted
	assert result.steps == []
	assert result.error == "Mismatch: expected ')' but found ';'"


def test_long_right_recursive_list(repeat):
	result = parse_with(repeat, ["a"] * 10_000 + ["end"])
	assert result.accepted, result.error
	assert result.consumed == 10_002


def test_long_parameter_list(statements):
	program = ["Function", "f"] + [f"p{i}" for i in range(12_000)] + ["End", "Return", "p0", "End"]
	result = parse_with(statements, program)
	assert result.accepted, result.error
