from __future__ import annotations

from typing import Callable, Dict

from .grammar import EOF_MARKER, NAME_MARKER, Grammar, load_grammar, parse_grammar_lines

# Reserved words of the statement language; duplicates are intentional.
STATEMENT_TOKENS = [
	"Function",
	"End",
	"Equal",
	"Of",
	"Return",
	"Add",
	"Subtract",
	"Multiply",
	"Divide",
	"Is", "Equal", "To",
	"Is", "Less", "Than",
	"If", "Then",
	"EndIf",
	"Else",
	"While",
]

STATEMENT_RULES = {
	"Program": [["eGStatements", EOF_MARKER]],
	"GStatements": [["eFunction", "eGStatements"], ["eStatement", "eGStatements"], []],
	"Function": [["Function", NAME_MARKER, "eParameters", "eFuncStates"]],
	"Parameters": [[NAME_MARKER, "eParameters"], ["End"]],
	"Statements": [["eStatement", "eStatements"], ["End"]],
	"EndIfOrElse": [["Else", "eStatements"], ["EndIf"]],
	"Statement": [
		["If", "eStatement", "Then", "eStatements", "eEndIfOrElse"],
		["While", "eStatement", "eStatements"],
		["eTempStatement"],
	],
	"TempStates": [["eTempStatement", "eTempStates"], ["End"]],
	"TempStatement": [[NAME_MARKER, "eStatementX"]],
	"StatementX": [["eAssignment"], ["eFunctionCall"], ["eOperation"], []],
	"FuncStates": [["eFuncState", "eFuncStates"], ["End"]],
	"FuncState": [["eStatement"], ["eReturn"]],
	"Assignment": [["Equal", "eStatement"]],
	"FunctionCall": [["Of", "eTempStates"]],
	"Operation": [["eOperator", "eTempStatement"]],
	"Return": [["Return", "eTempStatement"]],
	"Operator": [["Add"], ["Subtract"], ["Multiply"], ["Divide"], ["Is", "eCmpOp"]],
	"CmpOp": [["Less", "Than"], ["Equal", "To"]],
}


def statement_language_grammar() -> Grammar:
	"""
	Keyword statement language, e.g.:
	  Function add x y End Return x Add y End
	  If x Is Less Than 3 Then x Equal x Add 1 End EndIf
	"""
	return load_grammar(STATEMENT_RULES, STATEMENT_TOKENS, start="Program")


def assignment_expr_grammar() -> Grammar:
	"""
	Matches inputs like:
	  x = y ;
	  x = 1 + y ;

	Grammar:
	  S  -> NAME = E ; $
	  E  -> T E'
	  E' -> + T E' | ε
	  T  -> F T'
	  T' -> * F T' | ε
	  F  -> ( E ) | NAME
	"""
	return parse_grammar_lines(
		start="S",
		lines=[
			"S  -> NAME = E ; $",
			"E  -> T E'",
			"E' -> + T E' | ε",
			"T  -> F T'",
			"T' -> * F T' | ε",
			"F  -> ( E ) | NAME",
		],
	)


def repeat_grammar() -> Grammar:
	"""S -> A end | ε ; A -> a A | ε"""
	return parse_grammar_lines(start="S", lines=["S -> A end | ε", "A -> a A | ε"])


SAMPLES: Dict[str, Callable[[], Grammar]] = {
	"statements": statement_language_grammar,
	"assignment": assignment_expr_grammar,
	"repeat": repeat_grammar,
}
