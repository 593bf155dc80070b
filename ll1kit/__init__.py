"""LL(1) grammar analysis and table-driven predictive parsing."""

from .analysis import (
	Analysis,
	FirstSets,
	FollowSets,
	ParsingTable,
	analyze,
	build_parsing_table,
	compute_first_sets,
	compute_follow_sets,
	validate_grammar,
)
from .config import Settings, configure_logging
from .diagnostics import Diagnostic, DiagnosticCode, Severity
from .errors import (
	FixpointDivergence,
	GrammarError,
	LL1Error,
	NestingTooDeep,
	NonTerminatingGrammar,
	ParseError,
	TableConflict,
	TokenMismatch,
	UndeclaredSymbol,
	UnexpectedToken,
)
from .grammar import (
	EMPTY,
	END_OF_INPUT,
	IDENTIFIER,
	Grammar,
	Nonterminal,
	Production,
	Symbol,
	SymbolKind,
	Terminal,
	build_grammar,
	load_grammar,
	parse_grammar_lines,
)
from .parser import Consumed, ParseResult, ParserState, PredictiveParser, parse_tokens

__all__ = [
	"Analysis",
	"Consumed",
	"Diagnostic",
	"DiagnosticCode",
	"EMPTY",
	"END_OF_INPUT",
	"FirstSets",
	"FixpointDivergence",
	"FollowSets",
	"Grammar",
	"GrammarError",
	"IDENTIFIER",
	"LL1Error",
	"NestingTooDeep",
	"NonTerminatingGrammar",
	"Nonterminal",
	"ParseError",
	"ParseResult",
	"ParserState",
	"ParsingTable",
	"PredictiveParser",
	"Production",
	"Settings",
	"Severity",
	"Symbol",
	"SymbolKind",
	"TableConflict",
	"Terminal",
	"TokenMismatch",
	"UndeclaredSymbol",
	"UnexpectedToken",
	"analyze",
	"build_grammar",
	"build_parsing_table",
	"compute_first_sets",
	"compute_follow_sets",
	"configure_logging",
	"load_grammar",
	"parse_grammar_lines",
	"parse_tokens",
	"validate_grammar",
]
