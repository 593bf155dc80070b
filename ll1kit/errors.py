from __future__ import annotations

from typing import Optional


class LL1Error(Exception):
	def __init__(self, message: str) -> None:
		super().__init__(message)
		self.message = message

	def __str__(self) -> str:
		return self.message


# ---------------------------------------------------------------------------
# Construction-time failures: the grammar is rejected, no table is produced.


class GrammarError(LL1Error):
	pass


class UndeclaredSymbol(GrammarError):
	def __init__(self, nonterminal: Optional[str], symbol: str) -> None:
		if nonterminal is None:
			message = f"Start nonterminal '{symbol}' is not declared"
		else:
			message = f"Undeclared symbol '{symbol}' referenced in '{nonterminal}'"
		super().__init__(message)
		self.nonterminal = nonterminal
		self.symbol = symbol


class NonTerminatingGrammar(GrammarError):
	def __init__(self, nonterminal: str) -> None:
		super().__init__(f"Nonterminal '{nonterminal}' is not terminating")
		self.nonterminal = nonterminal


class TableConflict(GrammarError):
	def __init__(self, nonterminal: str, terminal: str, existing: int, incoming: int) -> None:
		super().__init__(
			f"Conflict at M[{nonterminal}, {terminal}]: alternative {existing} vs alternative {incoming}"
		)
		self.nonterminal = nonterminal
		self.terminal = terminal
		self.existing = existing
		self.incoming = incoming


class FixpointDivergence(GrammarError):
	def __init__(self, passes: int) -> None:
		super().__init__(f"FOLLOW set computation did not converge after {passes} passes")
		self.passes = passes


# ---------------------------------------------------------------------------
# Runtime failures: abort the parse in progress, the parser stays reusable.


class ParseError(LL1Error):
	pass


def _shown(token: str, lexeme: Optional[str]) -> str:
	if lexeme is None or lexeme == token:
		return f"'{token}'"
	return f"{token} '{lexeme}'"


class UnexpectedToken(ParseError):
	def __init__(self, nonterminal: Optional[str], token: str, lexeme: Optional[str] = None) -> None:
		if nonterminal is None:
			message = f"Unexpected token {_shown(token, lexeme)} after the parse completed"
		else:
			message = f"No rule for M[{nonterminal}, {token}]"
			if lexeme is not None and lexeme != token:
				message += f" (input '{lexeme}')"
		super().__init__(message)
		self.nonterminal = nonterminal
		self.token = token
		self.lexeme = lexeme


class TokenMismatch(ParseError):
	def __init__(self, expected: str, actual: str, lexeme: Optional[str] = None) -> None:
		super().__init__(f"Mismatch: expected '{expected}' but found {_shown(actual, lexeme)}")
		self.expected = expected
		self.actual = actual
		self.lexeme = lexeme


class NestingTooDeep(ParseError):
	def __init__(self, depth: int) -> None:
		super().__init__(f"Parse stack exceeded {depth} frames")
		self.depth = depth
