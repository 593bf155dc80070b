from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .analysis import Analysis, ParsingTable
from .config import Settings
from .errors import NestingTooDeep, ParseError, TokenMismatch, UndeclaredSymbol, UnexpectedToken
from .grammar import END_OF_INPUT, EOF_MARKER, IDENTIFIER, Grammar, Symbol, Terminal

log = logging.getLogger(__name__)


@dataclass
class ParserState:
	nonterminal: str
	# None while the alternative is still undecided.
	alternative: Optional[int] = None
	position: int = 0

	@property
	def decided(self) -> bool:
		return self.alternative is not None


@dataclass(frozen=True)
class Consumed:
	symbol: Symbol
	lexeme: Optional[str]
	depth: int


class PredictiveParser:
	"""
	Table-driven LL(1) pushdown automaton fed one token at a time.

	The grammar and table are only read; all mutable state lives in the
	parser's own stack, so several parsers may share one Analysis.
	"""

	def __init__(
		self,
		grammar: Grammar,
		table: ParsingTable,
		start: Optional[str] = None,
		*,
		max_stack_depth: Optional[int] = None,
		listener: Optional[Callable[[str], None]] = None,
	) -> None:
		self.grammar = grammar
		self.table = table
		self.start = start or grammar.start
		if self.start not in grammar.rules:
			raise UndeclaredSymbol(None, self.start)
		self.max_stack_depth = max_stack_depth
		self.listener = listener
		self._stack: List[ParserState] = []
		self._error: Optional[ParseError] = None
		self.reset()

	@classmethod
	def from_analysis(cls, analysis: Analysis, *, settings: Optional[Settings] = None, **kwargs) -> "PredictiveParser":
		settings = settings or Settings()
		kwargs.setdefault("max_stack_depth", settings.max_stack_depth)
		return cls(analysis.grammar, analysis.table, **kwargs)

	def reset(self) -> None:
		self._stack = [ParserState(self.start)]
		self._error = None

	@property
	def stack(self) -> Tuple[ParserState, ...]:
		return tuple(ParserState(s.nonterminal, s.alternative, s.position) for s in self._stack)

	@property
	def accepted(self) -> bool:
		return not self._stack and self._error is None

	@property
	def error(self) -> Optional[ParseError]:
		return self._error

	def classify(self, lexeme: Optional[str]) -> Symbol:
		if lexeme is None:
			return END_OF_INPUT
		if lexeme in self.grammar.vocabulary:
			return Terminal(lexeme)
		return IDENTIFIER

	def feed(self, lexeme: Optional[str]) -> Consumed:
		"""Consume one token (``None`` is end of stream) or raise a ParseError."""
		if self._error is not None:
			raise self._error
		token = self.classify(lexeme)
		try:
			return self._advance(token, lexeme)
		except ParseError as exc:
			self._error = exc
			log.debug("parse failed: %s", exc)
			raise

	def render_stack(self) -> List[str]:
		out: List[str] = []
		for frame in self._stack:
			if not frame.decided:
				out.append(frame.nonterminal)
				continue
			rhs = [str(s) for s in self.grammar.rules[frame.nonterminal][frame.alternative].rhs]
			rhs.insert(frame.position, "•")
			out.append(f"{frame.nonterminal} -> " + " ".join(rhs))
		return out

	# -- transitions -------------------------------------------------------

	def _emit(self, action: str) -> None:
		if self.listener is not None:
			self.listener(action)

	def _rhs(self, frame: ParserState) -> Tuple[Symbol, ...]:
		return self.grammar.rules[frame.nonterminal][frame.alternative].rhs

	def _pop(self) -> None:
		done = self._stack.pop()
		if self._stack:
			self._stack[-1].position += 1
		self._emit(f"pop {done.nonterminal}")

	def _collapse(self) -> None:
		while self._stack and self._stack[-1].decided and self._stack[-1].position >= len(self._rhs(self._stack[-1])):
			self._pop()

	def _finished(self, token: Symbol, lexeme: Optional[str]) -> Consumed:
		if token == END_OF_INPUT:
			self._emit("accept")
			return Consumed(token, lexeme, 0)
		raise UnexpectedToken(None, token.name, lexeme)

	def _advance(self, token: Symbol, lexeme: Optional[str]) -> Consumed:
		if not self._stack:
			return self._finished(token, lexeme)

		while True:
			frame = self._stack[-1]

			if not frame.decided:
				index = self.table.lookup(frame.nonterminal, token)
				if index is None:
					raise UnexpectedToken(frame.nonterminal, token.name, lexeme)
				frame.alternative = index
				frame.position = 0
				self._emit(str(self.grammar.rules[frame.nonterminal][index]))
				continue

			rhs = self._rhs(frame)
			if frame.position >= len(rhs):
				self._pop()
				if not self._stack:
					return self._finished(token, lexeme)
				continue

			expected = rhs[frame.position]
			if expected.is_nonterminal:
				if self.max_stack_depth is not None and len(self._stack) >= self.max_stack_depth:
					raise NestingTooDeep(self.max_stack_depth)
				self._stack.append(ParserState(expected.name))
				continue

			if expected != token:
				raise TokenMismatch(expected.name, token.name, lexeme)

			frame.position += 1
			self._emit(f"match {lexeme if lexeme is not None else EOF_MARKER}")
			self._collapse()
			return Consumed(token, lexeme, len(self._stack))


@dataclass(frozen=True)
class ParseStep:
	stack: List[str]
	remaining_input: List[str]
	action: str


@dataclass(frozen=True)
class ParseResult:
	accepted: bool
	error: Optional[str]
	steps: List[ParseStep] = field(default_factory=list)
	consumed: int = 0


def parse_tokens(
	grammar: Grammar,
	table: ParsingTable,
	tokens: Sequence[str],
	*,
	start: Optional[str] = None,
	trace: bool = True,
	max_stack_depth: Optional[int] = None,
) -> ParseResult:
	"""
	Feed a whole lexeme sequence followed by the end-of-stream signal.
	- Input is a sequence of raw lexemes; anything not reserved is an identifier
	- EOF is implicit, it is never taken from the input
	"""
	inp: List[Optional[str]] = [t for t in tokens if t]
	inp.append(None)
	steps: List[ParseStep] = []
	i = 0
	parser: Optional[PredictiveParser] = None

	def snapshot(action: str) -> None:
		if not trace or parser is None:
			return
		remaining = [EOF_MARKER if t is None else t for t in inp[i:]]
		steps.append(ParseStep(stack=parser.render_stack(), remaining_input=remaining, action=action))

	parser = PredictiveParser(grammar, table, start, max_stack_depth=max_stack_depth, listener=snapshot)
	snapshot("init")

	for lexeme in inp:
		try:
			parser.feed(lexeme)
		except ParseError as exc:
			return ParseResult(accepted=False, error=str(exc), steps=steps, consumed=i)
		i += 1

	return ParseResult(accepted=parser.accepted, error=None if parser.accepted else "Input ended before the parse completed", steps=steps, consumed=i)


def parse_with(analysis: Analysis, tokens: Iterable[str], *, settings: Optional[Settings] = None, trace: bool = False) -> ParseResult:
	settings = settings or Settings()
	return parse_tokens(
		analysis.grammar,
		analysis.table,
		list(tokens),
		trace=trace,
		max_stack_depth=settings.max_stack_depth,
	)
