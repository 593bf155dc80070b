from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional


class Severity(Enum):
	INFO = auto()
	WARNING = auto()
	ERROR = auto()


class DiagnosticCode(Enum):
	AMBIGUOUS_FIRST_SET = "AmbiguousFirstSet"
	FOLLOW_PASSES = "FollowPasses"


@dataclass(frozen=True)
class Diagnostic:
	severity: Severity
	code: DiagnosticCode
	message: str
	nonterminal: Optional[str] = None
	symbol: Optional[str] = None
	hint: Optional[str] = None


class DiagnosticEngine:
	def __init__(self) -> None:
		self._items: List[Diagnostic] = []

	@property
	def items(self) -> List[Diagnostic]:
		return self._items

	def report(
		self,
		severity: Severity,
		code: DiagnosticCode,
		message: str,
		*,
		nonterminal: Optional[str] = None,
		symbol: Optional[str] = None,
		hint: Optional[str] = None,
	) -> None:
		self._items.append(Diagnostic(severity, code, message, nonterminal, symbol, hint))

	def of(self, code: DiagnosticCode) -> List[Diagnostic]:
		return [d for d in self._items if d.code is code]
