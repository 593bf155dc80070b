from __future__ import annotations

import pytest

from ll1kit.analysis import Analysis, analyze
from ll1kit.samples import assignment_expr_grammar, repeat_grammar, statement_language_grammar


@pytest.fixture
def repeat() -> Analysis:
	return analyze(repeat_grammar())


@pytest.fixture
def statements() -> Analysis:
	return analyze(statement_language_grammar())


@pytest.fixture
def assignment() -> Analysis:
	return analyze(assignment_expr_grammar())
