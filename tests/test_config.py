from __future__ import annotations

import pytest
from pydantic import ValidationError

from ll1kit.config import Settings


def test_defaults():
	s = Settings()
	assert s.max_follow_passes is None
	assert s.max_stack_depth is None
	assert s.log_level == "WARNING"


def test_from_env():
	s = Settings.from_env(
		{
			"LL1KIT_MAX_FOLLOW_PASSES": "7",
			"LL1KIT_LOG_LEVEL": "debug",
			"LL1KIT_CORS_ORIGINS": "http://a.test, http://b.test",
			"LL1KIT_MAX_STACK_DEPTH": "",
		}
	)
	assert s.max_follow_passes == 7
	assert s.log_level == "DEBUG"
	assert s.cors_origins == ["http://a.test", "http://b.test"]
	assert s.max_stack_depth is None


def test_invalid_values():
	with pytest.raises(ValidationError):
		Settings(log_level="loud")
	with pytest.raises(ValidationError):
		Settings.from_env({"LL1KIT_MAX_STACK_DEPTH": "0"})


def test_stack_depth_from_env():
	assert Settings.from_env({"LL1KIT_MAX_STACK_DEPTH": "64"}).max_stack_depth == 64
