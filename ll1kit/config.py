from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "LL1KIT_"

_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseModel):
	# None derives the bound from the grammar size (nonterminals x terminals + 1).
	max_follow_passes: Optional[int] = Field(default=None, ge=1)
	# None leaves the parse stack unbounded.
	max_stack_depth: Optional[int] = Field(default=None, ge=1)
	nonterminal_prefix: str = "e"
	log_level: str = "WARNING"
	cors_origins: List[str] = Field(default_factory=lambda: ["*"])

	@field_validator("log_level")
	@classmethod
	def _check_level(cls, value: str) -> str:
		level = value.upper()
		if level not in _LEVELS:
			raise ValueError(f"Unknown log level '{value}'")
		return level

	@classmethod
	def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
		"""Read ``LL1KIT_*`` variables; list values are comma separated."""
		env = os.environ if environ is None else environ
		data: Dict[str, Any] = {}
		for name in cls.model_fields:
			raw = env.get(ENV_PREFIX + name.upper())
			if raw is None or raw == "":
				continue
			if name == "cors_origins":
				data[name] = [o.strip() for o in raw.split(",") if o.strip()]
			else:
				data[name] = raw
		return cls.model_validate(data)


def configure_logging(settings: Settings) -> None:
	logging.basicConfig(
		level=getattr(logging, settings.log_level),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
	logging.getLogger("ll1kit").setLevel(settings.log_level)
