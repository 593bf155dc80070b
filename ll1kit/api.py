from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse
from pydantic import BaseModel

from .analysis import Analysis, analyze
from .config import Settings, configure_logging
from .errors import GrammarError
from .grammar import Grammar, load_grammar, parse_grammar_lines
from .parser import parse_with
from .report import analysis_report, table_to_csv
from .samples import SAMPLES

log = logging.getLogger(__name__)


class GrammarRequest(BaseModel):
	# Built-in grammar name (see GET /api/samples); used when no grammar is supplied.
	sample: Optional[str] = None
	# Production lines, e.g. ["S -> A end | ε", "A -> a A | ε"]
	grammar_start: Optional[str] = None
	grammar_lines: Optional[List[str]] = None
	# Nested-list definition with prefixed nonterminal references.
	definition: Optional[Dict[str, List[List[str]]]] = None
	tokens: Optional[List[str]] = None


class ParseRequest(GrammarRequest):
	# Example: "x = 1 + y ;"
	input: str = ""
	trace: bool = True


def _grammar_from(req: GrammarRequest, settings: Settings) -> Grammar:
	if req.definition is not None:
		if not req.grammar_start:
			raise HTTPException(status_code=422, detail="grammar_start is required with a definition")
		return load_grammar(
			req.definition, req.tokens or [], start=req.grammar_start, prefix=settings.nonterminal_prefix
		)
	if req.grammar_lines:
		if not req.grammar_start:
			raise HTTPException(status_code=422, detail="grammar_start is required with grammar_lines")
		try:
			return parse_grammar_lines(start=req.grammar_start, lines=req.grammar_lines, tokens=req.tokens)
		except ValueError as exc:
			raise HTTPException(status_code=422, detail=str(exc)) from exc
	name = req.sample or "statements"
	factory = SAMPLES.get(name)
	if factory is None:
		raise HTTPException(status_code=404, detail=f"Unknown sample grammar '{name}'")
	return factory()


def _analysis_for(req: GrammarRequest, settings: Settings) -> Analysis:
	grammar = _grammar_from(req, settings)
	try:
		return analyze(grammar, settings)
	except GrammarError as exc:
		log.info("grammar rejected: %s", exc)
		raise HTTPException(
			status_code=422,
			detail={"error": exc.__class__.__name__, "message": exc.message},
		) from exc


def create_app(settings: Optional[Settings] = None) -> FastAPI:
	settings = settings or Settings.from_env()
	configure_logging(settings)

	app = FastAPI(title="LL(1) Grammar Toolkit", version="1.0.0")
	app.add_middleware(
		CORSMiddleware,
		allow_origins=settings.cors_origins,
		allow_credentials=True,
		allow_methods=["*"],
		allow_headers=["*"],
	)

	@app.get("/", response_class=HTMLResponse)
	def index() -> HTMLResponse:
		return HTMLResponse(
			"<h2>LL(1) Grammar Toolkit API</h2>"
			"<p>POST <code>/api/analyze</code> or <code>/api/parse</code> with a grammar.</p>"
		)

	@app.get("/health")
	def health() -> Dict[str, str]:
		return {"status": "ok"}

	@app.get("/api/samples")
	def samples() -> Dict[str, List[str]]:
		return {name: [str(p) for p in factory().productions] for name, factory in SAMPLES.items()}

	@app.post("/api/analyze")
	def analyze_grammar(req: GrammarRequest) -> Dict[str, Any]:
		return analysis_report(_analysis_for(req, settings))

	@app.post("/api/table.csv", response_class=PlainTextResponse)
	def table_csv(req: GrammarRequest) -> PlainTextResponse:
		return PlainTextResponse(table_to_csv(_analysis_for(req, settings)), media_type="text/csv")

	@app.post("/api/parse")
	def parse(req: ParseRequest) -> Dict[str, Any]:
		analysis = _analysis_for(req, settings)
		tokens = [t for t in (req.input or "").split() if t]
		result = parse_with(analysis, tokens, settings=settings, trace=bool(req.trace))
		return {
			"input": {
				"tokens": tokens,
				"consumed": result.consumed,
			},
			"result": {
				"accepted": result.accepted,
				"error": result.error,
				"steps": [
					{
						"stack": step.stack,
						"remaining_input": step.remaining_input,
						"action": step.action,
					}
					for step in result.steps
				],
			},
		}

	return app


app = create_app()
