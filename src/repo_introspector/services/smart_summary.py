"""Smart-summary use case — two-stage LLM analysis of a repository.

Stage 1 (``scanning_structure``) shows the model the file listing and asks
which files reveal the core logic.  Stage 2 (``reading_files``) fetches
those files and asks for a structured summary.  Failures carry the stage
they happened in.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from repo_introspector.domain.entities import SmartSummary
from repo_introspector.domain.exceptions import IntrospectorError, LlmError, SmartSummaryError
from repo_introspector.domain.ports.llm_gateway import LlmGateway
from repo_introspector.domain.ports.repo_fetcher import RepoFetcher
from repo_introspector.services.file_filter import render_listing
from repo_introspector.services.token_budget import SUMMARY_FILE_TOKENS, render_files

logger = logging.getLogger(__name__)

STAGE_SCANNING = "scanning_structure"
STAGE_READING = "reading_files"
STAGE_COMPLETE = "complete"

CRITICAL_FILE_COUNT = 7
RAW_RESPONSE_PREVIEW_CHARS = 500
COMPLEXITY_LEVELS = ("Low", "Medium", "High")

# ── Prompt templates ────────────────────────────────────────────────────────

CRITICAL_FILES_SYSTEM_PROMPT = f"""\
You are a senior software architect.  Given the file listing of a \
repository, identify the {CRITICAL_FILE_COUNT} files that best reveal the \
core logic of the project.

Prefer entry points, core business logic, API handlers, key services and \
models, configuration that reveals architecture, and the persistence \
layer.  Ignore lock files, generated files, assets and most tests.

Return **only** valid JSON of the form:

{{"files": ["path/to/file1", "path/to/file2", ...]}}

Use paths exactly as they appear in the listing.
"""

SUMMARY_SYSTEM_PROMPT = """\
You are an expert code analyst and a professional resume writer.  Given \
the critical source files of a project, return **only** valid JSON with \
exactly these keys:

{
  "archetype": "<short project type, e.g. 'REST API in Go'>",
  "one_liner": "<one engaging sentence on what the project does, max 150 chars>",
  "key_tech": ["<5-8 key technologies, frameworks or patterns>"],
  "code_quality_score": <integer 1-10 based on organisation, naming, error handling>,
  "complexity": "<exactly one of Low, Medium, High>",
  "latex_code": "<a LaTeX resume entry: \\\\textbf{Project} -- description, \
an itemize with the tech stack and 2-4 impact bullets, ending with \\\\vspace{3pt}>"
}

Only mention technologies you see evidence of.
"""


class SmartSummaryUseCase:
    """Runs the two LLM stages against one repository."""

    def __init__(self, repo_fetcher: RepoFetcher, llm_gateway: LlmGateway) -> None:
        self._fetcher = repo_fetcher
        self._llm = llm_gateway

    async def execute(self, owner: str, repo: str) -> SmartSummary:
        full_name = f"{owner}/{repo}"

        stage = STAGE_SCANNING
        try:
            logger.info("[%s] Fetching file tree for %s", stage, full_name)
            entries = await self._fetcher.fetch_tree(owner, repo)
            critical = await self.identify_critical_files(render_listing(entries))
            logger.info("[%s] Critical files for %s: %s", stage, full_name, critical)
            if not critical:
                raise LlmError("LLM did not select any files.")

            stage = STAGE_READING
            contents = await self._fetcher.fetch_files(owner, repo, critical)
            logger.info("[%s] Fetched %d files, summarising %s", stage, len(contents), full_name)
            summary = await self.summarize_files(contents)
        except IntrospectorError as exc:
            detail = describe_failure(exc)
            logger.warning("Smart summary of %s failed at %s: %s", full_name, stage, detail)
            raise SmartSummaryError(stage, f"{stage} failed: {detail}") from exc

        logger.info("[%s] Generated smart summary for %s", STAGE_COMPLETE, full_name)
        return summary

    async def identify_critical_files(self, listing: str) -> list[str]:
        raw = await self._llm.complete(CRITICAL_FILES_SYSTEM_PROMPT, f"File listing:\n\n{listing}")
        data = parse_json_object(raw)
        files = data.get("files")
        if not isinstance(files, list):
            raise LlmError("LLM response missing 'files' list.", raw_response=raw)
        paths = [str(f).strip() for f in files if isinstance(f, str) and f.strip()]
        return paths[:CRITICAL_FILE_COUNT]

    async def summarize_files(self, contents: dict[str, str]) -> SmartSummary:
        context = render_files(contents, SUMMARY_FILE_TOKENS, header="--- FILE: {path} ---")
        raw = await self._llm.complete(SUMMARY_SYSTEM_PROMPT, context)
        return parse_summary(raw)


# ── Response parsing ────────────────────────────────────────────────────────


def describe_failure(exc: IntrospectorError) -> str:
    """Error text, with the start of the raw model output for shape failures."""
    raw = getattr(exc, "raw_response", None)
    if not raw:
        return str(exc)
    if len(raw) > RAW_RESPONSE_PREVIEW_CHARS:
        raw = raw[:RAW_RESPONSE_PREVIEW_CHARS] + "..."
    return f"{exc} (response: {raw})"


def parse_json_object(raw: str) -> dict[str, Any]:
    """Parse an LLM JSON answer, tolerating markdown code fences."""
    text = raw.strip()
    if text.startswith("```"):
        first_nl = text.index("\n") if "\n" in text else 3
        text = text[first_nl + 1 :]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LlmError(f"LLM returned invalid JSON: {exc}", raw_response=raw) from exc
    if not isinstance(data, dict):
        raise LlmError("LLM returned JSON that is not an object.", raw_response=raw)
    return data


def clamp_score(value: Any) -> int:
    try:
        score = int(value)
    except (TypeError, ValueError):
        score = 1
    return max(1, min(10, score))


def normalize_complexity(value: Any) -> str:
    return value if value in COMPLEXITY_LEVELS else "Medium"


def parse_summary(raw: str) -> SmartSummary:
    data = parse_json_object(raw)

    archetype = data.get("archetype")
    one_liner = data.get("one_liner")
    if not isinstance(archetype, str) or not isinstance(one_liner, str):
        raise LlmError("LLM response missing 'archetype' or 'one_liner'.", raw_response=raw)

    key_tech = data.get("key_tech")
    if not isinstance(key_tech, list):
        key_tech = []
    latex_code = data.get("latex_code")

    return SmartSummary(
        archetype=archetype,
        one_liner=one_liner,
        key_tech=[str(t) for t in key_tech if t],
        code_quality_score=clamp_score(data.get("code_quality_score")),
        complexity=normalize_complexity(data.get("complexity")),
        latex_code=latex_code if isinstance(latex_code, str) else "",
    )
