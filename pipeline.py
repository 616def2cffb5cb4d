from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List

from ai.matcher import match_score, keyword_gaps
from ai.parsing import parse_json_object, text_field
from ai.prompts import (
    SYSTEM_KEYWORDS, USER_KEYWORDS,
    SYSTEM_SUGGEST, USER_SUGGEST,
    SYSTEM_TAILOR_JSON, USER_TAILOR_JSON,
)
from documents.errors import ResumateError, SchemaError
from documents.legacy import migrate_legacy
from documents.schema import Invalid, Resume, validate

logger = logging.getLogger(__name__)

MIN_JD_CHARS = 100

# prompt inputs are clipped so a pasted novel cannot blow the context window
MAX_INPUT_CHARS = 20000


def check_inputs(resume_text: str, jd_text: str) -> List[str]:
    """Form-level problems with the user's inputs, empty when both are usable."""
    problems = []
    if not (resume_text or "").strip():
        problems.append("Please upload your resume as a PDF, DOCX, or TXT file.")
    if len((jd_text or "").strip()) < MIN_JD_CHARS:
        problems.append(f"The job description should be at least {MIN_JD_CHARS} characters long.")
    return problems

# -----------------------------
# Prompt contracts
# -----------------------------
def analyze_job_description(jd_text: str, provider, model_name: Optional[str] = None,
                            temperature: float = 0.2, max_tokens: int = 1024) -> str:
    raw = provider.chat(
        model=model_name,
        system=SYSTEM_KEYWORDS,
        user=USER_KEYWORDS.format(jd=jd_text[:MAX_INPUT_CHARS]),
        temperature=temperature,
        max_tokens=max_tokens,
        json_mode=True,
    )
    return text_field(parse_json_object(raw), "keywords")


def suggest_resume_edits(resume_text: str, jd_text: str, analysis: str, provider,
                         model_name: Optional[str] = None,
                         temperature: float = 0.2, max_tokens: int = 2048) -> str:
    raw = provider.chat(
        model=model_name,
        system=SYSTEM_SUGGEST,
        user=USER_SUGGEST.format(
            jd=jd_text[:MAX_INPUT_CHARS],
            analysis=analysis or "(not available)",
            resume=resume_text[:MAX_INPUT_CHARS],
        ),
        temperature=temperature,
        max_tokens=max_tokens,
        json_mode=True,
    )
    return text_field(parse_json_object(raw), "suggestedEdits")


def generate_tailored_resume(resume_text: str, jd_text: str, provider,
                             model_name: Optional[str] = None,
                             temperature: float = 0.2, max_tokens: int = 4096,
                             schema_retries: int = 0) -> Resume:
    """
    Ask for the full structured resume and validate it. A reply that fails
    validation raises SchemaError; the call is repeated only when the caller
    asks for it with schema_retries.
    """
    attempts = 1 + max(0, schema_retries)
    error: Optional[SchemaError] = None
    for attempt in range(1, attempts + 1):
        raw = provider.chat(
            model=model_name,
            system=SYSTEM_TAILOR_JSON,
            user=USER_TAILOR_JSON.format(resume=resume_text[:MAX_INPUT_CHARS], jd=jd_text[:MAX_INPUT_CHARS]),
            temperature=temperature,
            max_tokens=max_tokens,
            json_mode=True,
        )
        result = validate(migrate_legacy(parse_json_object(raw)))
        if not isinstance(result, Invalid):
            logger.info("Generated tailored resume for %s (attempt %d)", result.resume.name, attempt)
            return result.resume
        error = result.error
        if attempt < attempts:
            logger.warning("Generated resume failed validation, retrying: %s", error)
    raise error

# -----------------------------
# Tailoring run
# -----------------------------
@dataclass
class TailoringResult:
    keywords: Optional[str] = None
    suggestions: Optional[str] = None
    resume: Optional[Resume] = None
    overlap: Dict[str, Any] = field(default_factory=dict)
    # call name -> error; a failed call never discards the others' results
    errors: Dict[str, ResumateError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def local_overlap(resume_text: str, jd_text: str) -> Dict[str, Any]:
    report = {}
    report.update(match_score(resume_text, jd_text))
    report.update(keyword_gaps(resume_text, jd_text, top_k=30))
    return report


def run_tailoring(resume_text: str, jd_text: str, provider,
                  model_name: Optional[str] = None,
                  temperature: float = 0.2, max_tokens: int = 4096,
                  schema_retries: int = 0) -> TailoringResult:
    """
    Keyword analysis first, then edit suggestions and resume generation in
    parallel. Each call's failure is recorded under its own name.
    """
    out = TailoringResult(overlap=local_overlap(resume_text, jd_text))

    try:
        out.keywords = analyze_job_description(jd_text, provider, model_name, temperature)
    except ResumateError as e:
        logger.warning("Keyword analysis failed: %s", e)
        out.errors["keywords"] = e

    with ThreadPoolExecutor(max_workers=2) as pool:
        futures = {
            "suggestions": pool.submit(
                suggest_resume_edits, resume_text, jd_text, out.keywords or "", provider,
                model_name, temperature,
            ),
            "resume": pool.submit(
                generate_tailored_resume, resume_text, jd_text, provider,
                model_name, temperature, max_tokens, schema_retries,
            ),
        }
        for name, fut in futures.items():
            try:
                setattr(out, name, fut.result())
            except ResumateError as e:
                logger.warning("%s call failed: %s", name.capitalize(), e)
                out.errors[name] = e

    logger.info("Tailoring finished with %d error(s)", len(out.errors))
    return out
