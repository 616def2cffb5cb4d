import json

import pytest

from ai.prompts import SYSTEM_KEYWORDS, SYSTEM_SUGGEST, SYSTEM_TAILOR_JSON
from documents.errors import GenerationFailure, SchemaError
from pipeline import (
    MIN_JD_CHARS,
    analyze_job_description,
    check_inputs,
    generate_tailored_resume,
    run_tailoring,
    suggest_resume_edits,
)

RESUME_TEXT = "Jane Doe. Data engineer. Python, SQL, Spark, Airflow on AWS."
JD_TEXT = ("We are hiring a Senior Data Engineer to build streaming pipelines with Spark, Kafka "
           "and Snowflake on AWS. Python and SQL required; dbt is a plus.")

KEYWORDS = json.dumps({"keywords": "**Hard Skills:** Spark, Kafka, Snowflake"})
SUGGESTIONS = json.dumps({"suggestedEdits": "- Mention Kafka in the Acme role"})


class TestCheckInputs:

    def test_usable_inputs(self):
        assert check_inputs(RESUME_TEXT, JD_TEXT) == []

    def test_short_jd_and_missing_resume(self):
        problems = check_inputs("  ", "x" * (MIN_JD_CHARS - 1))
        assert len(problems) == 2
        assert any(str(MIN_JD_CHARS) in p for p in problems)


class TestPromptCalls:

    def test_keywords(self, make_provider):
        provider = make_provider({SYSTEM_KEYWORDS: KEYWORDS})
        assert analyze_job_description(JD_TEXT, provider) == "**Hard Skills:** Spark, Kafka, Snowflake"
        assert JD_TEXT in provider.calls[0]["user"]

    def test_suggestions_see_the_analysis(self, make_provider):
        provider = make_provider({SYSTEM_SUGGEST: SUGGESTIONS})
        out = suggest_resume_edits(RESUME_TEXT, JD_TEXT, "Spark, Kafka", provider)
        assert out == "- Mention Kafka in the Acme role"
        assert "Spark, Kafka" in provider.calls[0]["user"]

    def test_missing_field_is_generation_failure(self, make_provider):
        provider = make_provider({SYSTEM_KEYWORDS: json.dumps({"other": "x"})})
        with pytest.raises(GenerationFailure):
            analyze_job_description(JD_TEXT, provider)

    def test_fenced_resume_json_is_accepted(self, make_provider, resume_json):
        provider = make_provider({SYSTEM_TAILOR_JSON: f"```json\n{resume_json}\n```"})
        resume = generate_tailored_resume(RESUME_TEXT, JD_TEXT, provider)
        assert resume.name == "Jane Doe"

    def test_invalid_resume_raises_without_retry(self, make_provider, raw_resume):
        del raw_resume["phone"]
        provider = make_provider({SYSTEM_TAILOR_JSON: json.dumps(raw_resume)})
        with pytest.raises(SchemaError) as exc:
            generate_tailored_resume(RESUME_TEXT, JD_TEXT, provider)
        assert "phone" in exc.value.fields
        assert len(provider.calls) == 1

    def test_schema_retry(self, make_provider, raw_resume, resume_json):
        bad = dict(raw_resume)
        del bad["phone"]
        provider = make_provider({SYSTEM_TAILOR_JSON: [json.dumps(bad), resume_json]})
        resume = generate_tailored_resume(RESUME_TEXT, JD_TEXT, provider, schema_retries=1)
        assert resume.phone == "555-1234"
        assert len(provider.calls) == 2


class TestRunTailoring:

    def test_all_calls_succeed(self, make_provider, resume_json):
        provider = make_provider({
            SYSTEM_KEYWORDS: KEYWORDS,
            SYSTEM_SUGGEST: SUGGESTIONS,
            SYSTEM_TAILOR_JSON: resume_json,
        })
        result = run_tailoring(RESUME_TEXT, JD_TEXT, provider)
        assert result.ok
        assert result.keywords.startswith("**Hard Skills:**")
        assert result.suggestions.startswith("- Mention Kafka")
        assert result.resume.name == "Jane Doe"
        assert 0 < result.overlap["match_score"] <= 100
        assert ("kafka", 1.0) in result.overlap["missing"]

    def test_keyword_analysis_runs_first(self, make_provider, resume_json):
        provider = make_provider({
            SYSTEM_KEYWORDS: KEYWORDS,
            SYSTEM_SUGGEST: SUGGESTIONS,
            SYSTEM_TAILOR_JSON: resume_json,
        })
        run_tailoring(RESUME_TEXT, JD_TEXT, provider)
        assert provider.calls[0]["system"] == SYSTEM_KEYWORDS
        assert "Spark, Kafka, Snowflake" in provider.calls_for(SYSTEM_SUGGEST)[0]["user"]

    def test_failures_are_independent(self, make_provider):
        provider = make_provider({
            SYSTEM_KEYWORDS: KEYWORDS,
            SYSTEM_SUGGEST: SUGGESTIONS,
            SYSTEM_TAILOR_JSON: GenerationFailure("model overloaded"),
        })
        result = run_tailoring(RESUME_TEXT, JD_TEXT, provider)
        assert not result.ok
        assert list(result.errors) == ["resume"]
        assert result.resume is None
        assert result.suggestions == "- Mention Kafka in the Acme role"

    def test_failed_analysis_still_suggests(self, make_provider, resume_json):
        provider = make_provider({
            SYSTEM_KEYWORDS: "not json at all",
            SYSTEM_SUGGEST: SUGGESTIONS,
            SYSTEM_TAILOR_JSON: resume_json,
        })
        result = run_tailoring(RESUME_TEXT, JD_TEXT, provider)
        assert "keywords" in result.errors
        assert result.keywords is None
        assert result.suggestions is not None
        assert result.resume is not None
