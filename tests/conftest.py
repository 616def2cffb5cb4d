import copy
import json
import threading

import pytest

from documents.schema import require_resume

SAMPLE_RESUME = {
    "name": "Jane Doe",
    "candidateTitle": "Senior Data Engineer",
    "email": "jane@example.com",
    "phone": "555-1234",
    "linkedin": "linkedin.com/in/janedoe",
    "address": "New York, NY",
    "summary": {
        "title": "Professional Summary",
        "body": "Data engineer with 8 years building batch and streaming pipelines on AWS.",
    },
    "workExperience": [
        {
            "jobTitle": "Senior Data Engineer",
            "company": "Acme Corp",
            "location": "New York, NY",
            "dates": "2021 - Present",
            "description": [
                "Led a team of 5 engineers migrating nightly ETL to Spark on EMR",
                "Cut warehouse costs 30% by partitioning Snowflake tables",
            ],
        },
        {
            "jobTitle": "Data Engineer",
            "company": "Globex",
            "location": "Boston, MA",
            "dates": "2017 - 2021",
            "description": [],
        },
    ],
    "education": [
        {
            "degree": "B.S. Computer Science",
            "school": "State University",
            "location": "Albany, NY",
            "dates": "2013 - 2017",
            "details": ["Dean's list"],
        }
    ],
    "otherSections": [
        {"title": "Skills", "body": "- Python, SQL, Spark\n\n* Airflow, dbt\nAWS certified"},
    ],
    "fullResumeText": "Jane Doe\nSenior Data Engineer\n...",
}

MINIMAL_RESUME = {
    "name": "John Roe",
    "email": "john@example.com",
    "phone": "555-0000",
    "summary": {"title": "Summary", "body": ""},
    "workExperience": [],
    "education": [],
    "fullResumeText": "John Roe",
}


@pytest.fixture
def raw_resume():
    return copy.deepcopy(SAMPLE_RESUME)


@pytest.fixture
def minimal_raw():
    return copy.deepcopy(MINIMAL_RESUME)


@pytest.fixture
def resume(raw_resume):
    return require_resume(raw_resume)


class FakeProvider:
    """
    Stands in for a model provider. ``replies`` maps a system prompt to a
    reply string, a list of replies consumed in order, or an exception to raise.
    """
    name = "fake"

    def __init__(self, replies=None, default=None):
        self.replies = {k: (list(v) if isinstance(v, list) else v) for k, v in (replies or {}).items()}
        self.default = default
        self.calls = []
        self._lock = threading.Lock()

    def chat(self, model, system, user, temperature, max_tokens, json_mode=False):
        with self._lock:
            self.calls.append({"model": model, "system": system, "user": user, "json_mode": json_mode})
            reply = self.replies.get(system, self.default)
            if isinstance(reply, list):
                reply = reply.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if reply is None:
            raise AssertionError("FakeProvider got an unexpected prompt")
        return reply

    def calls_for(self, system):
        return [c for c in self.calls if c["system"] == system]


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def resume_json(raw_resume):
    return json.dumps(raw_resume)
