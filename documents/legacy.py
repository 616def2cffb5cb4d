from typing import Any, Dict

# keys that only the structured (current) generation shape carries
_CANONICAL_KEYS = ("workExperience", "education", "otherSections")


def is_canonical(raw: Dict[str, Any]) -> bool:
    return any(k in raw for k in _CANONICAL_KEYS) or isinstance(raw.get("summary"), dict)


def migrate_legacy(raw: Any) -> Any:
    """
    Upgrade the older flat generation shapes to the structured one:
      - {"tailoredResume": "..."}                     plain text only
      - {"summary": "...", "sections": [{title, body}]}  sectioned text
    Anything already structured, or not a dict, is returned untouched so the
    validator reports on exactly what was received.
    """
    if not isinstance(raw, dict) or is_canonical(raw):
        return raw

    out = {k: v for k, v in raw.items() if k not in ("sections", "tailoredResume")}

    summary = raw.get("summary")
    if isinstance(summary, str):
        out["summary"] = {"title": "Summary", "body": summary}

    if "sections" in raw:
        out["otherSections"] = raw.get("sections")

    if "fullResumeText" not in out and isinstance(raw.get("tailoredResume"), str):
        out["fullResumeText"] = raw["tailoredResume"]

    out.setdefault("workExperience", [])
    out.setdefault("education", [])
    return out
