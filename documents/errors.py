from typing import List, Tuple


class ResumateError(Exception):
    """Base class for errors surfaced to the user as a notification."""


class ExtractionError(ResumateError):
    """Text could not be obtained from an uploaded file."""


class GenerationFailure(ResumateError):
    """The content generation call failed or returned something unusable."""


class EmissionError(ResumateError):
    """Layout or byte-stream emission failed on a validated resume."""


class SchemaError(ResumateError):
    """
    Generated structured data failed validation.
    Carries every violation, not just the first, as (field_path, message) pairs.
    """

    def __init__(self, violations: List[Tuple[str, str]]):
        self.violations = list(violations)
        super().__init__(self._describe())

    @property
    def fields(self) -> List[str]:
        return [path for path, _ in self.violations]

    def _describe(self) -> str:
        if not self.violations:
            return "Resume data is invalid."
        parts = [f"{path}: {msg}" if path else msg for path, msg in self.violations]
        return "Resume data is invalid (" + "; ".join(parts) + ")"
