"""
Canonical Resume model and its validator.

The generation prompt asks the model for camelCase JSON (``workExperience``,
``fullResumeText`` ...). Models accept those keys and expose snake_case
attributes. Validated resumes are frozen: sequences are tuples and assignment
raises, so a layout pass can never be fed a resume that changed under it.
"""
from dataclasses import dataclass
from typing import Annotated, Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import SchemaError


class _Model(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def _none_to_empty(v):
    return () if v is None else v


# null on an optional list means "absent"
Lines = Annotated[Tuple[str, ...], BeforeValidator(_none_to_empty)]


class Summary(_Model):
    title: str
    body: str


class WorkItem(_Model):
    job_title: str
    company: str
    location: str
    dates: str
    description: Lines = ()


class EducationItem(_Model):
    degree: str
    school: str
    location: Optional[str] = None
    dates: Optional[str] = None
    details: Lines = ()


class Section(_Model):
    title: str
    body: str


class Resume(_Model):
    name: str
    candidate_title: Optional[str] = None
    email: str
    phone: str
    linkedin: Optional[str] = None
    address: Optional[str] = None
    summary: Summary
    work_experience: Tuple[WorkItem, ...]
    education: Tuple[EducationItem, ...]
    other_sections: Annotated[Tuple[Section, ...], BeforeValidator(_none_to_empty)] = ()
    full_resume_text: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v


@dataclass(frozen=True)
class Valid:
    resume: Resume

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Invalid:
    error: SchemaError

    @property
    def ok(self) -> bool:
        return False


ValidationResult = Union[Valid, Invalid]


def _violation(err: Dict[str, Any]) -> Tuple[str, str]:
    path = ".".join(str(p) for p in err.get("loc", ()))
    if err.get("type") == "missing":
        return path, "is required"
    msg = err.get("msg", "is invalid")
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    return path, msg


def validate(raw: Any) -> ValidationResult:
    """
    Validate a raw generation payload against the Resume model.
    Expected failures come back as ``Invalid`` carrying one SchemaError that
    lists every violated field; this function does not raise for them.
    """
    try:
        return Valid(Resume.model_validate(raw))
    except ValidationError as e:
        violations = [_violation(err) for err in e.errors()]
        return Invalid(SchemaError(violations))


def require_resume(raw: Any) -> Resume:
    result = validate(raw)
    if isinstance(result, Invalid):
        raise result.error
    return result.resume


def resume_to_dict(resume: Resume) -> Dict[str, Any]:
    return resume.model_dump(mode="json", by_alias=True)
