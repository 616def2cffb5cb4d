"""
Career chatbot: one conversation turn at a time.

The caller keeps the transcript and resends it on every call. ``step`` never
edits the turns it was given; it returns a new history with the user message
and the model reply appended, plus a Resume when the model says the interview
is complete and its data passes validation.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from documents.errors import GenerationFailure, SchemaError
from documents.legacy import migrate_legacy
from documents.schema import Invalid, Resume, validate
from .parsing import parse_json_object
from .prompts import SYSTEM_CHAT, USER_CHAT

logger = logging.getLogger(__name__)

ROLES = ("user", "model")

GREETING = (
    "Hello! I'm ResuMate, your AI career assistant. I can help you build a resume from scratch. "
    "To get started, please paste in the job description for the role you're targeting."
)


@dataclass(frozen=True)
class ChatTurn:
    role: str
    content: str

    def __post_init__(self):
        if self.role not in ROLES:
            raise ValueError(f"role must be one of {ROLES}, got {self.role!r}")


@dataclass(frozen=True)
class ChatStepResult:
    response: str
    history: Tuple[ChatTurn, ...]
    resume_data: Optional[Resume] = None
    schema_error: Optional[SchemaError] = None

    @property
    def complete(self) -> bool:
        return self.resume_data is not None


def _as_turns(history: Iterable) -> Tuple[ChatTurn, ...]:
    turns = []
    for h in history or ():
        if isinstance(h, ChatTurn):
            turns.append(h)
        else:
            turns.append(ChatTurn(role=h["role"], content=h["content"]))
    return tuple(turns)


def render_history(turns: Iterable[ChatTurn]) -> str:
    return "\n".join(f"{t.role}: {t.content}" for t in turns)


def _parse_reply(raw: str):
    """(response text, raw resumeData or None). A non-JSON reply is the response itself."""
    try:
        obj = parse_json_object(raw)
    except GenerationFailure:
        return raw.strip(), None
    response = obj.get("response")
    if not isinstance(response, str) or not response.strip():
        raise GenerationFailure("The chatbot reply has no 'response' text.")
    return response.strip(), obj.get("resumeData")


def step(history, message: str, provider, model: Optional[str] = None,
         temperature: float = 0.7, max_tokens: int = 4096) -> ChatStepResult:
    message = (message or "").strip()
    if not message:
        raise ValueError("Message is empty")
    turns = _as_turns(history)

    raw = provider.chat(
        model=model,
        system=SYSTEM_CHAT,
        user=USER_CHAT.format(history=render_history(turns), message=message),
        temperature=temperature,
        max_tokens=max_tokens,
        json_mode=True,
    )
    response, raw_resume = _parse_reply(raw)

    resume, schema_error = None, None
    if raw_resume is not None:
        result = validate(migrate_legacy(raw_resume))
        if isinstance(result, Invalid):
            schema_error = result.error
            logger.warning("Dropping chat resume data that failed validation: %s", schema_error)
        else:
            resume = result.resume
            logger.info("Chat produced a complete resume for %s", resume.name)

    new_history = turns + (ChatTurn("user", message), ChatTurn("model", response))
    return ChatStepResult(response=response, history=new_history, resume_data=resume, schema_error=schema_error)
