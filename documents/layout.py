"""
Format-independent layout of a validated Resume.

``layout()`` walks the resume once and returns a tuple of blocks. Emitters
(DOCX, PDF, text preview) only ever see blocks, so every output format agrees
on what text appears, in which order, and which lines are bullets.
"""
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from .schema import EducationItem, Resume, Section, WorkItem

SEP = " / "
BULLET_MARKERS = ("- ", "* ")


@dataclass(frozen=True)
class HeaderBlock:
    name: str
    contact_line: str
    candidate_title: Optional[str] = None


@dataclass(frozen=True)
class SectionTitleBlock:
    title: str


@dataclass(frozen=True)
class ParagraphBlock:
    text: str


@dataclass(frozen=True)
class EntryHeadingBlock:
    primary: str
    secondary: str


@dataclass(frozen=True)
class BulletBlock:
    text: str


LayoutBlock = Union[HeaderBlock, SectionTitleBlock, ParagraphBlock, EntryHeadingBlock, BulletBlock]


# XML 1.0 forbids these; extracted PDF text often carries form feeds
_PAGE_BREAKS_RE = re.compile(r"[\x0b\x0c]")
_ILLEGAL_RE = re.compile(r"[\x00-\x08\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def _clean(text: Optional[str]) -> str:
    return _ILLEGAL_RE.sub("", _PAGE_BREAKS_RE.sub(" ", text or ""))


def _join(parts: Iterable[Optional[str]]) -> str:
    parts = (_clean(p).strip() for p in parts)
    return SEP.join(p for p in parts if p)


def contact_line(resume: Resume) -> str:
    # fixed order: phone, email, linkedin, address
    return _join([resume.phone, resume.email, resume.linkedin, resume.address])


def classify_line(line: str) -> Optional[LayoutBlock]:
    """One body line -> BulletBlock, ParagraphBlock, or None for blank lines."""
    s = _clean(line).strip()
    if not s or s in ("-", "*"):
        return None
    for marker in BULLET_MARKERS:
        if s.startswith(marker):
            text = s[len(marker):].strip()
            return BulletBlock(text) if text else None
    return ParagraphBlock(s)


def body_blocks(body: str) -> List[LayoutBlock]:
    blocks = []
    for line in (body or "").splitlines():
        block = classify_line(line)
        if block is not None:
            blocks.append(block)
    return blocks


def _bullets(lines: Iterable[str]) -> List[BulletBlock]:
    cleaned = (_clean(s).strip() for s in lines)
    return [BulletBlock(s) for s in cleaned if s]


def _work_entry(item: WorkItem) -> List[LayoutBlock]:
    heading = EntryHeadingBlock(
        primary=_join([item.job_title, item.company]),
        secondary=_join([item.dates, item.location]),
    )
    return [heading, *_bullets(item.description)]


def _education_entry(item: EducationItem) -> List[LayoutBlock]:
    heading = EntryHeadingBlock(
        primary=_join([item.degree]),
        secondary=_join([item.dates, item.school, item.location]),
    )
    return [heading, *_bullets(item.details)]


def _other_section(section: Section, skip_empty: bool) -> List[LayoutBlock]:
    body = body_blocks(section.body)
    if not body and skip_empty:
        return []
    return [SectionTitleBlock(_clean(section.title).strip()), *body]


def layout(resume: Resume, skip_empty_sections: bool = False) -> Tuple[LayoutBlock, ...]:
    """
    Turn a Resume into an ordered block sequence. Pure and single-pass:
    the same resume always yields an equal tuple.

    skip_empty_sections drops an "other" section whose body has no text at
    all instead of emitting a bare title.
    """
    blocks: List[LayoutBlock] = [
        HeaderBlock(
            name=_clean(resume.name).strip(),
            contact_line=contact_line(resume),
            candidate_title=_clean(resume.candidate_title).strip() or None,
        )
    ]

    summary_body = _clean(resume.summary.body).strip()
    if summary_body:
        blocks.append(SectionTitleBlock(_clean(resume.summary.title).strip() or "Summary"))
        blocks.append(ParagraphBlock(summary_body))

    if resume.work_experience:
        blocks.append(SectionTitleBlock("Work Experience"))
        for item in resume.work_experience:
            blocks.extend(_work_entry(item))

    if resume.education:
        blocks.append(SectionTitleBlock("Education"))
        for item in resume.education:
            blocks.extend(_education_entry(item))

    for section in resume.other_sections:
        blocks.extend(_other_section(section, skip_empty_sections))

    return tuple(blocks)
