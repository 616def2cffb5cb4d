import logging
from dataclasses import dataclass
from io import BytesIO
from typing import List, Sequence, Tuple

from .errors import EmissionError
from .io_utils import DOCX_MIME, PDF_MIME
from .layout import (
    BulletBlock,
    EntryHeadingBlock,
    HeaderBlock,
    LayoutBlock,
    ParagraphBlock,
    SectionTitleBlock,
    layout,
)
from .schema import Resume

logger = logging.getLogger(__name__)

DOCX_NAME = "tailored-resume.docx"
PDF_NAME = "tailored-resume.pdf"
TXT_NAME = "tailored-resume.txt"
TXT_MIME = "text/plain"

BULLET_GLYPH = "•"

# -------- DOCX ----------
from docx import Document
from docx.enum.style import WD_STYLE_TYPE
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, Inches

CONTACT_STYLE = "Contact Info"


def _docx_styles(doc):
    style = doc.styles['Normal']
    font = style.font
    font.name = 'Calibri'
    font.size = Pt(11)

    if CONTACT_STYLE not in [s.name for s in doc.styles]:
        cstyle = doc.styles.add_style(CONTACT_STYLE, WD_STYLE_TYPE.PARAGRAPH)
        cstyle.base_style = style
        cstyle.font.name = 'Calibri'
        cstyle.font.size = Pt(10)


def _add_heading(doc, text, level=1, centered=False):
    h = doc.add_heading(text, level=level)
    h.alignment = WD_ALIGN_PARAGRAPH.CENTER if centered else WD_ALIGN_PARAGRAPH.LEFT
    return h


def _add_header(doc, block: HeaderBlock):
    h = _add_heading(doc, block.name, level=1, centered=True)
    h.paragraph_format.space_after = Pt(4)
    if block.candidate_title:
        p = doc.add_paragraph()
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        p.add_run(block.candidate_title).italic = True
    if block.contact_line:
        p = doc.add_paragraph(block.contact_line, style=CONTACT_STYLE)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        p.paragraph_format.space_after = Pt(10)


def _add_entry_heading(doc, block: EntryHeadingBlock):
    if block.primary:
        p = doc.add_paragraph()
        p.paragraph_format.space_before = Pt(6)
        p.paragraph_format.space_after = Pt(0)
        p.add_run(block.primary).bold = True
    if block.secondary:
        p = doc.add_paragraph()
        p.paragraph_format.space_after = Pt(2)
        p.add_run(block.secondary).italic = True


def build_docx(blocks: Sequence[LayoutBlock]) -> bytes:
    try:
        doc = Document()
        _docx_styles(doc)
        for block in blocks:
            if isinstance(block, HeaderBlock):
                _add_header(doc, block)
            elif isinstance(block, SectionTitleBlock):
                h = _add_heading(doc, block.title, level=2)
                h.paragraph_format.space_before = Pt(12)
                h.paragraph_format.space_after = Pt(6)
            elif isinstance(block, EntryHeadingBlock):
                _add_entry_heading(doc, block)
            elif isinstance(block, BulletBlock):
                p = doc.add_paragraph(block.text, style="List Bullet")
                p.paragraph_format.left_indent = Inches(0.5)
                p.paragraph_format.space_after = Pt(2)
            elif isinstance(block, ParagraphBlock):
                p = doc.add_paragraph(block.text)
                p.paragraph_format.space_after = Pt(6)
            else:
                raise EmissionError(f"Unknown layout block: {type(block).__name__}")

        buf = BytesIO()
        doc.save(buf)
    except EmissionError:
        raise
    except Exception as e:
        raise EmissionError(f"Could not build DOCX: {e}") from e
    logger.info("Built DOCX from %d blocks", len(blocks))
    return buf.getvalue()

# -------- PDF ----------
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas


@dataclass(frozen=True)
class PageSetup:
    """Page geometry in points. Cursor positions are measured from the top edge."""
    width: float = A4[0]
    height: float = A4[1]
    margin: float = 40
    font: str = "Times-Roman"
    bold_font: str = "Times-Bold"
    italic_font: str = "Times-Italic"
    bullet_offset: float = 10
    bullet_text_offset: float = 25

    @property
    def text_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def printable_height(self) -> float:
        return self.height - 2 * self.margin

    @property
    def bottom(self) -> float:
        return self.height - self.margin


def _register_ttf(name, path):
    if name in pdfmetrics.getRegisteredFontNames():
        return
    try:
        pdfmetrics.registerFont(TTFont(name, path))
    except Exception as e:
        raise EmissionError(f"Could not load PDF font {path}: {e}") from e


def ttf_page_setup(regular: str, bold: str = None, italic: str = None,
                   family: str = "ResumeSans") -> PageSetup:
    """
    PageSetup that draws with TrueType fonts instead of the built-in Times
    faces. The Type1 faces only cover Latin-1, so names such as "Łukasz" lose
    glyphs without a TTF that has them. Bold and italic fall back to the
    regular file. Faces are registered once per family name.
    """
    _register_ttf(family, regular)
    _register_ttf(f"{family}-Bold", bold or regular)
    _register_ttf(f"{family}-Italic", italic or regular)
    return PageSetup(font=family, bold_font=f"{family}-Bold", italic_font=f"{family}-Italic")


@dataclass(frozen=True)
class TextRun:
    lines: Tuple[str, ...]
    font: str
    size: float
    leading: float
    x: float
    centered: bool = False

    @property
    def height(self) -> float:
        return len(self.lines) * self.leading


@dataclass(frozen=True)
class PlacedBlock:
    block: LayoutBlock
    page: int
    top: float
    height: float
    runs: Tuple[TextRun, ...]
    space_before: float = 0


# (space_before, space_after) per block type
SPACING = {
    HeaderBlock: (0, 18),
    SectionTitleBlock: (8, 12),
    ParagraphBlock: (0, 4),
    EntryHeadingBlock: (4, 2),
    BulletBlock: (0, 2),
}
RULE_GAP = 6


def _run(text, font, size, leading, x, width, centered=False):
    lines = tuple(simpleSplit(text, font, size, width))
    return TextRun(lines=lines, font=font, size=size, leading=leading, x=x, centered=centered)


def _runs(block: LayoutBlock, page: PageSetup) -> List[TextRun]:
    left, width = page.margin, page.text_width
    if isinstance(block, HeaderBlock):
        runs = [_run(block.name, page.bold_font, 24, 28, left, width, centered=True)]
        if block.candidate_title:
            runs.append(_run(block.candidate_title, page.italic_font, 13, 16, left, width, centered=True))
        if block.contact_line:
            runs.append(_run(block.contact_line, page.font, 10, 12, left, width, centered=True))
        return runs
    if isinstance(block, SectionTitleBlock):
        return [_run(block.title.upper(), page.bold_font, 14, 16, left, width)]
    if isinstance(block, EntryHeadingBlock):
        runs = []
        if block.primary:
            runs.append(_run(block.primary, page.bold_font, 11, 13, left, width))
        if block.secondary:
            runs.append(_run(block.secondary, page.italic_font, 10, 12, left, width))
        return runs
    if isinstance(block, BulletBlock):
        indent = page.bullet_text_offset
        return [_run(block.text, page.font, 11, 12, left + indent, width - indent)]
    if isinstance(block, ParagraphBlock):
        return [_run(block.text, page.font, 11, 12, left, width)]
    raise EmissionError(f"Unknown layout block: {type(block).__name__}")


def measure(block: LayoutBlock, page: PageSetup = PageSetup()) -> Tuple[Tuple[TextRun, ...], float]:
    """Wrapped runs of a block and its full height, spacing included."""
    runs = tuple(_runs(block, page))
    before, after = SPACING[type(block)]
    height = before + sum(r.height for r in runs) + after
    if isinstance(block, SectionTitleBlock):
        height += RULE_GAP
    return runs, height


def paginate(blocks: Sequence[LayoutBlock], page: PageSetup = PageSetup()) -> List[PlacedBlock]:
    """
    Assign every block a page and a top offset. A block that would cross the
    bottom margin moves to a fresh page whose cursor restarts at the top
    margin. Blocks are never split; one taller than the printable area is put
    at the top of its own page and overflows the bottom margin.
    """
    placed = []
    page_no = 0
    cursor = page.margin
    for block in blocks:
        runs, height = measure(block, page)
        if cursor + height > page.bottom and cursor > page.margin:
            page_no += 1
            cursor = page.margin
        if height > page.printable_height:
            logger.warning(
                "Block %s is %.0fpt tall, taller than the %.0fpt printable area; it will overflow page %d",
                type(block).__name__, height, page.printable_height, page_no + 1,
            )
        placed.append(PlacedBlock(
            block=block, page=page_no, top=cursor, height=height, runs=runs,
            space_before=SPACING[type(block)][0],
        ))
        cursor += height
    return placed


def _draw(c, item: PlacedBlock, page: PageSetup):
    y = item.top + item.space_before
    for i, run in enumerate(item.runs):
        c.setFont(run.font, run.size)
        for j, line in enumerate(run.lines):
            y += run.leading
            baseline = page.height - y
            if run.centered:
                c.drawCentredString(page.width / 2, baseline, line)
            else:
                c.drawString(run.x, baseline, line)
            if isinstance(item.block, BulletBlock) and i == 0 and j == 0:
                c.drawString(page.margin + page.bullet_offset, baseline, BULLET_GLYPH)
    if isinstance(item.block, SectionTitleBlock):
        rule_y = page.height - (y + RULE_GAP / 2)
        c.setLineWidth(0.5)
        c.line(page.margin, rule_y, page.width - page.margin, rule_y)


def build_pdf(blocks: Sequence[LayoutBlock], page: PageSetup = PageSetup()) -> bytes:
    try:
        plan = paginate(blocks, page)
        buf = BytesIO()
        c = canvas.Canvas(buf, pagesize=(page.width, page.height))
        header = next((b for b in blocks if isinstance(b, HeaderBlock)), None)
        if header is not None:
            c.setTitle(header.name)
        current = 0
        for item in plan:
            while item.page > current:
                c.showPage()
                current += 1
            _draw(c, item, page)
        c.showPage()
        c.save()
    except EmissionError:
        raise
    except Exception as e:
        raise EmissionError(f"Could not build PDF: {e}") from e
    logger.info("Built PDF from %d blocks on %d page(s)", len(blocks), current + 1)
    return buf.getvalue()

# -------- Plain text ----------

def build_text(blocks: Sequence[LayoutBlock]) -> str:
    """Structured preview of the layout; exports use fullResumeText instead."""
    lines = []
    for block in blocks:
        if isinstance(block, HeaderBlock):
            lines.append(block.name)
            if block.candidate_title:
                lines.append(block.candidate_title)
            if block.contact_line:
                lines.append(block.contact_line)
        elif isinstance(block, SectionTitleBlock):
            lines += ["", block.title.upper()]
        elif isinstance(block, EntryHeadingBlock):
            lines += [x for x in (block.primary, block.secondary) if x]
        elif isinstance(block, BulletBlock):
            lines.append(f"{BULLET_GLYPH} {block.text}")
        elif isinstance(block, ParagraphBlock):
            lines.append(block.text)
    return "\n".join(lines).strip()


def export(resume: Resume, fmt: str, page: PageSetup = None) -> Tuple[str, str, bytes]:
    """(file name, mime type, bytes) for one export action; layout is re-derived every call."""
    fmt = (fmt or "").lower().strip()
    if fmt == "txt":
        return TXT_NAME, TXT_MIME, resume.full_resume_text.encode("utf-8")
    blocks = layout(resume)
    if fmt == "docx":
        return DOCX_NAME, DOCX_MIME, build_docx(blocks)
    if fmt == "pdf":
        return PDF_NAME, PDF_MIME, build_pdf(blocks, page or PageSetup())
    raise ValueError(f"Unsupported export format: {fmt!r}. Use docx, pdf, or txt.")
