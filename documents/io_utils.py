import io
import logging
import tempfile
from dataclasses import dataclass

import docx2txt
from pypdf import PdfReader

from .errors import ExtractionError

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@dataclass(frozen=True)
class ExtractionConfig:
    """Fixed once per app run and handed to TextExtractor; nothing global."""
    max_bytes: int = 10 * 1024 * 1024
    encoding: str = "utf-8"
    page_separator: str = "\n"


class TextExtractor:
    def __init__(self, config: ExtractionConfig = ExtractionConfig()):
        self.config = config

    def read_txt(self, data: bytes) -> str:
        return data.decode(self.config.encoding, errors="ignore")

    def read_pdf(self, data: bytes) -> str:
        try:
            reader = PdfReader(io.BytesIO(data))
            if reader.is_encrypted:
                raise ExtractionError("The PDF is password protected.")
            return self.config.page_separator.join(page.extract_text() or "" for page in reader.pages)
        except ExtractionError:
            raise
        except Exception as e:
            logger.warning("PDF parsing error: %s", e)
            raise ExtractionError("Failed to parse PDF file. It might be corrupted or protected.") from e

    def read_docx(self, data: bytes) -> str:
        # docx2txt expects a path
        try:
            with tempfile.NamedTemporaryFile(suffix=".docx", delete=True) as tmp:
                tmp.write(data); tmp.flush()
                return docx2txt.process(tmp.name) or ""
        except Exception as e:
            logger.warning("DOCX parsing error: %s", e)
            raise ExtractionError("Failed to parse DOCX file.") from e

    def extract(self, filename: str, data: bytes, mime: str = "") -> str:
        """Plain text of an uploaded resume; raises ExtractionError on anything unusable."""
        if len(data) > self.config.max_bytes:
            raise ExtractionError(
                f"File is too large ({len(data) // 1024} KB). Limit is {self.config.max_bytes // 1024} KB."
            )
        name = (filename or "").lower()
        if name.endswith(".pdf") or mime == PDF_MIME:
            text = self.read_pdf(data)
        elif name.endswith(".docx") or mime == DOCX_MIME:
            text = self.read_docx(data)
        elif name.endswith((".txt", ".md")) or mime.startswith("text/"):
            text = self.read_txt(data)
        else:
            raise ExtractionError("Unsupported file type. Please upload a PDF, DOCX, or TXT file.")

        if not text.strip():
            raise ExtractionError(
                "Could not extract any text from the resume file. It might be empty or an image-based file."
            )
        logger.info("Extracted %d characters from %s", len(text), filename)
        return text


def read_file(uploaded_file, extractor: TextExtractor = None) -> str:
    """Streamlit UploadedFile (or any object with .name/.read()) -> text."""
    extractor = extractor or TextExtractor()
    return extractor.extract(uploaded_file.name, uploaded_file.read(), getattr(uploaded_file, "type", "") or "")
