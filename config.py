"""
Runtime settings for ResuMate.

Everything comes from the environment (a local .env is loaded first). API keys
typed into the Streamlit sidebar are merged on top of these per session.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from dotenv import load_dotenv

from documents.formatters import PageSetup, ttf_page_setup
from documents.io_utils import ExtractionConfig

load_dotenv()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        raise ValueError(f"{name} must be a number, got {os.getenv(name)!r}")


def _int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {os.getenv(name)!r}")


@dataclass(frozen=True)
class Settings:
    provider: str = "gemini"
    model: Optional[str] = None
    temperature: float = 0.2
    max_tokens: int = 4096
    log_level: str = "INFO"
    max_upload_mb: int = 10
    # TrueType files for PDF export; unset keeps the built-in Times faces
    pdf_font: Optional[str] = None
    pdf_font_bold: Optional[str] = None
    pdf_font_italic: Optional[str] = None
    keys: Dict[str, str] = field(default_factory=dict)

    @property
    def extraction(self) -> ExtractionConfig:
        return ExtractionConfig(max_bytes=self.max_upload_mb * 1024 * 1024)

    @property
    def pdf_page(self) -> PageSetup:
        if not self.pdf_font:
            return PageSetup()
        return ttf_page_setup(self.pdf_font, self.pdf_font_bold, self.pdf_font_italic)

    def with_keys(self, overrides: Dict[str, str]) -> Dict[str, str]:
        """Env keys overlaid with any non-empty keys the user typed in."""
        merged = dict(self.keys)
        merged.update({k: v.strip() for k, v in (overrides or {}).items() if v and v.strip()})
        return merged


def load_settings() -> Settings:
    keys = {
        "gemini": os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or "",
        "openai": os.getenv("OPENAI_API_KEY", ""),
        "anthropic": os.getenv("ANTHROPIC_API_KEY", ""),
    }
    return Settings(
        provider=os.getenv("RESUMATE_PROVIDER", "gemini").lower(),
        model=os.getenv("RESUMATE_MODEL") or None,
        temperature=_float("RESUMATE_TEMPERATURE", 0.2),
        max_tokens=_int("RESUMATE_MAX_TOKENS", 4096),
        log_level=os.getenv("RESUMATE_LOG_LEVEL", "INFO").upper(),
        max_upload_mb=_int("RESUMATE_MAX_UPLOAD_MB", 10),
        pdf_font=os.getenv("RESUMATE_PDF_FONT") or None,
        pdf_font_bold=os.getenv("RESUMATE_PDF_FONT_BOLD") or None,
        pdf_font_italic=os.getenv("RESUMATE_PDF_FONT_ITALIC") or None,
        keys={k: v for k, v in keys.items() if v},
    )


def configure_logging(level: str = "INFO"):
    # Streamlit reruns the script on every interaction; only install handlers once
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root.setLevel(level)
