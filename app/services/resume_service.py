"""
Resume Processing Service

Text extraction from resume files, and the acquisition chain that turns a
job-board payload into usable resume text.
"""

import base64
import binascii
import re
from dataclasses import dataclass
from io import BytesIO
from typing import Callable, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup
from PyPDF2 import PdfReader

from app.schemas.intake import ExtractedResume
from app.schemas.webhook import IncomingApplicationPayload
from app.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_FILE_NAME = "resume.pdf"
DEFAULT_CONTENT_TYPE = "application/pdf"


@dataclass
class ParsedPdf:
    text: str
    pages: int
    info: Dict[str, Optional[str]]


class ResumeService:
    """Service for extracting text from resume files"""

    MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

    def is_pdf(self, filename: Optional[str], content_type: Optional[str]) -> bool:
        """Accept by MIME type or by extension, whichever the sender got right."""
        if content_type and "pdf" in content_type.lower():
            return True
        return bool(filename) and filename.lower().endswith(".pdf")

    def extract_text(self, file_content: bytes) -> Tuple[str, Optional[str]]:
        """
        Extract text from PDF bytes.

        Args:
            file_content: File content as bytes

        Returns:
            Tuple of (extracted_text, error_message)
        """
        try:
            parsed = self.parse_pdf(file_content)
        except Exception as e:
            error_msg = f"PDF extraction error: {str(e)}"
            logger.warning(f"[ResumeService] {error_msg}")
            return "", error_msg

        if not parsed.text:
            return "", "PDF appears to be image-based (scanned) - no text content found"

        logger.info(f"[ResumeService] ✅ PDF extraction complete: {len(parsed.text)} characters from {parsed.pages} page(s)")
        if len(parsed.text) < 50:
            logger.warning(f"[ResumeService] ⚠️ Extracted text is very short ({len(parsed.text)} chars)")
        return parsed.text, None

    def parse_pdf(self, file_content: bytes) -> ParsedPdf:
        """
        Parse a PDF into cleaned text, page count and document info.

        Raises whatever PyPDF2 raises for unreadable files; callers decide
        whether that is fatal.
        """
        if len(file_content) > self.MAX_FILE_SIZE:
            raise ValueError(f"File size exceeds maximum of {self.MAX_FILE_SIZE / 1024 / 1024}MB")

        reader = PdfReader(BytesIO(file_content))

        text_parts = []
        for page in reader.pages:
            text = page.extract_text()
            if text:
                text_parts.append(text)

        metadata = reader.metadata
        info = {
            "title": getattr(metadata, "title", None) if metadata else None,
            "author": getattr(metadata, "author", None) if metadata else None,
            "creator": getattr(metadata, "creator", None) if metadata else None,
        }
        return ParsedPdf(text=self._clean_text("\n".join(text_parts)), pages=len(reader.pages), info=info)

    def html_to_text(self, markup: str) -> str:
        """Strip job-board resume markup down to plain text."""
        soup = BeautifulSoup(markup, "html.parser")
        return self._clean_text(soup.get_text("\n", strip=True))

    def _clean_text(self, text: str) -> str:
        """Clean and normalize extracted text"""
        # Normalize line breaks
        text = text.replace("\r\n", "\n")
        # Collapse runs of blank lines
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()


ResumeStrategy = Callable[[IncomingApplicationPayload, Optional[bytes]], Optional[str]]


class ResumeAcquirer:
    """
    Produce resume text for a webhook payload.

    Strategies run in order; the first one returning non-empty text wins.
    A strategy signals "nothing usable" by returning None. `acquire` never
    raises: when every strategy comes up empty, text is synthesized from
    the applicant's identity fields.
    """

    def __init__(self, resume_service: ResumeService, strategies: Optional[List[Tuple[str, ResumeStrategy]]] = None):
        self.resume_service = resume_service
        self.strategies = strategies if strategies is not None else [
            ("file", self.from_inline_file),
            ("text", self.from_sender_text),
            ("html", self.from_sender_html),
        ]

    def acquire(self, payload: IncomingApplicationPayload) -> ExtractedResume:
        file = payload.resume_file
        raw_bytes = self.decode_file(payload)
        file_name = (file.fileName if file else None) or DEFAULT_FILE_NAME
        content_type = (file.contentType if file else None) or DEFAULT_CONTENT_TYPE

        for name, strategy in self.strategies:
            try:
                text = strategy(payload, raw_bytes)
            except Exception as e:
                logger.warning(f"[ResumeAcquirer] Strategy '{name}' failed for {payload.delivery_id or '<no id>'}: {e}")
                continue
            if text and text.strip():
                logger.info(f"[ResumeAcquirer] Resume text from '{name}' ({len(text)} chars)")
                return ExtractedResume(
                    text=text,
                    raw_bytes=raw_bytes,
                    file_name=file_name,
                    content_type=content_type,
                    source=name,
                )

        logger.info(f"[ResumeAcquirer] No resume text available for {payload.delivery_id or '<no id>'}; synthesizing")
        return ExtractedResume(
            text=self.synthesize(payload),
            raw_bytes=raw_bytes,
            file_name=file_name,
            content_type=content_type,
            source="synthesized",
        )

    def decode_file(self, payload: IncomingApplicationPayload) -> Optional[bytes]:
        """Inline base64 file bytes, or None when absent or undecodable."""
        file = payload.resume_file
        if not file or not file.data:
            return None
        try:
            raw = base64.b64decode(file.data, validate=False)
        except (binascii.Error, ValueError) as e:
            logger.warning(f"[ResumeAcquirer] Could not decode inline resume file: {e}")
            return None
        return raw or None

    def from_inline_file(self, payload: IncomingApplicationPayload, raw_bytes: Optional[bytes]) -> Optional[str]:
        if not raw_bytes:
            return None
        text, error = self.resume_service.extract_text(raw_bytes)
        if error:
            logger.warning(f"[ResumeAcquirer] Inline file unusable: {error}")
            return None
        return text

    def from_sender_text(self, payload: IncomingApplicationPayload, raw_bytes: Optional[bytes]) -> Optional[str]:
        return payload.resume_text or None

    def from_sender_html(self, payload: IncomingApplicationPayload, raw_bytes: Optional[bytes]) -> Optional[str]:
        if not payload.resume_html:
            return None
        return self.resume_service.html_to_text(payload.resume_html) or None

    def synthesize(self, payload: IncomingApplicationPayload) -> str:
        applicant = payload.applicant
        name = (applicant.fullName if applicant else None) or "Unknown"
        email = (applicant.email if applicant else None) or ""
        phone = (applicant.phoneNumber if applicant else None) or ""
        return f"Name: {name}\nEmail: {email}\nPhone: {phone}"
