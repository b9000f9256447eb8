"""
Resume/PDF parsing related Pydantic schemas.
"""

from typing import Optional

from pydantic import BaseModel


class PdfInfo(BaseModel):
    title: Optional[str] = None
    author: Optional[str] = None
    creator: Optional[str] = None


class ParsePdfResponse(BaseModel):
    success: bool
    text: str
    pages: int
    info: PdfInfo


__all__ = ["PdfInfo", "ParsePdfResponse"]
