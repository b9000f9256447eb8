from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.api.dependencies import get_container
from app.schemas.resume import ParsePdfResponse, PdfInfo
from app.services.container import ServiceContainer
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Resume text extraction endpoints
router = APIRouter(tags=["Resume"])


@router.post("/parse-pdf", response_model=ParsePdfResponse)
async def parse_pdf(file: Optional[UploadFile] = File(None), container: ServiceContainer = Depends(get_container)):
    """
    Extract text from an uploaded PDF resume.

    Used by the bulk-upload screen before applications are submitted.
    """
    if not file or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")

    resume_service = container.resume_service
    if not resume_service.is_pdf(file.filename, file.content_type):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File must be a PDF")

    file_content = await file.read()
    logger.info(f"[API] Parsing PDF: {file.filename} ({len(file_content)} bytes)")

    try:
        parsed = resume_service.parse_pdf(file_content)
    except Exception as e:
        logger.error(f"[API] PDF parsing error for {file.filename}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to parse PDF")

    return ParsePdfResponse(
        success=True,
        text=parsed.text,
        pages=parsed.pages,
        info=PdfInfo(**parsed.info),
    )
