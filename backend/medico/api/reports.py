"""
Report analysis endpoint - structured risk analysis of a medical report image.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, status

from ..core.exceptions import ReportAnalysisError
from ..models import ReportAnalysisResult
from ..services import AIService, get_ai_service
from ..services.dashboard import summarize_report
from ..utils.auth import get_current_user_email
from .deps import read_image_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("/analyze", response_model=ReportAnalysisResult)
async def analyze_report(
    image: UploadFile = File(...),
    email: str = Depends(get_current_user_email),
    ai_service: AIService = Depends(get_ai_service),
):
    """
    Analyze a photo of a lab report, prescription, or medical summary.

    Raises:
        HTTPException: 400 for unsupported files, 502 when analysis fails
    """
    attachment = await read_image_upload(image)
    try:
        analysis = await ai_service.analyze_medical_report(attachment)
    except ReportAnalysisError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to analyze report. Please ensure the image is clear.",
        ) from e
    return summarize_report(analysis)
