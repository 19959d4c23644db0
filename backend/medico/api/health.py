"""
Health API endpoints - risk profile, metric log, and the dashboard.
"""

import logging
from fastapi import APIRouter, Depends, status
from typing import List

from ..core.exceptions import AIServiceError
from ..models import HealthRiskProfile, HealthMetric, Dashboard, CHAT_MODES
from ..services import AIService, get_ai_service, default_risk_profile
from ..services.dashboard import build_dashboard
from ..storage import UserStorage, get_user_storage
from ..utils.auth import get_current_user_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/risk-profile", response_model=HealthRiskProfile)
async def get_risk_profile(
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    """Stored risk profile, or the default one if none was generated yet."""
    data = await user_storage.get_user_data(email)
    return data.risk_profile or default_risk_profile()


@router.post("/risk-profile/refresh", response_model=HealthRiskProfile)
async def refresh_risk_profile(
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
    ai_service: AIService = Depends(get_ai_service),
):
    """
    Regenerate the risk profile from everything the user said in any chat.

    When the AI cannot produce one, the default profile is returned and
    nothing is stored.
    """
    data = await user_storage.get_user_data(email)
    messages = [m for mode in CHAT_MODES for m in data.chats.get(mode.value, [])]
    messages.sort(key=lambda m: m.timestamp)

    try:
        profile = await ai_service.generate_risk_profile(messages)
    except AIServiceError as e:
        logger.warning(f"Risk profile generation failed, using defaults: {e.message}")
        return default_risk_profile()

    await user_storage.save_risk_profile(email, profile)
    logger.info(
        "Risk profile updated",
        extra={"extra_fields": {"overall_score": profile.overall_score}}
    )
    return profile


@router.get("/metrics", response_model=List[HealthMetric])
async def get_metrics(
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    return await user_storage.get_metrics(email)


@router.post("/metrics", response_model=List[HealthMetric], status_code=status.HTTP_201_CREATED)
async def add_metrics(
    metrics: List[HealthMetric],
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    """Append metrics entered by hand; returns the full log."""
    return await user_storage.add_metrics(email, metrics)


@router.get("/dashboard", response_model=Dashboard)
async def get_dashboard(
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    data = await user_storage.get_user_data(email)
    return build_dashboard(
        data.risk_profile or default_risk_profile(),
        data.metrics,
        data.health_stats,
    )
