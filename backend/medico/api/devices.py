"""
Device endpoints - wearable snapshots pushed by a connected client.
The latest snapshot is used as live health context in chat.
"""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, status, Response

from ..models import HealthStats
from ..storage import UserStorage, get_user_storage
from ..utils.auth import get_current_user_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/devices", tags=["devices"])


@router.put("/snapshot", response_model=HealthStats)
async def sync_snapshot(
    stats: HealthStats,
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    """Store the latest device snapshot, replacing the previous one."""
    if stats.last_synced is None:
        stats.last_synced = datetime.now(timezone.utc)
    await user_storage.save_health_stats(email, stats)
    logger.info("Device snapshot synced", extra={"extra_fields": {"source": stats.source}})
    return stats


@router.get("/snapshot", response_model=HealthStats)
async def get_snapshot(
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    stats = await user_storage.get_health_stats(email)
    if stats is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No device connected")
    return stats


@router.delete("/snapshot", status_code=status.HTTP_204_NO_CONTENT)
async def disconnect_device(
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    await user_storage.clear_health_stats(email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
