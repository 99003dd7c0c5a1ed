from datetime import datetime, timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from axii.core.config import settings
from axii.db.repositories.device import mark_stale_devices_offline
import logging

logger = logging.getLogger(__name__)

async def sweep_stale_devices(db: AsyncSession, stale_minutes: int | None = None) -> int:
    """Marca como offline os dispositivos online sem heartbeat recente."""
    minutes = stale_minutes if stale_minutes is not None else settings.DEVICE_STALE_MINUTES
    cutoff = datetime.utcnow() - timedelta(minutes=minutes)
    logger.debug("Verificando dispositivos sem heartbeat desde %s", cutoff)

    updated = await mark_stale_devices_offline(db, cutoff)
    if updated:
        logger.info("%d dispositivo(s) marcado(s) como offline por inatividade.", updated)
    return updated
