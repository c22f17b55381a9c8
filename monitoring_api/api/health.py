from typing import Dict

from fastapi import APIRouter

from ..core.settings import ApiSettings
from ..utils.service_health import create_health_payload
from .dependencies import SettingsDep

router = APIRouter()


@router.get("/health")
async def health_check(settings: ApiSettings = SettingsDep) -> Dict[str, str]:
    """Static health payload for liveness probes."""
    return create_health_payload(settings.SERVICE_NAME, settings.APP_VERSION)
