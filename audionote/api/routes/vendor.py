"""
Vendor health endpoint.

Reports whether the speech-to-text vendor is configured and reachable,
so the UI can disable uploads before they fail.
"""

from fastapi import APIRouter, Depends

from audionote.api.routes.transcribe import get_stt
from audionote.core.config import get_settings
from audionote.core.models import VendorStatus
from audionote.services.transcription import BaseSTT

router = APIRouter(prefix="/vendor", tags=["vendor"])


@router.get("/health", response_model=VendorStatus)
async def vendor_health(stt: BaseSTT = Depends(get_stt)) -> VendorStatus:
    """Check vendor configuration, then probe the vendor with the configured key."""
    settings = get_settings()
    if not settings.alle_ai_api_key:
        return VendorStatus(
            connected=False,
            configured=False,
            error="ALLE_AI_API_KEY environment variable is not set",
        )
    if not settings.alle_ai_endpoint:
        return VendorStatus(
            connected=False,
            configured=False,
            error="ALLE_AI_ENDPOINT environment variable is not set",
        )

    connected = await stt.check_connection()
    return VendorStatus(
        connected=connected,
        configured=True,
        endpoint=settings.alle_ai_endpoint,
        version=settings.alle_ai_version,
        error=None if connected else "Unable to connect to Alle AI API. Please check your credentials.",
    )
