from fastapi import APIRouter, Request
from demobank.database import get_settings
from demobank.schemas.support import HealthResponse, OfficerContact
from demobank.utils import utcnow

router = APIRouter(tags=["util"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return {"ok": True, "ts": utcnow().isoformat() + "Z"}


@router.get("/support/officer-contact", response_model=OfficerContact)
async def officer_contact(request: Request):
    """Who a customer should call when an operation fails."""
    return get_settings(request).officer_contact
