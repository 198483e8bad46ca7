from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from demobank.config import Settings
from demobank.database import Store, get_db, get_settings, get_store
from demobank.middlewares.auth import get_current_user
from demobank.models import User
from demobank.schemas.transfer import (
    ConfirmTransferRequest,
    ConfirmTransferResponse,
    InitiateTransferRequest,
    InitiateTransferResponse,
    SendOtpRequest,
    SendOtpResponse,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from demobank.schemas.support import ERROR_RESPONSES
from demobank.services import transfer_service
from demobank.services.rate_limit import limiter, otp_limit

router = APIRouter(prefix="/transfer", tags=["transfer"], responses=ERROR_RESPONSES)


@router.post("/initiate", response_model=InitiateTransferResponse)
async def initiate_transfer(data: InitiateTransferRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db), store: Store = Depends(get_store)):
    return transfer_service.initiate(db, user, data.from_account_id, data.to_account_id, data.amount, now=store.now())


@router.post("/send-otp", response_model=SendOtpResponse)
@limiter.limit(otp_limit)
async def send_otp(
    request: Request,
    data: SendOtpRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    return transfer_service.send_otp(db, user, data.transfer_id, now=store.now(), ttl_seconds=settings.otp_ttl_seconds)


@router.post("/verify-otp", response_model=VerifyOtpResponse)
@limiter.limit(otp_limit)
async def verify_otp(
    request: Request,
    data: VerifyOtpRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    return transfer_service.verify_otp(
        db, user, data.transfer_id, data.code,
        now=store.now(), max_attempts=settings.otp_max_attempts, lock=store.lock,
    )


@router.post("/confirm", response_model=ConfirmTransferResponse)
async def confirm_transfer(data: ConfirmTransferRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db), store: Store = Depends(get_store)):
    return transfer_service.confirm(db, user, data.transfer_id, data.note, now=store.now(), lock=store.lock)
