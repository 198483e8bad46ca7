from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from demobank.config import Settings
from demobank.database import get_db, get_settings
from demobank.middlewares.auth import get_current_user
from demobank.models import User
from demobank.schemas.support import ERROR_RESPONSES
from demobank.schemas.user import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from demobank.services import auth_service
from demobank.services.rate_limit import auth_limit, limiter

router = APIRouter(prefix="/auth", tags=["auth"], responses=ERROR_RESPONSES)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(auth_limit)
async def register(request: Request, data: RegisterRequest, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    return auth_service.register(
        db, data.email, data.password, data.name,
        currency=settings.default_currency, secret=settings.session_secret,
    )


@router.post("/login", response_model=AuthResponse)
@limiter.limit(auth_limit)
async def login(request: Request, data: LoginRequest, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    return auth_service.login(db, data.email, data.password, secret=settings.session_secret)


@router.get("/me", response_model=MeResponse)
async def me(user: User = Depends(get_current_user)):
    return auth_service.me(user)
