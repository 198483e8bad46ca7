from typing import Optional
from demobank.schemas.base import CamelModel

class RegisterRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None

class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None

class UserSummary(CamelModel):
    id: str
    email: str
    name: str

class AuthResponse(CamelModel):
    user: UserSummary
    token: str

class MeResponse(CamelModel):
    user: UserSummary
