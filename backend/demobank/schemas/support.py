from pydantic import BaseModel

class OfficerContact(BaseModel):
    name: str
    phone: str
    email: str

class ErrorResponse(BaseModel):
    errorCode: str
    message: str
    requestId: str

class HealthResponse(BaseModel):
    ok: bool
    ts: str

# Documented on every router so the OpenAPI schema shows the error shape
ERROR_RESPONSES = {status: {"model": ErrorResponse} for status in (400, 401, 404, 409, 422, 423, 429, 500)}
