"""
Single entry point for talking to the bank, in process or over HTTP.

By default requests never leave the process: `(method, path)` resolves to
an `Operation`, the body is validated against that operation's payload
model and the matching service call runs against a `Store`. With
`use_backend=True` the same request goes to a running API over httpx.
Either way results come back as the JSON the HTTP API would send and
failures come back as `ApiError` carrying `{errorCode, message, requestId}`.
"""
import enum
import logging
from decimal import Decimal
from typing import Any, Callable, Dict, Optional, Tuple, Type
from urllib.parse import parse_qs, urlsplit

import httpx
from pydantic import BaseModel, ValidationError

from demobank.config import Settings, settings as default_settings
from demobank.database import Store
from demobank.errors import DEFAULT_MESSAGE, BankError, ErrorCode, error_body
from demobank.schemas.account import AccountRead, TransactionQuery, TransactionRead
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
from demobank.schemas.user import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from demobank.services import auth_service, ledger_service, transfer_service
from demobank.utils import create_request_id

logger = logging.getLogger(__name__)

FALLBACK_OFFICER = {
    "name": "Casey Taylor",
    "phone": "+1 (555) 010-8899",
    "email": "support@demo-bank.test",
}


class ApiError(Exception):
    def __init__(self, error_code: str, message: str, request_id: str):
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.request_id = request_id

    def to_dict(self) -> dict:
        return error_body(self.error_code, self.message, self.request_id)

    @classmethod
    def from_payload(cls, payload: Any, fallback_message: str) -> "ApiError":
        payload = payload if isinstance(payload, dict) else {}
        return cls(
            payload.get("errorCode") or ErrorCode.contact_officer.value,
            payload.get("message") or fallback_message,
            payload.get("requestId") or create_request_id(),
        )


class Operation(enum.Enum):
    register = ("POST", "auth/register")
    login = ("POST", "auth/login")
    me = ("GET", "auth/me")
    accounts = ("GET", "accounts")
    transactions = ("GET", "transactions")
    initiate_transfer = ("POST", "transfer/initiate")
    send_otp = ("POST", "transfer/send-otp")
    verify_otp = ("POST", "transfer/verify-otp")
    confirm_transfer = ("POST", "transfer/confirm")

    @property
    def method(self) -> str:
        return self.value[0]

    @property
    def path(self) -> str:
        return self.value[1]


ROUTES: Dict[Tuple[str, str], Operation] = {op.value: op for op in Operation}

# Operation -> payload model. GET operations read their payload from the query string.
PAYLOADS: Dict[Operation, Optional[Type[BaseModel]]] = {
    Operation.register: RegisterRequest,
    Operation.login: LoginRequest,
    Operation.me: None,
    Operation.accounts: None,
    Operation.transactions: TransactionQuery,
    Operation.initiate_transfer: InitiateTransferRequest,
    Operation.send_otp: SendOtpRequest,
    Operation.verify_otp: VerifyOtpRequest,
    Operation.confirm_transfer: ConfirmTransferRequest,
}


def _authenticated(api, db, auth_token):
    return auth_service.require_auth(db, auth_token, secret=api.settings.session_secret)


def _register(api, db, payload: RegisterRequest, auth_token):
    return AuthResponse.model_validate(auth_service.register(
        db, payload.email, payload.password, payload.name,
        currency=api.settings.default_currency, secret=api.settings.session_secret,
    ))


def _login(api, db, payload: LoginRequest, auth_token):
    return AuthResponse.model_validate(auth_service.login(db, payload.email, payload.password, secret=api.settings.session_secret))


def _me(api, db, payload, auth_token):
    return MeResponse.model_validate(auth_service.me(_authenticated(api, db, auth_token)))


def _accounts(api, db, payload, auth_token):
    user = _authenticated(api, db, auth_token)
    return [AccountRead.model_validate(account) for account in ledger_service.list_accounts_for_user(db, user.id)]


def _transactions(api, db, payload: TransactionQuery, auth_token):
    user = _authenticated(api, db, auth_token)
    return [TransactionRead.model_validate(txn) for txn in ledger_service.list_transactions(db, user.id, payload.account_id)]


def _initiate_transfer(api, db, payload: InitiateTransferRequest, auth_token):
    user = _authenticated(api, db, auth_token)
    result = transfer_service.initiate(db, user, payload.from_account_id, payload.to_account_id, payload.amount, now=api.store.now())
    return InitiateTransferResponse.model_validate(result)


def _send_otp(api, db, payload: SendOtpRequest, auth_token):
    user = _authenticated(api, db, auth_token)
    return SendOtpResponse.model_validate(transfer_service.send_otp(db, user, payload.transfer_id, now=api.store.now(), ttl_seconds=api.settings.otp_ttl_seconds))


def _verify_otp(api, db, payload: VerifyOtpRequest, auth_token):
    user = _authenticated(api, db, auth_token)
    return VerifyOtpResponse.model_validate(transfer_service.verify_otp(
        db, user, payload.transfer_id, payload.code,
        now=api.store.now(), max_attempts=api.settings.otp_max_attempts, lock=api.store.lock,
    ))


def _confirm_transfer(api, db, payload: ConfirmTransferRequest, auth_token):
    user = _authenticated(api, db, auth_token)
    result = transfer_service.confirm(db, user, payload.transfer_id, payload.note, now=api.store.now(), lock=api.store.lock)
    return ConfirmTransferResponse.model_validate(result)


HANDLERS: Dict[Operation, Callable[..., Any]] = {
    Operation.register: _register,
    Operation.login: _login,
    Operation.me: _me,
    Operation.accounts: _accounts,
    Operation.transactions: _transactions,
    Operation.initiate_transfer: _initiate_transfer,
    Operation.send_otp: _send_otp,
    Operation.verify_otp: _verify_otp,
    Operation.confirm_transfer: _confirm_transfer,
}

_missing = set(Operation) - set(HANDLERS) | set(Operation) - set(PAYLOADS)
if _missing:
    raise RuntimeError(f"Operations without a handler or payload model: {sorted(op.name for op in _missing)}")


def resolve(path: str, method: str = "GET") -> Tuple[Operation, Dict[str, str]]:
    """Map a request line to its operation plus any query parameters."""
    parts = urlsplit(path)
    normalized = parts.path.strip("/")
    operation = ROUTES.get((method.upper(), normalized))
    if operation is None:
        raise ApiError(ErrorCode.contact_officer.value, f"Unknown endpoint: {path}", create_request_id())
    query = {key: values[-1] for key, values in parse_qs(parts.query).items()}
    return operation, query


def _dump(result: Any) -> Any:
    if isinstance(result, list):
        return [_dump(item) for item in result]
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json", by_alias=True)
    return result


class ApiClient:
    def __init__(
        self,
        store: Optional[Store] = None,
        use_backend: bool = False,
        base_url: str = "",
        http_client: Optional[httpx.Client] = None,
        officer_contact_path: str = "/support/officer-contact",
        settings: Optional[Settings] = None,
    ):
        if not use_backend and store is None:
            raise ValueError("An in-process ApiClient needs a Store")
        self.store = store
        self.settings = settings or default_settings
        self.use_backend = use_backend
        self.base_url = base_url
        self._http = http_client
        self.officer_contact_path = officer_contact_path
        self._officer_contact: Optional[dict] = None

    @property
    def http(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(base_url=self.base_url, timeout=10.0)
        return self._http

    def request(self, path: str, method: str = "GET", body: Optional[dict] = None, auth_token: Optional[str] = None) -> Any:
        try:
            if not self.use_backend:
                return self._route_in_process(path, method.upper(), body or {}, auth_token)
            return self._send(path, method.upper(), body, auth_token)
        except ApiError as e:
            logger.info(f"[{e.request_id}] {e.error_code}: {e.message}")
            raise
        except Exception as e:
            # Unexpected faults still leave in the standard shape
            logger.exception(f"Unexpected failure calling {method} {path}")
            raise ApiError(ErrorCode.contact_officer.value, DEFAULT_MESSAGE, create_request_id()) from e

    def _route_in_process(self, path: str, method: str, body: dict, auth_token: Optional[str]) -> Any:
        operation, query = resolve(path, method)
        payload_model = PAYLOADS[operation]
        payload = None
        if payload_model is not None:
            raw = query if operation.method == "GET" else body
            try:
                payload = payload_model.model_validate(raw)
            except ValidationError as e:
                raise ApiError(ErrorCode.validation.value, f"Request body is not valid: {e.errors()[0].get('msg')}", create_request_id()) from e

        with self.store.session() as db:
            try:
                return _dump(HANDLERS[operation](self, db, payload, auth_token))
            except BankError as e:
                raise ApiError(e.code.value, e.message, create_request_id()) from e

    def _send(self, path: str, method: str, body: Optional[dict], auth_token: Optional[str]) -> Any:
        headers = {"Content-Type": "application/json"}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"
        try:
            response = self.http.request(method, path, json=body if method != "GET" else None, headers=headers)
        except httpx.HTTPError as e:
            raise ApiError(ErrorCode.contact_officer.value, f"Request failed: {e}", create_request_id()) from e

        if response.is_error:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            raise ApiError.from_payload(payload, f"Request failed with {response.status_code}")
        return response.json()

    def officer_contact(self) -> dict:
        """Support contact, looked up once then cached; never raises."""
        if self._officer_contact is not None:
            return self._officer_contact
        try:
            if self.use_backend:
                response = self.http.get(self.officer_contact_path)
                response.raise_for_status()
                self._officer_contact = response.json()
            else:
                self._officer_contact = dict(self.settings.officer_contact)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Officer contact lookup failed, using fallback: {e}")
            self._officer_contact = dict(FALLBACK_OFFICER)
        return self._officer_contact

    # Convenience wrappers, one per operation

    def register(self, email: str, password: str, name: Optional[str] = None) -> dict:
        return self.request("/auth/register", "POST", {"email": email, "password": password, "name": name})

    def login(self, email: str, password: str) -> dict:
        return self.request("/auth/login", "POST", {"email": email, "password": password})

    def me(self, token: str) -> dict:
        return self.request("/auth/me", auth_token=token)

    def accounts(self, token: str) -> list:
        return self.request("/accounts", auth_token=token)

    def transactions(self, token: str, account_id: Optional[str] = None) -> list:
        path = f"/transactions?accountId={account_id}" if account_id else "/transactions"
        return self.request(path, auth_token=token)

    def initiate_transfer(self, token: str, from_account_id: str, to_account_id: str, amount) -> dict:
        if isinstance(amount, Decimal):
            amount = str(amount)
        body = {"fromAccountId": from_account_id, "toAccountId": to_account_id, "amount": amount}
        return self.request("/transfer/initiate", "POST", body, auth_token=token)

    def send_otp(self, token: str, transfer_id: str) -> dict:
        return self.request("/transfer/send-otp", "POST", {"transferId": transfer_id}, auth_token=token)

    def verify_otp(self, token: str, transfer_id: str, code: str) -> dict:
        return self.request("/transfer/verify-otp", "POST", {"transferId": transfer_id, "code": code}, auth_token=token)

    def confirm_transfer(self, token: str, transfer_id: str, note: Optional[str] = None) -> dict:
        return self.request("/transfer/confirm", "POST", {"transferId": transfer_id, "note": note}, auth_token=token)
