"""
Tests for the in-process API client and its operation table.
"""
import httpx
import pytest

from demobank.client import HANDLERS, PAYLOADS, ApiClient, ApiError, FALLBACK_OFFICER, Operation, resolve
from demobank.config import Settings
from demobank.errors import DEFAULT_MESSAGE


def _login(api_client):
    return api_client.login("demo@bank.test", "password123")["token"]


class TestOperationTable:
    def test_every_operation_has_handler_and_payload_entry(self):
        assert set(HANDLERS) == set(Operation)
        assert set(PAYLOADS) == set(Operation)

    @pytest.mark.parametrize("path,method,expected", [
        ("/auth/login", "POST", Operation.login),
        ("auth/login", "post", Operation.login),
        ("/accounts/", "GET", Operation.accounts),
        ("/transfer/send-otp", "POST", Operation.send_otp),
    ])
    def test_resolve(self, path, method, expected):
        operation, query = resolve(path, method)
        assert operation is expected
        assert query == {}

    def test_resolve_reads_query(self):
        operation, query = resolve("/transactions?accountId=acct-2", "GET")
        assert operation is Operation.transactions
        assert query == {"accountId": "acct-2"}

    @pytest.mark.parametrize("path,method", [("/auth/login", "GET"), ("/loans", "GET"), ("/transfer/cancel", "POST")])
    def test_resolve_unknown(self, path, method):
        with pytest.raises(ApiError) as exc:
            resolve(path, method)
        assert exc.value.error_code == "CONTACT_OFFICER"
        assert exc.value.message == f"Unknown endpoint: {path}"


class TestInProcessClient:
    def test_requires_store(self):
        with pytest.raises(ValueError):
            ApiClient()

    def test_login_and_me(self, api_client):
        token = _login(api_client)
        assert api_client.me(token) == {"user": {"id": "user-1", "email": "demo@bank.test", "name": "Demo Customer"}}

    def test_accounts_match_http_shape(self, api_client):
        accounts = api_client.accounts(_login(api_client))
        by_id = {account["id"]: account for account in accounts}
        assert by_id["acct-2"]["balance"] == 13250.35
        assert by_id["acct-2"]["userId"] == "user-1"

    def test_transactions_filter(self, api_client):
        token = _login(api_client)
        assert [t["id"] for t in api_client.transactions(token)] == ["tx-1", "tx-2", "tx-3"]
        assert [t["id"] for t in api_client.transactions(token, "acct-1")] == ["tx-1", "tx-2"]

    def test_full_transfer(self, api_client, seeded_store):
        token = _login(api_client)
        started = api_client.initiate_transfer(token, "acct-2", "acct-1", 250)
        assert started["status"] == "PENDING_OTP"
        code = api_client.send_otp(token, started["transferId"])["code"]
        assert api_client.verify_otp(token, started["transferId"], code) == {"status": "VERIFIED"}

        result = api_client.confirm_transfer(token, started["transferId"], "Back to checking")

        assert result["transferId"] == started["transferId"]
        assert result["receipt"]["fromAccount"] == "9876543210"
        balances = {a["id"]: a["balance"] for a in api_client.accounts(token)}
        assert balances["acct-2"] == pytest.approx(13000.35)
        assert balances["acct-1"] == pytest.approx(4530.75)

    def test_service_errors_become_api_errors(self, api_client):
        token = _login(api_client)
        with pytest.raises(ApiError) as exc:
            api_client.initiate_transfer(token, "acct-1", "acct-2", 5000)
        assert exc.value.error_code == "INSUFFICIENT_FUNDS"
        assert exc.value.to_dict()["requestId"].startswith("req_")

    def test_bad_payload_is_validation(self, api_client):
        token = _login(api_client)
        with pytest.raises(ApiError) as exc:
            api_client.request("/transfer/initiate", "POST", {"fromAccountId": "acct-1", "toAccountId": "acct-2", "amount": "many"}, auth_token=token)
        assert exc.value.error_code == "VALIDATION"

    def test_unauthenticated(self, api_client):
        with pytest.raises(ApiError) as exc:
            api_client.accounts("token-made-up")
        assert exc.value.error_code == "UNAUTHORIZED"

    def test_duplicate_registration(self, api_client, seeded_store):
        from demobank.models import Account, User

        with pytest.raises(ApiError) as exc:
            api_client.register("demo@bank.test", "whatever", "Copy")

        assert exc.value.error_code == "EMAIL_IN_USE"
        with seeded_store.session() as db:
            assert db.query(User).count() == 1
            assert db.query(Account).count() == 2

    def test_unexpected_failure_is_contact_officer(self, api_client, monkeypatch):
        from demobank.services import auth_service

        def boom(*args, **kwargs):
            raise RuntimeError("disk quota exceeded on /var/db")

        monkeypatch.setattr(auth_service, "login", boom)
        with pytest.raises(ApiError) as exc:
            api_client.login("demo@bank.test", "password123")
        assert exc.value.error_code == "CONTACT_OFFICER"
        assert exc.value.message == DEFAULT_MESSAGE
        assert "disk" not in exc.value.to_dict()["message"]

    def test_uses_its_own_settings(self, seeded_store, monkeypatch):
        monkeypatch.setenv("OTP_MAX_ATTEMPTS", "2")
        monkeypatch.setenv("DEFAULT_CURRENCY", "GBP")
        api = ApiClient(store=seeded_store, settings=Settings())
        token = api.login("demo@bank.test", "password123")["token"]
        started = api.initiate_transfer(token, "acct-1", "acct-2", 5)
        code = api.send_otp(token, started["transferId"])["code"]
        wrong = "000000" if code != "000000" else "999999"

        errors = []
        for _ in range(3):
            with pytest.raises(ApiError) as exc:
                api.verify_otp(token, started["transferId"], wrong)
            errors.append(exc.value.error_code)

        assert errors == ["OTP_INVALID", "OTP_INVALID", "OTP_LOCKED"]
        new_token = api.register("uk@example.com", "pass1234")["token"]
        assert api.accounts(new_token)[0]["currency"] == "GBP"

    def test_officer_contact_cached(self, api_client):
        first = api_client.officer_contact()
        assert set(first) == {"name", "phone", "email"}
        assert api_client.officer_contact() is first


class TestBackendClient:
    """The same client pointed at the HTTP app."""

    def test_round_trip_over_http(self, client):
        api = ApiClient(use_backend=True, http_client=client)

        token = api.login("demo@bank.test", "password123")["token"]
        started = api.initiate_transfer(token, "acct-1", "EXT-123", 80)
        code = api.send_otp(token, started["transferId"])["code"]
        api.verify_otp(token, started["transferId"], code)
        result = api.confirm_transfer(token, started["transferId"])

        assert result["receipt"]["toAccount"] == "EXT-123"
        assert [t["id"] for t in api.transactions(token, "acct-1")][0] == result["receipt"]["id"]

    def test_http_errors_keep_server_shape(self, client):
        api = ApiClient(use_backend=True, http_client=client)

        with pytest.raises(ApiError) as exc:
            api.login("demo@bank.test", "bad")

        assert exc.value.error_code == "INVALID_CREDENTIALS"
        assert exc.value.request_id.startswith("req_")

    def test_unknown_endpoint_over_http(self, client):
        api = ApiClient(use_backend=True, http_client=client)
        with pytest.raises(ApiError) as exc:
            api.request("/loans")
        assert exc.value.error_code == "CONTACT_OFFICER"

    def test_officer_contact_from_backend(self, client):
        api = ApiClient(use_backend=True, http_client=client)
        assert api.officer_contact()["email"]

    def test_officer_contact_fallback(self):
        def handler(request):
            return httpx.Response(503)

        api = ApiClient(use_backend=True, http_client=httpx.Client(transport=httpx.MockTransport(handler), base_url="http://bank.test"))
        assert api.officer_contact() == FALLBACK_OFFICER

    def test_connection_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        api = ApiClient(use_backend=True, http_client=httpx.Client(transport=httpx.MockTransport(handler), base_url="http://bank.test"))
        with pytest.raises(ApiError) as exc:
            api.accounts("any")
        assert exc.value.error_code == "CONTACT_OFFICER"
