from fastapi import Request
from demobank.utils import create_request_id

REQUEST_ID_HEADER = b"x-request-id"


class RequestIdMiddleware:
    """Tag every request with an id, reusing an incoming X-Request-ID, and echo it back."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        incoming = None
        for key, value in scope.get("headers", []):
            if key.lower() == REQUEST_ID_HEADER:
                incoming = value.decode("latin-1").strip()
                break
        request_id = incoming or create_request_id()
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message):
            if message.get("type") == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((b"X-Request-ID", request_id.encode("latin-1")))
                message["headers"] = headers
            await send(message)

        return await self.app(scope, receive, send_with_request_id)


def get_request_id(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        request_id = request.headers.get("x-request-id") or create_request_id()
        request.state.request_id = request_id
    return request_id
