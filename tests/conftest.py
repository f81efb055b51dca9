"""Shared test fixtures."""

import socket
import threading
from urllib.parse import parse_qs, urlencode, urlsplit

import httpx
import pytest

from google_signin.config import GoogleAuthSettings, GoogleEndpoints

MOCK_ENDPOINTS = GoogleEndpoints(
    authorization_endpoint="https://auth.example.com/o/oauth2/auth",
    token_endpoint="https://auth.example.com/token",
    revocation_endpoint="https://auth.example.com/revoke",
)


def free_port() -> int:
    """사용 가능한 포트 찾기."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def send_redirect(port: int, target: str = "/", raw: bytes | None = None) -> bytes:
    """리스너에 GET 요청을 보내고 응답 전체를 반환."""
    request = raw or (
        f"GET {target} HTTP/1.1\r\nHost: localhost:{port}\r\n\r\n".encode()
    )
    chunks = []
    with socket.create_connection(("127.0.0.1", port), timeout=5) as sock:
        sock.sendall(request)
        while True:
            data = sock.recv(4096)
            if not data:
                break
            chunks.append(data)
    return b"".join(chunks)


class FakeProvider:
    """MockTransport 기반 토큰/폐기 엔드포인트."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.token_status = 200
        self.token_payload: dict | str = {
            "access_token": "ya29.access",
            "id_token": "eyJ.id.token",
            "refresh_token": "1//refresh",
            "scope": "openid https://www.googleapis.com/auth/userinfo.email",
            "expires_in": 3600,
            "token_type": "Bearer",
        }
        self.revoke_status = 200
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if request.url.path == "/token":
            if isinstance(self.token_payload, str):
                return httpx.Response(self.token_status, text=self.token_payload)
            return httpx.Response(self.token_status, json=self.token_payload)
        if request.url.path == "/revoke":
            return httpx.Response(self.revoke_status)
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def form(self, index: int = -1) -> dict[str, str]:
        """index번째 요청의 form body."""
        body = self.requests[index].read().decode()
        return {key: values[0] for key, values in parse_qs(body).items()}


class FakeBrowser:
    """인증 URL을 받으면 별도 스레드에서 redirect를 보내는 launcher."""

    def __init__(self, query_builder=None):
        self.urls: list[str] = []
        self.responses: list[bytes] = []
        self.threads: list[threading.Thread] = []
        self.query_builder = query_builder or (
            lambda params: urlencode(
                {"code": "4/auth-code", "state": params["state"][0]}
            )
        )

    def __call__(self, url: str) -> None:
        self.urls.append(url)
        params = parse_qs(urlsplit(url).query)
        redirect = urlsplit(params["redirect_uri"][0])
        target = f"{redirect.path or '/'}?{self.query_builder(params)}"

        def visit():
            self.responses.append(send_redirect(redirect.port, target))

        thread = threading.Thread(target=visit, daemon=True)
        thread.start()
        self.threads.append(thread)

    def join(self) -> None:
        for thread in self.threads:
            thread.join(timeout=5)

    @property
    def params(self) -> dict[str, str]:
        """마지막 인증 URL의 query."""
        query = parse_qs(urlsplit(self.urls[-1]).query)
        return {key: values[0] for key, values in query.items()}


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def browser() -> FakeBrowser:
    return FakeBrowser()


@pytest.fixture
def settings() -> GoogleAuthSettings:
    return GoogleAuthSettings(endpoints=MOCK_ENDPOINTS, http_timeout=5)


@pytest.fixture(autouse=True)
def clean_google_env(monkeypatch):
    """테스트 환경변수 격리."""
    for name in (
        "GOOGLE_CLIENT_ID",
        "GOOGLE_CLIENT_SECRET",
        "GOOGLE_AUTH_URL",
        "GOOGLE_TOKEN_URL",
        "GOOGLE_REVOCATION_URL",
        "GOOGLE_AUTH_HTTP_TIMEOUT",
        "GOOGLE_AUTH_REDIRECT_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def unused_port() -> int:
    return free_port()


@pytest.fixture
def redirect_client():
    """send_redirect 함수."""
    return send_redirect


@pytest.fixture
def browser_factory():
    """query_builder를 지정한 FakeBrowser 생성."""
    return FakeBrowser
