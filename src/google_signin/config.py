"""Configuration

Google OAuth 엔드포인트와 플로우 설정.
엔드포인트는 전역 변수가 아니라 설정 객체로 주입한다 (테스트에서 mock provider 사용).
"""

import os
from dataclasses import dataclass, field

from google_signin.exceptions import ConfigurationError

# Google OAuth 설정
GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_REVOCATION_URL = "https://oauth2.googleapis.com/revoke"

# 로컬 콜백 설정
LOCALHOST_ADDR = "127.0.0.1"
DEFAULT_REDIRECT_HOST = "localhost"
ALLOWED_REDIRECT_HOSTS = (DEFAULT_REDIRECT_HOST, LOCALHOST_ADDR)
SUCCESS_HTML_RESPONSE = "Go back to your app :)"

DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass(frozen=True)
class GoogleEndpoints:
    """Provider 엔드포인트."""

    authorization_endpoint: str = GOOGLE_AUTH_URL
    token_endpoint: str = GOOGLE_TOKEN_URL
    revocation_endpoint: str = GOOGLE_REVOCATION_URL


@dataclass(frozen=True)
class GoogleAuthSettings:
    """플로우 설정.

    Attributes:
        endpoints: Provider 엔드포인트
        client_id: 요청에 client_id가 없을 때 사용할 기본값
        client_secret: 요청에 client_secret이 없을 때 사용할 기본값
        http_timeout: 토큰/폐기 요청 타임아웃 (초)
        redirect_timeout: redirect 대기 타임아웃 (초, None이면 무기한)
        open_browser: 브라우저 자동 열기
    """

    endpoints: GoogleEndpoints = field(default_factory=GoogleEndpoints)
    client_id: str | None = None
    client_secret: str | None = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    redirect_timeout: float | None = None
    open_browser: bool = True

    @classmethod
    def from_env(cls) -> "GoogleAuthSettings":
        """환경변수에서 설정 생성.

        GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, GOOGLE_AUTH_URL,
        GOOGLE_TOKEN_URL, GOOGLE_REVOCATION_URL, GOOGLE_AUTH_HTTP_TIMEOUT,
        GOOGLE_AUTH_REDIRECT_TIMEOUT 을 읽는다.

        Raises:
            ConfigurationError: 숫자 값 파싱 실패 시
        """
        endpoints = GoogleEndpoints(
            authorization_endpoint=os.getenv("GOOGLE_AUTH_URL") or GOOGLE_AUTH_URL,
            token_endpoint=os.getenv("GOOGLE_TOKEN_URL") or GOOGLE_TOKEN_URL,
            revocation_endpoint=(
                os.getenv("GOOGLE_REVOCATION_URL") or GOOGLE_REVOCATION_URL
            ),
        )
        http_timeout = _read_seconds("GOOGLE_AUTH_HTTP_TIMEOUT")
        return cls(
            endpoints=endpoints,
            client_id=os.getenv("GOOGLE_CLIENT_ID") or None,
            client_secret=os.getenv("GOOGLE_CLIENT_SECRET") or None,
            http_timeout=(
                http_timeout if http_timeout is not None else DEFAULT_HTTP_TIMEOUT
            ),
            redirect_timeout=_read_seconds("GOOGLE_AUTH_REDIRECT_TIMEOUT"),
        )


def _read_seconds(name: str) -> float | None:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value
