"""Token exchange client

토큰 엔드포인트 (authorization_code, refresh_token grant) 와
폐기 엔드포인트 호출. 모든 요청은 redirect를 따라가지 않는
httpx.Client로 보낸다 (SSRF 방지).

이 모듈의 메서드는 블로킹이며 worker 스레드에서 호출된다.
"""

import logging
from dataclasses import dataclass, field

import httpx

from google_signin.config import DEFAULT_HTTP_TIMEOUT, GoogleEndpoints
from google_signin.exceptions import (
    AuthenticationFailedError,
    NetworkError,
    TokenRefreshFailedError,
)

logger = logging.getLogger(__name__)

FORM_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "Accept": "application/json",
}


@dataclass
class TokenGrant:
    """토큰 엔드포인트 응답.

    expires_in은 상대 시간(초)이며 절대 시각 변환은 호출자가 한다.
    """

    access_token: str
    token_type: str = "Bearer"
    refresh_token: str | None = None
    id_token: str | None = None
    scopes: list[str] = field(default_factory=list)
    expires_in: int | None = None

    @classmethod
    def from_payload(cls, payload: dict) -> "TokenGrant":
        """JSON 응답에서 생성.

        Raises:
            AttributeError, KeyError, TypeError, ValueError: 형식이 잘못된 응답
        """
        access_token = payload["access_token"]
        if not isinstance(access_token, str) or not access_token:
            raise ValueError("access_token must be a non-empty string")

        expires_in = payload.get("expires_in")
        scope = payload.get("scope") or ""
        return cls(
            access_token=access_token,
            token_type=payload.get("token_type", "Bearer"),
            refresh_token=payload.get("refresh_token"),
            id_token=payload.get("id_token"),
            scopes=scope.split(),
            expires_in=int(expires_in) if expires_in is not None else None,
        )


def _oauth_error(response: httpx.Response) -> tuple[str | None, str]:
    """에러 응답에서 (error, 설명) 추출."""
    try:
        data = response.json()
    except ValueError:
        return None, response.text[:200]
    if not isinstance(data, dict):
        return None, response.text[:200]
    error = data.get("error")
    description = data.get("error_description") or error or response.text[:200]
    return error, description


class TokenExchangeClient:
    """토큰 교환 / 갱신 / 폐기 클라이언트.

    Example:
        client = TokenExchangeClient(GoogleEndpoints())
        grant = client.exchange_code(code, verifier, redirect_uri, cid, secret)
    """

    def __init__(
        self,
        endpoints: GoogleEndpoints,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """초기화.

        Args:
            endpoints: 토큰/폐기 엔드포인트
            timeout: 요청 타임아웃 (초)
            transport: httpx transport (테스트에서 MockTransport 주입)
        """
        self.endpoints = endpoints
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.Client:
        # redirect를 따라가면 내부 주소로 자격증명이 새어나갈 수 있음
        return httpx.Client(
            timeout=self.timeout,
            follow_redirects=False,
            transport=self.transport,
        )

    def _request_token(
        self,
        data: dict[str, str],
        error_cls: type[AuthenticationFailedError],
        action: str,
    ) -> TokenGrant:
        try:
            with self._client() as client:
                response = client.post(
                    self.endpoints.token_endpoint, data=data, headers=FORM_HEADERS
                )
        except httpx.HTTPError as e:
            raise error_cls(f"Failed to {action}: {e}") from e

        if not response.is_success:
            error, description = _oauth_error(response)
            logger.error(
                "Token endpoint returned %d (%s)", response.status_code, error
            )
            raise error_cls(
                f"Failed to {action}: {response.status_code} {description}",
                error_code=error,
            )

        try:
            grant = TokenGrant.from_payload(response.json())
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise error_cls(f"Failed to {action}: malformed token response") from e

        logger.debug(
            "Token endpoint granted %d scope(s), expires_in=%s",
            len(grant.scopes), grant.expires_in,
        )
        return grant

    def exchange_code(
        self,
        code: str,
        code_verifier: str,
        redirect_uri: str,
        client_id: str,
        client_secret: str | None,
    ) -> TokenGrant:
        """인증 코드를 토큰으로 교환.

        Args:
            code: redirect로 받은 인증 코드 (1회용)
            code_verifier: PKCE verifier
            redirect_uri: 인증 요청에 사용한 redirect URI
            client_id: OAuth Client ID
            client_secret: OAuth Client Secret

        Returns:
            TokenGrant: 토큰 응답

        Raises:
            AuthenticationFailedError: non-2xx, 잘못된 응답, 전송 실패
        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "code_verifier": code_verifier,
            "redirect_uri": redirect_uri,
            "client_id": client_id,
        }
        if client_secret:
            data["client_secret"] = client_secret

        return self._request_token(
            data, AuthenticationFailedError, "exchange code for token"
        )

    def refresh(
        self,
        refresh_token: str,
        client_id: str,
        client_secret: str,
    ) -> TokenGrant:
        """Refresh token으로 갱신.

        form은 grant_type, refresh_token, client_id, client_secret 뿐이다.
        갱신된 토큰의 scope는 최초 동의 범위를 따른다.

        Raises:
            TokenRefreshFailedError: non-2xx, 잘못된 응답, 전송 실패
        """
        data = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": client_id,
            "client_secret": client_secret,
        }
        return self._request_token(data, TokenRefreshFailedError, "refresh token")

    def revoke(self, access_token: str) -> bool:
        """토큰 폐기.

        Returns:
            bool: Provider가 2xx로 응답했는지

        Raises:
            NetworkError: 전송 실패
        """
        try:
            with self._client() as client:
                response = client.post(
                    self.endpoints.revocation_endpoint,
                    data={"token": access_token},
                    headers=FORM_HEADERS,
                )
        except httpx.HTTPError as e:
            raise NetworkError(f"Failed to revoke token: {e}") from e

        if not response.is_success:
            logger.debug("Revocation endpoint returned %d", response.status_code)
        return response.is_success
