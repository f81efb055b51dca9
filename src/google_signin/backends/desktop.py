"""Desktop backend

Loopback redirect + PKCE 인증 코드 플로우로 로그인/로그아웃/갱신.

로그인 순서:
1. 요청 검증 (scope, redirect URI, client secret)
2. 로컬 리스너 바인딩 → redirect URI 포트 확정
3. 인증 URL 생성 → 브라우저 열기
4. redirect 한 건 수신 → state 검증, code 추출
5. worker 스레드에서 토큰 교환
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

import httpx

from google_signin.backends.base import GoogleAuthBackend
from google_signin.config import (
    ALLOWED_REDIRECT_HOSTS,
    DEFAULT_REDIRECT_HOST,
    GoogleAuthSettings,
)
from google_signin.exceptions import (
    ConfigurationError,
    GoogleAuthError,
    InvalidClientIdError,
    NetworkError,
)
from google_signin.flows.authorization import build_authorization_url
from google_signin.flows.browser import open_browser, print_url_only
from google_signin.flows.pkce import generate_pkce_challenge
from google_signin.flows.redirect_listener import RedirectListener
from google_signin.flows.token_client import TokenExchangeClient, TokenGrant
from google_signin.flows.worker import run_blocking
from google_signin.models import (
    RefreshTokenRequest,
    SignInRequest,
    SignOutRequest,
    SignOutResponse,
    TokenResponse,
)

logger = logging.getLogger(__name__)


class FlowState(str, Enum):
    """플로우 상태."""

    IDLE = "idle"
    VALIDATING = "validating"
    AWAITING_REDIRECT = "awaiting_redirect"
    EXCHANGING_CODE = "exchanging_code"
    REVOKING = "revoking"
    REFRESHING = "refreshing"
    COMPLETE = "complete"
    FAILED = "failed"


class _FlowTracker:
    """호출 하나의 상태 전이 로그."""

    def __init__(self, operation: str):
        self.operation = operation
        self.state = FlowState.IDLE

    def advance(self, state: FlowState) -> None:
        logger.debug("%s: %s -> %s", self.operation, self.state.value, state.value)
        self.state = state

    def fail(self, error: GoogleAuthError) -> None:
        logger.error(
            "%s failed while %s: %s", self.operation, self.state.value, error
        )
        self.state = FlowState.FAILED


@dataclass(frozen=True)
class RedirectTarget:
    """검증된 redirect URI 구성 요소."""

    host: str = DEFAULT_REDIRECT_HOST
    port: int | None = None
    path: str = ""


@dataclass(frozen=True)
class ValidatedSignIn:
    scopes: tuple[str, ...]
    client_secret: str
    redirect: RedirectTarget


def parse_redirect_uri(redirect_uri: str) -> RedirectTarget:
    """redirect URI 검증.

    http 스킴, localhost 또는 127.0.0.1 호스트만 허용한다.

    Raises:
        ConfigurationError: 파싱 실패, 잘못된 스킴/호스트/포트
    """
    try:
        parsed = urlsplit(redirect_uri)
        port = parsed.port
    except ValueError as e:
        raise ConfigurationError(f"Invalid redirect URI: {e}") from e

    host = parsed.hostname
    if not host:
        raise ConfigurationError("Redirect URI must have a host")

    if host not in ALLOWED_REDIRECT_HOSTS:
        raise ConfigurationError(
            "Redirect URI must use localhost or 127.0.0.1 for desktop authentication"
        )

    if parsed.scheme != "http":
        raise ConfigurationError("Redirect URI must use the http scheme")

    path = parsed.path if parsed.path not in ("", "/") else ""
    return RedirectTarget(host=host, port=port or None, path=path)


def validate_sign_in_request(request: SignInRequest) -> ValidatedSignIn:
    """로그인 요청 검증. 소켓을 열기 전에 호출한다.

    Raises:
        ConfigurationError: scope 누락, redirect URI 오류, client secret 누락
        InvalidClientIdError: client_id가 비어 있음
    """
    if request.scopes is None:
        raise ConfigurationError(
            "No scopes provided. At least one scope is required for authentication"
        )
    if not request.scopes:
        raise ConfigurationError(
            "Empty scopes array. At least one scope is required for authentication"
        )

    if not request.client_id:
        raise InvalidClientIdError()

    redirect = RedirectTarget()
    if request.redirect_uri is not None:
        redirect = parse_redirect_uri(request.redirect_uri)

    if not request.client_secret:
        raise ConfigurationError(
            "Client secret is required for desktop authentication"
        )

    return ValidatedSignIn(
        scopes=tuple(request.scopes),
        client_secret=request.client_secret,
        redirect=redirect,
    )


def to_token_response(
    grant: TokenGrant, received_at: float | None = None
) -> TokenResponse:
    """TokenGrant를 TokenResponse로 변환 (expires_in → 절대 시각)."""
    if received_at is None:
        received_at = time.time()
    expires_at = None
    if grant.expires_in is not None:
        expires_at = int(received_at) + grant.expires_in
    return TokenResponse(
        access_token=grant.access_token,
        id_token=grant.id_token,
        scopes=list(grant.scopes),
        refresh_token=grant.refresh_token,
        expires_at=expires_at,
    )


class DesktopGoogleAuth(GoogleAuthBackend):
    """데스크톱용 Google 로그인.

    Example:
        auth = DesktopGoogleAuth(GoogleAuthSettings.from_env())
        token = auth.sign_in(SignInRequest(
            client_id="...apps.googleusercontent.com",
            client_secret="GOCSPX-...",
            scopes=("openid", "email"),
        ))
    """

    def __init__(
        self,
        settings: GoogleAuthSettings | None = None,
        transport: httpx.BaseTransport | None = None,
        launcher: Callable[[str], None] | None = None,
    ):
        """초기화.

        Args:
            settings: 엔드포인트, 타임아웃 설정
            transport: httpx transport (테스트용)
            launcher: 인증 URL을 여는 함수 (None이면 설정에 따라 브라우저/출력)
        """
        self.settings = settings or GoogleAuthSettings()
        self.token_client = TokenExchangeClient(
            self.settings.endpoints,
            timeout=self.settings.http_timeout,
            transport=transport,
        )
        if launcher is None:
            launcher = open_browser if self.settings.open_browser else print_url_only
        self.launcher = launcher

    @property
    def name(self) -> str:
        return "desktop"

    def sign_in(self, request: SignInRequest) -> TokenResponse:
        """브라우저 로그인.

        Raises:
            ConfigurationError: 잘못된 요청
            NetworkError: 바인딩/브라우저 실행 실패, redirect 대기 실패
            AuthenticationFailedError: redirect 검증 실패, 토큰 교환 실패
        """
        flow = _FlowTracker("sign_in")
        try:
            flow.advance(FlowState.VALIDATING)
            validated = validate_sign_in_request(request)

            flow.advance(FlowState.AWAITING_REDIRECT)
            pkce = generate_pkce_challenge()
            with RedirectListener(port=validated.redirect.port) as listener:
                redirect_uri = listener.redirect_uri(
                    validated.redirect.host, validated.redirect.path
                )
                auth_request = build_authorization_url(
                    self.settings.endpoints.authorization_endpoint,
                    client_id=request.client_id,
                    redirect_uri=redirect_uri,
                    scopes=validated.scopes,
                    pkce=pkce,
                    hosted_domain=request.hosted_domain,
                    login_hint=request.login_hint,
                )
                logger.debug("Redirect URI: %s", redirect_uri)
                self.launcher(auth_request.url)
                redirect = listener.wait_for_redirect(
                    request.success_html_response,
                    timeout=self.settings.redirect_timeout,
                    expected_state=auth_request.csrf_token,
                )

            flow.advance(FlowState.EXCHANGING_CODE)
            grant = run_blocking(
                self.token_client.exchange_code,
                redirect.code,
                pkce.code_verifier,
                redirect_uri,
                request.client_id,
                validated.client_secret,
                name="google-signin-token-exchange",
                failure_message="Token exchange thread panicked",
            )
            token = to_token_response(grant)
        except GoogleAuthError as e:
            flow.fail(e)
            raise

        flow.advance(FlowState.COMPLETE)
        return token

    def _revoke_quietly(self, access_token: str) -> bool:
        try:
            revoked = self.token_client.revoke(access_token)
        except NetworkError as e:
            logger.warning("Token revocation failed, signing out locally: %s", e)
            return False
        if not revoked:
            logger.warning("Provider rejected token revocation, signing out locally")
        return revoked

    def sign_out(self, request: SignOutRequest) -> SignOutResponse:
        """토큰 폐기 후 로그아웃.

        폐기 실패(non-2xx, 전송 실패)는 무시하고 성공을 반환한다.
        로컬 세션 정리는 provider 상태에 막히면 안 된다.

        Raises:
            AuthenticationFailedError: worker 스레드 비정상 종료
        """
        if not request.access_token:
            logger.debug("sign_out: no access token, local sign-out only")
            return SignOutResponse(success=True)

        flow = _FlowTracker("sign_out")
        try:
            flow.advance(FlowState.REVOKING)
            run_blocking(
                self._revoke_quietly,
                request.access_token,
                name="google-signin-revoke",
                failure_message="Token revocation thread panicked",
            )
        except GoogleAuthError as e:
            flow.fail(e)
            raise

        flow.advance(FlowState.COMPLETE)
        return SignOutResponse(success=True)

    def refresh_token(self, request: RefreshTokenRequest) -> TokenResponse:
        """Refresh token으로 새 토큰 발급.

        Raises:
            ConfigurationError: client secret 또는 refresh token 누락
            TokenRefreshFailedError: 토큰 엔드포인트 실패
            AuthenticationFailedError: worker 스레드 비정상 종료
        """
        flow = _FlowTracker("refresh_token")
        try:
            if not request.client_secret:
                raise ConfigurationError(
                    "Client secret is required for desktop authentication"
                )
            if not request.refresh_token:
                raise ConfigurationError("Refresh token is required")
            if not request.client_id:
                raise InvalidClientIdError()

            flow.advance(FlowState.REFRESHING)
            grant = run_blocking(
                self.token_client.refresh,
                request.refresh_token,
                request.client_id,
                request.client_secret,
                name="google-signin-refresh",
                failure_message="Token refresh thread panicked",
            )
            token = to_token_response(grant)
        except GoogleAuthError as e:
            flow.fail(e)
            raise

        flow.advance(FlowState.COMPLETE)
        return token
