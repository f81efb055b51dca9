"""Mobile backend

Android/iOS 네이티브 로그인 SDK로 요청을 넘기는 브리지 어댑터.
SDK 내부 UI와 토큰 발급은 이 패키지의 관심사가 아니다.
"""

import logging
from typing import Protocol

from google_signin.backends.base import GoogleAuthBackend
from google_signin.exceptions import GoogleAuthError, PluginInvokeError
from google_signin.models import (
    RefreshTokenRequest,
    SignInRequest,
    SignOutRequest,
    SignOutResponse,
    TokenResponse,
)

logger = logging.getLogger(__name__)


class MobileBridge(Protocol):
    """네이티브 플러그인 호출 인터페이스."""

    def run(self, method_name: str, payload: dict) -> dict:
        """method_name을 payload와 함께 실행하고 응답 딕셔너리 반환."""
        ...


class MobileGoogleAuth(GoogleAuthBackend):
    """모바일 네이티브 SDK 위임 backend.

    Example:
        auth = MobileGoogleAuth(bridge)
        token = auth.sign_in(SignInRequest(client_id="...", scopes=("email",)))
    """

    SIGN_IN = "signIn"
    SIGN_OUT = "signOut"
    REFRESH_TOKEN = "refreshToken"

    def __init__(self, bridge: MobileBridge):
        self.bridge = bridge

    @property
    def name(self) -> str:
        return "mobile"

    def _run(self, method_name: str, payload: dict) -> dict:
        logger.debug("Invoking mobile plugin method %s", method_name)
        try:
            reply = self.bridge.run(method_name, payload)
        except GoogleAuthError:
            raise
        except Exception as e:
            raise PluginInvokeError(f"{method_name} failed: {e}") from e

        if not isinstance(reply, dict):
            raise PluginInvokeError(
                f"{method_name} returned {type(reply).__name__}, expected an object"
            )
        return reply

    def _token_reply(self, method_name: str, payload: dict) -> TokenResponse:
        reply = self._run(method_name, payload)
        try:
            return TokenResponse.from_dict(reply)
        except (KeyError, TypeError, ValueError) as e:
            raise PluginInvokeError(
                f"{method_name} returned an invalid token response"
            ) from e

    def sign_in(self, request: SignInRequest) -> TokenResponse:
        return self._token_reply(self.SIGN_IN, request.to_dict())

    def sign_out(self, request: SignOutRequest) -> SignOutResponse:
        reply = self._run(self.SIGN_OUT, request.to_dict())
        try:
            return SignOutResponse.from_dict(reply)
        except KeyError as e:
            raise PluginInvokeError(
                f"{self.SIGN_OUT} returned an invalid response"
            ) from e

    def refresh_token(self, request: RefreshTokenRequest) -> TokenResponse:
        return self._token_reply(self.REFRESH_TOKEN, request.to_dict())
