"""Plugin commands

호스트 애플리케이션이 호출하는 비동기 명령.
camelCase 페이로드를 받아 backend를 선택하고 camelCase 딕셔너리를 반환한다.
블로킹 backend 호출은 asyncio.to_thread로 이벤트 루프 밖에서 실행한다.

Example:
    plugin = init()
    token = await plugin.sign_in({
        "clientId": "...apps.googleusercontent.com",
        "clientSecret": "GOCSPX-...",
        "scopes": ["openid", "email"],
    })
"""

import asyncio
import logging

from google_signin.backends.base import GoogleAuthBackend
from google_signin.backends.desktop import DesktopGoogleAuth
from google_signin.backends.mobile import MobileBridge, MobileGoogleAuth
from google_signin.config import GoogleAuthSettings
from google_signin.models import RefreshTokenRequest, SignInRequest, SignOutRequest

logger = logging.getLogger(__name__)


class GoogleAuthPlugin:
    """Google 로그인 플러그인.

    bridge가 주어지면 모바일 네이티브 SDK, 아니면 데스크톱 loopback 플로우.
    """

    def __init__(
        self,
        bridge: MobileBridge | None = None,
        settings: GoogleAuthSettings | None = None,
        backend: GoogleAuthBackend | None = None,
    ):
        """초기화.

        Args:
            bridge: 모바일 브리지 (None이면 데스크톱)
            settings: 설정 (None이면 환경변수에서 읽음)
            backend: 직접 지정할 backend (테스트용)
        """
        self.settings = settings or GoogleAuthSettings.from_env()
        if backend is None:
            if bridge is not None:
                backend = MobileGoogleAuth(bridge)
            else:
                backend = DesktopGoogleAuth(self.settings)
        self.backend = backend
        logger.debug("Google auth plugin using %s backend", backend.name)

    def _with_client_defaults(self, payload: dict) -> dict:
        """clientId / clientSecret 누락 시 설정값으로 채움."""
        merged = dict(payload)
        if not merged.get("clientId") and self.settings.client_id:
            merged["clientId"] = self.settings.client_id
        if not merged.get("clientSecret") and self.settings.client_secret:
            merged["clientSecret"] = self.settings.client_secret
        return merged

    async def sign_in(self, payload: dict) -> dict:
        """로그인 명령."""
        request = SignInRequest.from_dict(self._with_client_defaults(payload))
        token = await asyncio.to_thread(self.backend.sign_in, request)
        return token.to_dict()

    async def sign_out(self, payload: dict | None = None) -> dict:
        """로그아웃 명령."""
        request = SignOutRequest.from_dict(payload or {})
        response = await asyncio.to_thread(self.backend.sign_out, request)
        return response.to_dict()

    async def refresh_token(self, payload: dict) -> dict:
        """토큰 갱신 명령."""
        request = RefreshTokenRequest.from_dict(self._with_client_defaults(payload))
        token = await asyncio.to_thread(self.backend.refresh_token, request)
        return token.to_dict()


def init(
    bridge: MobileBridge | None = None,
    settings: GoogleAuthSettings | None = None,
) -> GoogleAuthPlugin:
    """플러그인 생성."""
    return GoogleAuthPlugin(bridge=bridge, settings=settings)
