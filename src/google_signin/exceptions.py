"""Custom authentication exceptions.

Google 로그인 플로우 예외 클래스 정의.
각 컴포넌트는 하위 예외를 경계에서 이 계층으로 변환해서 올린다.
"""


class GoogleAuthError(Exception):
    """기본 예외.

    모든 google_signin 예외의 베이스 클래스.
    ``str()`` 결과는 호스트로 직렬화되는 메시지 형식을 따른다.

    Attributes:
        detail: 원본 메시지
        error_code: OAuth 에러 코드 (예: 'invalid_grant', 'access_denied')
    """

    prefix = "Error"

    def __init__(self, detail: str = "", error_code: str | None = None):
        self.detail = detail
        self.error_code = error_code
        super().__init__(self._format(detail))

    def _format(self, detail: str) -> str:
        if not detail:
            return self.prefix
        return f"{self.prefix}: {detail}"

    def to_payload(self) -> str:
        """호스트에 전달할 문자열 형태."""
        return str(self)


class AuthIOError(GoogleAuthError):
    """소켓/스트림 읽기·쓰기 실패."""

    prefix = "I/O error"


class AuthenticationFailedError(GoogleAuthError):
    """인증 실패.

    redirect에 code/state 누락, 토큰 엔드포인트 non-2xx 응답,
    worker 스레드 비정상 종료 등.
    """

    prefix = "Authentication failed"


class UserCancelledError(AuthenticationFailedError):
    """사용자가 동의 화면에서 로그인을 거부함."""

    prefix = "User cancelled the sign-in flow"

    def _format(self, detail: str) -> str:
        return self.prefix


class TokenRefreshFailedError(AuthenticationFailedError):
    """Refresh token 교환 실패."""

    prefix = "Token refresh failed"


class ConfigurationError(GoogleAuthError):
    """잘못된 입력 (scope 누락, redirect host 오류, client secret 누락 등)."""

    prefix = "Configuration error"


class InvalidClientIdError(ConfigurationError):
    """client_id가 비어 있음."""

    prefix = "Invalid client ID provided"

    def _format(self, detail: str) -> str:
        return self.prefix


class NetworkError(GoogleAuthError):
    """바인딩 실패, 브라우저 실행 실패, HTTP 전송 실패."""

    prefix = "Network error"


class NoUserSignedInError(GoogleAuthError):
    """로그인된 사용자가 없음 (모바일 브리지에서 전달)."""

    prefix = "No user is currently signed in"

    def _format(self, detail: str) -> str:
        return self.prefix


class PluginInvokeError(GoogleAuthError):
    """모바일 브리지 호출 실패."""

    prefix = "Plugin invoke error"
