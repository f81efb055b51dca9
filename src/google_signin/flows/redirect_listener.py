"""Loopback redirect listener

127.0.0.1에 TCP 소켓을 바인딩하고 OAuth redirect 연결을 정확히 한 번 받는다.
요청 라인에서 query의 code/state를 꺼내고 나머지 헤더는 버린다. 짧은 응답을 쓴 뒤 소켓을 닫는다.
"""

import logging
import secrets
import socket
from dataclasses import dataclass
from urllib.parse import parse_qsl, urlsplit

from google_signin.config import (
    DEFAULT_REDIRECT_HOST,
    LOCALHOST_ADDR,
    SUCCESS_HTML_RESPONSE,
)
from google_signin.exceptions import (
    AuthenticationFailedError,
    AuthIOError,
    NetworkError,
    UserCancelledError,
)

logger = logging.getLogger(__name__)

MAX_REQUEST_LINE = 8192
MAX_HEADER_LINES = 100
HEADER_DRAIN_TIMEOUT = 0.5


@dataclass(frozen=True)
class RedirectResult:
    """redirect query에서 꺼낸 값."""

    code: str
    state: str


def parse_request_line(request_line: str) -> tuple[str, str, str]:
    """HTTP 요청 라인을 method, path, version으로 분리.

    Raises:
        NetworkError: 토큰이 3개가 아닐 때
    """
    parts = request_line.split()
    if len(parts) != 3:
        raise NetworkError("Invalid HTTP request format")
    method, path, version = parts
    return method, path, version


def parse_query(path: str) -> dict[str, str]:
    """요청 path의 query 파라미터 (같은 키는 첫 번째 값 사용)."""
    try:
        parsed = urlsplit(f"http://{DEFAULT_REDIRECT_HOST}{path}")
    except ValueError as e:
        raise NetworkError(f"Failed to parse redirect URL: {e}") from e

    params: dict[str, str] = {}
    for key, value in parse_qsl(parsed.query, keep_blank_values=True):
        params.setdefault(key, value)
    return params


def extract_redirect_result(params: dict[str, str]) -> RedirectResult:
    """query 파라미터에서 code와 state 추출.

    Raises:
        UserCancelledError: error=access_denied
        AuthenticationFailedError: 그 외 error, code 또는 state 누락
    """
    if "code" not in params:
        error = params.get("error")
        if error == "access_denied":
            raise UserCancelledError(error_code=error)
        if error:
            description = params.get("error_description") or error
            raise AuthenticationFailedError(
                f"Authorization denied: {description}", error_code=error
            )
        raise AuthenticationFailedError("Authorization code not found in response")

    if "state" not in params:
        raise AuthenticationFailedError("State parameter not found in response")

    return RedirectResult(code=params["code"], state=params["state"])


def states_match(received: str, expected: str) -> bool:
    """state 비교 (상수 시간)."""
    return secrets.compare_digest(
        received.encode("utf-8"), expected.encode("utf-8")
    )


def _drain_headers(conn: socket.socket, reader) -> None:
    # 읽지 않은 데이터가 남은 채 close하면 응답 대신 RST가 나갈 수 있음.
    # 헤더가 오지 않아도 응답은 나가야 하므로 짧게만 기다린다.
    conn.settimeout(HEADER_DRAIN_TIMEOUT)
    try:
        for _ in range(MAX_HEADER_LINES):
            line = reader.readline(MAX_REQUEST_LINE)
            if line in (b"", b"\r\n", b"\n"):
                return
    except socket.timeout:
        logger.debug("Redirect request headers incomplete, replying anyway")


def _http_response(status: str, body: str) -> bytes:
    payload = body.encode("utf-8")
    head = (
        f"HTTP/1.1 {status}\r\n"
        f"content-type: text/plain; charset=utf-8\r\n"
        f"content-length: {len(payload)}\r\n"
        f"connection: close\r\n"
        f"\r\n"
    )
    return head.encode("ascii") + payload


class RedirectListener:
    """한 번만 연결을 받는 loopback 리스너.

    바인딩은 생성 시점에 일어나므로 redirect URI를 만들기 전에
    실제 포트를 알 수 있다.

    Example:
        with RedirectListener() as listener:
            redirect_uri = listener.redirect_uri("localhost")
            ...  # 브라우저 열기
            result = listener.wait_for_redirect()
    """

    def __init__(self, port: int | None = None, host: str = LOCALHOST_ADDR):
        """바인딩.

        Args:
            port: 고정 포트 (None이면 OS가 할당)
            host: 바인딩 주소

        Raises:
            NetworkError: 포트 사용 중, 권한 없음 등
        """
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            self._sock.bind((host, port or 0))
            self._sock.listen(1)
        except OSError as e:
            self._sock.close()
            if port:
                raise NetworkError(f"Failed to bind to port {port}: {e}") from e
            raise NetworkError(f"Failed to bind to any available port: {e}") from e

        self.port: int = self._sock.getsockname()[1]
        self._closed = False
        logger.debug("Redirect listener bound on %s:%d", host, self.port)

    def __enter__(self) -> "RedirectListener":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def redirect_uri(self, host: str = DEFAULT_REDIRECT_HOST, path: str = "") -> str:
        """바인딩된 포트를 포함한 redirect URI."""
        return f"http://{host}:{self.port}{path}"

    def close(self) -> None:
        """리스너 종료. 다른 스레드에서 호출하면 대기 중인 accept가 깨어난다."""
        if self._closed:
            return
        self._closed = True
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # 연결되지 않은 listening 소켓은 shutdown이 실패할 수 있음
            pass
        self._sock.close()
        logger.debug("Redirect listener on port %d closed", self.port)

    def _accept(self, timeout: float | None) -> socket.socket:
        if self._closed:
            raise NetworkError("Listener terminated without accepting a connection")
        self._sock.settimeout(timeout)
        try:
            conn, addr = self._sock.accept()
        except socket.timeout as e:
            raise NetworkError(
                f"Timed out after {timeout}s waiting for the redirect"
            ) from e
        except OSError as e:
            raise NetworkError(
                "Listener terminated without accepting a connection"
            ) from e
        logger.debug("Accepted redirect connection from %s:%d", *addr[:2])
        return conn

    def wait_for_redirect(
        self,
        success_message: str | None = None,
        timeout: float | None = None,
        expected_state: str | None = None,
    ) -> RedirectResult:
        """redirect 한 건을 받아 code/state 반환.

        성공 시 200 OK와 success_message (기본: SUCCESS_HTML_RESPONSE),
        실패 시 400과 실패 사유를 응답한다. 어느 쪽이든 리스너는 닫힌다.

        Args:
            success_message: 브라우저에 보여줄 본문
            timeout: 연결 대기 타임아웃 (초, None이면 무기한)
            expected_state: 인증 요청에 넣은 state (주어지면 불일치 시 400)

        Returns:
            RedirectResult: code, state

        Raises:
            NetworkError: 연결 없이 종료, 타임아웃, 잘못된 요청 라인
            AuthenticationFailedError: code 또는 state 누락, state 불일치
            AuthIOError: 소켓 읽기/쓰기 실패
        """
        try:
            conn = self._accept(timeout)
        except NetworkError:
            self.close()
            raise

        try:
            with conn:
                conn.settimeout(timeout)
                try:
                    with conn.makefile("rb") as reader:
                        raw_line = reader.readline(MAX_REQUEST_LINE)
                        if raw_line.endswith(b"\n"):
                            _drain_headers(conn, reader)
                except OSError as e:
                    raise AuthIOError(f"Failed to read redirect request: {e}") from e

                try:
                    result = self._handle_request_line(
                        raw_line.decode("latin-1"), expected_state
                    )
                except (AuthenticationFailedError, NetworkError) as e:
                    try:
                        self._respond(conn, "400 Bad Request", str(e))
                    except AuthIOError:
                        logger.debug("Browser went away before the error response")
                    raise

                self._respond(
                    conn, "200 OK", success_message or SUCCESS_HTML_RESPONSE
                )
                return result
        finally:
            self.close()

    def _handle_request_line(
        self, request_line: str, expected_state: str | None
    ) -> RedirectResult:
        method, path, _version = parse_request_line(request_line)
        logger.debug("Redirect request: %s %s", method, urlsplit(path).path)
        params = parse_query(path)
        logger.debug("Redirect params: %s", sorted(params))
        result = extract_redirect_result(params)
        if expected_state is not None and not states_match(
            result.state, expected_state
        ):
            raise AuthenticationFailedError(
                "State parameter does not match the authorization request"
            )
        return result

    def _respond(self, conn: socket.socket, status: str, body: str) -> None:
        try:
            conn.sendall(_http_response(status, body))
        except OSError as e:
            raise AuthIOError(f"Failed to write redirect response: {e}") from e
