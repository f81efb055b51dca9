"""Blocking worker

블로킹 호출을 전용 스레드에서 실행하고 join한다.
라이브러리 예외는 그대로 전파하고, 예상하지 못한 예외는
AuthenticationFailedError로 변환한다 (프로세스가 죽지 않도록).
"""

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from google_signin.exceptions import AuthenticationFailedError, GoogleAuthError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_blocking(
    func: Callable[..., T],
    *args: Any,
    name: str = "google-signin-worker",
    failure_message: str = "Worker thread panicked",
) -> T:
    """func(*args)를 새 스레드에서 실행하고 결과 반환.

    Args:
        func: 블로킹 함수
        *args: 함수 인자
        name: 스레드 이름
        failure_message: 예상하지 못한 예외 발생 시 메시지

    Returns:
        func의 반환값

    Raises:
        GoogleAuthError: func가 올린 라이브러리 예외
        AuthenticationFailedError: 그 외 예외
    """
    outcome: dict[str, Any] = {}

    def target() -> None:
        try:
            outcome["result"] = func(*args)
        except Exception as e:
            outcome["error"] = e

    thread = threading.Thread(target=target, name=name, daemon=True)
    thread.start()
    thread.join()

    if "result" in outcome:
        return outcome["result"]

    error = outcome.get("error")
    if isinstance(error, GoogleAuthError):
        raise error

    # error가 없으면 스레드가 SystemExit 등으로 끝난 경우
    logger.error("%s: %r", failure_message, error)
    raise AuthenticationFailedError(failure_message) from error
