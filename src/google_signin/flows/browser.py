"""Browser launcher

기본 브라우저로 인증 URL을 연다. 사용자 상호작용 결과는 알 수 없으며
이후 진행은 redirect 리스너가 연결을 받는지에 달려 있다.
"""

import logging
import webbrowser

from rich.console import Console
from rich.panel import Panel

from google_signin.exceptions import NetworkError

logger = logging.getLogger(__name__)
console = Console(stderr=True)


def show_authorization_url(url: str, auto_open: bool = True) -> None:
    """사용자 안내 출력."""
    if auto_open:
        message = (
            "[bold cyan]브라우저가 자동으로 열립니다.[/bold cyan]\n\n"
            "열리지 않으면 아래 URL을 직접 열어주세요:\n"
            f"[link={url}]{url}[/link]"
        )
    else:
        message = (
            "[bold cyan]아래 URL을 브라우저에서 열어주세요:[/bold cyan]\n\n"
            f"[link={url}]{url}[/link]"
        )
    console.print()
    console.print(
        Panel.fit(message, title="[AUTH] Google Sign-In", border_style="cyan")
    )
    console.print()


def open_browser(url: str) -> None:
    """기본 브라우저로 URL 열기.

    Raises:
        NetworkError: 등록된 브라우저가 없거나 OS 호출 실패
    """
    show_authorization_url(url)
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as e:
        raise NetworkError(f"Failed to open browser: {e}") from e

    if not opened:
        raise NetworkError("Failed to open browser: no browser handler available")

    logger.debug("Browser launched for authorization")
    console.print("[dim]브라우저에서 로그인 후 대기 중...[/dim]")


def print_url_only(url: str) -> None:
    """브라우저를 열지 않고 URL만 출력 (open_browser=False 설정)."""
    show_authorization_url(url, auto_open=False)
    console.print("[dim]브라우저에서 로그인 후 대기 중...[/dim]")
