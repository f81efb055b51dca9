"""Authorization URL builder

Google 인증 엔드포인트 URL 생성. 네트워크 I/O 없음.
"""

from dataclasses import dataclass
from urllib.parse import urlencode

from google_signin.flows.pkce import PKCEChallenge, generate_csrf_token


@dataclass(frozen=True)
class AuthorizationRequest:
    """브라우저에 넘길 URL과 거기에 포함된 state."""

    url: str
    csrf_token: str


def build_authorization_url(
    authorization_endpoint: str,
    client_id: str,
    redirect_uri: str,
    scopes: list[str] | tuple[str, ...],
    pkce: PKCEChallenge,
    hosted_domain: str | None = None,
    login_hint: str | None = None,
    csrf_token: str | None = None,
) -> AuthorizationRequest:
    """인증 URL 생성.

    scope는 중복 제거 후 공백으로 연결한다. hosted_domain(hd)과
    login_hint는 검증 없이 그대로 전달한다.

    Args:
        authorization_endpoint: Provider 인증 엔드포인트
        client_id: OAuth Client ID
        redirect_uri: 포트가 확정된 redirect URI
        scopes: 요청할 scope 목록
        pkce: PKCE 챌린지 (challenge만 URL에 포함)
        hosted_domain: Google Workspace 도메인 제한
        login_hint: 계정 힌트 (이메일 또는 sub)
        csrf_token: state 값 (None이면 새로 생성)

    Returns:
        AuthorizationRequest: URL과 state
    """
    state = csrf_token or generate_csrf_token()

    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": " ".join(dict.fromkeys(scopes)),
        "state": state,
        "code_challenge": pkce.code_challenge,
        "code_challenge_method": pkce.code_challenge_method,
    }

    if hosted_domain:
        params["hd"] = hosted_domain
    if login_hint:
        params["login_hint"] = login_hint

    separator = "&" if "?" in authorization_endpoint else "?"
    url = f"{authorization_endpoint}{separator}{urlencode(params)}"
    return AuthorizationRequest(url=url, csrf_token=state)
