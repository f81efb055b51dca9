"""PKCE + CSRF material

한 번의 로그인 플로우에서만 사용하는 난수 값 생성.
code_verifier는 메모리에만 보관하고 토큰 교환 시 한 번 전송한다.
"""

import base64
import hashlib
import secrets
from dataclasses import dataclass


@dataclass(frozen=True)
class PKCEChallenge:
    """PKCE (Proof Key for Code Exchange) 챌린지."""

    code_verifier: str
    code_challenge: str
    code_challenge_method: str = "S256"

    def __repr__(self) -> str:
        # verifier는 로그에 남기지 않음
        return (
            f"PKCEChallenge(code_challenge={self.code_challenge!r}, "
            f"code_challenge_method={self.code_challenge_method!r})"
        )


def derive_code_challenge(code_verifier: str) -> str:
    """code_verifier의 SHA256 해시를 base64url 인코딩 (패딩 제거)."""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def generate_pkce_challenge() -> PKCEChallenge:
    """PKCE 챌린지 생성.

    Returns:
        PKCEChallenge: code_verifier와 code_challenge 포함
    """
    # code_verifier: 43-128자의 랜덤 문자열 (RFC 7636)
    code_verifier = secrets.token_urlsafe(64)[:128]
    return PKCEChallenge(
        code_verifier=code_verifier,
        code_challenge=derive_code_challenge(code_verifier),
        code_challenge_method="S256",
    )


def generate_csrf_token() -> str:
    """redirect 상관관계 확인용 state 값."""
    return secrets.token_urlsafe(32)
