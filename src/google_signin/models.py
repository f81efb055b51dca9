"""Request / response models

플러그인 명령이 주고받는 데이터 클래스.
페이로드는 camelCase 딕셔너리 (idToken, accessToken, ...) 로 직렬화한다.
"""

import time
from dataclasses import dataclass, field
from enum import Enum

from google_signin.exceptions import ConfigurationError


class FlowType(str, Enum):
    """모바일 로그인 방식 (데스크톱에서는 무시)."""

    NATIVE = "native"
    WEB = "web"


def _parse_flow_type(value) -> FlowType | None:
    if value is None:
        return None
    try:
        return FlowType(value)
    except ValueError as e:
        raise ConfigurationError(f"Unknown flow type: {value!r}") from e


def _compact(data: dict) -> dict:
    """None 값 필드 제거."""
    return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class SignInRequest:
    """로그인 요청.

    scopes는 검증 시점에 반드시 비어 있지 않아야 한다.
    redirect_uri는 http://localhost 또는 http://127.0.0.1 (포트 선택).
    """

    client_id: str
    client_secret: str | None = None
    scopes: tuple[str, ...] | None = None
    hosted_domain: str | None = None
    login_hint: str | None = None
    redirect_uri: str | None = None
    success_html_response: str | None = None
    flow_type: FlowType | None = None

    def to_dict(self) -> dict:
        return _compact({
            "clientId": self.client_id,
            "clientSecret": self.client_secret,
            "scopes": list(self.scopes) if self.scopes is not None else None,
            "hostedDomain": self.hosted_domain,
            "loginHint": self.login_hint,
            "redirectUri": self.redirect_uri,
            "successHtmlResponse": self.success_html_response,
            "flowType": self.flow_type.value if self.flow_type else None,
        })

    @classmethod
    def from_dict(cls, data: dict) -> "SignInRequest":
        scopes = data.get("scopes")
        return cls(
            client_id=data.get("clientId", ""),
            client_secret=data.get("clientSecret"),
            scopes=tuple(scopes) if scopes is not None else None,
            hosted_domain=data.get("hostedDomain"),
            login_hint=data.get("loginHint"),
            redirect_uri=data.get("redirectUri"),
            success_html_response=data.get("successHtmlResponse"),
            flow_type=_parse_flow_type(data.get("flowType")),
        )


@dataclass
class TokenResponse:
    """로그인/갱신 공통 토큰 응답.

    expires_at은 Unix timestamp (초). 응답 수신 시각 + expires_in.
    """

    access_token: str
    id_token: str | None = None
    scopes: list[str] = field(default_factory=list)
    refresh_token: str | None = None
    expires_at: int | None = None

    def is_expired(self) -> bool:
        """토큰 만료 여부 확인"""
        if self.expires_at is None:
            return False
        return time.time() >= self.expires_at

    def to_dict(self) -> dict:
        """camelCase 딕셔너리로 변환"""
        return {
            "idToken": self.id_token,
            "accessToken": self.access_token,
            "scopes": list(self.scopes),
            "refreshToken": self.refresh_token,
            "expiresAt": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TokenResponse":
        """camelCase 딕셔너리에서 생성"""
        expires_at = data.get("expiresAt")
        return cls(
            access_token=data["accessToken"],
            id_token=data.get("idToken"),
            scopes=list(data.get("scopes") or []),
            refresh_token=data.get("refreshToken"),
            expires_at=int(expires_at) if expires_at is not None else None,
        )


@dataclass(frozen=True)
class SignOutRequest:
    """로그아웃 요청. access_token이 없으면 로컬 로그아웃만 수행."""

    access_token: str | None = None
    flow_type: FlowType | None = None

    def to_dict(self) -> dict:
        return _compact({
            "accessToken": self.access_token,
            "flowType": self.flow_type.value if self.flow_type else None,
        })

    @classmethod
    def from_dict(cls, data: dict) -> "SignOutRequest":
        return cls(
            access_token=data.get("accessToken"),
            flow_type=_parse_flow_type(data.get("flowType")),
        )


@dataclass(frozen=True)
class SignOutResponse:
    success: bool = True

    def to_dict(self) -> dict:
        return {"success": self.success}

    @classmethod
    def from_dict(cls, data: dict) -> "SignOutResponse":
        return cls(success=bool(data["success"]))


@dataclass(frozen=True)
class RefreshTokenRequest:
    """토큰 갱신 요청. 데스크톱에서는 client_secret 필수."""

    client_id: str
    refresh_token: str | None = None
    client_secret: str | None = None
    scopes: tuple[str, ...] | None = None
    flow_type: FlowType | None = None

    def to_dict(self) -> dict:
        return _compact({
            "refreshToken": self.refresh_token,
            "clientId": self.client_id,
            "clientSecret": self.client_secret,
            "scopes": list(self.scopes) if self.scopes is not None else None,
            "flowType": self.flow_type.value if self.flow_type else None,
        })

    @classmethod
    def from_dict(cls, data: dict) -> "RefreshTokenRequest":
        scopes = data.get("scopes")
        return cls(
            client_id=data.get("clientId", ""),
            refresh_token=data.get("refreshToken"),
            client_secret=data.get("clientSecret"),
            scopes=tuple(scopes) if scopes is not None else None,
            flow_type=_parse_flow_type(data.get("flowType")),
        )
