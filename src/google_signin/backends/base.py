"""Base backend 추상 클래스

데스크톱 / 모바일 구현이 제공해야 하는 인터페이스 정의.
"""

from abc import ABC, abstractmethod

from google_signin.models import (
    RefreshTokenRequest,
    SignInRequest,
    SignOutRequest,
    SignOutResponse,
    TokenResponse,
)


class GoogleAuthBackend(ABC):
    """Google 로그인 backend 추상 베이스 클래스

    각 호출은 하나의 플로우를 끝까지 실행한다. 호출 간 상태는 없다.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend 이름"""
        pass

    @abstractmethod
    def sign_in(self, request: SignInRequest) -> TokenResponse:
        """로그인 수행

        Returns:
            TokenResponse: 토큰 응답
        """
        pass

    @abstractmethod
    def sign_out(self, request: SignOutRequest) -> SignOutResponse:
        """로그아웃

        Returns:
            SignOutResponse: 항상 success=True (실패는 예외)
        """
        pass

    @abstractmethod
    def refresh_token(self, request: RefreshTokenRequest) -> TokenResponse:
        """토큰 갱신

        Returns:
            TokenResponse: 갱신된 토큰
        """
        pass
