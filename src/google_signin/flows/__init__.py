"""OAuth Flows

Loopback redirect + PKCE 인증 코드 플로우 구성 요소.
"""

from google_signin.flows.authorization import (
    AuthorizationRequest,
    build_authorization_url,
)
from google_signin.flows.browser import open_browser
from google_signin.flows.pkce import (
    PKCEChallenge,
    generate_csrf_token,
    generate_pkce_challenge,
)
from google_signin.flows.redirect_listener import RedirectListener, RedirectResult
from google_signin.flows.token_client import TokenExchangeClient, TokenGrant
from google_signin.flows.worker import run_blocking

__all__ = [
    # Authorization URL
    "AuthorizationRequest",
    "build_authorization_url",
    "PKCEChallenge",
    "generate_pkce_challenge",
    "generate_csrf_token",
    # Loopback redirect
    "RedirectListener",
    "RedirectResult",
    "open_browser",
    # Token endpoint
    "TokenExchangeClient",
    "TokenGrant",
    "run_blocking",
]
