"""Google Sign-In - loopback redirect OAuth 2.0 + PKCE for desktop apps.

Example:
    from google_signin import DesktopGoogleAuth, SignInRequest

    auth = DesktopGoogleAuth()
    token = auth.sign_in(SignInRequest(
        client_id="...apps.googleusercontent.com",
        client_secret="GOCSPX-...",
        scopes=("openid", "email"),
    ))
"""

from google_signin.backends import (
    DesktopGoogleAuth,
    GoogleAuthBackend,
    MobileBridge,
    MobileGoogleAuth,
)
from google_signin.config import GoogleAuthSettings, GoogleEndpoints
from google_signin.exceptions import (
    AuthenticationFailedError,
    AuthIOError,
    ConfigurationError,
    GoogleAuthError,
    InvalidClientIdError,
    NetworkError,
    NoUserSignedInError,
    PluginInvokeError,
    TokenRefreshFailedError,
    UserCancelledError,
)
from google_signin.models import (
    FlowType,
    RefreshTokenRequest,
    SignInRequest,
    SignOutRequest,
    SignOutResponse,
    TokenResponse,
)
from google_signin.plugin import GoogleAuthPlugin, init

__version__ = "1.0.0"

__all__ = [
    # Plugin
    "GoogleAuthPlugin",
    "init",
    # Backends
    "GoogleAuthBackend",
    "DesktopGoogleAuth",
    "MobileGoogleAuth",
    "MobileBridge",
    # Config
    "GoogleAuthSettings",
    "GoogleEndpoints",
    # Models
    "FlowType",
    "SignInRequest",
    "SignOutRequest",
    "SignOutResponse",
    "RefreshTokenRequest",
    "TokenResponse",
    # Exceptions
    "GoogleAuthError",
    "AuthIOError",
    "AuthenticationFailedError",
    "UserCancelledError",
    "TokenRefreshFailedError",
    "ConfigurationError",
    "InvalidClientIdError",
    "NetworkError",
    "NoUserSignedInError",
    "PluginInvokeError",
]
