"""Backends

데스크톱 (loopback redirect) 과 모바일 (네이티브 SDK 브리지) 구현.
"""

from google_signin.backends.base import GoogleAuthBackend
from google_signin.backends.desktop import DesktopGoogleAuth, FlowState
from google_signin.backends.mobile import MobileBridge, MobileGoogleAuth

__all__ = [
    "GoogleAuthBackend",
    "DesktopGoogleAuth",
    "FlowState",
    "MobileBridge",
    "MobileGoogleAuth",
]
