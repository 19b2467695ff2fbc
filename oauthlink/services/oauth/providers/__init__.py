"""OAuth providers module."""
from .base import OAuthProvider, ProviderSpec
from .google import GOOGLE, google
from .spotify import SPOTIFY, spotify

__all__ = ["OAuthProvider", "ProviderSpec", "GOOGLE", "SPOTIFY", "google", "spotify"]
