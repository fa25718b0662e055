"""Spotify Web API integration (OAuth Authorization Code + PKCE).

Flow: SessionBootstrapper decides between reusing a stored token, exchanging
a returned code, or redirecting to Spotify; SpotifyDataLoader then fetches
the profile and top tracks for the view.
"""

from .auth import SpotifyPKCEAuth, code_challenge_from_verifier, generate_code_verifier
from .auth_state import AuthStateStore, JsonFileAuthStateStore, MemoryAuthStateStore
from .client import SpotifyClient
from .data_loader import SpotifyDataLoader
from .navigation import LoopbackNavigator, Navigator, PasteNavigator, RecordingNavigator
from .session import SessionBootstrapper, SessionState

__all__ = [
    "SpotifyPKCEAuth",
    "code_challenge_from_verifier",
    "generate_code_verifier",
    "AuthStateStore",
    "JsonFileAuthStateStore",
    "MemoryAuthStateStore",
    "SpotifyClient",
    "SpotifyDataLoader",
    "Navigator",
    "LoopbackNavigator",
    "PasteNavigator",
    "RecordingNavigator",
    "SessionBootstrapper",
    "SessionState",
]
