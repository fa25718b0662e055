"""Exception hierarchy for the Spotify PKCE flow and Web API calls.

Auth errors halt the current session pass; API errors are split so the
session layer can tell an expired token (restart authorization) from
everything else (log and stop).
"""

from typing import Optional


class SpotifyAuthError(Exception):
    """Base exception for authorization handshake failures."""

    pass


class MissingVerifierError(SpotifyAuthError):
    """Raised when a code exchange is attempted with no stored verifier.

    Typically the flow was started from a different device, browser profile
    or state file than the one that received the callback.
    """

    pass


class TokenExchangeError(SpotifyAuthError):
    """Raised when the token endpoint rejects the code or returns junk."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        error: Optional[str] = None,
        error_description: Optional[str] = None,
    ):
        super().__init__(message)
        self.status = status
        self.error = error
        self.error_description = error_description


class AuthorizationDeniedError(SpotifyAuthError):
    """Raised when the callback carries ?error=... instead of a code."""

    def __init__(self, error: str):
        super().__init__(f"Spotify authorization was denied: {error}")
        self.error = error


class SpotifyAPIError(Exception):
    """Base exception for authenticated Web API calls."""

    def __init__(self, message: str, *, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class AuthExpiredError(SpotifyAPIError):
    """HTTP 401 from the Web API: the stored token is no longer accepted."""

    pass


class TransientFetchError(SpotifyAPIError):
    """Any other failure fetching profile or top tracks."""

    pass


class ResponseShapeError(SpotifyAPIError):
    """A Web API or token response did not match the expected schema."""

    pass
