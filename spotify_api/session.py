"""Session bootstrap: decide between reuse, code exchange and redirect.

One call to ``SessionBootstrapper.run`` is one "page load": it looks at the
stored token and the navigator's current location and walks the states

    HAS_TOKEN -> AUTHENTICATED
    NO_TOKEN (no code) -> REDIRECTED
    HAS_CODE -> AUTHENTICATED | FAILED

A 401 while fetching drops the stored token and redirects once. Every
failure is logged here and reported through the returned state; nothing is
raised to the caller.
"""

import enum
import logging
from typing import Any, Dict, Optional

import httpx

from .auth import SpotifyPKCEAuth, extract_code_from_redirect_url, strip_query
from .auth_state import ACCESS_TOKEN_KEY, AuthStateStore
from .client import SpotifyClient
from .data_loader import SpotifyDataLoader
from .errors import (
    AuthExpiredError,
    AuthorizationDeniedError,
    MissingVerifierError,
    SpotifyAPIError,
    TokenExchangeError,
)
from .navigation import Navigator

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    NO_TOKEN = "no_token"
    HAS_CODE = "has_code"
    HAS_TOKEN = "has_token"
    AUTHENTICATED = "authenticated"
    REDIRECTED = "redirected"
    FAILED = "failed"


class SessionBootstrapper:
    def __init__(
        self,
        config: Dict[str, Any],
        store: AuthStateStore,
        navigator: Navigator,
        view: Any,
        *,
        http_client: Optional[httpx.Client] = None,
    ):
        self.config = config or {}
        self.store = store
        self.navigator = navigator
        self.view = view
        self.http_client = http_client
        self.auth = SpotifyPKCEAuth(self.config, store, http_client=http_client)
        self.state: Optional[SessionState] = None

    @property
    def time_range(self) -> str:
        return str(self.config.get("top_tracks_time_range") or "long_term")

    def run(self, current_url: Optional[str] = None) -> SessionState:
        url = current_url if current_url is not None else self.navigator.location

        access_token = self.store.get(ACCESS_TOKEN_KEY)
        if access_token:
            self.state = SessionState.HAS_TOKEN
            logger.info("Access token found in auth state.")
            return self._authenticated(access_token)

        callback = extract_code_from_redirect_url(url)
        if callback.get("error"):
            logger.error("Error during authorisation: %s", AuthorizationDeniedError(callback["error"]))
            self.navigator.replace_location(strip_query(url))
            self.state = SessionState.FAILED
            return self.state

        code = callback.get("code")
        if not code:
            self.state = SessionState.NO_TOKEN
            logger.info("No code or token found. Redirecting to Spotify for authorisation.")
            return self._redirect()

        self.state = SessionState.HAS_CODE
        logger.info("Authorisation code found.")
        try:
            access_token = self.auth.exchange_code_for_token(code)
        except (MissingVerifierError, TokenExchangeError) as e:
            logger.error("Error during authorisation: %s", e)
            self.state = SessionState.FAILED
            return self.state

        self.store.set(ACCESS_TOKEN_KEY, access_token)
        logger.info("Access token retrieved and stored.")
        self.navigator.replace_location(strip_query(url))
        return self._authenticated(access_token)

    def settle(self, *, max_passes: int = 3) -> SessionState:
        """Run passes while each one ends on a redirect that produced a callback.

        With a navigator that waits for the callback (loopback or paste), this
        carries a fresh login all the way to AUTHENTICATED in one call.
        """

        state = self.run()
        passes = 1
        while state is SessionState.REDIRECTED and passes < max_passes:
            if not extract_code_from_redirect_url(self.navigator.location):
                break
            state = self.run(self.navigator.location)
            passes += 1

        location = self.navigator.location
        if state is SessionState.REDIRECTED and extract_code_from_redirect_url(location):
            logger.warning(
                "Gave up after %d passes with an unused callback at %s; discarding it.", passes, strip_query(location)
            )
            self.navigator.replace_location(strip_query(location))
        return state

    def sign_out(self) -> None:
        self.store.remove(ACCESS_TOKEN_KEY)
        logger.info("Stored access token removed.")

    def _redirect(self) -> SessionState:
        try:
            self.auth.redirect_to_authorize(self.navigator)
        except (ValueError, OSError) as e:
            logger.error("Could not start Spotify authorisation: %s", e)
            self.state = SessionState.FAILED
            return self.state

        self.state = SessionState.REDIRECTED
        return self.state

    def _authenticated(self, access_token: str) -> SessionState:
        self.state = SessionState.AUTHENTICATED
        return self.load_and_render(access_token)

    def load_and_render(self, access_token: str) -> SessionState:
        """Fetch profile then top tracks, pushing each into the view as it arrives."""

        loader = SpotifyDataLoader(SpotifyClient(access_token, http_client=self.http_client))
        try:
            self.view.show_profile(loader.load_profile())
            self.view.show_top_tracks(loader.load_top_tracks(time_range=self.time_range))
        except AuthExpiredError as e:
            logger.warning("Access token expired (%s). Clearing auth state and redirecting.", e)
            self.store.remove(ACCESS_TOKEN_KEY)
            self.state = SessionState.NO_TOKEN
            return self._redirect()
        except SpotifyAPIError as e:
            logger.error("Error fetching Spotify data: %s", e)
            self.state = SessionState.FAILED
            return self.state

        return self.state
