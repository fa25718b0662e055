import base64
import hashlib
import logging
import secrets
import string
import urllib.parse
from typing import Any, Dict, Optional

import httpx

from .auth_state import VERIFIER_KEY, AuthStateStore
from .errors import MissingVerifierError, TokenExchangeError
from .models import TokenResponse
from .navigation import Navigator

logger = logging.getLogger(__name__)

SPOTIFY_ACCOUNTS_BASE_URL = "https://accounts.spotify.com"
SPOTIFY_AUTHORIZE_URL = f"{SPOTIFY_ACCOUNTS_BASE_URL}/authorize"
SPOTIFY_TOKEN_URL = f"{SPOTIFY_ACCOUNTS_BASE_URL}/api/token"

SPOTIFY_SCOPES = ("user-read-private", "user-read-email", "user-top-read")

DEFAULT_REDIRECT_URI = "http://127.0.0.1:5173/callback"

VERIFIER_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
VERIFIER_MIN_LENGTH = 43
VERIFIER_MAX_LENGTH = 128


def _base64url_no_pad(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("utf-8").rstrip("=")


def generate_code_verifier(length: int = VERIFIER_MAX_LENGTH) -> str:
    """Return a random PKCE code_verifier of exactly ``length`` alphanumerics."""

    if not VERIFIER_MIN_LENGTH <= int(length) <= VERIFIER_MAX_LENGTH:
        raise ValueError(
            f"code_verifier length must be {VERIFIER_MIN_LENGTH}-{VERIFIER_MAX_LENGTH}, got {length}"
        )
    return "".join(secrets.choice(VERIFIER_ALPHABET) for _ in range(int(length)))


def code_challenge_from_verifier(verifier: str) -> str:
    """Compute PKCE S256 code_challenge from code_verifier."""

    digest = hashlib.sha256(verifier.encode("utf-8")).digest()
    return _base64url_no_pad(digest)


def check_spotify_credentials(config: Dict[str, Any]) -> Dict[str, Any]:
    """Validate Spotify OAuth config fields and return a structured status dict."""

    config = config or {}
    client_id = str(config.get("spotify_client_id", "")).strip()
    redirect_uri = str(config.get("spotify_redirect_uri", "")).strip()

    status = {
        "ok": False,
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "scopes": list(SPOTIFY_SCOPES),
    }

    if not client_id:
        status["message"] = (
            "Missing spotify_client_id in config.json.\n"
            "Create a Spotify app and copy its Client ID (see spotify_app_setup_instructions())."
        )
        return status

    if not redirect_uri:
        status["message"] = (
            "Missing spotify_redirect_uri in config.json.\n"
            f"Recommended default: {DEFAULT_REDIRECT_URI}"
        )
        return status

    status["ok"] = True
    status["message"] = "Spotify credentials look OK."
    return status


def spotify_app_setup_instructions(*, redirect_uri: str = DEFAULT_REDIRECT_URI) -> str:
    """Return user-facing setup instructions for creating a Spotify Developer app."""

    redirect_uri = str(redirect_uri or "").strip() or DEFAULT_REDIRECT_URI
    return (
        "Spotify app setup:\n"
        "1) Go to https://developer.spotify.com/dashboard\n"
        "2) Create an app (or select an existing app)\n"
        f"3) Add this Redirect URI in the app settings: {redirect_uri}\n"
        "4) Copy the Client ID into config.json as spotify_client_id\n\n"
        "Notes:\n"
        "- This app uses Authorization Code + PKCE (no client secret required).\n"
        "- Redirect URI must match *exactly* what you configure in the Spotify dashboard.\n"
        f"- Requested scopes: {' '.join(SPOTIFY_SCOPES)}\n"
    )


def extract_code_from_redirect_url(redirect_url: Optional[str]) -> Dict[str, str]:
    """Parse a redirect URL and return {"code": ..., "error": ...} (missing keys omitted)."""

    parsed = urllib.parse.urlparse(str(redirect_url or "").strip())
    qs = urllib.parse.parse_qs(parsed.query)
    out: Dict[str, str] = {}
    if qs.get("code"):
        out["code"] = str(qs["code"][0])
    if qs.get("error"):
        out["error"] = str(qs["error"][0])
    return out


def strip_query(url: str) -> str:
    """Drop query string and fragment, keeping scheme/host/path."""

    parsed = urllib.parse.urlparse(url)
    return urllib.parse.urlunparse((parsed.scheme, parsed.netloc, parsed.path or "/", "", "", ""))


class SpotifyPKCEAuth:
    """Spotify OAuth (Authorization Code + PKCE) helper.

    The verifier travels between ``redirect_to_authorize`` and
    ``exchange_code_for_token`` only through the injected AuthStateStore, so
    the two halves can run in different processes.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        store: AuthStateStore,
        *,
        http_client: Optional[httpx.Client] = None,
    ):
        self.config = config or {}
        self.store = store
        self.http_client = http_client

    @property
    def client_id(self) -> str:
        return str(self.config.get("spotify_client_id", "")).strip()

    @property
    def redirect_uri(self) -> str:
        return str(self.config.get("spotify_redirect_uri", "")).strip()

    def build_authorize_url(self, *, code_challenge: str) -> str:
        if not self.client_id:
            raise ValueError("Missing config.spotify_client_id")
        if not self.redirect_uri:
            raise ValueError("Missing config.spotify_redirect_uri")

        params = [
            ("client_id", self.client_id),
            ("response_type", "code"),
            ("redirect_uri", self.redirect_uri),
            ("scope", " ".join(SPOTIFY_SCOPES)),
            ("code_challenge_method", "S256"),
            ("code_challenge", code_challenge),
        ]
        return f"{SPOTIFY_AUTHORIZE_URL}?{urllib.parse.urlencode(params)}"

    def redirect_to_authorize(self, navigator: Navigator) -> str:
        """Start a fresh authorization attempt and send the navigator to Spotify.

        Overwrites any previously stored verifier. Returns the authorize URL.
        """

        logger.info("Initiating redirect to Spotify for authorisation.")
        verifier = generate_code_verifier(VERIFIER_MAX_LENGTH)
        challenge = code_challenge_from_verifier(verifier)

        self.store.set(VERIFIER_KEY, verifier)
        logger.debug("Code verifier saved to auth state (%s...)", verifier[:8])

        url = self.build_authorize_url(code_challenge=challenge)
        navigator.navigate(url)
        return url

    def exchange_code_for_token(self, code: str) -> str:
        """Trade an authorization code for an access token.

        Does not persist the token; that is the caller's job.
        """

        verifier = self.store.get(VERIFIER_KEY)
        if not verifier:
            raise MissingVerifierError(
                "No stored code verifier. Start the authorisation again from this device."
            )

        logger.info("Fetching access token using authorisation code.")
        payload = self._post_form(
            SPOTIFY_TOKEN_URL,
            {
                "client_id": self.client_id,
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_uri,
                "code_verifier": verifier,
            },
        )
        token = TokenResponse.from_payload(payload)
        logger.debug("Access token response received (expires_in=%s)", token.expires_in)
        return token.access_token

    def _send(self, url: str, data: Dict[str, str]) -> httpx.Response:
        headers = {"Content-Type": "application/x-www-form-urlencoded"}
        if self.http_client is not None:
            return self.http_client.post(url, data=data, headers=headers)

        with httpx.Client(follow_redirects=False) as client:
            return client.post(url, data=data, headers=headers)

    def _post_form(self, url: str, form: Dict[str, Any]) -> Dict[str, Any]:
        data = {k: str(v) for k, v in (form or {}).items() if v is not None}

        try:
            resp = self._send(url, data)
        except httpx.HTTPError as e:
            raise TokenExchangeError(f"Spotify token request failed: {e}") from e

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if not resp.is_success:
            error = payload.get("error") if isinstance(payload, dict) else None
            description = payload.get("error_description") if isinstance(payload, dict) else None
            raise TokenExchangeError(
                f"Spotify token request failed (HTTP {resp.status_code}): {error or resp.text}"
                + (f" - {description}" if description else ""),
                status=resp.status_code,
                error=error,
                error_description=description,
            )

        if payload is None:
            raise TokenExchangeError(
                f"Spotify token response was not JSON: {resp.text}", status=resp.status_code
            )

        if not isinstance(payload, dict):
            raise TokenExchangeError(
                f"Spotify token response was not an object: {payload}", status=resp.status_code
            )

        return payload
