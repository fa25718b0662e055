import logging
from typing import Any, Dict, Optional

import httpx

from .errors import AuthExpiredError, TransientFetchError

logger = logging.getLogger(__name__)

SPOTIFY_API_BASE_URL = "https://api.spotify.com/v1"

TOP_TRACKS_LIMIT = 50
TIME_RANGES = ("short_term", "medium_term", "long_term")


class SpotifyClient:
    """Thin bearer-authenticated Spotify Web API client.

    No retries: a 401 raises AuthExpiredError so the caller can restart
    authorization, anything else raises TransientFetchError.
    """

    def __init__(self, access_token: str, *, http_client: Optional[httpx.Client] = None):
        self.access_token = access_token
        self.http_client = http_client

    def _send(self, method: str, url: str, params: Optional[Dict[str, Any]]) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Accept": "application/json",
        }
        if self.http_client is not None:
            return self.http_client.request(method, url, params=params, headers=headers)

        with httpx.Client() as client:
            return client.request(method, url, params=params, headers=headers)

    def request_json(self, method: str, path: str, *, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{SPOTIFY_API_BASE_URL}{path}"
        clean_params = {k: str(v) for k, v in (params or {}).items() if v is not None} or None

        try:
            resp = self._send(method.upper(), url, clean_params)
        except httpx.HTTPError as e:
            raise TransientFetchError(f"Spotify API request failed: {e}") from e

        if resp.status_code == 401:
            raise AuthExpiredError(f"Spotify API error 401: {resp.text}", status=401)

        if not resp.is_success:
            raise TransientFetchError(
                f"Spotify API error {resp.status_code}: {resp.text}", status=resp.status_code
            )

        try:
            return resp.json()
        except ValueError as e:
            raise TransientFetchError(
                f"Spotify API response was not JSON (status {resp.status_code}): {resp.text}",
                status=resp.status_code,
            ) from e

    def me(self) -> Any:
        logger.info("Fetching user profile.")
        return self.request_json("GET", "/me")

    def top_tracks(self, *, time_range: str = "long_term") -> Any:
        if time_range not in TIME_RANGES:
            raise ValueError(f"time_range must be one of {TIME_RANGES}, got {time_range!r}")

        logger.info("Fetching user's top tracks for the %s range.", time_range)
        return self.request_json(
            "GET",
            "/me/top/tracks",
            params={"limit": TOP_TRACKS_LIMIT, "time_range": time_range},
        )
