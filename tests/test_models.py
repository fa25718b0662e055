from __future__ import annotations

import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import httpx

from spotify_api.client import SpotifyClient
from spotify_api.data_loader import SpotifyDataLoader
from spotify_api.errors import AuthExpiredError, ResponseShapeError, TokenExchangeError, TransientFetchError
from spotify_api.models import Profile, TokenResponse, TopTracks


class TestSchemas(unittest.TestCase):
    def test_profile_shape(self):
        profile = Profile.from_payload({"id": "u", "display_name": "Ada", "images": [{"url": "x", "height": 300}]})
        self.assertEqual(profile.avatar_url, "x")

        self.assertIsNone(Profile.from_payload({"display_name": None}).avatar_url)

    def test_profile_rejects_bad_shapes(self):
        with self.assertRaises(ResponseShapeError):
            Profile.from_payload([])
        with self.assertRaises(ResponseShapeError):
            Profile.from_payload({"display_name": "Ada", "images": "nope"})
        with self.assertRaises(ResponseShapeError):
            Profile.from_payload({"display_name": "Ada", "images": [{"href": "no-url"}]})

    def test_top_tracks_requires_items(self):
        with self.assertRaises(ResponseShapeError):
            TopTracks.from_payload({"error": {"status": 403}})
        with self.assertRaises(ResponseShapeError):
            TopTracks.from_payload({"items": [{"artists": []}]})

    def test_track_artist_names(self):
        top = TopTracks.from_payload({"items": [{"name": "S", "artists": [{"name": "A"}, {"name": "B"}], "album": {}}]})
        self.assertEqual(top.items[0].artist_names, "A, B")
        self.assertIsNone(top.items[0].album_image_url)

    def test_token_response(self):
        token = TokenResponse.from_payload({"access_token": "abc123", "expires_in": 3600, "scope": "user-top-read"})
        self.assertEqual(token.access_token, "abc123")
        self.assertEqual(token.expires_in, 3600)

        with self.assertRaises(TokenExchangeError):
            TokenResponse.from_payload({"access_token": ""})


class TestSpotifyClient(unittest.TestCase):
    def _client(self, handler) -> SpotifyClient:
        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        self.addCleanup(http_client.close)
        return SpotifyClient("tok", http_client=http_client)

    def test_top_tracks_query(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"items": []})

        SpotifyDataLoader(self._client(handler)).load_top_tracks(time_range="short_term")

        self.assertEqual(str(seen[0].url), "https://api.spotify.com/v1/me/top/tracks?limit=50&time_range=short_term")
        self.assertEqual(seen[0].headers["Authorization"], "Bearer tok")

    def test_unknown_time_range(self):
        with self.assertRaises(ValueError):
            self._client(lambda r: httpx.Response(200, json={})).top_tracks(time_range="forever")

    def test_401_is_auth_expired(self):
        client = self._client(lambda r: httpx.Response(401, json={"error": {"status": 401, "message": "The access token expired"}}))
        with self.assertRaises(AuthExpiredError) as ctx:
            client.me()
        self.assertEqual(ctx.exception.status, 401)

    def test_other_statuses_are_transient(self):
        for status in (403, 429, 500, 503):
            client = self._client(lambda r, s=status: httpx.Response(s, text="nope"))
            with self.assertRaises(TransientFetchError) as ctx:
                client.me()
            self.assertEqual(ctx.exception.status, status)

    def test_non_json_is_transient(self):
        with self.assertRaises(TransientFetchError):
            self._client(lambda r: httpx.Response(200, text="<html/>")).me()

    def test_transport_error_is_transient(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with self.assertRaises(TransientFetchError):
            self._client(handler).me()


if __name__ == "__main__":
    unittest.main(verbosity=2)
