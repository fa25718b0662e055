"""Typed views over the Spotify JSON payloads this app consumes.

Each ``from_payload`` validates shape at the boundary and raises
ResponseShapeError instead of letting a missing key surface later as a
KeyError deep inside rendering.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .errors import ResponseShapeError, TokenExchangeError


def _require_dict(payload: Any, what: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ResponseShapeError(f"{what} was not a JSON object: {payload!r}")
    return payload


def _optional_list(payload: Dict[str, Any], key: str, what: str) -> List[Any]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ResponseShapeError(f"{what}.{key} was not a list: {value!r}")
    return value


@dataclass(frozen=True)
class TokenResponse:
    access_token: str
    token_type: str = "Bearer"
    expires_in: Optional[int] = None
    scope: Optional[str] = None

    @staticmethod
    def from_payload(payload: Any) -> "TokenResponse":
        if not isinstance(payload, dict):
            raise TokenExchangeError(f"Spotify token response was not an object: {payload!r}")

        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise TokenExchangeError(f"Spotify token response has no access_token: {payload!r}")

        expires_in = payload.get("expires_in")
        return TokenResponse(
            access_token=access_token,
            token_type=str(payload.get("token_type") or "Bearer"),
            expires_in=int(expires_in) if isinstance(expires_in, (int, float)) else None,
            scope=payload.get("scope") if isinstance(payload.get("scope"), str) else None,
        )


@dataclass(frozen=True)
class Image:
    url: str

    @staticmethod
    def from_payload(payload: Any) -> "Image":
        data = _require_dict(payload, "image")
        url = data.get("url")
        if not isinstance(url, str):
            raise ResponseShapeError(f"image.url was not a string: {url!r}")
        return Image(url=url)


@dataclass(frozen=True)
class Profile:
    display_name: Optional[str]
    images: Tuple[Image, ...] = ()
    id: Optional[str] = None
    email: Optional[str] = None

    @property
    def avatar_url(self) -> Optional[str]:
        return self.images[0].url if self.images else None

    @staticmethod
    def from_payload(payload: Any) -> "Profile":
        data = _require_dict(payload, "profile")

        display_name = data.get("display_name")
        if display_name is not None and not isinstance(display_name, str):
            raise ResponseShapeError(f"profile.display_name was not a string: {display_name!r}")

        return Profile(
            display_name=display_name,
            images=tuple(Image.from_payload(i) for i in _optional_list(data, "images", "profile")),
            id=data.get("id"),
            email=data.get("email"),
        )


@dataclass(frozen=True)
class Artist:
    name: str

    @staticmethod
    def from_payload(payload: Any) -> "Artist":
        data = _require_dict(payload, "artist")
        name = data.get("name")
        if not isinstance(name, str):
            raise ResponseShapeError(f"artist.name was not a string: {name!r}")
        return Artist(name=name)


@dataclass(frozen=True)
class Track:
    name: str
    artists: Tuple[Artist, ...]
    album_images: Tuple[Image, ...] = ()

    @property
    def album_image_url(self) -> Optional[str]:
        return self.album_images[0].url if self.album_images else None

    @property
    def artist_names(self) -> str:
        return ", ".join(a.name for a in self.artists)

    @staticmethod
    def from_payload(payload: Any) -> "Track":
        data = _require_dict(payload, "track")

        name = data.get("name")
        if not isinstance(name, str):
            raise ResponseShapeError(f"track.name was not a string: {name!r}")

        album = data.get("album") or {}
        album = _require_dict(album, "track.album")

        return Track(
            name=name,
            artists=tuple(Artist.from_payload(a) for a in _optional_list(data, "artists", "track")),
            album_images=tuple(Image.from_payload(i) for i in _optional_list(album, "images", "track.album")),
        )


@dataclass(frozen=True)
class TopTracks:
    items: Tuple[Track, ...]

    def __len__(self) -> int:
        return len(self.items)

    @staticmethod
    def from_payload(payload: Any) -> "TopTracks":
        data = _require_dict(payload, "top tracks")
        if not isinstance(data.get("items"), list):
            raise ResponseShapeError(f"top tracks response has no items list: {data!r}")
        return TopTracks(items=tuple(Track.from_payload(t) for t in data["items"]))
