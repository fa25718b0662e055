from dataclasses import dataclass, field
from typing import List, Optional

from spotify_api.models import Profile, TopTracks

AVATAR_SIZE = 200
ALBUM_ART_SIZE = 100


@dataclass
class TrackEntry:
    rank: int
    image_url: Optional[str]
    title: str
    artists: str


@dataclass
class ProfileView:
    """Terminal stand-in for the page: display name, avatar, top tracks."""

    display_name: str = ""
    avatar: List[str] = field(default_factory=list)
    top_tracks: List[TrackEntry] = field(default_factory=list)

    def show_profile(self, profile: Profile) -> None:
        populate_profile(self, profile)

    def show_top_tracks(self, top_tracks: TopTracks) -> None:
        display_top_tracks(self, top_tracks)


def populate_profile(view: ProfileView, profile: Profile) -> None:
    view.display_name = profile.display_name or ""
    view.avatar.clear()
    if profile.avatar_url:
        view.avatar.append(profile.avatar_url)


def display_top_tracks(view: ProfileView, top_tracks: TopTracks) -> None:
    """Replace the track list with one entry per item, ranked from 1."""

    view.top_tracks.clear()
    for index, track in enumerate(top_tracks.items):
        view.top_tracks.append(
            TrackEntry(
                rank=index + 1,
                image_url=track.album_image_url,
                title=track.name,
                artists=track.artist_names,
            )
        )


def format_track_entry(entry: TrackEntry) -> str:
    return f"{entry.rank:>3}. {entry.title} by {entry.artists}"


def print_view(view: ProfileView) -> None:
    print("\n" + "=" * 60)
    print(f"👤 {view.display_name or '(no display name)'}")
    for url in view.avatar:
        print(f"   avatar ({AVATAR_SIZE}x{AVATAR_SIZE}): {url}")
    print("=" * 60)

    if not view.top_tracks:
        print("No top tracks to show.")
    for entry in view.top_tracks:
        print(format_track_entry(entry))
        if entry.image_url:
            print(f"     art: {entry.image_url}")

    print("=" * 60 + "\n")
