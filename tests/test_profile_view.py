from __future__ import annotations

import io
import sys
import unittest
from contextlib import redirect_stdout
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from menus.profile_view import ProfileView, TrackEntry, display_top_tracks, populate_profile, print_view
from spotify_api.models import Profile, TopTracks


def _top_tracks(n: int) -> TopTracks:
    return TopTracks.from_payload(
        {
            "items": [
                {
                    "name": f"Song {i}",
                    "artists": [{"name": f"Artist {i}"}, {"name": "Guest"}],
                    "album": {"images": [{"url": f"https://img.example/{i}.jpg"}, {"url": "https://img.example/small.jpg"}]},
                }
                for i in range(1, n + 1)
            ]
        }
    )


class TestDisplayTopTracks(unittest.TestCase):
    def test_three_items_render_three_ranked_entries_in_order(self):
        view = ProfileView()
        display_top_tracks(view, _top_tracks(3))

        self.assertEqual(
            view.top_tracks,
            [
                TrackEntry(rank=1, image_url="https://img.example/1.jpg", title="Song 1", artists="Artist 1, Guest"),
                TrackEntry(rank=2, image_url="https://img.example/2.jpg", title="Song 2", artists="Artist 2, Guest"),
                TrackEntry(rank=3, image_url="https://img.example/3.jpg", title="Song 3", artists="Artist 3, Guest"),
            ],
        )

    def test_rendering_replaces_previous_entries(self):
        view = ProfileView()
        display_top_tracks(view, _top_tracks(5))
        display_top_tracks(view, _top_tracks(2))

        self.assertEqual([e.rank for e in view.top_tracks], [1, 2])

    def test_track_without_album_art(self):
        view = ProfileView()
        display_top_tracks(view, TopTracks.from_payload({"items": [{"name": "Bare", "artists": [{"name": "Solo"}], "album": {"images": []}}]}))

        self.assertIsNone(view.top_tracks[0].image_url)
        self.assertEqual(view.top_tracks[0].artists, "Solo")


class TestPopulateProfile(unittest.TestCase):
    def test_display_name_and_first_avatar(self):
        view = ProfileView()
        populate_profile(
            view,
            Profile.from_payload({"display_name": "Ada", "images": [{"url": "https://img.example/a.jpg"}, {"url": "https://img.example/b.jpg"}]}),
        )

        self.assertEqual(view.display_name, "Ada")
        self.assertEqual(view.avatar, ["https://img.example/a.jpg"])

    def test_no_images_leaves_avatar_empty(self):
        view = ProfileView()
        populate_profile(view, Profile.from_payload({"display_name": "Ada", "images": []}))

        self.assertEqual(view.avatar, [])

    def test_repopulating_replaces_the_avatar(self):
        view = ProfileView()
        with_image = Profile.from_payload({"display_name": "Ada", "images": [{"url": "https://img.example/a.jpg"}]})

        populate_profile(view, with_image)
        populate_profile(view, with_image)
        self.assertEqual(view.avatar, ["https://img.example/a.jpg"])

        populate_profile(view, Profile.from_payload({"display_name": "Ada", "images": []}))
        self.assertEqual(view.avatar, [])

    def test_print_view(self):
        view = ProfileView()
        populate_profile(view, Profile.from_payload({"display_name": "Ada", "images": []}))
        display_top_tracks(view, _top_tracks(2))

        out = io.StringIO()
        with redirect_stdout(out):
            print_view(view)

        text = out.getvalue()
        self.assertIn("Ada", text)
        self.assertIn("  1. Song 1 by Artist 1, Guest", text)
        self.assertIn("  2. Song 2 by Artist 2, Guest", text)


if __name__ == "__main__":
    unittest.main(verbosity=2)
