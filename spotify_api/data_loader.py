import logging

from .client import SpotifyClient
from .models import Profile, TopTracks

logger = logging.getLogger(__name__)


class SpotifyDataLoader:
    """Turns raw Web API JSON into validated Profile / TopTracks objects."""

    def __init__(self, client: SpotifyClient):
        self.client = client

    def load_profile(self) -> Profile:
        profile = Profile.from_payload(self.client.me())
        logger.info("Profile data retrieved for %s", profile.display_name or profile.id or "(unnamed)")
        return profile

    def load_top_tracks(self, *, time_range: str = "long_term") -> TopTracks:
        top = TopTracks.from_payload(self.client.top_tracks(time_range=time_range))
        logger.info("Top tracks retrieved: %d", len(top))
        return top
