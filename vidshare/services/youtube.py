"""
YouTube import resolution.

Turns a user supplied link into a video ID and looks up display metadata
through the public oEmbed endpoint. Metadata lookups never fail an import:
any network or parsing problem falls back to the caller's title and a
thumbnail derived from the ID.
"""

import json
import logging
import re
import time
from dataclasses import dataclass

import requests

from vidshare.stores.base import youtube_embed_url, youtube_thumbnail_url

logger = logging.getLogger(__name__)

OEMBED_URL = "https://www.youtube.com/oembed"
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
DEFAULT_DESCRIPTION = "Great video content from YouTube."
DESCRIPTION_MAX_LENGTH = 150

_ID = r'([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])'
URL_PATTERNS = [
    re.compile(r'youtube\.com/watch\?(?:[^#]*&)?v=' + _ID),
    re.compile(r'youtu\.be/' + _ID),
    re.compile(r'youtube\.com/embed/' + _ID),
]
BARE_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]{11}$')
DESCRIPTION_PATTERN = re.compile(r'"description":"((?:[^"\\]|\\.)*)"')


def extract_video_id(url: str | None) -> str | None:
    """Return the 11 character video ID of a watch, short or embed link, or of a bare ID."""
    if not url:
        return None
    url = url.strip()

    if BARE_ID_PATTERN.match(url):
        return url

    for pattern in URL_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


@dataclass
class VideoMetadata:
    video_id: str
    title: str
    thumbnail_url: str
    embed_url: str
    description: str


class YouTubeResolver:
    """Fetches oEmbed metadata within one overall timeout.

    ``timeout`` is the budget for the whole lookup: the watch page is only
    requested with whatever time the oEmbed call left over.
    """

    def __init__(self, app=None, timeout: float = 5.0, fetch_descriptions: bool = True):
        self.timeout = timeout
        self.fetch_descriptions = fetch_descriptions
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.timeout = app.config.get("YOUTUBE_TIMEOUT", self.timeout)
        self.fetch_descriptions = app.config.get("YOUTUBE_FETCH_DESCRIPTIONS", self.fetch_descriptions)

    def fetch_metadata(self, video_id: str, fallback_title: str) -> VideoMetadata:
        """Look up the title for ``video_id``.

        Args:
            video_id: An ID returned by :func:`extract_video_id`.
            fallback_title: Title used when the lookup fails or has no title.

        Returns:
            The metadata to store. Never raises for network or parse errors.
        """
        metadata = VideoMetadata(
            video_id=video_id,
            title=fallback_title,
            thumbnail_url=youtube_thumbnail_url(video_id),
            embed_url=youtube_embed_url(video_id),
            description=DEFAULT_DESCRIPTION,
        )

        started = time.monotonic()
        data = self._fetch_oembed(video_id)
        if data is None:
            return metadata

        metadata.title = data.get("title") or fallback_title
        if self.fetch_descriptions:
            remaining = self.timeout - (time.monotonic() - started)
            if remaining > 0:
                metadata.description = self.fetch_description(video_id, timeout=remaining)
            else:
                logger.info(f"Skipping YouTube description for {video_id}: lookup budget used up")
        return metadata

    def _fetch_oembed(self, video_id: str) -> dict | None:
        try:
            response = requests.get(
                OEMBED_URL,
                params={"url": WATCH_URL.format(video_id=video_id), "format": "json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Failed to fetch YouTube metadata for {video_id}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Unexpected oEmbed payload for {video_id}")
            return None
        return data

    def fetch_description(self, video_id: str, timeout: float | None = None) -> str:
        """Read the description embedded in the watch page, cut to 150 characters."""
        if timeout is None:
            timeout = self.timeout
        try:
            response = requests.get(WATCH_URL.format(video_id=video_id), timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Failed to fetch YouTube description for {video_id}: {e}")
            return DEFAULT_DESCRIPTION

        match = DESCRIPTION_PATTERN.search(response.text)
        if not match:
            return DEFAULT_DESCRIPTION

        try:
            description = json.loads(f'"{match.group(1)}"')
        except ValueError:
            return DEFAULT_DESCRIPTION

        description = " ".join(description.split())
        return description[:DESCRIPTION_MAX_LENGTH] or DEFAULT_DESCRIPTION


youtube_resolver = YouTubeResolver()
