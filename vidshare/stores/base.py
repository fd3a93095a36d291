"""
Storage-agnostic store interface.

Every backend implements the same operations over its own technology.
Rules that do not depend on the storage engine (seeding, the shape of
the deduplication migration) are written once here on top of the
backend primitives.
"""
import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from flask_login import UserMixin

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Trending"


def youtube_thumbnail_url(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


def youtube_embed_url(video_id: str) -> str:
    return f"https://www.youtube.com/embed/{video_id}"


@dataclass(eq=False)
class UserRecord(UserMixin):
    id: int | str
    name: str
    email: str
    password_hash: str = field(repr=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass
class VideoRecord:
    id: int | str
    title: str
    filename: str
    category: str | None = None
    thumbnail: str | None = None
    likes: int = 0
    video_url: str | None = None
    is_default: bool = False
    description: str | None = None

    def is_local_upload(self) -> bool:
        return self.video_url is None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "filename": self.filename,
            "category": self.category,
            "thumbnail": self.thumbnail,
            "likes": self.likes,
            "videoUrl": self.video_url,
            "is_default": self.is_default,
            "description": self.description,
        }


@dataclass
class CommentRecord:
    id: int | str
    video_id: int | str
    user_id: str | None
    text: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "video_id": self.video_id,
            "comment": self.text,
        }


@dataclass
class SeedEntry:
    video_id: str
    title: str
    description: str


class Store(ABC):
    """Credential, catalog and comment storage behind one handle."""

    name = "abstract"

    def __init__(self):
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    def initialize(self) -> "Store":
        """Create the schema, run pending one-time migrations and mark the handle ready."""
        self._create_schema()
        if not self._has_filename_constraint():
            removed = self.deduplicate_by_filename()
            if removed:
                logger.warning(f"Removed {removed} duplicate video(s) before adding filename constraint")
            self._create_filename_constraint()
        self._ready = True
        logger.info(f"{self.name} store ready")
        return self

    # Credentials

    @abstractmethod
    def create_user(self, name: str, email: str, password_hash: str) -> UserRecord:
        """Insert a user. Raises Conflict if the email is already registered."""

    @abstractmethod
    def get_user(self, user_id) -> UserRecord | None:
        ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> UserRecord | None:
        ...

    # Catalog

    @abstractmethod
    def list_videos(self, query: str | None = None) -> list[VideoRecord]:
        """Newest first, optionally filtered by case-insensitive title substring."""

    @abstractmethod
    def get_video(self, video_id) -> VideoRecord | None:
        ...

    @abstractmethod
    def get_video_by_filename(self, filename: str) -> VideoRecord | None:
        ...

    @abstractmethod
    def count_videos(self) -> int:
        ...

    @abstractmethod
    def create_video(self, **fields) -> VideoRecord:
        """Insert a video. Raises Conflict if the filename already exists."""

    @abstractmethod
    def like_video(self, video_id) -> int:
        """Atomically add one like and return the new count. Raises NotFound."""

    @abstractmethod
    def delete_video(self, video_id) -> VideoRecord:
        """Delete a non-default video and its comments.

        Raises NotFound if the video does not exist and Forbidden if it is
        a default video; in both cases nothing is changed.
        """

    @abstractmethod
    def clear_all(self) -> tuple[int, int]:
        """Delete every video and comment. Returns (videos, comments) removed."""

    # Comments

    @abstractmethod
    def add_comment(self, video_id, user_id: str | None, text: str) -> CommentRecord:
        ...

    @abstractmethod
    def list_comments(self, video_id) -> list[CommentRecord]:
        ...

    @abstractmethod
    def count_comments(self) -> int:
        ...

    # Migration primitives

    @abstractmethod
    def _create_schema(self) -> None:
        ...

    @abstractmethod
    def _has_filename_constraint(self) -> bool:
        ...

    @abstractmethod
    def _create_filename_constraint(self) -> None:
        ...

    @abstractmethod
    def _video_filenames(self) -> list[tuple]:
        """(id, filename) pairs in ascending id order."""

    @abstractmethod
    def _delete_videos(self, video_ids: list) -> int:
        """Delete videos by id together with their comments, ignoring is_default."""

    @abstractmethod
    def _insert_videos(self, videos: list[dict]) -> int:
        ...

    # Seeding and deduplication

    def seed_if_empty(self, entries: list[SeedEntry]) -> int:
        """Insert the seed entries as default videos if the catalog is empty."""
        existing = self.count_videos()
        if existing:
            logger.info(f"Catalog already has {existing} videos. Skipping seeding.")
            return 0

        videos = [
            {
                "title": entry.title,
                "filename": entry.video_id,
                "category": DEFAULT_CATEGORY,
                "thumbnail": youtube_thumbnail_url(entry.video_id),
                "video_url": youtube_embed_url(entry.video_id),
                "likes": random.randrange(1000),
                "is_default": True,
                "description": entry.description,
            }
            for entry in entries
        ]
        inserted = self._insert_videos(videos)
        logger.info(f"Seeded {inserted}/{len(entries)} default videos")
        return inserted

    def deduplicate_by_filename(self) -> int:
        """Keep the earliest video of every filename and delete the rest with their comments."""
        seen = set()
        duplicates = []
        for video_id, filename in self._video_filenames():
            if filename in seen:
                duplicates.append(video_id)
            else:
                seen.add(filename)

        if not duplicates:
            logger.info("No duplicate videos found")
            return 0

        removed = self._delete_videos(duplicates)
        for video_id in duplicates:
            logger.info(f"Removed duplicate video ID: {video_id}")
        return removed
