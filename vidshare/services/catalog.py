"""
Request-level business rules shared by every storage backend.

Handlers validate the shape of a request, then call exactly one of these
functions. Storage invariants (unique filename, atomic likes, default
protection, cascading delete) are enforced by the store itself.
"""

import logging

from flask import current_app

from vidshare.errors import Conflict, InvalidInput, Unauthorized
from vidshare.models import TITLE_MAX_LENGTH, CATEGORY_MAX_LENGTH, USER_ID_MAX_LENGTH
from vidshare.models_auth import hash_password, verify_password, validate_registration
from vidshare.services.assets import (
    asset_store, cleanup_service, allowed_file, VIDEO_EXTENSIONS, IMAGE_EXTENSIONS,
)
from vidshare.services.tokens import issue_token
from vidshare.services.youtube import extract_video_id, youtube_resolver
from vidshare.stores import get_store, UserRecord, VideoRecord, CommentRecord

logger = logging.getLogger(__name__)

COMMENT_MAX_LENGTH = 5000


def _check_length(value: str | None, limit: int, field: str) -> None:
    if value and len(value) > limit:
        raise InvalidInput(f"{field} must be at most {limit} characters long")


def register(name: str, email: str, password: str) -> UserRecord:
    name = (name or "").strip()
    email = (email or "").strip().lower()

    is_valid, errors = validate_registration(name, email, password)
    if not is_valid:
        raise InvalidInput(errors[0])

    user = get_store().create_user(name, email, hash_password(password))
    current_app.logger.info(f"New user '{email}' registered successfully")
    return user


def authenticate(email: str, password: str) -> tuple[str, UserRecord]:
    """Check credentials and return a signed session token with the user."""
    email = (email or "").strip().lower()
    if not email or not password:
        raise InvalidInput("Missing email or password")

    user = get_store().get_user_by_email(email)
    if user is None or not verify_password(user.password_hash, password):
        current_app.logger.warning(f"Failed login attempt for email '{email}'")
        raise Unauthorized("Email or password is incorrect")

    token = issue_token(user.id, current_app.config["SECRET_KEY"])
    current_app.logger.info(f"User '{email}' logged in successfully")
    return token, user


def upload_video(title: str, category: str | None, video_file, thumbnail_file) -> VideoRecord:
    title = (title or "").strip()
    category = (category or "").strip() or None
    if not title:
        raise InvalidInput("Title is required")
    _check_length(title, TITLE_MAX_LENGTH, "Title")
    _check_length(category, CATEGORY_MAX_LENGTH, "Category")
    if video_file is None or not video_file.filename:
        raise InvalidInput("No video file selected")
    if thumbnail_file is None or not thumbnail_file.filename:
        raise InvalidInput("No thumbnail file selected")
    if not allowed_file(video_file.filename, VIDEO_EXTENSIONS):
        raise InvalidInput("Unsupported video format")
    if not allowed_file(thumbnail_file.filename, IMAGE_EXTENSIONS):
        raise InvalidInput("Unsupported thumbnail format")

    saved = []
    try:
        video_name = asset_store.save(video_file)
        saved.append(video_name)
        thumbnail_name = asset_store.save(thumbnail_file)
        saved.append(thumbnail_name)
        video = get_store().create_video(
            title=title,
            filename=video_name,
            category=category,
            thumbnail=thumbnail_name,
            video_url=None,
            is_default=False,
        )
    except Exception:
        cleanup_service.schedule([asset_store.path_for(name) for name in saved])
        raise

    logger.info(f"Uploaded video '{title}' (ID: {video.id})")
    return video


def import_youtube(url: str, title: str, category: str) -> VideoRecord:
    url = (url or "").strip()
    title = (title or "").strip()
    category = (category or "").strip()
    if not url or not title or not category:
        raise InvalidInput("Missing required fields")
    _check_length(title, TITLE_MAX_LENGTH, "Title")
    _check_length(category, CATEGORY_MAX_LENGTH, "Category")

    video_id = extract_video_id(url)
    if not video_id:
        raise InvalidInput("Invalid YouTube URL")

    store = get_store()
    # Cheap pre-check to skip the metadata fetch; the unique index is what guarantees it
    if store.get_video_by_filename(video_id) is not None:
        raise Conflict("This video is already in your collection")

    metadata = youtube_resolver.fetch_metadata(video_id, title)
    video = store.create_video(
        title=metadata.title[:TITLE_MAX_LENGTH],
        filename=video_id,
        category=category,
        thumbnail=metadata.thumbnail_url,
        video_url=metadata.embed_url,
        likes=0,
        is_default=False,
        description=metadata.description,
    )
    logger.info(f"Imported YouTube video {video_id} as ID {video.id}")
    return video


def delete_video(video_id) -> VideoRecord:
    """Delete a video and its comments, then schedule removal of its local files."""
    video = get_store().delete_video(video_id)

    if video.is_local_upload():
        paths = [asset_store.path_for(name) for name in (video.filename, video.thumbnail) if name]
        cleanup_service.schedule(paths)

    logger.info(f"Deleted video '{video.title}' (ID: {video.id})")
    return video


def add_comment(video_id, user_id, text: str) -> CommentRecord:
    text = (text or "").strip()[:COMMENT_MAX_LENGTH]
    if video_id is None or str(video_id).strip() == "":
        raise InvalidInput("Missing video id")
    if not text:
        raise InvalidInput("Comment cannot be empty")

    user_id = str(user_id).strip() if user_id not in (None, "") else None
    _check_length(user_id, USER_ID_MAX_LENGTH, "User id")
    return get_store().add_comment(video_id, user_id or None, text)
