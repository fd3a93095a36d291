import logging
import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError

from vidshare.errors import Conflict, Forbidden, InvalidInput, NotFound
from vidshare.models import db, Video, Comment, FILENAME_INDEX
from vidshare.models_auth import User
from vidshare.stores.base import Store, UserRecord, VideoRecord, CommentRecord

logger = logging.getLogger(__name__)

# Id columns are INTEGER on PostgreSQL
ID_MIN = -2**31
ID_MAX = 2**31 - 1


def _parse_id(value) -> int | None:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return None
    if not ID_MIN <= parsed <= ID_MAX:
        return None
    return parsed


def _user_record(user: User) -> UserRecord:
    return UserRecord(id=user.id, name=user.name, email=user.email, password_hash=user.password_hash)


def _video_record(video: Video) -> VideoRecord:
    return VideoRecord(
        id=video.id,
        title=video.title,
        filename=video.filename,
        category=video.category,
        thumbnail=video.thumbnail,
        likes=video.likes,
        video_url=video.video_url,
        is_default=bool(video.is_default),
        description=video.description,
    )


def _comment_record(comment: Comment) -> CommentRecord:
    return CommentRecord(
        id=comment.id,
        video_id=comment.video_id,
        user_id=comment.user_id,
        text=comment.content,
    )


class SqlStore(Store):
    """Store backed by Flask-SQLAlchemy (PostgreSQL or SQLite).

    Must be used inside an application context.
    """

    name = "sql"

    def create_user(self, name: str, email: str, password_hash: str) -> UserRecord:
        user = User(name=name, email=email, password_hash=password_hash)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise Conflict("Email already exists")
        return _user_record(user)

    def get_user(self, user_id) -> UserRecord | None:
        user_id = _parse_id(user_id)
        if user_id is None:
            return None
        user = db.session.get(User, user_id)
        return _user_record(user) if user else None

    def get_user_by_email(self, email: str) -> UserRecord | None:
        user = User.query.filter_by(email=email).first()
        return _user_record(user) if user else None

    def list_videos(self, query: str | None = None) -> list[VideoRecord]:
        videos = Video.query
        if query:
            videos = videos.filter(
                db.func.lower(Video.title).contains(query.lower(), autoescape=True)
            )
        return [_video_record(v) for v in videos.order_by(Video.id.desc()).all()]

    def get_video(self, video_id) -> VideoRecord | None:
        video_id = _parse_id(video_id)
        if video_id is None:
            return None
        video = db.session.get(Video, video_id)
        return _video_record(video) if video else None

    def get_video_by_filename(self, filename: str) -> VideoRecord | None:
        video = Video.query.filter_by(filename=filename).first()
        return _video_record(video) if video else None

    def count_videos(self) -> int:
        return Video.query.count()

    def create_video(self, **fields) -> VideoRecord:
        video = Video(**fields)
        db.session.add(video)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise Conflict("This video is already in your collection")
        return _video_record(video)

    def like_video(self, video_id) -> int:
        video_id = _parse_id(video_id)
        if video_id is None:
            raise NotFound("Video not found")

        # Single UPDATE so concurrent likes never read-modify-write
        updated = Video.query.filter_by(id=video_id).update(
            {Video.likes: Video.likes + 1}, synchronize_session=False
        )
        db.session.commit()
        if not updated:
            raise NotFound("Video not found")
        return db.session.query(Video.likes).filter_by(id=video_id).scalar()

    def delete_video(self, video_id) -> VideoRecord:
        video_id = _parse_id(video_id)
        video = db.session.get(Video, video_id) if video_id is not None else None
        if not video:
            raise NotFound("Video not found")
        if video.is_default:
            raise Forbidden("Cannot delete default videos")

        record = _video_record(video)
        deleted = Video.query.filter_by(id=video_id, is_default=False).delete(synchronize_session=False)
        if not deleted:
            db.session.rollback()
            raise NotFound("Video not found")
        Comment.query.filter_by(video_id=video_id).delete(synchronize_session=False)
        db.session.commit()
        db.session.expire_all()
        return record

    def clear_all(self) -> tuple[int, int]:
        comments = Comment.query.delete(synchronize_session=False)
        videos = Video.query.delete(synchronize_session=False)
        db.session.commit()
        db.session.expire_all()
        return videos, comments

    def add_comment(self, video_id, user_id: str | None, text: str) -> CommentRecord:
        parsed = _parse_id(video_id)
        if parsed is None:
            raise InvalidInput("Invalid video id")
        comment = Comment(video_id=parsed, user_id=user_id, content=text)
        db.session.add(comment)
        db.session.commit()
        return _comment_record(comment)

    def list_comments(self, video_id) -> list[CommentRecord]:
        video_id = _parse_id(video_id)
        if video_id is None:
            return []
        comments = Comment.query.filter_by(video_id=video_id).order_by(Comment.id).all()
        return [_comment_record(c) for c in comments]

    def count_comments(self) -> int:
        return Comment.query.count()

    def _create_schema(self) -> None:
        db.create_all()

    def _has_filename_constraint(self) -> bool:
        indexes = sa.inspect(db.engine).get_indexes(Video.__tablename__)
        return any(index["name"] == FILENAME_INDEX for index in indexes)

    def _create_filename_constraint(self) -> None:
        for index in Video.__table__.indexes:
            if index.name == FILENAME_INDEX:
                index.create(db.engine)
                logger.info(f"Created unique index {FILENAME_INDEX}")

    def _video_filenames(self) -> list[tuple]:
        return [tuple(row) for row in db.session.query(Video.id, Video.filename).order_by(Video.id).all()]

    def _delete_videos(self, video_ids: list) -> int:
        Comment.query.filter(Comment.video_id.in_(video_ids)).delete(synchronize_session=False)
        removed = Video.query.filter(Video.id.in_(video_ids)).delete(synchronize_session=False)
        db.session.commit()
        db.session.expire_all()
        return removed

    def _insert_videos(self, videos: list[dict]) -> int:
        db.session.add_all([Video(**fields) for fields in videos])
        try:
            db.session.commit()
        except IntegrityError:
            # Another worker seeded the same catalog between the emptiness check and this insert
            db.session.rollback()
            logger.warning(f"Seeding skipped: {len(videos)} videos collide with existing filenames")
            return 0
        return len(videos)
