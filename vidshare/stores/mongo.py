import logging
import re
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import BulkWriteError, DuplicateKeyError

from vidshare.errors import Conflict, Forbidden, InvalidInput, NotFound
from vidshare.models import FILENAME_INDEX
from vidshare.stores.base import Store, UserRecord, VideoRecord, CommentRecord

logger = logging.getLogger(__name__)

EMAIL_INDEX = "uq_users_email"


def _object_id(value) -> ObjectId | None:
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def _user_record(doc: dict) -> UserRecord:
    return UserRecord(
        id=str(doc["_id"]),
        name=doc["name"],
        email=doc["email"],
        password_hash=doc["password"],
    )


def _video_record(doc: dict) -> VideoRecord:
    return VideoRecord(
        id=str(doc["_id"]),
        title=doc["title"],
        filename=doc["filename"],
        category=doc.get("category"),
        thumbnail=doc.get("thumbnail"),
        likes=doc.get("likes", 0),
        video_url=doc.get("videoUrl"),
        is_default=bool(doc.get("is_default", False)),
        description=doc.get("description"),
    )


def _comment_record(doc: dict) -> CommentRecord:
    return CommentRecord(
        id=str(doc["_id"]),
        video_id=doc["video_id"],
        user_id=doc.get("user_id"),
        text=doc["comment"],
    )


def _video_document(fields: dict) -> dict:
    return {
        "title": fields["title"],
        "filename": fields["filename"],
        "category": fields.get("category"),
        "thumbnail": fields.get("thumbnail"),
        "likes": fields.get("likes", 0),
        "videoUrl": fields.get("video_url"),
        "is_default": bool(fields.get("is_default", False)),
        "description": fields.get("description"),
    }


class MongoStore(Store):
    """Store backed by a MongoDB database.

    Ids are ObjectId hex strings. Comments keep the video id as a string so
    that comments on ids that never existed are stored as given.
    """

    name = "mongo"

    def __init__(self, client, database: str):
        super().__init__()
        self.client = client
        self.db = client[database]
        self.users = self.db["users"]
        self.videos = self.db["videos"]
        self.comments = self.db["comments"]

    def create_user(self, name: str, email: str, password_hash: str) -> UserRecord:
        doc = {"name": name, "email": email, "password": password_hash}
        try:
            result = self.users.insert_one(doc)
        except DuplicateKeyError:
            raise Conflict("Email already exists")
        doc["_id"] = result.inserted_id
        return _user_record(doc)

    def get_user(self, user_id) -> UserRecord | None:
        oid = _object_id(user_id)
        if oid is None:
            return None
        doc = self.users.find_one({"_id": oid})
        return _user_record(doc) if doc else None

    def get_user_by_email(self, email: str) -> UserRecord | None:
        doc = self.users.find_one({"email": email})
        return _user_record(doc) if doc else None

    def list_videos(self, query: str | None = None) -> list[VideoRecord]:
        criteria = {}
        if query:
            criteria["title"] = {"$regex": re.escape(query), "$options": "i"}
        return [_video_record(doc) for doc in self.videos.find(criteria).sort("_id", DESCENDING)]

    def get_video(self, video_id) -> VideoRecord | None:
        oid = _object_id(video_id)
        if oid is None:
            return None
        doc = self.videos.find_one({"_id": oid})
        return _video_record(doc) if doc else None

    def get_video_by_filename(self, filename: str) -> VideoRecord | None:
        doc = self.videos.find_one({"filename": filename})
        return _video_record(doc) if doc else None

    def count_videos(self) -> int:
        return self.videos.count_documents({})

    def create_video(self, **fields) -> VideoRecord:
        doc = _video_document(fields)
        try:
            result = self.videos.insert_one(doc)
        except DuplicateKeyError:
            raise Conflict("This video is already in your collection")
        doc["_id"] = result.inserted_id
        return _video_record(doc)

    def like_video(self, video_id) -> int:
        oid = _object_id(video_id)
        if oid is None:
            raise NotFound("Video not found")
        doc = self.videos.find_one_and_update(
            {"_id": oid},
            {"$inc": {"likes": 1}},
            projection={"likes": True},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            raise NotFound("Video not found")
        return doc["likes"]

    def delete_video(self, video_id) -> VideoRecord:
        oid = _object_id(video_id)
        doc = self.videos.find_one({"_id": oid}) if oid is not None else None
        if not doc:
            raise NotFound("Video not found")
        if doc.get("is_default"):
            raise Forbidden("Cannot delete default videos")

        result = self.videos.delete_one({"_id": oid, "is_default": {"$ne": True}})
        if not result.deleted_count:
            raise NotFound("Video not found")
        self.comments.delete_many({"video_id": str(oid)})
        return _video_record(doc)

    def clear_all(self) -> tuple[int, int]:
        videos = self.videos.delete_many({}).deleted_count
        comments = self.comments.delete_many({}).deleted_count
        return videos, comments

    def add_comment(self, video_id, user_id: str | None, text: str) -> CommentRecord:
        video_id = str(video_id).strip()
        if not video_id:
            raise InvalidInput("Invalid video id")
        doc = {"video_id": video_id, "user_id": user_id, "comment": text}
        result = self.comments.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _comment_record(doc)

    def list_comments(self, video_id) -> list[CommentRecord]:
        cursor = self.comments.find({"video_id": str(video_id)}).sort("_id", ASCENDING)
        return [_comment_record(doc) for doc in cursor]

    def count_comments(self) -> int:
        return self.comments.count_documents({})

    def _create_schema(self) -> None:
        self.users.create_index("email", unique=True, name=EMAIL_INDEX)
        self.comments.create_index("video_id")

    def _has_filename_constraint(self) -> bool:
        return FILENAME_INDEX in self.videos.index_information()

    def _create_filename_constraint(self) -> None:
        self.videos.create_index("filename", unique=True, name=FILENAME_INDEX)
        logger.info(f"Created unique index {FILENAME_INDEX}")

    def _video_filenames(self) -> list[tuple]:
        cursor = self.videos.find({}, {"filename": True}).sort("_id", ASCENDING)
        return [(str(doc["_id"]), doc["filename"]) for doc in cursor]

    def _delete_videos(self, video_ids: list) -> int:
        self.comments.delete_many({"video_id": {"$in": [str(v) for v in video_ids]}})
        oids = [oid for oid in (_object_id(v) for v in video_ids) if oid is not None]
        return self.videos.delete_many({"_id": {"$in": oids}}).deleted_count

    def _insert_videos(self, videos: list[dict]) -> int:
        if not videos:
            return 0
        try:
            result = self.videos.insert_many([_video_document(v) for v in videos], ordered=False)
        except BulkWriteError as e:
            inserted = e.details.get("nInserted", 0)
            logger.warning(
                f"Seeding inserted {inserted}/{len(videos)} videos; "
                f"{len(e.details.get('writeErrors', []))} write error(s)"
            )
            return inserted
        return len(result.inserted_ids)
