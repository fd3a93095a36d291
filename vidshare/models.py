from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

FILENAME_INDEX = "uq_videos_filename"

TITLE_MAX_LENGTH = 255
CATEGORY_MAX_LENGTH = 80
USER_ID_MAX_LENGTH = 64


class Video(db.Model):
    __tablename__ = "videos"
    __table_args__ = (
        db.Index(FILENAME_INDEX, "filename", unique=True),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(TITLE_MAX_LENGTH), nullable=False)
    filename = db.Column(db.String(255), nullable=False)  # stored upload name or YouTube video ID
    category = db.Column(db.String(CATEGORY_MAX_LENGTH), nullable=True)
    thumbnail = db.Column(db.String(512), nullable=True)
    likes = db.Column(db.Integer, default=0, nullable=False)
    video_url = db.Column("videoUrl", db.String(512), nullable=True)  # embed URL, NULL for local uploads
    is_default = db.Column(db.Boolean, default=False, nullable=False)
    description = db.Column(db.Text, nullable=True)

    def is_local_upload(self) -> bool:
        return self.video_url is None


class Comment(db.Model):
    __tablename__ = "comments"

    id = db.Column(db.Integer, primary_key=True)
    # No foreign key: comments may reference a video id that was never created
    video_id = db.Column(db.Integer, nullable=False, index=True)
    user_id = db.Column(db.String(USER_ID_MAX_LENGTH), nullable=True)
    content = db.Column("comment", db.Text, nullable=False)
