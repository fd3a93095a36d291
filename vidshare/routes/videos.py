import logging
from flask import Blueprint, current_app, jsonify, request, send_from_directory
from flask_login import current_user

from vidshare.errors import NotFound
from vidshare.routes.payload import json_body, text_field
from vidshare.services import catalog
from vidshare.stores import get_store

logger = logging.getLogger(__name__)

videos_bp = Blueprint('videos', __name__)


@videos_bp.route('/uploads/<path:filename>')
def serve_upload(filename):
    """Serve uploaded videos and thumbnails from the upload folder."""
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)


@videos_bp.route('/videos')
def list_videos():
    query = request.args.get('q', '').strip()
    videos = get_store().list_videos(query or None)
    return jsonify([video.to_dict() for video in videos])


@videos_bp.route('/videos/<video_id>')
def get_video(video_id):
    video = get_store().get_video(video_id)
    if video is None:
        raise NotFound("Video not found")
    return jsonify(video.to_dict())


@videos_bp.route('/upload', methods=['POST'])
def upload_video():
    video = catalog.upload_video(
        request.form.get('title', ''),
        request.form.get('category', ''),
        request.files.get('video'),
        request.files.get('thumbnail'),
    )
    return jsonify({"message": "Video uploaded", "video": video.to_dict()})


@videos_bp.route('/import-youtube', methods=['POST'])
def import_youtube():
    data = json_body()
    video = catalog.import_youtube(
        text_field(data, 'url'),
        text_field(data, 'title'),
        text_field(data, 'category'),
    )
    return jsonify({
        "message": "Video imported successfully",
        "videoId": video.id,
        "videoUrl": video.video_url,
        "thumbnail": video.thumbnail,
        "video": video.to_dict(),
    })


@videos_bp.route('/like/<video_id>', methods=['POST'])
def like_video(video_id):
    likes = get_store().like_video(video_id)
    return jsonify({"message": "Liked", "likes": likes})


@videos_bp.route('/comment', methods=['POST'])
def post_comment():
    data = json_body()
    user_id = text_field(data, 'user_id')
    if not user_id and current_user.is_authenticated:
        user_id = current_user.get_id()

    comment = catalog.add_comment(
        text_field(data, 'video_id'),
        user_id,
        text_field(data, 'comment'),
    )
    return jsonify({"message": "Comment added", "comment": comment.to_dict()})


@videos_bp.route('/comments/<video_id>')
def list_comments(video_id):
    comments = get_store().list_comments(video_id)
    return jsonify([comment.to_dict() for comment in comments])


@videos_bp.route('/videos/<video_id>', methods=['DELETE'])
def delete_video(video_id):
    catalog.delete_video(video_id)
    return jsonify({"message": "Video deleted successfully"})


@videos_bp.route('/videos', methods=['DELETE'])
def clear_videos():
    """Delete every video and comment, default videos included."""
    videos, comments = get_store().clear_all()
    logger.warning(f"Cleared catalog: {videos} video(s), {comments} comment(s)")
    return jsonify({"message": "All videos deleted", "videos": videos, "comments": comments})
