"""
Tests for uploaded file storage and background cleanup.
"""
import io
import logging

import pytest
from werkzeug.datastructures import FileStorage

from vidshare.services.assets import (
    AssetCleanupService,
    AssetStore,
    IMAGE_EXTENSIONS,
    VIDEO_EXTENSIONS,
    allowed_file,
)


class TestAllowedFile:
    """Tests for extension checks."""

    @pytest.mark.parametrize("filename", ["clip.mp4", "CLIP.MP4", "my.holiday.webm", "a.mov"])
    def test_allowed_video(self, filename):
        assert allowed_file(filename, VIDEO_EXTENSIONS)

    @pytest.mark.parametrize("filename", ["clip", "clip.txt", "clip.mp4.exe", ".mp4x"])
    def test_rejected_video(self, filename):
        assert not allowed_file(filename, VIDEO_EXTENSIONS)

    def test_allowed_image(self):
        assert allowed_file("thumb.jpeg", IMAGE_EXTENSIONS)
        assert not allowed_file("thumb.mp4", IMAGE_EXTENSIONS)


class TestAssetStore:
    """Tests for AssetStore."""

    @pytest.fixture
    def asset_store(self, tmp_path):
        store = AssetStore()
        store.folder = tmp_path / "uploads"
        store.folder.mkdir()
        return store

    def test_save_generates_unique_names(self, asset_store):
        """Test that two uploads of the same file do not overwrite each other."""
        first = asset_store.save(FileStorage(io.BytesIO(b"one"), filename="clip.mp4"))
        second = asset_store.save(FileStorage(io.BytesIO(b"two"), filename="clip.mp4"))

        assert first != second
        assert first.endswith("-clip.mp4")
        assert asset_store.path_for(first).read_bytes() == b"one"
        assert asset_store.path_for(second).read_bytes() == b"two"

    def test_save_sanitises_name(self, asset_store):
        """Test that path components in the client name are dropped."""
        name = asset_store.save(FileStorage(io.BytesIO(b"x"), filename="../../etc/passwd.mp4"))

        assert "/" not in name
        assert ".." not in name
        assert asset_store.path_for(name).parent == asset_store.folder

    def test_init_app_creates_folder(self, app, tmp_path):
        """Test that the upload folder is created from the config."""
        app.config["UPLOAD_FOLDER"] = str(tmp_path / "nested" / "uploads")

        store = AssetStore(app)

        assert store.folder.is_dir()


class TestAssetCleanupService:
    """Tests for AssetCleanupService."""

    def test_removes_files(self, tmp_path):
        """Test that scheduled files are deleted in the background."""
        files = [tmp_path / "a.mp4", tmp_path / "a.jpg"]
        for path in files:
            path.write_bytes(b"data")
        service = AssetCleanupService()

        service.schedule(files)
        service.join()

        assert not any(path.exists() for path in files)

    def test_missing_file_is_not_an_error(self, tmp_path, caplog):
        """Test that a file already gone is ignored."""
        service = AssetCleanupService()

        with caplog.at_level(logging.DEBUG, logger="vidshare.services.assets"):
            service.schedule([tmp_path / "never-existed.mp4"])
            service.join()

        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]

    def test_failure_is_logged_and_worker_keeps_going(self, tmp_path, caplog):
        """Test that a failed removal is logged and later jobs still run."""
        undeletable = tmp_path / "a-directory.mp4"
        undeletable.mkdir()
        later = tmp_path / "later.mp4"
        later.write_bytes(b"data")
        service = AssetCleanupService()

        with caplog.at_level(logging.INFO, logger="vidshare.services.assets"):
            service.schedule([undeletable])
            service.schedule([later])
            service.join()

        assert f"Failed to delete file {undeletable}, remove it manually" in caplog.text
        assert undeletable.exists()
        assert not later.exists()

    def test_empty_job_is_ignored(self):
        """Test that scheduling nothing does not start a worker."""
        service = AssetCleanupService()

        service.schedule([])
        service.join()

        assert service._worker is None
