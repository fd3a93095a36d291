import logging
import time
import uuid
from pathlib import Path
from queue import Queue
from threading import Lock, Thread

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS = {'mp4', 'mkv', 'webm', 'mov', 'avi', 'm4v'}
IMAGE_EXTENSIONS = {'jpg', 'jpeg', 'png', 'gif', 'webp'}
STORED_NAME_MAX_LENGTH = 255


def allowed_file(filename: str, extensions: set[str]) -> bool:
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in extensions


class AssetStore:
    """Uploaded files kept under a flat folder, keyed by generated unique names."""

    def __init__(self, app=None):
        self.folder = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.folder = Path(app.config["UPLOAD_FOLDER"])
        self.folder.mkdir(parents=True, exist_ok=True)

    def save(self, file: FileStorage) -> str:
        original = secure_filename(file.filename or "") or "upload"
        prefix = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-"
        # Keep the tail so the extension survives
        name = prefix + original[-(STORED_NAME_MAX_LENGTH - len(prefix)):]
        file.save(self.folder / name)
        logger.info(f"Stored upload as {name}")
        return name

    def path_for(self, name: str) -> Path:
        return self.folder / name


class AssetCleanupService:
    """Removes asset files on a background thread.

    Jobs are full paths so that a job keeps pointing at the right folder even
    if the service is re-initialised for another app.
    """

    def __init__(self):
        self._queue = Queue()
        self._lock = Lock()
        self._worker = None

    def schedule(self, paths: list[Path]) -> None:
        if not paths:
            return
        self._queue.put(list(paths))
        self._ensure_worker()

    def join(self) -> None:
        """Block until every scheduled removal has been attempted."""
        self._queue.join()

    def _ensure_worker(self) -> None:
        with self._lock:
            if self._worker is None or not self._worker.is_alive():
                self._worker = Thread(target=self._run, name="asset-cleanup", daemon=True)
                self._worker.start()

    def _run(self) -> None:
        while True:
            paths = self._queue.get()
            try:
                for path in paths:
                    self._remove(path)
            finally:
                self._queue.task_done()

    def _remove(self, path: Path) -> None:
        try:
            path.unlink()
            logger.info(f"Deleted file: {path}")
        except FileNotFoundError:
            logger.debug(f"File already gone: {path}")
        except OSError as e:
            logger.error(f"Failed to delete file {path}, remove it manually: {e}")


asset_store = AssetStore()
cleanup_service = AssetCleanupService()
