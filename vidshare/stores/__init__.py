from flask import current_app

from vidshare.stores.base import Store, UserRecord, VideoRecord, CommentRecord, SeedEntry

EXTENSION_KEY = "vidshare.store"

BACKENDS = ("sql", "mongo")


def create_store(app) -> Store:
    """Build the store selected by ``STORE_BACKEND`` for this application."""
    backend = app.config["STORE_BACKEND"]

    if backend == "sql":
        from vidshare.models import db
        from vidshare.stores.sql import SqlStore

        db.init_app(app)
        return SqlStore()

    if backend == "mongo":
        from pymongo import MongoClient
        from vidshare.stores.mongo import MongoStore

        client = app.config.get("MONGO_CLIENT")
        if client is None:
            client = MongoClient(app.config["MONGO_URL"], serverSelectionTimeoutMS=5000)
        return MongoStore(client, app.config["MONGO_DATABASE"])

    raise ValueError(f"Unknown store backend '{backend}', expected one of {', '.join(BACKENDS)}")


def get_store() -> Store:
    return current_app.extensions[EXTENSION_KEY]
