# Models package: declarative base, the per-vocabulary person model and engine helpers
from .base import Base
from .person import make_person_model
from .engine import StorageInitError, sqlite_engine, initialize_db

__all__ = [
    "Base",
    "make_person_model",
    "StorageInitError",
    "sqlite_engine",
    "initialize_db",
]
