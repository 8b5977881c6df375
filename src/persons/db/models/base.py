# Shared SQLAlchemy declarative base
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    # AUTOINCREMENT keeps SQLite from reusing ids of deleted rows
    __table_args__ = {"sqlite_autoincrement": True}
