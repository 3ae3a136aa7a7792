"""Persistence layer: engine, session factory and the site ORM models."""
from .session import Base, SessionLocal, engine, get_db
from . import models  # noqa: F401  (registers tables on Base.metadata)

__all__ = ["Base", "SessionLocal", "engine", "get_db", "models"]
