from .base import Base
from .session import get_engine, get_session_factory

__all__ = ["Base", "get_engine", "get_session_factory"]
