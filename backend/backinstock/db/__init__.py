from backinstock.db.base import Base
from backinstock.db.session import SessionLocal, engine, make_engine, make_session_factory
from backinstock.db.tables import ALL_TABLE_NAMES

__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "make_engine",
    "make_session_factory",
    "ALL_TABLE_NAMES",
]
