"""
Declarative base for database models (SQLAlchemy 2.0 style)
"""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# Metadata used by migrations
metadata = Base.metadata
