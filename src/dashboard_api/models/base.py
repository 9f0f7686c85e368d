"""Base model class for SQLAlchemy."""

from sqlalchemy import DateTime
from sqlalchemy.dialects import mysql
from sqlalchemy.orm import DeclarativeBase

# Millisecond precision on MySQL, matching the 23:59:59.999 bucket edges
PreciseDateTime = DateTime().with_variant(mysql.DATETIME(fsp=3), "mysql")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass
