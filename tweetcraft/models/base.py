"""
Shared SQLAlchemy base and common imports for all model modules.
"""
import uuid

from sqlalchemy import (
    Column, String, DateTime, Text, Integer, JSON, ForeignKey, Index,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


def isoformat(value):
    return value.isoformat() if value else None
