"""Declarative base shared by every feature model."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
