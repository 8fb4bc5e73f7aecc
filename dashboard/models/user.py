"""User model."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class User(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "users"

    name: Optional[str] = Field(default=None, index=True)
    email: Optional[str] = Field(default=None, unique=True, index=True)
    image: Optional[str] = None
