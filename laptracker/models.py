from __future__ import annotations

import uuid
from datetime import datetime
from sqlalchemy import String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"
    uuid: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    role: Mapped[str] = mapped_column(String, nullable=False, default="helper")  # helper | superadmin
    password_hash: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    access_tokens: Mapped[list["AccessToken"]] = relationship(back_populates="created_by")


class AccessToken(Base):
    __tablename__ = "access_tokens"
    uuid: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    # never set by the create flow
    expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # one token per user, enforced by the store
    user_uuid: Mapped[str] = mapped_column(ForeignKey("users.uuid"), nullable=False, unique=True)
    created_by: Mapped["User"] = relationship(back_populates="access_tokens")


class Runner(Base):
    __tablename__ = "runners"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    number: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, index=True)  # start number

    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    grade: Mapped[str] = mapped_column(String, nullable=False, default="")
    house: Mapped[str] = mapped_column(String, nullable=False, default="")

    laps: Mapped[list["Lap"]] = relationship(back_populates="runner", cascade="all, delete-orphan")


class Lap(Base):
    __tablename__ = "laps"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    runner_id: Mapped[int] = mapped_column(ForeignKey("runners.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    runner: Mapped["Runner"] = relationship(back_populates="laps")
