from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Enum, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class PostStatus(str, enum.Enum):
    LOOKING = "looking"
    MATCHED = "matched"
    INACTIVE = "inactive"


class PreferenceRecordModel(Base):
    """One row per owner; every save replaces the whole answer map."""

    __tablename__ = "preference_records"

    owner_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    answers: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    is_complete: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<PreferenceRecordModel(owner_id={self.owner_id}, complete={self.is_complete})>"


class RoommatePost(Base):
    """Roommate listing; only the columns the candidate pool needs are mapped."""

    __tablename__ = "roommate_posts"
    __table_args__ = (Index("ix_roommate_posts_status_created_at", "status", "created_at"),)

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[PostStatus] = mapped_column(
        Enum(PostStatus, name="post_status", values_callable=lambda e: [x.value for x in e]),
        default=PostStatus.LOOKING,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
