"""Notification ORM — persists per-member notification items.

Invariants:
    - Always belongs to a Member (user_id FK, cascade on member delete)
    - component_name/component_action identify what produced the notification
    - is_new is True until the owner marks the notification read

Design Decisions:
    - content and href stored pre-rendered: no per-component format callbacks
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from community_rest.db.base import Base


class Notification(Base):
    """Notification entity — something a member should be told about."""
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    item_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    secondary_item_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    component_name: Mapped[str] = mapped_column(String(75), nullable=False)
    component_action: Mapped[str] = mapped_column(String(75), nullable=False)
    date_notified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    is_new: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    href: Mapped[str] = mapped_column(String(2000), nullable=False, default="")

    # Relationships
    member: Mapped["Member"] = relationship("Member", back_populates="notifications")
