"""Member ORM — persists community member accounts.

Invariants:
    - id is an autoincrement integer primary key
    - user_login and user_email are unique; user_login never changes after insert
    - password_hash holds a salted PBKDF2 digest, never the plain password
    - roles/member_types are JSON lists; extra_caps/xprofile are JSON objects

Design Decisions:
    - JSON columns for roles and capabilities: role sets are small and always
      read together with the member row
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from community_rest.db.base import Base


class Member(Base):
    """Member entity — one user account of the community."""
    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_login: Mapped[str] = mapped_column(
        String(60), nullable=False, unique=True, index=True,
    )
    user_nicename: Mapped[str] = mapped_column(String(50), nullable=False)
    display_name: Mapped[str] = mapped_column(String(250), nullable=False, default="")
    user_email: Mapped[str] = mapped_column(
        String(100), nullable=False, unique=True, index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    roles: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    extra_caps: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    member_types: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    xprofile: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    user_registered: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    notifications: Mapped[list["Notification"]] = relationship(
        "Notification", back_populates="member",
        cascade="all, delete-orphan", passive_deletes=True,
    )
