"""Notification Schemas — Pydantic request bodies for notification create/update."""

from pydantic import BaseModel, Field


class NotificationCreate(BaseModel):
    """Notification creation — recipient, component and action are required."""
    user_id: int = Field(ge=1)
    component: str = Field(min_length=1, max_length=75)
    action: str = Field(min_length=1, max_length=75)
    primary_association: int = Field(0, ge=0)
    secondary_association: int = Field(0, ge=0)
    unread: bool = True
    content: str = Field("", max_length=10_000)
    href: str = Field("", max_length=2000)


class NotificationUpdate(BaseModel):
    """Notification update — only the read state can change."""
    unread: bool
