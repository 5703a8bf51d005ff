"""Notification Fields — the notification field-inclusion table.

Invariants:
    - Every field is emitted in view and edit; content and href are left out
      of embeds
    - No secret fields; the generic secret strip still runs
"""

from community_rest.core.projection import ALL_CONTEXTS, VIEW_EDIT, FieldRule, format_datetime

NOTIFICATION_RESOURCE = "notification"
NOTIFICATION_ERROR_PREFIX = "rest_notification"
NOTIFICATION_REQUIRED_ON_CREATE = ("user_id", "component", "action")

NOTIFICATION_RULES: tuple[FieldRule, ...] = (
    FieldRule(
        "id", ALL_CONTEXTS, lambda n: n.id,
        type="integer", description="A unique numeric ID for the notification.",
        readonly=True,
    ),
    FieldRule(
        "user_id", ALL_CONTEXTS, lambda n: n.user_id,
        type="integer", description="The ID of the member the notification is addressed to.",
    ),
    FieldRule(
        "primary_association", ALL_CONTEXTS, lambda n: n.item_id,
        type="integer", description="The ID of the item associated with the notification.",
    ),
    FieldRule(
        "secondary_association", ALL_CONTEXTS, lambda n: n.secondary_item_id,
        type="integer",
        description="The ID of the secondary item associated with the notification.",
    ),
    FieldRule(
        "component", ALL_CONTEXTS, lambda n: n.component_name,
        description="The name of the component the notification belongs to.",
    ),
    FieldRule(
        "action", ALL_CONTEXTS, lambda n: n.component_action,
        description="The component action which the notification is related to.",
    ),
    FieldRule(
        "date", ALL_CONTEXTS, lambda n: format_datetime(n.date_notified, with_offset=False),
        format="date-time", description="The date the notification was created.",
        readonly=True,
    ),
    FieldRule(
        "unread", ALL_CONTEXTS, lambda n: bool(n.is_new),
        type="boolean", description="Whether the notification is new or not.",
    ),
    FieldRule(
        "content", VIEW_EDIT, lambda n: n.content,
        description="The rendered content of the notification.",
    ),
    FieldRule(
        "href", VIEW_EDIT, lambda n: n.href,
        format="uri", description="The link the notification points to.",
    ),
)
