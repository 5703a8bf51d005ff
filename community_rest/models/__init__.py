"""ORM Models — SQLAlchemy declarative models for all stored entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Member is the aggregate root; notifications are scoped by user_id

Design Decisions:
    - One file per entity
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from community_rest.models.member import Member  # noqa: F401
from community_rest.models.notification import Notification  # noqa: F401
