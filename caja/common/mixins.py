"""
Common mixins for tenant-scoped models
"""
from sqlalchemy import Column, DateTime, String
from datetime import datetime, timezone
from uuid import uuid4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


class TenantMixin:
    """Every row belongs to exactly one user (the tenant)"""

    user_id = Column(String(128), nullable=False, index=True)


class TimestampMixin:
    """Mixin for models that need timestamp tracking"""

    # Se asignan desde Python (microsegundos) para que el orden de inserción sea estable
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class BaseMixin(TenantMixin, TimestampMixin):
    """Combines tenant and timestamp functionality for most business models"""

    id = Column(String(36), primary_key=True, default=new_id)
