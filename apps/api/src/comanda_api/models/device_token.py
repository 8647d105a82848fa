from uuid import uuid4

from sqlalchemy import Column, DateTime, String, Uuid, func

from comanda_api.db.base import Base


class DeviceToken(Base):
    """Push token registered by one installed client instance."""

    __tablename__ = "device_tokens"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(String(64), nullable=True, index=True)
    role = Column(String(32), nullable=True, index=True)
    token = Column(String(512), nullable=True, unique=True, index=True)
    platform = Column(String(16), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
