"""SQLAlchemy models package."""

from .device_token import DeviceToken  # noqa: F401

__all__ = ["DeviceToken"]
