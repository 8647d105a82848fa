"""Read-only lookup of device push tokens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from comanda_api.db.session import SessionFactory
from comanda_api.models.device_token import DeviceToken


@dataclass(frozen=True, slots=True)
class TokenFilter:
    """Single equality predicate against a ``device_tokens`` column."""

    field: str
    value: str | int


class TokenSource(Protocol):
    async def fetch_tokens(self, token_filter: TokenFilter) -> list[str]:
        ...


class TokenRepository:
    """Queries the token store; failures degrade to an empty token list."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    @staticmethod
    def filterable_fields() -> Sequence[str]:
        return tuple(DeviceToken.__table__.columns.keys())

    async def fetch_tokens(self, token_filter: TokenFilter) -> list[str]:
        column = DeviceToken.__table__.columns.get(token_filter.field)
        if column is None:
            logger.error(
                "Error fetching device tokens: unknown filter field",
                field=token_filter.field,
            )
            return []

        stmt = select(DeviceToken.token).where(column == token_filter.value)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except (SQLAlchemyError, OSError) as exc:
            logger.error(
                "Error fetching device tokens",
                field=token_filter.field,
                error=str(exc),
            )
            return []

        return [token for token in rows if token]


__all__ = ["TokenFilter", "TokenRepository", "TokenSource"]
