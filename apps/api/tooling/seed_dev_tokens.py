"""Seed development device tokens into the token store."""

from __future__ import annotations

import asyncio
import os
from typing import TypedDict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_api.core.settings import get_settings
from comanda_api.db.session import build_engine, build_session_factory
from comanda_api.models.device_token import DeviceToken


class SeedToken(TypedDict):
    user_id: str
    role: str
    token: str
    platform: str


DEV_TOKENS: list[SeedToken] = [
    {
        "user_id": "dev-mozo",
        "role": "mozo",
        "token": os.getenv("DEV_MOZO_PUSH_TOKEN", "dev-token-mozo"),
        "platform": "android",
    },
    {
        "user_id": "dev-cocinero",
        "role": "cocinero",
        "token": os.getenv("DEV_COCINERO_PUSH_TOKEN", "dev-token-cocinero"),
        "platform": "android",
    },
    {
        "user_id": "dev-supervisor",
        "role": "supervisor",
        "token": os.getenv("DEV_SUPERVISOR_PUSH_TOKEN", "dev-token-supervisor"),
        "platform": "ios",
    },
]


async def seed_tokens(session: AsyncSession, tokens: list[SeedToken] | None = None) -> int:
    """Upsert tokens keyed by ``token``; returns how many rows were inserted.

    A user may own several devices, so the device token identifies the row.
    """

    inserted = 0
    for entry in tokens if tokens is not None else DEV_TOKENS:
        with session.no_autoflush:
            existing = await session.execute(select(DeviceToken).where(DeviceToken.token == entry["token"]))
        record = existing.scalar_one_or_none()

        if record:
            record.user_id = entry["user_id"]
            record.role = entry["role"].lower()
            record.platform = entry["platform"]
        else:
            session.add(
                DeviceToken(
                    user_id=entry["user_id"],
                    role=entry["role"].lower(),
                    token=entry["token"],
                    platform=entry["platform"],
                )
            )
            inserted += 1
    await session.commit()
    return inserted


async def main() -> None:
    engine = build_engine(get_settings().database_url)
    factory = build_session_factory(engine)
    try:
        async with factory() as session:
            inserted = await seed_tokens(session)
    finally:
        await engine.dispose()
    print(f"Seeded {inserted} development device tokens")


if __name__ == "__main__":
    asyncio.run(main())
