"""JSON values persisted in the settings table."""

import json
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.models.setting import Setting

SHEETS_CONFIG_KEY = "sheets_config"
GOOGLE_TOKENS_KEY = "google_oauth_tokens"
PENDING_FOLLOWUPS_KEY = "pending_followups"


async def get_json_setting(db: AsyncSession, key: str) -> Any | None:
    """Decoded value for ``key``, or None when unset."""
    result = await db.execute(select(Setting).where(Setting.key == key))
    setting = result.scalar_one_or_none()
    if setting is None:
        return None
    return json.loads(setting.value)


async def set_json_setting(db: AsyncSession, key: str, value: Any) -> None:
    """Insert or replace ``key``. Caller commits."""
    result = await db.execute(select(Setting).where(Setting.key == key))
    setting = result.scalar_one_or_none()
    encoded = json.dumps(value, default=str)

    if setting is None:
        db.add(Setting(key=key, value=encoded))
    else:
        setting.value = encoded
