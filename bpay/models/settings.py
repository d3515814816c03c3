"""Key/value system settings editable from the admin UI."""
from datetime import datetime

from beanie import Document, Indexed
from pydantic import BaseModel, Field

from bpay.services.dates import now_local


class SystemSetting(Document):
    key: Indexed(str, unique=True)
    value: str
    updated_at: datetime = Field(default_factory=now_local)

    class Settings:
        name = "system_settings"
        use_state_management = True


class SettingItem(BaseModel):
    key: str = Field(min_length=1)
    value: str


class SettingsUpdate(BaseModel):
    settings: list[SettingItem]
