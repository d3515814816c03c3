"""System settings - key/value pairs plus integration status flags."""
from fastapi import APIRouter

from bpay.config import settings as app_settings
from bpay.models.settings import SettingsUpdate, SystemSetting
from bpay.services.dates import now_local

router = APIRouter()


@router.get("/")
async def get_settings():
    items = await SystemSetting.find_all().to_list()
    out = {s.key: s.value for s in items}
    out["mercado_pago_status"] = "active" if app_settings.mercado_pago_access_token else "inactive"
    out["resend_status"] = "active" if app_settings.resend_api_key else "inactive"
    return out


@router.post("/")
async def update_settings(data: SettingsUpdate):
    updated = []
    for item in data.settings:
        setting = await SystemSetting.find_one(SystemSetting.key == item.key)
        if not setting:
            setting = SystemSetting(key=item.key, value=item.value)
            await setting.insert()
        else:
            setting.value = item.value
            setting.updated_at = now_local()
            await setting.save()
        updated.append({"key": setting.key, "value": setting.value, "updated_at": setting.updated_at.isoformat()})
    return updated
