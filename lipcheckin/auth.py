from fastapi import Depends, Header, HTTPException
from .config import Settings, get_settings

async def require_token(x_api_token: str | None = Header(default=None),
                        settings: Settings = Depends(get_settings)):
    if settings.manual_trigger_token and x_api_token != settings.manual_trigger_token:
        raise HTTPException(status_code=401, detail="Unauthorized")
