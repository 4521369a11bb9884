from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from .config import get_settings
from .logging_config import setup_logging
from .routers import checkin

BANNER = "LIP check-in service for Level Infinite Pass. Access /manual-checkin to trigger."

setup_logging(get_settings().log_level)

app = FastAPI(title="LIP Check-in", version="1.0.0")
app.include_router(checkin.router)


@app.api_route("/{path:path}", methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
               response_class=PlainTextResponse, include_in_schema=False)
async def banner(path: str):
    return BANNER
