import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderdesk.config import get_settings
from orderdesk.logging_config import get_logger, setup_logging
from orderdesk.routers import orders, telegram_webhook
from orderdesk.services.session_store import InMemorySessionStore

settings = get_settings()
setup_logging(settings.log_level)

logger = get_logger("main")

app = FastAPI(
    title="Orderdesk Bot",
    description="Telegram relay between shop customers and operators, plus order notifications",
    version="0.1.0",
)

cors_env = os.environ.get("CORS_ALLOW_ORIGINS", "*")
cors_origins = [origin.strip() for origin in cors_env.split(",") if origin.strip()]
if not cors_origins:
    cors_origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(orders.router)
app.include_router(telegram_webhook.router)

# Sessions live only as long as the process does.
app.state.session_store = InMemorySessionStore(ttl_seconds=settings.admin_session_ttl_seconds)

if not settings.admin_ids:
    logger.warning("No admin ids configured. Set TELEGRAM_ADMIN_IDS or TELEGRAM_ADMIN_ID")


@app.get("/health")
async def health():
    return {"status": "ok"}
