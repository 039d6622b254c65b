import argparse
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

import uvicorn
from fastapi import FastAPI

# Add project root to path for package imports
base_dir = Path(__file__).parent
sys.path.insert(0, str(base_dir))

from db.database import init_db, get_conn
from db.repository import SQLiteRepository
from config import load_config
from routes import cron_router, learners_router  # Import routers
from utils.interval import interval_policy_from_config
from utils.logging import configure_logging, get_logger
from utils.notifier import TelegramNotifier
from utils.review_pass import run_review_pass

logger = get_logger(__name__)

# First-run init
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: logging, config and DB
    configure_logging()
    load_config()  # Ensures config exists
    init_db()
    yield

app = FastAPI(title="Daily Word", description="Vocabulary bot with spaced-repetition reviews", lifespan=lifespan)

# Include routers
app.include_router(cron_router, prefix="/cron", tags=["cron"])
app.include_router(learners_router, prefix="/learners", tags=["learners"])

@app.get("/")
async def index():
    return {
        "message": "Daily Word API",
        "status": "running",
        "endpoints": {
            "learners": "/learners",
            "cron": {
                "daily": "/cron/daily",
                "midday": "/cron/midday",
                "evening": "/cron/evening",
                "review": "/cron/review",
                "weekly": "/cron/weekly",
            },
        },
    }

def review_once() -> int:
    """Run a single review pass against the local database; used by an external cron."""
    config = load_config()
    if not config["telegram"]["token"]:
        logger.error("review_not_configured", detail="TELEGRAM_TOKEN missing")
        return 2
    init_db()
    notifier = TelegramNotifier(config["telegram"]["token"], timeout=config["telegram"]["timeout"])
    with get_conn() as conn:
        result = run_review_pass(
            datetime.now(timezone.utc),
            SQLiteRepository(conn),
            notifier,
            interval_policy_from_config(config),
            delivery_workers=config["cron"]["delivery_workers"],
        )
    return 1 if result.failures else 0

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Daily Word service")
    parser.add_argument("--init", action="store_true", help="Initialize DB and config")
    parser.add_argument("--review", action="store_true", help="Run one review pass and exit")
    parser.add_argument("--dev", action="store_true", help="Run in dev mode with reload")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()
    configure_logging()
    if args.init:
        load_config()  # Ensures config is copied if missing
        init_db()
        print("DB initialized and config copied to ~/.dailyword/")
        sys.exit(0)
    if args.review:
        sys.exit(review_once())
    uvicorn.run("main:app", host="127.0.0.1", port=args.port, reload=args.dev, log_level="info")
