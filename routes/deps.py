from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from config import load_config
from db.database import get_db
from db.repository import SQLiteRepository
from utils.interval import IntervalPolicy, interval_policy_from_config
from utils.notifier import TelegramNotifier
from utils.word_source import LocalWordSource

def get_now() -> datetime:
    return datetime.now(timezone.utc)

def get_repository(conn = Depends(get_db)) -> SQLiteRepository:
    return SQLiteRepository(conn)

def get_policy() -> IntervalPolicy:
    return interval_policy_from_config(load_config())

def get_notifier() -> TelegramNotifier:
    telegram = load_config()["telegram"]
    if not telegram["token"]:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Bot not configured. Set TELEGRAM_TOKEN.",
        )
    return TelegramNotifier(telegram["token"], timeout=telegram["timeout"])

def get_word_source() -> LocalWordSource:
    return LocalWordSource(extra=load_config()["words"]["extra"])

def require_cron_secret(x_cron_secret: Optional[str] = Header(default=None)) -> None:
    secret = load_config()["cron"]["secret"]
    if secret and x_cron_secret != secret:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid cron secret")
