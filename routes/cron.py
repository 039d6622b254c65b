from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from config import load_config
from utils.errors import StorageQueryError
from utils.interval import IntervalPolicy
from utils.logging import get_logger
from utils.review_pass import run_review_pass
from utils.serving import broadcast, serve_daily_words, weekly_summary
from .deps import (
    get_notifier,
    get_now,
    get_policy,
    get_repository,
    get_word_source,
    require_cron_secret,
)

router = APIRouter(dependencies=[Depends(require_cron_secret)])
logger = get_logger(__name__)

MIDDAY_TEXT = "Midday recall: can you recall any of today's words? Reply with the word you remember."
EVENING_TEXT = "Evening challenge: use each of today's words in a sentence about your day. Reply with your sentences."

@router.post("/review")
async def review_job(
    now: datetime = Depends(get_now),
    repository = Depends(get_repository),
    notifier = Depends(get_notifier),
    policy: IntervalPolicy = Depends(get_policy),
):
    """Hourly review pass: prompt due learners and grow their intervals."""
    workers = load_config()["cron"]["delivery_workers"]
    try:
        result = run_review_pass(now, repository, notifier, policy, delivery_workers=workers)
    except StorageQueryError as exc:
        logger.error("review_pass_aborted", error=repr(exc))
        raise HTTPException(status_code=500, detail=str(exc))
    return {"message": "Review job completed", **result.as_dict()}

@router.post("/daily")
async def daily_job(
    now: datetime = Depends(get_now),
    repository = Depends(get_repository),
    notifier = Depends(get_notifier),
    word_source = Depends(get_word_source),
    policy: IntervalPolicy = Depends(get_policy),
):
    """Serve each learner their words of the day."""
    try:
        result = serve_daily_words(now, repository, word_source, notifier, policy)
    except StorageQueryError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return {"message": "Daily words served", "learners": result.learners, "served": result.served, "failures": result.failures}

@router.post("/midday")
async def midday_job(repository = Depends(get_repository), notifier = Depends(get_notifier)):
    try:
        result = broadcast(repository, notifier, MIDDAY_TEXT)
    except StorageQueryError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return {"message": "Midday recall sent", "sent": result.served, "failures": result.failures}

@router.post("/evening")
async def evening_job(repository = Depends(get_repository), notifier = Depends(get_notifier)):
    try:
        result = broadcast(repository, notifier, EVENING_TEXT)
    except StorageQueryError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return {"message": "Evening challenge sent", "sent": result.served, "failures": result.failures}

@router.post("/weekly")
async def weekly_job(
    now: datetime = Depends(get_now),
    repository = Depends(get_repository),
    notifier = Depends(get_notifier),
):
    """Send each learner a summary of the words served in the past week."""
    try:
        result = weekly_summary(now, repository, notifier)
    except StorageQueryError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return {
        "message": "Weekly summary sent",
        "sent": result.served,
        "skipped": result.skipped,
        "failures": result.failures,
    }
