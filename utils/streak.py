from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from models import LearnerStreak
from utils.due import as_utc
from utils.logging import get_logger

STREAK_GAP = timedelta(days=2)

logger = get_logger(__name__)


def advance_streak(current: Optional[LearnerStreak], now: datetime, learner_id: int) -> LearnerStreak:
    """Return the streak after an engagement at ``now``.

    A gap of more than two days since the last completion restarts the count.
    """
    now = as_utc(now)
    if current is None or current.last_completed is None:
        return LearnerStreak(learner_id=learner_id, streak=1, last_completed=now)
    if now - as_utc(current.last_completed) > STREAK_GAP:
        return LearnerStreak(learner_id=learner_id, streak=1, last_completed=now)
    return LearnerStreak(learner_id=learner_id, streak=current.streak + 1, last_completed=now)


def record_engagement(repository, learner_id: int, now: datetime) -> LearnerStreak:
    updated = advance_streak(repository.get_streak(learner_id), now, learner_id)
    repository.save_streak(updated)
    logger.info("streak_updated", learner_id=learner_id, streak=updated.streak)
    return updated
