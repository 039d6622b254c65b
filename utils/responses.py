from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from utils.due import as_utc, latest_pending, start_of_day
from utils.grading import is_correct_recall, is_short_reply
from utils.logging import get_logger
from utils.streak import record_engagement

logger = get_logger(__name__)


@dataclass
class ResponseOutcome:
    kind: str  # "none", "recall" or "usage"
    correct: Optional[bool] = None
    expected: Optional[str] = None
    updated: int = 0
    streak: Optional[int] = None


def record_response(
    now: datetime,
    repository,
    learner_id: int,
    text: str,
    config: Optional[Dict[str, Any]] = None,
) -> ResponseOutcome:
    """Record a learner's reply against the words served to them today.

    A short reply is graded against the most recently served word. A longer
    reply is stored as usage practice on every pending word and counts as a
    day of engagement.
    """
    now = as_utc(now)
    text = (text or "").strip()
    pending = repository.list_scheduled_items(learner_id, served_since=start_of_day(now))
    if not text or not pending:
        return ResponseOutcome(kind="none")

    if is_short_reply(text):
        item = latest_pending(pending)
        unit = repository.find_learning_unit(item.unit_id)
        expected = unit.word if unit else ""
        correct = is_correct_recall(expected, text, config)
        if correct:
            repository.update_scheduled_item(item.id, {"correct_count": item.correct_count + 1})
        else:
            repository.update_scheduled_item(item.id, {"last_response": text})
        logger.info("recall_recorded", learner_id=learner_id, item_id=item.id, correct=correct)
        return ResponseOutcome(kind="recall", correct=correct, expected=expected, updated=1)

    updated = 0
    for item in pending:
        if not item.last_response:
            repository.update_scheduled_item(item.id, {"last_response": text})
            updated += 1
    streak = record_engagement(repository, learner_id, now)
    logger.info("usage_recorded", learner_id=learner_id, updated=updated)
    return ResponseOutcome(kind="usage", updated=updated, streak=streak.streak)
