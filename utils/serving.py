from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from models import LearningUnit
from utils.due import as_utc
from utils.interval import IntervalPolicy
from utils.logging import get_logger
from utils.notifier import weekly_summary_text

logger = get_logger(__name__)

NO_WORDS_TEXT = "Unable to find new words today. Try again later."
SUMMARY_WINDOW = timedelta(days=7)


@dataclass
class ServeResult:
    learners: int = 0
    served: int = 0
    failures: int = 0
    skipped: int = 0


def serve_words_to_learner(now: datetime, repository, word_source, notifier, learner, policy: IntervalPolicy) -> int:
    """Serve today's words to one learner and schedule their first review."""
    used = repository.used_words()
    candidates = word_source.next_words(learner.words_per_day, exclude=used)
    if not candidates:
        notifier.send_text(learner, NO_WORDS_TEXT)
        return 0
    units = []
    for index, candidate in enumerate(candidates, start=1):
        unit = repository.insert_learning_unit(candidate, now)
        repository.create_scheduled_item(
            learner_id=learner.id,
            unit_id=unit.id,
            served_at=now,
            next_review=policy.first_review(now),
            interval=policy.initial,
            served_index=index,
        )
        units.append(unit)
    notifier.send_words(learner, units)
    return len(units)


def serve_daily_words(
    now: datetime,
    repository,
    word_source,
    notifier,
    policy: Optional[IntervalPolicy] = None,
) -> ServeResult:
    policy = policy or IntervalPolicy()
    learners = repository.list_learners()
    result = ServeResult(learners=len(learners))
    for learner in learners:
        try:
            result.served += serve_words_to_learner(now, repository, word_source, notifier, learner, policy)
        except Exception as exc:
            result.failures += 1
            logger.error("serve_words_failed", learner_id=learner.id, error=repr(exc))
    logger.info("daily_words_served", learners=result.learners, served=result.served, failures=result.failures)
    return result


def broadcast(repository, notifier, text: str) -> ServeResult:
    """Send the same message to every learner; delivery failures are counted per learner."""
    learners = repository.list_learners()
    result = ServeResult(learners=len(learners))
    for learner in learners:
        try:
            notifier.send_text(learner, text)
            result.served += 1
        except Exception as exc:
            result.failures += 1
            logger.warning("broadcast_failed", learner_id=learner.id, error=repr(exc))
    return result


def words_served_since(repository, learner_id: int, since: datetime) -> List[LearningUnit]:
    """Units served to a learner since ``since``, in serve order."""
    units = []
    for item in repository.list_scheduled_items(learner_id, served_since=since):
        unit = repository.find_learning_unit(item.unit_id)
        if unit is not None:
            units.append(unit)
    return units


def weekly_summary(now: datetime, repository, notifier) -> ServeResult:
    """Send each learner the words served to them over the past week.

    Learners who were served nothing in the window are skipped.
    """
    since = as_utc(now) - SUMMARY_WINDOW
    learners = repository.list_learners()
    result = ServeResult(learners=len(learners))
    for learner in learners:
        try:
            units = words_served_since(repository, learner.id, since)
            if not units:
                result.skipped += 1
                continue
            streak = repository.get_streak(learner.id)
            notifier.send_text(learner, weekly_summary_text(units, streak.streak if streak else 0))
            result.served += 1
        except Exception as exc:
            result.failures += 1
            logger.warning("weekly_summary_failed", learner_id=learner.id, error=repr(exc))
    logger.info("weekly_summary_sent", learners=result.learners, sent=result.served,
                skipped=result.skipped, failures=result.failures)
    return result
