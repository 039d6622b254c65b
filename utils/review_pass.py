from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from db.repository import Repository
from utils.due import as_utc, select_due
from utils.errors import OrphanedReference, StorageQueryError
from utils.interval import IntervalPolicy
from utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_DELIVERY_WORKERS = 4


@dataclass
class ReviewPassResult:
    processed: int = 0
    failures: int = 0
    skipped: int = 0
    notify_failures: int = 0

    def as_dict(self) -> dict:
        return {
            "processed": self.processed,
            "failures": self.failures,
            "skipped": self.skipped,
            "notify_failures": self.notify_failures,
        }


def _resolve(repository, item):
    learner = repository.find_learner(item.learner_id)
    if learner is None:
        raise OrphanedReference(item.id, "learner")
    unit = repository.find_learning_unit(item.unit_id)
    if unit is None:
        raise OrphanedReference(item.id, "learning_unit")
    return learner, unit


def run_review_pass(
    now: datetime,
    repository: Repository,
    notifier,
    policy: Optional[IntervalPolicy] = None,
    delivery_workers: int = DEFAULT_DELIVERY_WORKERS,
) -> ReviewPassResult:
    """Advance the schedule of every item due at ``now``.

    Each due learner is prompted to recall the unit and the item's interval is
    grown by the policy. The prompt is queued on a worker pool once the
    schedule write has been applied, so an item already advanced by a
    concurrent pass is not prompted twice. The schedule advances even when
    delivery fails. A failure on one item is counted and the pass moves on.
    Only a failure to load the due set is raised, as ``StorageQueryError``.
    """
    now = as_utc(now)
    policy = policy or IntervalPolicy()
    try:
        rows = repository.find_due_scheduled_items(now)
    except StorageQueryError:
        raise
    except Exception as exc:
        raise StorageQueryError(f"due item query failed: {exc!r}") from exc

    due = select_due(now, rows)
    result = ReviewPassResult()
    deliveries: List[Tuple[int, Future]] = []

    with ThreadPoolExecutor(max_workers=max(1, delivery_workers)) as pool:
        for item in due:
            result.processed += 1
            try:
                learner, unit = _resolve(repository, item)

                interval = policy.next_interval(item.interval)
                next_review = policy.next_review(now, interval)
                applied = repository.update_scheduled_item(
                    item.id,
                    {"interval": interval, "next_review": next_review},
                    expected_next_review=item.next_review,
                )
                if applied is False:
                    logger.info("review_item_superseded", item_id=item.id)
                    continue
                deliveries.append((item.id, pool.submit(notifier.prompt, learner, unit)))
                logger.info(
                    "review_item_rescheduled",
                    item_id=item.id,
                    interval=interval,
                    next_review=next_review.isoformat(),
                )
            except OrphanedReference as exc:
                result.skipped += 1
                logger.warning("review_item_orphaned", item_id=item.id, missing=exc.missing)
            except Exception as exc:
                result.failures += 1
                logger.error("review_item_failed", item_id=item.id, error=repr(exc))

    for item_id, future in deliveries:
        exc = future.exception()
        if exc is not None:
            result.notify_failures += 1
            logger.warning("review_prompt_failed", item_id=item_id, error=repr(exc))

    logger.info("review_pass_done", now=now.isoformat(), **result.as_dict())
    return result
