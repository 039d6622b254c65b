from datetime import timedelta

import pytest

from db.repository import SQLiteRepository
from fakes import NOW
from models import LearnerStreak, LearningUnitCreate
from utils.errors import StorageError, StorageWriteError


def _seed(repo, *, served_at=NOW - timedelta(days=2), next_review=NOW, interval=2):
    learner = repo.create_learner("555", 2, NOW - timedelta(days=10))
    unit = repo.insert_learning_unit(LearningUnitCreate(word="laconic", definition="using very few words"), NOW)
    item = repo.create_scheduled_item(
        learner_id=learner.id,
        unit_id=unit.id,
        served_at=served_at,
        next_review=next_review,
        interval=interval,
    )
    return learner, unit, item


def test_find_due_uses_less_than_or_equal(conn):
    repo = SQLiteRepository(conn)
    _, _, due_item = _seed(repo)
    learner = repo.find_learner_by_chat("555")
    repo.create_scheduled_item(
        learner_id=learner.id,
        unit_id=due_item.unit_id,
        served_at=NOW,
        next_review=NOW + timedelta(microseconds=1),
        interval=2,
    )

    due = repo.find_due_scheduled_items(NOW)

    assert [item.id for item in due] == [due_item.id]
    assert due[0].next_review == NOW


def test_update_scheduled_item_partial(conn):
    repo = SQLiteRepository(conn)
    _, _, item = _seed(repo)

    assert repo.update_scheduled_item(item.id, {"interval": 5, "next_review": NOW + timedelta(days=5)})

    stored = repo.get_scheduled_item(item.id)
    assert stored.interval == 5
    assert stored.next_review == NOW + timedelta(days=5)
    assert stored.correct_count == 0


def test_update_missing_item_raises(conn):
    repo = SQLiteRepository(conn)
    with pytest.raises(StorageError):
        repo.update_scheduled_item(404, {"interval": 5})


def test_update_rejects_unknown_fields(conn):
    repo = SQLiteRepository(conn)
    _, _, item = _seed(repo)
    with pytest.raises(StorageWriteError):
        repo.update_scheduled_item(item.id, {"learner_id": 2})


def test_update_with_stale_guard_is_not_applied(conn):
    repo = SQLiteRepository(conn)
    _, _, item = _seed(repo)
    repo.update_scheduled_item(item.id, {"interval": 5, "next_review": NOW + timedelta(days=5)})

    applied = repo.update_scheduled_item(
        item.id,
        {"interval": 13, "next_review": NOW + timedelta(days=13)},
        expected_next_review=NOW,
    )

    assert applied is False
    assert repo.get_scheduled_item(item.id).interval == 5


def test_lookups_return_none_when_absent(conn):
    repo = SQLiteRepository(conn)
    assert repo.find_learner(1) is None
    assert repo.find_learning_unit(1) is None


def test_list_scheduled_items_since_cutoff(conn):
    repo = SQLiteRepository(conn)
    learner, unit, old_item = _seed(repo)
    new_item = repo.create_scheduled_item(
        learner_id=learner.id,
        unit_id=unit.id,
        served_at=NOW,
        next_review=NOW + timedelta(days=2),
        interval=2,
    )
    assert [i.id for i in repo.list_scheduled_items(learner.id)] == [old_item.id, new_item.id]
    assert [i.id for i in repo.list_scheduled_items(learner.id, served_since=NOW - timedelta(hours=1))] == [new_item.id]


def test_duplicate_learner_rejected(conn):
    repo = SQLiteRepository(conn)
    repo.create_learner("1", 1, NOW)
    with pytest.raises(StorageWriteError):
        repo.create_learner("1", 1, NOW)


def test_streak_round_trip(conn):
    repo = SQLiteRepository(conn)
    learner, _, _ = _seed(repo)
    assert repo.get_streak(learner.id) is None
    repo.save_streak(LearnerStreak(learner_id=learner.id, streak=3, last_completed=NOW))
    repo.save_streak(LearnerStreak(learner_id=learner.id, streak=4, last_completed=NOW + timedelta(days=1)))
    stored = repo.get_streak(learner.id)
    assert stored.streak == 4
    assert stored.last_completed == NOW + timedelta(days=1)


def test_used_words_are_lowercased(conn):
    repo = SQLiteRepository(conn)
    repo.insert_learning_unit(LearningUnitCreate(word="Ephemeral"), NOW)
    assert repo.used_words() == ["ephemeral"]
