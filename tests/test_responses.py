from datetime import timedelta

from db.repository import SQLiteRepository
from fakes import NOW
from models import LearnerStreak, LearningUnitCreate
from utils.grading import is_correct_recall
from utils.responses import record_response

CONFIG = {"grading": {"levenshtein_threshold": 0.85}}


def _serve(repo, learner_id, word, served_at):
    unit = repo.insert_learning_unit(LearningUnitCreate(word=word), served_at)
    return repo.create_scheduled_item(
        learner_id=learner_id,
        unit_id=unit.id,
        served_at=served_at,
        next_review=served_at + timedelta(days=2),
        interval=2,
    )


def test_is_correct_recall():
    assert is_correct_recall("laconic", "Laconic!", CONFIG)
    assert is_correct_recall("perspicacious", "perspicacous", CONFIG)
    assert not is_correct_recall("laconic", "verbose", CONFIG)
    assert not is_correct_recall("laconic", "   ", CONFIG)


def test_short_correct_reply_counts_against_latest_word(conn):
    repo = SQLiteRepository(conn)
    learner = repo.create_learner("1", 2, NOW)
    first = _serve(repo, learner.id, "ebullient", NOW - timedelta(hours=2))
    second = _serve(repo, learner.id, "laconic", NOW - timedelta(hours=1))

    outcome = record_response(NOW, repo, learner.id, "laconic", CONFIG)

    assert outcome.kind == "recall"
    assert outcome.correct is True
    assert repo.get_scheduled_item(second.id).correct_count == 1
    assert repo.get_scheduled_item(first.id).correct_count == 0


def test_short_wrong_reply_is_stored(conn):
    repo = SQLiteRepository(conn)
    learner = repo.create_learner("1", 1, NOW)
    item = _serve(repo, learner.id, "laconic", NOW - timedelta(hours=1))

    outcome = record_response(NOW, repo, learner.id, "verbose", CONFIG)

    assert outcome.correct is False
    assert outcome.expected == "laconic"
    stored = repo.get_scheduled_item(item.id)
    assert stored.last_response == "verbose"
    assert stored.correct_count == 0


def test_usage_reply_fills_pending_and_advances_streak(conn):
    repo = SQLiteRepository(conn)
    learner = repo.create_learner("1", 2, NOW)
    first = _serve(repo, learner.id, "ebullient", NOW - timedelta(hours=2))
    second = _serve(repo, learner.id, "laconic", NOW - timedelta(hours=1))
    repo.update_scheduled_item(first.id, {"last_response": "earlier"})
    sentence = "My laconic boss was ebullient at lunch today"

    outcome = record_response(NOW, repo, learner.id, sentence, CONFIG)

    assert outcome.kind == "usage"
    assert outcome.updated == 1
    assert outcome.streak == 1
    assert repo.get_scheduled_item(first.id).last_response == "earlier"
    assert repo.get_scheduled_item(second.id).last_response == sentence
    assert repo.get_streak(learner.id).streak == 1


def test_reply_without_words_served_today_is_ignored(conn):
    repo = SQLiteRepository(conn)
    learner = repo.create_learner("1", 1, NOW)
    _serve(repo, learner.id, "laconic", NOW - timedelta(days=1))

    outcome = record_response(NOW, repo, learner.id, "laconic", CONFIG)

    assert outcome.kind == "none"


def test_naive_now_is_read_as_utc(conn):
    repo = SQLiteRepository(conn)
    learner = repo.create_learner("1", 1, NOW)
    _serve(repo, learner.id, "laconic", NOW - timedelta(hours=1))
    repo.save_streak(LearnerStreak(learner_id=learner.id, streak=2, last_completed=NOW - timedelta(days=1)))
    naive_now = NOW.replace(tzinfo=None)

    recall = record_response(naive_now, repo, learner.id, "laconic", CONFIG)
    usage = record_response(naive_now, repo, learner.id, "A laconic reply ended the meeting early", CONFIG)

    assert recall.correct is True
    assert usage.kind == "usage"
    assert usage.streak == 3
