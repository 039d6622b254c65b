from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from config import load_config
from models.learner import MAX_WORDS_PER_DAY, MIN_WORDS_PER_DAY, Learner, LearnerCreate
from utils.errors import StorageError
from utils.due import start_of_day
from utils.responses import record_response
from utils.serving import words_served_since
from .deps import get_now, get_repository

router = APIRouter()

class WordsPerDay(BaseModel):
    words_per_day: int

class ResponseIn(BaseModel):
    text: str

def _get_learner_or_404(repository, learner_id: int) -> Learner:
    learner = repository.find_learner(learner_id)
    if not learner:
        raise HTTPException(status_code=404, detail="Learner not found")
    return learner

@router.post("", status_code=status.HTTP_201_CREATED)
async def register_learner(payload: LearnerCreate, now: datetime = Depends(get_now), repository = Depends(get_repository)):
    """Register a learner by chat id; registering twice returns the existing learner."""
    existing = repository.find_learner_by_chat(payload.chat_id)
    if existing:
        return existing.model_dump(mode="json")
    learner = repository.create_learner(payload.chat_id, payload.words_per_day, now)
    return learner.model_dump(mode="json")

@router.put("/{learner_id}/words-per-day")
async def set_words_per_day(learner_id: int, payload: WordsPerDay, repository = Depends(get_repository)):
    _get_learner_or_404(repository, learner_id)
    if not MIN_WORDS_PER_DAY <= payload.words_per_day <= MAX_WORDS_PER_DAY:
        raise HTTPException(
            status_code=422,
            detail=f"words_per_day must be between {MIN_WORDS_PER_DAY} and {MAX_WORDS_PER_DAY}",
        )
    try:
        repository.set_words_per_day(learner_id, payload.words_per_day)
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return {"id": learner_id, "words_per_day": payload.words_per_day}

@router.post("/{learner_id}/responses")
async def submit_response(
    learner_id: int,
    payload: ResponseIn,
    now: datetime = Depends(get_now),
    repository = Depends(get_repository),
):
    """Record a recall answer or usage sentences for today's words."""
    _get_learner_or_404(repository, learner_id)
    outcome = record_response(now, repository, learner_id, payload.text, load_config())
    return {
        "kind": outcome.kind,
        "correct": outcome.correct,
        "expected": outcome.expected,
        "updated": outcome.updated,
        "streak": outcome.streak,
    }

@router.get("/{learner_id}/progress")
async def learner_progress(learner_id: int, repository = Depends(get_repository)):
    """Words learned, streak and the ten most recent words."""
    learner = _get_learner_or_404(repository, learner_id)
    items = repository.list_scheduled_items(learner_id)
    streak = repository.get_streak(learner_id)
    recent = []
    for item in reversed(items[-10:]):
        unit = repository.find_learning_unit(item.unit_id)
        recent.append({
            "word": unit.word if unit else None,
            "interval": item.interval,
            "next_review": item.next_review.isoformat(),
            "correct_count": item.correct_count,
        })
    return {
        "learner_id": learner.id,
        "words_learned": len(items),
        "streak": streak.streak if streak else 0,
        "words_per_day": learner.words_per_day,
        "recent": recent,
    }

@router.get("/{learner_id}/today")
async def todays_words(learner_id: int, now: datetime = Depends(get_now), repository = Depends(get_repository)):
    """Words served to the learner since midnight UTC, in serve order."""
    _get_learner_or_404(repository, learner_id)
    units = words_served_since(repository, learner_id, start_of_day(now))
    return {
        "learner_id": learner_id,
        "count": len(units),
        "words": [
            {
                "word": unit.word,
                "part_of_speech": unit.part_of_speech,
                "definition": unit.definition,
                "example": unit.example,
            }
            for unit in units
        ],
    }
