from pydantic import BaseModel, validator
from typing import Optional
from datetime import datetime

MIN_WORDS_PER_DAY = 1
MAX_WORDS_PER_DAY = 3

class LearnerBase(BaseModel):
    chat_id: str
    words_per_day: int = 1

    @validator('words_per_day')
    def validate_words_per_day(cls, v):
        if not MIN_WORDS_PER_DAY <= v <= MAX_WORDS_PER_DAY:
            raise ValueError(f"words_per_day must be between {MIN_WORDS_PER_DAY} and {MAX_WORDS_PER_DAY}")
        return v

class LearnerCreate(LearnerBase):
    pass

class Learner(LearnerBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class LearnerStreak(BaseModel):
    learner_id: int
    streak: int = 0
    last_completed: Optional[datetime] = None

    @validator('streak')
    def validate_streak(cls, v):
        if v < 0:
            raise ValueError("streak cannot be negative")
        return v

    class Config:
        from_attributes = True
