from pydantic import BaseModel, root_validator, validator
from typing import Optional
from datetime import datetime

class ScheduledItem(BaseModel):
    """One learning unit assigned to one learner, with its review schedule.

    ``interval`` is in days. Stored rows can carry a zero interval from older
    data; the interval policy clamps it on the next review.
    """
    id: int
    learner_id: int
    unit_id: int
    served_at: datetime
    next_review: datetime
    interval: Optional[int] = None
    last_response: Optional[str] = None
    correct_count: int = 0
    served_index: int = 1

    @validator('correct_count')
    def validate_correct_count(cls, v):
        if v < 0:
            raise ValueError("correct_count cannot be negative")
        return v

    @root_validator(skip_on_failure=True)
    def validate_review_after_serve(cls, values):
        served_at = values.get('served_at')
        next_review = values.get('next_review')
        if served_at and next_review and next_review < served_at:
            raise ValueError("next_review must not precede served_at")
        return values

    class Config:
        from_attributes = True
        frozen = True
