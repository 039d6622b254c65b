from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class LearningUnitBase(BaseModel):
    word: str
    part_of_speech: str = ""
    definition: str = ""
    example: str = ""

class LearningUnitCreate(LearningUnitBase):
    source: str = "local"

class LearningUnit(LearningUnitBase):
    id: int
    source: str = "local"
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
