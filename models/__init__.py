from .learner import Learner, LearnerCreate, LearnerStreak
from .unit import LearningUnit, LearningUnitCreate
from .scheduled_item import ScheduledItem

__all__ = ['Learner', 'LearnerCreate', 'LearnerStreak', 'LearningUnit', 'LearningUnitCreate', 'ScheduledItem']
