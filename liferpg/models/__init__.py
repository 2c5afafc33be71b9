from .user import User
from .action import Action, LogEntry, Block, Difficulty
from .habit import Habit, HabitLog, HabitFrequency
from .kanban import KanbanTask, KanbanStatus, TaskOwner
from .energy import EnergyLog, EnergyEvent
from .reward import Reward
from .checkin import DailyCheckin

__all__ = [
    "User",
    "Action",
    "LogEntry",
    "Block",
    "Difficulty",
    "Habit",
    "HabitLog",
    "HabitFrequency",
    "KanbanTask",
    "KanbanStatus",
    "TaskOwner",
    "EnergyLog",
    "EnergyEvent",
    "Reward",
    "DailyCheckin",
]
