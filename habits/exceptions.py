"""
Errors raised by the habit services.
"""


class HabitsError(Exception):
    """Base exception for the habits app"""
    pass


class HabitNotFound(HabitsError):
    """Raised when a habit does not exist or is not owned by the caller"""

    def __init__(self, habit_id):
        self.habit_id = habit_id
        super().__init__(f"Habit with ID {habit_id} not found")
