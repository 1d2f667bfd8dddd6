from streakline.domains.habits.models.habit_models import Habit, HabitLog

__all__ = ["Habit", "HabitLog"]
