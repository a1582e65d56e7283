from .task import Priority, Recurrence, Task
from .user import User

# Export all models for easy importing
__all__ = ["Task", "User", "Priority", "Recurrence"]
