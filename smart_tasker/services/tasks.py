import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..mailer import send_recurring_task_email
from ..models import Priority, Recurrence, Task as TaskModel
from ..models.task import utcnow
from ..notifications import TASK_ADDED, TASK_DELETED, TASK_UPDATED, manager
from ..schemas.task import Task as TaskSchema, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


def task_payload(task: TaskModel) -> dict:
    """JSON-ready copy of a task as clients see it."""
    return TaskSchema.model_validate(task).model_dump(mode="json", by_alias=True)


def _day_bounds(day: date):
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def _ordered(query):
    return query.order_by(TaskModel.due_date.asc())


def get_task_or_404(db: Session, task_id: str) -> TaskModel:
    task = db.query(TaskModel).filter(TaskModel.id == task_id).first()
    if not task:
        raise NotFoundError("Task not found")
    return task


def list_all(db: Session) -> List[TaskModel]:
    return _ordered(db.query(TaskModel)).all()


def list_by_date(db: Session, day: date) -> List[TaskModel]:
    """Tasks due within ``[day 00:00, day+1 00:00)`` server-local time."""
    start, end = _day_bounds(day)
    query = db.query(TaskModel).filter(TaskModel.due_date >= start, TaskModel.due_date < end)
    return _ordered(query).all()


def dashboard_summary(db: Session, today: Optional[date] = None) -> dict:
    """The four dashboard views. They overlap; a task can appear in several."""
    today = today or date.today()
    return {
        "scheduledTasks": list_all(db),
        "deadlineReminders": list_by_date(db, today),
        "recurringTasks": _ordered(
            db.query(TaskModel).filter(TaskModel.recurrence != Recurrence.NONE)
        ).all(),
        "highPriorityTasks": _ordered(
            db.query(TaskModel).filter(TaskModel.priority == Priority.HIGH)
        ).all(),
    }


def create_task(db: Session, data: TaskCreate, background_tasks: BackgroundTasks) -> TaskModel:
    """Persist a task, announce it, and queue the recurring-task email."""
    task = TaskModel(
        title=data.title,
        priority=data.priority,
        category=data.category,
        due_date=data.due_date,
        recurrence=data.recurrence,
    )
    db.add(task)
    db.commit()
    db.refresh(task)

    payload = task_payload(task)
    manager.broadcast(TASK_ADDED, payload)

    if task.recurrence != Recurrence.NONE:
        background_tasks.add_task(send_recurring_task_email, dict(payload))

    logger.info("Created task %s (%s)", task.id, task.title)
    return task


def update_task(db: Session, task_id: str, data: TaskUpdate) -> TaskModel:
    task = get_task_or_404(db, task_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(task, field, value)
    task.updated_at = utcnow()

    db.commit()
    db.refresh(task)

    manager.broadcast(TASK_UPDATED, task_payload(task))
    logger.info("Updated task %s", task.id)
    return task


def delete_task(db: Session, task_id: str) -> dict:
    """Delete a task and return its last known state."""
    task = get_task_or_404(db, task_id)
    snapshot = task_payload(task)

    db.delete(task)
    db.commit()

    manager.broadcast(TASK_DELETED, snapshot)
    logger.info("Deleted task %s", task_id)
    return snapshot
