from datetime import date
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from sqlalchemy.orm import Session

from ..database import get_db, require_store_ready
from ..errors import ValidationError
from ..schemas.task import DashboardSummary, Task as TaskSchema, TaskCreate, TaskUpdate, parse_due_date
from ..services import tasks as task_service

router = APIRouter(dependencies=[Depends(require_store_ready)])


def _parse_day(value: str) -> date:
    """Calendar day of an ISO date or datetime, in server-local time."""
    try:
        return parse_due_date(value).date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value}")


@router.get("/tasks", response_model=List[TaskSchema])
def get_tasks(db: Session = Depends(get_db)):
    """All tasks ordered by due date."""
    return task_service.list_all(db)


@router.get("/tasks/date/{day}", response_model=List[TaskSchema])
def get_tasks_for_date(day: str, db: Session = Depends(get_db)):
    """Tasks due on the given calendar day."""
    return task_service.list_by_date(db, _parse_day(day))


@router.get("/dashboard-summary", response_model=DashboardSummary)
def get_dashboard_summary(db: Session = Depends(get_db)):
    return task_service.dashboard_summary(db)


@router.post("/tasks", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """Create a new task. Recurring tasks also trigger a notification email."""
    return task_service.create_task(db, task, background_tasks)


@router.put("/tasks/{task_id}", response_model=TaskSchema)
def update_task(task_id: str, task_update: TaskUpdate, db: Session = Depends(get_db)):
    """Replace the provided fields of a task."""
    return task_service.update_task(db, task_id, task_update)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, db: Session = Depends(get_db)):
    task_service.delete_task(db, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
