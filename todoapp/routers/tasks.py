from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from todoapp.database import get_db
from todoapp.schemas.task import TaskCreate, TaskOut, TaskUpdate
from todoapp.services import tasks as service
from todoapp.utils.auth import require_principal

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=List[TaskOut])
def list_tasks(db: Session = Depends(get_db), principal: str = Depends(require_principal)):
    return service.list_tasks(db, principal)


@router.post("", response_model=TaskOut, status_code=201)
def create_task(task: TaskCreate, db: Session = Depends(get_db), principal: str = Depends(require_principal)):
    return service.create_task(db, principal, task.title, task.description)


@router.patch("/{task_id}", response_model=TaskOut)
def update_task(task_id: str, patch: TaskUpdate, db: Session = Depends(get_db), principal: str = Depends(require_principal)):
    return service.update_task(db, principal, task_id, patch.changes())


@router.delete("/{task_id}")
def delete_task(task_id: str, db: Session = Depends(get_db), principal: str = Depends(require_principal)):
    service.delete_task(db, principal, task_id)
    return {"detail": "deleted", "id": task_id}
