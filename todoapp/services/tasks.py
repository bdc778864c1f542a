"""Per-user task operations.

Every function takes the request's principal (the authenticated user id, or
None) and is the only code that reads or writes the ``tasks`` table. Lookups
for a single task always filter on id and owner together, so a task owned by
someone else is reported exactly like a missing one.
"""
import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from todoapp.errors import NotFound, StoreFailure, Unauthorized, ValidationError
from todoapp.models.task import Task, utcnow

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "completed")


def _require_principal(principal: Optional[str]) -> str:
    if not principal:
        raise Unauthorized()
    return principal


def _clean_title(title) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("title", "title cannot be empty")
    return title.strip()


def _store_failure(db: Session, action: str) -> StoreFailure:
    db.rollback()
    logger.exception("task store failure while %s", action)
    return StoreFailure()


def _owned(db: Session, principal: str, task_id: str):
    return db.query(Task).filter(Task.id == task_id, Task.user_id == principal)


def list_tasks(db: Session, principal: Optional[str]) -> list:
    principal = _require_principal(principal)
    try:
        return (
            db.query(Task)
            .filter(Task.user_id == principal)
            .order_by(Task.created_at.asc(), Task.id.asc())
            .all()
        )
    except SQLAlchemyError:
        raise _store_failure(db, "listing tasks")


def create_task(db: Session, principal: Optional[str], title, description: Optional[str] = None) -> Task:
    principal = _require_principal(principal)
    title = _clean_title(title)
    now = utcnow()
    task = Task(
        title=title,
        description=description or None,
        completed=False,
        user_id=principal,
        created_at=now,
        updated_at=now,
    )
    try:
        db.add(task)
        db.commit()
        db.refresh(task)
    except SQLAlchemyError:
        raise _store_failure(db, "creating a task")
    logger.info("task created id=%s user=%s", task.id, principal)
    return task


def update_task(db: Session, principal: Optional[str], task_id: str, patch: dict) -> Task:
    """Apply the fields present in ``patch`` to the caller's task.

    ``description`` may be set to None or "". A None ``title`` or
    ``completed`` is treated as absent.
    """
    principal = _require_principal(principal)
    changes = {k: v for k, v in patch.items() if k in UPDATABLE_FIELDS}
    if changes.get("title") is not None:
        changes["title"] = _clean_title(changes["title"])
    for key in ("title", "completed"):
        if key in changes and changes[key] is None:
            del changes[key]

    try:
        task = _owned(db, principal, task_id).first()
        if task is None:
            raise NotFound()
        for key, value in changes.items():
            setattr(task, key, value)
        # strictly later than the previous write, even on a coarse clock
        task.updated_at = max(utcnow(), task.updated_at + timedelta(microseconds=1))
        db.commit()
        db.refresh(task)
    except SQLAlchemyError:
        raise _store_failure(db, "updating task %s" % task_id)
    logger.info("task updated id=%s user=%s fields=%s", task_id, principal, sorted(changes))
    return task


def delete_task(db: Session, principal: Optional[str], task_id: str) -> None:
    principal = _require_principal(principal)
    try:
        deleted = _owned(db, principal, task_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError:
        raise _store_failure(db, "deleting task %s" % task_id)
    if not deleted:
        raise NotFound()
    logger.info("task deleted id=%s user=%s", task_id, principal)
