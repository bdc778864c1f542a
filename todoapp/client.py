"""HTTP client for the task API with a small read-through cache.

The cache is keyed by resource path. Every successful create, update or
delete drops the ``/tasks`` entry and refetches it, so ``tasks()`` reflects
the server after a mutation; if that refetch fails the list is reloaded on
the next read. Failed mutations leave the cache as it was, so callers keep
showing the last good list.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

TASKS_PATH = "/tasks"


class TaskClientError(Exception):
    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {detail}")


class ResourceCache:
    def __init__(self):
        self._entries: Dict[str, Any] = {}

    def get(self, path: str, default=None):
        return self._entries.get(path, default)

    def set(self, path: str, value) -> None:
        self._entries[path] = value

    def invalidate(self, path: str) -> None:
        self._entries.pop(path, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, path: str) -> bool:
        return path in self._entries


class TaskClient:
    def __init__(self, http: httpx.Client, token: Optional[str] = None, cache: Optional[ResourceCache] = None):
        self.http = http
        self.token = token
        self.cache = cache if cache is not None else ResourceCache()

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _request(self, method: str, path: str, **kwargs):
        try:
            r = self.http.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise TaskClientError(0, "Network error, please retry") from exc
        if r.is_error:
            try:
                detail = r.json().get("detail", r.text)
            except ValueError:
                detail = r.text
            raise TaskClientError(r.status_code, detail)
        return r.json()

    def _refresh_list(self) -> None:
        # the write already happened: a failed refetch must not fail the mutation
        self.cache.invalidate(TASKS_PATH)
        try:
            self.tasks()
        except TaskClientError as exc:
            logger.warning("refetch of %s failed, will reload on next read: %s", TASKS_PATH, exc)

    def tasks(self, refresh: bool = False) -> List[dict]:
        if not refresh and TASKS_PATH in self.cache:
            return self.cache.get(TASKS_PATH)
        data = self._request("GET", TASKS_PATH)
        self.cache.set(TASKS_PATH, data)
        return data

    def create(self, title: str, description: Optional[str] = None) -> dict:
        body = {"title": title}
        if description is not None:
            body["description"] = description
        task = self._request("POST", TASKS_PATH, json=body)
        self._refresh_list()
        return task

    def update(self, task_id: str, **changes) -> dict:
        task = self._request("PATCH", f"{TASKS_PATH}/{task_id}", json=changes)
        self._refresh_list()
        return task

    def toggle(self, task: dict) -> dict:
        # computed from the caller's last known state
        return self.update(task["id"], completed=not task["completed"])

    def delete(self, task_id: str) -> dict:
        result = self._request("DELETE", f"{TASKS_PATH}/{task_id}")
        self._refresh_list()
        return result
