"""HTTP client for the Taskbell API.

Lets a session (a script, a desktop widget, a test) drive a
NotificationCenter against a running server instead of the database:

    async with TaskbellClient("http://localhost:8000/api") as client:
        center = NotificationCenter(ApiNotificationStore(client))
        await poll_once(center, client.fetch_all_todos)
"""
from typing import Any

import httpx

from taskbell.errors import NotificationStoreError, TodoNotFoundError
from taskbell.schemas.notification import NotificationResponse


class TaskbellClient:
    """Thin async wrapper over the todo and notification endpoints."""

    def __init__(
        self,
        base_url: str,
        http: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "TaskbellClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        response = await self._http.request(method, url, **kwargs)
        response.raise_for_status()
        return response.json()

    # Todos

    async def list_todos(self, skip: int = 0, limit: int = 10) -> dict:
        """One page: ``{"todos": [...], "pagination": {...}}``."""
        return await self._request("GET", "/todos", params={"skip": skip, "limit": limit})

    async def fetch_all_todos(self, page_size: int = 100) -> list[dict]:
        """Every todo, following ``pagination.has_more``."""
        todos = []
        skip = 0
        while True:
            page = await self.list_todos(skip=skip, limit=page_size)
            todos.extend(page["todos"])
            pagination = page["pagination"]
            if not pagination["has_more"]:
                return todos
            skip += pagination["limit"]

    async def create_todo(self, **fields) -> dict:
        return await self._request("POST", "/todos", json=fields)

    async def update_todo(self, todo_id: str, **fields) -> dict:
        try:
            return await self._request("PUT", f"/todos/{todo_id}", json=fields)
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                raise TodoNotFoundError(todo_id) from exc
            raise

    async def delete_todo(self, todo_id: str) -> None:
        try:
            await self._request("DELETE", f"/todos/{todo_id}")
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                raise TodoNotFoundError(todo_id) from exc
            raise

    # Notifications

    async def list_notifications(self) -> list[dict]:
        return await self._request("GET", "/notifications")

    async def create_notification(self, payload: dict) -> dict:
        return await self._request("POST", "/notifications", json=payload)

    async def update_notifications(self, payload: dict) -> dict:
        return await self._request("PUT", "/notifications", json=payload)

    async def mark_notification_read(self, notification_id: str) -> dict | None:
        """Mark one notification read. Returns None when the server no longer has it."""
        try:
            return await self.update_notifications({"id": notification_id})
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                return None
            raise

    async def delete_notifications(self, notification_id: str | None = None) -> dict:
        params = {"id": notification_id} if notification_id else None
        return await self._request("DELETE", "/notifications", params=params)


class ApiNotificationStore:
    """NotificationStore backed by the notification endpoints."""

    def __init__(self, client: TaskbellClient):
        self._client = client

    async def _call(self, operation: str, coro):
        try:
            return await coro
        except (httpx.HTTPError, ValueError) as exc:
            raise NotificationStoreError(f"{operation} failed: {exc}") from exc

    def _parse(self, operation: str, data) -> NotificationResponse:
        try:
            return NotificationResponse.model_validate(data)
        except ValueError as exc:
            raise NotificationStoreError(f"{operation} returned an unexpected body") from exc

    async def list(self) -> list[NotificationResponse]:
        data = await self._call("list notifications", self._client.list_notifications())
        if not isinstance(data, list):
            raise NotificationStoreError("list notifications returned an unexpected body")
        return [self._parse("list notifications", item) for item in data]

    async def create_if_absent(
        self,
        notification_type: str,
        task_id: str,
        title: str,
        message: str,
        task_title: str,
    ) -> NotificationResponse:
        data = await self._call(
            "create notification",
            self._client.create_notification({
                "type": notification_type,
                "task_id": task_id,
                "title": title,
                "message": message,
                "task_title": task_title,
            }),
        )
        return self._parse("create notification", data)

    async def mark_read(self, notification_id: str) -> None:
        await self._call("mark notification read", self._client.mark_notification_read(notification_id))

    async def mark_all_read(self) -> None:
        await self._call("mark all notifications read", self._client.update_notifications({"mark_all_read": True}))

    async def delete(self, notification_id: str) -> None:
        await self._call("delete notification", self._client.delete_notifications(notification_id))

    async def delete_all(self) -> None:
        await self._call("delete all notifications", self._client.delete_notifications())
