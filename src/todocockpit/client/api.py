"""Async HTTP client for the ToDo Cockpit API.

Reads go through a :class:`QueryCache`; every mutation either replaces the
affected cache entry with the canonical state returned by the server or
invalidates the entity types it touched, so the next read re-fetches.
"""

import logging
from typing import Any

import httpx

from todocockpit.client.cache import QueryCache, CATEGORIES, LABELS, TODOS
from todocockpit.services.ordering import plan_move

logger = logging.getLogger(__name__)


class ClientError(Exception):
    """Error response from the API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class CockpitClient:
    """Client wrapping the REST endpoints with an explicit query cache."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        cache: QueryCache | None = None,
        prefix: str = "/api",
    ):
        self.http = http
        self.cache = cache if cache is not None else QueryCache()
        self.prefix = prefix

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        response = await self.http.request(method, f"{self.prefix}{path}", **kwargs)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = body.get("error") if isinstance(body, dict) else None
            logger.debug("%s %s failed with %d", method, path, response.status_code)
            raise ClientError(response.status_code, message or response.text)
        return response.json()

    # Categories

    async def list_categories(self) -> list[dict]:
        return await self.cache.get_or_fetch(
            (CATEGORIES,), lambda: self._request("GET", "/categories")
        )

    async def add_category(self, name: str) -> dict:
        category = await self._request("POST", "/categories", json={"name": name})
        self.cache.invalidate(CATEGORIES)
        return category

    async def rename_category(self, category_id: str, name: str) -> dict:
        category = await self._request("PUT", f"/categories/{category_id}", json={"name": name})
        self.cache.invalidate(CATEGORIES)
        return category

    async def delete_category(self, category_id: str) -> None:
        await self._request("DELETE", f"/categories/{category_id}")
        # Todos of the category moved to the inbox
        self.cache.invalidate(CATEGORIES, TODOS)

    async def reorder_categories(self, positions: list[dict]) -> list[dict]:
        categories = await self._request(
            "POST", "/categories/reorder", json={"categories": positions}
        )
        # Invalidate first so a list request still in flight cannot overwrite it
        self.cache.invalidate(CATEGORIES)
        self.cache.set((CATEGORIES,), categories)
        return categories

    async def move_category(self, dragged_id: str, target_id: str) -> list[dict]:
        """Drop one category onto another and persist the new order."""
        order = [category["id"] for category in await self.list_categories()]
        plan = plan_move(order, dragged_id, target_id)
        return await self.reorder_categories([p.as_dict() for p in plan])

    # Labels

    async def list_labels(self) -> list[dict]:
        return await self.cache.get_or_fetch(
            (LABELS,), lambda: self._request("GET", "/labels")
        )

    async def add_label(self, name: str, color: str) -> dict:
        label = await self._request("POST", "/labels", json={"name": name, "color": color})
        self.cache.invalidate(LABELS)
        return label

    async def update_label(self, label_id: str, **fields) -> dict:
        label = await self._request("PUT", f"/labels/{label_id}", json=fields)
        self.cache.invalidate(LABELS)
        return label

    async def delete_label(self, label_id: str) -> None:
        await self._request("DELETE", f"/labels/{label_id}")
        # The label was detached from every todo
        self.cache.invalidate(LABELS, TODOS)

    # Todos

    async def list_todos(self, category_id: str | None = None) -> list[dict]:
        """List todos of one view.

        ``None`` lists every todo, ``""`` the inbox, anything else one
        category.
        """
        if category_id is None:
            fetch = lambda: self._request("GET", "/todos/all")  # noqa: E731
        else:
            fetch = lambda: self._request(  # noqa: E731
                "GET", "/todos", params={"categoryId": category_id}
            )
        return await self.cache.get_or_fetch((TODOS, category_id), fetch)

    async def statistics(self, category_id: str | None = None) -> dict:
        params = {} if category_id is None else {"categoryId": category_id}
        return await self.cache.get_or_fetch(
            (TODOS, "stats", category_id),
            lambda: self._request("GET", "/todos/stats", params=params),
        )

    async def add_todo(self, title: str, **fields) -> dict:
        todo = await self._request("POST", "/todos", json={"title": title, **fields})
        self.cache.invalidate(TODOS)
        return todo

    async def update_todo(self, todo_id: str, **fields) -> dict:
        todo = await self._request("PUT", f"/todos/{todo_id}", json=fields)
        self.cache.invalidate(TODOS)
        return todo

    async def delete_todo(self, todo_id: str) -> None:
        await self._request("DELETE", f"/todos/{todo_id}")
        self.cache.invalidate(TODOS)

    async def reorder_todos(self, positions: list[dict]) -> list[dict]:
        todos = await self._request("POST", "/todos/reorder", json={"todos": positions})
        # The response only holds the moved todos; every view may have changed
        self.cache.invalidate(TODOS)
        return todos

    async def move_todo(self, todos: list[dict], dragged_id: str, target_id: str) -> list[dict]:
        """Drop one todo onto another within ``todos``.

        The dragged todo takes the target's status, so dropping into another
        status column moves it there.
        """
        statuses = {todo["id"]: todo["status"] for todo in todos}
        plan = plan_move([todo["id"] for todo in todos], dragged_id, target_id)
        statuses[dragged_id] = statuses[target_id]
        return await self.reorder_todos(
            [{**p.as_dict(), "status": statuses[p.id]} for p in plan]
        )
