"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import Any

import pytest

from spendkit.brex.core import EntityKind, NotFoundError
from spendkit.brex.runtime.paging import PageRequest, PageResponse


class FakePageSource:
    """In-memory PageSource serving offset cursors over fixed item lists."""

    def __init__(
        self,
        items: dict[EntityKind, list[Any]] | None = None,
        *,
        objects: dict[str, Any] | None = None,
    ) -> None:
        self.items = items or {}
        self.objects = objects or {}
        self.page_requests: list[tuple[EntityKind, PageRequest]] = []
        self.item_requests: list[tuple[EntityKind, str, dict[str, Any]]] = []

    async def fetch_page(self, kind: EntityKind, request: PageRequest) -> PageResponse:
        self.page_requests.append((kind, request))
        data = self.items.get(kind, [])
        offset = int(request.cursor or 0)
        end = offset + request.limit
        return PageResponse(
            items=list(data[offset:end]),
            next_cursor=str(end) if end < len(data) else None,
        )

    async def fetch_one(self, kind: EntityKind, item_id: str, params=None) -> Any:
        self.item_requests.append((kind, item_id, dict(params or {})))
        if item_id not in self.objects:
            raise NotFoundError(f"{kind.value} {item_id} not found")
        return self.objects[item_id]


def make_expense(index: int, *, amount: float = 10.0, merchant: str = "ACME", **extra: Any):
    expense = {
        "id": f"exp_{index}",
        "updated_at": f"2025-08-0{1 + index % 9}T12:00:00Z",
        "status": "APPROVED",
        "purchased_amount": {"amount": amount, "currency": "USD"},
        "merchant": {"raw_descriptor": merchant, "mcc": "5812"},
    }
    expense.update(extra)
    return expense


@pytest.fixture
def fake_source_cls():
    return FakePageSource


@pytest.fixture
def expense_factory():
    return make_expense
