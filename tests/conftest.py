"""Shared test fixtures."""

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import date
from itertools import count
from typing import Any

import pytest

from freshplan.config import Settings
from freshplan.containers import AppContainer
from freshplan.domain.ingredients import Ingredient
from freshplan.services.sessions import SessionRegistry
from freshplan.services.sync import (
    CollectionKind,
    SnapshotCallback,
    Subscription,
    SyncAdapter,
)

TODAY = date(2024, 5, 10)


def make_ingredient(**overrides: Any) -> Ingredient:
    values: dict[str, Any] = {
        "id": "ing-1",
        "name": "Milk",
        "category": "Dairy",
        "quantity": 1.0,
        "unit": "l",
        "expiry_date": TODAY,
        "added_date": TODAY,
        "tags": ("fridge",),
    }
    values.update(overrides)
    return Ingredient(**values)


@dataclass(eq=False)
class FakeSubscription(Subscription):
    """Feed handle recorded by the in-memory adapter."""

    adapter: "InMemorySyncAdapter" = field(repr=False)
    kind: CollectionKind
    callback: SnapshotCallback
    active: bool = True

    def cancel(self) -> None:
        self.active = False
        self.adapter.cancelled.append(self.kind)


@dataclass
class InMemorySyncAdapter(SyncAdapter):
    """In-memory sync adapter that pushes snapshots after every write."""

    user_id: str = "user-1"
    records: dict[CollectionKind, list[Any]] = field(
        default_factory=lambda: {kind: [] for kind in CollectionKind}
    )
    subscriptions: list[FakeSubscription] = field(default_factory=list)
    cancelled: list[CollectionKind] = field(default_factory=list)
    fail_with: Exception | None = None
    _ids: count = field(default_factory=lambda: count(1))

    def create(self, kind: CollectionKind, record: Any) -> str:
        self._maybe_fail()
        record_id = f"{kind}-{next(self._ids)}"
        self.records[kind].insert(0, replace(record, id=record_id))
        self.publish(kind)
        return record_id

    def update(
        self, kind: CollectionKind, record_id: str, changes: dict[str, object]
    ) -> None:
        self._maybe_fail()
        self.records[kind] = [
            replace(record, **changes) if record.id == record_id else record
            for record in self.records[kind]
        ]
        self.publish(kind)

    def delete(self, kind: CollectionKind, record_id: str) -> None:
        self._maybe_fail()
        self.records[kind] = [
            record for record in self.records[kind] if record.id != record_id
        ]
        self.publish(kind)

    def batch_replace(self, kind: CollectionKind, records: Sequence[Any]) -> None:
        self._maybe_fail()
        if kind is CollectionKind.MEAL_PLANS:
            dates = {plan.date for plan in records}
            kept = [plan for plan in self.records[kind] if plan.date not in dates]
        elif kind is CollectionKind.SHOPPING_LIST:
            kept = []
        else:
            raise ValueError(f"Batch replace is not supported for {kind}")
        created = [
            replace(record, id=f"{kind}-{next(self._ids)}") for record in records
        ]
        self.records[kind] = kept + created
        if kind is CollectionKind.MEAL_PLANS:
            self.records[kind].sort(key=lambda plan: plan.date)
        self.publish(kind)

    def fetch(self, kind: CollectionKind) -> list[Any]:
        return list(self.records[kind])

    def subscribe(
        self, kind: CollectionKind, callback: SnapshotCallback
    ) -> Subscription:
        self._maybe_fail()
        subscription = FakeSubscription(adapter=self, kind=kind, callback=callback)
        self.subscriptions.append(subscription)
        callback(self.fetch(kind))
        return subscription

    def publish(self, kind: CollectionKind) -> None:
        for subscription in self.subscriptions:
            if subscription.kind is kind and subscription.active:
                subscription.callback(self.fetch(kind))

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with


@dataclass
class AdapterFactory:
    """Hands out one in-memory adapter per user and remembers them."""

    adapters: dict[str, InMemorySyncAdapter] = field(default_factory=dict)

    def __call__(self, user_id: str) -> InMemorySyncAdapter:
        adapter = InMemorySyncAdapter(user_id=user_id)
        self.adapters[user_id] = adapter
        return adapter


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
    )


@pytest.fixture
def adapter_factory() -> AdapterFactory:
    return AdapterFactory()


@pytest.fixture
def container(settings: Settings, adapter_factory: AdapterFactory) -> AppContainer:
    session_registry = SessionRegistry(
        adapter_factory=adapter_factory, today=lambda: TODAY
    )

    async def close_resources() -> None:
        session_registry.close_all()

    return AppContainer(
        settings=settings,
        session_registry=session_registry,
        close_resources=close_resources,
    )
