"""Pruebas del store en memoria de asistentes."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from assistant_service.assistants.store import AssistantStore, AssistantStoreError
from assistant_service.core.errors import AssistantNotFoundError

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


class StepClock:
    """Reloj controlado: avanza un segundo en cada lectura salvo que se congele."""

    def __init__(self, start: datetime = BASE, step: timedelta = timedelta(seconds=1)) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now += self.step
        return current


def test_upsert_new_name_creates_record() -> None:
    store = AssistantStore(clock=StepClock())

    record, created = store.upsert("Bot", "Hi")

    assert created is True
    assert record.name == "Bot"
    assert record.response_text == "Hi"
    assert record.created_at == record.updated_at == BASE


def test_upsert_existing_name_preserves_identity_and_created_at() -> None:
    store = AssistantStore(clock=StepClock())
    first, _ = store.upsert("Bot", "Hi")

    second, created = store.upsert("Bot", "Hello again")

    assert created is False
    assert second.id == first.id
    assert second.created_at == first.created_at
    assert second.updated_at > first.updated_at
    assert second.response_text == "Hello again"
    assert store.count() == 1


def test_updated_at_advances_even_when_clock_is_frozen() -> None:
    store = AssistantStore(clock=StepClock(step=timedelta(0)))
    first, _ = store.upsert("Bot", "Hi")

    second, _ = store.upsert("Bot", "Hi")

    assert second.updated_at > first.updated_at
    assert second.created_at == first.created_at


def test_snapshots_are_immutable() -> None:
    store = AssistantStore()
    record, _ = store.upsert("Bot", "Hi")

    with pytest.raises(AttributeError):
        record.response_text = "changed"  # type: ignore[misc]

    store.upsert("Bot", "Bye")
    assert record.response_text == "Hi"


@pytest.mark.parametrize(
    ("name", "text"),
    [("Bot", "Hi"), ("bot", "lowercase"), ("Nombre con espacios", "¡Hola!"), ("a/b", "slash")],
)
def test_find_by_name_returns_stored_text(name: str, text: str) -> None:
    store = AssistantStore()
    store.upsert(name, text)

    found = store.find_by_name(name)

    assert found is not None
    assert found.response_text == text


def test_find_by_name_is_case_sensitive() -> None:
    store = AssistantStore()
    store.upsert("Bot", "Hi")

    assert store.find_by_name("bot") is None
    assert store.exists_by_name("Bot") is True
    assert store.exists_by_name("BOT") is False


def test_list_all_is_newest_first() -> None:
    store = AssistantStore(clock=StepClock())
    for name in ("first", "second", "third"):
        store.upsert(name, f"text {name}")

    assert [record.name for record in store.list_all()] == ["third", "second", "first"]

    store.upsert("fourth", "text")
    assert store.list_all()[0].name == "fourth"


def test_list_all_keeps_order_after_update() -> None:
    store = AssistantStore(clock=StepClock())
    store.upsert("old", "v1")
    store.upsert("new", "v1")

    store.upsert("old", "v2")

    assert [record.name for record in store.list_all()] == ["new", "old"]


def test_list_all_breaks_timestamp_ties_by_insertion() -> None:
    store = AssistantStore(clock=StepClock(step=timedelta(0)))
    store.upsert("a", "x")
    store.upsert("b", "x")

    assert [record.name for record in store.list_all()] == ["b", "a"]


def test_delete_removes_record_and_second_delete_fails() -> None:
    store = AssistantStore()
    store.upsert("Bot", "Hi")

    removed = store.delete_by_name("Bot")

    assert removed.name == "Bot"
    assert store.exists_by_name("Bot") is False
    with pytest.raises(AssistantNotFoundError) as excinfo:
        store.delete_by_name("Bot")
    assert excinfo.value.name == "Bot"


def test_recreated_after_delete_gets_new_identity() -> None:
    store = AssistantStore(clock=StepClock())
    first, _ = store.upsert("Bot", "Hi")
    store.delete_by_name("Bot")

    second, created = store.upsert("Bot", "Hi")

    assert created is True
    assert second.id != first.id
    assert second.created_at > first.created_at


def test_count_matches_list_length() -> None:
    store = AssistantStore()
    assert store.count() == len(store.list_all()) == 0

    store.upsert("a", "x")
    store.upsert("b", "y")
    store.upsert("a", "z")
    assert store.count() == len(store.list_all()) == 2

    store.delete_by_name("a")
    assert store.count() == len(store.list_all()) == 1

    store.clear()
    assert store.count() == len(store.list_all()) == 0


def test_unexpected_faults_become_store_errors() -> None:
    def broken_clock() -> datetime:
        raise ValueError("clock exploded")

    store = AssistantStore(clock=broken_clock)

    with pytest.raises(AssistantStoreError) as excinfo:
        store.upsert("Bot", "Hi")
    assert isinstance(excinfo.value.__cause__, ValueError)
    assert store.count() == 0


def test_concurrent_upserts_of_same_name_report_one_creation() -> None:
    store = AssistantStore()

    def worker(index: int) -> bool:
        _, created = store.upsert("shared", f"text {index}")
        return created

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(worker, range(200)))

    assert results.count(True) == 1
    assert store.count() == 1
    record = store.find_by_name("shared")
    assert record is not None
    assert record.response_text.startswith("text ")


def test_concurrent_distinct_names_get_unique_ids() -> None:
    store = AssistantStore()

    with ThreadPoolExecutor(max_workers=8) as pool:
        records = list(pool.map(lambda i: store.upsert(f"bot-{i}", "x")[0], range(100)))

    assert len({record.id for record in records}) == 100
    assert store.count() == 100
