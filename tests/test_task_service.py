"""Test TaskService against an in-memory store."""
from datetime import timedelta

import pytest
from sqlalchemy import func, select

from core.errors import NotFound, ValidationFailed
from verticals.accounts.repository import UserRepository
from verticals.tasks.models.db_models import Task


def due(clock, days: int = 1) -> str:
    return (clock.now + timedelta(days=days)).isoformat()


@pytest.mark.asyncio
async def test_create_scenario(service, alice, clock):
    task = await service.create_task(
        alice.id, {"title": "Pay rent", "end_date": due(clock), "priority": "high"}
    )
    assert task["title"] == "Pay rent"
    assert task["priority"] == "high"
    assert task["completed"] is False
    assert task["isOverdue"] is False
    assert task["owner_id"] == str(alice.id)


@pytest.mark.asyncio
async def test_create_defaults_priority(service, alice, clock):
    task = await service.create_task(alice.id, {"title": "t", "end_date": due(clock)})
    assert task["priority"] == "medium"


@pytest.mark.asyncio
async def test_create_forces_owner(service, alice, bob, clock):
    task = await service.create_task(
        alice.id, {"title": "t", "end_date": due(clock), "owner_id": str(bob.id)}
    )
    assert task["owner_id"] == str(alice.id)


@pytest.mark.asyncio
async def test_create_rejects_past_end_date(service, alice, clock):
    with pytest.raises(ValidationFailed) as exc_info:
        await service.create_task(alice.id, {"title": "t", "end_date": due(clock, -2)})
    assert exc_info.value.fields == ["end_date"]


@pytest.mark.asyncio
async def test_overdue_is_derived_on_every_read(service, alice, clock):
    task = await service.create_task(alice.id, {"title": "t", "end_date": due(clock)})
    clock.advance(days=3)

    first = await service.get_task(alice.id, task["id"])
    second = await service.get_task(alice.id, task["id"])
    assert first["isOverdue"] is True
    assert second["isOverdue"] is True

    done = await service.update_task(alice.id, task["id"], {"completed": True})
    assert done["isOverdue"] is False

    reopened = await service.update_task(
        alice.id, task["id"], {"completed": False, "end_date": due(clock, 5)}
    )
    assert reopened["isOverdue"] is False


@pytest.mark.asyncio
async def test_update_allows_past_end_date(service, alice, clock):
    task = await service.create_task(alice.id, {"title": "t", "end_date": due(clock)})
    updated = await service.update_task(alice.id, task["id"], {"end_date": due(clock, -3)})
    assert updated["isOverdue"] is True


@pytest.mark.asyncio
async def test_partial_update_preserves_other_fields(service, alice, clock):
    task = await service.create_task(
        alice.id,
        {"title": "Pay rent", "description": "by the 1st", "priority": "low", "end_date": due(clock)},
    )
    updated = await service.update_task(alice.id, task["id"], {"completed": True})

    assert updated["completed"] is True
    for key in ("title", "description", "priority", "end_date", "created_at"):
        assert updated[key] == task[key]


@pytest.mark.asyncio
async def test_list_pagination(service, alice, clock):
    for i in range(25):
        await service.create_task(alice.id, {"title": f"task {i}", "end_date": due(clock)})

    page = await service.list_tasks(alice.id, {"limit": "10", "page": "3"})
    assert page.total == 25
    assert page.total_pages == 3
    assert page.current_page == 3
    assert page.count == 5

    first = await service.list_tasks(alice.id, {"limit": "10"})
    assert first.count == 10
    assert first.count <= first.limit


@pytest.mark.asyncio
async def test_list_pages_do_not_overlap(service, alice, clock):
    for i in range(7):
        await service.create_task(alice.id, {"title": f"task {i}", "end_date": due(clock)})

    seen = []
    for page_no in (1, 2, 3):
        page = await service.list_tasks(
            alice.id, {"limit": "3", "page": str(page_no), "sortBy": "title", "sortOrder": "ASC"}
        )
        seen.extend(t["id"] for t in page.items)
    assert len(seen) == 7
    assert len(set(seen)) == 7


@pytest.mark.asyncio
async def test_list_filters(service, alice, clock):
    await service.create_task(alice.id, {"title": "a", "priority": "high", "end_date": due(clock), "completed": True})
    await service.create_task(alice.id, {"title": "b", "priority": "high", "end_date": due(clock)})
    await service.create_task(alice.id, {"title": "c", "priority": "low", "end_date": due(clock), "completed": True})

    page = await service.list_tasks(alice.id, {"completed": "true", "priority": "high"})
    assert [t["title"] for t in page.items] == ["a"]
    assert page.total == page.count == 1

    open_tasks = await service.list_tasks(alice.id, {"completed": "false"})
    assert [t["title"] for t in open_tasks.items] == ["b"]


@pytest.mark.asyncio
async def test_priority_sorts_by_severity(service, alice, clock):
    for title, priority in (("m", "medium"), ("h", "high"), ("l", "low")):
        await service.create_task(alice.id, {"title": title, "priority": priority, "end_date": due(clock)})

    asc = await service.list_tasks(alice.id, {"sortBy": "priority", "sortOrder": "ASC"})
    assert [t["priority"] for t in asc.items] == ["low", "medium", "high"]

    desc = await service.list_tasks(alice.id, {"sortBy": "priority", "sortOrder": "DESC"})
    assert [t["priority"] for t in desc.items] == ["high", "medium", "low"]


@pytest.mark.asyncio
async def test_sort_by_end_date(service, alice, clock):
    await service.create_task(alice.id, {"title": "later", "end_date": due(clock, 5)})
    await service.create_task(alice.id, {"title": "sooner", "end_date": due(clock, 1)})

    page = await service.list_tasks(alice.id, {"sortBy": "end_date", "sortOrder": "ASC"})
    assert [t["title"] for t in page.items] == ["sooner", "later"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "sort_by, ascending",
    [
        ("created_at", ["first", "second", "third"]),
        ("end_date", ["second", "third", "first"]),
        ("priority", ["third", "first", "second"]),
        ("title", ["first", "second", "third"]),
    ],
)
async def test_each_sort_field_orders_both_ways(service, alice, clock, sort_by, ascending):
    # Created in this order; end dates and priorities deliberately disagree.
    for title, days, priority in (
        ("first", 9, "medium"),
        ("second", 1, "high"),
        ("third", 5, "low"),
    ):
        await service.create_task(
            alice.id, {"title": title, "end_date": due(clock, days), "priority": priority}
        )

    asc = await service.list_tasks(alice.id, {"sortBy": sort_by, "sortOrder": "asc"})
    assert [t["title"] for t in asc.items] == ascending

    desc = await service.list_tasks(alice.id, {"sortBy": sort_by, "sortOrder": "DESC"})
    assert [t["title"] for t in desc.items] == ascending[::-1]


@pytest.mark.asyncio
async def test_empty_list(service, alice):
    page = await service.list_tasks(alice.id, {})
    assert page.items == []
    assert page.total == 0
    assert page.total_pages == 0


@pytest.mark.asyncio
async def test_ownership_isolation(service, alice, bob, clock):
    task = await service.create_task(alice.id, {"title": "private", "end_date": due(clock)})

    assert (await service.list_tasks(bob.id, {})).total == 0
    with pytest.raises(NotFound):
        await service.get_task(bob.id, task["id"])
    with pytest.raises(NotFound):
        await service.update_task(bob.id, task["id"], {"title": "mine now"})
    with pytest.raises(NotFound):
        await service.delete_task(bob.id, task["id"])

    still_there = await service.get_task(alice.id, task["id"])
    assert still_there["title"] == "private"


@pytest.mark.asyncio
async def test_ownership_checked_before_validation(service, alice, bob, clock):
    task = await service.create_task(alice.id, {"title": "t", "end_date": due(clock)})
    with pytest.raises(NotFound):
        await service.update_task(bob.id, task["id"], {"priority": "bogus"})


@pytest.mark.asyncio
async def test_delete_then_get(service, alice, clock):
    task = await service.create_task(alice.id, {"title": "t", "end_date": due(clock)})
    await service.delete_task(alice.id, task["id"])
    with pytest.raises(NotFound):
        await service.get_task(alice.id, task["id"])


@pytest.mark.asyncio
async def test_malformed_id_is_not_found(service, alice):
    with pytest.raises(NotFound) as exc_info:
        await service.get_task(alice.id, "not-a-uuid")
    assert exc_info.value.message == "Task not found"


@pytest.mark.asyncio
async def test_deleting_user_cascades_to_tasks(service, session, alice, bob, clock):
    await service.create_task(alice.id, {"title": "a1", "end_date": due(clock)})
    await service.create_task(alice.id, {"title": "a2", "end_date": due(clock)})
    await service.create_task(bob.id, {"title": "b1", "end_date": due(clock)})

    await UserRepository(session).delete(alice)

    remaining = await session.execute(select(func.count()).select_from(Task))
    assert remaining.scalar() == 1
