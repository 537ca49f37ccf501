"""Tests for AuditLogRepository listing."""

import pytest
import pytest_asyncio

from memberdesk.infrastructure.persistence.repositories import AuditLogRepository


@pytest_asyncio.fixture
async def repo(db_session) -> AuditLogRepository:
    repo = AuditLogRepository(db_session)
    await repo.record("create", "members", "m-1", user_id="admin-1")
    await repo.record("update", "members", "m-1", user_id="admin-1", severity="warning")
    await repo.record("create", "collectors", "c-1", user_id="admin-2")
    await repo.record("update", "members", "m-2")
    await db_session.commit()
    return repo


@pytest.mark.asyncio
async def test_newest_first_with_total(repo):
    entries, total = await repo.list_logs()

    assert total == 4
    assert [(e.table_name, e.record_id) for e in entries] == [
        ("members", "m-2"),
        ("collectors", "c-1"),
        ("members", "m-1"),
        ("members", "m-1"),
    ]
    assert entries[-1].operation == "create"


@pytest.mark.asyncio
async def test_filters_combine(repo):
    entries, total = await repo.list_logs(table_name="members", record_id="m-1")
    assert total == 2

    entries, total = await repo.list_logs(user_id="admin-1", severity="warning")
    assert total == 1
    assert entries[0].operation == "update"

    _, total = await repo.list_logs(operation="create")
    assert total == 2


@pytest.mark.asyncio
async def test_paging_keeps_full_total(repo):
    entries, total = await repo.list_logs(skip=1, limit=2)

    assert total == 4
    assert [e.record_id for e in entries] == ["c-1", "m-1"]
