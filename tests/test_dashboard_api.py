from __future__ import annotations

import pytest
from httpx import AsyncClient

from teamflow.db import Database
from teamflow.models import Activity, User


@pytest.mark.asyncio
async def test_stats_use_camel_case_and_count_every_task(client: AsyncClient, create_user, auth_headers) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")
    bob = await create_user("Bob Stone", "bob@example.com")
    ann_headers = auth_headers(ann)
    team_id = (await client.post("/api/teams", json={"title": "Private"}, headers=ann_headers)).json()["id"]
    for status in ("TODO", "TODO", "IN_PROGRESS", "DONE"):
        await client.post("/api/tasks", json={"title": status, "status": status, "team_id": team_id}, headers=ann_headers)

    response = await client.get("/api/dashboard/stats", headers=auth_headers(bob))

    assert response.status_code == 200
    assert response.json() == {"totalTasks": 4, "todo": 2, "inProgress": 1, "completed": 1}


@pytest.mark.asyncio
async def test_stats_on_empty_database(client: AsyncClient, create_user, auth_headers) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")

    response = await client.get("/api/dashboard/stats", headers=auth_headers(ann))

    assert response.json() == {"totalTasks": 0, "todo": 0, "inProgress": 0, "completed": 0}


@pytest.mark.asyncio
async def test_activity_feed_defaults_to_five_newest(client: AsyncClient, create_user, auth_headers) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")
    headers = auth_headers(ann)
    for index in range(7):
        await client.post("/api/tasks", json={"title": f"Task {index}"}, headers=headers)

    feed = (await client.get("/api/dashboard/activity", headers=headers)).json()

    assert len(feed) == 5
    assert feed[0]["action"].startswith("Task created: Task 6")
    assert feed[-1]["action"].startswith("Task created: Task 2")
    assert {entry["user_name"] for entry in feed} == {"Ann Lee"}


@pytest.mark.asyncio
async def test_activity_feed_limit_parameter(client: AsyncClient, create_user, auth_headers) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")
    headers = auth_headers(ann)
    for index in range(3):
        await client.post("/api/tasks", json={"title": f"Task {index}"}, headers=headers)

    two = await client.get("/api/dashboard/activity", params={"limit": 2}, headers=headers)
    too_many = await client.get("/api/dashboard/activity", params={"limit": 51}, headers=headers)
    zero = await client.get("/api/dashboard/activity", params={"limit": 0}, headers=headers)

    assert len(two.json()) == 2
    assert too_many.status_code == 400
    assert zero.status_code == 400


@pytest.mark.asyncio
async def test_activity_feed_resolves_names(
    client: AsyncClient,
    database: Database,
    create_user,
    auth_headers,
) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")
    async with database.session() as session:
        session.add(Activity(action="Nightly cleanup"))
        session.add(Activity(action="Old entry", user_name="Former Name", user_id=ann.id))
        await session.commit()
        stored = await session.get(User, ann.id)
        stored.name = "Ann Renamed"
        await session.commit()

    feed = (await client.get("/api/dashboard/activity", headers=auth_headers(ann))).json()

    names = {entry["action"]: entry["user_name"] for entry in feed}
    assert names["Nightly cleanup"] == "Unknown User"
    assert names["Old entry"] == "Ann Renamed"


@pytest.mark.asyncio
async def test_quick_task_and_team(client: AsyncClient, create_user, auth_headers) -> None:
    ann = await create_user("Ann Lee", "ann@example.com")
    headers = auth_headers(ann)

    task = await client.post("/api/dashboard/task", json={"title": " Call vendor "}, headers=headers)
    team = await client.post("/api/dashboard/team", json={"title": "Ops", "color": "#123456"}, headers=headers)
    blank = await client.post("/api/dashboard/task", json={"title": ""}, headers=headers)

    assert task.status_code == 201
    assert task.json()["message"] == "Task saved."
    assert team.status_code == 201
    assert team.json()["message"] == "Team created."
    assert blank.status_code == 400
    [created] = (await client.get("/api/tasks", headers=headers)).json()
    assert created["title"] == "Call vendor"
    assert created["status"] == "TODO"
    assert created["priority"] == "MEDIUM"
    [owned] = (await client.get("/api/teams", headers=headers)).json()
    assert owned["user_team_role"] == "owner"


@pytest.mark.asyncio
async def test_dashboard_requires_authentication(client: AsyncClient) -> None:
    assert (await client.get("/api/dashboard/stats")).status_code == 401
    assert (await client.get("/api/dashboard/activity")).status_code == 401
