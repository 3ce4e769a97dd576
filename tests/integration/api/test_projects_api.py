"""Project lifecycle and membership through the HTTP API."""

from collections.abc import Awaitable, Callable

import pytest
from httpx import AsyncClient

from core import background

CreateUser = Callable[..., Awaitable[str]]
Headers = Callable[[str], dict[str, str]]


async def _project_with_member(
    client: AsyncClient, owner: str, member: str, headers: Headers
) -> str:
    project_id = (
        await client.post("/api/v1/projects", json={"name": "Alpha"}, headers=headers(owner))
    ).json()["id"]
    code = (
        await client.post(
            f"/api/v1/projects/{project_id}/invites", json={}, headers=headers(owner)
        )
    ).json()["invite_code"]
    await client.post(f"/api/v1/invites/{code}/join", headers=headers(member))
    return project_id


class TestProjectMembership:
    @pytest.mark.asyncio
    async def test_remove_member_drops_their_wrapper(
        self, api_client: AsyncClient, create_user: CreateUser, auth_headers: Headers
    ) -> None:
        owner = await create_user("Owner")
        member = await create_user("Member")
        project_id = await _project_with_member(api_client, owner, member, auth_headers)

        removed = await api_client.delete(
            f"/api/v1/projects/{project_id}/members/{member}", headers=auth_headers(owner)
        )

        assert removed.status_code == 200
        assert removed.json() == {"member_removed": True, "project_wrapper_removed": True}
        projects = await api_client.get("/api/v1/projects", headers=auth_headers(member))
        assert projects.json()["data"] == []

    @pytest.mark.asyncio
    async def test_leave_project(
        self, api_client: AsyncClient, create_user: CreateUser, auth_headers: Headers
    ) -> None:
        owner = await create_user("Owner")
        member = await create_user("Member")
        project_id = await _project_with_member(api_client, owner, member, auth_headers)

        left = await api_client.post(
            f"/api/v1/projects/{project_id}/leave", headers=auth_headers(member)
        )

        assert left.status_code == 200
        members = await api_client.get(
            f"/api/v1/projects/{project_id}/members", headers=auth_headers(owner)
        )
        assert [m["user_id"] for m in members.json()["data"]] == [owner]


class TestProjectDeletion:
    @pytest.mark.asyncio
    async def test_only_owner_can_delete(
        self, api_client: AsyncClient, create_user: CreateUser, auth_headers: Headers
    ) -> None:
        owner = await create_user("Owner")
        member = await create_user("Member")
        project_id = await _project_with_member(api_client, owner, member, auth_headers)

        refused = await api_client.delete(
            f"/api/v1/projects/{project_id}", headers=auth_headers(member)
        )
        deleted = await api_client.delete(
            f"/api/v1/projects/{project_id}", headers=auth_headers(owner)
        )

        assert refused.status_code == 403
        assert deleted.status_code == 200
        assert deleted.json()["project_id"] == project_id

    @pytest.mark.asyncio
    async def test_deleted_project_disappears_from_lists(
        self, api_client: AsyncClient, create_user: CreateUser, auth_headers: Headers
    ) -> None:
        owner = await create_user("Owner")
        member = await create_user("Member")
        project_id = await _project_with_member(api_client, owner, member, auth_headers)

        await api_client.delete(f"/api/v1/projects/{project_id}", headers=auth_headers(owner))
        await background.drain()

        for user_id in (owner, member):
            projects = await api_client.get("/api/v1/projects", headers=auth_headers(user_id))
            assert projects.json()["data"] == []

    @pytest.mark.asyncio
    async def test_rename_reaches_member_lists(
        self, api_client: AsyncClient, create_user: CreateUser, auth_headers: Headers
    ) -> None:
        owner = await create_user("Owner")
        member = await create_user("Member")
        project_id = await _project_with_member(api_client, owner, member, auth_headers)

        updated = await api_client.patch(
            f"/api/v1/projects/{project_id}",
            json={"name": "Beta"},
            headers=auth_headers(owner),
        )

        assert updated.status_code == 200
        projects = await api_client.get("/api/v1/projects", headers=auth_headers(member))
        assert projects.json()["data"][0]["project_name"] == "Beta"
