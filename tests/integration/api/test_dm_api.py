"""DM channel blocking through the HTTP API on an in-memory database."""

from collections.abc import Awaitable, Callable

import pytest
from httpx import AsyncClient

from core import background
from domain.entities.dm import dm_channel_id
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

UowFactory = Callable[[], SQLAlchemyUnitOfWork]
CreateUser = Callable[..., Awaitable[str]]
Headers = Callable[[str], dict[str, str]]


async def _befriend(client: AsyncClient, auth_headers: Headers, alice: str, bob: str) -> None:
    await client.post(
        "/api/v1/friends/requests",
        json={"receiver_user_id": bob},
        headers=auth_headers(alice),
    )
    await client.post(
        "/api/v1/friends/requests/accept",
        json={"requester_id": alice},
        headers=auth_headers(bob),
    )
    await background.drain()


class TestDMBlocking:
    @pytest.mark.asyncio
    async def test_block_then_unblock_restores_wrapper(
        self,
        api_client: AsyncClient,
        create_user: CreateUser,
        auth_headers: Headers,
        uow_factory: UowFactory,
    ) -> None:
        alice = await create_user("Alice")
        bob = await create_user("Bob")
        await _befriend(api_client, auth_headers, alice, bob)
        channel_id = dm_channel_id(alice, bob)

        blocked = await api_client.post(
            f"/api/v1/dm/{channel_id}/block", headers=auth_headers(alice)
        )
        assert blocked.status_code == 200
        assert blocked.json()["blocked_by"] == [alice]
        assert blocked.json()["wrapper_removed"] is True

        async with uow_factory() as uow:
            assert await uow.dm_wrappers.get(alice, bob) is None
            assert await uow.dm_wrappers.get(bob, alice) is not None

        unblocked = await api_client.post(
            f"/api/v1/dm/{channel_id}/unblock", headers=auth_headers(alice)
        )
        assert unblocked.status_code == 200
        assert unblocked.json()["is_fully_unblocked"] is True

        async with uow_factory() as uow:
            channel = await uow.dm_channels.get_by_id(channel_id)
            wrapper = await uow.dm_wrappers.get(alice, bob)
        assert channel is not None
        assert channel.blocked_by == []
        assert wrapper is not None
        assert wrapper.channel_id == channel_id

    @pytest.mark.asyncio
    async def test_unblock_without_block_conflicts(
        self, api_client: AsyncClient, create_user: CreateUser, auth_headers: Headers
    ) -> None:
        alice = await create_user("Alice")
        bob = await create_user("Bob")
        await _befriend(api_client, auth_headers, alice, bob)

        response = await api_client.post(
            f"/api/v1/dm/{dm_channel_id(alice, bob)}/unblock", headers=auth_headers(bob)
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_outsider_cannot_block(
        self, api_client: AsyncClient, create_user: CreateUser, auth_headers: Headers
    ) -> None:
        alice = await create_user("Alice")
        bob = await create_user("Bob")
        mallory = await create_user("Mallory")
        await _befriend(api_client, auth_headers, alice, bob)

        response = await api_client.post(
            f"/api/v1/dm/{dm_channel_id(alice, bob)}/block", headers=auth_headers(mallory)
        )

        assert response.status_code == 403
