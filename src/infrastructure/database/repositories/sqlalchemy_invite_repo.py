"""SQLAlchemy implementation of Invite repository."""

from datetime import datetime

from sqlalchemy import and_, case, exists, or_, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.invite import Invite, InviteStatus
from infrastructure.database.models import InviteModel


class SQLAlchemyInviteRepository:
    """SQLAlchemy implementation of IInviteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_code(self, code: str) -> Invite | None:
        model = await self._session.get(InviteModel, code)
        return self._to_entity(model) if model else None

    async def exists_by_code(self, code: str) -> bool:
        stmt = select(exists().where(InviteModel.code == code))
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def create_if_absent(self, invite: Invite) -> bool:
        """INSERT ... ON CONFLICT DO NOTHING on the invite code."""
        values = {
            "code": invite.code,
            "project_id": invite.project_id,
            "created_by": invite.created_by,
            "expires_at": invite.expires_at,
            "max_uses": invite.max_uses,
            "current_uses": invite.current_uses,
            "status": invite.status.value,
            "created_at": invite.created_at,
            "updated_at": invite.updated_at,
        }
        dialect = self._session.bind.dialect.name
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
        stmt = insert(InviteModel).values(**values).on_conflict_do_nothing(
            index_elements=[InviteModel.code]
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def consume_use(self, code: str) -> bool:
        now = datetime.utcnow()
        used = InviteModel.current_uses + 1
        stmt = (
            update(InviteModel)
            .where(
                InviteModel.code == code,
                InviteModel.status == InviteStatus.ACTIVE.value,
                InviteModel.expires_at > now,
                or_(
                    InviteModel.max_uses.is_(None),
                    InviteModel.current_uses < InviteModel.max_uses,
                ),
            )
            .values(
                current_uses=used,
                status=case(
                    (
                        and_(InviteModel.max_uses.is_not(None), used >= InviteModel.max_uses),
                        InviteStatus.EXPIRED.value,
                    ),
                    else_=InviteModel.status,
                ),
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def update(self, invite: Invite) -> Invite:
        model = await self._session.get(InviteModel, invite.code)
        if not model:
            raise ValueError(f"Invite {invite.code} not found")

        model.status = invite.status.value
        model.current_uses = invite.current_uses
        model.max_uses = invite.max_uses
        model.expires_at = invite.expires_at
        model.updated_at = invite.updated_at

        await self._session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: InviteModel) -> Invite:
        return Invite(
            id=model.code,
            project_id=model.project_id,
            created_by=model.created_by,
            expires_at=model.expires_at,
            max_uses=model.max_uses,
            current_uses=model.current_uses,
            status=InviteStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
