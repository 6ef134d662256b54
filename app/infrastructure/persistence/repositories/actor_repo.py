"""Actor repository: builds the ActorContext for an authenticated user."""

import logging
from dataclasses import replace

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from app.domain.entities.actor import ActorContext
from app.domain.enums import LocationType, UserRole
from app.domain.exceptions import UpstreamFailureException
from app.infrastructure.persistence.models import Cell, Isibo, User, Village

logger = logging.getLogger(__name__)

_LED_MODELS = {
    LocationType.CELL: Cell,
    LocationType.VILLAGE: Village,
    LocationType.ISIBO: Isibo,
}


class ActorRepository:
    """Loads user + profile and resolves the leader's bound location."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_actor(self, user_id: str) -> ActorContext | None:
        """Return the actor for an active user, or None if unknown or inactive.

        Location ids come from the profile. A leader whose profile lacks the
        node of its own level falls back to the node that names it as leader.
        """
        try:
            async with self._session_factory() as session:
                user = (
                    await session.execute(
                        select(User)
                        .options(selectinload(User.profile))
                        .where(User.id == user_id)
                    )
                ).scalar_one_or_none()
                if user is None or not user.is_active:
                    return None
                try:
                    role = UserRole(user.role)
                except ValueError:
                    logger.warning("User %s has unknown role %r", user_id, user.role)
                    return None
                profile = user.profile
                bound = {
                    LocationType.CELL: profile.cell_id if profile else None,
                    LocationType.VILLAGE: profile.village_id if profile else None,
                    LocationType.ISIBO: profile.isibo_id if profile else None,
                }
                actor = ActorContext(
                    user_id=user.id,
                    role=role,
                    cell_id=bound[LocationType.CELL],
                    village_id=bound[LocationType.VILLAGE],
                    isibo_id=bound[LocationType.ISIBO],
                )
                level = actor.jurisdiction_level
                if level is not None and not bound[level]:
                    model = _LED_MODELS[level]
                    led_id = (
                        await session.execute(
                            select(model.id).where(model.leader_id == user.id).limit(1)
                        )
                    ).scalar_one_or_none()
                    if led_id:
                        actor = replace(actor, **{f"{level.value}_id": led_id})
                return actor
        except SQLAlchemyError as e:
            raise UpstreamFailureException("actor.get_actor", str(e)) from e
