from __future__ import annotations

import logging

from sqlalchemy import select

from animehub.core.metrics import record_accessory_resolution
from animehub.db.models import Accessory
from animehub.db.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class AccessoryResolver:
    """Find-or-create accessories by content rather than by id.

    Two accessories with the same description and unique effect are the same
    object. ``resolve`` returns the existing record when there is one and an
    unpersisted new record otherwise; it never writes.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def find(self, description: str, unique_effect: str | None) -> Accessory | None:
        for candidate in self.uow.pending(Accessory):
            if candidate.description == description and candidate.unique_effect == unique_effect:
                return candidate

        stmt = select(Accessory).where(Accessory.description == description)
        if unique_effect is None:
            stmt = stmt.where(Accessory.unique_effect.is_(None))
        else:
            stmt = stmt.where(Accessory.unique_effect == unique_effect)
        return self.uow.scalar(stmt.order_by(Accessory.accessory_id.asc()).limit(1))

    def resolve(self, description: str, is_weapon: bool = False, unique_effect: str | None = None) -> Accessory:
        existing = self.find(description, unique_effect)
        record_accessory_resolution(reused=existing is not None)
        if existing is not None:
            return existing

        logger.debug("accessory_created", extra={"description": description})
        return Accessory(
            description=description,
            is_weapon=is_weapon,
            unique_effect=unique_effect,
        )
