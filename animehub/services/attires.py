from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from animehub.core.exceptions import EntityNotFoundError
from animehub.core.request_context import log_context
from animehub.db.models import Accessory, AccessoryLink, Attire, CharacterProfile
from animehub.db.unit_of_work import UnitOfWork
from animehub.services.accessories import AccessoryResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessorySpec:
    description: str
    is_weapon: bool = False
    unique_effect: str | None = None


@dataclass
class AttireSpec:
    name: str
    attire_type: str
    description: str
    hairstyle_description: str = ""
    accessories: list[AccessorySpec] = field(default_factory=list)


class AttireService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.resolver = AccessoryResolver(uow)

    def add_attire(self, profile_id: int, spec: AttireSpec) -> int:
        """Create an attire for a profile, reusing accessories that already exist.

        The attire, its links and any new accessories are committed together.
        Raises ``EntityNotFoundError`` before any write when the profile is
        missing.
        """
        with log_context(operation="add_attire", entity_id=profile_id):
            profile = self.uow.get(CharacterProfile, profile_id)
            if profile is None:
                raise EntityNotFoundError("character profile", profile_id)

            attire = Attire(
                name=spec.name,
                attire_type=spec.attire_type,
                description=spec.description,
                hairstyle_description=spec.hairstyle_description,
                profile_id=profile.profile_id,
            )
            self.uow.add(attire)

            linked: list[Accessory] = []
            for accessory_spec in spec.accessories:
                accessory = self.resolver.resolve(
                    accessory_spec.description,
                    is_weapon=accessory_spec.is_weapon,
                    unique_effect=accessory_spec.unique_effect,
                )
                if accessory.accessory_id is None:
                    self.uow.add(accessory)
                # (accessory_id, attire_id) is the link's key
                if any(accessory is seen for seen in linked):
                    continue
                linked.append(accessory)
                attire.accessory_links.append(AccessoryLink(accessory=accessory))

            self.uow.commit()
            logger.info(
                "attire_added",
                extra={
                    "attire_id": attire.attire_id,
                    "accessory_count": len(linked),
                },
            )
            return attire.attire_id

    def delete_attire(self, attire_id: int) -> bool:
        """Delete an attire and its links. Shared accessories are kept."""
        with log_context(operation="delete_attire", entity_id=attire_id):
            attire = self.uow.scalar(
                select(Attire)
                .where(Attire.attire_id == attire_id)
                .options(selectinload(Attire.accessory_links))
            )
            if attire is None:
                raise EntityNotFoundError("attire", attire_id)

            self.uow.delete(attire)
            affected = self.uow.commit()
            logger.info("attire_deleted", extra={"rows_affected": affected})
            return affected > 0
