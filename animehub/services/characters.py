from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from animehub.core.exceptions import EntityNotFoundError
from animehub.core.request_context import log_context
from animehub.core.settings import settings
from animehub.db.models import (
    SENTINEL_LORE_ENTRY_ID,
    AccessoryLink,
    Attire,
    CharacterLoreLink,
    CharacterProfile,
    LoreEntry,
)
from animehub.db.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass
class ProfileFields:
    first_name: str
    last_name: str
    japanese_first_name: str = ""
    japanese_last_name: str = ""
    age: int = 18
    origin: str | None = None
    vibe: str = ""
    height: str = ""
    body_type: str = ""
    hair: str = ""
    eyes: str = ""
    skin: str = ""
    unique_power: str = ""
    magic_aptitude: str = ""
    primary_equipment: str = ""
    romantic_tension_description: str = ""
    bio: str = ""
    greatest_feat_lore_id: int | None = None
    best_friend_id: int | None = None


def greeting_audio_url(profile: CharacterProfile) -> str:
    prefix = settings.greeting_audio_prefix.rstrip("/")
    return f"{prefix}/{profile.first_name.strip().lower()}/greeting.mp3"


def _profile_query():
    return select(CharacterProfile).options(
        selectinload(CharacterProfile.best_friend),
        selectinload(CharacterProfile.greatest_feat_lore),
        selectinload(CharacterProfile.attires)
        .selectinload(Attire.accessory_links)
        .selectinload(AccessoryLink.accessory),
        selectinload(CharacterProfile.lore_links)
        .selectinload(CharacterLoreLink.lore_entry)
        .selectinload(LoreEntry.lore_type),
    )


class CharacterProfileService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def get_profile(self, profile_id: int) -> CharacterProfile | None:
        stmt = _profile_query().where(CharacterProfile.profile_id == profile_id)
        return self.uow.scalar(stmt)

    def get_profile_by_name(self, name: str) -> CharacterProfile | None:
        stmt = (
            _profile_query()
            .where(func.lower(CharacterProfile.first_name) == name.strip().lower())
            .order_by(CharacterProfile.profile_id.asc())
        )
        return self.uow.scalar(stmt)

    def create_profile(self, fields: ProfileFields) -> CharacterProfile:
        with log_context(operation="create_profile"):
            profile = CharacterProfile()
            self._apply(profile, fields)
            self.uow.add(profile)
            self.uow.commit()
            logger.info("character_profile_created", extra={"profile_id": profile.profile_id})
            return profile

    def update_profile(self, profile_id: int, fields: ProfileFields) -> bool:
        with log_context(operation="update_profile", entity_id=profile_id):
            profile = self.uow.get(CharacterProfile, profile_id)
            if profile is None:
                raise EntityNotFoundError("character profile", profile_id)
            self._apply(profile, fields)
            return self.uow.commit() > 0

    def _apply(self, profile: CharacterProfile, fields: ProfileFields) -> None:
        values = asdict(fields)
        feat_id = values.pop("greatest_feat_lore_id")
        best_friend_id = values.pop("best_friend_id")

        if feat_id is None:
            feat_id = SENTINEL_LORE_ENTRY_ID
        elif self.uow.get(LoreEntry, feat_id) is None:
            raise EntityNotFoundError("lore entry", feat_id)
        if best_friend_id is not None and self.uow.get(CharacterProfile, best_friend_id) is None:
            raise EntityNotFoundError("character profile", best_friend_id)

        for key, value in values.items():
            setattr(profile, key, value)
        profile.greatest_feat_lore_id = feat_id
        profile.best_friend_id = best_friend_id
