from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from animehub.core.exceptions import EntityNotFoundError, IntegrityAnomalyError, InvalidOperationError
from animehub.core.metrics import record_lore_references_cleared
from animehub.core.request_context import log_context
from animehub.db.models import (
    SENTINEL_LORE_ENTRY_ID,
    CharacterLoreLink,
    CharacterProfile,
    LoreEntry,
    LoreType,
)
from animehub.db.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class LoreService:
    """Lore entries and the greatest-feat references that point at them.

    ``CharacterProfile.greatest_feat_lore_id`` is either the sentinel entry or
    an existing entry. Deleting an entry therefore resets every referencing
    profile to the sentinel first and only then removes the entry, all in one
    commit.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def list_lore_types(self) -> list[LoreType]:
        return self.uow.scalars(select(LoreType).order_by(LoreType.lore_type_id.asc()))

    def list_lore_entries(self) -> list[LoreEntry]:
        stmt = (
            select(LoreEntry)
            .where(LoreEntry.lore_entry_id != SENTINEL_LORE_ENTRY_ID)
            .options(selectinload(LoreEntry.lore_type))
            .order_by(LoreEntry.title.asc())
        )
        return self.uow.scalars(stmt)

    def get_lore_entry(self, lore_entry_id: int) -> LoreEntry | None:
        stmt = (
            select(LoreEntry)
            .where(LoreEntry.lore_entry_id == lore_entry_id)
            .options(
                selectinload(LoreEntry.lore_type),
                selectinload(LoreEntry.character_links).selectinload(CharacterLoreLink.character_profile),
            )
        )
        return self.uow.scalar(stmt)

    def create_lore_entry(
        self,
        title: str,
        lore_type_id: int,
        narrative: str,
        character_ids: list[int] | None = None,
        roles: dict[int, str] | None = None,
    ) -> int | None:
        """Create an entry and link the involved characters that exist.

        Unknown character ids are skipped, not rejected.
        """
        with log_context(operation="create_lore_entry"):
            if self.uow.get(LoreType, lore_type_id) is None:
                raise EntityNotFoundError("lore type", lore_type_id)

            entry = LoreEntry(title=title, lore_type_id=lore_type_id, narrative=narrative)
            self.uow.add(entry)

            roles = roles or {}
            skipped: list[int] = []
            for character_id in dict.fromkeys(character_ids or []):
                if self.uow.get(CharacterProfile, character_id) is None:
                    skipped.append(character_id)
                    continue
                entry.character_links.append(
                    CharacterLoreLink(profile_id=character_id, role=roles.get(character_id))
                )
            if skipped:
                logger.warning("lore_entry_unknown_characters", extra={"character_ids": skipped})

            affected = self.uow.commit()
            if affected == 0:
                return None
            logger.info("lore_entry_created", extra={"lore_entry_id": entry.lore_entry_id})
            return entry.lore_entry_id

    def update_greatest_feat(self, profile_id: int, lore_entry_id: int) -> bool:
        with log_context(operation="update_greatest_feat", entity_id=profile_id):
            profile = self.uow.get(CharacterProfile, profile_id)
            if profile is None:
                raise EntityNotFoundError("character profile", profile_id)
            if self.uow.get(LoreEntry, lore_entry_id) is None:
                raise EntityNotFoundError("lore entry", lore_entry_id)

            profile.greatest_feat_lore_id = lore_entry_id
            return self.uow.commit() > 0

    def delete_lore_entry(self, lore_entry_id: int) -> bool:
        """Delete a lore entry after detaching every profile that features it.

        Raises ``InvalidOperationError`` for the sentinel and
        ``IntegrityAnomalyError`` if references were cleared for an entry
        that no longer exists. A missing entry with no references is treated
        as already deleted.
        """
        if lore_entry_id == SENTINEL_LORE_ENTRY_ID:
            raise InvalidOperationError("cannot delete sentinel lore entry")

        with log_context(operation="delete_lore_entry", entity_id=lore_entry_id):
            cleared = self.uow.bulk_update(
                update(CharacterProfile)
                .where(CharacterProfile.greatest_feat_lore_id == lore_entry_id)
                .values(greatest_feat_lore_id=SENTINEL_LORE_ENTRY_ID)
            )

            entry = self.get_lore_entry(lore_entry_id)
            if entry is None:
                if cleared:
                    self.uow.rollback()
                    logger.error(
                        "lore_entry_missing_after_reference_clear",
                        extra={"references_cleared": cleared},
                    )
                    raise IntegrityAnomalyError(
                        f"cleared {cleared} references to lore entry {lore_entry_id} but the entry is gone",
                        detail="lore entry changed concurrently",
                    )
                self.uow.rollback()
                logger.info("lore_entry_already_absent")
                return True

            self.uow.delete(entry)
            affected = self.uow.commit()
            record_lore_references_cleared(cleared)
            logger.info(
                "lore_entry_deleted",
                extra={"references_cleared": cleared, "rows_affected": affected},
            )
            return affected > 0
