"""Reference rows every database needs before the managers can run."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from animehub.db.models import (
    SENTINEL_LORE_ENTRY_ID,
    SENTINEL_LORE_TYPE_ID,
    LoreEntry,
    LoreType,
)

logger = logging.getLogger(__name__)

DEFAULT_LORE_TYPES = ("Quest", "Origin", "Event", "Relationship")


def seed_reference_data(db: Session) -> None:
    """Insert the sentinel lore rows and default lore types if missing."""
    created = 0
    if db.get(LoreType, SENTINEL_LORE_TYPE_ID) is None:
        db.add(LoreType(lore_type_id=SENTINEL_LORE_TYPE_ID, name="Unassigned"))
        db.flush()
        created += 1
    if db.get(LoreEntry, SENTINEL_LORE_ENTRY_ID) is None:
        db.add(
            LoreEntry(
                lore_entry_id=SENTINEL_LORE_ENTRY_ID,
                title="No feat assigned",
                lore_type_id=SENTINEL_LORE_TYPE_ID,
                narrative="",
            )
        )
        created += 1

    existing = {name for (name,) in db.query(LoreType.name).all()}
    for name in DEFAULT_LORE_TYPES:
        if name not in existing:
            db.add(LoreType(name=name))
            created += 1

    db.commit()
    if created:
        logger.info("reference_data_seeded", extra={"rows_created": created})
