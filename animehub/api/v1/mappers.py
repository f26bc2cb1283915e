"""Entity to response-schema construction, one field at a time."""

from animehub.api.v1.schemas import (
    AccessoryRead,
    AttireRead,
    CharacterLoreLinkRead,
    CharacterProfileRead,
    CharacterSummaryRead,
    GalleryCategoryRead,
    GalleryImageRead,
    LoreEntryRead,
    LoreEntrySummaryRead,
)
from animehub.db.models import (
    SENTINEL_LORE_ENTRY_ID,
    Accessory,
    Attire,
    CharacterLoreLink,
    CharacterProfile,
    GalleryImage,
    LoreEntry,
)
from animehub.services.characters import greeting_audio_url
from animehub.services.gallery import CategorySummary


def accessory_read(accessory: Accessory) -> AccessoryRead:
    return AccessoryRead(
        accessory_id=accessory.accessory_id,
        description=accessory.description,
        is_weapon=accessory.is_weapon,
        unique_effect=accessory.unique_effect,
    )


def attire_read(attire: Attire) -> AttireRead:
    return AttireRead(
        attire_id=attire.attire_id,
        name=attire.name,
        attire_type=attire.attire_type,
        description=attire.description,
        hairstyle_description=attire.hairstyle_description,
        accessories=[accessory_read(link.accessory) for link in attire.accessory_links],
    )


def character_summary_read(profile: CharacterProfile) -> CharacterSummaryRead:
    return CharacterSummaryRead(
        profile_id=profile.profile_id,
        first_name=profile.first_name,
        last_name=profile.last_name,
        vibe=profile.vibe,
        unique_power=profile.unique_power,
    )


def lore_entry_summary_read(entry: LoreEntry) -> LoreEntrySummaryRead:
    return LoreEntrySummaryRead(
        lore_entry_id=entry.lore_entry_id,
        title=entry.title,
        lore_type=entry.lore_type.name,
    )


def lore_entry_read(entry: LoreEntry, include_characters: bool = True) -> LoreEntryRead:
    characters = []
    if include_characters:
        characters = [character_summary_read(link.character_profile) for link in entry.character_links]
    return LoreEntryRead(
        lore_entry_id=entry.lore_entry_id,
        title=entry.title,
        lore_type=entry.lore_type.name,
        narrative=entry.narrative,
        characters_involved=characters,
    )


def character_lore_link_read(link: CharacterLoreLink) -> CharacterLoreLinkRead:
    return CharacterLoreLinkRead(
        role=link.role,
        lore_entry=lore_entry_read(link.lore_entry, include_characters=False),
    )


def character_profile_read(profile: CharacterProfile) -> CharacterProfileRead:
    greatest_feat = None
    if profile.greatest_feat_lore_id != SENTINEL_LORE_ENTRY_ID and profile.greatest_feat_lore is not None:
        greatest_feat = profile.greatest_feat_lore.title

    best_friend = None
    if profile.best_friend is not None:
        best_friend = character_summary_read(profile.best_friend)

    return CharacterProfileRead(
        profile_id=profile.profile_id,
        first_name=profile.first_name,
        last_name=profile.last_name,
        japanese_first_name=profile.japanese_first_name,
        japanese_last_name=profile.japanese_last_name,
        age=profile.age,
        origin=profile.origin,
        greeting_audio_url=greeting_audio_url(profile),
        vibe=profile.vibe,
        height=profile.height,
        body_type=profile.body_type,
        hair=profile.hair,
        eyes=profile.eyes,
        skin=profile.skin,
        primary_equipment=profile.primary_equipment,
        unique_power=profile.unique_power,
        greatest_feat_lore_id=profile.greatest_feat_lore_id,
        greatest_feat=greatest_feat,
        magic_aptitude=profile.magic_aptitude,
        romantic_tension_description=profile.romantic_tension_description,
        bio=profile.bio,
        best_friend=best_friend,
        attires=[attire_read(attire) for attire in profile.attires],
        lore_links=[character_lore_link_read(link) for link in profile.lore_links],
    )


def gallery_image_read(image: GalleryImage) -> GalleryImageRead:
    return GalleryImageRead(
        image_id=image.image_id,
        image_url=image.image_url,
        alt_text=image.alt_text,
        is_featured=image.is_featured,
        is_mature_content=image.is_mature_content,
        category_id=image.category_id,
        category_name=image.category.name,
        date_added=image.date_added,
        date_modified=image.date_modified,
    )


def gallery_category_read(summary: CategorySummary) -> GalleryCategoryRead:
    return GalleryCategoryRead(
        category_id=summary.category_id,
        name=summary.name,
        cover_url=summary.cover_url,
        is_mature_content=summary.is_mature_content,
    )
