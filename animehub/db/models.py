from __future__ import annotations

import datetime as dt

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from animehub.db.base import Base

# Lore entry that stands for "no feat assigned". Seeded, never deleted.
SENTINEL_LORE_ENTRY_ID = 0
SENTINEL_LORE_TYPE_ID = 0

# SQLite only autoincrements INTEGER primary keys.
ImageId = BigInteger().with_variant(Integer, "sqlite")


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def category_name_key(name: str) -> str:
    """Case-insensitive lookup key for gallery category names."""
    return name.strip().casefold()


class Accessory(Base):
    __tablename__ = "accessories"

    accessory_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    is_weapon: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    unique_effect: Mapped[str | None] = mapped_column(String(500), nullable=True)

    attire_links: Mapped[list["AccessoryLink"]] = relationship(back_populates="accessory")


class Attire(Base):
    __tablename__ = "attires"

    attire_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    attire_type: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    hairstyle_description: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    profile_id: Mapped[int] = mapped_column(
        ForeignKey("character_profiles.profile_id", ondelete="CASCADE"), nullable=False
    )

    profile: Mapped[CharacterProfile] = relationship(back_populates="attires")
    accessory_links: Mapped[list["AccessoryLink"]] = relationship(
        back_populates="attire", cascade="all, delete-orphan"
    )


class AccessoryLink(Base):
    __tablename__ = "accessory_links"

    accessory_id: Mapped[int] = mapped_column(
        ForeignKey("accessories.accessory_id", ondelete="CASCADE"), primary_key=True
    )
    attire_id: Mapped[int] = mapped_column(
        ForeignKey("attires.attire_id", ondelete="CASCADE"), primary_key=True
    )

    accessory: Mapped[Accessory] = relationship(back_populates="attire_links")
    attire: Mapped[Attire] = relationship(back_populates="accessory_links")


class LoreType(Base):
    __tablename__ = "lore_types"

    lore_type_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)


class LoreEntry(Base):
    __tablename__ = "lore_entries"

    lore_entry_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    lore_type_id: Mapped[int] = mapped_column(ForeignKey("lore_types.lore_type_id"), nullable=False)
    narrative: Mapped[str] = mapped_column(Text, nullable=False, default="")

    lore_type: Mapped[LoreType] = relationship()
    character_links: Mapped[list["CharacterLoreLink"]] = relationship(
        back_populates="lore_entry", cascade="all, delete-orphan"
    )


class CharacterProfile(Base):
    __tablename__ = "character_profiles"

    profile_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    japanese_first_name: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    japanese_last_name: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=18)
    origin: Mapped[str | None] = mapped_column(String(50), nullable=True)
    vibe: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    height: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    body_type: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    hair: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    eyes: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    skin: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    unique_power: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    magic_aptitude: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    primary_equipment: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    romantic_tension_description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    greatest_feat_lore_id: Mapped[int] = mapped_column(
        ForeignKey("lore_entries.lore_entry_id", ondelete="RESTRICT"),
        nullable=False,
        default=SENTINEL_LORE_ENTRY_ID,
    )
    best_friend_id: Mapped[int | None] = mapped_column(
        ForeignKey("character_profiles.profile_id"), nullable=True
    )

    greatest_feat_lore: Mapped[LoreEntry] = relationship(foreign_keys=[greatest_feat_lore_id])
    best_friend: Mapped[CharacterProfile | None] = relationship(
        "CharacterProfile",
        foreign_keys=[best_friend_id],
        remote_side="CharacterProfile.profile_id",
    )
    attires: Mapped[list[Attire]] = relationship(back_populates="profile", cascade="all, delete-orphan")
    lore_links: Mapped[list["CharacterLoreLink"]] = relationship(
        back_populates="character_profile", cascade="all, delete-orphan"
    )


class CharacterLoreLink(Base):
    __tablename__ = "character_lore_links"

    profile_id: Mapped[int] = mapped_column(
        ForeignKey("character_profiles.profile_id", ondelete="CASCADE"), primary_key=True
    )
    lore_entry_id: Mapped[int] = mapped_column(
        ForeignKey("lore_entries.lore_entry_id", ondelete="CASCADE"), primary_key=True
    )
    role: Mapped[str | None] = mapped_column(String(255), nullable=True)

    character_profile: Mapped[CharacterProfile] = relationship(back_populates="lore_links")
    lore_entry: Mapped[LoreEntry] = relationship(back_populates="character_links")


class GalleryImageCategory(Base):
    __tablename__ = "gallery_image_categories"

    category_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    name_key: Mapped[str] = mapped_column(String(300), nullable=False, unique=True)

    images: Mapped[list["GalleryImage"]] = relationship(
        back_populates="category", cascade="all, delete-orphan"
    )

    @validates("name")
    def _sync_name_key(self, _key: str, value: str) -> str:
        self.name_key = category_name_key(value)
        return value


class GalleryImage(Base):
    __tablename__ = "gallery_images"

    image_id: Mapped[int] = mapped_column(ImageId, primary_key=True, autoincrement=True)
    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    alt_text: Mapped[str] = mapped_column(String(200), nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_mature_content: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    category_id: Mapped[int] = mapped_column(
        ForeignKey("gallery_image_categories.category_id"), nullable=False, index=True
    )
    date_added: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    date_modified: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    category: Mapped[GalleryImageCategory] = relationship(back_populates="images")
