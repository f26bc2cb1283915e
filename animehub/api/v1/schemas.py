from datetime import datetime

from pydantic import BaseModel, Field


class AccessoryInput(BaseModel):
    description: str = Field(min_length=1, max_length=500)
    is_weapon: bool = False
    unique_effect: str | None = Field(default=None, max_length=500)


class AccessoryRead(BaseModel):
    accessory_id: int
    description: str
    is_weapon: bool
    unique_effect: str | None


class AttireCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    attire_type: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1, max_length=500)
    hairstyle_description: str = Field(default="", max_length=100)
    accessories: list[AccessoryInput] = Field(min_length=1)


class AttireCreated(BaseModel):
    attire_id: int


class AttireRead(BaseModel):
    attire_id: int
    name: str
    attire_type: str
    description: str
    hairstyle_description: str
    accessories: list[AccessoryRead]


class LoreTypeRead(BaseModel):
    lore_type_id: int
    name: str

    model_config = {"from_attributes": True}


class CharacterSummaryRead(BaseModel):
    profile_id: int
    first_name: str
    last_name: str
    vibe: str
    unique_power: str


class LoreEntrySummaryRead(BaseModel):
    lore_entry_id: int
    title: str
    lore_type: str


class LoreEntryRead(BaseModel):
    lore_entry_id: int
    title: str
    lore_type: str
    narrative: str
    characters_involved: list[CharacterSummaryRead] = Field(default_factory=list)


class LoreEntryCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    lore_type_id: int = Field(ge=0)
    narrative: str = Field(min_length=1)
    character_ids: list[int] = Field(default_factory=list)
    character_roles: dict[int, str] = Field(default_factory=dict)


class LoreEntryCreated(BaseModel):
    lore_entry_id: int


class CharacterLoreLinkRead(BaseModel):
    role: str | None
    lore_entry: LoreEntryRead


class CharacterProfileWrite(BaseModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    japanese_first_name: str = Field(default="", max_length=50)
    japanese_last_name: str = Field(default="", max_length=50)
    age: int = Field(default=18, ge=0)
    origin: str | None = Field(default=None, max_length=50)
    vibe: str = Field(default="", max_length=200)
    height: str = Field(default="", max_length=10)
    body_type: str = Field(default="", max_length=50)
    hair: str = Field(default="", max_length=100)
    eyes: str = Field(default="", max_length=100)
    skin: str = Field(default="", max_length=100)
    primary_equipment: str = Field(default="", max_length=500)
    unique_power: str = Field(default="", max_length=255)
    greatest_feat_lore_id: int | None = Field(default=None, ge=0)
    magic_aptitude: str = Field(default="", max_length=100)
    romantic_tension_description: str = Field(default="", max_length=500)
    bio: str = Field(default="", max_length=2000)
    best_friend_id: int | None = None


class CharacterProfileRead(BaseModel):
    profile_id: int
    first_name: str
    last_name: str
    japanese_first_name: str
    japanese_last_name: str
    age: int
    origin: str | None
    greeting_audio_url: str
    vibe: str
    height: str
    body_type: str
    hair: str
    eyes: str
    skin: str
    primary_equipment: str
    unique_power: str
    greatest_feat_lore_id: int
    greatest_feat: str | None
    magic_aptitude: str
    romantic_tension_description: str
    bio: str
    best_friend: CharacterSummaryRead | None = None
    attires: list[AttireRead] = Field(default_factory=list)
    lore_links: list[CharacterLoreLinkRead] = Field(default_factory=list)


class GreatestFeatUpdate(BaseModel):
    lore_entry_id: int = Field(ge=0)


class GalleryImageRead(BaseModel):
    image_id: int
    image_url: str
    alt_text: str
    is_featured: bool
    is_mature_content: bool
    category_id: int
    category_name: str
    date_added: datetime
    date_modified: datetime


class GalleryCategoryRead(BaseModel):
    category_id: int
    name: str
    cover_url: str
    is_mature_content: bool


class ImageMetadataInput(BaseModel):
    image_url: str = Field(min_length=1, max_length=500)
    alt_text: str = Field(min_length=1, max_length=200)
    is_featured: bool = False


class GalleryBatchCreate(BaseModel):
    category_name: str = Field(min_length=1, max_length=100)
    is_mature_content: bool = False
    images: list[ImageMetadataInput] = Field(min_length=1)


class GalleryBatchCreated(BaseModel):
    category_id: int


class GallerySingleCreate(BaseModel):
    category_id: int
    image_url: str = Field(min_length=1, max_length=500)
    alt_text: str = Field(min_length=1, max_length=200)
    is_featured: bool = False
    is_mature_content: bool = False


class GalleryFolderUpdate(BaseModel):
    is_mature_content: bool
    featured_image_id: int


class GalleryImageMove(BaseModel):
    new_category_id: int
    is_mature_content: bool


class GalleryImageUpdate(BaseModel):
    alt_text: str = Field(min_length=1, max_length=200)
    is_featured: bool
    is_mature_content: bool


class MediaUploadRead(BaseModel):
    image_url: str
