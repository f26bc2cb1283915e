from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, select, update
from sqlalchemy.orm import selectinload

from animehub.core.exceptions import (
    ConflictError,
    EntityNotFoundError,
    IntegrityAnomalyError,
    InvalidOperationError,
)
from animehub.core.metrics import record_gallery_mutation, record_maturity_denial
from animehub.core.request_context import log_context
from animehub.core.settings import settings
from animehub.db.models import GalleryImage, GalleryImageCategory, category_name_key, utcnow
from animehub.db.unit_of_work import UnitOfWork
from animehub.services.maturity import MaturityGate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageSpec:
    image_url: str
    alt_text: str
    is_featured: bool = False


@dataclass(frozen=True)
class CategorySummary:
    category_id: int
    name: str
    cover_url: str
    is_mature_content: bool


class GalleryService:
    """Gallery folders and images.

    Every write path keeps at most one featured image per category: anything
    that features an image first clears the flag on the rest of its category,
    inside the same commit.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.gate = MaturityGate(uow)

    # reads

    def get_category_by_name(self, name: str) -> GalleryImageCategory | None:
        stmt = select(GalleryImageCategory).where(
            GalleryImageCategory.name_key == category_name_key(name)
        )
        return self.uow.scalar(stmt)

    def list_featured(self, requester_is_adult: bool) -> list[GalleryImage]:
        stmt = (
            select(GalleryImage)
            .where(GalleryImage.is_featured.is_(True))
            .options(selectinload(GalleryImage.category))
            .order_by(GalleryImage.image_id.asc())
        )
        images = self.uow.scalars(stmt)
        if not requester_is_adult:
            mature = self.gate.mature_category_ids({image.category_id for image in images})
            visible = [image for image in images if image.category_id not in mature]
            record_maturity_denial("featured", len(images) - len(visible))
            images = visible
        return images[: settings.featured_images_limit]

    def list_categories(self, requester_is_adult: bool) -> list[CategorySummary]:
        categories = self.uow.scalars(
            select(GalleryImageCategory).order_by(GalleryImageCategory.name.asc())
        )
        mature = self.gate.mature_category_ids([category.category_id for category in categories])
        covers = {
            category_id: image_url
            for category_id, image_url in self.uow.db.execute(
                select(GalleryImage.category_id, GalleryImage.image_url)
                .where(GalleryImage.is_featured.is_(True))
                .order_by(GalleryImage.image_id.desc())
            ).all()
        }

        summaries: list[CategorySummary] = []
        hidden = 0
        for category in categories:
            is_mature = category.category_id in mature
            if is_mature and not requester_is_adult:
                hidden += 1
                continue
            summaries.append(
                CategorySummary(
                    category_id=category.category_id,
                    name=category.name,
                    cover_url=covers.get(category.category_id, settings.default_cover_url),
                    is_mature_content=is_mature,
                )
            )
        record_maturity_denial("folders", hidden)
        return summaries

    def list_images_by_category_name(self, name: str, requester_is_adult: bool) -> list[GalleryImage]:
        category = self.get_category_by_name(name)
        if category is None:
            raise EntityNotFoundError("gallery category", name)
        if not self.gate.can_view(category.category_id, requester_is_adult):
            record_maturity_denial("folder_images")
            with log_context(category_id=category.category_id):
                logger.info("gallery_folder_hidden")
            return []

        stmt = (
            select(GalleryImage)
            .where(GalleryImage.category_id == category.category_id)
            .options(selectinload(GalleryImage.category))
            .order_by(GalleryImage.image_id.asc())
        )
        return self.uow.scalars(stmt)

    # writes

    def create_batch(self, category_name: str, is_mature: bool, images: list[ImageSpec]) -> int | None:
        """Create a category and its first images in one commit.

        Exactly one image of the batch must be featured. Returns the new
        category id, or ``None`` if nothing was persisted.
        """
        with log_context(operation="create_gallery_batch"):
            if self.get_category_by_name(category_name) is not None:
                raise ConflictError(
                    f"gallery category '{category_name}' already exists",
                    detail="gallery category already exists",
                )
            featured_count = sum(1 for image in images if image.is_featured)
            if featured_count != 1:
                raise InvalidOperationError(
                    f"a gallery batch needs exactly one featured image, got {featured_count}"
                )

            category = GalleryImageCategory(name=category_name)
            self.uow.add(category)
            self.uow.flush()

            now = utcnow()
            for spec in images:
                self.uow.add(
                    GalleryImage(
                        image_url=spec.image_url,
                        alt_text=spec.alt_text,
                        is_featured=spec.is_featured,
                        is_mature_content=is_mature,
                        category_id=category.category_id,
                        date_added=now,
                        date_modified=now,
                    )
                )

            category_id = category.category_id
            affected = self.uow.commit()
            record_gallery_mutation("create_batch", affected > 0)
            if affected == 0:
                return None
            with log_context(category_id=category_id):
                logger.info("gallery_batch_created", extra={"image_count": len(images)})
            return category_id

    def create_single(
        self,
        category_id: int,
        image_url: str,
        alt_text: str,
        is_featured: bool = False,
        is_mature: bool = False,
    ) -> GalleryImage:
        with log_context(operation="create_gallery_image", category_id=category_id):
            if self.uow.get(GalleryImageCategory, category_id) is None:
                raise EntityNotFoundError("gallery category", category_id)

            if is_featured:
                self._unfeature_category(category_id)

            image = GalleryImage(
                image_url=image_url,
                alt_text=alt_text,
                is_featured=is_featured,
                is_mature_content=is_mature,
                category_id=category_id,
            )
            self.uow.add(image)
            affected = self.uow.commit()
            record_gallery_mutation("create_single", affected > 0)
            logger.info("gallery_image_created", extra={"image_id": image.image_id, "is_featured": is_featured})
            return image

    def update_folder(self, category_id: int, is_mature: bool, featured_image_id: int) -> bool:
        """Set folder-wide maturity and move the featured flag to one image.

        Unfeature-all runs before feature-one; the reverse order would wipe
        the flag that was just set.
        """
        with log_context(operation="update_gallery_folder", category_id=category_id):
            if self.uow.get(GalleryImageCategory, category_id) is None:
                raise EntityNotFoundError("gallery category", category_id)
            featured = self.uow.get(GalleryImage, featured_image_id)
            if featured is None or featured.category_id != category_id:
                raise EntityNotFoundError("gallery image", featured_image_id)

            now = utcnow()
            self.uow.bulk_update(
                update(GalleryImage)
                .where(GalleryImage.category_id == category_id)
                .values(is_mature_content=is_mature, is_featured=False, date_modified=now)
            )
            self.uow.bulk_update(
                update(GalleryImage)
                .where(
                    GalleryImage.image_id == featured_image_id,
                    GalleryImage.category_id == category_id,
                )
                .values(is_featured=True)
            )
            affected = self.uow.commit()
            record_gallery_mutation("update_folder", affected > 0)
            logger.info(
                "gallery_folder_updated",
                extra={"featured_image_id": featured_image_id, "is_mature": is_mature},
            )
            return affected > 0

    def move_image(self, image_id: int, new_category_id: int, is_mature: bool) -> bool:
        """Move one image to another category and set its maturity.

        A featured image loses its flag when it changes category; the old
        category keeps no featured image until one is designated.
        """
        with log_context(operation="move_gallery_image", entity_id=image_id):
            image = self.uow.get(GalleryImage, image_id)
            if image is None:
                raise EntityNotFoundError("gallery image", image_id)
            if self.uow.get(GalleryImageCategory, new_category_id) is None:
                raise EntityNotFoundError("gallery category", new_category_id)

            old_category_id = image.category_id
            if old_category_id != new_category_id and image.is_featured:
                image.is_featured = False
                logger.info(
                    "gallery_featured_image_moved",
                    extra={"old_category_id": old_category_id},
                )

            image.category_id = new_category_id
            image.is_mature_content = is_mature
            image.date_modified = utcnow()
            affected = self.uow.commit()
            record_gallery_mutation("move_image", affected > 0)
            return affected > 0

    def update_image(self, image_id: int, alt_text: str, is_featured: bool, is_mature: bool) -> GalleryImage:
        with log_context(operation="update_gallery_image", entity_id=image_id):
            image = self.uow.get(GalleryImage, image_id)
            if image is None:
                raise EntityNotFoundError("gallery image", image_id)

            if is_featured and not image.is_featured:
                self._unfeature_category(image.category_id)

            image.alt_text = alt_text
            image.is_featured = is_featured
            image.is_mature_content = is_mature
            image.date_modified = utcnow()
            affected = self.uow.commit()
            record_gallery_mutation("update_image", affected > 0)
            return image

    def delete_image(self, image_id: int) -> bool:
        with log_context(operation="delete_gallery_image", entity_id=image_id):
            image = self.uow.get(GalleryImage, image_id)
            if image is None:
                raise EntityNotFoundError("gallery image", image_id)
            self.uow.delete(image)
            affected = self.uow.commit()
            record_gallery_mutation("delete_image", affected > 0)
            return affected > 0

    def delete_folder(self, category_id: int) -> bool:
        """Delete a folder's images, then the folder itself.

        The category row is only deleted when the image delete removed at
        least one row, so an already-empty folder is reported as a failure.
        """
        with log_context(operation="delete_gallery_folder", category_id=category_id):
            deleted_images = self.uow.bulk_delete(
                delete(GalleryImage).where(GalleryImage.category_id == category_id)
            )
            if deleted_images == 0:
                self.uow.rollback()
                record_gallery_mutation("delete_folder", False)
                logger.info("gallery_folder_delete_skipped")
                return False

            category = self.uow.get(GalleryImageCategory, category_id)
            if category is None:
                self.uow.rollback()
                raise IntegrityAnomalyError(
                    f"deleted {deleted_images} images of missing gallery category {category_id}",
                    detail="gallery category changed concurrently",
                )
            self.uow.delete(category)
            affected = self.uow.commit()
            record_gallery_mutation("delete_folder", affected > 0)
            logger.info("gallery_folder_deleted", extra={"images_deleted": deleted_images})
            return affected > 0

    def _unfeature_category(self, category_id: int) -> int:
        cleared = self.uow.bulk_update(
            update(GalleryImage)
            .where(
                GalleryImage.category_id == category_id,
                GalleryImage.is_featured.is_(True),
            )
            .values(is_featured=False, date_modified=utcnow())
        )
        if cleared:
            logger.debug("gallery_featured_cleared", extra={"images_cleared": cleared})
        return cleared
