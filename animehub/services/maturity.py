from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import exists, select

from animehub.db.models import GalleryImage
from animehub.db.unit_of_work import UnitOfWork


class MaturityGate:
    """Decides whether a requester may see a gallery category.

    A category is mature when any of its images is flagged mature; the flag
    is derived at query time and never stored on the category.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def is_category_mature(self, category_id: int) -> bool:
        stmt = select(
            exists().where(
                GalleryImage.category_id == category_id,
                GalleryImage.is_mature_content.is_(True),
            )
        )
        return bool(self.uow.db.execute(stmt).scalar())

    def mature_category_ids(self, category_ids: Iterable[int] | None = None) -> set[int]:
        stmt = (
            select(GalleryImage.category_id)
            .where(GalleryImage.is_mature_content.is_(True))
            .distinct()
        )
        if category_ids is not None:
            ids = list(category_ids)
            if not ids:
                return set()
            stmt = stmt.where(GalleryImage.category_id.in_(ids))
        return set(self.uow.db.execute(stmt).scalars().all())

    def can_view(self, category_id: int, requester_is_adult: bool) -> bool:
        if requester_is_adult:
            return True
        return not self.is_category_mature(category_id)
