import datetime as dt

import pytest
from hypothesis import given, strategies as st, settings
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from animehub.core.exceptions import ConflictError, EntityNotFoundError, InvalidOperationError
from animehub.db.base import Base
from animehub.db.models import GalleryImage, GalleryImageCategory
from animehub.db.seed import seed_reference_data
from animehub.db.session import build_engine
from animehub.db.unit_of_work import UnitOfWork
from animehub.services.gallery import GalleryService, ImageSpec


def _batch(service: GalleryService, name: str, size: int = 3, featured: int = 0, mature: bool = False) -> int:
    images = [
        ImageSpec(image_url=f"/{name.lower()}/{idx}.png", alt_text=f"{name} {idx}", is_featured=idx == featured)
        for idx in range(size)
    ]
    return service.create_batch(name, mature, images)


def _images(uow, category_id: int) -> list[GalleryImage]:
    return uow.scalars(
        select(GalleryImage).where(GalleryImage.category_id == category_id).order_by(GalleryImage.image_id)
    )


def _featured_ids(uow, category_id: int) -> list[int]:
    return [image.image_id for image in _images(uow, category_id) if image.is_featured]


class TestCreateBatch:
    def test_creates_category_with_batch_maturity(self, uow):
        service = GalleryService(uow)
        category_id = _batch(service, "Summer", mature=True)

        images = _images(uow, category_id)
        assert len(images) == 3
        assert all(image.is_mature_content for image in images)
        assert _featured_ids(uow, category_id) == [images[0].image_id]

    def test_duplicate_name_is_case_insensitive(self, uow):
        service = GalleryService(uow)
        _batch(service, "Summer")

        with pytest.raises(ConflictError):
            _batch(service, "sUMMER")

    @pytest.mark.parametrize(("first", "second"), [("Été", "été"), ("ÉTÉ", "été"), ("Straße", "STRASSE")])
    def test_duplicate_name_folds_unicode_case(self, uow, first, second):
        service = GalleryService(uow)
        _batch(service, first)

        with pytest.raises(ConflictError):
            _batch(service, second)

        assert uow.db.execute(select(func.count()).select_from(GalleryImageCategory)).scalar_one() == 1

    def test_store_rejects_names_differing_only_in_case(self, uow):
        uow.add(GalleryImageCategory(name="Été"))
        uow.commit()

        uow.add(GalleryImageCategory(name="éTÉ"))
        with pytest.raises(IntegrityError):
            uow.commit()

    @pytest.mark.parametrize("featured_flags", [[False, False], [True, True]])
    def test_requires_exactly_one_featured(self, uow, featured_flags):
        images = [ImageSpec(f"/x{idx}.png", "x", flag) for idx, flag in enumerate(featured_flags)]

        with pytest.raises(InvalidOperationError):
            GalleryService(uow).create_batch("Broken", False, images)

        assert uow.db.execute(select(func.count()).select_from(GalleryImageCategory)).scalar_one() == 0


class TestCreateSingle:
    def test_featuring_clears_previous_featured(self, uow):
        service = GalleryService(uow)
        category_id = _batch(service, "Winter")

        image = service.create_single(category_id, "/winter/new.png", "New cover", is_featured=True)

        assert _featured_ids(uow, category_id) == [image.image_id]

    def test_non_featured_keeps_existing_featured(self, uow):
        service = GalleryService(uow)
        category_id = _batch(service, "Winter")
        before = _featured_ids(uow, category_id)

        service.create_single(category_id, "/winter/extra.png", "Extra")

        assert _featured_ids(uow, category_id) == before

    def test_missing_category_raises(self, uow):
        with pytest.raises(EntityNotFoundError):
            GalleryService(uow).create_single(999, "/x.png", "x")


class TestUpdateFolder:
    def test_moves_featured_flag_and_sets_maturity(self, uow):
        service = GalleryService(uow)
        category_id = _batch(service, "Autumn")
        target = _images(uow, category_id)[2]

        assert service.update_folder(category_id, is_mature=True, featured_image_id=target.image_id) is True

        images = _images(uow, category_id)
        assert _featured_ids(uow, category_id) == [target.image_id]
        assert all(image.is_mature_content for image in images)

    def test_bumps_date_modified(self, uow):
        service = GalleryService(uow)
        category_id = _batch(service, "Autumn")
        uow.bulk_update(
            update(GalleryImage)
            .where(GalleryImage.category_id == category_id)
            .values(date_modified=dt.datetime(2001, 1, 1, tzinfo=dt.timezone.utc))
        )
        uow.commit()
        stale = [image.date_modified.year for image in _images(uow, category_id)]
        assert stale == [2001, 2001, 2001]

        target = _images(uow, category_id)[1]
        service.update_folder(category_id, is_mature=False, featured_image_id=target.image_id)

        assert all(image.date_modified.year > 2001 for image in _images(uow, category_id))

    def test_featured_image_from_another_folder_is_rejected(self, uow):
        service = GalleryService(uow)
        autumn = _batch(service, "Autumn")
        spring = _batch(service, "Spring")
        outsider = _images(uow, spring)[1]

        with pytest.raises(EntityNotFoundError):
            service.update_folder(autumn, is_mature=False, featured_image_id=outsider.image_id)

        assert len(_featured_ids(uow, autumn)) == 1

    def test_missing_folder_raises(self, uow):
        with pytest.raises(EntityNotFoundError):
            GalleryService(uow).update_folder(999, is_mature=False, featured_image_id=1)


class TestMoveAndEdit:
    def test_moving_featured_image_clears_flag(self, uow):
        service = GalleryService(uow)
        source = _batch(service, "Source")
        target = _batch(service, "Target")
        featured = _images(uow, source)[0]

        assert service.move_image(featured.image_id, target, is_mature=True) is True

        moved = uow.get(GalleryImage, featured.image_id)
        assert moved.category_id == target
        assert moved.is_featured is False
        assert moved.is_mature_content is True
        assert _featured_ids(uow, source) == []
        assert len(_featured_ids(uow, target)) == 1

    def test_moving_within_same_category_keeps_flag(self, uow):
        service = GalleryService(uow)
        category_id = _batch(service, "Stay")
        featured = _images(uow, category_id)[0]

        service.move_image(featured.image_id, category_id, is_mature=False)

        assert _featured_ids(uow, category_id) == [featured.image_id]

    def test_move_to_missing_category_raises(self, uow):
        service = GalleryService(uow)
        category_id = _batch(service, "Stay")
        image = _images(uow, category_id)[1]

        with pytest.raises(EntityNotFoundError):
            service.move_image(image.image_id, 999, is_mature=False)

    def test_update_image_featuring_unfeatures_siblings(self, uow):
        service = GalleryService(uow)
        category_id = _batch(service, "Edit")
        target = _images(uow, category_id)[2]

        updated = service.update_image(target.image_id, "Fresh alt", is_featured=True, is_mature=False)

        assert updated.alt_text == "Fresh alt"
        assert _featured_ids(uow, category_id) == [target.image_id]


class TestDeletes:
    def test_delete_folder_removes_images_then_category(self, uow):
        service = GalleryService(uow)
        category_id = _batch(service, "Trash")

        assert service.delete_folder(category_id) is True

        assert uow.get(GalleryImageCategory, category_id) is None
        assert _images(uow, category_id) == []

    def test_delete_empty_folder_reports_failure(self, uow):
        service = GalleryService(uow)
        category_id = _batch(service, "Trash", size=1)
        service.delete_image(_images(uow, category_id)[0].image_id)

        assert service.delete_folder(category_id) is False
        assert uow.get(GalleryImageCategory, category_id) is not None

    def test_delete_missing_folder_reports_failure(self, uow):
        assert GalleryService(uow).delete_folder(999) is False

    def test_delete_missing_image_raises(self, uow):
        with pytest.raises(EntityNotFoundError):
            GalleryService(uow).delete_image(999)


_index = st.integers(min_value=0, max_value=20)
_operation = st.one_of(
    st.tuples(st.just("create"), _index, st.booleans()),
    st.tuples(st.just("edit"), _index, st.booleans()),
    st.tuples(st.just("move"), _index, _index),
    st.tuples(st.just("folder"), _index, _index),
    st.tuples(st.just("delete"), _index, _index),
)


def _assert_single_featured(db) -> None:
    crowded = db.execute(
        select(GalleryImage.category_id)
        .where(GalleryImage.is_featured.is_(True))
        .group_by(GalleryImage.category_id)
        .having(func.count() > 1)
    ).all()
    assert crowded == []


def _apply(service: GalleryService, uow: UnitOfWork, category_ids: list[int], op: tuple) -> None:
    kind, first, second = op
    image_ids = uow.db.execute(select(GalleryImage.image_id).order_by(GalleryImage.image_id)).scalars().all()
    category_id = category_ids[first % len(category_ids)]

    if kind == "create":
        service.create_single(category_id, f"/p/{len(image_ids)}.png", "generated", is_featured=second)
    elif kind == "edit" and image_ids:
        service.update_image(image_ids[first % len(image_ids)], "edited", is_featured=second, is_mature=False)
    elif kind == "move" and image_ids:
        service.move_image(
            image_ids[first % len(image_ids)],
            category_ids[second % len(category_ids)],
            is_mature=False,
        )
    elif kind == "folder":
        members = [image.image_id for image in _images(uow, category_id)]
        if members:
            service.update_folder(category_id, is_mature=False, featured_image_id=members[second % len(members)])
    elif kind == "delete" and image_ids:
        service.delete_image(image_ids[second % len(image_ids)])


@pytest.mark.property
class TestFeaturedImageInvariant:
    @given(operations=st.lists(_operation, max_size=25))
    @settings(max_examples=60, deadline=None)
    def test_at_most_one_featured_image_per_category(self, operations):
        engine = build_engine("sqlite+pysqlite:///:memory:")
        Base.metadata.create_all(bind=engine)
        SessionLocal = sessionmaker(bind=engine, autoflush=False, future=True)
        try:
            with SessionLocal() as db:
                seed_reference_data(db)
                uow = UnitOfWork(db)
                service = GalleryService(uow)
                category_ids = [_batch(service, name) for name in ("Alpha", "Beta", "Gamma")]
                _assert_single_featured(db)

                for op in operations:
                    _apply(service, uow, category_ids, op)
                    _assert_single_featured(db)
        finally:
            engine.dispose()
