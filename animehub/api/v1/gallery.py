from fastapi import APIRouter, HTTPException, Response

from animehub.api.deps import RequesterAdultDep, UnitOfWorkDep
from animehub.api.v1.mappers import gallery_category_read, gallery_image_read
from animehub.api.v1.schemas import (
    GalleryBatchCreate,
    GalleryBatchCreated,
    GalleryCategoryRead,
    GalleryFolderUpdate,
    GalleryImageMove,
    GalleryImageRead,
    GalleryImageUpdate,
    GallerySingleCreate,
)
from animehub.services.gallery import GalleryService, ImageSpec


router = APIRouter(prefix="/gallery", tags=["gallery"])


@router.get("/featured", response_model=list[GalleryImageRead])
def list_featured_images(uow=UnitOfWorkDep, is_adult: bool = RequesterAdultDep):
    images = GalleryService(uow).list_featured(is_adult)
    return [gallery_image_read(image) for image in images]


@router.get("/folders", response_model=list[GalleryCategoryRead])
def list_folders(uow=UnitOfWorkDep, is_adult: bool = RequesterAdultDep):
    summaries = GalleryService(uow).list_categories(is_adult)
    return [gallery_category_read(summary) for summary in summaries]


@router.get("/folders/{name}/images", response_model=list[GalleryImageRead])
def list_folder_images(name: str, uow=UnitOfWorkDep, is_adult: bool = RequesterAdultDep):
    images = GalleryService(uow).list_images_by_category_name(name, is_adult)
    return [gallery_image_read(image) for image in images]


@router.post("/batch", response_model=GalleryBatchCreated, status_code=201)
def create_gallery_batch(payload: GalleryBatchCreate, uow=UnitOfWorkDep):
    specs = [
        ImageSpec(image_url=image.image_url, alt_text=image.alt_text, is_featured=image.is_featured)
        for image in payload.images
    ]
    category_id = GalleryService(uow).create_batch(payload.category_name, payload.is_mature_content, specs)
    if category_id is None:
        raise HTTPException(status_code=500, detail="gallery batch was not saved")
    return GalleryBatchCreated(category_id=category_id)


@router.post("/single", response_model=GalleryImageRead, status_code=201)
def create_gallery_image(payload: GallerySingleCreate, uow=UnitOfWorkDep):
    image = GalleryService(uow).create_single(
        category_id=payload.category_id,
        image_url=payload.image_url,
        alt_text=payload.alt_text,
        is_featured=payload.is_featured,
        is_mature=payload.is_mature_content,
    )
    return gallery_image_read(image)


@router.put("/folder/{category_id}", status_code=204)
def update_gallery_folder(category_id: int, payload: GalleryFolderUpdate, uow=UnitOfWorkDep):
    updated = GalleryService(uow).update_folder(
        category_id,
        is_mature=payload.is_mature_content,
        featured_image_id=payload.featured_image_id,
    )
    if not updated:
        raise HTTPException(status_code=404, detail="gallery folder not updated")
    return Response(status_code=204)


@router.delete("/folder/{category_id}", status_code=204)
def delete_gallery_folder(category_id: int, uow=UnitOfWorkDep):
    if not GalleryService(uow).delete_folder(category_id):
        raise HTTPException(status_code=404, detail="gallery folder not found or empty")
    return Response(status_code=204)


@router.put("/images/{image_id}", status_code=204)
def move_gallery_image(image_id: int, payload: GalleryImageMove, uow=UnitOfWorkDep):
    moved = GalleryService(uow).move_image(
        image_id,
        new_category_id=payload.new_category_id,
        is_mature=payload.is_mature_content,
    )
    if not moved:
        raise HTTPException(status_code=404, detail="gallery image not moved")
    return Response(status_code=204)


@router.patch("/images/{image_id}", response_model=GalleryImageRead)
def update_gallery_image(image_id: int, payload: GalleryImageUpdate, uow=UnitOfWorkDep):
    image = GalleryService(uow).update_image(
        image_id,
        alt_text=payload.alt_text,
        is_featured=payload.is_featured,
        is_mature=payload.is_mature_content,
    )
    return gallery_image_read(image)


@router.delete("/images/{image_id}", status_code=204)
def delete_gallery_image(image_id: int, uow=UnitOfWorkDep):
    if not GalleryService(uow).delete_image(image_id):
        raise HTTPException(status_code=404, detail="gallery image not found")
    return Response(status_code=204)
