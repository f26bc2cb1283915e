from fastapi import APIRouter

from animehub.api.v1 import characters, gallery, lore, media


api_router = APIRouter(prefix="/v1")

api_router.include_router(gallery.router)
api_router.include_router(characters.router)
api_router.include_router(lore.router)
api_router.include_router(media.router)
