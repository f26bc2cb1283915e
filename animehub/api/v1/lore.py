from fastapi import APIRouter, HTTPException, Response

from animehub.api.deps import UnitOfWorkDep
from animehub.api.v1.mappers import lore_entry_read, lore_entry_summary_read
from animehub.api.v1.schemas import (
    LoreEntryCreate,
    LoreEntryCreated,
    LoreEntryRead,
    LoreEntrySummaryRead,
    LoreTypeRead,
)
from animehub.services.lore import LoreService


router = APIRouter(prefix="/lore", tags=["lore"])


@router.get("/types", response_model=list[LoreTypeRead])
def list_lore_types(uow=UnitOfWorkDep):
    return LoreService(uow).list_lore_types()


@router.get("", response_model=list[LoreEntrySummaryRead])
def list_lore_entries(uow=UnitOfWorkDep):
    return [lore_entry_summary_read(entry) for entry in LoreService(uow).list_lore_entries()]


@router.get("/{lore_entry_id}", response_model=LoreEntryRead)
def get_lore_entry(lore_entry_id: int, uow=UnitOfWorkDep):
    entry = LoreService(uow).get_lore_entry(lore_entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="lore entry not found")
    return lore_entry_read(entry)


@router.post("", response_model=LoreEntryCreated, status_code=201)
def create_lore_entry(payload: LoreEntryCreate, uow=UnitOfWorkDep):
    lore_entry_id = LoreService(uow).create_lore_entry(
        title=payload.title,
        lore_type_id=payload.lore_type_id,
        narrative=payload.narrative,
        character_ids=payload.character_ids,
        roles=payload.character_roles,
    )
    if lore_entry_id is None:
        raise HTTPException(status_code=500, detail="lore entry was not saved")
    return LoreEntryCreated(lore_entry_id=lore_entry_id)


@router.delete("/{lore_entry_id}", status_code=204)
def delete_lore_entry(lore_entry_id: int, uow=UnitOfWorkDep):
    if not LoreService(uow).delete_lore_entry(lore_entry_id):
        raise HTTPException(status_code=404, detail="lore entry not found")
    return Response(status_code=204)
