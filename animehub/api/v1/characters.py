from fastapi import APIRouter, HTTPException, Response

from animehub.api.deps import UnitOfWorkDep
from animehub.api.v1.mappers import character_profile_read
from animehub.api.v1.schemas import (
    AttireCreate,
    AttireCreated,
    CharacterProfileRead,
    CharacterProfileWrite,
    GreatestFeatUpdate,
)
from animehub.services.attires import AccessorySpec, AttireService, AttireSpec
from animehub.services.characters import CharacterProfileService, ProfileFields
from animehub.services.lore import LoreService


router = APIRouter(prefix="/characters", tags=["characters"])


def _profile_fields(payload: CharacterProfileWrite) -> ProfileFields:
    return ProfileFields(**payload.model_dump())


@router.post("", response_model=CharacterProfileRead, status_code=201)
def create_profile(payload: CharacterProfileWrite, uow=UnitOfWorkDep):
    service = CharacterProfileService(uow)
    profile = service.create_profile(_profile_fields(payload))
    return character_profile_read(service.get_profile(profile.profile_id))


@router.get("/{name}", response_model=CharacterProfileRead)
def get_profile(name: str, uow=UnitOfWorkDep):
    profile = CharacterProfileService(uow).get_profile_by_name(name)
    if profile is None:
        raise HTTPException(status_code=404, detail="character profile not found")
    return character_profile_read(profile)


@router.put("/profiles/{profile_id}", status_code=204)
def update_profile(profile_id: int, payload: CharacterProfileWrite, uow=UnitOfWorkDep):
    # Re-sending identical values writes nothing; that is still a success.
    CharacterProfileService(uow).update_profile(profile_id, _profile_fields(payload))
    return Response(status_code=204)


@router.put("/profiles/{profile_id}/greatest-feat", status_code=204)
def update_greatest_feat(profile_id: int, payload: GreatestFeatUpdate, uow=UnitOfWorkDep):
    LoreService(uow).update_greatest_feat(profile_id, payload.lore_entry_id)
    return Response(status_code=204)


@router.post("/profiles/{profile_id}/attires", response_model=AttireCreated, status_code=201)
def add_attire(profile_id: int, payload: AttireCreate, uow=UnitOfWorkDep):
    spec = AttireSpec(
        name=payload.name,
        attire_type=payload.attire_type,
        description=payload.description,
        hairstyle_description=payload.hairstyle_description,
        accessories=[
            AccessorySpec(
                description=accessory.description,
                is_weapon=accessory.is_weapon,
                unique_effect=accessory.unique_effect,
            )
            for accessory in payload.accessories
        ],
    )
    attire_id = AttireService(uow).add_attire(profile_id, spec)
    return AttireCreated(attire_id=attire_id)


@router.delete("/attires/{attire_id}", status_code=204)
def delete_attire(attire_id: int, uow=UnitOfWorkDep):
    if not AttireService(uow).delete_attire(attire_id):
        raise HTTPException(status_code=404, detail="attire not found")
    return Response(status_code=204)
