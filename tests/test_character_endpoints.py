import pytest

from animehub.core.settings import settings


def _profile_payload(first_name: str = "Akira", **overrides) -> dict:
    payload = {
        "first_name": first_name,
        "last_name": "Kaze",
        "japanese_first_name": "アキラ",
        "age": 19,
        "vibe": "Stoic swordswoman",
        "unique_power": "Wind step",
    }
    payload.update(overrides)
    return payload


def _attire_payload(*accessories: dict) -> dict:
    return {
        "name": "Festival yukata",
        "attire_type": "Casual",
        "description": "Indigo cotton with white cranes",
        "hairstyle_description": "Loose bun",
        "accessories": list(accessories),
    }


async def _quest_type_id(client) -> int:
    types = (await client.get("/v1/lore/types")).json()
    return next(t["lore_type_id"] for t in types if t["name"] == "Quest")


@pytest.mark.anyio
async def test_create_and_fetch_profile(client):
    resp = await client.post("/v1/characters", json=_profile_payload())
    assert resp.status_code == 201
    created = resp.json()
    assert created["greatest_feat_lore_id"] == 0
    assert created["greatest_feat"] is None

    resp = await client.get("/v1/characters/AKIRA")
    assert resp.status_code == 200
    profile = resp.json()
    assert profile["profile_id"] == created["profile_id"]
    assert profile["greeting_audio_url"] == f"{settings.greeting_audio_prefix}/akira/greeting.mp3"
    assert profile["attires"] == []

    resp = await client.get("/v1/characters/nobody")
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_profile_best_friend_and_update(client):
    mio = (await client.post("/v1/characters", json=_profile_payload("Mio"))).json()
    akira = (
        await client.post("/v1/characters", json=_profile_payload(best_friend_id=mio["profile_id"]))
    ).json()
    assert akira["best_friend"]["first_name"] == "Mio"

    resp = await client.put(
        f"/v1/characters/profiles/{akira['profile_id']}",
        json=_profile_payload(vibe="Cheerful now", best_friend_id=None),
    )
    assert resp.status_code == 204

    profile = (await client.get("/v1/characters/akira")).json()
    assert profile["vibe"] == "Cheerful now"
    assert profile["best_friend"] is None

    resp = await client.put("/v1/characters/profiles/999", json=_profile_payload())
    assert resp.status_code == 404

    resp = await client.post("/v1/characters", json=_profile_payload("Ren", best_friend_id=999))
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_attire_lifecycle(client):
    akira = (await client.post("/v1/characters", json=_profile_payload())).json()

    resp = await client.post(
        f"/v1/characters/profiles/{akira['profile_id']}/attires",
        json=_attire_payload(
            {"description": "Paper fan"},
            {"description": "Silver katana", "is_weapon": True, "unique_effect": "Cuts spirits"},
        ),
    )
    assert resp.status_code == 201
    attire_id = resp.json()["attire_id"]

    profile = (await client.get("/v1/characters/akira")).json()
    [attire] = profile["attires"]
    assert attire["attire_id"] == attire_id
    assert {a["description"] for a in attire["accessories"]} == {"Paper fan", "Silver katana"}

    resp = await client.delete(f"/v1/characters/attires/{attire_id}")
    assert resp.status_code == 204
    resp = await client.delete(f"/v1/characters/attires/{attire_id}")
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_attire_validation(client):
    akira = (await client.post("/v1/characters", json=_profile_payload())).json()

    resp = await client.post(f"/v1/characters/profiles/{akira['profile_id']}/attires", json=_attire_payload())
    assert resp.status_code == 422

    resp = await client.post(
        "/v1/characters/profiles/999/attires",
        json=_attire_payload({"description": "Paper fan"}),
    )
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_greatest_feat_survives_lore_delete(client):
    akira = (await client.post("/v1/characters", json=_profile_payload())).json()
    resp = await client.post(
        "/v1/lore",
        json={
            "title": "Dragon Duel",
            "lore_type_id": await _quest_type_id(client),
            "narrative": "Akira faces the storm dragon alone.",
            "character_ids": [akira["profile_id"]],
            "character_roles": {str(akira["profile_id"]): "Challenger"},
        },
    )
    assert resp.status_code == 201
    lore_entry_id = resp.json()["lore_entry_id"]

    resp = await client.put(
        f"/v1/characters/profiles/{akira['profile_id']}/greatest-feat",
        json={"lore_entry_id": lore_entry_id},
    )
    assert resp.status_code == 204

    profile = (await client.get("/v1/characters/akira")).json()
    assert profile["greatest_feat"] == "Dragon Duel"
    assert profile["lore_links"][0]["role"] == "Challenger"

    resp = await client.delete(f"/v1/lore/{lore_entry_id}")
    assert resp.status_code == 204

    profile = (await client.get("/v1/characters/akira")).json()
    assert profile["greatest_feat_lore_id"] == 0
    assert profile["greatest_feat"] is None
    assert profile["lore_links"] == []


@pytest.mark.anyio
async def test_greatest_feat_requires_existing_entry(client):
    akira = (await client.post("/v1/characters", json=_profile_payload())).json()

    resp = await client.put(
        f"/v1/characters/profiles/{akira['profile_id']}/greatest-feat",
        json={"lore_entry_id": 4242},
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "lore entry not found"
