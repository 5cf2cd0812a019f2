"""Players API: season listing, season lookup and CRUD over roster links."""

import pytest

from api_helpers import player_ids, seed_teams, team_ids


async def _seed(client, admin_headers):
    await seed_teams(
        client,
        admin_headers,
        [
            {
                "name": "Lions",
                "abbreviation": "LIO",
                "color": "#aa0000",
                "season": "2023",
                "players": [{"name": "Ana", "number": 12}, {"name": "Bia", "number": 7}],
            },
            {
                "name": "Lions",
                "abbreviation": "LIO",
                "color": "#aa0000",
                "season": "2024",
                "players": [
                    {"name": "Zeca", "number": 7},
                    {"name": "Alan", "number": 7},
                    {"name": "Caio", "number": 1},
                ],
            },
        ],
    )


@pytest.mark.asyncio
async def test_list_orders_by_number_then_name(client, admin_headers):
    await _seed(client, admin_headers)
    r = await client.get("/api/players", params={"season": "2024"})
    assert r.status_code == 200
    players = r.json()
    assert [p["name"] for p in players] == ["Caio", "Alan", "Zeca"]
    assert players[0]["team"] == {"id": 2, "name": "Lions", "abbreviation": "LIO", "color": "#aa0000"}
    assert players[0]["season"] == "2024"
    assert "season_history" not in players[0]


@pytest.mark.asyncio
async def test_list_filters_by_team(client, admin_headers):
    await _seed(client, admin_headers)
    r = await client.get("/api/players", params={"season": "2023", "team_id": 1})
    assert {p["name"] for p in r.json()} == {"Ana", "Bia"}
    r = await client.get("/api/players", params={"season": "2023", "team_id": 2})
    assert r.json() == []


@pytest.mark.asyncio
async def test_include_all_seasons_adds_history(client, admin_headers):
    await _seed(client, admin_headers)
    players = (await client.get("/api/players", params={"season": "2023"})).json()
    ana = next(p for p in players if p["name"] == "Ana")

    # Give Ana a 2024 link as well.
    r = await client.put(
        f"/api/players/{ana['id']}", json={"team_id": 2, "season": "2024", "number": 99}
    )
    assert r.status_code == 200

    r = await client.get("/api/players", params={"season": "2023", "include_all_seasons": "true"})
    ana = next(p for p in r.json() if p["name"] == "Ana")
    assert [h["season"] for h in ana["season_history"]] == ["2023", "2024"]
    assert ana["season_history"][1]["team"]["id"] == 2

    r = await client.get(
        "/api/players", params={"season": "2023", "team_id": 1, "include_all_seasons": "true"}
    )
    assert all("season_history" not in p for p in r.json())


@pytest.mark.asyncio
async def test_player_season_lookup(client, admin_headers):
    await _seed(client, admin_headers)
    players = (await client.get("/api/players", params={"season": "2023"})).json()
    ana_id = next(p["id"] for p in players if p["name"] == "Ana")

    r = await client.get(f"/api/players/{ana_id}/seasons/2023")
    assert r.status_code == 200
    data = r.json()
    assert data["player"]["name"] == "Ana"
    assert data["team"]["season"] == "2023"
    assert data["number"] == 12

    assert (await client.get(f"/api/players/{ana_id}/seasons/2030")).status_code == 404


@pytest.mark.asyncio
async def test_create_player_requires_existing_team(client, admin_headers):
    await _seed(client, admin_headers)

    r = await client.post("/api/players", json={"name": "Dani"})
    assert r.status_code == 400
    r = await client.post("/api/players", json={"name": "Dani", "team_id": 99})
    assert r.status_code == 404

    r = await client.post(
        "/api/players",
        json={"name": "Dani", "team_id": 2, "number": "21", "height": "1,80", "age": "25"},
    )
    assert r.status_code == 201
    data = r.json()
    assert data["player"]["height"] == 1.8
    assert data["player"]["age"] == 25
    assert data["link"]["season"] == "2024"
    assert data["link"]["number"] == 21


@pytest.mark.asyncio
async def test_update_player_fields_and_existing_link(client, admin_headers):
    await _seed(client, admin_headers)
    players = (await client.get("/api/players", params={"season": "2024"})).json()
    caio = next(p for p in players if p["name"] == "Caio")

    r = await client.put(
        f"/api/players/{caio['id']}",
        json={"position": "RB", "height": "1,75", "team_id": 2, "season": "2024", "jersey": "CAIO"},
    )
    assert r.status_code == 200
    data = r.json()
    assert data["position"] == "RB"
    assert data["height"] == 1.75
    assert len(data["links"]) == 1
    assert data["links"][0]["jersey"] == "CAIO"
    assert data["links"][0]["number"] == 1
    assert data["links"][0]["team"]["name"] == "Lions"

    assert (await client.put("/api/players/999", json={"name": "x"})).status_code == 404


@pytest.mark.asyncio
async def test_update_player_creates_link_for_new_team_and_season(client, admin_headers):
    await _seed(client, admin_headers)
    bears_2025 = {"name": "Bears", "abbreviation": "BEA", "color": "#000", "season": "2025"}
    await seed_teams(client, admin_headers, [bears_2025])
    bears = (await team_ids(client, "2025"))["Bears"]
    caio = (await player_ids(client, "2024"))["Caio"]

    r = await client.put(
        f"/api/players/{caio}",
        json={"team_id": bears, "season": "2025", "number": 9, "jersey": "C9"},
    )
    assert r.status_code == 200, r.text
    links = r.json()["links"]
    assert len(links) == 1
    assert links[0]["season"] == "2025"
    assert links[0]["number"] == 9
    assert links[0]["jersey"] == "C9"
    assert links[0]["team"]["name"] == "Bears"

    roster_2025 = (await client.get("/api/players", params={"season": "2025"})).json()
    assert [p["name"] for p in roster_2025] == ["Caio"]
    assert "Caio" in await player_ids(client, "2024")


@pytest.mark.asyncio
async def test_delete_player(client, admin_headers):
    await _seed(client, admin_headers)
    players = (await client.get("/api/players", params={"season": "2024"})).json()
    target = players[0]["id"]

    assert (await client.delete(f"/api/players/{target}")).status_code == 200
    remaining = (await client.get("/api/players", params={"season": "2024"})).json()
    assert target not in {p["id"] for p in remaining}
    assert (await client.delete(f"/api/players/{target}")).status_code == 404
