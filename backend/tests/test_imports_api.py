"""Bulk imports: JSON seed and team/player spreadsheets."""

import pytest

from api_helpers import csv_bytes, player_ids, seed_teams, team_ids, xlsx_bytes

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


async def _upload(client, headers, path, content, filename="sheet.xlsx"):
    mime = XLSX if filename.endswith(".xlsx") else "text/csv"
    return await client.post(path, files={"file": (filename, content, mime)}, headers=headers)


@pytest.mark.asyncio
async def test_import_data_seeds_teams_players_and_links(client, admin_headers):
    data = await seed_teams(
        client,
        admin_headers,
        [
            {"name": "Lions", "abbreviation": "LIO", "color": "#a00", "players": [{"name": "Ana"}]},
            {"name": "Bears", "abbreviation": "BEA", "color": "#000", "season": "2023"},
        ],
    )
    assert data["teams"] == 2
    assert set(await team_ids(client, "2024")) == {"Lions"}
    assert set(await team_ids(client, "2023")) == {"Bears"}
    assert set(await player_ids(client, "2024")) == {"Ana"}


@pytest.mark.asyncio
async def test_import_teams_upserts_by_name_and_season(client, admin_headers):
    rows = [
        {
            "name": "Lions",
            "abbreviation": "LIO",
            "color": "#aa0000",
            "season": 2024,
            "founded": 1999,
            "titles": '[{"national": "2", "conference": "1", "state": "0"}]',
        },
        {"name": "Bears", "abbreviation": None, "color": "#000000", "season": 2024},
        {"name": "Owls", "abbreviation": "OWL", "color": "#333333", "season": 2024, "titles": "[broken"},
    ]
    r = await _upload(client, admin_headers, "/api/admin/import/teams", xlsx_bytes(rows))
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["success"] == 1
    assert [e["row"] for e in data["errors"]] == [3, 4]

    teams = (await client.get("/api/teams", params={"season": "2024"})).json()
    assert len(teams) == 1
    assert teams[0]["founded"] == "1999"
    assert teams[0]["titles"] == [{"national": "2", "conference": "1", "state": "0"}]

    r = await _upload(
        client,
        admin_headers,
        "/api/admin/import/teams",
        csv_bytes([{"name": "Lions", "abbreviation": "LIO", "color": "#ffffff", "season": 2024}]),
        filename="teams.csv",
    )
    assert r.json()["errors"] is None
    teams = (await client.get("/api/teams", params={"season": "2024"})).json()
    assert len(teams) == 1
    assert teams[0]["color"] == "#ffffff"


@pytest.mark.asyncio
async def test_import_players_creates_then_updates_links(client, admin_headers):
    await seed_teams(client, admin_headers, [{"name": "Lions", "abbreviation": "LIO", "color": "#a00"}])
    rows = [
        {
            "name": "007",
            "team_name": "Lions",
            "season": "2024",
            "number": 10,
            "jersey": "BOND",
            "height": "1,85",
            "position": "QB",
            "passing_touchdowns": 3,
        },
        {"name": "Ana", "team_name": "Ghosts", "season": "2024"},
        {"name": None, "team_name": "Lions", "season": "2024"},
    ]
    r = await _upload(client, admin_headers, "/api/admin/import/players", xlsx_bytes(rows))
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["success"] == 1
    assert [e["row"] for e in data["errors"]] == [3, 4]
    assert "Ghosts" in data["errors"][0]["error"]

    players = (await client.get("/api/players", params={"season": "2024"})).json()
    assert len(players) == 1
    bond = players[0]
    assert bond["name"] == "007"
    assert bond["height"] == 1.85
    assert bond["number"] == 10
    assert bond["stats"]["passing"]["touchdowns"] == 3

    rows = [{"name": "007", "team_name": "Lions", "season": "2024", "number": 11, "passing_touchdowns": 4}]
    r = await _upload(client, admin_headers, "/api/admin/import/players", xlsx_bytes(rows))
    assert r.json()["success"] == 1
    players = (await client.get("/api/players", params={"season": "2024"})).json()
    assert len(players) == 1
    assert players[0]["number"] == 11
    assert players[0]["stats"]["passing"]["touchdowns"] == 4


@pytest.mark.asyncio
async def test_import_players_isolates_a_row_the_database_rejects(client, admin_headers):
    await seed_teams(client, admin_headers, [{"name": "Lions", "abbreviation": "LIO", "color": "#a00"}])
    rows = [
        {"name": "Ok", "team_name": "Lions", "season": "2024", "number": "9"},
        {"name": "Bad", "team_name": "Lions", "season": "2024", "number": "1e20"},
    ]
    r = await _upload(client, admin_headers, "/api/admin/import/players", csv_bytes(rows), "players.csv")
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["success"] == 1
    assert [e["row"] for e in data["errors"]] == [3]

    players = (await client.get("/api/players", params={"season": "2024"})).json()
    assert [p["name"] for p in players] == ["Ok"]
    assert players[0]["number"] == 9


@pytest.mark.asyncio
async def test_import_requires_admin(client, basic_headers):
    r = await _upload(client, basic_headers, "/api/admin/import/teams", csv_bytes([{"name": "x"}]), "t.csv")
    assert r.status_code == 403
