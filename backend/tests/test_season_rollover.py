"""Season rollover: team copy with overrides, transfers, carry-over and the audit file."""

import json
from pathlib import Path

import pytest

from api_helpers import bearer, player_ids, seed_teams, team_ids


SEASON_2023 = [
    {
        "name": "Lions",
        "abbreviation": "LIO",
        "color": "#aa0000",
        "city": "Curitiba",
        "season": "2023",
        "titles": [{"national": "1", "conference": "0", "state": "2"}],
        "players": [
            {"name": "Ana", "number": 12, "jersey": "ANA", "stats": {"passing": {"touchdowns": 9}}},
            {"name": "Bia", "number": 7, "retired": True},
            {"name": "Gil", "number": 55, "jersey": "GIL"},
        ],
    },
    {
        "name": "Bears",
        "abbreviation": "BEA",
        "color": "#000000",
        "season": "2023",
        "players": [{"name": "Caio", "number": 3}],
    },
]


async def _start(client, headers, year, body):
    return await client.post(f"/api/admin/seasons/{year}/start", json=body, headers=headers)


@pytest.mark.asyncio
async def test_rollover_copies_teams_and_applies_transfers(client, admin_headers, settings):
    await seed_teams(client, admin_headers, SEASON_2023)
    old_teams = await team_ids(client, "2023")
    old_players = await player_ids(client, "2023")

    r = await _start(
        client,
        admin_headers,
        2024,
        {
            "team_changes": [{"team_id": old_teams["Lions"], "name": "Lions FA", "color": ""}],
            "transfers": [
                {"player_id": old_players["Ana"], "to_team_id": old_teams["Bears"], "new_number": 10},
                {"player_id": old_players["Gil"], "to_team_name": "Lions FA", "new_position": "LB"},
                {"player_id": old_players["Ana"], "to_team_id": old_teams["Lions"]},
                {"player_id": 999, "to_team_id": old_teams["Bears"]},
            ],
        },
    )
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["message"] == "Season 2024 started successfully!"
    assert data["teams"] == 2
    assert data["players"] == 3
    assert data["transfers"] == 2
    assert data["transfers_saved"] == 2
    assert [s["player_id"] for s in data["skipped_transfers"]] == [old_players["Ana"], 999]

    teams = (await client.get("/api/teams", params={"season": "2024"})).json()
    by_name = {t["name"]: t for t in teams}
    assert set(by_name) == {"Lions FA", "Bears"}
    lions = by_name["Lions FA"]
    assert lions["color"] == "#aa0000"
    assert lions["city"] == "Curitiba"
    assert lions["titles"] == [{"national": "1", "conference": "0", "state": "2"}]

    assert {p["name"] for p in lions["players"]} == {"Gil"}
    bears_roster = {p["name"]: p for p in by_name["Bears"]["players"]}
    assert set(bears_roster) == {"Ana", "Caio"}
    assert bears_roster["Ana"]["number"] == 10
    assert bears_roster["Ana"]["jersey"] == "ANA"
    assert bears_roster["Ana"]["stats"] == {}
    assert lions["players"][0]["position"] == "LB"
    assert lions["players"][0]["number"] == 55

    # The previous season is untouched.
    old = (await client.get("/api/teams", params={"season": "2023"})).json()
    assert {t["name"] for t in old} == {"Lions", "Bears"}

    audit = Path(settings.transfers_dir) / "transfers_2023_2024.json"
    records = json.loads(audit.read_text(encoding="utf-8"))
    assert [r["player_name"] for r in records] == ["Ana", "Gil"]
    assert records[0]["from_team_name"] == "Lions"
    assert records[0]["to_team_name"] == "Bears"
    assert records[0]["to_team_abbreviation"] == "BEA"


@pytest.mark.asyncio
async def test_rollover_is_one_shot(client, admin_headers):
    await seed_teams(client, admin_headers, SEASON_2023)
    assert (await _start(client, admin_headers, 2024, {})).status_code == 200

    again = await _start(client, admin_headers, 2024, {})
    assert again.status_code == 400
    assert len(await team_ids(client, "2024")) == 2


@pytest.mark.asyncio
async def test_rollover_without_previous_season(client, admin_headers):
    r = await _start(client, admin_headers, 2031, {})
    assert r.status_code == 400
    assert "2030" in r.json()["detail"]


@pytest.mark.asyncio
async def test_retired_players_are_not_carried_over(client, admin_headers):
    await seed_teams(client, admin_headers, SEASON_2023)
    r = await _start(client, admin_headers, 2024, {})
    assert r.json()["players"] == 3
    names = {p["name"] for p in (await client.get("/api/players", params={"season": "2024"})).json()}
    assert names == {"Ana", "Gil", "Caio"}


@pytest.mark.asyncio
async def test_audit_write_failure_does_not_abort(client, admin_headers, settings, tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("not a directory", encoding="utf-8")
    settings.transfers_dir = str(blocker)

    await seed_teams(client, admin_headers, SEASON_2023)
    players = await player_ids(client, "2023")
    teams = await team_ids(client, "2023")
    r = await _start(
        client,
        admin_headers,
        2024,
        {"transfers": [{"player_id": players["Caio"], "to_team_id": teams["Lions"]}]},
    )
    assert r.status_code == 200
    assert r.json()["transfers"] == 1
    assert r.json()["transfers_saved"] == 0
    assert len(await team_ids(client, "2024")) == 2


@pytest.mark.asyncio
async def test_transfers_endpoint(client, admin_headers, settings):
    await seed_teams(client, admin_headers, SEASON_2023)
    players = await player_ids(client, "2023")
    teams = await team_ids(client, "2023")
    await _start(
        client,
        admin_headers,
        2024,
        {"transfers": [{"player_id": players["Caio"], "to_team_id": teams["Lions"]}]},
    )

    r = await client.get(
        "/api/admin/transfers", params={"from_season": "2023", "to_season": "2024"}, headers=admin_headers
    )
    assert r.status_code == 200
    assert r.json()[0]["player_name"] == "Caio"
    assert r.json()[0]["to_team_name"] == "Lions"

    missing_param = await client.get("/api/admin/transfers", params={"from_season": "2023"}, headers=admin_headers)
    absent = await client.get(
        "/api/admin/transfers", params={"from_season": "2019", "to_season": "2020"}, headers=admin_headers
    )
    assert missing_param.status_code == 400
    assert absent.status_code == 404

    corrupt = Path(settings.transfers_dir) / "transfers_2020_2021.json"
    corrupt.write_text("{not json", encoding="utf-8")
    r = await client.get(
        "/api/admin/transfers", params={"from_season": "2020", "to_season": "2021"}, headers=admin_headers
    )
    assert r.status_code == 500
    assert r.json()["detail"] == "Transfer file is corrupted"


@pytest.mark.asyncio
async def test_admin_routes_require_admin_plan(client, settings):
    assert (await _start(client, {}, 2024, {})).status_code == 401
    assert (await _start(client, bearer("BASIC", settings), 2024, {})).status_code == 403
    r = await _start(client, bearer("PREMIUM", settings), 2024, {})
    assert r.status_code == 400
