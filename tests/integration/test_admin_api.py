"""
Integration tests for the admin scoring endpoints and the leaderboard
"""

import pytest

RACE_ID = "2025-05-miami"
FINAL_ID = "2025-24-abu-dhabi"


@pytest.fixture
async def race_weekend(test_db, seeded_race, make_submission):
    await test_db["submissions"].insert_many([
        make_submission(
            RACE_ID, "user1",
            main_p1="Oscar Piastri", main_p2="Lando Norris", main_p3="George Russell",
            sprint_p1="Lando Norris", sprint_p2="Oscar Piastri", sprint_p3="Lewis Hamilton"
        ),
        make_submission(
            RACE_ID, "user2",
            main_p1="Lando Norris", main_p2="Oscar Piastri", main_p3="George Russell",
            main_jolly="Lando Norris"
        ),
    ])
    await test_db["ranking"].insert_many([
        {"_id": "user1", "name": "Uno", "total_points": 0, "jolly": 0},
        {"_id": "user2", "name": "Dos", "total_points": 0, "jolly": 0},
    ])


class TestRaceResults:
    """PUT /admin/races/{race_id}/results"""

    @pytest.mark.asyncio
    async def test_save_results_and_score(self, client, race_weekend, sample_official_result):
        response = await client.put(f"/admin/races/{RACE_ID}/results", json=sample_official_result)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["processed"] == 2
        assert data["updated"] == 2
        assert data["failed_user_ids"] == []
        assert data["snapshot_id"].startswith("snapshot_")

        board = (await client.get("/leaderboard")).json()
        # user1: 29 -> 30 + sprint 18; user2: 7 + 5 - 3 (empty sprint)
        assert [(e["user_id"], e["total_points"]) for e in board] == [("user1", 48), ("user2", 9)]
        assert board[0]["jolly"] == 1

    @pytest.mark.asyncio
    async def test_resave_is_idempotent(self, client, race_weekend, sample_official_result):
        await client.put(f"/admin/races/{RACE_ID}/results", json=sample_official_result)
        await client.put(f"/admin/races/{RACE_ID}/results", json=sample_official_result)
        response = await client.post(f"/admin/races/{RACE_ID}/score")

        assert response.status_code == 200
        user1 = (await client.get("/leaderboard/users/user1")).json()
        assert user1["total_points"] == 48
        assert user1["jolly"] == 1

    @pytest.mark.asyncio
    async def test_race_not_found(self, client, test_db, sample_official_result):
        response = await client.put("/admin/races/nope/results", json=sample_official_result)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_incomplete_podium(self, client, race_weekend):
        response = await client.put(
            f"/admin/races/{RACE_ID}/results",
            json={"p1": "Oscar Piastri", "p2": "Lando Norris"}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_rescore_without_results(self, client, race_weekend):
        response = await client.post(f"/admin/races/{RACE_ID}/score")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_cancelled_race_conflict(self, client, race_weekend, sample_official_result):
        cancel = await client.put(
            f"/admin/races/{RACE_ID}/cancellation",
            json={"cancelled_main": True}
        )
        assert cancel.status_code == 200
        assert cancel.json()["cancelled_main"] is True

        response = await client.put(f"/admin/races/{RACE_ID}/results", json=sample_official_result)

        assert response.status_code == 409
        board = (await client.get("/leaderboard")).json()
        assert all(e["total_points"] == 0 for e in board)

    @pytest.mark.asyncio
    async def test_cancellation_unknown_race(self, client, test_db):
        response = await client.put("/admin/races/nope/cancellation", json={"cancelled_sprint": True})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_last_race_doubles_by_default(self, client, race_weekend, make_submission, test_db):
        await test_db["submissions"].insert_one(
            make_submission(FINAL_ID, "user2", main_p1="Max Verstappen")
        )

        response = await client.put(
            f"/admin/races/{FINAL_ID}/results",
            json={"p1": "Max Verstappen", "p2": "Lando Norris", "p3": "Oscar Piastri"}
        )

        assert response.status_code == 200
        user2 = (await client.get("/leaderboard/users/user2")).json()
        assert user2["total_points"] == 24


class TestChampionship:
    """PUT /admin/championship/results"""

    @pytest.mark.asyncio
    async def test_championship_results(self, client, race_weekend, test_db):
        await test_db["ranking"].update_one(
            {"_id": "user2"},
            {"$set": {
                "championship_drivers": ["Lando Norris", "Max Verstappen", "Oscar Piastri"],
                "championship_constructors": ["McLaren", "Mercedes", "Ferrari"],
            }}
        )

        response = await client.put("/admin/championship/results", json={
            "p1": "Lando Norris", "p2": "Oscar Piastri", "p3": "Max Verstappen",
            "c1": "McLaren", "c2": "Mercedes", "c3": "Ferrari",
        })

        assert response.status_code == 200
        user2 = (await client.get("/leaderboard/users/user2")).json()
        # drivers 12, constructors 12 + 10 + 7 = 29 -> 30
        assert user2["championship_pts"] == 42
        assert user2["jolly"] == 1

    @pytest.mark.asyncio
    async def test_championship_incomplete(self, client, test_db):
        response = await client.put("/admin/championship/results", json={"p1": "Lando Norris"})

        assert response.status_code == 422


class TestLeaderboardTrend:
    @pytest.mark.asyncio
    async def test_position_delta_after_second_race(self, client, race_weekend, test_db, sample_official_result):
        await client.put(f"/admin/races/{RACE_ID}/results", json=sample_official_result)

        # Corrected result flips the order
        corrected = dict(sample_official_result, p1="Lando Norris", p2="Oscar Piastri")
        await client.put(f"/admin/races/{RACE_ID}/results", json=corrected)

        board = (await client.get("/leaderboard")).json()
        deltas = {e["user_id"]: e["position_delta"] for e in board}

        assert board[0]["user_id"] == "user2"
        assert deltas == {"user2": 1, "user1": -1}

    @pytest.mark.asyncio
    async def test_user_not_found(self, client, test_db):
        response = await client.get("/leaderboard/users/ghost")

        assert response.status_code == 404


class TestAuditAndFeed:
    @pytest.mark.asyncio
    async def test_ledger_audit(self, client, race_weekend, test_db, sample_official_result):
        await client.put(f"/admin/races/{RACE_ID}/results", json=sample_official_result)

        ok = (await client.get("/admin/ledger/audit")).json()
        assert ok == {"consistent": True, "user_ids": []}

        await test_db["ranking"].update_one({"_id": "user2"}, {"$inc": {"total_points": 5}})
        broken = (await client.get("/admin/ledger/audit")).json()
        assert broken == {"consistent": False, "user_ids": ["user2"]}

    @pytest.mark.asyncio
    async def test_feed_results(self, client, seeded_race):
        response = await client.get(f"/admin/races/{RACE_ID}/feed-results")

        assert response.status_code == 200
        data = response.json()
        assert data["main"] == ["Oscar Piastri", "Lando Norris", "George Russell"]
        assert data["sprint"] == ["Lando Norris", "Oscar Piastri", "Lewis Hamilton"]

    @pytest.mark.asyncio
    async def test_feed_results_not_published(self, client, seeded_race):
        response = await client.get(f"/admin/races/{FINAL_ID}/feed-results")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_feed_unavailable(self, client, seeded_race):
        response = await client.get(
            f"/admin/races/{RACE_ID}/feed-results",
            params={"season": 2025, "round": 9}
        )

        assert response.status_code == 502


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["database"] == "connected"


class TestResultTables:
    """GET /admin/races/{race_id}/submissions"""

    @pytest.mark.asyncio
    async def test_submission_breakdown(self, client, race_weekend, sample_official_result):
        await client.put(f"/admin/races/{RACE_ID}/results", json=sample_official_result)

        response = await client.get(f"/admin/races/{RACE_ID}/submissions")

        assert response.status_code == 200
        rows = {row["user_id"]: row for row in response.json()}
        assert rows["user1"]["main"]["total"] == 29
        assert rows["user1"]["points_earned"] == 30
        assert rows["user2"]["main"]["j1_pts"] == 5
        assert rows["user2"]["points_earned_sprint"] == -3

    @pytest.mark.asyncio
    async def test_breakdown_before_results(self, client, race_weekend):
        response = await client.get(f"/admin/races/{RACE_ID}/submissions")

        assert response.status_code == 422


class TestFeedImport:
    @pytest.mark.asyncio
    async def test_feed_status(self, client, seeded_race):
        available = (await client.get(f"/admin/races/{RACE_ID}/feed-status")).json()
        pending = (await client.get(f"/admin/races/{FINAL_ID}/feed-status")).json()

        assert available["available"] is True
        assert pending["available"] is False

    @pytest.mark.asyncio
    async def test_import_results_from_feed(self, client, race_weekend):
        response = await client.put(f"/admin/races/{RACE_ID}/results/from-feed")

        assert response.status_code == 200
        assert response.json()["updated"] == 2
        user1 = (await client.get("/leaderboard/users/user1")).json()
        assert user1["total_points"] == 48

    @pytest.mark.asyncio
    async def test_import_when_feed_has_nothing(self, client, seeded_race):
        response = await client.put(f"/admin/races/{FINAL_ID}/results/from-feed")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_last_race(self, client):
        response = await client.get("/admin/feed/last-race")

        assert response.status_code == 200
        assert response.json()["main"][0] == "Oscar Piastri"


class TestChampionshipPicks:
    """PUT /admin/users/{user_id}/championship-picks"""

    @pytest.mark.asyncio
    async def test_picks_are_normalized(self, client, test_db):
        response = await client.put("/admin/users/user9/championship-picks", json={
            "drivers": ["Lando Norris", "oscar piastri", "Kimi Antonelli"],
            "constructors": ["McLaren", "Red Bull Racing", "Ferrari"],
        })

        assert response.status_code == 200
        doc = await test_db["ranking"].find_one({"_id": "user9"})
        assert doc["championship_drivers"] == ["Lando Norris", "Oscar Piastri", "Andrea Kimi Antonelli"]
        assert doc["championship_constructors"] == ["McLaren", "Red Bull", "Ferrari"]

    @pytest.mark.asyncio
    async def test_more_than_three_picks(self, client, test_db):
        response = await client.put("/admin/users/user9/championship-picks", json={
            "drivers": ["Lando Norris", "Oscar Piastri", "Max Verstappen", "George Russell"],
        })

        assert response.status_code == 422
        assert await test_db["ranking"].find_one({"_id": "user9"}) is None


class TestSnapshots:
    @pytest.mark.asyncio
    async def test_snapshot_by_id(self, client, race_weekend, sample_official_result):
        scored = (await client.put(f"/admin/races/{RACE_ID}/results", json=sample_official_result)).json()

        response = await client.get(f"/leaderboard/snapshots/{scored['snapshot_id']}")

        assert response.status_code == 200
        snapshot = response.json()
        assert snapshot["race_id"] == RACE_ID
        assert [e["user_id"] for e in snapshot["entries"]] == ["user1", "user2"]

    @pytest.mark.asyncio
    async def test_unknown_snapshot(self, client, test_db):
        response = await client.get("/leaderboard/snapshots/snapshot_0_missing")

        assert response.status_code == 404
