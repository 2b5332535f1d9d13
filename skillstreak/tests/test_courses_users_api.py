def _count_run(client, user_id="kid-1"):
    return client.post(
        "/api/exercises/validateRun",
        json={
            "userId": user_id,
            "exerciseType": "count",
            "exerciseId": "count_pattern",
            "runData": {"guessedCount": 16, "imageId": "pattern"},
            "timeSpentMs": 20000,
        },
    )


class TestCoursesApi:
    def test_list_courses(self, client):
        resp = client.get("/api/courses")
        assert resp.status_code == 200
        courses = resp.json()["courses"]
        assert len(courses) == 5
        assert [c["unlocked"] for c in courses] == [True, False, False, False, False]

    def test_unlocks_follow_user_xp(self, client):
        _count_run(client)
        courses = client.get("/api/courses", params={"userId": "kid-1"}).json()["courses"]
        assert [c["unlocked"] for c in courses] == [True, False, False, False, False]

    def test_get_course(self, client):
        resp = client.get("/api/courses/rhythm_master")
        assert resp.status_code == 200
        course = resp.json()["course"]
        assert course["requiredXP"] == 100
        assert [e["id"] for e in course["exercises"]] == ["rhythm_basic", "rhythm_medium", "rhythm_advanced"]

    def test_unknown_course(self, client):
        resp = client.get("/api/courses/cooking")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "not_found"


class TestUsersApi:
    def test_unknown_user(self, client):
        assert client.get("/api/users/ghost").status_code == 404

    def test_profile_after_run(self, client):
        _count_run(client)
        resp = client.get("/api/users/kid-1")
        assert resp.status_code == 200
        user = resp.json()["user"]
        assert user["totalXP"] == 35
        assert user["currentStreak"] == 1
        assert user["exerciseStats"][0]["exerciseType"] == "count"

    def test_rename(self, client):
        _count_run(client)
        resp = client.put("/api/users/kid-1/username", json={"username": "Robin"})
        assert resp.status_code == 200
        assert resp.json()["user"]["username"] == "Robin"


class TestLeaderboardApi:
    def test_leaderboard_and_rank(self, client):
        _count_run(client, "kid-1")
        _count_run(client, "kid-1")
        _count_run(client, "kid-2")
        board = client.get("/api/leaderboard").json()["leaderboard"]
        assert [(e["userId"], e["rank"], e["totalXP"]) for e in board] == [("kid-1", 1, 70), ("kid-2", 2, 35)]

        rank = client.get("/api/leaderboard/kid-2").json()["userStats"]
        assert rank["rank"] == 2
        assert rank["totalUsers"] == 2

    def test_leaderboard_limit(self, client):
        _count_run(client, "kid-1")
        _count_run(client, "kid-2")
        assert len(client.get("/api/leaderboard", params={"limit": 1}).json()["leaderboard"]) == 1

    def test_global_stats(self, client):
        _count_run(client, "kid-1")
        stats = client.get("/api/leaderboard/stats/global").json()["globalStats"]
        assert stats["totalUsers"] == 1
        assert stats["maxXP"] == 35
        assert stats["activeToday"] == 1
        assert stats["exerciseStats"] == [{"exerciseType": "count", "count": 1, "avgXP": 35.0}]

    def test_unknown_user_rank(self, client):
        assert client.get("/api/leaderboard/ghost").status_code == 404
