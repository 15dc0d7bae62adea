"""
End-to-end route tests through FastAPI's TestClient.

Auth and the database are overridden in conftest; no API keys are set, so
generation runs on demo drafts and extraction uses a scripted fake client.
Run with: pytest tests/ -v
"""

import json
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

TRANSCRIPT = (
    "The biggest mistake new managers make is trying to be liked instead of being clear. "
    "Every one-on-one should start with what the report wants to talk about, not your agenda. "
    "We doubled retention once we started writing down every decision and the reason behind it. "
    "Feedback lands better when it is specific, timely and tied to an outcome the person cares about. "
    "Hiring slowly felt painful at the time but it saved the team from two very expensive mistakes. "
    "Most burnout on the team came from unclear priorities rather than from the amount of work."
)
GOOD_TWEET = (
    "I learned something surprising last week: most people never ask for feedback. "
    "What do you think stops them?"
)


def _save(client, *contents):
    response = client.post("/api/tweets", json={"tweets": [{"content": c} for c in contents]})
    assert response.status_code == 200
    return response.json()["tweets"]


# ── System ──

class TestSystem:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_env_status_reports_demo_mode(self, client):
        data = client.get("/api/system/env-status").json()
        assert data["demoMode"] is True
        assert "DEEPSEEK_API_KEY" in data["missing"]

    def test_request_id_header(self, client):
        response = client.get("/api/system/env-status")
        assert response.headers.get("x-request-id")

    def test_deep_health_check_without_supabase(self, client):
        data = client.get("/api/system/health-check").json()
        assert data["checks"]["database"]["status"] == "ok"
        assert data["checks"]["tweets_count"]["count"] == 0
        assert data["checks"]["supabase_auth"]["status"] == "error"
        assert data["status"] == "degraded"


# ── Scoring ──

class TestScoringRoutes:

    def test_score(self, client):
        response = client.post("/api/scoring/score", json={
            "content": GOOD_TWEET,
            "context": {"contentMode": "communityEngagement"},
        })
        assert response.status_code == 200
        data = response.json()
        assert 0 <= data["viralScore"] <= 100
        assert set(data["scores"]) == {"authenticity", "engagementPrediction", "qualitySignals"}

    def test_rank(self, client):
        data = client.post("/api/scoring/rank", json={"contents": ["ok", GOOD_TWEET]}).json()
        assert data["total"] == 2
        assert data["tweets"][0]["content"] == GOOD_TWEET

    def test_scoring_needs_no_auth(self, client):
        from tweetcraft.api.auth.middleware import get_current_user
        from tweetcraft.main import app

        app.dependency_overrides.pop(get_current_user)
        assert client.post("/api/scoring/score", json={"content": "hello"}).status_code == 200


# ── Generation ──

class TestGenerationRoutes:

    def test_generate_demo_drafts(self, client):
        data = client.post("/api/tweets/generate", json={"idea": "Remote teams need rituals", "tone": "casual"}).json()
        assert data["isFallback"] is True
        assert data["totalGenerated"] == 3
        assert data["scoringEnabled"] is True
        scores = [t["viralScore"] for t in data["tweets"]]
        assert scores == sorted(scores, reverse=True)
        assert "savedTweets" not in data

    def test_generate_and_save(self, client):
        data = client.post("/api/tweets/generate", json={
            "idea": "Remote teams need rituals",
            "ideaType": "voice",
            "count": 2,
            "save": True,
        }).json()
        assert data["idea"]["type"] == "voice"
        assert len(data["savedTweets"]) == 2
        assert {t["idea_id"] for t in data["savedTweets"]} == {data["idea"]["id"]}
        assert client.get("/api/tweets").json()["total"] == 2

    def test_generate_validates_idea(self, client):
        assert client.post("/api/tweets/generate", json={"idea": ""}).status_code == 422

    def test_generate_from_insights(self, client):
        data = client.post("/api/tweets/generate-from-insights", json={
            "insights": [
                {"id": "a", "content": "Clarity beats being liked"},
                {"id": "b", "content": "Write down every decision", "insight_type": "actionable_tip"},
            ],
            "contentMode": "valueFirst",
        }).json()
        assert data["totalGenerated"] == 2
        assert [t["insightId"] for t in data["tweets"]] == ["a", "b"]
        assert all(t["isFallback"] for t in data["tweets"])

    def test_generate_from_no_insights(self, client):
        response = client.post("/api/tweets/generate-from-insights", json={"insights": []})
        assert response.status_code == 400

    def test_saving_insight_tweets_ignores_foreign_insight_ids(self, client):
        data = client.post("/api/tweets/generate-from-insights", json={
            "insights": [{"id": "not-mine", "content": "Clarity beats being liked"}],
            "save": True,
        }).json()
        assert data["savedTweets"][0]["insight_id"] is None


# ── Board ──

class TestBoardRoutes:

    def test_save_rescores_server_side(self, client):
        tweets = _save(client, GOOD_TWEET)
        expected = client.post("/api/scoring/score", json={"content": GOOD_TWEET}).json()
        assert tweets[0]["viral_score"] == expected["viralScore"]
        assert tweets[0]["status"] == "generated"

    def test_move_through_board(self, client):
        tweet = _save(client, GOOD_TWEET)[0]
        for status in ("in_review", "approved", "published"):
            response = client.patch(f"/api/tweets/{tweet['id']}/status", json={"status": status})
            assert response.status_code == 200
            assert response.json()["status"] == status

        published = client.get("/api/tweets", params={"status": "published"}).json()
        assert [t["id"] for t in published["tweets"]] == [tweet["id"]]

    def test_invalid_move_is_conflict(self, client):
        tweet = _save(client, GOOD_TWEET)[0]
        response = client.patch(f"/api/tweets/{tweet['id']}/status", json={"status": "published"})
        assert response.status_code == 409

    def test_unknown_status_rejected(self, client):
        tweet = _save(client, GOOD_TWEET)[0]
        response = client.patch(f"/api/tweets/{tweet['id']}/status", json={"status": "archived"})
        assert response.status_code == 422

    def test_edit_content_rescores(self, client):
        tweet = _save(client, "ok")[0]
        response = client.patch(f"/api/tweets/{tweet['id']}/content", json={"content": GOOD_TWEET})
        assert response.status_code == 200
        assert response.json()["viral_score"] > tweet["viral_score"]

    def test_published_tweet_cannot_be_edited(self, client):
        tweet = _save(client, GOOD_TWEET)[0]
        client.patch(f"/api/tweets/{tweet['id']}/status", json={"status": "approved"})
        client.patch(f"/api/tweets/{tweet['id']}/status", json={"status": "published"})
        response = client.patch(f"/api/tweets/{tweet['id']}/content", json={"content": "changed"})
        assert response.status_code == 409

    def test_schedule_defaults_and_approves(self, client):
        tweet = _save(client, GOOD_TWEET)[0]
        data = client.post(f"/api/tweets/{tweet['id']}/schedule").json()
        assert data["status"] == "approved"
        assert data["scheduled_time"] is not None

    def test_schedule_with_time(self, client):
        tweet = _save(client, GOOD_TWEET)[0]
        data = client.post(
            f"/api/tweets/{tweet['id']}/schedule", json={"scheduledTime": "2030-01-02T09:30:00"}
        ).json()
        assert data["scheduled_time"].startswith("2030-01-02T09:30:00")

    def test_delete_and_missing(self, client):
        tweet = _save(client, GOOD_TWEET)[0]
        assert client.delete(f"/api/tweets/{tweet['id']}").json() == {"deleted": True, "id": tweet["id"]}
        assert client.delete(f"/api/tweets/{tweet['id']}").status_code == 404
        assert client.patch("/api/tweets/nope/status", json={"status": "approved"}).status_code == 404

    def test_requires_auth(self, client):
        from tweetcraft.api.auth.middleware import get_current_user
        from tweetcraft.main import app

        app.dependency_overrides.pop(get_current_user)
        assert client.get("/api/tweets").status_code == 401


# ── Transcripts ──

class TestTranscriptRoutes:

    def _use_extractor(self, fake_llm, reply):
        from tweetcraft.api.transcripts.routes import get_insight_extractor
        from tweetcraft.main import app
        from tweetcraft.services.content.insight_extractor import InsightExtractor

        app.dependency_overrides[get_insight_extractor] = lambda: InsightExtractor(
            client=fake_llm(replies=[reply])
        )

    def test_create_validates_length(self, client):
        response = client.post("/api/transcripts", json={"title": "Call", "content": "too short"})
        assert response.status_code == 400

    def test_create(self, client):
        data = client.post("/api/transcripts", json={
            "title": "Manager coaching", "content": TRANSCRIPT, "contentType": "coaching_call",
        }).json()
        assert data["status"] == "processing"
        assert data["content_type"] == "coaching_call"

    def test_extract_without_key_is_unavailable(self, client):
        response = client.post("/api/transcripts/extract-insights", json={"transcript": TRANSCRIPT})
        assert response.status_code == 503

    def test_extract_and_save(self, client, fake_llm):
        self._use_extractor(fake_llm, json.dumps({
            "insights": [
                {"content": "Clarity beats being liked as a new manager", "insight_type": "lesson_learned"},
                {"content": "Let the report set the one-on-one agenda", "insight_type": "actionable_tip"},
                {"content": "Written decisions doubled retention", "insight_type": "statistic"},
            ],
            "content_summary": "Coaching call about management",
        }))
        transcript = client.post("/api/transcripts", json={"title": "Call", "content": TRANSCRIPT}).json()

        data = client.post("/api/transcripts/extract-insights", json={
            "transcript": TRANSCRIPT, "transcriptId": transcript["id"],
        }).json()
        assert data["total_extracted"] == 3
        assert data["content_summary"] == "Coaching call about management"
        assert all("id" in insight for insight in data["insights"])

        listed = client.get(f"/api/transcripts/{transcript['id']}/insights").json()
        assert [i["insight_type"] for i in listed["insights"]] == ["lesson_learned", "actionable_tip", "statistic"]

    def test_failed_extraction_marks_transcript_failed(self, client, db_session, fake_llm):
        from tweetcraft.models import Transcript

        self._use_extractor(fake_llm, "not json at all")
        transcript = client.post("/api/transcripts", json={"title": "Call", "content": TRANSCRIPT}).json()
        response = client.post("/api/transcripts/extract-insights", json={
            "transcript": TRANSCRIPT, "transcriptId": transcript["id"],
        })
        assert response.status_code == 502
        db_session.expire_all()
        assert db_session.get(Transcript, transcript["id"]).status == "failed"

    def test_manual_insights_and_status(self, client):
        transcript = client.post("/api/transcripts", json={"title": "Call", "content": TRANSCRIPT}).json()
        saved = client.post(f"/api/transcripts/{transcript['id']}/insights", json={
            "insights": [{"content": "  A hand-written insight  ", "insight_type": "quote"}],
        }).json()
        assert saved["total"] == 1
        assert saved["insights"][0]["content"] == "A hand-written insight"

        updated = client.patch(f"/api/transcripts/{transcript['id']}/status", json={"status": "completed"})
        assert updated.json()["status"] == "completed"

    def test_unknown_transcript(self, client):
        assert client.get("/api/transcripts/missing/insights").status_code == 404


# ── Training examples ──

class TestTrainingRoutes:

    def test_add_and_list(self, client):
        response = client.post("/api/training-examples", json={"examples": ["my first tweet", "my second tweet"]})
        assert response.status_code == 200
        assert response.json()["availableSlots"] == 8

        data = client.get("/api/training-examples").json()
        assert data["total"] == 2
        assert data["availableSlots"] == 8

    def test_limit_is_conflict(self, client):
        client.post("/api/training-examples", json={"examples": [f"tweet {i}" for i in range(9)]})
        response = client.post("/api/training-examples", json={"examples": ["one", "two"]})
        assert response.status_code == 409

    def test_import_without_token_is_unavailable(self, client):
        response = client.post("/api/training-examples/import-twitter", json={"twitterUsername": "writer"})
        assert response.status_code == 503
