"""
Tests for the persistence services: the tweet board, transcripts and
training examples. Uses the in-memory SQLite session from conftest.
Run with: pytest tests/unit/ -v
"""

import os
import sys
from datetime import datetime, timedelta

import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

USER = "user-1"
OTHER_USER = "user-2"
TRANSCRIPT = "A long enough transcript sentence about product strategy and focus. " * 10


def _saved_tweet(db, content="I learned to ship smaller changes. What do you think?", user_id=USER):
    from tweetcraft.core.viral_scorer import score_tweet_viral_potential
    from tweetcraft.services.tweets import board

    return board.save_tweets(db, user_id, [score_tweet_viral_potential(content)])[0]


# ── Kanban transitions ──

class TestTransitions:

    @pytest.mark.parametrize("current,requested", [
        ("generated", "in_review"),
        ("generated", "approved"),
        ("in_review", "generated"),
        ("in_review", "approved"),
        ("approved", "published"),
    ])
    def test_allowed(self, current, requested):
        from tweetcraft.services.tweets.board import can_transition

        assert can_transition(current, requested)

    @pytest.mark.parametrize("current,requested", [
        ("generated", "published"),
        ("approved", "generated"),
        ("published", "approved"),
        ("published", "generated"),
        ("generated", "archived"),
        ("bogus", "approved"),
    ])
    def test_rejected(self, current, requested):
        from tweetcraft.services.tweets.board import can_transition

        assert not can_transition(current, requested)


# ── Board ──

class TestBoard:

    def test_save_stores_score_snapshot(self, db_session):
        tweet = _saved_tweet(db_session)
        data = tweet.to_dict()

        assert data["status"] == "generated"
        assert data["viral_score"] is not None
        assert set(data["scores"]) == {"authenticity", "engagementPrediction", "qualitySignals"}
        assert "reasoning" in data["insights"]

    def test_full_lifecycle(self, db_session):
        from tweetcraft.services.tweets import board

        tweet = _saved_tweet(db_session)
        for status in ("in_review", "approved", "published"):
            tweet = board.move_tweet(db_session, USER, tweet.id, status)
        assert tweet.status == "published"

    def test_invalid_move(self, db_session):
        from tweetcraft.services.errors import InvalidStatusTransition
        from tweetcraft.services.tweets import board

        tweet = _saved_tweet(db_session)
        with pytest.raises(InvalidStatusTransition) as exc:
            board.move_tweet(db_session, USER, tweet.id, "published")
        assert exc.value.current == "generated"
        assert exc.value.requested == "published"

    def test_other_users_tweet_is_not_found(self, db_session):
        from tweetcraft.services.errors import NotFoundError
        from tweetcraft.services.tweets import board

        tweet = _saved_tweet(db_session)
        with pytest.raises(NotFoundError):
            board.get_tweet(db_session, OTHER_USER, tweet.id)

    def test_edit_rescores(self, db_session):
        from tweetcraft.services.tweets import board

        tweet = _saved_tweet(db_session, content="ok")
        before = tweet.viral_score
        tweet = board.update_content(
            db_session, USER, tweet.id,
            "I learned something surprising last week: most people never ask for feedback. "
            "What do you think stops them?",
        )
        assert tweet.viral_score > before
        assert tweet.content.startswith("I learned")

    def test_published_tweet_is_frozen(self, db_session):
        from tweetcraft.services.errors import InvalidStatusTransition
        from tweetcraft.services.tweets import board

        tweet = _saved_tweet(db_session)
        board.move_tweet(db_session, USER, tweet.id, "approved")
        board.move_tweet(db_session, USER, tweet.id, "published")
        with pytest.raises(InvalidStatusTransition):
            board.update_content(db_session, USER, tweet.id, "changed")
        with pytest.raises(InvalidStatusTransition):
            board.schedule_tweet(db_session, USER, tweet.id)

    def test_schedule_defaults_to_one_hour_and_approves(self, db_session):
        from tweetcraft.services.tweets import board

        tweet = _saved_tweet(db_session)
        before = datetime.utcnow()
        tweet = board.schedule_tweet(db_session, USER, tweet.id)

        assert tweet.status == "approved"
        delta = tweet.scheduled_time - before
        assert timedelta(minutes=59) < delta < timedelta(minutes=61)

    def test_schedule_explicit_time(self, db_session):
        from tweetcraft.services.tweets import board

        when = datetime(2030, 1, 2, 9, 30)
        tweet = board.schedule_tweet(db_session, USER, _saved_tweet(db_session).id, when)
        assert tweet.scheduled_time == when

    def test_list_filters_by_status_and_user(self, db_session):
        from tweetcraft.services.tweets import board

        first = _saved_tweet(db_session)
        _saved_tweet(db_session)
        _saved_tweet(db_session, user_id=OTHER_USER)
        board.move_tweet(db_session, USER, first.id, "in_review")

        assert len(board.list_tweets(db_session, USER)) == 2
        assert [t.id for t in board.list_tweets(db_session, USER, "in_review")] == [first.id]

    def test_delete(self, db_session):
        from tweetcraft.services.errors import NotFoundError
        from tweetcraft.services.tweets import board

        tweet = _saved_tweet(db_session)
        board.delete_tweet(db_session, USER, tweet.id)
        with pytest.raises(NotFoundError):
            board.get_tweet(db_session, USER, tweet.id)

    def test_save_idea_links_tweets(self, db_session):
        from tweetcraft.core.viral_scorer import rank_tweets_by_viral_potential
        from tweetcraft.services.tweets import board

        idea = board.save_idea(db_session, USER, "Small teams ship faster", "voice")
        tweets = board.save_tweets(db_session, USER, rank_tweets_by_viral_potential(["a draft", "b draft"]), idea_id=idea.id)
        assert idea.type == "voice"
        assert {t.idea_id for t in tweets} == {idea.id}


# ── Transcripts ──

class TestTranscriptStore:

    def test_create_starts_processing(self, db_session):
        from tweetcraft.services.transcripts import store

        transcript = store.create_transcript(db_session, USER, "Call", TRANSCRIPT, "podcast")
        assert transcript.status == "processing"
        assert transcript.content_type == "general"
        assert transcript.character_count == len(TRANSCRIPT)

    def test_create_validates_length(self, db_session):
        from tweetcraft.services.content.insight_extractor import TranscriptValidationError
        from tweetcraft.services.transcripts import store

        with pytest.raises(TranscriptValidationError):
            store.create_transcript(db_session, USER, "Call", "too short")

    def test_save_insights_replaces_previous(self, db_session):
        from tweetcraft.services.content.insight_extractor import ExtractedInsight
        from tweetcraft.services.transcripts import store

        transcript = store.create_transcript(db_session, USER, "Call", TRANSCRIPT)
        store.save_insights(db_session, USER, transcript.id, [ExtractedInsight(content="old insight one")])
        store.save_insights(db_session, USER, transcript.id, [
            ExtractedInsight(content="new insight one", insight_type="quote"),
            ExtractedInsight(content="new insight two"),
        ])

        rows = store.list_insights(db_session, USER, transcript.id)
        assert [r.content for r in rows] == ["new insight one", "new insight two"]
        assert [r.order_index for r in rows] == [0, 1]

    def test_other_user_cannot_touch_transcript(self, db_session):
        from tweetcraft.services.errors import NotFoundError
        from tweetcraft.services.transcripts import store

        transcript = store.create_transcript(db_session, USER, "Call", TRANSCRIPT)
        with pytest.raises(NotFoundError):
            store.list_insights(db_session, OTHER_USER, transcript.id)
        with pytest.raises(NotFoundError):
            store.update_transcript_status(db_session, OTHER_USER, transcript.id, "completed")

    def test_status_update(self, db_session):
        from tweetcraft.services.transcripts import store

        transcript = store.create_transcript(db_session, USER, "Call", TRANSCRIPT)
        assert store.update_transcript_status(db_session, USER, transcript.id, "failed").status == "failed"


# ── Training examples ──

class TestTrainingExamples:

    def test_add_and_count_slots(self, db_session):
        from tweetcraft.services.training.examples import add_training_examples, free_slots, training_texts

        add_training_examples(db_session, USER, ["first tweet", "  ", "second tweet  "])
        assert sorted(training_texts(db_session, USER)) == ["first tweet", "second tweet"]
        assert free_slots(db_session, USER) == 8
        assert free_slots(db_session, OTHER_USER) == 10

    def test_batch_over_limit_is_rejected_whole(self, db_session):
        from tweetcraft.services.errors import TrainingLimitReached
        from tweetcraft.services.training.examples import add_training_examples, free_slots

        add_training_examples(db_session, USER, [f"tweet {i}" for i in range(8)])
        with pytest.raises(TrainingLimitReached):
            add_training_examples(db_session, USER, ["one", "two", "three"])
        assert free_slots(db_session, USER) == 2
