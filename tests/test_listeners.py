"""Tests for the bundled ScoreListener consumer."""

from __future__ import annotations

import pytest

from notification_center.domain.events import LIVE_SCORE_ALERTS, LiveScoreAlert
from notification_center.domain.registry import NotificationCenter
from notification_center.repos.memory import DeliveryLogRepository
from notification_center.services.listeners import ScoreListener


@pytest.fixture()
def env():
    """Fresh center + delivery log for each test."""
    center = NotificationCenter()
    deliveries = DeliveryLogRepository()

    class Env:
        pass

    e = Env()
    e.center = center
    e.deliveries = deliveries
    return e


def test_listener_records_live_score_alert(env):
    listener = ScoreListener(env.center, env.deliveries)
    listener.start_listening()
    alert = LiveScoreAlert(match_id="m-1", home_score=2, away_score=1, minute=67)

    env.center.publish(LIVE_SCORE_ALERTS, alert)

    records = env.deliveries.list_for_event(LIVE_SCORE_ALERTS)
    assert len(records) == 1
    assert records[0].listener == "ScoreListener"
    assert records[0].payload == alert


def test_listener_ignores_other_notifications(env):
    ScoreListener(env.center, env.deliveries).start_listening()

    env.center.publish("Weather alerts", "rain")

    assert env.deliveries.list_all() == []


def test_stop_listening_stops_every_score_listener(env):
    first = ScoreListener(env.center, env.deliveries)
    second = ScoreListener(env.center, env.deliveries)
    first.start_listening()
    second.start_listening()

    env.center.publish(LIVE_SCORE_ALERTS, "Can be anything")
    assert len(env.deliveries.list_all()) == 2

    assert second.stop_listening() is True
    env.center.publish(LIVE_SCORE_ALERTS, "Can be anything")

    assert len(env.deliveries.list_all()) == 2
    assert first.stop_listening() is False


def test_listener_logs_each_notification(env, caplog):
    ScoreListener(env.center, env.deliveries).start_listening()

    with caplog.at_level("INFO", logger="notification_center.services.listeners"):
        env.center.publish(LIVE_SCORE_ALERTS, None)

    assert "Live score alerts notification closure" in caplog.text


def test_live_score_alert_rejects_negative_scores():
    with pytest.raises(ValueError):
        LiveScoreAlert(match_id="m-1", home_score=-1, away_score=0)
