"""Tests for the configuration domain models."""

import pytest
from pydantic import ValidationError

from change_listener.changes.domain.kind import ChangeKind
from change_listener.config.domain.broker import BrokerConfig
from change_listener.config.domain.config import AppConfig
from change_listener.config.domain.listener import ListenerConfig


class TestBrokerConfig:
    def test_defaults(self) -> None:
        cfg = BrokerConfig(project_id="proj")
        assert cfg.emulator_host is None
        assert cfg.max_outstanding_messages == 64

    def test_rejects_empty_project_id(self) -> None:
        with pytest.raises(ValidationError):
            BrokerConfig(project_id="")

    def test_rejects_zero_outstanding_messages(self) -> None:
        with pytest.raises(ValidationError):
            BrokerConfig(project_id="proj", max_outstanding_messages=0)

    def test_is_frozen(self) -> None:
        cfg = BrokerConfig(project_id="proj")
        with pytest.raises(ValidationError):
            cfg.project_id = "other"  # type: ignore[misc]


class TestListenerConfig:
    def test_defaults(self) -> None:
        cfg = ListenerConfig(controller_id="ctl1", session_timeout_seconds=5)
        assert cfg.channel_capacity == 64
        assert cfg.resubscribe_backoff_seconds == 5.0

    def test_rejects_zero_session_timeout(self) -> None:
        with pytest.raises(ValidationError):
            ListenerConfig(controller_id="ctl1", session_timeout_seconds=0)

    def test_rejects_empty_controller_id(self) -> None:
        with pytest.raises(ValidationError):
            ListenerConfig(controller_id="", session_timeout_seconds=5)

    def test_rejects_negative_backoff(self) -> None:
        with pytest.raises(ValidationError):
            ListenerConfig(
                controller_id="ctl1",
                session_timeout_seconds=5,
                resubscribe_backoff_seconds=-1,
            )


class TestAppConfig:
    def _raw(self, **overrides: object) -> dict[str, object]:
        raw: dict[str, object] = {
            "broker": {"project_id": "proj"},
            "listener": {"controller_id": "ctl1", "session_timeout_seconds": 5},
        }
        raw.update(overrides)
        return raw

    def test_listens_to_both_kinds_by_default(self) -> None:
        cfg = AppConfig.model_validate(self._raw())
        assert cfg.kinds == [ChangeKind.NETWORK, ChangeKind.MEMBER]

    def test_parses_kind_names(self) -> None:
        cfg = AppConfig.model_validate(self._raw(kinds=["member"]))
        assert cfg.kinds == [ChangeKind.MEMBER]

    def test_rejects_empty_kinds(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig.model_validate(self._raw(kinds=[]))

    def test_rejects_unknown_kind(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig.model_validate(self._raw(kinds=["router"]))
