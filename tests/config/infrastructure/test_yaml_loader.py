"""Tests for YAML config loading infrastructure."""

from pathlib import Path

import pytest

from change_listener.changes.domain.kind import ChangeKind
from change_listener.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)
from change_listener.config.infrastructure.yaml_loader import YamlConfigLoader
from tests.config.fake_observer import FakeConfigObserver

# __file__ is tests/config/infrastructure/test_yaml_loader.py
FIXTURES = Path(__file__).parent.parent.parent / "fixtures"


def _fixture(name: str) -> Path:
    return FIXTURES / name


class TestValidConfigLoading:
    """A valid YAML config loads correctly with all fields populated."""

    def test_interpolates_project_id(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PUBSUB_PROJECT_ID", "acme-prod")
        cfg = YamlConfigLoader(observer=FakeConfigObserver()).load(
            path=_fixture("valid_config.yaml")
        )

        assert cfg.broker.project_id == "acme-prod"
        assert cfg.broker.max_outstanding_messages == 32
        assert cfg.broker.emulator_host is None

    def test_loads_listener(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PUBSUB_PROJECT_ID", "acme-prod")
        cfg = YamlConfigLoader(observer=FakeConfigObserver()).load(
            path=_fixture("valid_config.yaml")
        )

        assert cfg.listener.controller_id == "ctl1"
        assert cfg.listener.session_timeout_seconds == 30
        assert cfg.listener.channel_capacity == 16
        assert cfg.listener.resubscribe_backoff_seconds == 2.5
        assert cfg.kinds == [ChangeKind.MEMBER, ChangeKind.NETWORK]

    def test_emits_config_loaded_event(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PUBSUB_PROJECT_ID", "acme-prod")
        observer = FakeConfigObserver()
        YamlConfigLoader(observer=observer).load(path=_fixture("valid_config.yaml"))

        assert observer.loaded == [
            {"controller_id": "ctl1", "kinds": ["member", "network"]}
        ]
        assert observer.emulator_warnings == []


class TestEmulatorConfig:
    def test_warns_when_emulator_configured(self) -> None:
        observer = FakeConfigObserver()
        cfg = YamlConfigLoader(observer=observer).load(
            path=_fixture("emulator_config.yaml")
        )

        assert cfg.broker.emulator_host == "localhost:8085"
        assert observer.emulator_warnings == ["localhost:8085"]

    def test_defaults_apply(self) -> None:
        cfg = YamlConfigLoader(observer=FakeConfigObserver()).load(
            path=_fixture("emulator_config.yaml")
        )

        assert cfg.kinds == [ChangeKind.NETWORK, ChangeKind.MEMBER]
        assert cfg.listener.channel_capacity == 64


class TestLoadFailures:
    def test_missing_file_raises_config_load_error(self) -> None:
        with pytest.raises(ConfigLoadError, match="file not found"):
            YamlConfigLoader(observer=FakeConfigObserver()).load(
                path=_fixture("does_not_exist.yaml")
            )

    def test_invalid_yaml_raises_config_load_error(self) -> None:
        with pytest.raises(ConfigLoadError, match="invalid YAML"):
            YamlConfigLoader(observer=FakeConfigObserver()).load(
                path=_fixture("invalid_yaml.yaml")
            )

    def test_all_missing_env_vars_reported(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("UNSET_PROJECT_ID", raising=False)
        monkeypatch.delenv("UNSET_EMULATOR_HOST", raising=False)
        with pytest.raises(MissingEnvVarsError) as exc_info:
            YamlConfigLoader(observer=FakeConfigObserver()).load(
                path=_fixture("missing_env_config.yaml")
            )

        assert sorted(exc_info.value.missing_vars) == [
            "UNSET_EMULATOR_HOST",
            "UNSET_PROJECT_ID",
        ]

    def test_zero_timeout_raises_config_validation_error(self) -> None:
        with pytest.raises(ConfigValidationError):
            YamlConfigLoader(observer=FakeConfigObserver()).load(
                path=_fixture("zero_timeout_config.yaml")
            )

    def test_non_mapping_document_raises_config_validation_error(
        self, tmp_path: Path
    ) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="mapping"):
            YamlConfigLoader(observer=FakeConfigObserver()).load(path=path)

    def test_no_event_emitted_on_failure(self) -> None:
        observer = FakeConfigObserver()
        with pytest.raises(ConfigValidationError):
            YamlConfigLoader(observer=observer).load(
                path=_fixture("zero_timeout_config.yaml")
            )
        assert observer.loaded == []
