from pathlib import Path

import pytest

from protodto.config import DEFAULT_OUTPUT_SUFFIX, EngineConfig, load_config, resolve_config
from protodto.exceptions import ConfigError


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "protodto.yaml"
    path.write_text("allPublic: true\ninitialisms: [vin, Ecu]\noutputSuffix: .gen.go\n", encoding="utf-8")
    return path


class TestLoadConfig:
    def test_defaults(self) -> None:
        config = load_config(None)
        assert not config.all_public
        assert config.initialisms == []
        assert config.output_suffix == DEFAULT_OUTPUT_SUFFIX

    def test_yaml(self, config_file: Path) -> None:
        config = load_config(config_file)
        assert config.all_public
        assert config.initialisms == ["VIN", "ECU"]
        assert config.output_suffix == ".gen.go"

    def test_snake_case_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "protodto.yaml"
        path.write_text("all_public: true\noutput_suffix: .x.go\n", encoding="utf-8")
        config = load_config(path)
        assert config.all_public
        assert config.output_suffix == ".x.go"

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "protodto.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == EngineConfig()

    @pytest.mark.parametrize(
        "content,message",
        [
            ("- allPublic\n", "must be a mapping"),
            ("unknownKey: 1\n", "Invalid engine config"),
            ("outputSuffix: go\n", "must start with '.'"),
            ("allPublic: sometimes\n", "Invalid engine config"),
            ("allPublic: [true\n", "Invalid engine config"),
        ],
    )
    def test_invalid(self, tmp_path: Path, content: str, message: str) -> None:
        path = tmp_path / "protodto.yaml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigError, match=message):
            load_config(path)


class TestResolveConfig:
    def test_no_overrides(self) -> None:
        assert not resolve_config().all_public

    def test_flag(self) -> None:
        assert resolve_config(all_public=True).all_public

    def test_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ALL_PUBLIC", "1")
        assert resolve_config().all_public

    def test_empty_environment_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ALL_PUBLIC", "")
        assert not resolve_config().all_public

    def test_override_keeps_file_settings(self, config_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file.write_text("initialisms: [vin]\n", encoding="utf-8")
        monkeypatch.setenv("ALL_PUBLIC", "true")
        config = resolve_config(config_file)
        assert config.all_public
        assert config.initialisms == ["VIN"]
