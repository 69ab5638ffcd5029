"""Unit tests for the config file source."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest
import yaml

from envsource.errors import (
    DecodeError,
    FieldCoercionError,
    FileReadError,
    MissingEnvironmentError,
    UnsupportedFormatError,
)
from envsource.fields import tagged
from envsource.models import ConfigType, SourceConfig
from envsource.sources.file import find_config_file, load_file, populate_from_document
from tests.factories.targets import AppConfig, DBConfig, ScalarConfig, ServiceSettings

JSON_CONTENT = """{
    "database_url": "https://example.com/db",
    "api_key": "secret-api-key"
}"""


class TestFindConfigFile:
    """Tests for find_config_file."""

    def test_name_as_given_wins(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A file reachable by name alone is used before the directory join."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "app.json").write_text("{}")
        other = tmp_path / "other"
        other.mkdir()
        (other / "app.json").write_text("{}")

        assert find_config_file("app.json", str(other)) == Path("app.json")

    def test_joins_directory(self, write_config: Callable[[str, str], Path]) -> None:
        """The directory is joined to the name when the name alone is absent."""
        config_file = write_config("nested.json", "{}")
        assert find_config_file("nested.json", str(config_file.parent)) == config_file

    def test_returns_none_when_absent(self, tmp_path: Path) -> None:
        """None is returned when no candidate exists."""
        assert find_config_file("missing.json", str(tmp_path)) is None

    def test_empty_name_never_matches(self, tmp_path: Path) -> None:
        """An empty name does not resolve to the directory itself."""
        assert find_config_file("", str(tmp_path)) is None


class TestLoadFile:
    """Tests for load_file."""

    def test_loads_json(self, write_config: Callable[[str, str], Path]) -> None:
        """JSON content populates the target by json tag."""
        config_file = write_config(".testconfig.json", JSON_CONTENT)
        cfg = AppConfig()

        load_file(SourceConfig(name=config_file.name, path=str(config_file.parent), target=cfg))

        assert cfg == AppConfig(APIKey="secret-api-key", DatabaseURL="https://example.com/db")

    def test_loads_yaml(self, write_config: Callable[[str, str], Path]) -> None:
        """YAML content populates the target by yaml tag."""
        content = yaml.safe_dump(
            {"database_url": "https://example.com/db", "api_key": "secret-api-key"}
        )
        config_file = write_config(".testconfig.yaml", content)
        cfg = AppConfig()

        load_file(
            SourceConfig(
                name=config_file.name,
                path=str(config_file.parent),
                type=ConfigType.YAML,
                target=cfg,
            )
        )

        assert cfg == AppConfig(APIKey="secret-api-key", DatabaseURL="https://example.com/db")

    def test_format_is_case_insensitive(self, write_config: Callable[[str, str], Path]) -> None:
        """Format strings are normalized before selection."""
        config_file = write_config("upper.json", '{"api_key": "k"}')
        cfg = AppConfig()

        load_file(
            SourceConfig(name=config_file.name, path=str(config_file.parent), type="JSON", target=cfg)
        )

        assert cfg.APIKey == "k"

    def test_file_ignores_env(
        self, write_config: Callable[[str, str], Path], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """An existing file is the only source; env vars are not consulted."""
        monkeypatch.setenv("API_KEY", "from-env")
        config_file = write_config("only.json", '{"database_url": "db"}')
        cfg = AppConfig()

        load_file(SourceConfig(name=config_file.name, path=str(config_file.parent), target=cfg))

        assert cfg == AppConfig(APIKey="", DatabaseURL="db")

    def test_missing_file_falls_back_to_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A missing file loads from env vars instead."""
        monkeypatch.setenv("API_KEY", "abc123")
        monkeypatch.setenv("DATABASE_URL", "localhost:5432")
        cfg = AppConfig()

        load_file(SourceConfig(name="nonexistent.json", path=str(tmp_path), target=cfg))

        assert cfg == AppConfig(APIKey="abc123", DatabaseURL="localhost:5432")

    def test_fallback_reports_missing_env(self, tmp_path: Path) -> None:
        """The env fallback reports missing keys like a direct env load."""
        with pytest.raises(MissingEnvironmentError) as exc_info:
            load_file(SourceConfig(name="nonexistent.json", path=str(tmp_path), target=AppConfig()))

        assert exc_info.value.missing == ["API_KEY", "DATABASE_URL"]

    def test_malformed_json_raises_decode_error(
        self, write_config: Callable[[str, str], Path]
    ) -> None:
        """Malformed content surfaces the decoder error."""
        config_file = write_config("bad.json", '{json "invalid": "json"}')
        cfg = AppConfig()

        with pytest.raises(DecodeError) as exc_info:
            load_file(SourceConfig(name=config_file.name, path=str(config_file.parent), target=cfg))

        assert exc_info.value.path == str(config_file)
        assert exc_info.value.__cause__ is not None
        assert cfg == AppConfig()

    def test_malformed_yaml_raises_decode_error(
        self, write_config: Callable[[str, str], Path]
    ) -> None:
        """Malformed YAML surfaces the decoder error."""
        config_file = write_config("bad.yaml", "api_key: [unclosed")

        with pytest.raises(DecodeError, match="failed to decode yaml"):
            load_file(
                SourceConfig(
                    name=config_file.name,
                    path=str(config_file.parent),
                    type="yaml",
                    target=AppConfig(),
                )
            )

    def test_unsupported_format_names_type(
        self, write_config: Callable[[str, str], Path]
    ) -> None:
        """An existing file with an unknown format fails naming the format."""
        config_file = write_config("app.toml", "api_key = 'x'")

        with pytest.raises(UnsupportedFormatError, match="unsupported file type: toml") as exc_info:
            load_file(
                SourceConfig(
                    name=config_file.name,
                    path=str(config_file.parent),
                    type="toml",
                    target=AppConfig(),
                )
            )

        assert exc_info.value.format == "toml"

    def test_non_mapping_document_rejected(
        self, write_config: Callable[[str, str], Path]
    ) -> None:
        """A document that is not a mapping fails to decode."""
        config_file = write_config("list.json", '["a", "b"]')

        with pytest.raises(DecodeError, match="must contain a mapping"):
            load_file(
                SourceConfig(name=config_file.name, path=str(config_file.parent), target=AppConfig())
            )

    def test_empty_yaml_leaves_target(self, write_config: Callable[[str, str], Path]) -> None:
        """An empty YAML document populates nothing."""
        config_file = write_config("empty.yaml", "")
        cfg = AppConfig(APIKey="kept")

        load_file(
            SourceConfig(
                name=config_file.name, path=str(config_file.parent), type="yaml", target=cfg
            )
        )

        assert cfg.APIKey == "kept"

    def test_unreadable_path_raises_file_read_error(self, tmp_path: Path) -> None:
        """A candidate that cannot be read as a file fails."""
        (tmp_path / "dir.json").mkdir()

        with pytest.raises(FileReadError) as exc_info:
            load_file(SourceConfig(name="dir.json", path=str(tmp_path), target=AppConfig()))

        assert exc_info.value.path.endswith("dir.json")

    def test_skip_fields_honored(self, write_config: Callable[[str, str], Path]) -> None:
        """Skipped fields are not written from the file."""
        config_file = write_config("skip.json", JSON_CONTENT)
        cfg = AppConfig()

        load_file(
            SourceConfig(
                name=config_file.name,
                path=str(config_file.parent),
                skip_fields=["APIKey"],
                target=cfg,
            )
        )

        assert cfg == AppConfig(APIKey="", DatabaseURL="https://example.com/db")


class TestPopulateFromDocument:
    """Tests for populate_from_document."""

    def test_native_values_checked(self) -> None:
        """Native document values are stored per field kind."""
        cfg = ScalarConfig()
        populate_from_document(
            cfg, {"port": 8080, "debug": True, "ratio": 1, "name": "svc"}, "json"
        )
        assert cfg == ScalarConfig(port=8080, debug=True, ratio=1.0, name="svc")

    def test_case_insensitive_match(self) -> None:
        """Keys match case-insensitively when no exact key exists."""
        cfg = AppConfig()
        populate_from_document(cfg, {"API_KEY": "upper"}, "json")
        assert cfg.APIKey == "upper"

    def test_untagged_field_uses_declared_name(self) -> None:
        """Fields without a kind tag read the key named after the field."""
        cfg = AppConfig()
        populate_from_document(cfg, {"apikey": "by-name"}, "custom")
        assert cfg.APIKey == "by-name"

    def test_type_mismatch_names_field(self) -> None:
        """A document value of the wrong type fails, naming the field."""
        with pytest.raises(FieldCoercionError) as exc_info:
            populate_from_document(ScalarConfig(), {"port": [1, 2]}, "json")
        assert exc_info.value.field_name == "port"

    def test_pydantic_target(self) -> None:
        """Pydantic models are populated from documents too."""
        settings = ServiceSettings()
        populate_from_document(settings, {"api_key": "k", "workers": 2}, "json")
        assert settings.api_key == "k"
        assert settings.workers == 2

    def test_yaml_scalars_load_into_string_fields(
        self, write_config: Callable[[str, str], Path]
    ) -> None:
        """Plain YAML numbers load into string fields as their text."""

        @dataclass
        class Release:
            DBPort: str = tagged("", yaml="db_port")
            Version: str = tagged("", yaml="version")
            Debug: str = tagged("", yaml="debug")

        config_file = write_config("db.yaml", "db_port: 5432\nversion: 1.0\ndebug: true\n")
        cfg = Release()

        load_file(
            SourceConfig(
                name=config_file.name, path=str(config_file.parent), type="yaml", target=cfg
            )
        )

        assert cfg == Release(DBPort="5432", Version="1.0", Debug="true")

    def test_json_numbers_rejected_for_string_fields(
        self, write_config: Callable[[str, str], Path]
    ) -> None:
        """JSON numbers do not load into string fields."""
        config_file = write_config("db.json", '{"db_port": 5432}')

        with pytest.raises(FieldCoercionError, match="cannot use int value as string"):
            load_file(
                SourceConfig(name=config_file.name, path=str(config_file.parent), target=DBConfig())
            )

    def test_json_int_too_large_for_float_field(
        self, write_config: Callable[[str, str], Path]
    ) -> None:
        """An integer past the float range fails as a range error on its field."""
        config_file = write_config("huge.json", '{"ratio": 1' + "0" * 400 + "}")

        with pytest.raises(FieldCoercionError, match="float value out of range") as exc_info:
            load_file(
                SourceConfig(
                    name=config_file.name, path=str(config_file.parent), target=ScalarConfig()
                )
            )

        assert exc_info.value.field_name == "ratio"

    def test_json_int_past_digit_limit_is_decode_error(
        self, write_config: Callable[[str, str], Path]
    ) -> None:
        """An integer literal too long to convert fails to decode."""
        config_file = write_config("digits.json", '{"ratio": 1' + "0" * 5000 + "}")

        with pytest.raises(DecodeError, match="failed to decode json"):
            load_file(
                SourceConfig(
                    name=config_file.name, path=str(config_file.parent), target=ScalarConfig()
                )
            )
