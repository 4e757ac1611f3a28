from __future__ import annotations

from pathlib import Path

import pytest

from tenderflow.core.config import (
    AppConfig,
    ConfigError,
    load_app_config,
    resolve_config_path,
    validate_app_config_file,
)
from tenderflow.core.directory import StaticDirectory


def _write(tmp_path, text, name="app.yaml"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_file_gives_defaults(tmp_path):
    config = load_app_config(tmp_path / "nope.yaml")
    assert config == AppConfig()
    assert config.pagination.default_limit == 5
    assert config.approvals.quorum == 3
    assert config.database.timeout_seconds == 5


def test_loads_sections(tmp_path):
    path = _write(
        tmp_path,
        """
database:
  url: sqlite:///tmp/x.db
  timeout_seconds: 2.5
logging:
  level: debug
pagination:
  default_limit: 0
approvals:
  quorum: 2
organizations:
  acme: [alice, bob]
""",
    )
    config = load_app_config(path)

    assert config.database.url == "sqlite:///tmp/x.db"
    assert config.database.timeout_seconds == 2.5
    assert config.logging.level == "DEBUG"
    assert config.pagination.default_limit == 0
    assert config.approvals.quorum == 2
    assert config.organizations == {"acme": ["alice", "bob"]}


def test_env_expansion(tmp_path, monkeypatch):
    monkeypatch.setenv("TF_TEST_DB", "postgresql://db/tenders")
    monkeypatch.delenv("TF_TEST_MISSING", raising=False)
    path = _write(
        tmp_path,
        """
database:
  url: ${TF_TEST_DB}
logging:
  file: ${TF_TEST_MISSING:-logs/fallback.log}
""",
    )
    config = load_app_config(path)

    assert config.database.url == "postgresql://db/tenders"
    assert config.logging.file == Path("logs/fallback.log")


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = _write(tmp_path, "approvals:\n  quorum: 4\n", name="custom.yaml")
    monkeypatch.setenv("TENDERFLOW_CONFIG", str(path))

    assert resolve_config_path() == path
    assert load_app_config().approvals.quorum == 4


@pytest.mark.parametrize(
    "text",
    [
        "approvals:\n  quorum: 0\n",
        "database:\n  timeout_seconds: -1\n",
        "logging:\n  level: LOUD\n",
        "organizations:\n  a: [alice]\n  b: [alice]\n",
        "- just\n- a list\n",
        "database: [unclosed\n",
    ],
)
def test_invalid_config_raises(tmp_path, text):
    path = _write(tmp_path, text)

    with pytest.raises(ConfigError):
        load_app_config(path)
    assert validate_app_config_file(path)


def test_validate_valid_file(tmp_path):
    path = _write(tmp_path, "pagination:\n  default_limit: 10\n")
    assert validate_app_config_file(path) == []


def test_static_directory():
    directory = StaticDirectory({"acme": ["alice", "bob"], "globex": []})

    assert directory.organization_of("bob") == "acme"
    assert directory.organization_of("nobody") is None
    assert directory.members_of("acme") == ["alice", "bob"]
    assert directory.members_of("globex") == []
    assert directory.members_of("unknown") == []
