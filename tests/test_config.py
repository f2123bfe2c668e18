import pytest

from billnote.config import Config, ConfigError, load_config

VALID = """
host = "127.0.0.1:8080"
database_url = "sqlite://bill.db"
secret_key = "secret"
base_path = "api"
"""


def _write(tmp_path, text):
    path = tmp_path / "config.toml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_valid_config(tmp_path):
    config = load_config(_write(tmp_path, VALID))
    assert config == Config(
        host="127.0.0.1:8080",
        database_url="sqlite://bill.db",
        secret_key="secret",
        base_path="api",
    )


def test_extra_keys_ignored(tmp_path):
    config = load_config(_write(tmp_path, VALID + 'extra = "x"\n'))
    assert config.base_path == "api"


def test_empty_base_path_allowed(tmp_path):
    text = VALID.replace('base_path = "api"', 'base_path = ""')
    assert load_config(_write(tmp_path, text)).base_path == ""


def test_missing_field(tmp_path):
    text = VALID.replace('secret_key = "secret"\n', "")
    with pytest.raises(ConfigError, match="secret_key"):
        load_config(_write(tmp_path, text))


def test_wrong_type(tmp_path):
    text = VALID.replace('host = "127.0.0.1:8080"', "host = 8080")
    with pytest.raises(ConfigError, match="host"):
        load_config(_write(tmp_path, text))


def test_invalid_toml(tmp_path):
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path, "host = \n"))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.toml")