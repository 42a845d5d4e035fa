import logging

import pytest
from fastapi import Response
from fastapi.testclient import TestClient
from pydantic import ValidationError

from cipherbox import CipherBox
from cipherbox.main import create_app
from cipherbox.shared import load_config

SHARED_CONFIG = """
[general]
title = "test"

[paths]
logs = "logs"

[logging]
level = "debug"

[crypto]
key = "0123456789abcdef"
cookies = ["session"]

[network]
host = "127.0.0.1"
port = 8000
reload = false
"""


@pytest.fixture
def shared_config(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(SHARED_CONFIG)
    return path


def test_load_config(shared_config):
    config = load_config(shared_config)

    assert config.general.title == "test"
    assert config.logging.level == logging.DEBUG
    assert config.crypto.key == "0123456789abcdef"
    assert config.crypto.cookies == ["session"]


def test_unknown_log_level_falls_back_to_info(tmp_path, shared_config):
    specific = tmp_path / "specific.toml"
    specific.write_text('[logging]\nlevel = "chatty"\n')

    config = load_config(shared_config, specific)

    assert config.logging.level == logging.INFO


def test_specific_config_overrides_section(tmp_path, shared_config):
    specific = tmp_path / "specific.toml"
    specific.write_text("[crypto]\ncookies = []\n")

    config = load_config(shared_config, specific)

    # The whole section is replaced, so the key is gone too
    assert config.crypto.key is None
    assert config.crypto.cookies == []


@pytest.mark.parametrize("key", ["short", "x" * 17, "y" * 33])
def test_invalid_key_rejected(tmp_path, shared_config, key):
    specific = tmp_path / "specific.toml"
    specific.write_text(f'[crypto]\nkey = "{key}"\n')

    with pytest.raises(ValidationError):
        load_config(shared_config, specific)


def test_create_app_encrypts_configured_cookies(shared_config):
    config = load_config(shared_config)
    app = create_app(config)

    @app.get("/login")
    async def login():
        response = Response()
        response.set_cookie("session", "alice")
        return response

    client = TestClient(app)
    response = client.get("/login")

    value = response.headers["set-cookie"].partition("=")[2].partition(";")[0]
    assert CipherBox().configure(config.crypto.key).decrypt(value) == "alice"
