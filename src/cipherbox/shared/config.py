from logging import CRITICAL, DEBUG, ERROR, INFO, WARNING
from os import PathLike
from pathlib import Path
from tomllib import load

from pydantic import BaseModel, field_validator

DEFAULT_CONFIG_PATH = Path("config.toml")

AES_KEY_SIZES = (16, 24, 32)


class General(BaseModel):
    title: str


class Logging(BaseModel):
    level: int

    @field_validator("level", mode="before")
    @classmethod
    def convert_log_level(cls, value):
        if isinstance(value, int):
            return value

        log_levels = {
            "DEBUG": DEBUG,
            "INFO": INFO,
            "WARNING": WARNING,
            "ERROR": ERROR,
            "CRITICAL": CRITICAL,
        }
        return log_levels.get(value.upper(), INFO)


class Paths(BaseModel):
    logs: str


class Crypto(BaseModel):
    key: str | None = None  # None keeps the middleware in pass-through mode
    cookies: list[str] = []  # empty list means every cookie

    @field_validator("key")
    @classmethod
    def check_key_length(cls, value):
        if value is not None and len(value.encode()) not in AES_KEY_SIZES:
            raise ValueError(
                f"crypto.key must be 16, 24 or 32 bytes, got {len(value.encode())}"
            )
        return value


class Network(BaseModel):
    host: str
    port: int
    reload: bool


class Config(BaseModel):
    general: General
    paths: Paths
    logging: Logging
    crypto: Crypto = Crypto()
    network: Network


def load_config(
    shared_config_file: PathLike = DEFAULT_CONFIG_PATH,
    specific_config_file: PathLike | None = None,
) -> Config:
    """Load and merge configurations from TOML files."""
    # Load shared config
    with Path(shared_config_file).open("rb") as f:
        config_data = load(f)

    # Specific sections replace shared ones wholesale
    if specific_config_file:
        with Path(specific_config_file).open("rb") as f:
            specific_data = load(f)
            config_data.update(specific_data)

    return Config(**config_data)
