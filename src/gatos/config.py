"""Configuration loading from environment variables and gatos.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_DEFAULT_TABLE_PATH = Path("gatos.csv")
_CONFIG_FILENAME = "gatos.toml"


@dataclass
class ServerConfig:
    """HTTP listener configuration."""

    host: str = "0.0.0.0"
    port: int = 9000


@dataclass
class GatosConfig:
    """Top-level Gatos configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    table_path: Path = _DEFAULT_TABLE_PATH
    log_level: str = "INFO"


def load_config(config_path: Path | None = None) -> GatosConfig:
    """Load configuration from environment variables and optional gatos.toml.

    Priority: environment variables > gatos.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        candidate = Path.cwd() / _CONFIG_FILENAME
        if candidate.exists():
            file_data = tomllib.loads(candidate.read_text())

    server_data = file_data.get("server", {})

    config = GatosConfig(
        server=ServerConfig(
            host=os.getenv("GATOS_HOST", server_data.get("host", "0.0.0.0")),
            port=int(os.getenv("PORT", server_data.get("port", 9000))),
        ),
        table_path=Path(
            os.getenv("GATOS_CSV_PATH", file_data.get("table_path", str(_DEFAULT_TABLE_PATH)))
        ),
        log_level=os.getenv("GATOS_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    return config
