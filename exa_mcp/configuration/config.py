from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from exa_mcp.utility import dotget, dotset, env2dict, replace_env_vars


class Config:
    """Loaded configuration, addressed as `section.key` or `section:key`."""

    def __init__(self, data: dict[str, Any] | None = None, filename: str | None = None) -> None:
        self.data: dict[str, Any] = data if data is not None else {}
        self.filename: str | None = filename

    def get(self, key: str, default: Any = None) -> Any:
        return dotget(self.data, key, default)

    def update(self, values: dict[str, Any]) -> None:
        for key, value in values.items():
            dotset(self.data, key, value)


class ConfigFactory:
    """Builds a Config from a YAML file or an in-memory dict."""

    def load(self, *, source: str | Path | dict, env_filename: str | None = None, env_prefix: str | None = None) -> Config:

        load_dotenv(dotenv_path=env_filename)

        filename: str | None = None
        if isinstance(source, dict):
            data: Any = copy.deepcopy(source)
        else:
            path = Path(source)
            if not path.is_file():
                raise FileNotFoundError(f"Configuration file not found: {source}")
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
            filename = str(source)

        if not isinstance(data, dict):
            raise TypeError(f"expected dict, found '{type(data)}'")

        # EXA_MCP_<SECTION>_<KEY> variables override the file, then ${ENV} placeholders are filled in
        data = replace_env_vars(env2dict(env_prefix, data))

        return Config(data=data, filename=filename)
