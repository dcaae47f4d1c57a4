import os
import re
import sys
from datetime import datetime
from typing import Any

from loguru import logger

ENV_PLACEHOLDER = re.compile(r"^\$\{(\w+)\}$")


def _dotsplit(path: str) -> list[str]:
    return path.replace(":", ".").split(".")


def dotget(data: dict, path: str, default: Any = None) -> Any:
    """Look up `section.key` (or `section:key`) in nested dicts."""
    node: Any = data
    for part in _dotsplit(path):
        if not isinstance(node, dict) or node.get(part) is None:
            return default
        node = node[part]
    return node


def dotset(data: dict, path: str, value: Any) -> dict:
    *sections, key = _dotsplit(path)
    node: dict = data
    for section in sections:
        node = node.setdefault(section, {})
    node[key] = value
    return data


def env2dict(prefix: str | None, data: dict[str, Any] | None = None) -> dict[str, Any]:
    """Overlay PREFIX_<SECTION>_<KEY> variables onto data (EXA_MCP_EXA_BASE_URL -> exa.base_url)."""
    if data is None:
        data = {}
    if not prefix:
        return data
    marker: str = f"{prefix.lower()}_"
    for name, value in os.environ.items():
        name = name.lower()
        if not name.startswith(marker):
            continue
        section, _, key = name[len(marker) :].partition("_")
        if section and key:
            dotset(data, f"{section}.{key}", value)
    return data


def replace_env_vars(data: Any) -> Any:
    """Replace string values of the form ${ENV_VAR} with the variable's value ("" when unset)."""
    if isinstance(data, dict):
        return {k: replace_env_vars(v) for k, v in data.items()}
    if isinstance(data, list):
        return [replace_env_vars(v) for v in data]
    if isinstance(data, str) and (match := ENV_PLACEHOLDER.match(data)):
        return os.getenv(match.group(1), "")
    return data


def configure_logging(opts: dict[str, Any] | None = None) -> None:
    """Route loguru output to stderr; stdout carries the MCP stdio transport."""

    logger.remove()
    logger.add(
        sys.stderr,
        level=(opts or {}).get("level", "INFO"),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
    )
    if not opts or not opts.get("handlers"):
        return

    for handler in opts["handlers"]:
        sink = handler.get("sink")
        if sink == "sys.stderr":
            handler["sink"] = sys.stderr
        elif isinstance(sink, str) and sink.endswith(".log"):
            handler["sink"] = os.path.join(opts.get("folder", "logs"), f"{datetime.now().strftime('%Y%m%d')}_{sink}")

    logger.configure(handlers=opts["handlers"])
