import os
from pathlib import Path

import dotenv
from loguru import logger

from exa_mcp.exa.proxy import ExaProxy
from exa_mcp.mcp import ExaMCPServer, MCPConfig, ResultStore
from exa_mcp.mcp.interface import SearchGateway
from exa_mcp.utility import configure_logging

from .config import Config
from .inject import ConfigStore, ConfigValue, inject_config

# Relative storage folders resolve against the install location
INSTALL_ROOT: Path = Path(__file__).resolve().parents[2]

DEFAULT_CONFIG_FILE: str = str(INSTALL_ROOT / "config" / "config.yml")


def setup_config_store(filename: str | None = None, env_filename: str | None = None) -> None:

    env_filename = env_filename or os.getenv("ENV_FILE", ".env")
    dotenv.load_dotenv(dotenv_path=env_filename)

    config_file: str = filename or os.getenv("CONFIG_FILE", DEFAULT_CONFIG_FILE)
    store: ConfigStore = ConfigStore.get_instance()

    if store.is_configured():
        return

    store.configure(source=config_file, env_filename=env_filename, env_prefix="EXA_MCP")

    cfg: Config = store.config()

    cfg.update({"runtime:config_file": config_file})

    configure_logging(cfg.get("logging") or {})

    logger.info(f"Config Store initialized from {config_file}")


@inject_config
def create_proxy(
    api_key: str = ConfigValue("exa.api_key"),
    base_url: str = ConfigValue("exa.base_url", default="https://api.exa.ai"),
    search_type: str = ConfigValue("exa.search_type", default="neural"),
    timeout: float = ConfigValue("exa.timeout", default=30.0, after=float),
) -> ExaProxy:
    if not api_key:
        raise ValueError("EXA_API_KEY environment variable is required")
    return ExaProxy(api_key=api_key, base_url=base_url, search_type=search_type, timeout=timeout)


@inject_config
def create_store(
    folder: str = ConfigValue("storage.folder", default="data"),
    filename: str = ConfigValue("storage.filename", default="searches.json"),
) -> ResultStore:
    path: Path = Path(folder).expanduser()
    if not path.is_absolute():
        path = INSTALL_ROOT / path
    return ResultStore(path, filename)


def create_mcp_config() -> MCPConfig:
    return MCPConfig(**(ConfigValue("mcp", default={}).resolve() or {}))


def create_server(gateway: SearchGateway, store: ResultStore | None = None) -> ExaMCPServer:
    """Load the stored searches and wire them with the gateway into a server"""
    store = (store or create_store()).load()
    return ExaMCPServer(store, gateway, create_mcp_config())
