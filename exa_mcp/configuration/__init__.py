from .config import Config, ConfigFactory
from .inject import (
    ConfigProvider,
    ConfigStore,
    ConfigValue,
    MockConfigProvider,
    get_config_provider,
    inject_config,
    reset_config_provider,
    set_config_provider,
)
from .setup import create_mcp_config, create_proxy, create_server, create_store, setup_config_store
