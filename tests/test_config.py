import os
from pathlib import Path
from unittest.mock import patch

import pytest

from exa_mcp.configuration import (
    Config,
    ConfigFactory,
    ConfigProvider,
    ConfigStore,
    ConfigValue,
    MockConfigProvider,
    get_config_provider,
    inject_config,
    set_config_provider,
)
from exa_mcp.configuration.inject import SingletonConfigProvider
from tests.conftest import TEST_CONFIG_FILE
from tests.decorators import with_test_config

# pylint: disable=unused-argument


class TestConfigValue:
    """Test lazy resolution against the active provider"""

    @with_test_config
    def test_resolve(self, test_provider: MockConfigProvider) -> None:
        assert ConfigValue("mcp.server_name").resolve() == "exa-server"
        assert ConfigValue("mcp:default_num_results").resolve() == 10
        assert ConfigValue("exa.missing").resolve() is None
        assert ConfigValue("exa.missing", default="fallback").resolve() == "fallback"

    @pytest.mark.asyncio
    @with_test_config
    async def test_resolve_in_async_test(self, test_provider: MockConfigProvider):
        assert ConfigValue("exa.base_url").resolve() == "https://api.exa.test"

    @with_test_config
    def test_after_hook(self, test_provider: MockConfigProvider):
        assert ConfigValue("exa.timeout", after=float).resolve() == 5.0
        assert ConfigValue("exa.missing", after=float).resolve() is None

    def test_provider_switching(self) -> None:
        provider1 = MockConfigProvider(Config(data={"exa": {"search_type": "neural"}}))
        provider2 = MockConfigProvider(Config(data={"exa": {"search_type": "keyword"}}))

        original: ConfigProvider = set_config_provider(provider1)

        try:
            search_type = ConfigValue("exa.search_type")
            assert search_type.resolve() == "neural"

            set_config_provider(provider2)
            assert search_type.resolve() == "keyword"
        finally:
            set_config_provider(original)

        assert isinstance(get_config_provider(), SingletonConfigProvider)


class TestConfigStore:
    """Tests for the process-wide store"""

    def test_singleton(self):
        store: ConfigStore = ConfigStore.get_instance()
        store.configure(source={"exa": {"search_type": "neural"}})

        assert ConfigStore.get_instance() is store
        assert ConfigValue("exa.search_type").resolve() == "neural"

        ConfigStore.reset_instance()
        assert ConfigStore.get_instance() is not store
        assert not ConfigStore.get_instance().is_configured()

    def test_unconfigured_store_raises(self):
        with pytest.raises(ValueError, match="not initialized"):
            ConfigStore.get_instance().config()

    def test_configure_from_file(self):
        config = ConfigStore.get_instance().configure(source=TEST_CONFIG_FILE)

        assert ConfigStore.get_instance().config() is config
        assert config.filename == TEST_CONFIG_FILE


class TestInjectConfig:
    """Test ConfigValue defaults resolved by inject_config"""

    @with_test_config
    def test_inject_config_resolves_defaults(self, test_provider: MockConfigProvider):
        @inject_config
        def build(base_url: str = ConfigValue("exa.base_url"), count: int = ConfigValue("mcp.default_num_results")):
            return base_url, count

        assert build() == ("https://api.exa.test", 10)
        assert build(count=3) == ("https://api.exa.test", 3)
        assert build("https://other.test") == ("https://other.test", 10)

    @with_test_config
    def test_resolved_at_call_time(self, test_provider: MockConfigProvider):
        @inject_config
        def search_type(value: str = ConfigValue("exa.search_type")):
            return value

        assert search_type() == "neural"
        test_provider.get_config().update({"exa.search_type": "keyword"})
        assert search_type() == "keyword"


class TestConfig:
    """Tests for Config get/update"""

    def test_get(self):
        config = Config(data={"exa": {"timeout": 5, "api_key": ""}})

        assert config.get("exa.timeout") == 5
        assert config.get("exa:timeout") == 5
        assert config.get("exa.api_key") == ""
        assert config.get("exa.missing", default=30) == 30
        assert config.get("storage.folder") is None

    def test_update(self):
        config = Config(data={"storage": {"folder": "data"}})

        config.update({"storage:filename": "searches.json", "runtime.config_file": "config.yml"})

        assert config.data == {"storage": {"folder": "data", "filename": "searches.json"}, "runtime": {"config_file": "config.yml"}}


class TestConfigFactory:
    """Tests for loading configuration"""

    def test_load_yaml_file(self):
        config = ConfigFactory().load(source=str(Path(__file__).parent / "config.yml"))

        assert config.get("storage.filename") == "searches.json"
        assert config.filename.endswith("config.yml")

    def test_load_dict_is_not_mutated(self):
        source = {"storage": {"folder": "data"}}

        with patch.dict(os.environ, {"EXA_MCP_STORAGE_FOLDER": "/var/lib/exa"}):
            config = ConfigFactory().load(source=source, env_prefix="EXA_MCP")

        assert config.get("storage.folder") == "/var/lib/exa"
        assert config.filename is None
        assert source == {"storage": {"folder": "data"}}

    def test_load_replaces_env_placeholders(self):
        with patch.dict(os.environ, {"EXA_API_KEY": "from-env"}):
            config = ConfigFactory().load(source={"exa": {"api_key": "${EXA_API_KEY}"}})

        assert config.get("exa.api_key") == "from-env"

    def test_env_override_keeps_underscores_in_key(self):
        with patch.dict(os.environ, {"EXA_MCP_MCP_DEFAULT_NUM_RESULTS": "5"}):
            config = ConfigFactory().load(source={"mcp": {"default_num_results": 10}}, env_prefix="EXA_MCP")

        assert config.get("mcp.default_num_results") == "5"

    def test_load_missing_file(self):
        with pytest.raises(FileNotFoundError):
            ConfigFactory().load(source="missing.yml")

    def test_load_non_mapping(self, tmp_path: Path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(TypeError, match="expected dict"):
            ConfigFactory().load(source=str(path))

    def test_load_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")

        assert ConfigFactory().load(source=path).data == {}
