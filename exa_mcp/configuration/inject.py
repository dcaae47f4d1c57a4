from __future__ import annotations

import functools
import inspect
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Generic, Self, TypeVar

from .config import Config, ConfigFactory

T = TypeVar("T")

# pylint: disable=global-statement


class ConfigProvider(ABC):
    """Source of the active configuration; swapped out in tests"""

    @abstractmethod
    def get_config(self) -> Config: ...

    @abstractmethod
    def is_configured(self) -> bool: ...


class SingletonConfigProvider(ConfigProvider):
    """Reads from the process-wide ConfigStore"""

    def get_config(self) -> Config:
        return ConfigStore.get_instance().config()

    def is_configured(self) -> bool:
        return ConfigStore.get_instance().is_configured()


class MockConfigProvider(ConfigProvider):
    """Serves a fixed Config"""

    def __init__(self, config: Config) -> None:
        self._config: Config = config

    def get_config(self) -> Config:
        return self._config

    def is_configured(self) -> bool:
        return True


_current_provider: ConfigProvider = SingletonConfigProvider()
_provider_lock = threading.Lock()


def get_config_provider() -> ConfigProvider:
    return _current_provider


def set_config_provider(provider: ConfigProvider) -> ConfigProvider:
    """Install provider and return the one it replaces"""
    global _current_provider
    with _provider_lock:
        previous: ConfigProvider = _current_provider
        _current_provider = provider
        return previous


def reset_config_provider() -> None:
    set_config_provider(SingletonConfigProvider())


@dataclass
class ConfigValue(Generic[T]):
    """A configuration key resolved when the value is needed"""

    key: str
    default: T | None = None
    after: Callable[[Any], T] | None = None

    def resolve(self) -> T | None:
        value: Any = get_config_provider().get_config().get(self.key, self.default)
        if value is not None and self.after:
            return self.after(value)
        return value


class ConfigStore:
    """Holds the configuration loaded at startup"""

    _instance: ConfigStore | None = None
    _lock = threading.Lock()

    def __init__(self) -> None:
        self._config: Config | None = None

    @classmethod
    def get_instance(cls) -> Self:
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        with cls._lock:
            cls._instance = None
        reset_config_provider()

    def is_configured(self) -> bool:
        return self._config is not None

    def config(self) -> Config:
        if self._config is None:
            raise ValueError("Config Store is not initialized, call setup_config_store() first")
        return self._config

    def configure(self, *, source: str | Path | dict, env_filename: str | None = None, env_prefix: str | None = None) -> Config:
        self._config = ConfigFactory().load(source=source, env_filename=env_filename, env_prefix=env_prefix)
        return self._config


def inject_config(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Resolve ConfigValue defaults of parameters the caller did not pass"""
    signature: inspect.Signature = inspect.signature(fn)
    configured: dict[str, ConfigValue] = {
        name: p.default for name, p in signature.parameters.items() if isinstance(p.default, ConfigValue)
    }

    @functools.wraps(fn)
    def decorated(*args, **kwargs):
        passed = signature.bind_partial(*args, **kwargs).arguments
        for name, value in configured.items():
            if name not in passed:
                kwargs[name] = value.resolve()
        return fn(*args, **kwargs)

    return decorated
