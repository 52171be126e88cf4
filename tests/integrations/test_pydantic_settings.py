from __future__ import annotations

import importlib
from collections.abc import Iterator
from types import ModuleType
from typing import Any

import pytest
from pydantic_settings import BaseSettings

import solowire._internal.integrations.pydantic_settings as pydantic_settings_integration
from solowire.builder import ContainerBuilder
from solowire.exceptions import SoloWireDependencyMissingError


class AppSettings(BaseSettings):
    api_url: str = "http://localhost"


class ApiClient:
    def __init__(self, settings: AppSettings) -> None:
        self.settings = settings


@pytest.fixture()
def fresh_settings_bases() -> Iterator[None]:
    pydantic_settings_integration.settings_bases.cache_clear()
    yield
    pydantic_settings_integration.settings_bases.cache_clear()


def test_load_base_settings_returns_none_for_missing_module(monkeypatch: Any) -> None:
    def _raise_import_error(_module_name: str) -> ModuleType:
        raise ImportError

    monkeypatch.setattr(importlib, "import_module", _raise_import_error)

    assert pydantic_settings_integration._load_base_settings("missing.module") is None


def test_load_base_settings_returns_none_when_base_settings_is_not_a_type(
    monkeypatch: Any,
) -> None:
    module = ModuleType("test_module")
    module.BaseSettings = "not-a-type"  # type: ignore[attr-defined]

    monkeypatch.setattr(importlib, "import_module", lambda _module_name: module)

    assert pydantic_settings_integration._load_base_settings("fake.module") is None


def test_settings_bases_skip_unavailable_modules(
    monkeypatch: Any,
    fresh_settings_bases: None,
) -> None:
    seen_module_names: list[str] = []

    def _load_base_settings(module_name: str) -> type[Any] | None:
        seen_module_names.append(module_name)
        return BaseSettings if module_name == "pydantic_settings" else None

    monkeypatch.setattr(pydantic_settings_integration, "_load_base_settings", _load_base_settings)

    assert pydantic_settings_integration.settings_bases() == (BaseSettings,)
    assert seen_module_names == ["pydantic_settings", "pydantic.v1"]


def test_is_pydantic_settings_subclass() -> None:
    assert pydantic_settings_integration.is_pydantic_settings_subclass(AppSettings) is True
    assert pydantic_settings_integration.is_pydantic_settings_subclass(BaseSettings) is False
    assert pydantic_settings_integration.is_pydantic_settings_subclass(ApiClient) is False
    assert pydantic_settings_integration.is_pydantic_settings_subclass("not-a-class") is False


def test_settings_are_built_from_environment(
    builder: ContainerBuilder,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("API_URL", "https://api.example.com")
    builder.register(AppSettings)

    settings = builder.build().resolve(AppSettings)

    assert settings.api_url == "https://api.example.com"


def test_missing_settings_are_autoregistered(lenient_builder: ContainerBuilder) -> None:
    lenient_builder.register(ApiClient)

    container = lenient_builder.build()

    assert container.resolve(ApiClient).settings is container.resolve(AppSettings)
    assert container.resolve(AppSettings).api_url == "http://localhost"


def test_missing_settings_fail_strict_build(builder: ContainerBuilder) -> None:
    builder.register(ApiClient)

    with pytest.raises(SoloWireDependencyMissingError) as exc_info:
        builder.build()

    assert exc_info.value.missing == (AppSettings,)
