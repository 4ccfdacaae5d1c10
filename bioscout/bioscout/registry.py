"""Adapter registry: maps a platform identifier to its adapter."""

from __future__ import annotations

from bioscout.adapters.base import BaseAdapter


class AdapterRegistry:
    """Registry of adapters; adding a platform means registering an adapter."""

    def __init__(self) -> None:
        self._adapters: dict[str, BaseAdapter] = {}

    def register(self, adapter: BaseAdapter) -> None:
        self._adapters[adapter.get_platform_name()] = adapter

    def get(self, platform: str) -> BaseAdapter | None:
        return self._adapters.get(platform)

    def platforms(self) -> list[str]:
        return list(self._adapters)

    def __contains__(self, platform: object) -> bool:
        return platform in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)

    @classmethod
    def default(cls) -> AdapterRegistry:
        """Registry holding every bundled adapter."""
        from bioscout.adapters import get_all_adapters

        registry = cls()
        for adapter in get_all_adapters():
            registry.register(adapter)
        return registry
