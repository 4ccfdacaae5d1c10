"""Auto-discover and instantiate all extraction adapters."""

from __future__ import annotations

import importlib
import logging

from bioscout.adapters.base import BaseAdapter

logger = logging.getLogger(__name__)

_ADAPTER_MODULES = [
    "bioscout.adapters.linktree",
    "bioscout.adapters.beacons",
    "bioscout.adapters.tiktok",
    "bioscout.adapters.youtube",
    "bioscout.adapters.website",
    "bioscout.adapters.amazon_storefront",
]


def get_all_adapters() -> list[BaseAdapter]:
    """Import and instantiate all available adapters."""
    adapters: list[BaseAdapter] = []
    for mod_path in _ADAPTER_MODULES:
        try:
            mod = importlib.import_module(mod_path)
        except ImportError:
            logger.warning("Skipping adapter module %s", mod_path, exc_info=True)
            continue
        for attr_name in dir(mod):
            attr = getattr(mod, attr_name)
            if (
                isinstance(attr, type)
                and issubclass(attr, BaseAdapter)
                and attr is not BaseAdapter
            ):
                adapters.append(attr())
    return adapters
