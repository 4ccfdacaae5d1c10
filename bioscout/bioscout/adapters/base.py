"""Base extraction adapter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from bioscout.models import AdapterConfig, PlatformResult, RawLink


class BaseAdapter(ABC):
    """All platform adapters must implement this interface.

    ``extract`` may raise on I/O or parse failures; the orchestrator
    records those as failed PlatformResults. Returning
    ``success=False`` is reserved for definitive answers such as
    "profile not found".
    """

    @abstractmethod
    async def extract(self, handle: str, config: AdapterConfig) -> PlatformResult:
        """Collect raw links and metrics for *handle*."""
        ...

    @abstractmethod
    def get_platform_name(self) -> str:
        """Return the platform identifier used as the registry key."""
        ...

    def profile_url(self, handle: str) -> str:
        return ""

    # ------------------------------------------------------------------
    # Result helpers
    # ------------------------------------------------------------------

    def _link(self, url: str, title: str, source: str, confidence: int | None = None) -> RawLink:
        return RawLink(
            title=title,
            original_url=url,
            platform=self.get_platform_name(),
            source=source,
            confidence=confidence,
        )

    def _not_found(self, handle: str) -> PlatformResult:
        return PlatformResult(
            platform=self.get_platform_name(),
            handle=handle,
            success=False,
            error=f"profile not found: {self.profile_url(handle) or handle}",
        )
