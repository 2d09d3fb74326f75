"""
Inventory Service

Caller-side fan-out: validates the configuration once, then runs the requested
list queries concurrently and routes their failures through the error tracker
so repeated identical failures are surfaced only once.
"""

import asyncio
from typing import Iterable, Optional

import structlog

from sagetrack.schemas.inventory import InventoryReport
from sagetrack.shared.adapters.base import BaseInventoryAdapter
from sagetrack.shared.core.constants import ResourceKind
from sagetrack.shared.core.error_tracker import ErrorTracker, get_error_tracker
from sagetrack.shared.core.exceptions import TransientError

logger = structlog.get_logger()

_LISTERS = {
    ResourceKind.ENDPOINT: "list_endpoints",
    ResourceKind.NOTEBOOK: "list_notebooks",
    ResourceKind.STUDIO_APP: "list_studio_apps",
}

_REPORT_FIELDS = {
    ResourceKind.ENDPOINT: "endpoints",
    ResourceKind.NOTEBOOK: "notebooks",
    ResourceKind.STUDIO_APP: "studio_apps",
}


class InventoryService:
    def __init__(self, adapter: BaseInventoryAdapter, tracker: Optional[ErrorTracker] = None):
        self.adapter = adapter
        self.tracker = tracker or get_error_tracker()

    async def collect(
        self,
        kinds: Optional[Iterable[ResourceKind]] = None,
        timeout: Optional[float] = None,
    ) -> InventoryReport:
        """
        Build an InventoryReport for the requested kinds (all by default).

        `timeout` is a deadline for the whole fan-out; expiry cancels in-flight
        calls and pending retry sleeps.
        """
        selected = list(dict.fromkeys(kinds)) if kinds else list(ResourceKind)
        if timeout is None:
            return await self._collect(selected)

        try:
            return await asyncio.wait_for(self._collect(selected), timeout=timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("inventory_collection_timed_out", timeout_seconds=timeout)
            raise TransientError(
                f"Inventory collection timed out after {timeout} seconds",
                code="timeout_error",
                details={"timeout_seconds": timeout},
            ) from exc

    async def _collect(self, kinds: list[ResourceKind]) -> InventoryReport:
        configured = await self.adapter.validate_configuration()
        report = InventoryReport(region=self.adapter.get_region(), configured=configured)
        if not configured:
            logger.info("inventory_skipped_unconfigured", region=report.region)
            return report

        results = await asyncio.gather(
            *(getattr(self.adapter, _LISTERS[kind])() for kind in kinds),
            return_exceptions=True,
        )

        for kind, result in zip(kinds, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                surfaced = self.tracker.track(result)
                if surfaced is None:
                    report.suppressed_errors += 1
                else:
                    report.errors[kind.value] = str(surfaced)
                continue
            setattr(report, _REPORT_FIELDS[kind], result)

        logger.info(
            "inventory_collected",
            region=report.region,
            total=report.total_count,
            failed_kinds=sorted(report.errors),
            suppressed_errors=report.suppressed_errors,
        )
        return report
