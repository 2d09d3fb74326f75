"""
SageMaker Inventory Adapter (Native Async)

Lists active SageMaker compute (endpoints, notebook instances, Studio apps)
through one aioboto3 client. Every query runs under the Retrier and maps raw
entries into the uniform ResourceRecord.
"""

from contextlib import AsyncExitStack, asynccontextmanager
from collections.abc import AsyncIterator
from typing import Any, Dict, List, Optional, Type

import structlog
from botocore.exceptions import NoRegionError, ProfileNotFound
from pydantic import ValidationError

from sagetrack.schemas.inventory import ResourceRecord
from sagetrack.schemas.sagemaker import (
    AppDetails,
    EndpointSummary,
    NotebookInstanceSummary,
    SageMakerSummary,
)
from sagetrack.shared.adapters.aws_pagination import collect_paginated_items
from sagetrack.shared.adapters.aws_utils import build_boto_config, client_region, get_boto_session
from sagetrack.shared.adapters.base import BaseInventoryAdapter
from sagetrack.shared.core.config import Settings, get_settings
from sagetrack.shared.core.constants import ACTIVE_STATUS, ResourceKind
from sagetrack.shared.core.exceptions import AuthenticationError, ConfigurationError
from sagetrack.shared.core.retry import Retrier, build_retrier

logger = structlog.get_logger()

DEFAULT_MAX_PAGES = 100


class SageMakerInventoryAdapter(BaseInventoryAdapter):
    """
    Read-only SageMaker inventory over a single, already-open client.

    The client handle and region are fixed at construction; operations share no
    mutable state and may be awaited concurrently.
    """

    def __init__(
        self,
        client: Any,
        region: str = "",
        *,
        retrier: Optional[Retrier] = None,
        max_pages: int = DEFAULT_MAX_PAGES,
    ):
        self.client = client
        self.region = region
        self.retrier = retrier or build_retrier()
        self.max_pages = max_pages

    @classmethod
    @asynccontextmanager
    async def connect(
        cls,
        region: Optional[str] = None,
        *,
        settings: Optional[Settings] = None,
        retrier: Optional[Retrier] = None,
    ) -> AsyncIterator["SageMakerInventoryAdapter"]:
        """
        Open a SageMaker client for the lifetime of the block.

        Region precedence follows botocore: explicit argument, then AWS_REGION
        setting, then the SDK chain (env, config file, instance metadata).
        """
        settings = settings or get_settings()
        explicit_region = region or settings.AWS_REGION

        kwargs: Dict[str, Any] = {
            "service_name": "sagemaker",
            "config": build_boto_config(settings),
        }
        if explicit_region:
            kwargs["region_name"] = explicit_region
        if settings.AWS_ENDPOINT_URL:
            kwargs["endpoint_url"] = settings.AWS_ENDPOINT_URL

        async with AsyncExitStack() as stack:
            try:
                session = get_boto_session(settings.AWS_PROFILE)
                client = await stack.enter_async_context(session.client(**kwargs))
            except (NoRegionError, ProfileNotFound) as exc:
                logger.error("sagemaker_client_init_failed", error=str(exc))
                raise ConfigurationError(
                    f"Unable to load AWS SDK configuration: {exc}",
                    details={"region": explicit_region or ""},
                ) from exc

            resolved_region = client_region(client)
            logger.debug("sagemaker_client_ready", region=resolved_region or "unresolved")
            yield cls(
                client,
                region=resolved_region,
                retrier=retrier or build_retrier(settings),
                max_pages=settings.SAGEMAKER_MAX_PAGES,
            )

    def get_region(self) -> str:
        return self.region

    async def validate_configuration(self) -> bool:
        """
        Cheap probe (ListDomains, one result) to check credentials and permissions.

        Authentication failures mean "environment not usable" and return False;
        every other failure is raised as a ClassifiedError.
        """
        async def _probe() -> Any:
            return await self.client.list_domains(MaxResults=1)

        try:
            await self.retrier.run(_probe, operation_name="list_domains")
        except AuthenticationError as exc:
            logger.warning(
                "sagemaker_configuration_unusable",
                region=self.region,
                code=exc.code,
                hint=exc.hint,
            )
            return False
        return True

    async def list_endpoints(self) -> List[ResourceRecord]:
        return await self._list_active(
            ResourceKind.ENDPOINT, "list_endpoints", "Endpoints", EndpointSummary
        )

    async def list_notebooks(self) -> List[ResourceRecord]:
        return await self._list_active(
            ResourceKind.NOTEBOOK, "list_notebook_instances", "NotebookInstances", NotebookInstanceSummary
        )

    async def list_studio_apps(self) -> List[ResourceRecord]:
        return await self._list_active(
            ResourceKind.STUDIO_APP, "list_apps", "Apps", AppDetails
        )

    async def _list_active(
        self,
        kind: ResourceKind,
        operation_name: str,
        result_key: str,
        model: Type[SageMakerSummary],
    ) -> List[ResourceRecord]:
        async def _fetch() -> List[Dict[str, Any]]:
            return await collect_paginated_items(
                self.client, operation_name, result_key, max_pages=self.max_pages
            )

        raw_items = await self.retrier.run(_fetch, operation_name=operation_name)
        return normalize_resources(kind, raw_items, model)


def normalize_resources(
    kind: ResourceKind,
    raw_items: List[Dict[str, Any]],
    model: Type[SageMakerSummary],
) -> List[ResourceRecord]:
    """Keep active entries in received order and map them to ResourceRecord."""
    active_status = ACTIVE_STATUS[kind]
    records: List[ResourceRecord] = []
    dropped = 0

    for raw in raw_items:
        try:
            entry = model.model_validate(raw)
        except ValidationError as exc:
            logger.warning("sagemaker_entry_unparseable", kind=kind.value, error=str(exc))
            dropped += 1
            continue

        if entry.status != active_status:
            continue

        record = entry.to_record()
        if record is None:
            dropped += 1
            continue
        records.append(record)

    logger.info(
        "sagemaker_resources_listed",
        kind=kind.value,
        received=len(raw_items),
        active=len(records),
        dropped=dropped,
    )
    return records
