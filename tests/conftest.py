"""
Global pytest fixtures for the sagetrack test suite.

Provides:
- Fake aioboto3 SageMaker clients and async paginators
- botocore ClientError factories
- Retriers that never really sleep
- Isolated error trackers and settings caches
"""
import os

# Set test environment BEFORE any sagetrack imports
os.environ["TESTING"] = "true"

import asyncio
import sys
from typing import Any, Callable, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog
from botocore.exceptions import ClientError

from sagetrack.shared.core.config import get_settings
from sagetrack.shared.core.error_tracker import ErrorTracker, get_error_tracker
from sagetrack.shared.core.retry import Retrier, RetryConfig


class FakePaginator:
    """
    Async paginator stand-in.

    `errors` are raised by successive paginate() calls before the pages are
    served, which lets tests drive the retry path through a real paginator shape.
    """

    def __init__(
        self,
        pages: list[dict[str, Any]],
        *,
        delay: float = 0.0,
        errors: Optional[list[BaseException]] = None,
    ) -> None:
        self.pages = pages
        self.delay = delay
        self.errors = list(errors or [])
        self.calls: list[dict[str, Any]] = []

    def paginate(self, **kwargs: Any):
        self.calls.append(kwargs)
        return self._iterate()

    async def _iterate(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.errors:
            raise self.errors.pop(0)
        for page in self.pages:
            yield page


def build_client_error(
    code: str,
    message: str,
    operation: str = "ListDomains",
    status: int = 400,
) -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": message},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


def build_sagemaker_client(
    paginators: Optional[dict[str, FakePaginator]] = None,
    region: str = "us-west-2",
) -> MagicMock:
    paginators = paginators or {}
    client = MagicMock()
    client.meta.region_name = region
    client.list_domains = AsyncMock(return_value={"Domains": []})
    client.get_paginator.side_effect = lambda name: paginators.get(name) or FakePaginator([{}])
    return client


@pytest.fixture(autouse=True)
def _structlog_to_stderr():
    """Keep stdout reserved for command output whatever the test configures."""
    structlog.reset_defaults()
    structlog.configure(logger_factory=structlog.PrintLoggerFactory(file=sys.stderr))
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def _isolate_process_state():
    get_settings.cache_clear()
    get_error_tracker.cache_clear()
    yield
    get_settings.cache_clear()
    get_error_tracker.cache_clear()


@pytest.fixture
def client_error() -> Callable[..., ClientError]:
    return build_client_error


@pytest.fixture
def fake_paginator() -> type[FakePaginator]:
    return FakePaginator


@pytest.fixture
def sagemaker_client() -> Callable[..., MagicMock]:
    return build_sagemaker_client


@pytest.fixture
def retry_sleep() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def fast_retrier(retry_sleep: AsyncMock) -> Retrier:
    """Three attempts, deterministic zero backoff, sleeps recorded instead of taken."""
    config = RetryConfig(max_attempts=3, initial_backoff=0.0, max_backoff=0.0, jitter=False)
    return Retrier(config, sleep=retry_sleep)


@pytest.fixture
def tracker() -> ErrorTracker:
    return ErrorTracker()
