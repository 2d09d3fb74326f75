import aioboto3
from typing import Any, Optional
from botocore.config import Config as BotoConfig

# Standardized boto config with timeouts to prevent indefinite hangs.
# botocore's own retries are disabled; the Retrier owns the retry policy.
DEFAULT_BOTO_CONFIG = BotoConfig(
    read_timeout=30, connect_timeout=10, retries={"max_attempts": 1, "mode": "standard"}
)


def build_boto_config(settings: Any = None) -> BotoConfig:
    """Boto config honouring the configured socket timeouts."""
    if settings is None:
        return DEFAULT_BOTO_CONFIG
    return BotoConfig(
        read_timeout=settings.AWS_READ_TIMEOUT_SECONDS,
        connect_timeout=settings.AWS_CONNECT_TIMEOUT_SECONDS,
        retries={"max_attempts": 1, "mode": "standard"},
    )


def get_boto_session(profile_name: Optional[str] = None) -> aioboto3.Session:
    """Returns an aioboto3 session, optionally bound to a named profile."""
    if profile_name:
        return aioboto3.Session(profile_name=profile_name)
    return aioboto3.Session()


def client_region(client: Any) -> str:
    """Region an AWS client resolved at construction ("" when unknown)."""
    meta = getattr(client, "meta", None)
    region = getattr(meta, "region_name", None) if meta is not None else None
    return region if isinstance(region, str) else ""
