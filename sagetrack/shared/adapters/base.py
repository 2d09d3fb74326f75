from abc import ABC, abstractmethod
from typing import List

from sagetrack.schemas.inventory import ResourceRecord


class BaseInventoryAdapter(ABC):
    """
    Abstract Base Class for ML-platform inventory adapters.

    Standardizes the interface for:
    - Configuration validation (cheap probe)
    - Active resource listing per kind
    - Region introspection

    Implementations hold no per-call mutable state so every operation may run
    concurrently on one instance.
    """

    @abstractmethod
    async def validate_configuration(self) -> bool:
        """True when credentials/permissions are usable, False on authentication failures."""
        raise NotImplementedError()

    @abstractmethod
    async def list_endpoints(self) -> List[ResourceRecord]:
        """Active hosted model endpoints."""
        raise NotImplementedError()

    @abstractmethod
    async def list_notebooks(self) -> List[ResourceRecord]:
        """Active notebook instances."""
        raise NotImplementedError()

    @abstractmethod
    async def list_studio_apps(self) -> List[ResourceRecord]:
        """Active Studio apps."""
        raise NotImplementedError()

    @abstractmethod
    def get_region(self) -> str:
        """Region the underlying connection resolved; may be empty."""
        raise NotImplementedError()
