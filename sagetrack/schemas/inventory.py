"""
Resource Inventory Schemas

Uniform data model for active SageMaker resources, whatever their kind.
"""

from datetime import datetime, timezone
from typing import Dict, List
from pydantic import BaseModel, Field, computed_field

from sagetrack.shared.core.constants import ResourceKind, UNKNOWN_INSTANCE_TYPE

# Stand-in for an absent creation timestamp
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


class ResourceRecord(BaseModel):
    """Normalized representation of one active SageMaker resource."""
    kind: ResourceKind
    name: str = Field(min_length=1)
    status: str
    instance_type: str = UNKNOWN_INSTANCE_TYPE
    instance_count: int = Field(default=0, ge=0)
    creation_time: datetime = ZERO_TIME
    volume_size: int = 0
    user_profile: str = ""
    app_type: str = ""
    space_name: str = ""
    studio_type: str = ""


class InventoryReport(BaseModel):
    """Result of one inventory fan-out."""
    region: str
    configured: bool
    endpoints: List[ResourceRecord] = Field(default_factory=list)
    notebooks: List[ResourceRecord] = Field(default_factory=list)
    studio_apps: List[ResourceRecord] = Field(default_factory=list)
    errors: Dict[str, str] = Field(default_factory=dict)  # kind -> surfaced message
    suppressed_errors: int = 0
    collected_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_count(self) -> int:
        return len(self.endpoints) + len(self.notebooks) + len(self.studio_apps)
