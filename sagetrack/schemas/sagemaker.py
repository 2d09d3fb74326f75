"""
Typed views over raw SageMaker list responses.

Every field the service may omit is Optional; `to_record()` applies the
per-field defaults ("None becomes empty/zero") and returns None when the entry
carries no usable name.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from sagetrack.schemas.inventory import ResourceRecord, ZERO_TIME
from sagetrack.shared.core.constants import (
    DEFAULT_ENDPOINT_INSTANCE_COUNT,
    ResourceKind,
    STUDIO_TYPE_LABELS,
    UNKNOWN_INSTANCE_TYPE,
    UNKNOWN_STUDIO_TYPE,
)


def _has_name(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def studio_type_label(app_type: Optional[str]) -> str:
    """Human-readable Studio generation for an app's runtime flavour."""
    return STUDIO_TYPE_LABELS.get(app_type or "", UNKNOWN_STUDIO_TYPE)


class SageMakerSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @property
    def status(self) -> str:
        raise NotImplementedError()

    def to_record(self) -> Optional[ResourceRecord]:
        raise NotImplementedError()


class EndpointSummary(SageMakerSummary):
    endpoint_name: Optional[str] = Field(default=None, alias="EndpointName")
    endpoint_status: Optional[str] = Field(default=None, alias="EndpointStatus")
    creation_time: Optional[datetime] = Field(default=None, alias="CreationTime")

    @property
    def status(self) -> str:
        return self.endpoint_status or ""

    def to_record(self) -> Optional[ResourceRecord]:
        if not _has_name(self.endpoint_name):
            return None
        name = self.endpoint_name
        # Variant details need DescribeEndpointConfig; the list view only has the summary
        return ResourceRecord(
            kind=ResourceKind.ENDPOINT,
            name=name,
            status=self.status,
            instance_type=UNKNOWN_INSTANCE_TYPE,
            instance_count=DEFAULT_ENDPOINT_INSTANCE_COUNT,
            creation_time=self.creation_time or ZERO_TIME,
        )


class NotebookInstanceSummary(SageMakerSummary):
    notebook_instance_name: Optional[str] = Field(default=None, alias="NotebookInstanceName")
    notebook_instance_status: Optional[str] = Field(default=None, alias="NotebookInstanceStatus")
    instance_type: Optional[str] = Field(default=None, alias="InstanceType")
    creation_time: Optional[datetime] = Field(default=None, alias="CreationTime")

    @property
    def status(self) -> str:
        return self.notebook_instance_status or ""

    def to_record(self) -> Optional[ResourceRecord]:
        if not _has_name(self.notebook_instance_name):
            return None
        name = self.notebook_instance_name
        return ResourceRecord(
            kind=ResourceKind.NOTEBOOK,
            name=name,
            status=self.status,
            instance_type=self.instance_type or UNKNOWN_INSTANCE_TYPE,
            creation_time=self.creation_time or ZERO_TIME,
            volume_size=0,
        )


class AppResourceSpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    instance_type: Optional[str] = Field(default=None, alias="InstanceType")


class AppDetails(SageMakerSummary):
    app_name: Optional[str] = Field(default=None, alias="AppName")
    app_type: Optional[str] = Field(default=None, alias="AppType")
    app_status: Optional[str] = Field(default=None, alias="Status")
    domain_id: Optional[str] = Field(default=None, alias="DomainId")
    user_profile_name: Optional[str] = Field(default=None, alias="UserProfileName")
    space_name: Optional[str] = Field(default=None, alias="SpaceName")
    creation_time: Optional[datetime] = Field(default=None, alias="CreationTime")
    resource_spec: Optional[AppResourceSpec] = Field(default=None, alias="ResourceSpec")

    @property
    def status(self) -> str:
        return self.app_status or ""

    def to_record(self) -> Optional[ResourceRecord]:
        if not _has_name(self.app_name):
            return None
        name = self.app_name
        instance_type = self.resource_spec.instance_type if self.resource_spec else None
        return ResourceRecord(
            kind=ResourceKind.STUDIO_APP,
            name=name,
            status=self.status,
            instance_type=instance_type or UNKNOWN_INSTANCE_TYPE,
            creation_time=self.creation_time or ZERO_TIME,
            user_profile=self.user_profile_name or "",
            app_type=self.app_type or "",
            space_name=self.space_name or "",
            studio_type=studio_type_label(self.app_type),
        )
