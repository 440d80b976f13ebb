"""Pydantic models describing the Kubernetes core/v1 Node payloads."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _null_to_empty(value: object, empty: object) -> object:
    return empty if value is None else value


class KubernetesBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ObjectMeta(KubernetesBaseModel):
    # bookmark events carry metadata without a name
    name: str = ""
    resource_version: str | None = Field(default=None, alias="resourceVersion")
    labels: dict[str, str] = Field(default_factory=dict[str, str])

    @field_validator("labels", mode="before")
    @classmethod
    def _labels_or_empty(cls, value: object) -> object:
        return _null_to_empty(value, {})


class NodeCondition(KubernetesBaseModel):
    type: str
    status: str


class NodeAddressPayload(KubernetesBaseModel):
    type: str
    address: str


class NodeStatus(KubernetesBaseModel):
    conditions: list[NodeCondition] = Field(default_factory=list[NodeCondition])
    addresses: list[NodeAddressPayload] = Field(default_factory=list[NodeAddressPayload])

    @field_validator("conditions", "addresses", mode="before")
    @classmethod
    def _list_or_empty(cls, value: object) -> object:
        return _null_to_empty(value, [])


class NodePayload(KubernetesBaseModel):
    metadata: ObjectMeta
    status: NodeStatus = Field(default_factory=NodeStatus)

    @field_validator("status", mode="before")
    @classmethod
    def _status_or_empty(cls, value: object) -> object:
        return _null_to_empty(value, {})


class ListMeta(KubernetesBaseModel):
    resource_version: str | None = Field(default=None, alias="resourceVersion")


class NodeListResponse(KubernetesBaseModel):
    metadata: ListMeta = Field(default_factory=ListMeta)
    items: list[NodePayload] = Field(default_factory=list[NodePayload])

    @field_validator("items", mode="before")
    @classmethod
    def _items_or_empty(cls, value: object) -> object:
        return _null_to_empty(value, [])


class StatusPayload(KubernetesBaseModel):
    """``meta/v1 Status`` as sent in ERROR watch events and failed responses."""

    code: int | None = None
    reason: str | None = None
    message: str = ""


WatchEventType = Literal["ADDED", "MODIFIED", "DELETED", "BOOKMARK", "ERROR"]


class WatchEvent(KubernetesBaseModel):
    type: WatchEventType
    object: dict[str, object]
