"""Pydantic schema of the Alertmanager webhook payload.

Field names follow the Python convention; the camelCase names used on
the wire (``groupKey``, ``startsAt`` ...) are declared as aliases and
both spellings are accepted when validating.
"""

from datetime import datetime, timezone
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

FIRING = "firing"
RESOLVED = "resolved"


def _empty_if_null(value):
    """Read a JSON ``null`` label or annotation map as an empty one."""
    return {} if value is None else value


class InboundAlert(BaseModel):
    """A single alert inside an Alertmanager notification.

    Attributes:
        status: Per-alert status (``firing`` / ``resolved``).
        labels: Identifying labels of the alert.
        annotations: Descriptive annotations (summary, description ...).
        starts_at: When the alert started firing.
        ends_at: When the alert resolved, if it has.
        generator_url: Link back to the Prometheus expression.
        fingerprint: Alertmanager's hash of the label set.
    """

    status: Optional[str] = None
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    starts_at: Optional[datetime] = Field(default=None, alias="startsAt")
    ends_at: Optional[datetime] = Field(default=None, alias="endsAt")
    generator_url: str = Field(default="", alias="generatorURL")
    fingerprint: Optional[str] = None

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("labels", "annotations", mode="before")
    @classmethod
    def null_maps_as_empty(cls, value):
        return _empty_if_null(value)

    def start_epoch(self) -> Optional[int]:
        """Return :attr:`starts_at` as whole seconds since the epoch.

        Naive timestamps are taken to be UTC.
        """
        if self.starts_at is None:
            return None
        started = self.starts_at
        if started.tzinfo is None:
            started = started.replace(tzinfo=timezone.utc)
        return int(started.timestamp())


class InboundMessage(BaseModel):
    """One Alertmanager webhook notification for an alert group.

    ``alerts`` is nullable here so that a ``null`` collection reaches
    validation instead of failing inside the JSON decoder.
    """

    status: str
    group_key: Optional[Union[int, str]] = Field(default=None, alias="groupKey")
    group_labels: dict[str, str] = Field(default_factory=dict, alias="groupLabels")
    external_url: str = Field(default="", alias="externalURL")
    alerts: Optional[list[InboundAlert]] = None
    receiver: Optional[str] = None
    version: Optional[str] = None
    common_labels: dict[str, str] = Field(default_factory=dict, alias="commonLabels")
    common_annotations: dict[str, str] = Field(
        default_factory=dict, alias="commonAnnotations"
    )
    truncated_alerts: int = Field(default=0, alias="truncatedAlerts")

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("group_labels", "common_labels", "common_annotations", mode="before")
    @classmethod
    def null_maps_as_empty(cls, value):
        return _empty_if_null(value)

    @property
    def entity_id(self) -> Optional[str]:
        """String form of the group key, or ``None`` if there is none."""
        if self.group_key is None:
            return None
        return str(self.group_key)

    @property
    def display_name(self) -> str:
        """Group-label values joined with ``:``, ordered by label name."""
        return ":".join(self.group_labels[key] for key in sorted(self.group_labels))
