"""Azure Monitor common alert schema.

Only ``essentials.monitorCondition`` and ``essentials.alertTargetIDs`` drive
decisions; the rest is decoded so malformed deliveries are rejected the same
way the alerting platform would see them, and so it can be logged.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class _AlertModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Dimension(_AlertModel):
    name: str = ""
    value: str = ""


class MetricCriterion(_AlertModel):
    """One ``allOf`` entry of a metric alert condition."""

    metric_name: str = Field("", alias="metricName")
    metric_namespace: str = Field("", alias="metricNamespace")
    operator: str = ""
    threshold: str | float | None = None
    time_aggregation: str = Field("", alias="timeAggregation")
    dimensions: list[Dimension] = Field(default_factory=list)
    metric_value: float | None = Field(None, alias="metricValue")


class Condition(_AlertModel):
    window_size: str = Field("", alias="windowSize")
    all_of: list[MetricCriterion] = Field(default_factory=list, alias="allOf")


class AlertContext(_AlertModel):
    # Shape depends on the monitoring service; passed through untouched.
    properties: Any = None
    condition_type: str = Field("", alias="conditionType")
    condition: Condition = Field(default_factory=Condition)


class Essentials(_AlertModel):
    alert_id: str = Field("", alias="alertId")
    alert_rule: str = Field("", alias="alertRule")
    severity: str = ""
    signal_type: str = Field("", alias="signalType")
    monitor_condition: str = Field("", alias="monitorCondition")
    monitoring_service: str = Field("", alias="monitoringService")
    alert_target_ids: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("alertTargetIDs", "alertTargetIds", "alert_target_ids"),
    )
    configuration_items: list[str] = Field(default_factory=list, alias="configurationItems")
    origin_alert_id: str = Field("", alias="originAlertId")
    fired_date_time: datetime | None = Field(None, alias="firedDateTime")
    resolved_date_time: datetime | None = Field(None, alias="resolvedDateTime")
    description: str = ""
    essentials_version: str = Field("", alias="essentialsVersion")
    alert_context_version: str = Field("", alias="alertContextVersion")


class AlertData(_AlertModel):
    essentials: Essentials = Field(default_factory=Essentials)
    alert_context: AlertContext | None = Field(None, alias="alertContext")


class AlertPayload(_AlertModel):
    """Top-level webhook body."""

    schema_id: str = Field("", alias="schemaId")
    data: AlertData = Field(default_factory=AlertData)
