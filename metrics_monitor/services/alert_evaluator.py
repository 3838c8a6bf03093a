from typing import List, NamedTuple

from metrics_monitor.models.alerts import Alert, Severity
from metrics_monitor.models.metrics import Sample


class AlertRule(NamedTuple):
    id: int
    field: str
    label: str
    name: str
    threshold: float
    severity: Severity


# Strict ">" comparisons; a value equal to the threshold does not alert.
ALERT_RULES = (
    AlertRule(1, "cpu_pct", "CPU", "High CPU Usage", 80.0, Severity.CRITICAL),
    AlertRule(2, "memory_pct", "Memory", "High Memory Usage", 85.0, Severity.WARNING),
    AlertRule(3, "disk_pct", "Disk", "Low Disk Space", 90.0, Severity.CRITICAL),
)


def evaluate(sample: Sample) -> List[Alert]:
    """
    Return the alerts raised by a single sample, ordered by alert id.

    The result depends on the sample alone: there is no memory of earlier
    samples, so every call fully replaces the previous alert set.
    """
    alerts: List[Alert] = []
    for rule in ALERT_RULES:
        value = getattr(sample, rule.field)
        if value > rule.threshold:
            alerts.append(
                Alert(
                    id=rule.id,
                    name=rule.name,
                    description=f"{rule.label} usage at {value}%",
                    severity=rule.severity,
                    raised_at=sample.captured_at,
                )
            )
    return alerts
