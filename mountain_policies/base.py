"""
Base utilities for mountain generation policies.

This module provides shared helpers and the OperationReport dataclass
used across all policy-driven operations.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any, List, Sequence
import json
import math
import numbers


def validate_policy(policy: Any, required_fields: Optional[List[str]] = None) -> List[str]:
    """
    Validate a policy object.

    Parameters
    ----------
    policy : Any
        Policy dataclass instance to validate
    required_fields : List[str], optional
        List of field names that must be non-None

    Returns
    -------
    List[str]
        List of validation error messages (empty if valid)
    """
    errors = []

    if required_fields:
        for field_name in required_fields:
            if not hasattr(policy, field_name):
                errors.append(f"Missing required field: {field_name}")
            elif getattr(policy, field_name) is None:
                errors.append(f"Required field is None: {field_name}")

    return errors


def check_range(
    name: str,
    value: float,
    low: Optional[float] = None,
    high: Optional[float] = None,
) -> List[str]:
    """
    Return an error message list if value is not a finite number in [low, high].

    NaN and infinities are always rejected.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return [f"{name} must be a number, got {value!r}"]
    if not math.isfinite(value):
        return [f"{name} must be finite, got {value}"]
    if low is not None and value < low:
        return [f"{name}={value} is below the minimum of {low}"]
    if high is not None and value > high:
        return [f"{name}={value} is above the maximum of {high}"]
    return []


def check_int(
    name: str,
    value: Any,
    low: Optional[int] = None,
    high: Optional[int] = None,
) -> List[str]:
    """Like check_range, but also require an integer (bools and floats are rejected)."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        return [f"{name} must be an integer, got {value!r}"]
    return check_range(name, value, low, high)


def check_positive(name: str, value: float) -> List[str]:
    """Return an error message list unless value is finite and > 0."""
    errors = check_range(name, value)
    if errors:
        return errors
    if value <= 0:
        return [f"{name} must be positive, got {value}"]
    return []


def check_color(name: str, color: Sequence[float]) -> List[str]:
    """Check that a color is an RGBA 4-tuple with finite components in [0, 1]."""
    if len(color) != 4:
        return [f"{name} must have 4 components (RGBA), got {len(color)}"]
    if any(check_range(name, c, 0.0, 1.0) for c in color):
        return [f"{name} components must lie in [0, 1], got {tuple(color)}"]
    return []


def coerce_color(value: Any) -> tuple:
    """Coerce a list/tuple color from JSON into a float tuple."""
    return tuple(float(c) for c in value)


@dataclass
class OperationReport:
    """
    Standard report structure for all operations.

    Every operation returns a report with requested vs effective policy,
    warnings, and operation-specific metadata/metrics.

    Note: Both `metadata` and `metrics` are supported. They are aliases;
    `metrics` is preferred for new code.
    """
    operation: str = "unknown"
    success: bool = True
    requested_policy: Dict[str, Any] = field(default_factory=dict)
    effective_policy: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    metrics: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Keep both fields in sync
        if self.metrics and not self.metadata:
            self.metadata = dict(self.metrics)
        elif self.metadata and not self.metrics:
            self.metrics = dict(self.metadata)
        elif self.metrics and self.metadata:
            merged = dict(self.metadata)
            merged.update(self.metrics)
            self.metadata = merged
            self.metrics = merged

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        if "metrics" not in d:
            d["metrics"] = d.get("metadata", {})
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def set_metric(self, key: str, value: Any) -> None:
        """Record a metric under both metrics and metadata."""
        self.metrics[key] = value
        self.metadata[key] = value

    def merge(self, other: "OperationReport") -> None:
        """Merge another report into this one."""
        self.warnings.extend(other.warnings)
        self.errors.extend(other.errors)
        if other.errors:
            self.success = False
        self.metadata.update({f"{other.operation}.{k}": v for k, v in other.metadata.items()})
        self.metrics.update({f"{other.operation}.{k}": v for k, v in other.metrics.items()})
