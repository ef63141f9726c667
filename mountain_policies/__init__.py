"""
Mountain Policies - Centralized policy definitions for crystalline mountain generation.

This package provides all policy dataclasses used by the generation module.
All policies are JSON-serializable and support the "requested vs effective"
pattern for tracking runtime adjustments.

Usage:
    from mountain_policies import MountainPolicy, OperationReport
    from mountain_policies.generation import ShellPolicy, VeinPolicy
"""

from .base import (
    OperationReport,
    validate_policy,
    check_range,
    check_int,
    check_positive,
    check_color,
)

from .generation import (
    ShellPolicy,
    VeinPolicy,
    TubeMeshPolicy,
    WireframePolicy,
    AppearancePolicy,
    AssemblyPolicy,
    MountainPolicy,
    validate_mountain_policy,
)

__all__ = [
    # Base
    "OperationReport",
    "validate_policy",
    "check_range",
    "check_int",
    "check_positive",
    "check_color",
    # Generation
    "ShellPolicy",
    "VeinPolicy",
    "TubeMeshPolicy",
    "WireframePolicy",
    "AppearancePolicy",
    "AssemblyPolicy",
    "MountainPolicy",
    "validate_mountain_policy",
]
