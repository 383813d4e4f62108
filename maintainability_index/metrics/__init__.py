"""
Metric registry.

Calculator modules are imported lazily so that ``metrics.base`` can be used by
the domain model without pulling every calculator in.
"""

from importlib import import_module

from maintainability_index.metrics.base import MetricResult, MetricSpec

# Calculation order; reports always list metrics in this order.
_BUILTIN_MODULES = [
    "maintainability_index.metrics.documentation",
    "maintainability_index.metrics.commit_quality",
    "maintainability_index.metrics.activity",
    "maintainability_index.metrics.issue_management",
    "maintainability_index.metrics.community",
    "maintainability_index.metrics.branch_management",
]


def _load_builtin_metric_specs() -> list[MetricSpec]:
    specs = []
    for module_path in _BUILTIN_MODULES:
        module = import_module(module_path)
        spec = getattr(module, "METRIC", None)
        if isinstance(spec, MetricSpec):
            specs.append(spec)
    return specs


def load_metric_specs() -> list[MetricSpec]:
    """Return the built-in metric specs in calculation order."""
    return _load_builtin_metric_specs()


__all__ = ["MetricResult", "MetricSpec", "load_metric_specs"]
