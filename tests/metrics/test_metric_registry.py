"""
Tests for the metric registry.
"""

from types import SimpleNamespace

from maintainability_index import metrics
from maintainability_index.metrics import _BUILTIN_MODULES, load_metric_specs
from maintainability_index.metrics.base import MetricSpec
from maintainability_index.models import RepositorySnapshot
from maintainability_index.scoring import METRIC_WEIGHTS


def test_load_metric_specs_returns_six_specs():
    specs = load_metric_specs()
    assert len(specs) == len(_BUILTIN_MODULES) == 6
    assert all(isinstance(spec, MetricSpec) for spec in specs)


def test_registry_order_matches_weights():
    """Calculation order and weight table must agree."""
    names = [spec.name for spec in load_metric_specs()]
    assert names == [name for name, _ in METRIC_WEIGHTS]


def test_every_spec_has_error_handler():
    for spec in load_metric_specs():
        assert spec.on_error is not None
        result = spec.on_error(RuntimeError("boom"))
        assert result.name == spec.name
        assert result.score == 0.0
        assert result.details == "Note: Analysis incomplete - boom"


def test_every_checker_accepts_empty_snapshot(now):
    snapshot = RepositorySnapshot(owner="octo", name="empty")
    for spec in load_metric_specs():
        result = spec.checker(snapshot, now)
        assert result.name == spec.name
        assert 0.0 <= result.score <= 100.0
        assert result.details


def test_load_builtin_metric_specs_filters_missing_metric(monkeypatch):
    """Test builtin metric loading skips modules without METRIC."""
    spec = MetricSpec(
        name="Builtin Metric",
        description="desc",
        checker=lambda snapshot, now: None,
    )
    modules = {
        "mod.with.metric": SimpleNamespace(METRIC=spec),
        "mod.without.metric": SimpleNamespace(),
        "mod.with.other": SimpleNamespace(METRIC="not a spec"),
    }

    monkeypatch.setattr(metrics, "_BUILTIN_MODULES", list(modules))
    monkeypatch.setattr(metrics, "import_module", modules.__getitem__)

    assert metrics.load_metric_specs() == [spec]
