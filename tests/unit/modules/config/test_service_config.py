import pytest
from pydantic import ValidationError

from graceful_shutdown.modules.config import ConfigurationError, ServiceConfig, ShutdownBudget, load_config


def test_default_budget_fits_default_grace_period():
    budget = ShutdownBudget()
    assert budget.readiness_drain_delay == 5.0
    assert budget.grace_period == 15.0
    assert budget.hard_kill_period == 3.0
    assert budget.total == 23.0
    assert budget.total <= budget.termination_grace_period * (1 - budget.safety_margin)


def test_budget_must_leave_safety_margin():
    with pytest.raises(ValidationError) as exc_info:
        ShutdownBudget(grace_period=25.0)
    assert "exceeds" in str(exc_info.value)


def test_safety_margin_cannot_be_lowered():
    with pytest.raises(ValidationError):
        ShutdownBudget(safety_margin=0.05)


def test_negative_periods_rejected():
    with pytest.raises(ValidationError):
        ShutdownBudget(hard_kill_period=-1)


def test_load_config():
    config = load_config({
        "port": 8080,
        "env": "staging",
        "tracing_endpoint": "collector:4317",
        "metrics_endpoint": "pushgateway:9091",
        "shutdown": {"readiness_drain_delay": 2, "grace_period": 10, "hard_kill_period": 1},
    })

    assert isinstance(config, ServiceConfig)
    assert config.port == 8080
    assert config.env == "staging"
    assert config.shutdown.total == 13.0
    assert config.trace_sample_ratio == 0.1


def test_load_config_reports_missing_values():
    with pytest.raises(ConfigurationError) as exc_info:
        load_config({"port": 8080, "tracing_endpoint": "collector:4317"})
    assert "metrics_endpoint" in str(exc_info.value)


def test_load_config_reports_invalid_budget():
    with pytest.raises(ConfigurationError) as exc_info:
        load_config({
            "port": 8080,
            "tracing_endpoint": "collector:4317",
            "metrics_endpoint": "pushgateway:9091",
            "shutdown": {"grace_period": 60},
        })
    assert "shutdown" in str(exc_info.value)


def test_config_is_immutable():
    config = ServiceConfig(port=8080, tracing_endpoint="a:1", metrics_endpoint="b:2")
    with pytest.raises(ValidationError):
        config.port = 9090


def test_drain_period_leaves_cleanup_share():
    budget = ShutdownBudget(grace_period=10.0, cleanup_share=0.3)
    assert budget.drain_period == pytest.approx(7.0)
    assert ShutdownBudget().drain_period == pytest.approx(12.0)
