"""Parameter validators."""

from __future__ import annotations

import pytest

from n9e_mcp.toolset.validate import (
    first_error,
    validate_cate,
    validate_is_recovered,
    validate_pagination,
    validate_rule_prods,
    validate_severity,
    validate_time_range,
)


def test_time_range():
    assert "mutually exclusive" in validate_time_range(1, 100, 50)
    assert "mutually exclusive" in validate_time_range(1, 0, 50)
    assert validate_time_range(0, 100, 50) == "stime (100) must be less than etime (50)"
    assert validate_time_range(0, 100, 100) is not None
    assert validate_time_range(0, 50, 100) is None
    assert validate_time_range(6, 0, 0) is None
    assert validate_time_range(0, 0, 0) is None


def test_pagination():
    assert validate_pagination(0, 0) is None
    assert validate_pagination(20, 1) is None
    assert validate_pagination(-1, 1) == "limit must be >= 0, got -1"
    assert validate_pagination(10, -2) == "page must be >= 0, got -2"


@pytest.mark.parametrize("value", ["", "1", "1,2,3", "2, 3"])
def test_severity_accepts(value):
    assert validate_severity(value) is None


@pytest.mark.parametrize("value", ["4", "0", "1,5", "high", "1,,2"])
def test_severity_rejects(value):
    assert validate_severity(value).startswith("invalid severity value")


def test_cate():
    assert validate_cate("") is None
    assert validate_cate("prometheus") is None
    assert validate_cate("$all") is None
    assert validate_cate("mysql").startswith("invalid cate: mysql")


def test_rule_prods():
    assert validate_rule_prods("") is None
    assert validate_rule_prods("host, metric") is None
    assert validate_rule_prods("host,tracing") == (
        "invalid rule_prod: tracing, valid values: host, metric, loki, anomaly"
    )


def test_is_recovered():
    for value in (-1, 0, 1):
        assert validate_is_recovered(value) is None
    assert validate_is_recovered(2).startswith("invalid is_recovered: 2")


def test_first_error():
    assert first_error(None, None) is None
    assert first_error(None, "a", "b") == "a"
