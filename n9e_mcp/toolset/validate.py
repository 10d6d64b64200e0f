"""Parameter validators shared by tool handlers.

Each function returns ``None`` when the input is acceptable and a
human-readable message otherwise.  Empty strings mean "not supplied" and
always pass.
"""

from __future__ import annotations

VALID_SEVERITIES = frozenset({1, 2, 3})
VALID_CATES = frozenset({"prometheus", "host", "elasticsearch", "loki", "$all"})
VALID_RULE_PRODS = frozenset({"host", "metric", "loki", "anomaly"})
VALID_RECOVERED = frozenset({-1, 0, 1})


def validate_time_range(hours: int, stime: int, etime: int) -> str | None:
    # hours and stime/etime are mutually exclusive
    if hours > 0 and (stime > 0 or etime > 0):
        return "hours and stime/etime are mutually exclusive, use one or the other"
    if stime > 0 and etime > 0 and stime >= etime:
        return f"stime ({stime}) must be less than etime ({etime})"
    return None


def validate_pagination(limit: int, page: int) -> str | None:
    if limit < 0:
        return f"limit must be >= 0, got {limit}"
    if page < 0:
        return f"page must be >= 0, got {page}"
    return None


def validate_severity(severity: str) -> str | None:
    """Comma-separated severities, each 1, 2 or 3."""
    if not severity:
        return None
    for raw in severity.split(","):
        try:
            value = int(raw.strip())
        except ValueError:
            value = None
        if value not in VALID_SEVERITIES:
            return f"invalid severity value: {raw}, must be 1, 2, or 3"
    return None


def validate_cate(cate: str) -> str | None:
    if not cate:
        return None
    if cate not in VALID_CATES:
        return f"invalid cate: {cate}, valid values: prometheus, host, elasticsearch, loki, $all"
    return None


def validate_rule_prods(rule_prods: str) -> str | None:
    """Comma-separated product types."""
    if not rule_prods:
        return None
    for raw in rule_prods.split(","):
        prod = raw.strip()
        if prod not in VALID_RULE_PRODS:
            return f"invalid rule_prod: {prod}, valid values: host, metric, loki, anomaly"
    return None


def validate_is_recovered(is_recovered: int) -> str | None:
    if is_recovered not in VALID_RECOVERED:
        return (
            f"invalid is_recovered: {is_recovered}, "
            "valid values: -1 (all), 0 (not recovered), 1 (recovered)"
        )
    return None


def first_error(*results: str | None) -> str | None:
    """Return the first failure among already-evaluated validator results."""
    for result in results:
        if result is not None:
            return result
    return None
