"""Pearson correlation between employee attributes and attrition."""

from __future__ import annotations

import math
from dataclasses import dataclass

from hr_retention.discovery.records import NUMERIC_FIELDS, Employee


@dataclass
class AttritionCorrelation:
    """Correlation of one numeric attribute with the 0/1 attrition indicator."""
    field_name: str
    coefficient: float | None  # None when either variable has zero variance
    sample_size: int
    summary: str


def pearson(xs: list[float], ys: list[float]) -> float | None:
    """Population Pearson correlation rounded to 2 decimals.

    Returns None for empty input or when either series is constant.
    """
    n = min(len(xs), len(ys))
    if n == 0:
        return None

    xs, ys = xs[:n], ys[:n]
    mean_x = sum(xs) / n
    mean_y = sum(ys) / n

    cov = sum((x - mean_x) * (y - mean_y) for x, y in zip(xs, ys)) / n
    sd_x = math.sqrt(sum((x - mean_x) ** 2 for x in xs) / n)
    sd_y = math.sqrt(sum((y - mean_y) ** 2 for y in ys) / n)

    denominator = sd_x * sd_y
    if math.isclose(denominator, 0.0, abs_tol=1e-12):
        return None
    return round(max(-1.0, min(1.0, cov / denominator)), 2)


def _describe(coefficient: float | None) -> str:
    if coefficient is None:
        return "undefined (no variance)"
    strength = abs(coefficient)
    if strength >= 0.7:
        label = "strong"
    elif strength >= 0.3:
        label = "moderate"
    elif strength >= 0.1:
        label = "weak"
    else:
        label = "negligible"
    direction = "positive" if coefficient > 0 else "negative" if coefficient < 0 else "no"
    return f"{label} {direction} correlation"


def attrition_correlation(employees: list[Employee], field_name: str) -> AttritionCorrelation:
    """Correlate a numeric employee attribute with attrition.

    Employees missing the attribute are left out.

    Raises:
        ValueError: if *field_name* is not a numeric attribute.
    """
    if field_name not in NUMERIC_FIELDS:
        raise ValueError(f"Not a numeric employee attribute: {field_name}")

    xs: list[float] = []
    ys: list[float] = []
    for emp in employees:
        value = getattr(emp, field_name)
        if value is None:
            continue
        xs.append(float(value))
        ys.append(1.0 if emp.attrition else 0.0)

    coefficient = pearson(xs, ys)
    summary = f"{field_name} vs attrition over {len(xs)} employees: {_describe(coefficient)}"
    if coefficient is not None:
        summary += f" (r = {coefficient:.2f})"
    summary += "."

    return AttritionCorrelation(
        field_name=field_name,
        coefficient=coefficient,
        sample_size=len(xs),
        summary=summary,
    )


def distance_attrition_correlation(employees: list[Employee]) -> AttritionCorrelation:
    """Correlation between commute distance and attrition."""
    return attrition_correlation(employees, "distance_from_home")
