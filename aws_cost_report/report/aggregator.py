"""
Day-over-day cost aggregation and category classification.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Dict, List, Mapping, Tuple

from .models import (
    Category,
    CategoryAggregate,
    CostReport,
    ServiceCost,
    change_percentage,
)

logger = logging.getLogger(__name__)

# Evaluated top to bottom, first match wins.
CATEGORY_RULES: Tuple[Tuple[Tuple[str, ...], Category], ...] = (
    (("ec2", "elastic compute cloud"), Category.EC2),
    (("guardduty", "vpc", "kms", "cloudfront"), Category.SECURITY),
    (("cloudwatch", "secrets manager"), Category.MANAGEMENT),
    (("rds", "s3", "simple storage service", "dynamodb", "glacier"), Category.STORAGE),
    (("tax",), Category.TAX),
)


def classify_service(service_name: str) -> Category:
    """Map an AWS service name to its cost category."""
    name = service_name.lower()
    for keywords, category in CATEGORY_RULES:
        if any(keyword in name for keyword in keywords):
            return category
    return Category.OTHER


def merge_service_costs(
    current: Mapping[str, float],
    previous: Mapping[str, float],
) -> List[ServiceCost]:
    """Join both windows per service, sorted by current amount descending."""
    names = list(current)
    names.extend(name for name in previous if name not in current)

    costs = []
    for name in names:
        amount = float(current.get(name, 0.0))
        previous_amount = float(previous.get(name, 0.0))
        costs.append(ServiceCost(
            service_name=name,
            amount=amount,
            previous_amount=previous_amount,
            change_percentage=change_percentage(amount, previous_amount),
        ))

    # sorted() is stable, ties keep first-seen order
    return sorted(costs, key=lambda c: c.amount, reverse=True)


def aggregate_categories(services: List[ServiceCost]) -> Dict[Category, CategoryAggregate]:
    """Sum service costs into all six categories."""
    sums: Dict[Category, List[float]] = {category: [0.0, 0.0] for category in Category}

    for cost in services:
        bucket = sums[classify_service(cost.service_name)]
        bucket[0] += cost.amount
        bucket[1] += cost.previous_amount

    return {
        category: CategoryAggregate(
            current=current,
            previous=previous,
            change_percentage=change_percentage(current, previous),
        )
        for category, (current, previous) in sums.items()
    }


def build_cost_report(
    current: Mapping[str, float],
    previous: Mapping[str, float],
    period_start: dt.date,
    period_end: dt.date,
) -> CostReport:
    """Build the immutable report from two per-service cost mappings."""
    services = merge_service_costs(current, previous)
    categories = aggregate_categories(services)

    total = sum(c.amount for c in services)
    previous_total = sum(c.previous_amount for c in services)

    logger.info(
        f"Aggregated {len(services)} services: total {total:.2f} USD "
        f"(previous {previous_total:.2f} USD)"
    )

    return CostReport(
        period_start=period_start,
        period_end=period_end,
        total=total,
        previous_total=previous_total,
        total_change_percentage=change_percentage(total, previous_total),
        services=tuple(services),
        categories=categories,
    )
