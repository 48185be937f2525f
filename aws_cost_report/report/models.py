"""
Cost report data model.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Tuple


class Category(str, Enum):
    EC2 = "ec2"
    SECURITY = "security"
    MANAGEMENT = "management"
    STORAGE = "storage"
    OTHER = "other"
    TAX = "tax"


def change_percentage(current: float, previous: float) -> float:
    """Day-over-day change in percent.

    A zero previous amount maps to 0% when the current amount is also zero
    and to a flat 100% otherwise.
    """
    if previous == 0:
        return 0.0 if current == 0 else 100.0
    return (current - previous) / previous * 100


@dataclass(frozen=True)
class ServiceCost:
    service_name: str
    amount: float
    previous_amount: float
    change_percentage: float
    unit: str = "USD"


@dataclass(frozen=True)
class CategoryAggregate:
    current: float
    previous: float
    change_percentage: float


@dataclass(frozen=True)
class CostReport:
    period_start: dt.date
    period_end: dt.date
    total: float
    previous_total: float
    total_change_percentage: float
    services: Tuple[ServiceCost, ...]
    categories: Mapping[Category, CategoryAggregate]

    def share_of_total(self, amount: float) -> float:
        """Percentage of the grand total, 0 when nothing was spent."""
        if self.total == 0:
            return 0.0
        return amount / self.total * 100
