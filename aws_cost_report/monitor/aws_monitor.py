"""
AWS cost collection via Cost Explorer.
"""

import datetime as dt
import logging
from typing import Any, Callable, Dict, Optional

import boto3

from ..report.aggregator import build_cost_report
from ..report.models import CostReport

logger = logging.getLogger(__name__)

METRIC = "UnblendedCost"

CostFetcher = Callable[[dt.date, dt.date], Dict[str, float]]


def create_cost_explorer_client(profile: Optional[str] = None, region: Optional[str] = None):
    """Create a Cost Explorer client from the configured profile/region."""
    session = boto3.Session(profile_name=profile, region_name=region)
    return session.client("ce")


def get_costs_by_service(ce: Any, start: dt.date, end: dt.date) -> Dict[str, float]:
    """Return DAILY UnblendedCost per service for [start, end)."""
    request = {
        "TimePeriod": {"Start": start.isoformat(), "End": end.isoformat()},
        "Granularity": "DAILY",
        "Metrics": [METRIC],
        "GroupBy": [{"Type": "DIMENSION", "Key": "SERVICE"}],
    }

    costs: Dict[str, float] = {}
    token = None
    while True:
        if token:
            resp = ce.get_cost_and_usage(NextPageToken=token, **request)
        else:
            resp = ce.get_cost_and_usage(**request)

        for by_time in resp.get("ResultsByTime") or []:
            for group in by_time.get("Groups") or []:
                keys = group.get("Keys") or []
                service = keys[0] if keys else "Unknown"
                metric = (group.get("Metrics") or {}).get(METRIC) or {}
                amount = float(metric.get("Amount") or 0)
                costs[service] = costs.get(service, 0.0) + amount

        token = resp.get("NextPageToken")
        if not token:
            break

    logger.info(f"Retrieved costs for {len(costs)} services ({start} to {end})")
    return costs


def cost_explorer_fetcher(ce: Any) -> CostFetcher:
    """Bind a Cost Explorer client into a fetch function."""
    def fetch(start: dt.date, end: dt.date) -> Dict[str, float]:
        return get_costs_by_service(ce, start, end)
    return fetch


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def collect_aws(fetch_costs: CostFetcher, now: Optional[dt.datetime] = None) -> CostReport:
    """Collect yesterday's costs against the day before and aggregate them."""
    today = (now or _utc_now()).date()
    yesterday = today - dt.timedelta(days=1)
    two_days_ago = today - dt.timedelta(days=2)

    logger.info(f"Fetching current window {yesterday} to {today}")
    current = fetch_costs(yesterday, today)

    logger.info(f"Fetching previous window {two_days_ago} to {yesterday}")
    previous = fetch_costs(two_days_ago, yesterday)

    return build_cost_report(current, previous, period_start=yesterday, period_end=today)
