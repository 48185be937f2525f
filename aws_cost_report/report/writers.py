"""
Report writers for the JSON summary and the Markdown issue.
"""

from typing import Any, Dict, List
import json
import logging

from .models import CostReport
from ..alerting.thresholds import (
    NotableChangeThresholds,
    find_notable_changes,
    format_change_percentage,
)

logger = logging.getLogger(__name__)

CURRENCY = "USD"


def build_summary(report: CostReport) -> Dict[str, Any]:
    """Machine-readable summary of the report."""
    return {
        "summary": {
            "period": {
                "start": report.period_start.isoformat(),
                "end": report.period_end.isoformat(),
            },
            "totalCost": f"{report.total:.2f}",
            "previousTotalCost": f"{report.previous_total:.2f}",
            "changePercentage": f"{report.total_change_percentage:.1f}",
            "currency": CURRENCY,
        },
        "categories": [
            {
                "name": category.value,
                "current": f"{data.current:.2f}",
                "previous": f"{data.previous:.2f}",
                "changePercentage": f"{data.change_percentage:.1f}",
                "percentage": f"{report.share_of_total(data.current):.1f}",
            }
            for category, data in report.categories.items()
        ],
        "details": [
            {
                "service": cost.service_name,
                "current": f"{cost.amount:.4f}",
                "previous": f"{cost.previous_amount:.4f}",
                "changePercentage": f"{cost.change_percentage:.1f}",
                "unit": cost.unit,
            }
            for cost in report.services
        ],
    }


def render_summary_json(report: CostReport) -> str:
    return json.dumps(build_summary(report), indent=2, ensure_ascii=False)


def build_issue_title(report: CostReport) -> str:
    return f"{report.period_end.isoformat()} AWS Cost Analysis Report"


def build_issue_body(
    report: CostReport,
    thresholds: NotableChangeThresholds = NotableChangeThresholds(),
) -> str:
    """Markdown body for the daily GitHub issue."""
    lines: List[str] = []

    # Header
    lines.append(f"# {build_issue_title(report)}")
    lines.append("")

    # Overview
    lines.append("## Overview")
    lines.append(f"- Period: {report.period_start.isoformat()} ~ {report.period_end.isoformat()}")
    lines.append(
        f"- Total cost: {report.total:.2f} {CURRENCY} "
        f"(vs previous day: {format_change_percentage(report.total_change_percentage)})"
    )
    lines.append("")

    # Categories, largest first
    lines.append("## Cost by Category")
    lines.append("")
    sorted_categories = sorted(report.categories.items(), key=lambda item: item[1].current, reverse=True)
    blocks = []
    for category, data in sorted_categories:
        blocks.append("\n".join([
            f"### {category.value.upper()}: {data.current:.2f} {CURRENCY} "
            f"({report.share_of_total(data.current):.1f}%)",
            f"- Change vs previous day: {format_change_percentage(data.change_percentage)}",
            f"- Previous day amount: {data.previous:.2f} {CURRENCY}",
        ]))
    lines.append("\n\n".join(blocks))
    lines.append("")

    # Per-service details
    lines.append("## Service Details (vs previous day)")
    for cost in report.services:
        if cost.amount == 0 and cost.previous_amount == 0:
            continue
        lines.append(f"- {cost.service_name}:")
        lines.append(f"  - Current: {cost.amount:.4f} {cost.unit}")
        lines.append(f"  - Previous day: {cost.previous_amount:.4f} {cost.unit}")
        lines.append(f"  - Change: {format_change_percentage(cost.change_percentage)}")
    lines.append("")

    # Analysis
    lines.append("## Analysis and Recommendations")
    lines.append("")
    lines.append("### Notable Changes")
    notable = find_notable_changes(report.services, thresholds)
    if notable:
        for cost in notable:
            lines.append(f"- {cost.service_name}: {format_change_percentage(cost.change_percentage)} change")
    else:
        lines.append(f"- No service changed by more than {thresholds.change_pct:g}%")
    lines.append("")

    lines.append("### Cost Optimization Suggestions")
    lines.append("1. **Services with large increases**")
    lines.append("   - Review the services with the largest changes above")
    lines.append("   - Check for unexpected usage")
    lines.append("")
    lines.append("2. **Regular review**")
    lines.append("   - Identify under-utilized resources")
    lines.append("   - Remove resources that are no longer needed")
    lines.append("")

    # Footer
    lines.append("## Notes")
    lines.append("- Amounts above are estimates; final charges appear on the monthly invoice")
    lines.append("- Amounts are reported in USD without currency conversion")
    lines.append("- Day-over-day changes show daily fluctuation and may differ from the monthly trend")

    body = "\n".join(lines)
    logger.debug(f"Issue body rendered ({len(body)} chars)")
    return body
