import datetime as dt
import json

import pytest


from aws_cost_report.alerting.thresholds import NotableChangeThresholds
from aws_cost_report.report.aggregator import build_cost_report
from aws_cost_report.report.writers import (
    build_issue_body,
    build_issue_title,
    build_summary,
    render_summary_json,
)


@pytest.fixture
def report():
    current = {
        "Amazon Elastic Compute Cloud - Compute": 21.7158,
        "Amazon Simple Storage Service": 2.10,
        "AWS Lambda": 0.001,
        "AWS Config": 0.0,
    }
    previous = {
        "Amazon Elastic Compute Cloud - Compute": 21.2345,
        "Amazon Simple Storage Service": 2.00,
        "AWS Lambda": 0.0001,
        "AWS Config": 0.0,
    }
    return build_cost_report(current, previous, dt.date(2026, 10, 18), dt.date(2026, 10, 19))


def test_summary_header(report) -> None:
    summary = build_summary(report)["summary"]

    assert summary == {
        "period": {"start": "2026-10-18", "end": "2026-10-19"},
        "totalCost": "23.82",
        "previousTotalCost": "23.23",
        "changePercentage": "2.5",
        "currency": "USD",
    }


def test_summary_categories(report) -> None:
    categories = build_summary(report)["categories"]

    assert [c["name"] for c in categories] == ["ec2", "security", "management", "storage", "other", "tax"]
    ec2 = categories[0]
    assert ec2["current"] == "21.72"
    assert ec2["previous"] == "21.23"
    assert ec2["changePercentage"] == "2.3"
    assert ec2["percentage"] == "91.2"
    storage = categories[3]
    assert storage["changePercentage"] == "5.0"
    assert categories[1] == {
        "name": "security",
        "current": "0.00",
        "previous": "0.00",
        "changePercentage": "0.0",
        "percentage": "0.0",
    }


def test_summary_details(report) -> None:
    details = build_summary(report)["details"]

    assert len(details) == 4
    assert details[0] == {
        "service": "Amazon Elastic Compute Cloud - Compute",
        "current": "21.7158",
        "previous": "21.2345",
        "changePercentage": "2.3",
        "unit": "USD",
    }
    assert details[-1]["service"] == "AWS Config"
    assert details[-1]["changePercentage"] == "0.0"


def test_summary_zero_total_has_zero_shares() -> None:
    empty = build_cost_report({}, {}, dt.date(2026, 10, 18), dt.date(2026, 10, 19))
    summary = build_summary(empty)

    assert summary["summary"]["totalCost"] == "0.00"
    assert summary["summary"]["changePercentage"] == "0.0"
    assert all(c["percentage"] == "0.0" for c in summary["categories"])
    assert summary["details"] == []


def test_render_summary_json_is_parseable(report) -> None:
    assert json.loads(render_summary_json(report)) == build_summary(report)


def test_issue_title(report) -> None:
    assert build_issue_title(report) == "2026-10-19 AWS Cost Analysis Report"


def test_issue_body_overview(report) -> None:
    body = build_issue_body(report)

    assert body.startswith("# 2026-10-19 AWS Cost Analysis Report\n")
    assert "- Period: 2026-10-18 ~ 2026-10-19" in body
    assert "- Total cost: 23.82 USD (vs previous day: +2.5%)" in body


def test_issue_body_categories_sorted_by_current(report) -> None:
    body = build_issue_body(report)

    assert "### EC2: 21.72 USD (91.2%)" in body
    assert "### STORAGE: 2.10 USD (8.8%)" in body
    assert body.index("### EC2:") < body.index("### STORAGE:") < body.index("### OTHER:")
    assert "- Change vs previous day: +5.0%" in body
    assert "- Previous day amount: 2.00 USD" in body


def test_issue_body_service_details_skip_all_zero(report) -> None:
    body = build_issue_body(report)
    details = body.split("## Service Details (vs previous day)")[1].split("## Analysis")[0]

    assert "- Amazon Simple Storage Service:" in details
    assert "  - Current: 2.1000 USD" in details
    assert "  - Previous day: 2.0000 USD" in details
    assert "- AWS Lambda:" in details
    assert "AWS Config" not in details


def test_issue_body_notable_changes(report) -> None:
    body = build_issue_body(report)
    notable = body.split("### Notable Changes")[1].split("###")[0]

    # Lambda moved +900% but on a sub-cent amount
    assert "AWS Lambda" not in notable
    assert "No service changed by more than 10%" in notable


def test_issue_body_notable_changes_listed() -> None:
    report = build_cost_report(
        {"Amazon RDS": 5.75, "AWS Lambda": 0.001},
        {"Amazon RDS": 5.00, "AWS Lambda": 0.0002},
        dt.date(2026, 10, 18),
        dt.date(2026, 10, 19),
    )
    body = build_issue_body(report)
    notable = body.split("### Notable Changes")[1].split("###")[0]

    assert "- Amazon RDS: +15.0% change" in notable
    assert "AWS Lambda" not in notable


def test_issue_body_respects_custom_thresholds(report) -> None:
    body = build_issue_body(report, NotableChangeThresholds(change_pct=2.0, min_amount_usd=1.0))
    notable = body.split("### Notable Changes")[1].split("###")[0]

    assert "- Amazon Elastic Compute Cloud - Compute: +2.3% change" in notable
    assert "- Amazon Simple Storage Service: +5.0% change" in notable


def test_issue_body_boilerplate(report) -> None:
    body = build_issue_body(report)

    assert "### Cost Optimization Suggestions" in body
    assert "## Notes" in body


def test_issue_body_service_details_include_credits() -> None:
    report = build_cost_report(
        {"Amazon EC2": 10.0, "Savings Plans for AWS Compute usage": -5.0},
        {"Amazon EC2": 10.0},
        dt.date(2026, 10, 18),
        dt.date(2026, 10, 19),
    )
    body = build_issue_body(report)
    details = body.split("## Service Details (vs previous day)")[1].split("## Analysis")[0]

    assert "- Savings Plans for AWS Compute usage:" in details
    assert "  - Current: -5.0000 USD" in details
