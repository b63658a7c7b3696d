"""Tests for the narrative insights service."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from claimflow.errors import ExternalServiceError
from claimflow.services import claim_service, insights
from claimflow.utils.dates import ALL_TIME, DateRange


def _claim(user_name, amount, status):
    return {"user_name": user_name, "amount": amount, "status": status}


def _response(status_code=200, payload=None, text=""):
    response = MagicMock()
    response.ok = 200 <= status_code < 300
    response.status_code = status_code
    response.text = text
    response.json.return_value = payload if payload is not None else {}
    return response


@pytest.fixture
def configured(app):
    app.config["GROQ_API_KEY"] = "test-key"
    return app


class TestFormatAmount:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (185000, "₹1,85,000"),
            (999, "₹999"),
            (1234.5, "₹1,234.5"),
            (12345678.25, "₹1,23,45,678.25"),
            (0, "₹0"),
        ],
    )
    def test_indian_grouping(self, value, expected):
        assert insights.format_amount(value) == expected

    def test_custom_symbol(self):
        assert insights.format_amount(1500, "$") == "$1,500"


class TestBuildStats:
    def test_counts_and_rate_over_all_claims(self):
        claims = [
            _claim("Rahul Sharma", 1000.0, "DISBURSED"),
            _claim("Rahul Sharma", 3000.0, "REJECTED"),
            _claim("Anita Desai", 2000.0, "SUBMITTED"),
            _claim("Anita Desai", 2000.0, "APPROVED_L2"),
        ]
        stats = insights.build_stats(claims)

        assert stats == {
            "total_claims": 4,
            "total_amount": 8000.0,
            "approved_claims": 1,
            "rejected_claims": 1,
            "pending_claims": 2,
            "avg_claim_amount": 2000.0,
            "approval_rate": 25.0,
        }

    def test_empty(self):
        stats = insights.build_stats([])
        assert stats["avg_claim_amount"] == 0
        assert stats["approval_rate"] == 0

    def test_top_claimants_by_amount(self):
        claims = [
            _claim("A", 100.0, "SUBMITTED"),
            _claim("B", 500.0, "SUBMITTED"),
            _claim("C", 300.0, "SUBMITTED"),
            _claim("D", 50.0, "SUBMITTED"),
            _claim("A", 450.0, "SUBMITTED"),
        ]
        top = insights.top_claimants(claims)
        assert [(row["name"], row["count"], row["amount"]) for row in top] == [
            ("A", 2, 550.0),
            ("B", 1, 500.0),
            ("C", 1, 300.0),
        ]


class TestBuildPrompt:
    def test_prompt_mentions_numbers_and_window(self):
        stats = insights.build_stats([_claim("Rahul Sharma", 185000.0, "DISBURSED")])
        top = insights.top_claimants([_claim("Rahul Sharma", 185000.0, "DISBURSED")])

        all_time = insights.build_prompt(stats, top, ALL_TIME, "₹")
        ranged = insights.build_prompt(stats, top, DateRange.parse("2026-01-01", "2026-01-31"), "₹")

        assert "- Total Claims: 1" in all_time
        assert "- Total Amount: ₹1,85,000" in all_time
        assert "- Approved: 1 (100.0%)" in all_time
        assert "1. Rahul Sharma: ₹1,85,000 (1 claims)" in all_time
        assert "- All Time Data" in all_time
        assert "- Date Range: 2026-01-01 to 2026-01-31" in ranged


class TestRequestCompletion:
    def test_missing_key_is_an_error(self, app):
        with pytest.raises(ExternalServiceError, match="GROQ_API_KEY not configured"):
            insights.request_completion("hello")

    def test_success_returns_first_choice(self, configured):
        payload = {"choices": [{"message": {"content": "Spending is up."}}]}
        with patch("claimflow.services.insights.requests.post", return_value=_response(payload=payload)) as post:
            assert insights.request_completion("hello") == "Spending is up."

        _, kwargs = post.call_args
        assert kwargs["headers"] == {"Authorization": "Bearer test-key"}
        assert kwargs["json"]["model"] == "llama-3.3-70b-versatile"
        assert kwargs["json"]["temperature"] == 0.7
        assert kwargs["json"]["max_tokens"] == 800
        assert kwargs["json"]["messages"][0]["role"] == "system"
        assert kwargs["json"]["messages"][1] == {"role": "user", "content": "hello"}

    def test_error_status_carries_body(self, configured):
        response = _response(status_code=429, text="rate limited")
        with patch("claimflow.services.insights.requests.post", return_value=response):
            with pytest.raises(ExternalServiceError) as excinfo:
                insights.request_completion("hello")
        assert "429" in excinfo.value.message
        assert "rate limited" in excinfo.value.message

    def test_transport_failure(self, configured):
        with patch(
            "claimflow.services.insights.requests.post",
            side_effect=requests.ConnectionError("connection refused"),
        ):
            with pytest.raises(ExternalServiceError, match="connection refused"):
                insights.request_completion("hello")

    def test_empty_choices(self, configured):
        with patch("claimflow.services.insights.requests.post", return_value=_response(payload={"choices": []})):
            assert insights.request_completion("hello") == insights.NO_INSIGHTS


class TestGenerateInsights:
    def test_stats_come_from_claims_in_range(self, configured, users, submit):
        claim_service.reject_claim(submit(amount=1000, claim_date="2026-01-10"), "no", users["l1"])
        submit(amount=3000, claim_date="2026-02-10")
        payload = {"choices": [{"message": {"content": "ok"}}]}

        with patch("claimflow.services.insights.requests.post", return_value=_response(payload=payload)) as post:
            result = insights.generate_insights(DateRange.parse("2026-01-01", "2026-01-31"))

        assert result["insights"] == "ok"
        assert result["stats"]["total_claims"] == 1
        assert result["stats"]["rejected_claims"] == 1
        prompt = post.call_args.kwargs["json"]["messages"][1]["content"]
        assert "- Date Range: 2026-01-01 to 2026-01-31" in prompt
