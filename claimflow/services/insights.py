"""Narrative insights over claim statistics via an OpenAI-compatible chat API."""
from __future__ import annotations

import logging
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List

import requests
from flask import current_app

from claimflow.errors import ExternalServiceError
from claimflow.services import analytics
from claimflow.utils.dates import ALL_TIME, DateRange

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a professional financial analyst AI that provides clear, "
    "actionable insights about expense claims."
)
NO_INSIGHTS = "No insights generated."
TOP_CLAIMANTS = 3


def _group_indian(digits: str) -> str:
    """Lakh/crore digit grouping: 1234567 -> 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_amount(value, symbol: str = "₹") -> str:
    quantized = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    integer, _, fraction = f"{quantized:f}".partition(".")
    fraction = fraction.rstrip("0")
    text = _group_indian(integer)
    return f"{symbol}{text}.{fraction}" if fraction else f"{symbol}{text}"


def build_stats(claims: List[Dict[str, Any]]) -> Dict[str, Any]:
    total_claims = len(claims)
    total_amount = sum(claim["amount"] for claim in claims)
    approved = sum(1 for claim in claims if claim["status"] == "DISBURSED")
    rejected = sum(1 for claim in claims if claim["status"] == "REJECTED")
    return {
        "total_claims": total_claims,
        "total_amount": total_amount,
        "approved_claims": approved,
        "rejected_claims": rejected,
        "pending_claims": total_claims - approved - rejected,
        "avg_claim_amount": total_amount / total_claims if total_claims else 0,
        "approval_rate": approved / total_claims * 100 if total_claims else 0,
    }


def top_claimants(claims: List[Dict[str, Any]], limit: int = TOP_CLAIMANTS) -> List[Dict[str, Any]]:
    per_name: Dict[str, Dict[str, Any]] = defaultdict(lambda: {"count": 0, "amount": 0})
    for claim in claims:
        per_name[claim["user_name"]]["count"] += 1
        per_name[claim["user_name"]]["amount"] += claim["amount"]
    ranked = sorted(per_name.items(), key=lambda item: item[1]["amount"], reverse=True)
    return [{"name": name, **data} for name, data in ranked[:limit]]


def build_prompt(stats: Dict[str, Any], top: List[Dict[str, Any]], date_range: DateRange, symbol: str) -> str:
    if date_range.is_open:
        window = "- All Time Data"
    else:
        window = f"- Date Range: {date_range.start or 'beginning'} to {date_range.end or 'present'}"

    claimant_lines = "\n".join(
        f"{rank}. {entry['name']}: {format_amount(entry['amount'], symbol)} ({entry['count']} claims)"
        for rank, entry in enumerate(top, start=1)
    )

    return f"""You are a financial analyst AI assistant analyzing expense claim data for a company. Provide concise, actionable insights.

**Claims Data Summary:**
- Total Claims: {stats['total_claims']}
- Total Amount: {format_amount(stats['total_amount'], symbol)}
- Average Claim: {format_amount(stats['avg_claim_amount'], symbol)}
- Approved: {stats['approved_claims']} ({stats['approval_rate']:.1f}%)
- Rejected: {stats['rejected_claims']}
- Pending: {stats['pending_claims']}
{window}

**Top {TOP_CLAIMANTS} Claimants by Amount:**
{claimant_lines}

**Your Task:**
Analyze this data and provide:
1. **Key Trends** - What patterns do you notice? (2-3 bullets)
2. **Anomalies/Alerts** - Any unusual patterns or concerns? (1-2 bullets)
3. **Recommendations** - What actions should management take? (2-3 bullets)

Format your response in a clear, professional manner using bullet points. Be specific and use the actual numbers from the data. Keep it concise (max 200 words)."""


def request_completion(prompt: str) -> str:
    """Send ``prompt`` to the configured chat-completions endpoint and return the text."""
    config = current_app.config
    api_key = config.get("GROQ_API_KEY")
    if not api_key:
        raise ExternalServiceError("GROQ_API_KEY not configured")

    body = {
        "model": config["GROQ_MODEL"],
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        "temperature": config["INSIGHTS_TEMPERATURE"],
        "max_tokens": config["INSIGHTS_MAX_TOKENS"],
    }

    try:
        response = requests.post(
            config["GROQ_API_URL"],
            json=body,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=config["INSIGHTS_TIMEOUT"],
        )
    except requests.RequestException as exc:
        logger.error(f"Insights request failed: {exc}")
        raise ExternalServiceError(f"Failed to generate insights: {exc}") from exc

    if not response.ok:
        logger.error(f"Insights API returned {response.status_code}: {response.text}")
        raise ExternalServiceError(
            f"Failed to generate insights: API error {response.status_code} - {response.text}"
        )

    try:
        choices = response.json().get("choices") or []
    except (ValueError, AttributeError) as exc:
        raise ExternalServiceError("Failed to generate insights: malformed response body") from exc

    if not choices:
        return NO_INSIGHTS
    return (choices[0].get("message") or {}).get("content") or NO_INSIGHTS


def generate_insights(date_range: DateRange = ALL_TIME) -> Dict[str, Any]:
    claims = analytics.all_claims_detailed(date_range, "all")
    stats = build_stats(claims)
    prompt = build_prompt(stats, top_claimants(claims), date_range, current_app.config["CURRENCY_SYMBOL"])
    return {"insights": request_completion(prompt), "stats": stats}
