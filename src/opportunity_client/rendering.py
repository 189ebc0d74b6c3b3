from __future__ import annotations

from decimal import Decimal

from opportunity_client.models import Account, Opportunity
from opportunity_client.utils.datetime_utils import format_date


def render_opportunity_card(opportunity: Opportunity) -> str:
    lines = [
        opportunity.name or "(unnamed opportunity)",
        f"  Amount: {format_amount(opportunity.amount)}",
        f"  Stage: {_format_optional_text(opportunity.stage_name)}",
        f"  Probability: {opportunity.probability}%",
        f"  Account: {_format_optional_text(opportunity.account_name)}",
        f"  Owner: {_format_optional_text(opportunity.owner_name)}",
        f"  Created: {format_date(opportunity.created_date)}",
    ]
    if opportunity.description:
        lines.append(f"  Description: {opportunity.description}")
    return "\n".join(lines)


def render_opportunity_list(opportunities: list[Opportunity] | tuple[Opportunity, ...]) -> str:
    if not opportunities:
        return "No opportunities found."
    return "\n\n".join(render_opportunity_card(item) for item in opportunities)


def render_options(
    stage_names: list[str] | tuple[str, ...],
    accounts: list[Account] | tuple[Account, ...],
) -> str:
    lines = ["Stages:"]
    lines.extend(f"  - {stage}" for stage in stage_names)
    if not stage_names:
        lines.append("  (none)")

    lines.append("Accounts:")
    lines.extend(f"  - {account.name} [{account.id}]" for account in accounts)
    if not accounts:
        lines.append("  (none)")
    return "\n".join(lines)


def format_amount(amount: Decimal) -> str:
    quantized = amount.quantize(Decimal("0.01"))
    if quantized == quantized.to_integral_value():
        return f"${quantized:,.0f}"
    return f"${quantized:,.2f}"


def _format_optional_text(value: str | None) -> str:
    normalized = (value or "").strip()
    return normalized or "Not specified"
