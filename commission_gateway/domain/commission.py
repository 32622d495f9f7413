"""Commission engine - bracket selection and fixed-point commission arithmetic"""

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Sequence

from commission_gateway.domain.exceptions import NoMatchingRuleError
from commission_gateway.domain.models import CommissionResult, ThresholdRule
from commission_gateway.domain.rules import describe_rules

CENTS = Decimal("0.01")


def calculate_commission(amount: Decimal, rate: Decimal) -> Decimal:
    """
    amount * rate rounded to two fractional digits, ties away from zero.

    Example:
        10000.01 * 0.05 = 500.0005 -> 500.00
        123456.78 * 0.05 = 6172.839 -> 6172.84
        100.005 * 0.02 = 2.0001 -> 2.00
    """
    with localcontext() as ctx:
        # Wide enough for the exact product, so only the final quantize rounds
        ctx.prec = max(ctx.prec, len(amount.as_tuple().digits) + len(rate.as_tuple().digits))
        return (amount * rate).quantize(CENTS, rounding=ROUND_HALF_UP)


def render_reason(template: str, amount: Decimal, rate: Decimal) -> str:
    return template % (amount, rate)


def apply_rule(rule: ThresholdRule, amount: Decimal) -> CommissionResult:
    return CommissionResult(
        rate=rule.rate,
        commission=calculate_commission(amount, rule.rate),
        reason=render_reason(rule.reason_template, amount, rule.rate),
    )


def matches(rule: ThresholdRule, amount: Decimal) -> bool:
    """Lower bound inclusive, upper bound exclusive, absent bounds unbounded"""
    return rule.matches(amount)


def evaluate(rules: Sequence[ThresholdRule], amount: Decimal) -> CommissionResult:
    """
    Main entry point: pick the first rule covering the amount and apply it.

    Raises:
        NoMatchingRuleError: If no rule covers the amount (the loader guards against this)
    """
    for rule in rules:
        if matches(rule, amount):
            return apply_rule(rule, amount)

    raise NoMatchingRuleError(amount, describe_rules(rules))
