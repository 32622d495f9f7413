"""Commission rule loading - turns configured brackets into an immutable rule list"""

from decimal import Decimal
from typing import Iterable, Optional, Sequence, Tuple

from commission_gateway.config import RuleDefinition
from commission_gateway.domain.exceptions import ConfigurationError
from commission_gateway.domain.models import DEFAULT_REASON_TEMPLATE, ThresholdRule

THRESHOLD = Decimal("10000")
LOW_RATE = Decimal("0.02")
HIGH_RATE = Decimal("0.05")

# Ingress accepts amounts in [MIN_LEGAL_AMOUNT, MAX_LEGAL_AMOUNT) at any scale
MIN_LEGAL_AMOUNT = Decimal("0.01")
MAX_LEGAL_AMOUNT = Decimal("1E17")

DEFAULT_RULES: Tuple[ThresholdRule, ...] = (
    ThresholdRule(
        min_amount=None,
        max_amount=THRESHOLD,
        rate=LOW_RATE,
        reason_template="El monto %s no supera el umbral de 10000, por eso se aplica la tasa baja del %s",
    ),
    ThresholdRule(
        min_amount=THRESHOLD,
        max_amount=None,
        rate=HIGH_RATE,
        reason_template="El monto %s supera el umbral de 10000, por eso se aplica la tasa alta del %s",
    ),
)


def load_rules(definitions: Optional[Iterable[RuleDefinition]]) -> Tuple[ThresholdRule, ...]:
    """
    Build the ordered rule list from configuration.

    Configuration order is kept as-is since the first matching rule wins.
    An empty or absent list installs DEFAULT_RULES.

    Raises:
        ConfigurationError: On a rate outside [0, 1], min_amount > max_amount,
            a template that cannot take (amount, rate), or a gap in coverage
    """
    definitions = list(definitions or [])
    if not definitions:
        return DEFAULT_RULES

    rules = tuple(_build_rule(index, definition) for index, definition in enumerate(definitions))
    _check_coverage(rules)
    return rules


def describe_rules(rules: Sequence[ThresholdRule]) -> str:
    """One-line signature of the rule list for logs and error reports"""
    return "; ".join(rule.describe() for rule in rules)


def _build_rule(index: int, definition: RuleDefinition) -> ThresholdRule:
    rate = definition.rate
    if rate < 0 or rate > 1:
        raise ConfigurationError(f"transaction.rules[{index}].rate must be within [0, 1], got {rate}")

    low, high = definition.min_amount, definition.max_amount
    if low is not None and high is not None and low > high:
        raise ConfigurationError(
            f"transaction.rules[{index}].minAmount ({low}) is greater than maxAmount ({high})"
        )

    template = definition.reason_template or DEFAULT_REASON_TEMPLATE
    try:
        template % (Decimal("1"), rate)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"transaction.rules[{index}].reasonTemplate must hold two %s slots (amount, rate); "
            f"write a literal percent sign as %%: {e}"
        ) from e

    return ThresholdRule(min_amount=low, max_amount=high, rate=rate, reason_template=template)


def _check_coverage(rules: Sequence[ThresholdRule]) -> None:
    """
    Verify every legal amount in [0.01, 1E17) is matched by some rule.

    Classic interval sweep: sort by lower bound and push `reach` (the smallest
    amount not yet known to be covered) forward until it passes the ingress
    maximum or an unbounded rule is hit.
    """
    ordered = sorted(
        rules,
        key=lambda r: (r.min_amount is not None, r.min_amount if r.min_amount is not None else 0),
    )
    reach = MIN_LEGAL_AMOUNT
    for rule in ordered:
        if rule.max_amount is not None and rule.max_amount <= reach:
            continue
        if rule.min_amount is not None and rule.min_amount > reach:
            break
        if rule.max_amount is None:
            return
        reach = rule.max_amount
        if reach >= MAX_LEGAL_AMOUNT:
            return

    raise ConfigurationError(
        f"transaction.rules leave amounts from {reach} uncovered: {describe_rules(rules)}"
    )
