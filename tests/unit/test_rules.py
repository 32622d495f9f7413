"""Unit tests for rule loading and bracket matching"""

from decimal import Decimal

import pytest

from commission_gateway.config import RuleDefinition
from commission_gateway.domain.exceptions import ConfigurationError
from commission_gateway.domain.models import DEFAULT_REASON_TEMPLATE, ThresholdRule
from commission_gateway.domain.rules import DEFAULT_RULES, describe_rules, load_rules


def rule(min_amount=None, max_amount=None, rate="0.02", template=None) -> RuleDefinition:
    return RuleDefinition(
        min_amount=None if min_amount is None else Decimal(min_amount),
        max_amount=None if max_amount is None else Decimal(max_amount),
        rate=Decimal(rate),
        reason_template=template,
    )


@pytest.mark.parametrize("definitions", [None, []])
def test_empty_configuration_installs_defaults(definitions):
    rules = load_rules(definitions)

    assert rules == DEFAULT_RULES
    assert [r.rate for r in rules] == [Decimal("0.02"), Decimal("0.05")]
    assert rules[0].max_amount == rules[1].min_amount == Decimal("10000")


def test_configuration_order_is_preserved():
    rules = load_rules([
        rule(max_amount="500", rate="0.10"),
        rule(rate="0.01"),
        rule(min_amount="100", max_amount="200", rate="0.03"),
    ])

    assert [r.rate for r in rules] == [Decimal("0.10"), Decimal("0.01"), Decimal("0.03")]
    assert isinstance(rules, tuple)


def test_missing_template_falls_back_to_default():
    rules = load_rules([rule(rate="0.01")])

    assert rules[0].reason_template == DEFAULT_REASON_TEMPLATE


def test_camel_case_keys_are_accepted():
    definition = RuleDefinition.model_validate(
        {"minAmount": "0", "maxAmount": "50", "rate": "0.5", "reasonTemplate": "%s -> %s"}
    )

    assert definition.min_amount == Decimal("0")
    assert definition.max_amount == Decimal("50")
    assert definition.reason_template == "%s -> %s"


@pytest.mark.parametrize("rate", ["-0.01", "1.01", "5"])
def test_rate_outside_unit_interval_is_rejected(rate):
    with pytest.raises(ConfigurationError, match="rate"):
        load_rules([rule(rate=rate)])


@pytest.mark.parametrize("rate", ["0", "1"])
def test_rate_bounds_are_inclusive(rate):
    assert load_rules([rule(rate=rate)])[0].rate == Decimal(rate)


def test_min_greater_than_max_is_rejected():
    with pytest.raises(ConfigurationError, match="minAmount"):
        load_rules([rule(min_amount="200", max_amount="100"), rule()])


def test_template_with_bare_percent_is_rejected():
    with pytest.raises(ConfigurationError, match="reasonTemplate"):
        load_rules([rule(template="El monto %s aplica la tasa del 2%")])


def test_template_with_escaped_percent_is_accepted():
    rules = load_rules([rule(template="Monto %s, tasa %s (2%%)")])

    assert rules[0].reason_template == "Monto %s, tasa %s (2%%)"


def test_gap_between_brackets_is_rejected():
    with pytest.raises(ConfigurationError, match="uncovered"):
        load_rules([
            rule(max_amount="1000", rate="0.02"),
            rule(min_amount="2000", rate="0.05"),
        ])


def test_missing_upper_bracket_is_rejected():
    with pytest.raises(ConfigurationError, match="uncovered"):
        load_rules([rule(max_amount="1000")])


def test_missing_lower_bracket_is_rejected():
    with pytest.raises(ConfigurationError, match="uncovered"):
        load_rules([rule(min_amount="1")])


def test_coverage_from_smallest_legal_amount_is_enough():
    rules = load_rules([rule(min_amount="0.01", max_amount="10"), rule(min_amount="10")])

    assert len(rules) == 2


def test_coverage_up_to_ingress_maximum_is_enough():
    rules = load_rules([rule(min_amount="0", max_amount="1E17")])

    assert len(rules) == 1


def test_coverage_just_short_of_ingress_maximum_is_rejected():
    with pytest.raises(ConfigurationError, match="uncovered"):
        load_rules([rule(max_amount="99999999999999999.99")])


def test_sub_cent_bounds_leave_no_gap():
    rules = load_rules([rule(max_amount="100.005", rate="0.02"), rule(min_amount="100.005", rate="0.05")])

    assert rules[0].matches(Decimal("100.0049"))
    assert rules[1].matches(Decimal("100.005"))


def test_sub_cent_gap_is_rejected():
    # 100.005 up to 100.01 belongs to no bracket
    with pytest.raises(ConfigurationError, match="uncovered"):
        load_rules([rule(max_amount="100.005"), rule(min_amount="100.01")])


def test_overlapping_brackets_are_allowed():
    rules = load_rules([
        rule(min_amount="100", max_amount="1000", rate="0.03"),
        rule(max_amount="5000", rate="0.02"),
        rule(min_amount="4000", rate="0.05"),
    ])

    assert len(rules) == 3


@pytest.mark.parametrize(
    "amount, expected",
    [
        ("9999.99", True),
        ("10000", False),  # upper bound exclusive
        ("0.01", True),
    ],
)
def test_low_default_bracket_matching(amount, expected):
    assert DEFAULT_RULES[0].matches(Decimal(amount)) is expected


@pytest.mark.parametrize(
    "amount, expected",
    [
        ("9999.99", False),
        ("10000", True),  # lower bound inclusive
        ("99999999", True),
    ],
)
def test_high_default_bracket_matching(amount, expected):
    assert DEFAULT_RULES[1].matches(Decimal(amount)) is expected


def test_unbounded_rule_matches_everything():
    unbounded = ThresholdRule(min_amount=None, max_amount=None, rate=Decimal("0.01"))

    assert unbounded.matches(Decimal("0.01"))
    assert unbounded.matches(Decimal("1E+15"))


def test_describe_rules_signature():
    assert describe_rules(DEFAULT_RULES) == "[-inf, 10000) @ 0.02; [10000, +inf) @ 0.05"
