"""Unit tests for when/unless gating."""

from dataclasses import dataclass

import pytest

from fluentval import FluentValidator
from fluentval.errors import ConfigurationError
from sample_models import Account, AccountValidator


@dataclass
class Order:
    status: str = "draft"
    express: bool = False
    tracking_code: str | None = None


class TestWhen:
    """Rules added inside ``when`` only run when the condition holds."""

    def test_condition_true_runs_rules(self):
        failures = AccountValidator().validate(Account(company_name="", is_business_account=True))

        assert len(failures) == 1
        assert failures[0].property_name == "company_name"
        assert failures[0].message == "company_name cannot be empty."

    def test_condition_false_skips_rules(self):
        assert AccountValidator().validate(Account(company_name="", is_business_account=False)) == []

    def test_condition_evaluated_per_call(self):
        validator = AccountValidator()
        account = Account(company_name=None, is_business_account=False)

        assert validator.is_valid(account)
        account.is_business_account = True
        assert not validator.is_valid(account)

    def test_rules_outside_when_are_unconditional(self):
        validator = FluentValidator()
        validator.rule_for("tracking_code").not_null().when(
            lambda o: o.express, lambda rule: rule.min_length(5)
        )

        assert [f.message for f in validator.validate(Order())] == ["tracking_code cannot be null."]
        assert [f.message for f in validator.validate(Order(express=True, tracking_code="ab"))] == [
            "tracking_code must be at least 5 characters."
        ]

    def test_gated_rules_are_marked_conditional(self):
        validator = FluentValidator()
        rule_set = validator.rule_for("tracking_code").not_null().when(
            lambda o: o.express, lambda rule: rule.min_length(5).max_length(10)
        )

        assert [rule.conditional for rule in rule_set.rules] == [False, True, True]

    def test_condition_must_be_callable(self):
        with pytest.raises(ConfigurationError):
            FluentValidator().rule_for("status").when(True, lambda rule: rule.not_null())


class TestUnless:
    """``unless`` is the complement of ``when``."""

    @pytest.mark.parametrize("express", [True, False])
    def test_exactly_one_branch_runs(self, express):
        validator = FluentValidator()
        validator.rule_for("tracking_code").when(
            lambda o: o.express, lambda rule: rule.not_null("express needs tracking")
        ).unless(
            lambda o: o.express, lambda rule: rule.null("standard has no tracking")
        )

        order = Order(express=express, tracking_code=None if express else "T-1")
        messages = [f.message for f in validator.validate(order)]

        assert messages == (["express needs tracking"] if express else ["standard has no tracking"])

    def test_unless_condition_true_skips_rules(self):
        validator = FluentValidator()
        validator.rule_for("tracking_code").unless(
            lambda o: o.status == "draft", lambda rule: rule.not_null()
        )

        assert validator.is_valid(Order(status="draft"))
        assert not validator.is_valid(Order(status="shipped"))


class TestNestedConditions:
    """Nested gates compose: a rule runs only when every enclosing condition holds."""

    @pytest.fixture
    def validator(self):
        validator = FluentValidator()
        validator.rule_for("tracking_code").when(
            lambda o: o.status == "shipped",
            lambda outer: outer.not_null().when(
                lambda o: o.express,
                lambda inner: inner.matches(r"EX-\d+", "express codes start with EX-"),
            ),
        )
        return validator

    def test_outer_closed(self, validator):
        assert validator.validate(Order(status="draft", express=True, tracking_code="abc")) == []

    def test_outer_open_inner_closed(self, validator):
        assert validator.validate(Order(status="shipped", express=False, tracking_code="abc")) == []

    def test_both_open(self, validator):
        failures = validator.validate(Order(status="shipped", express=True, tracking_code="abc"))
        assert [f.message for f in failures] == ["express codes start with EX-"]

    def test_outer_rule_still_gated_once(self, validator):
        failures = validator.validate(Order(status="shipped", express=False))
        assert [f.message for f in failures] == ["tracking_code cannot be null."]


class TestWhenUnlessEquivalence:
    """``when(c, cfg)`` activates exactly where ``unless(not c, cfg)`` does."""

    ORDERS = [
        Order(),
        Order(status="shipped"),
        Order(express=True),
        Order(status="shipped", express=True, tracking_code="EX-1"),
    ]

    @pytest.mark.parametrize("condition", [
        lambda o: o.express,
        lambda o: o.status == "shipped",
        lambda o: o.express and o.status == "shipped",
    ])
    def test_same_activation(self, condition):
        gated_when = FluentValidator().rule_for("tracking_code").when(
            condition, lambda rule: rule.not_null()
        )
        gated_unless = FluentValidator().rule_for("tracking_code").unless(
            lambda o: not condition(o), lambda rule: rule.not_null()
        )

        for order in self.ORDERS:
            assert gated_when.rules[0].is_active(order) == gated_unless.rules[0].is_active(order)
            assert gated_when.validate(order) == gated_unless.validate(order)
