"""Unit tests for the atomic predicate library."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from fluentval import predicates
from fluentval.errors import ConfigurationError
from fluentval.predicates import AtomicCheck


class TestAtomicCheck:
    def test_call_returns_bool(self):
        check = AtomicCheck("truthy", lambda v: v)
        assert check("x") is True
        assert check("") is False

    def test_default_message(self):
        assert AtomicCheck("x", bool).message == "{property} is invalid."

    def test_wrong_type_fails_instead_of_raising(self):
        assert predicates.email(42) is False
        assert predicates.positive("5") is False
        assert predicates.even(2.0) is False
        assert predicates.past_date("2020-01-01") is False


class TestShapeChecks:
    @pytest.mark.parametrize("value,expected", [
        ("user@example.com", True),
        ("first.last@sub.example.org", True),
        ("no-at-sign.com", False),
        ("user@localhost", False),
        ("user@@example.com", False),
    ])
    def test_email(self, value, expected):
        assert predicates.email(value) is expected

    @pytest.mark.parametrize("value,expected", [
        ("+44 20 7946 0958", True),
        ("555-1234 ext. 12", True),
        ("(555) 123-4567", True),
        ("phone", False),
        ("", False),
    ])
    def test_phone(self, value, expected):
        assert predicates.phone(value) is expected

    @pytest.mark.parametrize("value,expected", [
        ("4111111111111111", True),
        ("4111-1111-1111-1111", True),
        ("79927398713", True),
        ("79927398710", False),
        ("4111 1111 1111 111a", False),
        ("", False),
    ])
    def test_credit_card(self, value, expected):
        assert predicates.credit_card(value) is expected

    def test_url(self):
        assert predicates.url("https://example.com/path?q=1")
        assert not predicates.url("example.com")

    def test_guid(self):
        assert predicates.guid("12345678-1234-5678-1234-567812345678")
        assert not predicates.guid("not-a-guid")

    @pytest.mark.parametrize("value,expected", [
        ("192.168.0.1", True),
        ("255.255.255.255", True),
        ("256.1.1.1", False),
        ("1.2.3", False),
    ])
    def test_ipv4(self, value, expected):
        assert predicates.ipv4_address(value) is expected

    def test_ipv6(self):
        assert predicates.ipv6_address("::1")
        assert predicates.ipv6_address("2001:db8::8a2e:370:7334")
        assert not predicates.ipv6_address("2001:db8::g")

    def test_hex_color(self):
        assert predicates.hex_color("#fff")
        assert predicates.hex_color("#A0B1C2")
        assert not predicates.hex_color("#abcd")

    def test_base64(self):
        assert predicates.base64("aGVsbG8=")
        assert not predicates.base64("aGVsbG8")
        assert not predicates.base64("")

    def test_json_string(self):
        assert predicates.json_string('{"a": [1, 2]}')
        assert not predicates.json_string("{a: 1}")

    def test_binary(self):
        assert predicates.binary("010110")
        assert not predicates.binary("0102")


class TestTextChecks:
    @pytest.mark.parametrize("check,value,expected", [
        (predicates.alpha_only, "abcXYZ", True),
        (predicates.alpha_only, "abc1", False),
        (predicates.alphanumeric, "abc123", True),
        (predicates.alphanumeric, "abc 123", False),
        (predicates.no_special_characters, "Hello World 1", True),
        (predicates.no_special_characters, "hi!", False),
        (predicates.upper_case, "ABC", True),
        (predicates.upper_case, "AbC", False),
        (predicates.lower_case, "abc", True),
        (predicates.upper_case_first_letter, "Hello", True),
        (predicates.upper_case_first_letter, "hello", False),
        (predicates.lower_case_first_letter, "hello", True),
        (predicates.contains_number, "abc1", True),
        (predicates.contains_number, "abc", False),
        (predicates.contains_special_character, "p@ss", True),
        (predicates.contains_special_character, "pass", False),
        (predicates.no_whitespace, "a_b", True),
        (predicates.no_whitespace, "a b", False),
        (predicates.not_whitespace, "  ", False),
        (predicates.palindrome, "racecar", True),
        (predicates.palindrome, "race", False),
        (predicates.has_vowel, "xyz", False),
        (predicates.has_consonant, "aei", False),
        (predicates.starts_with_letter, "a1", True),
        (predicates.starts_with_letter, "1a", False),
        (predicates.ends_with_number, "a1", True),
        (predicates.ends_with_number, "", False),
    ])
    def test_text_predicates(self, check, value, expected):
        assert check(value) is expected

    @pytest.mark.parametrize("value,expected", [
        ("42", True), ("-3.5", True), (" 1e3 ", True), ("abc", False), ("NaN", False), ("", False),
    ])
    def test_numeric(self, value, expected):
        assert predicates.numeric(value) is expected

    @pytest.mark.parametrize("value,expected", [("true", True), ("False", True), ("yes", False)])
    def test_boolean(self, value, expected):
        assert predicates.boolean(value) is expected


class TestNumericChecks:
    def test_sign_checks(self):
        assert predicates.positive(Decimal("0.1"))
        assert not predicates.positive(0)
        assert predicates.negative(-1.5)
        assert predicates.not_zero(3)
        assert not predicates.not_zero(0)

    @pytest.mark.parametrize("check", [
        predicates.positive,
        predicates.negative,
        predicates.not_zero,
        predicates.percentage,
        predicates.latitude,
        predicates.longitude,
    ])
    @pytest.mark.parametrize("value", [Decimal("NaN"), Decimal("sNaN"), float("nan"), float("inf")])
    def test_non_finite_values_fail(self, check, value):
        assert check(value) is False

    def test_booleans_are_not_numbers(self):
        assert not predicates.positive(True)
        assert not predicates.odd(True)

    def test_parity(self):
        assert predicates.even(4)
        assert predicates.odd(-3)

    @pytest.mark.parametrize("value,expected", [(2, True), (17, True), (1, False), (21, False), (-7, False)])
    def test_prime(self, value, expected):
        assert predicates.prime(value) is expected

    @pytest.mark.parametrize("value,expected", [(0, True), (1, True), (21, True), (22, False), (-1, False)])
    def test_fibonacci(self, value, expected):
        assert predicates.fibonacci(value) is expected

    def test_ranges(self):
        assert predicates.percentage(100)
        assert not predicates.percentage(100.1)
        assert predicates.latitude(-90)
        assert not predicates.latitude(91)
        assert predicates.longitude(180)
        assert not predicates.longitude(-181)


class TestDateChecks:
    def test_relative_to_today(self):
        today = date.today()
        assert predicates.future_date(today + timedelta(days=1))
        assert not predicates.future_date(today)
        assert predicates.past_date(datetime.now() - timedelta(days=2))

    def test_weekend_and_weekday(self):
        saturday = date(2024, 6, 1)
        monday = date(2024, 6, 3)
        assert predicates.weekend(saturday)
        assert not predicates.weekday(saturday)
        assert predicates.weekday(monday)

    def test_adult_and_child(self):
        today = date.today()
        assert predicates.adult(date(today.year - 30, 1, 1))
        assert not predicates.adult(date(today.year - 10, 1, 1))
        assert predicates.child(date(today.year - 10, 1, 1))


class TestFactories:
    def test_text_factories(self):
        assert predicates.starts_with("ab")("abc")
        assert not predicates.ends_with("z")("abc")
        assert predicates.contains("b")("abc")
        assert predicates.exact_length(3)("abc")
        assert not predicates.exact_length(3)("ab")

    def test_factory_messages_are_templates(self):
        check = predicates.starts_with("{x}")
        assert check.message.format(property="code") == "code must start with '{x}'."

    def test_exact_digits(self):
        assert predicates.exact_digits(4)("1234")
        assert predicates.exact_digits(4)(-1234)
        assert not predicates.exact_digits(4)("12a4")
        assert not predicates.exact_digits(4)(123)

    def test_multiple_of(self):
        assert predicates.multiple_of(5)(25)
        assert not predicates.multiple_of(5)(26)
        with pytest.raises(ConfigurationError):
            predicates.multiple_of(0)

    def test_multiple_of_mixed_decimal_and_float(self):
        assert predicates.multiple_of(0.5)(1.5)
        assert predicates.multiple_of(0.5)(Decimal("1.0")) is False

    def test_year_range(self):
        check = predicates.year_range(2000, 2010)
        assert check(date(2005, 5, 5))
        assert not check(date(2011, 1, 1))

    def test_one_of(self):
        check = predicates.one_of("red", "green")
        assert check("red")
        assert not check("blue")
        assert check.message.format(property="color") == "color must be one of 'red', 'green'."
