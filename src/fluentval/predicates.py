"""Atomic predicate library.

Stateless shape, text, numeric and date checks. Each check is an
``AtomicCheck``: a pure ``value -> bool`` function plus the message template
used when a rule built from it fails. A value of the wrong type fails the
check rather than raising.
"""

import base64 as _base64
import binascii
import ipaddress
import json
import math
import re
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from .errors import ConfigurationError


@dataclass(frozen=True)
class AtomicCheck:
    """A named single-purpose predicate with its default message template."""
    name: str
    test: Callable[[Any], bool] = field(repr=False)
    message: str = "{property} is invalid."

    def __call__(self, value: Any) -> bool:
        return bool(self.test(value))


def _text(test: Callable[[str], bool]) -> Callable[[Any], bool]:
    return lambda value: isinstance(value, str) and test(value)


def _is_finite(value: int | float | Decimal) -> bool:
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, float):
        return math.isfinite(value)
    return True


def _number(test: Callable[[Any], bool]) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        if not isinstance(value, (int, float, Decimal)) or isinstance(value, bool):
            return False
        if not _is_finite(value):
            return False
        try:
            return bool(test(value))
        except (TypeError, ArithmeticError):
            # e.g. Decimal % float
            return False
    return check


def _integer(test: Callable[[int], bool]) -> Callable[[Any], bool]:
    return lambda value: isinstance(value, int) and not isinstance(value, bool) and test(value)


def _as_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def _today() -> date:
    return date.today()


def _years_between(born: date, today: date) -> int:
    years = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        years -= 1
    return years


# Shape checks

_EMAIL_RE = re.compile(r"^[\w-]+(\.[\w-]+)*@([\w-]+\.)+[a-zA-Z]{2,7}$")
_PHONE_RE = re.compile(
    r"^\+?[0-9\s().\-]*[0-9][0-9\s().\-]*"
    r"(\s*(x|ext\.?|extension)\s*[0-9]+)?$",
    re.IGNORECASE,
)
_URL_RE = re.compile(r"^(https?|ftp)://[^\s/$.?#].[^\s]*$", re.IGNORECASE)
_IPV4_RE = re.compile(r"^(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})$")
_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")
_BINARY_RE = re.compile(r"^[01]+$")


def _is_phone(text: str) -> bool:
    return bool(_PHONE_RE.match(text.strip())) and any(ch.isdigit() for ch in text)


def _passes_luhn(text: str) -> bool:
    digits = [ch for ch in text if ch not in " -"]
    if not digits or not all(ch.isdigit() for ch in digits):
        return False

    checksum = 0
    for index, ch in enumerate(reversed(digits)):
        digit = int(ch)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        checksum += digit
    return checksum % 10 == 0


def _is_guid(text: str) -> bool:
    try:
        uuid.UUID(text)
    except ValueError:
        return False
    return True


def _is_ipv4(text: str) -> bool:
    match = _IPV4_RE.match(text)
    return bool(match) and all(int(part) <= 255 for part in match.groups())


def _is_ipv6(text: str) -> bool:
    try:
        ipaddress.IPv6Address(text)
    except ValueError:
        return False
    return True


def _is_base64(text: str) -> bool:
    if not text or len(text) % 4:
        return False
    try:
        _base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


def _is_json(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


email = AtomicCheck("email", _text(lambda s: bool(_EMAIL_RE.match(s))),
                    "{property} must be a valid email address.")
phone = AtomicCheck("phone", _text(_is_phone), "{property} must be a valid phone number.")
credit_card = AtomicCheck("credit_card", _text(_passes_luhn),
                          "{property} must be a valid credit card number.")
url = AtomicCheck("url", _text(lambda s: bool(_URL_RE.match(s))), "{property} must be a valid URL.")
guid = AtomicCheck("guid", _text(_is_guid), "{property} must be a valid GUID.")
ipv4_address = AtomicCheck("ipv4_address", _text(_is_ipv4),
                           "{property} must be a valid IPv4 address.")
ipv6_address = AtomicCheck("ipv6_address", _text(_is_ipv6),
                           "{property} must be a valid IPv6 address.")
hex_color = AtomicCheck("hex_color", _text(lambda s: bool(_HEX_COLOR_RE.match(s))),
                        "{property} must be a valid hex color.")
base64 = AtomicCheck("base64", _text(_is_base64), "{property} must be a valid Base64 string.")
json_string = AtomicCheck("json_string", _text(_is_json), "{property} must be a valid JSON string.")
binary = AtomicCheck("binary", _text(lambda s: bool(_BINARY_RE.match(s))),
                     "{property} must be a binary string.")


# Text checks

alpha_only = AtomicCheck("alpha_only", _text(lambda s: bool(re.fullmatch(r"[a-zA-Z]+", s))),
                         "{property} must contain only letters.")
alphanumeric = AtomicCheck("alphanumeric", _text(lambda s: bool(re.fullmatch(r"[a-zA-Z0-9]+", s))),
                           "{property} must contain only letters and digits.")
no_special_characters = AtomicCheck(
    "no_special_characters",
    _text(lambda s: bool(re.fullmatch(r"[a-zA-Z0-9\s]+", s))),
    "{property} must not contain special characters.",
)
upper_case = AtomicCheck("upper_case", _text(lambda s: s == s.upper()),
                         "{property} must be upper case.")
lower_case = AtomicCheck("lower_case", _text(lambda s: s == s.lower()),
                         "{property} must be lower case.")
upper_case_first_letter = AtomicCheck("upper_case_first_letter", _text(lambda s: s[:1].isupper()),
                                      "{property} must start with an upper case letter.")
lower_case_first_letter = AtomicCheck("lower_case_first_letter", _text(lambda s: s[:1].islower()),
                                      "{property} must start with a lower case letter.")
contains_number = AtomicCheck("contains_number", _text(lambda s: bool(re.search(r"\d", s))),
                              "{property} must contain a number.")
contains_special_character = AtomicCheck(
    "contains_special_character",
    _text(lambda s: bool(re.search(r"[\W_]", s))),
    "{property} must contain a special character.",
)
no_whitespace = AtomicCheck("no_whitespace", _text(lambda s: not re.search(r"\s", s)),
                            "{property} must not contain whitespace.")
not_whitespace = AtomicCheck("not_whitespace", _text(lambda s: bool(s.strip())),
                             "{property} must not be whitespace.")
palindrome = AtomicCheck("palindrome", _text(lambda s: s == s[::-1]),
                         "{property} must be a palindrome.")
has_vowel = AtomicCheck("has_vowel", _text(lambda s: bool(re.search(r"[aeiouAEIOU]", s))),
                        "{property} must contain a vowel.")
has_consonant = AtomicCheck(
    "has_consonant",
    _text(lambda s: bool(re.search(r"[bcdfghjklmnpqrstvwxyzBCDFGHJKLMNPQRSTVWXYZ]", s))),
    "{property} must contain a consonant.",
)
starts_with_letter = AtomicCheck("starts_with_letter", _text(lambda s: s[:1].isalpha()),
                                 "{property} must start with a letter.")
ends_with_number = AtomicCheck("ends_with_number", _text(lambda s: s[-1:].isdigit()),
                               "{property} must end with a number.")


def _is_numeric_text(text: str) -> bool:
    try:
        Decimal(text.strip())
    except InvalidOperation:
        return False
    return text.strip().lower() not in ("nan", "inf", "infinity", "-inf", "-infinity", "+inf")


numeric = AtomicCheck("numeric", _text(_is_numeric_text), "{property} must be numeric.")
boolean = AtomicCheck("boolean", _text(lambda s: s.strip().lower() in ("true", "false")),
                      "{property} must be a boolean.")


# Numeric checks

def _is_prime(n: int) -> bool:
    if n < 2:
        return False
    for divisor in range(2, math.isqrt(n) + 1):
        if n % divisor == 0:
            return False
    return True


def _is_fibonacci(n: int) -> bool:
    if n < 0:
        return False

    def is_square(x: int) -> bool:
        root = math.isqrt(x)
        return root * root == x

    return is_square(5 * n * n + 4) or is_square(5 * n * n - 4)


positive = AtomicCheck("positive", _number(lambda v: v > 0), "{property} must be positive.")
negative = AtomicCheck("negative", _number(lambda v: v < 0), "{property} must be negative.")
not_zero = AtomicCheck("not_zero", _number(lambda v: v != 0), "{property} must not be zero.")
even = AtomicCheck("even", _integer(lambda v: v % 2 == 0), "{property} must be even.")
odd = AtomicCheck("odd", _integer(lambda v: v % 2 != 0), "{property} must be odd.")
prime = AtomicCheck("prime", _integer(_is_prime), "{property} must be a prime number.")
fibonacci = AtomicCheck("fibonacci", _integer(_is_fibonacci),
                        "{property} must be a Fibonacci number.")
percentage = AtomicCheck("percentage", _number(lambda v: 0 <= v <= 100),
                         "{property} must be a percentage between 0 and 100.")
latitude = AtomicCheck("latitude", _number(lambda v: -90 <= v <= 90),
                       "{property} must be a valid latitude.")
longitude = AtomicCheck("longitude", _number(lambda v: -180 <= v <= 180),
                        "{property} must be a valid longitude.")


# Date checks

def _date_check(test: Callable[[date], bool]) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        day = _as_date(value)
        return day is not None and test(day)
    return check


future_date = AtomicCheck("future_date", _date_check(lambda d: d > _today()),
                          "{property} must be a future date.")
past_date = AtomicCheck("past_date", _date_check(lambda d: d < _today()),
                        "{property} must be a past date.")
weekend = AtomicCheck("weekend", _date_check(lambda d: d.weekday() >= 5),
                      "{property} must fall on a weekend.")
weekday = AtomicCheck("weekday", _date_check(lambda d: d.weekday() < 5),
                      "{property} must fall on a weekday.")
adult = AtomicCheck("adult", _date_check(lambda d: _years_between(d, _today()) >= 18),
                    "{property} must indicate an adult age.")
child = AtomicCheck("child", _date_check(lambda d: _years_between(d, _today()) < 18),
                    "{property} must indicate a child's age.")


# Parameterised checks

def _literal(text: str) -> str:
    return text.replace("{", "{{").replace("}", "}}")


def starts_with(prefix: str) -> AtomicCheck:
    return AtomicCheck(
        "starts_with",
        _text(lambda s: s.startswith(prefix)),
        f"{{property}} must start with '{_literal(prefix)}'.",
    )


def ends_with(suffix: str) -> AtomicCheck:
    return AtomicCheck(
        "ends_with",
        _text(lambda s: s.endswith(suffix)),
        f"{{property}} must end with '{_literal(suffix)}'.",
    )


def contains(text: str) -> AtomicCheck:
    return AtomicCheck(
        "contains",
        _text(lambda s: text in s),
        f"{{property}} must contain '{_literal(text)}'.",
    )


def exact_length(length: int) -> AtomicCheck:
    return AtomicCheck(
        "exact_length",
        _text(lambda s: len(s) == length),
        f"{{property}} must be exactly {length} characters.",
    )


def exact_digits(count: int) -> AtomicCheck:
    return AtomicCheck(
        "exact_digits",
        lambda value: (isinstance(value, str) and value.isdigit() and len(value) == count)
        or (isinstance(value, int) and not isinstance(value, bool)
            and len(str(abs(value))) == count),
        f"{{property}} must have exactly {count} digits.",
    )


def multiple_of(factor: int | float) -> AtomicCheck:
    if factor == 0:
        raise ConfigurationError("multiple_of factor must not be zero")
    return AtomicCheck(
        "multiple_of",
        _number(lambda v: v % factor == 0),
        f"{{property}} must be a multiple of {factor}.",
    )


def year_range(low: int, high: int) -> AtomicCheck:
    def in_range(value: Any) -> bool:
        day = _as_date(value)
        return day is not None and low <= day.year <= high

    return AtomicCheck(
        "year_range",
        in_range,
        f"{{property}} must have a year between {low} and {high}.",
    )


def one_of(*values: Any) -> AtomicCheck:
    allowed = tuple(values)
    return AtomicCheck(
        "one_of",
        lambda value: value in allowed,
        "{property} must be one of " + _literal(", ".join(repr(v) for v in allowed)) + ".",
    )
