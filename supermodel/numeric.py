"""
Numeric Parsing — decimal-style parsing of numeric text.

A single parser is shared by the whole process. It is created lazily on
first use and configured to decimal style; the configuration check runs on
every call but is idempotent and never reset.

Decimal style accepts:
    "42", "-3", "+7", "3.14", ".5", "1,234", "1,234,567.89", " 42 "

and rejects anything else, including exponents ("1e3"), trailing text
("12abc"), misplaced grouping ("12,34") and the empty string.
"""

from __future__ import annotations

import logging
import numbers
import re
import threading
from decimal import Decimal, InvalidOperation
from enum import Enum
from fractions import Fraction
from typing import Any, Optional

from .config import get_settings

logger = logging.getLogger(__name__)

_ABSTRACT_NUMBERS = (numbers.Number, numbers.Complex, numbers.Real, numbers.Rational)


class NumberStyle(Enum):
    """Parsing styles. Only decimal is used by the coercion engine."""
    NONE = "none"        # plain digits with optional sign and fraction
    DECIMAL = "decimal"  # grouping separators accepted


class NumberParser:
    """
    Parses numeric text into Decimal.

    Args:
        decimal_separator: Character between integer and fractional digits.
        grouping_separator: Thousands separator (decimal style only).
    """

    def __init__(self, decimal_separator: str = ".", grouping_separator: str = ","):
        if decimal_separator == grouping_separator:
            raise ValueError("decimal and grouping separators must differ")
        self.decimal_separator = decimal_separator
        self.grouping_separator = grouping_separator
        self.style = NumberStyle.NONE
        self._pattern = self._compile()

    def set_style(self, style: NumberStyle) -> None:
        self.style = style
        self._pattern = self._compile()

    def _compile(self) -> re.Pattern[str]:
        dec = re.escape(self.decimal_separator)
        if self.style == NumberStyle.DECIMAL:
            group = re.escape(self.grouping_separator)
            integer = rf"(?:\d{{1,3}}(?:{group}\d{{3}})+|\d+)"
        else:
            integer = r"\d+"
        return re.compile(rf"^[+-]?(?:{integer}(?:{dec}\d*)?|{dec}\d+)$")

    def parse(self, text: str) -> Optional[Decimal]:
        """Parse text, returning None when it is not a number in this style."""
        if not isinstance(text, str):
            return None
        candidate = text.strip()
        if not self._pattern.match(candidate):
            return None

        normalized = candidate.replace(self.grouping_separator, "")
        normalized = normalized.replace(self.decimal_separator, ".")
        try:
            return Decimal(normalized)
        except InvalidOperation:
            return None


# =============================================================================
# SHARED PARSER
# =============================================================================

_shared_parser: Optional[NumberParser] = None
_shared_lock = threading.Lock()


def shared_parser() -> NumberParser:
    """The process-wide parser, created on first use and set to decimal style."""
    global _shared_parser

    parser = _shared_parser
    if parser is None:
        with _shared_lock:
            if _shared_parser is None:
                settings = get_settings()
                _shared_parser = NumberParser(
                    decimal_separator=settings.decimal_separator,
                    grouping_separator=settings.grouping_separator,
                )
            parser = _shared_parser

    if parser.style != NumberStyle.DECIMAL:
        parser.set_style(NumberStyle.DECIMAL)
    return parser


def parse_number(text: str) -> Optional[Decimal]:
    """Parse numeric text with the shared parser. Never raises."""
    return shared_parser().parse(text)


def to_number_type(value: Decimal, declared: Any) -> Optional[Any]:
    """
    Convert a parsed Decimal to a declared numeric type.

    Returns None when the conversion would lose information, e.g. "2.5"
    into an int field. Abstract types (numbers.Number, numbers.Real) get an
    int for integral values and a float otherwise.
    """
    integral = value == value.to_integral_value()

    if declared is int:
        return int(value) if integral else None
    if declared is float:
        return float(value)
    if declared is Decimal:
        return value
    if declared is Fraction:
        return Fraction(value)
    if declared is numbers.Integral:
        return int(value) if integral else None
    if declared in _ABSTRACT_NUMBERS:
        return int(value) if integral else float(value)

    try:
        return declared(value)
    except (TypeError, ValueError, ArithmeticError):
        logger.debug("Cannot convert %s to %s", value, declared)
        return None
