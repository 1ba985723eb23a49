"""Runtime values of dscript: float, str, bool, None (null) and Callables, plus the conversions between them."""

import math
import re

from dscript.core.callable import Callable


def is_number(value):
    # bool is an int subclass in Python, but never a number in dscript
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value):
    """Only null and false are falsy. 0 and "" are truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a, b):
    """Value equality without coercion: 1 != "1", true != 1. Callables compare by identity."""
    if isinstance(a, Callable) or isinstance(b, Callable):
        return a is b
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if is_number(a) and is_number(b):
        return a == b
    return type(a) is type(b) and a == b


# string forms accepted by numeric coercion, after trimming whitespace
DECIMAL = re.compile(r"[+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")
RADIX = {"x": 16, "o": 8, "b": 2}
RADIX_DIGITS = re.compile(r"0([xXoObB])([0-9a-fA-F]+)")


def to_number(value):
    """Numeric coercion used by unary minus. A string is trimmed first: blank is 0, and anything other than a whole
    decimal literal, a signed Infinity or an unsigned 0x/0o/0b integer literal is NaN.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if DECIMAL.fullmatch(text):
            return float(text.replace("Infinity", "inf"))
        match = RADIX_DIGITS.fullmatch(text)
        if match:
            try:
                return float(int(match.group(2), RADIX[match.group(1).lower()]))
            except ValueError:  # digit out of range for the radix, e.g. 0b2
                return math.nan
            except OverflowError:
                return math.inf
        return math.nan
    return math.nan


def format_number(value):
    """Shortest round-trip digits of a finite number. Plain notation for 1e-6 <= |value| < 1e21, exponent notation
    (1e-7, 1.5e+21) outside that range.
    """
    if value == 0:
        return "0"  # -0 too
    if value < 0:
        return "-" + format_number(-value)

    mantissa, __, exponent = repr(float(value)).partition("e")
    whole, __, fraction = mantissa.partition(".")
    raw = whole + fraction
    stripped = raw.lstrip("0")
    digits = stripped.rstrip("0")
    point = len(whole) + int(exponent or 0) - (len(raw) - len(stripped))  # value == 0.<digits> * 10**point

    if len(digits) <= point <= 21:
        return digits + "0" * (point - len(digits))
    if 0 < point <= 21:
        return digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return "0." + "0" * -point + digits

    power = point - 1
    head = digits[0] if len(digits) == 1 else digits[0] + "." + digits[1:]
    return f"{head}e{'+' if power >= 0 else '-'}{abs(power)}"


def stringify(value):
    """Textual form of value, as written by print and used by string concatenation."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return format_number(value)
    return str(value)
