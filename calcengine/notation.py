"""
Display helpers for solved values.

The evaluators never round; these helpers are for callers that want a
compact human-readable string next to the raw number.
"""

import math

# SI prefix table
_SI_PREFIXES = [
    (1e-15, 'f'),
    (1e-12, 'p'),
    (1e-9,  'n'),
    (1e-6,  'µ'),
    (1e-3,  'm'),
    (1e0,   ''),
    (1e3,   'k'),
    (1e6,   'M'),
    (1e9,   'G'),
]


def engineering_notation(value: float, unit: str = '', precision: int = 4) -> str:
    """
    Format a value with an SI prefix.

    Examples:
        engineering_notation(1000, 'Ω')     → '1 kΩ'
        engineering_notation(0.0047, 'A')    → '4.7 mA'
        engineering_notation(2.5, 'm/s²')    → '2.5 m/s²'
    """
    sep = ' ' if unit else ''
    if value == 0:
        return f"0{sep}{unit}"
    if not math.isfinite(value):
        return f"{value}{sep}{unit}"

    abs_value = abs(value)
    sign = '-' if value < 0 else ''

    for scale, prefix in reversed(_SI_PREFIXES):
        if abs_value >= scale:
            scaled = abs_value / scale
            if scaled >= 1000:
                # Beyond the largest prefix
                break
            if scaled == int(scaled):
                return f"{sign}{int(scaled)}{sep}{prefix}{unit}"
            return f"{sign}{scaled:.{precision}g}{sep}{prefix}{unit}"

    # Extremely small or extremely large values
    return f"{value:.{precision}g}{sep}{unit}"


def short_unit(unit_label: str) -> str:
    """'Ohms (Ω)' → 'Ω'; labels without a parenthesised symbol are returned as-is."""
    if unit_label.endswith(')') and '(' in unit_label:
        return unit_label[unit_label.rindex('(') + 1:-1]
    return unit_label


# Units that take an SI prefix cleanly (no 'kkg', 'mm/s²')
PREFIXABLE_UNITS = {'V', 'A', 'Ω', 'N', 'J', 'Pa', 'W'}


def format_quantity(value: float, unit_label: str, precision: int = 4) -> str:
    """Display string for a solved value, SI-prefixed where the unit allows it."""
    unit = short_unit(unit_label)
    if unit in PREFIXABLE_UNITS:
        return engineering_notation(value, unit, precision)
    return f"{value:.{precision}g} {unit}".rstrip()
