"""
Human-readable formatting of byte counts and rates.
"""

from typing import Union

_UNITS = "KMGTPE"


def _scale(value: int, unit: int):
    div, exp = unit, 0
    n = value // unit
    while n >= unit and exp < len(_UNITS) - 1:
        div *= unit
        exp += 1
        n //= unit
    return value / div, _UNITS[exp]


def format_traffic_size(num_bytes: Union[int, float]) -> str:
    """
    Format a byte count with binary (1024) units.

    >>> format_traffic_size(1536)
    '1.50 KB'
    """
    value = max(0, int(num_bytes))
    if value < 1024:
        return f"{value} B"
    scaled, prefix = _scale(value, 1024)
    return f"{scaled:.2f} {prefix}B"


def format_speed(bytes_per_second: Union[int, float]) -> str:
    """
    Format a throughput with decimal (1000) units, as network speeds usually are.

    >>> format_speed(1500)
    '1.5 KB/s'
    """
    value = max(0, int(bytes_per_second))
    if value < 1000:
        return f"{value} B/s"
    scaled, prefix = _scale(value, 1000)
    return f"{scaled:.1f} {prefix}B/s"
