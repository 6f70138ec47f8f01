"""Mapping from logging levels to telemetry severity.

Thresholds are the standard library's named levels. Comparisons are strict,
so a level exactly at a threshold lands in the bucket that threshold opens:

    level < INFO      -> VERBOSE
    level < WARNING   -> INFORMATION
    level < ERROR     -> WARNING
    level < CRITICAL  -> ERROR
    otherwise         -> CRITICAL

Custom levels between the named ones map to the bucket below the next
threshold, e.g. 25 -> INFORMATION and 45 -> ERROR.
"""

from __future__ import annotations

import logging

from telemetry_appender.telemetry.records import SeverityLevel

INFO_THRESHOLD = logging.INFO
WARN_THRESHOLD = logging.WARNING
ERROR_THRESHOLD = logging.ERROR
SEVERE_THRESHOLD = logging.CRITICAL


def get_severity_level(level: int | None) -> SeverityLevel | None:
    """Map a numeric logging level to a telemetry severity.

    Args:
        level: Numeric level such as record.levelno, or None.

    Returns:
        SeverityLevel bucket, or None when level is None.

    Example:
        >>> get_severity_level(logging.DEBUG)
        <SeverityLevel.VERBOSE: 0>
        >>> get_severity_level(logging.CRITICAL)
        <SeverityLevel.CRITICAL: 4>
        >>> get_severity_level(None) is None
        True
    """
    if level is None:
        return None

    if level < INFO_THRESHOLD:
        return SeverityLevel.VERBOSE

    if level < WARN_THRESHOLD:
        return SeverityLevel.INFORMATION

    if level < ERROR_THRESHOLD:
        return SeverityLevel.WARNING

    if level < SEVERE_THRESHOLD:
        return SeverityLevel.ERROR

    return SeverityLevel.CRITICAL
