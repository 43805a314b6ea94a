"""Name validation for metrics and labels."""

from __future__ import annotations

import re

METRIC_NAME_RE = re.compile(r"[a-zA-Z_:][a-zA-Z0-9_:]*")
LABEL_NAME_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")
RESERVED_LABEL_PREFIX = "__"


def validate_metric_name(name: str) -> bool:
    return bool(name) and METRIC_NAME_RE.fullmatch(name) is not None


def validate_label_name(name: str) -> bool:
    return bool(name) and LABEL_NAME_RE.fullmatch(name) is not None


def is_reserved_label_name(name: str) -> bool:
    """Label names starting with ``__`` are reserved for internal use."""
    return name.startswith(RESERVED_LABEL_PREFIX)


__all__ = [
    "METRIC_NAME_RE",
    "LABEL_NAME_RE",
    "RESERVED_LABEL_PREFIX",
    "validate_metric_name",
    "validate_label_name",
    "is_reserved_label_name",
]
