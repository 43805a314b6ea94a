"""Label keys identifying the children of a collector.

A label key is a plain tuple of label values, one per declared label name.
Tuples compare element-wise and hash order-sensitively, which is exactly
the identity a child needs.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Tuple

from metrics_core.errors import LabelArityError, MissingLabelValueError

LabelKey = Tuple[str, ...]

EMPTY_KEY: LabelKey = ()


def make_label_key(
    label_names: Sequence[str],
    values: Sequence[Any] = (),
    kwvalues: Optional[Dict[str, Any]] = None,
) -> LabelKey:
    """Build the key for ``values`` (positional) or ``kwvalues`` (by name)."""
    if values and kwvalues:
        raise LabelArityError("Can't pass both positional and keyword label values.")

    if kwvalues:
        if set(kwvalues) != set(label_names):
            raise LabelArityError(
                f"Incorrect label names: expected {sorted(label_names)}, got {sorted(kwvalues)}"
            )
        values = [kwvalues[name] for name in label_names]

    if len(values) != len(label_names):
        raise LabelArityError(
            f"Incorrect number of labels: expected {len(label_names)}, got {len(values)}"
        )

    key = []
    for name, value in zip(label_names, values):
        if value is None:
            raise MissingLabelValueError(f"Label value for {name!r} is missing.")
        key.append(value if isinstance(value, str) else str(value))
    return tuple(key)


__all__ = ["LabelKey", "EMPTY_KEY", "make_label_key"]
