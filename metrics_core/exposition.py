"""Text exposition format, version 0.0.4.

Output is UTF-8 without a byte order mark, with ``\\n`` line endings on
every platform. Each family is written as::

    # HELP <name> <escaped help>
    # TYPE <name> <type>
    <sample name>{<label>="<escaped value>",...} <value>

See http://prometheus.io/docs/instrumenting/exposition_formats/
"""

from __future__ import annotations

import io
import math
from typing import BinaryIO, Iterable, List, Optional

from metrics_core.registry import CollectorRegistry, get_default_registry
from metrics_core.samples import MetricFamilySamples, Sample

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"

# Integral floats below this print without an exponent in repr()
_REPR_EXPONENT_THRESHOLD = 1e16


def _format_integral(value: float) -> str:
    # repr() is positional here, e.g. "1500000000000000.0"
    digits = repr(abs(value))[:-2]
    sign = "-" if value < 0 else ""
    significant = digits.rstrip("0")
    if not significant:
        return "0"
    mantissa = significant[0]
    if len(significant) > 1:
        mantissa += "." + significant[1:]
    scientific = f"{mantissa}e+{len(digits) - 1:02d}"
    if len(scientific) < len(digits):
        return sign + scientific
    return sign + digits


def format_value(value: float) -> str:
    """Shortest decimal that round-trips to ``value``.

    Infinities render as ``+Inf``/``-Inf`` and not-a-number as ``NaN``.
    Integral values carry no trailing ``.0`` and switch to an exponent when
    that is shorter, e.g. ``1.5e+15``.
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if value == math.inf:
        return "+Inf"
    if value == -math.inf:
        return "-Inf"
    if value.is_integer() and abs(value) < _REPR_EXPONENT_THRESHOLD:
        return _format_integral(value)
    return repr(value)


def escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def escape_label_value(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


class TextExpositionWriter:
    """Serialize metric families to the text exposition format."""

    content_type = CONTENT_TYPE_LATEST
    encoding = "utf-8"

    def write(self, stream: BinaryIO, families: Iterable[MetricFamilySamples]) -> None:
        """Write ``families`` to a binary ``stream`` in input order."""
        for family in families:
            stream.write(self._format_family(family).encode(self.encoding))

    def export(self, families: Iterable[MetricFamilySamples]) -> bytes:
        buffer = io.BytesIO()
        self.write(buffer, families)
        return buffer.getvalue()

    def _format_family(self, family: MetricFamilySamples) -> str:
        lines: List[str] = [
            f"# HELP {family.name} {escape_help(family.help)}\n",
            f"# TYPE {family.name} {family.metric_type.value}\n",
        ]
        for sample in family.samples:
            lines.append(self._format_sample(sample))
        return "".join(lines)

    def _format_sample(self, sample: Sample) -> str:
        if sample.label_names:
            labels = ",".join(
                f'{name}="{escape_label_value(value)}"'
                for name, value in zip(sample.label_names, sample.label_values)
            )
            return f"{sample.name}{{{labels}}} {format_value(sample.value)}\n"
        return f"{sample.name} {format_value(sample.value)}\n"


def generate_latest(registry: Optional[CollectorRegistry] = None) -> bytes:
    """Collect ``registry`` (default registry if None) and serialize it."""
    registry = registry if registry is not None else get_default_registry()
    return TextExpositionWriter().export(registry.collect())


__all__ = [
    "CONTENT_TYPE_LATEST",
    "TextExpositionWriter",
    "escape_help",
    "escape_label_value",
    "format_value",
    "generate_latest",
]
