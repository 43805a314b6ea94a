"""Collector base.

A collector owns one metric declaration (name, help, label names) and a
map from label key to child. Children hold the mutable numeric state for
one label-value combination and are created lazily on first access.

The child map is a plain dict. ``dict.setdefault`` installs at most one
child per key even when several threads race on first access; the losers
discard the child they built, which is safe because building a child has
no side effects. Scrapes iterate over ``dict.copy()`` so they never see the
map change under them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import (
    Any,
    Dict,
    Generic,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
)

from metrics_core.errors import (
    DuplicateLabelNameError,
    InvalidLabelNameError,
    InvalidMetricNameError,
    LabelArityError,
    MissingFieldError,
    ReservedLabelNameError,
)
from metrics_core.labels import EMPTY_KEY, LabelKey, make_label_key
from metrics_core.logging.structured import get_logger
from metrics_core.registry import CollectorRegistry, get_default_registry
from metrics_core.samples import MetricFamilySamples, MetricType, Sample
from metrics_core.validation import (
    is_reserved_label_name,
    validate_label_name,
    validate_metric_name,
)

logger = get_logger(__name__)

ChildT = TypeVar("ChildT")
CollectorT = TypeVar("CollectorT", bound="Collector")


@dataclass(frozen=True)
class MetricDefinition:
    """Immutable declaration of a metric."""
    name: str
    help: str
    namespace: str = ""
    subsystem: str = ""
    label_names: Tuple[str, ...] = ()

    @property
    def full_name(self) -> str:
        """``namespace_subsystem_name`` with empty segments left out."""
        return "_".join(part for part in (self.namespace, self.subsystem, self.name) if part)


def _normalize_label_names(label_names: Iterable[str]) -> Tuple[str, ...]:
    if isinstance(label_names, str):
        return (label_names,)
    return tuple(label_names)


class Collector(ABC, Generic[ChildT]):
    """Base class for a metric and all of its children.

    Subclasses provide the child shape (``_new_child``) and how one child
    turns into samples (``_child_samples``).
    """

    metric_type: MetricType = MetricType.UNTYPED
    # Label names a subclass synthesizes itself and so cannot be declared
    reserved_label_names: Tuple[str, ...] = ()

    def __init__(
        self,
        name: str,
        help: str,
        label_names: Sequence[str] = (),
        namespace: str = "",
        subsystem: str = "",
    ):
        if not name or not name.strip():
            raise MissingFieldError("name")
        if not help or not help.strip():
            raise MissingFieldError("help")

        self._definition = MetricDefinition(
            name=name.strip(),
            help=help.strip(),
            namespace=(namespace or "").strip(),
            subsystem=(subsystem or "").strip(),
            label_names=_normalize_label_names(label_names or ()),
        )
        self._name = self._definition.full_name
        if not validate_metric_name(self._name):
            raise InvalidMetricNameError(f"Invalid metric name: {self._name}")
        self._check_label_names(self._definition.label_names)

        self._children: Dict[LabelKey, ChildT] = {}
        self._init_default_child()

    @classmethod
    def from_definition(cls: Type[CollectorT], definition: MetricDefinition, **options: Any) -> CollectorT:
        return cls(
            definition.name,
            definition.help,
            definition.label_names,
            namespace=definition.namespace,
            subsystem=definition.subsystem,
            **options,
        )

    @classmethod
    def build(cls, name: Optional[str] = None, help: Optional[str] = None) -> "CollectorBuilder":
        """Return a builder for this collector type."""
        builder = cls._builder_class()(cls)
        if name is not None:
            builder.with_name(name)
        if help is not None:
            builder.with_help(help)
        return builder

    @classmethod
    def _builder_class(cls) -> Type["CollectorBuilder"]:
        return CollectorBuilder

    @property
    def name(self) -> str:
        return self._name

    @property
    def help(self) -> str:
        return self._definition.help

    @property
    def label_names(self) -> Tuple[str, ...]:
        return self._definition.label_names

    @property
    def definition(self) -> MetricDefinition:
        return self._definition

    def _check_label_names(self, label_names: Tuple[str, ...]) -> None:
        seen = set()
        for label_name in label_names:
            if not validate_label_name(label_name):
                raise InvalidLabelNameError(f"Invalid metric label name: {label_name}")
            if is_reserved_label_name(label_name):
                raise ReservedLabelNameError(
                    f"Invalid metric label name, reserved for internal use: {label_name}"
                )
            if label_name in self.reserved_label_names:
                raise ReservedLabelNameError(
                    f"{self.metric_type.value.capitalize()} cannot have a label named {label_name!r}"
                )
            if label_name in seen:
                raise DuplicateLabelNameError(f"Duplicate metric label name: {label_name}")
            seen.add(label_name)

    def labels(self, *values: Any, **kwvalues: Any) -> ChildT:
        """Return the child for the given label values, creating it if needed.

        Values are given positionally in declaration order, or by label name.
        """
        key = make_label_key(self.label_names, values, kwvalues)
        child = self._children.get(key)
        if child is None:
            child = self._children.setdefault(key, self._new_child())
        return child

    def remove(self, *values: Any, **kwvalues: Any) -> None:
        """Remove the child with the given label values, if present."""
        key = make_label_key(self.label_names, values, kwvalues)
        self._children.pop(key, None)
        self._init_default_child()

    def clear(self) -> None:
        """Remove all children."""
        self._children.clear()
        self._init_default_child()

    def _init_default_child(self) -> None:
        if not self.label_names:
            self.labels()

    def _default_child(self) -> ChildT:
        if self.label_names:
            raise LabelArityError(
                f"{self.name} declares labels {list(self.label_names)}; call labels() first"
            )
        child = self._children.get(EMPTY_KEY)
        if child is None:
            child = self.labels()
        return child

    def exposed_names(self) -> Tuple[str, ...]:
        """Series names this collector emits."""
        return (self.name,)

    def collect(self) -> List[MetricFamilySamples]:
        """Snapshot the current value of every child."""
        samples: List[Sample] = []
        for key, child in self._children.copy().items():
            samples.extend(self._child_samples(key, child))
        return [MetricFamilySamples(self.name, self.metric_type, self.help, tuple(samples))]

    @abstractmethod
    def _new_child(self) -> ChildT:
        pass

    @abstractmethod
    def _child_samples(self, key: LabelKey, child: ChildT) -> Iterable[Sample]:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, labels={list(self.label_names)})"


class CollectorBuilder(Generic[CollectorT]):
    """Fluent builder producing a collector from a :class:`MetricDefinition`."""

    def __init__(self, collector_class: Type[CollectorT]):
        self._collector_class = collector_class
        self._name = ""
        self._namespace = ""
        self._subsystem = ""
        self._help = ""
        self._label_names: Tuple[str, ...] = ()

    def with_name(self, name: str) -> "CollectorBuilder[CollectorT]":
        """Set the name of the metric. Required."""
        if not name or not name.strip():
            raise MissingFieldError("name", "Name is required.")
        self._name = name.strip()
        return self

    def with_namespace(self, namespace: Optional[str]) -> "CollectorBuilder[CollectorT]":
        self._namespace = (namespace or "").strip()
        return self

    def with_subsystem(self, subsystem: Optional[str]) -> "CollectorBuilder[CollectorT]":
        self._subsystem = (subsystem or "").strip()
        return self

    def with_help(self, help: str) -> "CollectorBuilder[CollectorT]":
        """Set the help text of the metric. Required."""
        if not help or not help.strip():
            raise MissingFieldError("help", "Help text is required.")
        self._help = help.strip()
        return self

    def with_labels(self, *label_names: str) -> "CollectorBuilder[CollectorT]":
        if len(label_names) == 1 and isinstance(label_names[0], (list, tuple)):
            label_names = tuple(label_names[0])
        self._label_names = tuple(label_names)
        return self

    def definition(self) -> MetricDefinition:
        if not self._name:
            raise MissingFieldError("name")
        if not self._help:
            raise MissingFieldError("help")
        return MetricDefinition(
            name=self._name,
            help=self._help,
            namespace=self._namespace,
            subsystem=self._subsystem,
            label_names=self._label_names,
        )

    def _options(self) -> Dict[str, Any]:
        return {}

    def build(self) -> CollectorT:
        """Build the collector without registering it."""
        collector = self._collector_class.from_definition(self.definition(), **self._options())
        logger.debug(
            "collector built",
            collector=collector.name,
            type=collector.metric_type.value,
            labels=list(collector.label_names),
        )
        return collector

    def register(self, registry: Optional[CollectorRegistry] = None) -> CollectorT:
        """Build the collector and register it (default registry if none given)."""
        collector = self.build()
        (registry if registry is not None else get_default_registry()).register(collector)
        return collector


__all__ = ["MetricDefinition", "Collector", "CollectorBuilder"]
