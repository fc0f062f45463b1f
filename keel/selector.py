"""Label selector builder.

Terms render to the server's selector grammar and are ANDed with commas:

    >>> build([exists("app"), not_in("env", ["qa", "dev"])])
    'app,env notin (qa,dev)'
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from keel.exceptions import InvalidSelectorError

_NAME = r"[A-Za-z0-9]([-A-Za-z0-9_.]{0,61}[A-Za-z0-9])?"
_PREFIX = r"[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*"
_KEY_RE = re.compile(rf"^({_PREFIX}/)?{_NAME}$")
_VALUE_RE = re.compile(rf"^({_NAME})?$")


class Operator(str, Enum):
    """Token each operator renders as; ``EXISTS`` is the bare key."""

    EQUALS = "="
    NOT_EQUALS = "!="
    IN = "in"
    NOT_IN = "notin"
    EXISTS = ""
    DOES_NOT_EXIST = "!"


def _check_key(key: str):
    prefix, _, _ = key.rpartition("/")
    if len(prefix) > 253 or not _KEY_RE.match(key):
        raise InvalidSelectorError(f"Invalid label key: {key!r}")


def _check_value(value: str):
    if not _VALUE_RE.match(value):
        raise InvalidSelectorError(f"Invalid label value: {value!r}")


@dataclass(frozen=True)
class Requirement:
    key: str
    operator: Operator
    values: tuple[str, ...] = ()

    def __post_init__(self):
        _check_key(self.key)
        object.__setattr__(self, "values", tuple(self.values))
        for value in self.values:
            _check_value(value)
        if self.operator in (Operator.IN, Operator.NOT_IN) and not self.values:
            raise InvalidSelectorError(f"'{self.operator.value}' requires at least one value for key {self.key!r}")
        if self.operator in (Operator.EQUALS, Operator.NOT_EQUALS) and len(self.values) != 1:
            raise InvalidSelectorError(f"'{self.operator.value}' requires exactly one value for key {self.key!r}")

    def __str__(self) -> str:
        if self.operator in (Operator.EXISTS, Operator.DOES_NOT_EXIST):
            return f"{self.operator.value}{self.key}"
        if self.operator in (Operator.EQUALS, Operator.NOT_EQUALS):
            return f"{self.key}{self.operator.value}{self.values[0]}"
        return f"{self.key} {self.operator.value} ({','.join(self.values)})"


def equality(key: str, value: str) -> Requirement:
    return Requirement(key, Operator.EQUALS, (value,))


def inequality(key: str, value: str) -> Requirement:
    return Requirement(key, Operator.NOT_EQUALS, (value,))


def in_(key: str, values: Iterable[str]) -> Requirement:
    return Requirement(key, Operator.IN, tuple(values))


def not_in(key: str, values: Iterable[str]) -> Requirement:
    return Requirement(key, Operator.NOT_IN, tuple(values))


def exists(key: str) -> Requirement:
    return Requirement(key, Operator.EXISTS)


def not_exists(key: str) -> Requirement:
    return Requirement(key, Operator.DOES_NOT_EXIST)


def build(terms: Iterable[Requirement]) -> str:
    """Render terms in order; no terms selects everything."""
    return ",".join(str(term) for term in terms)


@dataclass(frozen=True)
class LabelSelector:
    requirements: tuple[Requirement, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "requirements", tuple(self.requirements))

    @classmethod
    def of(cls, *requirements: Requirement) -> "LabelSelector":
        return cls(requirements)

    @classmethod
    def matching(cls, **labels: str) -> "LabelSelector":
        return cls(tuple(equality(key, value) for key, value in labels.items()))

    def and_(self, *requirements: Requirement) -> "LabelSelector":
        return LabelSelector(self.requirements + tuple(requirements))

    def __and__(self, other):
        if isinstance(other, Requirement):
            return self.and_(other)
        if isinstance(other, LabelSelector):
            return self.and_(*other.requirements)
        return NotImplemented

    def __bool__(self) -> bool:
        return bool(self.requirements)

    def __str__(self) -> str:
        return build(self.requirements)

    def as_dict(self) -> dict:
        """Structured form used inside object specs (``matchLabels`` / ``matchExpressions``)."""
        match_labels: dict[str, str] = {}
        expressions: list[dict] = []
        for req in self.requirements:
            if req.operator == Operator.EQUALS:
                match_labels[req.key] = req.values[0]
            elif req.operator == Operator.NOT_EQUALS:
                expressions.append({"key": req.key, "operator": "NotIn", "values": list(req.values)})
            elif req.operator == Operator.IN:
                expressions.append({"key": req.key, "operator": "In", "values": list(req.values)})
            elif req.operator == Operator.NOT_IN:
                expressions.append({"key": req.key, "operator": "NotIn", "values": list(req.values)})
            elif req.operator == Operator.EXISTS:
                expressions.append({"key": req.key, "operator": "Exists"})
            else:
                expressions.append({"key": req.key, "operator": "DoesNotExist"})
        selector: dict = {}
        if match_labels:
            selector["matchLabels"] = match_labels
        if expressions:
            selector["matchExpressions"] = expressions
        return selector


def to_query(selector: "LabelSelector | Iterable[Requirement] | str | None") -> str | None:
    """Normalise whatever the caller passed as a selector into the query parameter value."""
    if selector is None:
        return None
    if isinstance(selector, str):
        return selector or None
    if isinstance(selector, Requirement):
        return str(selector)
    rendered = str(selector) if isinstance(selector, LabelSelector) else build(selector)
    return rendered or None
