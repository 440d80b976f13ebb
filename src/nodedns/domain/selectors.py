"""Kubernetes-style label selectors used to scope the watched nodes.

Only the equality- and set-based grammar understood by the API server is
supported::

    key, !key, key=value, key==value, key!=value,
    key in (v1,v2), key notin (v1,v2)

Requirements are joined by commas and must all hold for a node to match.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

log = getLogger(__name__)

_KEY = r"(?:[a-z0-9](?:[-a-z0-9.]*[a-z0-9])?/)?[A-Za-z0-9](?:[-A-Za-z0-9_.]*[A-Za-z0-9])?"
_VALUE = r"(?:[A-Za-z0-9](?:[-A-Za-z0-9_.]*[A-Za-z0-9])?)?"

_DOES_NOT_EXIST = re.compile(rf"!\s*(?P<key>{_KEY})")
_SET = re.compile(rf"(?P<key>{_KEY})\s+(?P<op>in|notin)\s*\((?P<values>[^()]*)\)")
_EQUALITY = re.compile(rf"(?P<key>{_KEY})\s*(?P<op>==|!=|=)\s*(?P<value>{_VALUE})")
_EXISTS = re.compile(rf"(?P<key>{_KEY})")
_VALUE_ONLY = re.compile(_VALUE)


class InvalidSelectorError(ValueError):
    """Raised when a label selector cannot be parsed."""


class Operator(StrEnum):
    EXISTS = "exists"
    DOES_NOT_EXIST = "!"
    EQUALS = "="
    NOT_EQUALS = "!="
    IN = "in"
    NOT_IN = "notin"


@dataclass(frozen=True, slots=True)
class Requirement:
    key: str
    operator: Operator
    values: tuple[str, ...] = ()

    def matches(self, labels: Mapping[str, str]) -> bool:
        present = self.key in labels
        match self.operator:
            case Operator.EXISTS:
                return present
            case Operator.DOES_NOT_EXIST:
                return not present
            case Operator.EQUALS | Operator.IN:
                return present and labels[self.key] in self.values
            case Operator.NOT_EQUALS | Operator.NOT_IN:
                return not present or labels[self.key] not in self.values

    def __str__(self) -> str:
        match self.operator:
            case Operator.EXISTS:
                return self.key
            case Operator.DOES_NOT_EXIST:
                return f"!{self.key}"
            case Operator.EQUALS | Operator.NOT_EQUALS:
                return f"{self.key}{self.operator}{self.values[0]}"
            case Operator.IN | Operator.NOT_IN:
                return f"{self.key} {self.operator} ({','.join(self.values)})"


@dataclass(frozen=True, slots=True)
class LabelSelector:
    requirements: tuple[Requirement, ...] = ()

    @property
    def is_everything(self) -> bool:
        return not self.requirements

    def matches(self, labels: Mapping[str, str]) -> bool:
        return all(requirement.matches(labels) for requirement in self.requirements)

    def __str__(self) -> str:
        return ",".join(str(requirement) for requirement in self.requirements)


EVERYTHING = LabelSelector()


def parse_label_selector(text: str) -> LabelSelector:
    """Parse ``text`` into a :class:`LabelSelector`; blank text selects everything."""

    if not text.strip():
        return EVERYTHING
    return LabelSelector(tuple(_parse_requirement(part) for part in _split_requirements(text)))


def selector_or_everything(text: str) -> LabelSelector:
    """Parse ``text``, logging and falling back to :data:`EVERYTHING` when invalid."""

    try:
        return parse_label_selector(text)
    except InvalidSelectorError as exc:
        log.warning("node selector is invalid: %s", exc)
        return EVERYTHING


def _split_requirements(text: str) -> Iterator[str]:
    depth = 0
    start = 0
    for index, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise InvalidSelectorError(f"unbalanced parenthesis in {text!r}")
        elif char == "," and depth == 0:
            yield text[start:index]
            start = index + 1
    if depth != 0:
        raise InvalidSelectorError(f"unbalanced parenthesis in {text!r}")
    yield text[start:]


def _parse_requirement(part: str) -> Requirement:
    token = part.strip()
    if not token:
        raise InvalidSelectorError("found empty requirement")

    if match := _DOES_NOT_EXIST.fullmatch(token):
        return Requirement(match["key"], Operator.DOES_NOT_EXIST)

    if match := _SET.fullmatch(token):
        values = tuple(value.strip() for value in match["values"].split(","))
        if not any(values):
            raise InvalidSelectorError(f"{match['op']} requires at least one value: {token!r}")
        for value in values:
            if not _VALUE_ONLY.fullmatch(value):
                raise InvalidSelectorError(f"invalid label value {value!r} in {token!r}")
        return Requirement(match["key"], Operator(match["op"]), tuple(sorted(set(values))))

    if match := _EQUALITY.fullmatch(token):
        operator = Operator.NOT_EQUALS if match["op"] == "!=" else Operator.EQUALS
        return Requirement(match["key"], operator, (match["value"],))

    if match := _EXISTS.fullmatch(token):
        return Requirement(match["key"], Operator.EXISTS)

    raise InvalidSelectorError(f"unable to parse requirement {token!r}")
