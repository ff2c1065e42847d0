"""Structured filter predicates and their compilation to Typesense filter_by strings.

A predicate is an ordered sequence of (field, value) pairs. Each value is one of:

1. Scalar: equality (``country:=Canada``)
2. List of scalars: set membership (``category:=[Software,Healthcare]``)
3. Operator map: ANDed constraints on one field (``{"gte": 100, "lt": 500}``)
4. List of operator maps: ORed groups of ANDed constraints

``None`` and empty lists contribute nothing and are dropped silently.

Example:

    compile_filter({
        "country": "United States",
        "category": ["Software", "Healthcare"],
        "price": {"gte": 100},
    })
    # 'country:=United States && category:=[Software,Healthcare] && price:>=100'
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional, Tuple, Union

from ..schema.fields import Schema


logger = logging.getLogger(__name__)


class FilterOperator(str, Enum):
    """Comparison operators accepted in operator maps."""
    EQ = "eq"
    CONTAINS = "contains"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"

    @property
    def token(self) -> str:
        return FILTER_TOKENS[self]


# Operator -> engine token (case-sensitive, must match the engine grammar)
FILTER_TOKENS = {
    FilterOperator.EQ: ":=",
    FilterOperator.CONTAINS: ":",
    FilterOperator.NEQ: ":!=",
    FilterOperator.GT: ":>",
    FilterOperator.GTE: ":>=",
    FilterOperator.LT: ":<",
    FilterOperator.LTE: ":<=",
}

AND = " && "
OR = " || "

# Characters that would change how the engine splits a value
DELIMITER_CHARS = frozenset(",:()[]&|")


class UnknownOperatorError(ValueError):
    """Raised when an operator map uses an operator outside FilterOperator."""

    def __init__(self, operator: Any, field: Optional[str] = None):
        self.operator = operator
        self.field = field
        location = f" on field '{field}'" if field else ""
        super().__init__(
            f"Unknown filter operator {operator!r}{location}. "
            f"Supported: {', '.join(op.value for op in FilterOperator)}"
        )


@dataclass(frozen=True)
class OperatorMap:
    """Constraints on a single field, in the order they were given."""
    constraints: Tuple[Tuple[FilterOperator, Any], ...]

    @classmethod
    def from_dict(cls, data: Mapping, field: Optional[str] = None) -> "OperatorMap":
        constraints = []
        for key, value in data.items():
            try:
                operator = FilterOperator(key)
            except ValueError:
                raise UnknownOperatorError(key, field) from None
            constraints.append((operator, value))
        return cls(tuple(constraints))

    def __len__(self) -> int:
        return len(self.constraints)


PredicateValue = Union[None, Any, Tuple[Any, ...], OperatorMap, Tuple[OperatorMap, ...]]


def _normalize_value(field: str, value: Any) -> PredicateValue:
    """Validate a raw predicate value and convert it to its normalized form.

    Raises:
        UnknownOperatorError: If an operator map uses an unknown operator
        ValueError: If a list mixes scalars and operator maps
    """
    if value is None or isinstance(value, OperatorMap):
        return value

    if isinstance(value, Mapping):
        return OperatorMap.from_dict(value, field)

    if isinstance(value, (list, tuple)):
        maps = [isinstance(v, (Mapping, OperatorMap)) for v in value]
        if all(maps):
            return tuple(
                v if isinstance(v, OperatorMap) else OperatorMap.from_dict(v, field)
                for v in value
            )
        if any(maps):
            raise ValueError(
                f"Filter on field '{field}' mixes scalar values and operator maps"
            )
        return tuple(value)

    return value


class Predicate:
    """Ordered, immutable sequence of (field, value) filter clauses.

    Operators are validated when the predicate is built, so an invalid
    operator fails at the call site rather than producing a malformed string.
    """

    def __init__(self, clauses: Iterable[Tuple[str, Any]] = ()):
        self._clauses: Tuple[Tuple[str, PredicateValue], ...] = tuple(
            (field, _normalize_value(field, value)) for field, value in clauses
        )

    @classmethod
    def coerce(cls, predicate: Union["Predicate", Mapping, Iterable[Tuple[str, Any]]]) -> "Predicate":
        """Accept a Predicate, a mapping (insertion order) or a sequence of pairs."""
        if isinstance(predicate, Predicate):
            return predicate
        if isinstance(predicate, Mapping):
            return cls(predicate.items())
        return cls(predicate)

    def where(self, field: str, value: Any) -> "Predicate":
        """Return a new predicate with one more clause appended."""
        return Predicate(self._clauses + ((field, value),))

    @property
    def fields(self) -> List[str]:
        return [field for field, _ in self._clauses]

    def __iter__(self) -> Iterator[Tuple[str, PredicateValue]]:
        return iter(self._clauses)

    def __len__(self) -> int:
        return len(self._clauses)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Predicate):
            return NotImplemented
        return self._clauses == other._clauses

    def __repr__(self) -> str:
        return f"Predicate({list(self._clauses)!r})"


def render_value(value: Any) -> str:
    """Render a scalar in the engine's filter syntax.

    Strings containing delimiter characters are wrapped in backticks.

    Raises:
        ValueError: If a string needs backticks but already contains one
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value)
    if isinstance(value, str) and DELIMITER_CHARS.intersection(text):
        if "`" in text:
            raise ValueError(f"Cannot escape filter value containing a backtick: {text!r}")
        return f"`{text}`"
    return text


def _render_list(values: Iterable[Any]) -> str:
    return "[" + ",".join(render_value(v) for v in values) + "]"


def _compile_operator_map(field: str, operator_map: OperatorMap) -> Optional[str]:
    """Render an operator map; parenthesized only when it has more than one clause."""
    clauses = []
    for operator, value in operator_map.constraints:
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            clauses.append(f"{field}{operator.token}{_render_list(value)}")
        else:
            clauses.append(f"{field}{operator.token}{render_value(value)}")

    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return f"({AND.join(clauses)})"


def _compile_clause(field: str, value: PredicateValue) -> Optional[str]:
    if value is None:
        return None

    if isinstance(value, OperatorMap):
        return _compile_operator_map(field, value)

    if isinstance(value, tuple):
        if not value:
            return None
        if isinstance(value[0], OperatorMap):
            groups = [
                group for group in (_compile_operator_map(field, m) for m in value)
                if group
            ]
            if not groups:
                return None
            return f"({OR.join(groups)})"
        return f"{field}{FilterOperator.EQ.token}{_render_list(value)}"

    return f"{field}{FilterOperator.EQ.token}{render_value(value)}"


def compile_filter(
    predicate: Union[Predicate, Mapping, Iterable[Tuple[str, Any]]],
    schema: Optional[Union[Schema, Mapping]] = None,
) -> str:
    """Compile a structured predicate into a filter_by string.

    Clauses are joined with ``&&`` in predicate order. Field names are not
    required to exist in the schema (nested fields such as ``team.id`` are
    valid on the engine); unknown names are only logged.

    Args:
        predicate: Predicate, mapping of field -> value, or (field, value) pairs
        schema: Optional schema used to report unknown field names

    Returns:
        Filter string, or an empty string when every clause was dropped.
        Callers must treat the empty string as "no filter".

    Raises:
        UnknownOperatorError: If an operator map uses an unknown operator
        ValueError: If a value cannot be rendered
    """
    predicate = Predicate.coerce(predicate)

    if schema is not None:
        schema = Schema.coerce(schema)
        for field in predicate.fields:
            if field not in schema:
                logger.debug(f"Filter field '{field}' is not declared in the schema")

    clauses = []
    for field, value in predicate:
        clause = _compile_clause(field, value)
        if clause:
            clauses.append(clause)

    return AND.join(clauses)
