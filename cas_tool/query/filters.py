"""
CAS Tool is a command line interface and client library for querying
and feeding a Cloud App Security tenant.
Copyright (C) 2026 CAS Tool Authors

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as
published by the Free Software Foundation, either version 3 of the
License, or (at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple

from cas_tool.exceptions import ValidationError


class FilterOperator(str, Enum):
    EQ = "eq"
    NEQ = "neq"
    CONTAINS = "contains"
    NCONTAINS = "ncontains"
    STARTSWITH = "startswith"
    DOESNOTSTARTWITH = "doesnotstartwith"
    TEXT = "text"


@dataclass(frozen=True)
class FilterClause:
    field: str
    operator: FilterOperator
    value: Any


@dataclass(frozen=True)
class FilterParam:
    """Declares how one named list parameter becomes a filter clause.

    name: attribute on the params object, also used in error messages
    field: wire field the clause constrains
    value_map: label -> ordinal table for enum valued parameters
    switch_value: for boolean switches, the value sent when the switch is on
    """

    name: str
    field: str
    operator: FilterOperator = FilterOperator.EQ
    value_map: Optional[Mapping[str, int]] = None
    switch_value: Optional[Any] = None

    @property
    def option(self) -> str:
        return "--" + self.name.replace("_", "-")

    def is_switch(self) -> bool:
        return self.switch_value is not None


class FilterSet:
    """Ordered clauses, combined with an implicit AND."""

    _clauses: List[FilterClause]

    def __init__(self, clauses: Optional[Sequence[FilterClause]] = None) -> None:
        self._clauses = list(clauses or [])

    def add(self, clause: FilterClause) -> None:
        self._clauses.append(clause)

    @property
    def clauses(self) -> List[FilterClause]:
        return list(self._clauses)

    def is_empty(self) -> bool:
        return len(self._clauses) == 0

    def __len__(self) -> int:
        return len(self._clauses)

    def __iter__(self) -> Iterator[FilterClause]:
        return iter(self._clauses)


def is_supplied(value: Any) -> bool:
    if value is None or value is False:
        return False
    if isinstance(value, (list, tuple, str)) and len(value) == 0:
        return False
    return True


def check_exclusive(params: Any, filter_params: Sequence[FilterParam], pairs: Sequence[Tuple[str, str]]) -> None:
    options = {param.name: param.option for param in filter_params}
    for first, second in pairs:
        if is_supplied(getattr(params, first, None)) and is_supplied(getattr(params, second, None)):
            raise ValidationError(
                "options are mutually exclusive",
                options.get(first, first),
                options.get(second, second),
            )


def map_labels(param: FilterParam, labels: Sequence[str]) -> List[int]:
    value_map = param.value_map or {}
    ordinals = []
    for label in labels:
        if label not in value_map:
            raise ValidationError(
                f"unknown value for {param.option}",
                label,
                f"allowed values are {', '.join(value_map)}",
            )
        ordinals.append(value_map[label])
    return ordinals


def clause_value(param: FilterParam, value: Any) -> Any:
    if param.is_switch():
        return param.switch_value

    if param.operator in (FilterOperator.EQ, FilterOperator.NEQ):
        values = list(value) if isinstance(value, (list, tuple)) else [value]
        if param.value_map is not None:
            return map_labels(param, values)
        return values

    if isinstance(value, (list, tuple)):
        raise ValidationError(f"{param.option} accepts a single value")
    return value


def build_filter_set(
    params: Any,
    filter_params: Sequence[FilterParam],
    exclusive_pairs: Sequence[Tuple[str, str]] = (),
) -> FilterSet:
    """Turn the supplied filter parameters into clauses, in declaration order."""
    check_exclusive(params, filter_params, exclusive_pairs)

    filter_set = FilterSet()
    for param in filter_params:
        value = getattr(params, param.name, None)
        if not is_supplied(value):
            continue
        filter_set.add(FilterClause(param.field, param.operator, clause_value(param, value)))

    return filter_set
