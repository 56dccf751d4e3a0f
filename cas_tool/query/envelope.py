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
import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

from cas_tool.constants import VALID_SORT_DIRECTIONS
from cas_tool.exceptions import ValidationError
from cas_tool.query.filters import FilterSet


@dataclass(frozen=True)
class QueryEnvelope:
    skip: int
    limit: int
    sort_field: Optional[str] = None
    sort_direction: Optional[str] = None
    filters: Optional[Dict[str, Dict[str, Any]]] = None

    def to_query_params(self) -> Dict[str, Any]:
        query: Dict[str, Any] = {"skip": self.skip, "limit": self.limit}
        if self.sort_field is not None:
            query["sortField"] = self.sort_field
            query["sortDirection"] = self.sort_direction
        if self.filters is not None:
            query["filters"] = json.dumps(self.filters, separators=(",", ":"))
        return query


def serialize_filters(filter_set: FilterSet) -> Optional[Dict[str, Dict[str, Any]]]:
    """Build the nested filter object, {field: {operator: value}}.

    Clauses on the same field merge under that field. Returns None for an empty set so
    that "no constraint" never turns into an empty filter object.
    """
    if filter_set.is_empty():
        return None

    filters: Dict[str, Dict[str, Any]] = {}
    for clause in filter_set:
        operators = filters.setdefault(clause.field, {})
        if clause.operator.value in operators:
            raise ValidationError(
                "conflicting filters", f"{clause.field} {clause.operator.value} given twice"
            )
        operators[clause.operator.value] = clause.value

    return filters


def resolve_sort_field(
    sort_by: str, sort_labels: Sequence[str], sort_remap: Mapping[str, str]
) -> str:
    if sort_by not in sort_labels:
        raise ValidationError(
            "unknown sort field", sort_by, f"allowed values are {', '.join(sort_labels)}"
        )
    return sort_remap.get(sort_by, sort_by.lower())


def assemble(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    skip: int,
    limit: int,
    sort_by: Optional[str],
    sort_direction: Optional[str],
    filter_set: FilterSet,
    max_limit: int,
    sort_labels: Sequence[str] = (),
    sort_remap: Optional[Mapping[str, str]] = None,
) -> QueryEnvelope:
    if (sort_by is None) != (sort_direction is None):
        raise ValidationError("--sort-by and --sort-direction must be given together")

    if skip < 0:
        raise ValidationError("skip must not be negative", skip)

    if limit < 1 or limit > max_limit:
        raise ValidationError(f"limit must be between 1 and {max_limit}", limit)

    sort_field = None
    if sort_by is not None:
        sort_field = resolve_sort_field(sort_by, sort_labels, sort_remap or {})
        if sort_direction not in VALID_SORT_DIRECTIONS:
            raise ValidationError(
                "unknown sort direction",
                sort_direction,
                f"allowed values are {', '.join(VALID_SORT_DIRECTIONS)}",
            )

    return QueryEnvelope(
        skip=skip,
        limit=limit,
        sort_field=sort_field,
        sort_direction=sort_direction,
        filters=serialize_filters(filter_set),
    )
