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
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Pattern, Sequence, Tuple

from cas_tool.constants import (
    AFFILIATIONS,
    APP_IDS,
    FILE_TYPES,
    IP_CATEGORIES,
    RESOLUTION_STATUSES,
    SEVERITIES,
    SHARING_LEVELS,
)
from cas_tool.exceptions import ValidationError
from cas_tool.query.filters import FilterOperator, FilterParam

EQ = FilterOperator.EQ
NEQ = FilterOperator.NEQ

HEX_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")
ACTIVITY_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{20}$")


class ResourceKind(str, Enum):
    ACCOUNTS = "accounts"
    ACTIVITIES = "activities"
    ALERTS = "alerts"
    FILES = "files"


# pylint: disable=too-many-instance-attributes
@dataclass(frozen=True)
class ResourceSpec:
    kind: ResourceKind
    identity_pattern: Pattern[str]
    identity_description: str
    max_limit: int
    sort_labels: Tuple[str, ...]
    sort_remap: Mapping[str, str] = field(default_factory=dict)
    filter_params: Tuple[FilterParam, ...] = ()
    exclusive_pairs: Tuple[Tuple[str, str], ...] = ()
    id_field: str = "_id"

    @property
    def path(self) -> str:
        return f"/{self.kind.value}/"

    def item_path(self, identity: str) -> str:
        return f"/{self.kind.value}/{identity}/"


def _app_params(field_name: str) -> Tuple[FilterParam, ...]:
    return (
        FilterParam("app_id", field_name, EQ),
        FilterParam("app_id_not", field_name, NEQ),
        FilterParam("app_name", field_name, EQ, value_map=APP_IDS),
        FilterParam("app_name_not", field_name, NEQ, value_map=APP_IDS),
    )


_APP_EXCLUSIVE = (("app_id", "app_name"), ("app_id_not", "app_name_not"))

ACCOUNTS = ResourceSpec(
    kind=ResourceKind.ACCOUNTS,
    identity_pattern=HEX_ID_PATTERN,
    identity_description="a 24 character hexadecimal id",
    max_limit=5000,
    sort_labels=("UserName", "LastSeen"),
    sort_remap={"LastSeen": "lastSeen"},
    filter_params=(
        FilterParam("user_name", "username"),
        FilterParam("affiliation", "affiliation", EQ, value_map=AFFILIATIONS),
        *_app_params("service"),
        FilterParam("user_domain", "domain", EQ),
        FilterParam("user_domain_not", "domain", NEQ),
    ),
    exclusive_pairs=_APP_EXCLUSIVE,
)

ACTIVITIES = ResourceSpec(
    kind=ResourceKind.ACTIVITIES,
    identity_pattern=ACTIVITY_ID_PATTERN,
    identity_description="a 20 character id of letters, digits, _ or -",
    max_limit=10000,
    sort_labels=("Date", "Created"),
    filter_params=(
        FilterParam("user_name", "user.username"),
        *_app_params("service"),
        FilterParam("event_type_name", "activity.actionType", EQ),
        FilterParam("event_type_name_not", "activity.actionType", NEQ),
        FilterParam("ip_category", "ip.category", EQ, value_map=IP_CATEGORIES),
        FilterParam("ip_category_not", "ip.category", NEQ, value_map=IP_CATEGORIES),
        FilterParam("ip_starts_with", "ip.address", FilterOperator.STARTSWITH),
        FilterParam("ip_does_not_start_with", "ip.address", FilterOperator.DOESNOTSTARTWITH),
        FilterParam("user_agent_contains", "userAgent.userAgent", FilterOperator.CONTAINS),
        FilterParam("user_agent_not_contains", "userAgent.userAgent", FilterOperator.NCONTAINS),
        FilterParam("text", "text", FilterOperator.TEXT),
        FilterParam("admin_events", "activity.type", EQ, switch_value=True),
        FilterParam("non_admin_events", "activity.type", EQ, switch_value=False),
    ),
    exclusive_pairs=(("admin_events", "non_admin_events"), *_APP_EXCLUSIVE),
)

ALERTS = ResourceSpec(
    kind=ResourceKind.ALERTS,
    identity_pattern=HEX_ID_PATTERN,
    identity_description="a 24 character hexadecimal id",
    max_limit=10000,
    sort_labels=("Date", "Severity", "ResolutionStatus"),
    sort_remap={"ResolutionStatus": "status"},
    filter_params=(
        FilterParam("severity", "severity", EQ, value_map=SEVERITIES),
        FilterParam("severity_not", "severity", NEQ, value_map=SEVERITIES),
        FilterParam("resolution_status", "resolutionStatus", EQ, value_map=RESOLUTION_STATUSES),
        FilterParam(
            "resolution_status_not", "resolutionStatus", NEQ, value_map=RESOLUTION_STATUSES
        ),
        FilterParam("user_name", "entity.user"),
        *_app_params("entity.service"),
        FilterParam("policy", "entity.policy"),
        FilterParam("risk", "risk"),
        FilterParam("source", "source"),
        FilterParam("read", "read", EQ, switch_value=True),
        FilterParam("unread", "read", EQ, switch_value=False),
    ),
    exclusive_pairs=(("read", "unread"), *_APP_EXCLUSIVE),
)

FILES = ResourceSpec(
    kind=ResourceKind.FILES,
    identity_pattern=HEX_ID_PATTERN,
    identity_description="a 24 character hexadecimal id",
    max_limit=5000,
    sort_labels=("DateModified",),
    sort_remap={"DateModified": "dateModified"},
    filter_params=(
        FilterParam("file_type", "fileType", EQ, value_map=FILE_TYPES),
        FilterParam("file_type_not", "fileType", NEQ, value_map=FILE_TYPES),
        FilterParam("sharing", "sharing", EQ, value_map=SHARING_LEVELS),
        FilterParam("sharing_not", "sharing", NEQ, value_map=SHARING_LEVELS),
        FilterParam("extension", "extension"),
        FilterParam("extension_not", "extension", NEQ),
        FilterParam("domain", "domain"),
        FilterParam("domain_not", "domain", NEQ),
        FilterParam("file_owner", "owner.entity"),
        FilterParam("mime_type", "mimeType"),
        FilterParam("mime_type_not", "mimeType", NEQ),
        FilterParam("name", "filename"),
        *_app_params("service"),
        FilterParam("folder", "folder", EQ, switch_value=True),
        FilterParam("folder_not", "folder", EQ, switch_value=False),
        FilterParam("quarantined", "quarantined", EQ, switch_value=True),
        FilterParam("quarantined_not", "quarantined", EQ, switch_value=False),
        FilterParam("trashed", "trashed", EQ, switch_value=True),
        FilterParam("trashed_not", "trashed", EQ, switch_value=False),
    ),
    exclusive_pairs=(
        ("folder", "folder_not"),
        ("quarantined", "quarantined_not"),
        ("trashed", "trashed_not"),
        *_APP_EXCLUSIVE,
    ),
)

RESOURCE_SPECS: Dict[ResourceKind, ResourceSpec] = {
    spec.kind: spec for spec in (ACCOUNTS, ACTIVITIES, ALERTS, FILES)
}


def get_spec(kind: ResourceKind) -> ResourceSpec:
    return RESOURCE_SPECS[ResourceKind(kind)]


def validate_identity(kind: ResourceKind, identity: str) -> str:
    spec = get_spec(kind)
    identity = (identity or "").strip()
    if not spec.identity_pattern.match(identity):
        raise ValidationError(
            f"malformed {kind.value} identity, expected {spec.identity_description}", identity
        )
    return identity


def filter_param_names(kind: ResourceKind) -> Sequence[str]:
    return [param.name for param in get_spec(kind).filter_params]
