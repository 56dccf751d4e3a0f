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
from typing import Annotated, List, Optional, TypeAlias

import typer

from cas_tool.constants import DEFAULT_TIMEOUT_SECONDS

API_DOCUMENTATION = "https://learn.microsoft.com/defender-cloud-apps/api-introduction"


def choices(values: List[str]) -> str:
    return ", ".join(values)


APITokenType: TypeAlias = Annotated[
    Optional[str],
    typer.Option(
        envvar="CAS_API_TOKEN",
        help=f"The tenant API token to use. See: {API_DOCUMENTATION}",
    ),
]

APIHostType: TypeAlias = Annotated[
    Optional[str],
    typer.Option(
        envvar="CAS_API_HOST",
        help="The tenant host to use, without a scheme, e.g. contoso.portal.cloudappsecurity.com",
    ),
]

TimeoutType: TypeAlias = Annotated[
    float,
    typer.Option(envvar="CAS_TIMEOUT", help="Seconds to wait for each HTTP request."),
]

IdentityType: TypeAlias = Annotated[
    Optional[List[str]],
    typer.Option(
        "--identity",
        help="Fetch a single item by id. Repeat the flag to fetch more than one item.",
    ),
]

IdentityFileType: TypeAlias = Annotated[
    Optional[str],
    typer.Option(help="Read ids to fetch from a file, one per line. Use - to read stdin."),
]

SkipType: TypeAlias = Annotated[
    int, typer.Option(help="Number of items to skip, use it to page through results.")
]

SortDirectionType: TypeAlias = Annotated[
    Optional[str],
    typer.Option(help="Sort direction: asc or desc. Must be given together with --sort-by."),
]

AppIdType: TypeAlias = Annotated[
    Optional[List[int]], typer.Option(help="Limit to an app id. Repeat for more than one.")
]

AppIdNotType: TypeAlias = Annotated[
    Optional[List[int]], typer.Option(help="Exclude an app id. Repeat for more than one.")
]

AppNameType: TypeAlias = Annotated[
    Optional[List[str]],
    typer.Option(help="Limit to a well known app, e.g. Box or Office_365. Repeat for more than one."),
]

AppNameNotType: TypeAlias = Annotated[
    Optional[List[str]],
    typer.Option(help="Exclude a well known app. Repeat for more than one."),
]

UserNameType: TypeAlias = Annotated[
    Optional[List[str]], typer.Option(help="Limit to a user name. Repeat for more than one.")
]

DEFAULT_TIMEOUT = float(DEFAULT_TIMEOUT_SECONDS)
