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
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, TextIO, Tuple

from cas_tool import cli_output
from cas_tool.backend.client import Client as BackendClient
from cas_tool.backend.params import ListParams
from cas_tool.exceptions import CasError, ValidationError
from cas_tool.resources import ResourceKind


class QueryMode(Enum):
    FETCH = "fetch"
    LIST = "list"


@dataclass
class QueryArgs:
    kind: ResourceKind
    identities: List[str]
    params: ListParams


def select_mode(args: QueryArgs) -> QueryMode:
    """Decide once, at entry, whether this call fetches by id or lists by filter."""
    if not args.identities:
        return QueryMode.LIST

    if args.params.has_list_options():
        supplied = args.params.supplied_filters()
        detail = f" ({', '.join(supplied)})" if supplied else ""
        raise ValidationError(
            f"--identity cannot be combined with filter, sort or paging options{detail}"
        )
    return QueryMode.FETCH


def run(
    backend: BackendClient, args: QueryArgs, out: Optional[TextIO] = None
) -> Tuple[int, str]:
    out = out or sys.stdout
    try:
        mode = select_mode(args)
    except ValidationError as err:
        return 1, str(err)

    if mode is QueryMode.FETCH:
        return _fetch(backend, args, out)
    return _list(backend, args, out)


def _fetch(backend: BackendClient, args: QueryArgs, out: TextIO) -> Tuple[int, str]:
    logging.info("fetching %d %s...", len(args.identities), args.kind.value)
    results = backend.fetch_many(args.kind, args.identities)

    failures = []
    for result in results:
        if result.success and result.record is not None:
            cli_output.print_record(result.record, out)
        else:
            logging.error(cli_output.fetch_failure_msg(result))
            failures.append(result.identity)

    if failures:
        return 1, f"{len(failures)} of {len(results)} {args.kind.value} could not be fetched"

    return 0, ""


def _list(backend: BackendClient, args: QueryArgs, out: TextIO) -> Tuple[int, str]:
    try:
        res = backend.list_records(args.params)
    except CasError as err:
        return 1, str(err)

    for record in res.data.records:
        cli_output.print_record(record, out)

    logging.info(
        "%d %s returned (skip %d)%s",
        len(res.data.records),
        args.kind.value,
        args.params.skip,
        "" if res.data.total is None else f", {res.data.total} in total",
    )
    if res.data.has_next:
        logging.info(
            "more results are available, rerun with --skip %d",
            args.params.skip + len(res.data.records),
        )
    return 0, ""
