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
from dataclasses import dataclass
from typing import List, Tuple

from cas_tool import cli_output
from cas_tool.backend.client import Client as BackendClient
from cas_tool.backend.params import DiscoveryUploadParams
from cas_tool.exceptions import CasError


@dataclass
class DiscoveryUploadArgs:
    paths: List[str]
    log_type: str
    data_source: str
    delete: bool


def run(backend: BackendClient, args: DiscoveryUploadArgs) -> Tuple[int, str]:
    if not args.paths:
        return 1, "at least one discovery log file is required"

    failed = []
    for path in args.paths:
        params = DiscoveryUploadParams(
            path=path,
            log_type=args.log_type,
            data_source=args.data_source,
            delete_after_upload=args.delete,
        )
        try:
            res = backend.upload_discovery_log(params)
        except CasError as err:
            logging.error("%s: %s", path, err)
            failed.append(path)
            continue

        if res.data.delete_error:
            logging.warning(
                "%s was uploaded but could not be deleted: %s", path, res.data.delete_error
            )
        cli_output.print_op_success_msg(f"{path} uploaded to '{res.data.data_source}'")

    if failed:
        return 1, f"{len(failed)} of {len(args.paths)} discovery logs failed to upload"

    return 0, ""
