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
from typing import Optional, Tuple

from cas_tool import cli_output
from cas_tool.backend.client import Client as BackendClient
from cas_tool.backend.params import SetAlertParams
from cas_tool.constants import AlertActions
from cas_tool.exceptions import CasError, ValidationError


@dataclass
class SetAlertArgs:
    identity: str
    mark_as: Optional[str]
    dismiss: bool
    comment: Optional[str] = None


def resolve_action(args: SetAlertArgs) -> str:
    if args.dismiss and args.mark_as:
        raise ValidationError("options are mutually exclusive", "--mark-as", "--dismiss")
    if args.dismiss:
        return AlertActions.DISMISS
    if args.mark_as is None:
        raise ValidationError("one of --mark-as or --dismiss is required")
    return args.mark_as.lower()


def run(backend: BackendClient, args: SetAlertArgs) -> Tuple[int, str]:
    try:
        action = resolve_action(args)
        res = backend.set_alert(
            SetAlertParams(identity=args.identity, action=action, comment=args.comment)
        )
    except CasError as err:
        return 1, str(err)

    logging.debug("set alert response: %s", res.data.data)
    cli_output.print_op_success_msg(f"alert {res.data.identity}: {res.data.action}")
    return 0, ""
