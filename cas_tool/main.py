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
import os
import sys
from functools import wraps
from inspect import signature
from typing import Any, Callable, List, Optional, Tuple, TypeAlias

import typer
from typer_config import use_yaml_config
from typing_extensions import Annotated

from cas_tool import util as cas_utils
from cas_tool.backend.params import (
    ListAccountsParams,
    ListActivitiesParams,
    ListAlertsParams,
    ListFilesParams,
)
from cas_tool.command import (
    check_connection,
    discovery_upload,
    query_resources,
    set_alert,
)
from cas_tool.command.standard_args import (
    DEFAULT_TIMEOUT,
    APIHostType,
    APITokenType,
    AppIdNotType,
    AppIdType,
    AppNameNotType,
    AppNameType,
    IdentityFileType,
    IdentityType,
    SkipType,
    SortDirectionType,
    TimeoutType,
    UserNameType,
    choices,
)
from cas_tool.constants import (
    AFFILIATIONS,
    CONFIG_FILE,
    DEFAULT_RESULT_SET_SIZE,
    DISCOVERY_LOG_TYPES,
    FILE_TYPES,
    IP_CATEGORIES,
    RESOLUTION_STATUSES,
    SEVERITIES,
    SHARING_LEVELS,
    VERSION_STRING,
)
from cas_tool.exceptions import CasError, MissingCredentialError
from cas_tool.resources import ACCOUNTS, ACTIVITIES, ALERTS, FILES, ResourceKind

app = typer.Typer(
    help="CAS Tool: query accounts, activities, alerts and files of a Cloud App Security "
    "tenant and upload discovery logs.",
    add_completion=True,
    rich_markup_mode="rich",
)


CasCommand: TypeAlias = Callable[..., Tuple[int, str]]


def call_and_exit(func: CasCommand) -> Callable[..., None]:
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> None:
        return_code, out = func(*args, **kwargs)

        if return_code == 1 and out:
            logging.error(str(out).replace("\n", " "))
        elif return_code == 0 and out:
            logging.info(out)

        raise typer.Exit(code=return_code)

    # typer reads the signature of the wrapped function
    wrapper.__signature__ = signature(func, eval_str=True)  # type: ignore[attr-defined]
    return wrapper


def app_command_with_config(
    **command_kwargs: Any,
) -> Callable[[CasCommand], Callable[..., None]]:
    """
    Registers a command that also reads its options from the YAML settings file.

    Args:
        **command_kwargs: Keyword arguments to pass to app.command()

    Returns:
        A decorator function that applies both decorators
    """

    def decorator(func: CasCommand) -> Callable[..., None]:
        conf = None
        if os.path.exists(CONFIG_FILE):
            # typer_config warns about a missing file, only pass it when present
            conf = CONFIG_FILE

        func_2 = call_and_exit(func)
        func_2 = use_yaml_config(default_value=conf)(func_2)
        func_2 = app.command(**command_kwargs)(func_2)
        return func_2

    return decorator


def print_and_exit(message: str) -> None:
    print(message)
    raise typer.Exit(code=0)


def _query(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    kind: ResourceKind,
    api_token: Optional[str],
    api_host: Optional[str],
    timeout: float,
    identity: Optional[List[str]],
    identity_file: Optional[str],
    params: Any,
) -> Tuple[int, str]:
    args = query_resources.QueryArgs(
        kind=kind,
        identities=cas_utils.read_identities(identity, identity_file),
        params=params,
    )
    return query_resources.run(cas_utils.get_backend(api_token, api_host, timeout), args)


@app.callback()
def global_options(
    # pylint: disable=unused-argument
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show the version and exit",
        is_eager=True,
        callback=lambda v: print_and_exit(VERSION_STRING) if v else None,
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode"),
) -> None:
    """
    CAS Tool: a command line tool for a Cloud App Security tenant.
    """
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger("urllib3").setLevel(logging.WARNING)


@app_command_with_config(help="Fetch accounts by id, or list accounts matching filters.")
def accounts(  # pylint: disable=too-many-arguments,too-many-positional-arguments,too-many-locals
    api_token: APITokenType = None,
    api_host: APIHostType = None,
    timeout: TimeoutType = DEFAULT_TIMEOUT,
    identity: IdentityType = None,
    identity_file: IdentityFileType = None,
    skip: SkipType = 0,
    limit: Annotated[int, typer.Option(help="Maximum accounts to return, 1-5000.")] = (
        DEFAULT_RESULT_SET_SIZE
    ),
    sort_by: Annotated[
        Optional[str], typer.Option(help=f"Sort field: {choices(list(ACCOUNTS.sort_labels))}.")
    ] = None,
    sort_direction: SortDirectionType = None,
    user_name: UserNameType = None,
    affiliation: Annotated[
        Optional[List[str]], typer.Option(help=f"One of: {choices(list(AFFILIATIONS))}.")
    ] = None,
    app_id: AppIdType = None,
    app_id_not: AppIdNotType = None,
    app_name: AppNameType = None,
    app_name_not: AppNameNotType = None,
    user_domain: Annotated[
        Optional[List[str]], typer.Option(help="Limit to a user domain.")
    ] = None,
    user_domain_not: Annotated[
        Optional[List[str]], typer.Option(help="Exclude a user domain.")
    ] = None,
) -> Tuple[int, str]:
    params = ListAccountsParams(
        skip=skip,
        limit=limit,
        sort_by=sort_by,
        sort_direction=sort_direction,
        user_name=user_name,
        affiliation=affiliation,
        app_id=app_id,
        app_id_not=app_id_not,
        app_name=app_name,
        app_name_not=app_name_not,
        user_domain=user_domain,
        user_domain_not=user_domain_not,
    )
    return _query(
        ResourceKind.ACCOUNTS, api_token, api_host, timeout, identity, identity_file, params
    )


@app_command_with_config(help="Fetch activities by id, or list activities matching filters.")
def activities(  # pylint: disable=too-many-arguments,too-many-positional-arguments,too-many-locals
    api_token: APITokenType = None,
    api_host: APIHostType = None,
    timeout: TimeoutType = DEFAULT_TIMEOUT,
    identity: IdentityType = None,
    identity_file: IdentityFileType = None,
    skip: SkipType = 0,
    limit: Annotated[int, typer.Option(help="Maximum activities to return, 1-10000.")] = (
        DEFAULT_RESULT_SET_SIZE
    ),
    sort_by: Annotated[
        Optional[str], typer.Option(help=f"Sort field: {choices(list(ACTIVITIES.sort_labels))}.")
    ] = None,
    sort_direction: SortDirectionType = None,
    user_name: UserNameType = None,
    app_id: AppIdType = None,
    app_id_not: AppIdNotType = None,
    app_name: AppNameType = None,
    app_name_not: AppNameNotType = None,
    event_type_name: Annotated[
        Optional[List[str]], typer.Option(help="Limit to an activity type.")
    ] = None,
    event_type_name_not: Annotated[
        Optional[List[str]], typer.Option(help="Exclude an activity type.")
    ] = None,
    ip_category: Annotated[
        Optional[List[str]], typer.Option(help=f"One of: {choices(list(IP_CATEGORIES))}.")
    ] = None,
    ip_category_not: Annotated[
        Optional[List[str]], typer.Option(help=f"One of: {choices(list(IP_CATEGORIES))}.")
    ] = None,
    ip_starts_with: Annotated[Optional[str], typer.Option(help="IP address prefix.")] = None,
    ip_does_not_start_with: Annotated[
        Optional[str], typer.Option(help="Excluded IP address prefix.")
    ] = None,
    user_agent_contains: Annotated[
        Optional[str], typer.Option(help="Text the user agent contains.")
    ] = None,
    user_agent_not_contains: Annotated[
        Optional[str], typer.Option(help="Text the user agent does not contain.")
    ] = None,
    text: Annotated[Optional[str], typer.Option(help="Free text search.")] = None,
    admin_events: Annotated[bool, typer.Option(help="Only administrative activities.")] = False,
    non_admin_events: Annotated[
        bool, typer.Option(help="Only non administrative activities.")
    ] = False,
) -> Tuple[int, str]:
    params = ListActivitiesParams(
        skip=skip,
        limit=limit,
        sort_by=sort_by,
        sort_direction=sort_direction,
        user_name=user_name,
        app_id=app_id,
        app_id_not=app_id_not,
        app_name=app_name,
        app_name_not=app_name_not,
        event_type_name=event_type_name,
        event_type_name_not=event_type_name_not,
        ip_category=ip_category,
        ip_category_not=ip_category_not,
        ip_starts_with=ip_starts_with,
        ip_does_not_start_with=ip_does_not_start_with,
        user_agent_contains=user_agent_contains,
        user_agent_not_contains=user_agent_not_contains,
        text=text,
        admin_events=admin_events,
        non_admin_events=non_admin_events,
    )
    return _query(
        ResourceKind.ACTIVITIES, api_token, api_host, timeout, identity, identity_file, params
    )


@app_command_with_config(help="Fetch alerts by id, or list alerts matching filters.")
def alerts(  # pylint: disable=too-many-arguments,too-many-positional-arguments,too-many-locals
    api_token: APITokenType = None,
    api_host: APIHostType = None,
    timeout: TimeoutType = DEFAULT_TIMEOUT,
    identity: IdentityType = None,
    identity_file: IdentityFileType = None,
    skip: SkipType = 0,
    limit: Annotated[int, typer.Option(help="Maximum alerts to return, 1-10000.")] = (
        DEFAULT_RESULT_SET_SIZE
    ),
    sort_by: Annotated[
        Optional[str], typer.Option(help=f"Sort field: {choices(list(ALERTS.sort_labels))}.")
    ] = None,
    sort_direction: SortDirectionType = None,
    severity: Annotated[
        Optional[List[str]], typer.Option(help=f"One of: {choices(list(SEVERITIES))}.")
    ] = None,
    severity_not: Annotated[
        Optional[List[str]], typer.Option(help=f"One of: {choices(list(SEVERITIES))}.")
    ] = None,
    resolution_status: Annotated[
        Optional[List[str]], typer.Option(help=f"One of: {choices(list(RESOLUTION_STATUSES))}.")
    ] = None,
    resolution_status_not: Annotated[
        Optional[List[str]], typer.Option(help=f"One of: {choices(list(RESOLUTION_STATUSES))}.")
    ] = None,
    user_name: UserNameType = None,
    app_id: AppIdType = None,
    app_id_not: AppIdNotType = None,
    app_name: AppNameType = None,
    app_name_not: AppNameNotType = None,
    policy: Annotated[Optional[List[str]], typer.Option(help="Limit to a policy id.")] = None,
    risk: Annotated[Optional[List[int]], typer.Option(help="Limit to a risk score.")] = None,
    source: Annotated[Optional[List[str]], typer.Option(help="Limit to an alert source.")] = None,
    read: Annotated[bool, typer.Option(help="Only alerts already read.")] = False,
    unread: Annotated[bool, typer.Option(help="Only unread alerts.")] = False,
) -> Tuple[int, str]:
    params = ListAlertsParams(
        skip=skip,
        limit=limit,
        sort_by=sort_by,
        sort_direction=sort_direction,
        severity=severity,
        severity_not=severity_not,
        resolution_status=resolution_status,
        resolution_status_not=resolution_status_not,
        user_name=user_name,
        app_id=app_id,
        app_id_not=app_id_not,
        app_name=app_name,
        app_name_not=app_name_not,
        policy=policy,
        risk=risk,
        source=source,
        read=read,
        unread=unread,
    )
    return _query(
        ResourceKind.ALERTS, api_token, api_host, timeout, identity, identity_file, params
    )


@app_command_with_config(help="Fetch files by id, or list files matching filters.")
def files(  # pylint: disable=too-many-arguments,too-many-positional-arguments,too-many-locals
    api_token: APITokenType = None,
    api_host: APIHostType = None,
    timeout: TimeoutType = DEFAULT_TIMEOUT,
    identity: IdentityType = None,
    identity_file: IdentityFileType = None,
    skip: SkipType = 0,
    limit: Annotated[int, typer.Option(help="Maximum files to return, 1-5000.")] = (
        DEFAULT_RESULT_SET_SIZE
    ),
    sort_by: Annotated[
        Optional[str], typer.Option(help=f"Sort field: {choices(list(FILES.sort_labels))}.")
    ] = None,
    sort_direction: SortDirectionType = None,
    file_type: Annotated[
        Optional[List[str]], typer.Option(help=f"One of: {choices(list(FILE_TYPES))}.")
    ] = None,
    file_type_not: Annotated[
        Optional[List[str]], typer.Option(help=f"One of: {choices(list(FILE_TYPES))}.")
    ] = None,
    sharing: Annotated[
        Optional[List[str]], typer.Option(help=f"One of: {choices(list(SHARING_LEVELS))}.")
    ] = None,
    sharing_not: Annotated[
        Optional[List[str]], typer.Option(help=f"One of: {choices(list(SHARING_LEVELS))}.")
    ] = None,
    extension: Annotated[Optional[List[str]], typer.Option(help="Limit to an extension.")] = None,
    extension_not: Annotated[
        Optional[List[str]], typer.Option(help="Exclude an extension.")
    ] = None,
    domain: Annotated[Optional[List[str]], typer.Option(help="Limit to an owner domain.")] = None,
    domain_not: Annotated[
        Optional[List[str]], typer.Option(help="Exclude an owner domain.")
    ] = None,
    file_owner: Annotated[Optional[List[str]], typer.Option(help="Limit to an owner.")] = None,
    mime_type: Annotated[Optional[List[str]], typer.Option(help="Limit to a MIME type.")] = None,
    mime_type_not: Annotated[
        Optional[List[str]], typer.Option(help="Exclude a MIME type.")
    ] = None,
    name: Annotated[Optional[List[str]], typer.Option(help="Limit to a file name.")] = None,
    app_id: AppIdType = None,
    app_id_not: AppIdNotType = None,
    app_name: AppNameType = None,
    app_name_not: AppNameNotType = None,
    folder: Annotated[bool, typer.Option(help="Only folders.")] = False,
    folder_not: Annotated[bool, typer.Option(help="Exclude folders.")] = False,
    quarantined: Annotated[bool, typer.Option(help="Only quarantined files.")] = False,
    quarantined_not: Annotated[bool, typer.Option(help="Exclude quarantined files.")] = False,
    trashed: Annotated[bool, typer.Option(help="Only trashed files.")] = False,
    trashed_not: Annotated[bool, typer.Option(help="Exclude trashed files.")] = False,
) -> Tuple[int, str]:
    params = ListFilesParams(
        skip=skip,
        limit=limit,
        sort_by=sort_by,
        sort_direction=sort_direction,
        file_type=file_type,
        file_type_not=file_type_not,
        sharing=sharing,
        sharing_not=sharing_not,
        extension=extension,
        extension_not=extension_not,
        domain=domain,
        domain_not=domain_not,
        file_owner=file_owner,
        mime_type=mime_type,
        mime_type_not=mime_type_not,
        name=name,
        app_id=app_id,
        app_id_not=app_id_not,
        app_name=app_name,
        app_name_not=app_name_not,
        folder=folder,
        folder_not=folder_not,
        quarantined=quarantined,
        quarantined_not=quarantined_not,
        trashed=trashed,
        trashed_not=trashed_not,
    )
    return _query(ResourceKind.FILES, api_token, api_host, timeout, identity, identity_file, params)


@app_command_with_config(name="set-alert", help="Mark an alert read or unread, or dismiss it.")
def set_alert_cmd(  # pylint: disable=too-many-positional-arguments
    identity: Annotated[str, typer.Option(help="The alert id.")],
    api_token: APITokenType = None,
    api_host: APIHostType = None,
    timeout: TimeoutType = DEFAULT_TIMEOUT,
    mark_as: Annotated[Optional[str], typer.Option(help="read or unread")] = None,
    dismiss: Annotated[bool, typer.Option(help="Dismiss the alert.")] = False,
    comment: Annotated[
        Optional[str], typer.Option(help="Comment recorded when dismissing.")
    ] = None,
) -> Tuple[int, str]:
    args = set_alert.SetAlertArgs(
        identity=identity, mark_as=mark_as, dismiss=dismiss, comment=comment
    )
    return set_alert.run(cas_utils.get_backend(api_token, api_host, timeout), args)


@app_command_with_config(
    name="upload-discovery-log", help="Upload device logs to a discovery data source."
)
def upload_discovery_log_cmd(  # pylint: disable=too-many-positional-arguments
    path: Annotated[List[str], typer.Argument(help="Discovery log files to upload.")],
    log_type: Annotated[
        str, typer.Option(help=f"Device log format: {choices(list(DISCOVERY_LOG_TYPES))}.")
    ],
    data_source: Annotated[
        str, typer.Option(help="Name of the discovery data source receiving the logs.")
    ],
    api_token: APITokenType = None,
    api_host: APIHostType = None,
    timeout: TimeoutType = DEFAULT_TIMEOUT,
    delete: Annotated[
        bool, typer.Option(help="Delete each local file once its upload is finalized.")
    ] = False,
) -> Tuple[int, str]:
    args = discovery_upload.DiscoveryUploadArgs(
        paths=path, log_type=log_type, data_source=data_source, delete=delete
    )
    return discovery_upload.run(cas_utils.get_backend(api_token, api_host, timeout), args)


@app_command_with_config(name="check-connection", help="Check your tenant API connection")
def check_connection_cmd(
    api_token: APITokenType = None,
    api_host: APIHostType = None,
    timeout: TimeoutType = DEFAULT_TIMEOUT,
) -> Tuple[int, str]:
    return check_connection.run(cas_utils.get_backend(api_token, api_host, timeout), api_host)


def run() -> None:
    logging.basicConfig(
        format="%(levelname)s: %(message)s",
        level=logging.INFO,
    )

    try:
        app()
    except MissingCredentialError as err:
        logging.error("Credential not found: %s", err)
        sys.exit(1)
    except CasError as err:
        logging.error("%s", err)
        sys.exit(1)
    except Exception as err:  # pylint: disable=broad-except
        # Catch arbitrary exceptions without printing help message
        logging.warning('Unhandled exception: "%s"', err)
        logging.debug("Full error traceback:", exc_info=err)
        sys.exit(1)


if __name__ == "__main__":
    run()
