"""History queries: TFVC changesets and automated test results."""
from datetime import datetime, timedelta
from enum import IntEnum
from typing import Any, Dict, Optional

import httpx

from .client import call_api, call_api_raw
from .credentials import Credential
from .errors import InvalidArgumentError
from .utils.helpers import DEFAULT_HOST, base_uri, require, sortable_date

CHANGESETS_PATH = "/_apis/tfvc/changesets"
TEST_HISTORY_PATH = "/_apis/test/Results/testhistory"

CHANGESETS_API_VERSION = "4.1"
TEST_HISTORY_API_VERSION = "5.0-preview.1"

DEFAULT_LOOKBACK = timedelta(days=1)


class ResultGroupBy(IntEnum):
    BRANCH = 1
    ENVIRONMENT = 2


def _now() -> datetime:
    return datetime.now()


def _dispatch(
        uri: str,
        method: str,
        body: Optional[Dict[str, Any]],
        credential: Optional[Credential],
        token: Optional[str],
        dry_run: bool,
        raw: bool,
        client: Optional[httpx.Client],
) -> Any:
    call = call_api_raw if raw else call_api
    return call(
        uri,
        method,
        body,
        credential=credential,
        token=token,
        dry_run=dry_run,
        client=client,
    )


def get_changeset_history(
        organization: str,
        project: str,
        item_path: str,
        *,
        credential: Optional[Credential] = None,
        token: Optional[str] = None,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
        author: Optional[str] = None,
        top: Optional[int] = None,
        api_version: str = CHANGESETS_API_VERSION,
        host: str = DEFAULT_HOST,
        dry_run: bool = False,
        raw: bool = False,
        client: Optional[httpx.Client] = None,
) -> Any:
    """
    List TFVC changesets touching ``item_path`` within a date window.

    The window defaults to the last day: ``from_date`` is ``to_date`` minus
    one day and ``to_date`` is now. Dates are sent in sortable ISO-8601.

    Returns the parsed JSON (``{"count": ..., "value": [...]}``), or the full
    ``ApiResponse`` when ``raw`` is set.
    """
    require(item_path, "item_path")
    uri = base_uri(organization, project, host) + CHANGESETS_PATH

    to_date = to_date or _now()
    from_date = from_date or to_date - DEFAULT_LOOKBACK
    if from_date > to_date:
        raise InvalidArgumentError("'from_date' must not be later than 'to_date'")

    params: Dict[str, Any] = {
        "api-version": api_version,
        "searchCriteria.itemPath": item_path,
        "searchCriteria.fromDate": sortable_date(from_date),
        "searchCriteria.toDate": sortable_date(to_date),
    }
    if author:
        params["searchCriteria.author"] = author
    if top is not None:
        params["$top"] = top

    return _dispatch(uri, "GET", params, credential, token, dry_run, raw, client)


def get_changeset(
        organization: str,
        project: str,
        changeset_id: int,
        *,
        credential: Optional[Credential] = None,
        token: Optional[str] = None,
        api_version: str = CHANGESETS_API_VERSION,
        host: str = DEFAULT_HOST,
        dry_run: bool = False,
        raw: bool = False,
        client: Optional[httpx.Client] = None,
) -> Any:
    """Fetch a single changeset by number."""
    require(changeset_id, "changeset_id")
    uri = f"{base_uri(organization, project, host)}{CHANGESETS_PATH}/{changeset_id}"
    params = {"api-version": api_version}
    return _dispatch(uri, "GET", params, credential, token, dry_run, raw, client)


def get_changeset_changes(
        organization: str,
        project: str,
        changeset_id: int,
        *,
        credential: Optional[Credential] = None,
        token: Optional[str] = None,
        api_version: str = CHANGESETS_API_VERSION,
        host: str = DEFAULT_HOST,
        dry_run: bool = False,
        raw: bool = False,
        client: Optional[httpx.Client] = None,
) -> Any:
    """List the file changes contained in a changeset."""
    require(changeset_id, "changeset_id")
    uri = f"{base_uri(organization, project, host)}{CHANGESETS_PATH}/{changeset_id}/changes"
    params = {"api-version": api_version}
    return _dispatch(uri, "GET", params, credential, token, dry_run, raw, client)


def get_test_history(
        organization: str,
        project: str,
        test_name: str,
        *,
        credential: Optional[Credential] = None,
        token: Optional[str] = None,
        group_by: int = ResultGroupBy.BRANCH,
        branch: Optional[str] = None,
        build_definition_id: Optional[int] = None,
        trend_days: Optional[int] = None,
        api_version: str = TEST_HISTORY_API_VERSION,
        host: str = DEFAULT_HOST,
        dry_run: bool = False,
        raw: bool = False,
        client: Optional[httpx.Client] = None,
) -> Any:
    """
    Query the result history of an automated test.

    ``test_name`` is the fully qualified automated test name
    (``Namespace.Class.Method``). ``api-version`` travels in the query
    string; the filter goes in the JSON body.
    """
    require(test_name, "test_name")
    uri = (
        f"{base_uri(organization, project, host)}{TEST_HISTORY_PATH}"
        f"?api-version={api_version}"
    )

    body: Dict[str, Any] = {
        "automatedTestName": test_name,
        "GroupBy": int(group_by),
    }
    if branch:
        body["branch"] = branch
    if build_definition_id is not None:
        body["buildDefinitionId"] = build_definition_id
    if trend_days is not None:
        body["trendDays"] = trend_days

    return _dispatch(uri, "POST", body, credential, token, dry_run, raw, client)
