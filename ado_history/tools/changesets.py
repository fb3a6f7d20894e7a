"""TFVC changeset MCP tools."""
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from .. import history
from ..config import mcp, ADO_HOST, ADO_ORG, ADO_PROJECT, ADO_DRY_RUN
from ..errors import InvalidArgumentError
from .common import server_credential


def _summarize_changeset(cs: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": cs.get("changesetId"),
        "author": (cs.get("author") or {}).get("displayName"),
        "checkedInBy": (cs.get("checkedInBy") or {}).get("displayName"),
        "createdDate": cs.get("createdDate"),
        "comment": cs.get("comment", ""),
    }


@mcp.tool()
def get_changeset_history(
        item_path: str,
        days: int = 1,
        author: Optional[str] = None,
        top: Optional[int] = None,
        project: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
        List TFVC changesets under a server path for the last `days` days.

        Parameters:
        - item_path:
            TFVC server path, always starting with "$/" (e.g. "$/Widgets/src").
        - days:
            Size of the lookback window ending now. Defaults to 1 (the last 24 hours).
        - author:
            Optional display name or unique name to filter on.
        - top:
            Optional maximum number of changesets to return.
        - project:
            Project name. Defaults to the configured `ADO_PROJECT`.

        Returns:
        - A list of dictionaries, newest first, each shaped like:
            {
              "id": <int>,             # changeset number
              "author": <str>,
              "checkedInBy": <str>,
              "createdDate": <str>,    # ISO-8601
              "comment": <str>,
            }
          An empty list is returned when nothing was checked in, or when the
          server runs in dry-run mode.

        Typical usage:
        - "What changed in $/Widgets/src since yesterday?"
        - Pick an `id` and pass it to `get_changeset` for the file list.
    """
    if days <= 0:
        raise InvalidArgumentError(f"days must be positive, got {days}")

    to_date = datetime.now()
    data = history.get_changeset_history(
        ADO_ORG,
        project or ADO_PROJECT,
        item_path,
        credential=server_credential(),
        from_date=to_date - timedelta(days=days),
        to_date=to_date,
        author=author,
        top=top,
        host=ADO_HOST,
        dry_run=ADO_DRY_RUN,
    )
    if not data:
        return []

    return [_summarize_changeset(cs) for cs in data.get("value", [])]


@mcp.tool()
def get_changeset(changeset_id: int, project: Optional[str] = None) -> Dict[str, Any]:
    """
    Retrieve one changeset and the list of files it touched.

    Returns the changeset summary plus "changes": a list of
    {"path": <server path>, "changeType": <str>} entries.
    """
    project = project or ADO_PROJECT
    credential = server_credential()

    cs = history.get_changeset(
        ADO_ORG, project, changeset_id,
        credential=credential, host=ADO_HOST, dry_run=ADO_DRY_RUN,
    )
    if not cs:
        return {}

    changes = history.get_changeset_changes(
        ADO_ORG, project, changeset_id,
        credential=credential, host=ADO_HOST, dry_run=ADO_DRY_RUN,
    ) or {}

    result = _summarize_changeset(cs)
    result["changes"] = [
        {
            "path": (change.get("item") or {}).get("path"),
            "changeType": change.get("changeType"),
        }
        for change in changes.get("value", [])
    ]
    return result
