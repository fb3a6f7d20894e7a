"""Test result history MCP tools."""
from typing import Any, Dict, Optional

from .. import history
from ..config import mcp, ADO_HOST, ADO_ORG, ADO_PROJECT, ADO_DRY_RUN
from ..errors import InvalidArgumentError
from .common import server_credential


@mcp.tool()
def get_test_history(
        test_name: str,
        group_by: str = "branch",
        branch: Optional[str] = None,
        trend_days: Optional[int] = None,
        project: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Fetch the pass/fail history of an automated test.

    Parameters:
    -----------
    test_name : str
        REQUIRED. Fully qualified automated test name, e.g. "NS.Class.Test".

    group_by : str, optional
        "branch" (default) or "environment".

    branch : str, optional
        Restrict the history to one branch, e.g. "refs/heads/main".

    trend_days : int, optional
        Number of days of history to include.

    Returns:
    --------
    Dict[str, Any]
        The raw history payload from Azure DevOps ("resultsForGroup" holds one
        entry per branch or environment). Empty in dry-run mode.
    """
    try:
        grouping = history.ResultGroupBy[group_by.upper()]
    except KeyError:
        raise InvalidArgumentError(f"group_by must be 'branch' or 'environment', got '{group_by}'") from None

    data = history.get_test_history(
        ADO_ORG,
        project or ADO_PROJECT,
        test_name,
        credential=server_credential(),
        group_by=grouping,
        branch=branch,
        trend_days=trend_days,
        host=ADO_HOST,
        dry_run=ADO_DRY_RUN,
    )
    return data or {}
