import json
from datetime import datetime
from unittest.mock import patch

import pytest

from ado_history import history
from ado_history.client import ApiResponse
from ado_history.errors import InvalidArgumentError, RequestError
from ado_history.history import (
    ResultGroupBy,
    get_changeset,
    get_changeset_changes,
    get_changeset_history,
    get_test_history,
)

NOW = datetime(2024, 5, 2, 13, 45, 10)

CHANGESETS = {
    "count": 1,
    "value": [
        {
            "changesetId": 4711,
            "author": {"displayName": "Jamie Doe"},
            "createdDate": "2024-05-02T09:12:00Z",
            "comment": "Fix widget alignment",
        }
    ],
}


@pytest.fixture
def frozen_now():
    with patch.object(history, "_now", return_value=NOW):
        yield NOW


def test_changeset_history_end_to_end(http, credential, frozen_now):
    client = http.client(json=CHANGESETS)

    data = get_changeset_history("Acme", "Widgets", "$/Widgets/src", credential=credential, client=client)

    request = http.last
    assert data == CHANGESETS
    assert request.method == "GET"
    assert str(request.url).startswith("https://dev.azure.com/Acme/Widgets/_apis/tfvc/changesets?")
    assert list(request.url.params.items()) == [
        ("api-version", "4.1"),
        ("searchCriteria.itemPath", "$/Widgets/src"),
        ("searchCriteria.fromDate", "2024-05-01T13:45:10"),
        ("searchCriteria.toDate", "2024-05-02T13:45:10"),
    ]
    assert request.headers["Authorization"].startswith("Basic ")


def test_changeset_history_explicit_window_and_filters(http, credential):
    client = http.client(json=CHANGESETS)

    get_changeset_history(
        "Acme", "Widgets", "$/Widgets",
        credential=credential,
        from_date=datetime(2024, 1, 1),
        to_date=datetime(2024, 1, 31, 23, 59, 59),
        author="Jamie Doe",
        top=50,
        client=client,
    )

    params = http.last.url.params
    assert params["searchCriteria.fromDate"] == "2024-01-01T00:00:00"
    assert params["searchCriteria.toDate"] == "2024-01-31T23:59:59"
    assert params["searchCriteria.author"] == "Jamie Doe"
    assert params["$top"] == "50"


def test_changeset_history_window_ends_at_to_date(http, credential):
    client = http.client(json=CHANGESETS)

    get_changeset_history("Acme", "Widgets", "$/W", credential=credential,
                          to_date=datetime(2024, 3, 1, 0, 0, 0), client=client)

    assert http.last.url.params["searchCriteria.fromDate"] == "2024-02-29T00:00:00"


def test_changeset_history_remote_failure(http, credential, frozen_now):
    client = http.client(status=401, text="Unauthorized")

    with pytest.raises(RequestError) as excinfo:
        get_changeset_history("Acme", "Widgets", "$/Widgets/src", credential=credential, client=client)

    assert excinfo.value.status_code == 401


def test_changeset_history_requires_item_path(credential):
    with pytest.raises(InvalidArgumentError, match="item_path"):
        get_changeset_history("Acme", "Widgets", "", credential=credential)


@pytest.mark.parametrize("org, project", [("", "Widgets"), ("Acme", "")])
def test_query_requires_org_and_project(credential, org, project):
    with pytest.raises(InvalidArgumentError):
        get_changeset_history(org, project, "$/W", credential=credential)


def test_query_requires_credential_or_token(http):
    client = http.client(json={})
    with pytest.raises(InvalidArgumentError):
        get_test_history("Acme", "Widgets", "NS.Class.Test", client=client)
    assert http.sent == []


def test_test_history_end_to_end(http, credential):
    client = http.client(json={"resultsForGroup": []})

    data = get_test_history("Acme", "Widgets", "NS.Class.Test", credential=credential, client=client)

    request = http.last
    assert data == {"resultsForGroup": []}
    assert request.method == "POST"
    assert str(request.url) == (
        "https://dev.azure.com/Acme/Widgets/_apis/test/Results/testhistory"
        "?api-version=5.0-preview.1"
    )
    assert request.content == b'{"automatedTestName":"NS.Class.Test","GroupBy":1}'
    assert request.headers["Content-Type"] == "application/json"


def test_test_history_optional_filters(http, credential):
    client = http.client(json={})

    get_test_history(
        "Acme", "Widgets", "NS.Class.Test",
        token="raw-token",
        group_by=ResultGroupBy.ENVIRONMENT,
        branch="refs/heads/main",
        build_definition_id=12,
        trend_days=7,
        client=client,
    )

    assert json.loads(http.last.content) == {
        "automatedTestName": "NS.Class.Test",
        "GroupBy": 2,
        "branch": "refs/heads/main",
        "buildDefinitionId": 12,
        "trendDays": 7,
    }


def test_test_history_requires_test_name(credential):
    with pytest.raises(InvalidArgumentError, match="test_name"):
        get_test_history("Acme", "Widgets", "", credential=credential)


def test_get_changeset_by_id(http, credential):
    client = http.client(json=CHANGESETS["value"][0])

    data = get_changeset("Acme", "Widgets", 4711, credential=credential, client=client)

    assert data["changesetId"] == 4711
    assert str(http.last.url) == "https://dev.azure.com/Acme/Widgets/_apis/tfvc/changesets/4711?api-version=4.1"


def test_get_changeset_changes(http, credential):
    client = http.client(json={"count": 0, "value": []})

    get_changeset_changes("Acme", "Widgets", 4711, credential=credential, client=client)

    assert http.last.url.path == "/Acme/Widgets/_apis/tfvc/changesets/4711/changes"


def test_raw_mode_returns_envelope(http, credential, frozen_now):
    client = http.client(json=CHANGESETS)

    resp = get_changeset_history("Acme", "Widgets", "$/W", credential=credential, raw=True, client=client)

    assert isinstance(resp, ApiResponse)
    assert resp.status_code == 200
    assert resp.json() == CHANGESETS


def test_dry_run_sends_nothing(http, credential, frozen_now):
    client = http.client(json={})

    assert get_changeset_history("Acme", "Widgets", "$/W", credential=credential,
                                 dry_run=True, client=client) is None
    assert get_test_history("Acme", "Widgets", "NS.T", credential=credential,
                            dry_run=True, client=client) is None
    assert http.sent == []


def test_inverted_window_is_rejected(http, credential):
    client = http.client(json={})

    with pytest.raises(InvalidArgumentError, match="from_date"):
        get_changeset_history(
            "Acme", "Widgets", "$/W",
            credential=credential,
            from_date=datetime(2024, 2, 1),
            to_date=datetime(2024, 1, 1),
            client=client,
        )

    assert http.sent == []
