import io

import anyio
import pytest

from linear_cli.commands import comment, cycle, document, issue, label, project, search, team, user, workflow
from linear_cli.errors import GraphQLError, NotFoundError
from linear_cli.output import Renderer


def _created_issue(identifier: str = "ENG-9") -> dict:
    return {"id": "i9", "identifier": identifier, "title": "New thing", "url": f"https://linear.app/x/{identifier}"}


# -- filters ---------------------------------------------------------------


def test_issue_filter_is_empty_without_flags() -> None:
    assert issue.build_issue_filter(issue.ListIssueOptions()) == {}


def test_issue_filter_only_contains_supplied_flags() -> None:
    options = issue.ListIssueOptions(state="In Progress")

    assert issue.build_issue_filter(options) == {"state": {"name": {"eq": "In Progress"}}}


def test_issue_filter_with_every_flag() -> None:
    options = issue.ListIssueOptions(team="ENG", state="Todo", assignee="Grace Hopper")

    assert issue.build_issue_filter(options) == {
        "team": {"key": {"eq": "ENG"}},
        "state": {"name": {"eq": "Todo"}},
        "assignee": {"name": {"eqIgnoreCase": "Grace Hopper"}},
    }


@pytest.mark.parametrize("value", ["me", "ME"])
def test_issue_filter_assignee_me(value: str) -> None:
    options = issue.ListIssueOptions(assignee=value)

    assert issue.build_issue_filter(options) == {"assignee": {"isMe": {"eq": True}}}


def test_other_filters_are_empty_without_flags() -> None:
    assert project.build_project_filter(project.ListProjectOptions()) == {}
    assert cycle.build_cycle_filter(cycle.ListCycleOptions()) == {}
    assert document.build_document_filter(document.ListDocumentOptions()) == {}
    assert label.build_label_filter(None) == {}


def test_other_filters_with_flags() -> None:
    assert project.build_project_filter(project.ListProjectOptions(team="ENG")) == {
        "accessibleTeams": {"key": {"eq": "ENG"}}
    }
    assert cycle.build_cycle_filter(cycle.ListCycleOptions(team="ENG")) == {"team": {"key": {"eq": "ENG"}}}
    assert document.build_document_filter(document.ListDocumentOptions(project="p1")) == {
        "project": {"id": {"eq": "p1"}}
    }
    assert label.build_label_filter("ENG") == {"team": {"key": {"eq": "ENG"}}}


def test_default_limits() -> None:
    assert issue.ListIssueOptions().limit == 25
    assert project.ListProjectOptions().limit == 25
    assert document.ListDocumentOptions().limit == 25
    assert cycle.ListCycleOptions().limit == 10
    assert search.SearchOptions(query="x").limit == 10


# -- issue handlers ----------------------------------------------------------


def test_list_issues_sends_limit_and_empty_filter(make_client, renderer: Renderer, out: io.StringIO) -> None:
    client = make_client({"issues": {"nodes": [{"id": "1", "identifier": "ENG-1", "title": "One", "priority": 3}]}})

    anyio.run(issue.handle_list, client, renderer, issue.ListIssueOptions())

    [(query, variables)] = client.calls
    assert query == issue.ISSUES_QUERY
    assert variables == {"first": 25, "filter": {}}
    assert "ENG-1" in out.getvalue()
    assert "Normal" in out.getvalue()


def test_get_missing_issue_is_not_found(make_client, renderer: Renderer) -> None:
    client = make_client({"issue": None})

    with pytest.raises(NotFoundError) as excinfo:
        anyio.run(issue.handle_get, client, renderer, "ENG-404")

    assert excinfo.value.exit_code == 3
    assert "ENG-404" in str(excinfo.value)


def test_update_without_changes_makes_no_request(make_client, renderer: Renderer, out: io.StringIO) -> None:
    client = make_client()

    anyio.run(issue.handle_update, client, renderer, issue.UpdateIssueOptions(id="ENG-1"))

    assert client.calls == []
    assert out.getvalue() == "No changes specified.\n"


def test_update_sends_only_supplied_fields(make_client, renderer: Renderer, out: io.StringIO) -> None:
    client = make_client({"issueUpdate": {"success": True, "issue": _created_issue("ENG-1")}})

    anyio.run(issue.handle_update, client, renderer, issue.UpdateIssueOptions(id="ENG-1", title="Renamed"))

    [(query, variables)] = client.calls
    assert query == issue.UPDATE_ISSUE_MUTATION
    assert variables == {"id": "ENG-1", "input": {"title": "Renamed"}}
    assert "Updated issue ENG-1" in out.getvalue()


def test_update_priority_zero_counts_as_change(make_client, renderer: Renderer) -> None:
    client = make_client({"issueUpdate": {"success": True, "issue": _created_issue("ENG-1")}})

    anyio.run(issue.handle_update, client, renderer, issue.UpdateIssueOptions(id="ENG-1", priority=0))

    assert client.calls[0][1] == {"id": "ENG-1", "input": {"priority": 0}}


def test_update_resolves_state_name(make_client, renderer: Renderer) -> None:
    states = {"issue": {"team": {"states": {"nodes": [{"id": "s1", "name": "Todo"}, {"id": "s2", "name": "Done"}]}}}}
    client = make_client(states, {"issueUpdate": {"success": True, "issue": _created_issue("ENG-1")}})

    anyio.run(issue.handle_update, client, renderer, issue.UpdateIssueOptions(id="ENG-1", state="done"))

    assert client.calls[0] == (issue.ISSUE_STATES_QUERY, {"id": "ENG-1"})
    assert client.calls[1][1] == {"id": "ENG-1", "input": {"stateId": "s2"}}


def test_update_unknown_state(make_client, renderer: Renderer) -> None:
    states = {"issue": {"team": {"states": {"nodes": [{"id": "s1", "name": "Todo"}]}}}}
    client = make_client(states)

    with pytest.raises(NotFoundError, match="Available options: Todo"):
        anyio.run(issue.handle_update, client, renderer, issue.UpdateIssueOptions(id="ENG-1", state="Shipped"))

    assert len(client.calls) == 1


def test_create_issue_input(make_client, renderer: Renderer, out: io.StringIO) -> None:
    client = make_client(
        {"teams": {"nodes": [{"id": "team-uuid", "key": "ENG", "name": "Engineering"}]}},
        {"issueCreate": {"success": True, "issue": _created_issue()}},
    )

    anyio.run(issue.handle_create, client, renderer, issue.CreateIssueOptions(title="New thing", team="ENG"))

    assert client.calls[0] == (team.TEAM_BY_KEY_QUERY, {"key": "ENG"})
    assert client.calls[1][1] == {"input": {"teamId": "team-uuid", "title": "New thing"}}
    assert out.getvalue().splitlines() == ["Created issue ENG-9: New thing", "https://linear.app/x/ENG-9"]


def test_create_issue_unsuccessful(make_client, renderer: Renderer, out: io.StringIO) -> None:
    client = make_client(
        {"teams": {"nodes": [{"id": "team-uuid", "key": "ENG", "name": "Engineering"}]}},
        {"issueCreate": {"success": False, "issue": None}},
    )
    options = issue.CreateIssueOptions(title="New thing", team="ENG", description="Body", priority=2)

    with pytest.raises(GraphQLError, match="Failed to create issue"):
        anyio.run(issue.handle_create, client, renderer, options)

    assert client.calls[1][1]["input"] == {
        "teamId": "team-uuid",
        "title": "New thing",
        "description": "Body",
        "priority": 2,
    }
    assert out.getvalue() == ""


def test_create_issue_unknown_team(make_client, renderer: Renderer) -> None:
    client = make_client({"teams": {"nodes": []}})

    with pytest.raises(NotFoundError, match="team 'NOPE'"):
        anyio.run(issue.handle_create, client, renderer, issue.CreateIssueOptions(title="x", team="NOPE"))


# -- other resources ---------------------------------------------------------


def test_user_me(make_client, renderer: Renderer, out: io.StringIO) -> None:
    client = make_client({"viewer": {"id": "u1", "name": "Ada", "email": "ada@example.com"}})

    anyio.run(user.handle_me, client, renderer, None)

    assert out.getvalue().splitlines() == ["Name: Ada", "Email: ada@example.com", "ID: u1"]


def test_team_list_and_get(make_client, renderer: Renderer, out: io.StringIO) -> None:
    client = make_client(
        {"teams": {"nodes": [{"id": "t1", "key": "ENG", "name": "Engineering", "description": None}]}},
        {"team": {"id": "t1", "key": "ENG", "name": "Engineering", "description": "Builds things"}},
    )

    anyio.run(team.handle_list, client, renderer, None)
    anyio.run(team.handle_get, client, renderer, "ENG")

    assert client.calls[1][1] == {"id": "ENG"}
    assert out.getvalue().splitlines() == ["ENG - Engineering", "ENG Engineering", "", "Builds things"]


def test_project_create_unsuccessful(make_client, renderer: Renderer) -> None:
    client = make_client(
        {"teams": {"nodes": [{"id": "team-uuid", "key": "ENG", "name": "Engineering"}]}},
        {"projectCreate": {"success": False, "project": None}},
    )

    with pytest.raises(GraphQLError, match="Failed to create project"):
        anyio.run(project.handle_create, client, renderer, project.CreateProjectOptions(name="Q3", team="ENG"))

    assert client.calls[1][1] == {"input": {"name": "Q3", "teamIds": ["team-uuid"]}}


def test_project_detail(make_client, renderer: Renderer, out: io.StringIO) -> None:
    client = make_client(
        {
            "project": {
                "id": "p1",
                "name": "Launch",
                "description": "Ship it",
                "state": "started",
                "progress": 0.426,
                "startDate": "2024-01-15",
                "targetDate": None,
            }
        }
    )

    anyio.run(project.handle_get, client, renderer, "p1")

    assert out.getvalue().splitlines() == [
        "Launch",
        "",
        "State: started",
        "Progress: 43%",
        "Start: 2024-01-15",
        "",
        "Ship it",
    ]


def test_cycle_list(make_client, renderer: Renderer, out: io.StringIO) -> None:
    client = make_client(
        {
            "cycles": {
                "nodes": [
                    {
                        "id": "c1",
                        "number": 12,
                        "name": None,
                        "startsAt": "2024-05-01T00:00:00.000Z",
                        "endsAt": "2024-05-14T00:00:00.000Z",
                        "progress": 1.0,
                    }
                ]
            }
        }
    )

    anyio.run(cycle.handle_list, client, renderer, cycle.ListCycleOptions(team="ENG", limit=3))

    assert client.calls[0][1] == {"first": 3, "filter": {"team": {"key": {"eq": "ENG"}}}}
    assert out.getvalue() == "Cycle 12  2024-05-01 → 2024-05-14 100%\n"


def test_cycle_missing(make_client, renderer: Renderer) -> None:
    with pytest.raises(NotFoundError):
        anyio.run(cycle.handle_get, make_client({"cycle": None}), renderer, "c404")


def test_labels_query_without_team(make_client, renderer: Renderer) -> None:
    client = make_client({"issueLabels": {"nodes": []}})

    anyio.run(label.handle_list, client, renderer, None)

    assert client.calls == [(label.LABELS_QUERY, {"filter": {}})]


def test_workflow_states_sorted_by_position(make_client, renderer: Renderer, out: io.StringIO) -> None:
    client = make_client(
        {
            "team": {
                "states": {
                    "nodes": [
                        {"id": "1", "name": "In Review", "type": "started", "color": "#f00", "position": 3},
                        {"id": "2", "name": "In Progress", "type": "started", "color": "#f00", "position": 2},
                        {"id": "3", "name": "Todo", "type": "unstarted", "color": "#ccc", "position": 1},
                        {"id": "4", "name": "Triage", "type": "triage", "color": "#ccc", "position": 0},
                    ]
                }
            }
        }
    )

    anyio.run(workflow.handle_list, client, renderer, "ENG")

    assert client.calls[0][1] == {"teamId": "ENG"}
    assert out.getvalue().splitlines() == ["UNSTARTED:", "  Todo", "STARTED:", "  In Progress", "  In Review"]


def test_comment_list(make_client, renderer: Renderer, out: io.StringIO) -> None:
    client = make_client(
        {
            "issue": {
                "comments": {
                    "nodes": [
                        {"id": "c1", "body": "Looks good", "createdAt": "2024-02-02T10:00:00Z", "user": {"name": "Ada"}},
                        {"id": "c2", "body": "Automated", "createdAt": "2024-02-03T10:00:00Z", "user": None},
                    ]
                }
            }
        }
    )

    anyio.run(comment.handle_list, client, renderer, "ENG-1")

    assert out.getvalue().splitlines() == [
        "Ada 2024-02-02",
        "Looks good",
        "",
        "Unknown 2024-02-03",
        "Automated",
    ]


def test_comment_create(make_client, renderer: Renderer, out: io.StringIO) -> None:
    client = make_client({"commentCreate": {"success": True}})

    anyio.run(comment.handle_create, client, renderer, comment.CreateCommentOptions(issue="ENG-1", body="Hi"))

    assert client.calls[0][1] == {"input": {"issueId": "ENG-1", "body": "Hi"}}
    assert out.getvalue() == "Comment added.\n"


def test_comment_create_unsuccessful(make_client, renderer: Renderer) -> None:
    client = make_client({"commentCreate": {"success": False}})

    with pytest.raises(GraphQLError, match="Failed to create comment"):
        anyio.run(comment.handle_create, client, renderer, comment.CreateCommentOptions(issue="ENG-1", body="Hi"))


def test_document_create(make_client, renderer: Renderer, out: io.StringIO) -> None:
    client = make_client({"documentCreate": {"success": True, "document": {"id": "d1", "title": "Spec"}}})
    options = document.CreateDocumentOptions(title="Spec", project="p1")

    anyio.run(document.handle_create, client, renderer, options)

    assert client.calls[0][1] == {"input": {"title": "Spec", "projectId": "p1"}}
    assert out.getvalue().splitlines() == ["Created document: Spec", "ID: d1"]


def test_document_detail(make_client, renderer: Renderer, out: io.StringIO) -> None:
    client = make_client(
        {
            "document": {
                "id": "d1",
                "title": "Spec",
                "content": "# Heading",
                "createdAt": "2024-01-01T00:00:00Z",
                "updatedAt": "2024-01-02T00:00:00Z",
            }
        }
    )

    anyio.run(document.handle_get, client, renderer, "d1")

    assert out.getvalue().splitlines() == ["Spec", "", "Created: 2024-01-01", "Updated: 2024-01-02", "", "# Heading"]


def test_search(make_client, renderer: Renderer, out: io.StringIO) -> None:
    client = make_client(
        {"searchIssues": {"nodes": [{"id": "1", "identifier": "ENG-3", "title": "Crash on save", "state": None}]}}
    )

    anyio.run(search.handle_search, client, renderer, search.SearchOptions(query="crash"))

    assert client.calls[0][1] == {"term": "crash", "first": 10}
    assert out.getvalue() == "ENG-3 Crash on save [-]\n"


@pytest.mark.parametrize(
    ("handler", "options", "response", "message"),
    [
        (
            issue.handle_update,
            issue.UpdateIssueOptions(id="ENG-9", title="Renamed"),
            {"issueUpdate": {"success": True, "issue": None}},
            "No issue returned from update",
        ),
        (
            document.handle_create,
            document.CreateDocumentOptions(title="Notes", project="p1"),
            {"documentCreate": {"success": True, "document": None}},
            "No document returned from creation",
        ),
    ],
)
def test_successful_mutation_without_entity(  # type: ignore[no-untyped-def]
    make_client, renderer: Renderer, out: io.StringIO, handler, options, response, message
) -> None:
    client = make_client(response)

    with pytest.raises(GraphQLError, match=message):
        anyio.run(handler, client, renderer, options)

    assert out.getvalue() == ""


@pytest.mark.parametrize(
    ("handler", "options", "response", "message"),
    [
        (
            issue.handle_create,
            issue.CreateIssueOptions(title="New thing", team="ENG"),
            {"issueCreate": {"success": True, "issue": None}},
            "No issue returned from creation",
        ),
        (
            project.handle_create,
            project.CreateProjectOptions(name="Q3", team="ENG"),
            {"projectCreate": {"success": True, "project": None}},
            "No project returned from creation",
        ),
    ],
)
def test_successful_create_without_entity_after_team_lookup(  # type: ignore[no-untyped-def]
    make_client, renderer: Renderer, out: io.StringIO, handler, options, response, message
) -> None:
    client = make_client(
        {"teams": {"nodes": [{"id": "team-uuid", "key": "ENG", "name": "Engineering"}]}},
        response,
    )

    with pytest.raises(GraphQLError, match=message):
        anyio.run(handler, client, renderer, options)

    assert out.getvalue() == ""
