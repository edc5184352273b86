"""Tests for the GitLab connector operations"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from gitlab.exceptions import GitlabGetError

from gitlab_connector.domain.config import GitLabConfig
from gitlab_connector.domain.errors import (
    NotConnectedError,
    NotFoundOrEmptyResult,
    UnknownOperationError,
)
from gitlab_connector.infrastructure.gitlab.connector import GitLabConnector, coerce_params
from gitlab_connector.infrastructure.gitlab.session import GitLabSession


@pytest.fixture
def mock_gl():
    return MagicMock()


@pytest.fixture
def connector(mock_gl):
    session = MagicMock()
    session.host = "https://gitlab.example.com"
    session.handle.api = mock_gl
    return GitLabConnector(session)


@pytest.fixture
def project(mock_gl):
    """Project object returned by gl.projects.get(...)"""
    return mock_gl.projects.get.return_value


class TestRegistry:
    """Tests for processor registry and invoke"""

    def test_operations_sorted_and_complete(self):
        names = GitLabConnector.operations()

        assert names == sorted(names)
        assert len(names) == 98
        for name in ("get_project", "create_group", "accept_merge_request", "get_build_artifact"):
            assert name in names

    def test_operations_exclude_plumbing(self):
        names = GitLabConnector.operations()

        for name in ("invoke", "operations", "_call", "_fetch", "_list", "_require", "_merge_request"):
            assert name not in names

    def test_invoke_dispatches_by_name(self, connector, mock_gl):
        result = connector.invoke("get_project", project_id=42)

        mock_gl.projects.get.assert_called_once_with(42)
        assert result is mock_gl.projects.get.return_value

    def test_invoke_unknown_operation(self, connector):
        with pytest.raises(UnknownOperationError, match="get_project"):
            connector.invoke("drop_database")

    def test_invoke_does_not_expose_private_methods(self, connector):
        with pytest.raises(UnknownOperationError):
            connector.invoke("_call", action="x", func=None)

    @pytest.mark.parametrize("params", [{}, {"project_id": 1, "bogus": 2}])
    def test_invoke_invalid_parameters(self, connector, mock_gl, params):
        with pytest.raises(ValueError, match="Invalid parameters for get_project"):
            connector.invoke("get_project", **params)
        mock_gl.projects.get.assert_not_called()

    def test_default_session_is_disconnected(self):
        connector = GitLabConnector(config=GitLabConfig(private_token="abc"))

        assert not connector.session.is_connected()
        with pytest.raises(NotConnectedError):
            connector.get_projects()

    def test_end_to_end_with_real_session(self):
        with patch("gitlab_connector.infrastructure.gitlab.session.gitlab.Gitlab") as mock_gitlab_class:
            mock_gitlab_class.return_value.groups.list.return_value = []
            session = GitLabSession(GitLabConfig(host="https://gitlab.example.com", private_token="abc"))
            session.connect()
            connector = GitLabConnector(session)

            assert connector.invoke("get_groups") == []
            mock_gitlab_class.return_value.groups.list.assert_called_once_with(get_all=True)

            session.disconnect()
            with pytest.raises(NotConnectedError):
                connector.get_groups()


class TestProjectOperations:
    """Tests for project processors"""

    def test_get_project_missing_id(self, connector, mock_gl):
        with pytest.raises(ValueError, match="project_id"):
            connector.get_project(None)
        mock_gl.projects.get.assert_not_called()

    def test_get_project_none_result(self, connector, mock_gl):
        mock_gl.projects.get.return_value = None

        with pytest.raises(NotFoundOrEmptyResult):
            connector.get_project(1)

    def test_get_project_not_found(self, connector, mock_gl):
        mock_gl.projects.get.side_effect = GitlabGetError("404 Project Not Found", 404)

        with pytest.raises(NotFoundOrEmptyResult) as exc_info:
            connector.get_project(1)
        assert exc_info.value.status_code == 404

    def test_get_projects_empty_list(self, connector, mock_gl):
        mock_gl.projects.list.return_value = []

        assert connector.get_projects() == []
        mock_gl.projects.list.assert_called_once_with(membership=True, get_all=True)

    def test_get_projects_via_sudo(self, connector, mock_gl):
        mock_gl.users.get.return_value.username = "alice"
        mock_gl.projects.list.return_value = ["p1"]

        assert connector.get_projects_via_sudo(7) == ["p1"]
        mock_gl.users.get.assert_called_once_with(7)
        mock_gl.projects.list.assert_called_once_with(membership=True, get_all=True, sudo="alice")

    def test_create_project_maps_visibility(self, connector, mock_gl):
        connector.create_project("demo", namespace_id=3, description="d", public=True, visibility_level=10)

        mock_gl.projects.create.assert_called_once_with(
            {"name": "demo", "namespace_id": 3, "description": "d", "visibility": "internal"}
        )

    def test_create_project_empty_result(self, connector, mock_gl):
        mock_gl.projects.create.return_value = None

        with pytest.raises(NotFoundOrEmptyResult):
            connector.create_project("demo")

    def test_create_user_project(self, connector, mock_gl):
        connector.create_user_project(5, "demo", default_branch="main", public=False)

        mock_gl.users.get.assert_called_once_with(5, lazy=True)
        mock_gl.users.get.return_value.projects.create.assert_called_once_with(
            {"name": "demo", "default_branch": "main", "visibility": "private"}
        )

    def test_update_project_changes_only_given_fields(self, connector, project):
        project.name = "old"
        project.description = "keep"

        result = connector.update_project(1, project_name="new", visibility_level=20)

        assert result is project
        assert project.name == "new"
        assert project.description == "keep"
        assert project.visibility == "public"
        project.save.assert_called_once()

    def test_update_project_bad_visibility_does_not_fetch(self, connector, mock_gl):
        with pytest.raises(ValueError):
            connector.update_project(1, visibility_level=99)
        mock_gl.projects.get.assert_not_called()

    def test_delete_project(self, connector, mock_gl):
        assert connector.delete_project(9) is None
        mock_gl.projects.delete.assert_called_once_with(9)

    def test_transfer(self, connector, project):
        connector.transfer(1, 22)
        project.transfer.assert_called_once_with(22)

    def test_get_file_archive(self, connector, project):
        project.repository_archive.return_value = b"\x1f\x8b"

        assert connector.get_file_archive(1, sha="abc", format="zip") == b"\x1f\x8b"
        project.repository_archive.assert_called_once_with(sha="abc", format="zip")

    def test_add_project_member_defaults_to_developer(self, connector, project):
        connector.add_project_member(1, 5)
        project.members.create.assert_called_once_with({"user_id": 5, "access_level": 30})

    def test_add_project_member_role_name(self, connector, project):
        connector.add_project_member(1, 5, access_level="maintainer")
        project.members.create.assert_called_once_with({"user_id": 5, "access_level": 40})


class TestGroupOperations:
    """Tests for group processors"""

    def test_create_group_path_defaults_to_name(self, connector, mock_gl):
        connector.create_group("team")
        mock_gl.groups.create.assert_called_once_with({"name": "team", "path": "team"})

    def test_create_group_with_ldap(self, connector, mock_gl):
        connector.create_group("team", path="t", ldap_cn="cn=team", ldap_access="reporter")
        mock_gl.groups.create.assert_called_once_with(
            {"name": "team", "path": "t", "ldap_cn": "cn=team", "ldap_access": 20}
        )

    def test_create_group_via_sudo(self, connector, mock_gl):
        mock_gl.users.get.return_value.username = "alice"

        connector.create_group_via_sudo("team", "team-path", 8)

        mock_gl.users.get.assert_called_once_with(8)
        mock_gl.groups.create.assert_called_once_with({"name": "team", "path": "team-path"}, sudo="alice")

    def test_create_group_via_sudo_requires_user(self, connector, mock_gl):
        with pytest.raises(ValueError, match="sudo_user_id"):
            connector.create_group_via_sudo("team", "team-path", None)
        mock_gl.groups.create.assert_not_called()

    def test_get_namespace_members_includes_inherited(self, connector, mock_gl):
        group = mock_gl.groups.get.return_value
        group.members_all.list.return_value = ["m1", "m2"]

        assert connector.get_namespace_members(4) == ["m1", "m2"]
        mock_gl.groups.get.assert_called_once_with(4, lazy=True)

    def test_delete_group_member(self, connector, mock_gl):
        connector.delete_group_member(4, 6)
        mock_gl.groups.get.return_value.members.delete.assert_called_once_with(6)


class TestUserOperations:
    """Tests for user and key processors"""

    def test_get_current_user(self, connector, mock_gl):
        mock_gl.user = MagicMock(username="me")

        assert connector.get_current_user().username == "me"
        mock_gl.auth.assert_called_once()

    def test_get_user_via_sudo(self, connector, mock_gl):
        with patch(
            "gitlab_connector.infrastructure.gitlab.operations.users.CurrentUserManager"
        ) as mock_manager_class:
            user = MagicMock(username="bob")
            mock_manager_class.return_value.get.return_value = user

            assert connector.get_user_via_sudo("bob") is user
            mock_manager_class.assert_called_once_with(mock_gl)
            mock_manager_class.return_value.get.assert_called_once_with(sudo="bob")

    def test_find_users_empty(self, connector, mock_gl):
        mock_gl.users.list.return_value = []

        assert connector.find_users("nobody@example.com") == []
        mock_gl.users.list.assert_called_once_with(search="nobody@example.com", get_all=True)

    def test_create_user_without_password_requests_reset(self, connector, mock_gl):
        connector.create_user("bob@example.com", full_name="Bob", is_admin=False)

        mock_gl.users.create.assert_called_once_with(
            {
                "email": "bob@example.com",
                "reset_password": True,
                "username": "bob",
                "name": "Bob",
                "admin": False,
            }
        )

    def test_create_user_with_password(self, connector, mock_gl):
        connector.create_user("bob@example.com", password="s3cret!", username="bobby", extern_provider_name="ldap")

        data = mock_gl.users.create.call_args[0][0]
        assert data["password"] == "s3cret!"
        assert "reset_password" not in data
        assert data["username"] == "bobby"
        assert data["name"] == "bobby"
        assert data["provider"] == "ldap"

    def test_block_and_unblock_user(self, connector, mock_gl):
        connector.block_user(3)
        connector.unblock_user(3)

        user = mock_gl.users.get.return_value
        user.block.assert_called_once()
        user.unblock.assert_called_once()

    def test_create_ssh_key(self, connector, mock_gl):
        connector.create_ssh_key(3, "laptop", "ssh-ed25519 AAAA")
        mock_gl.users.get.return_value.keys.create.assert_called_once_with(
            {"title": "laptop", "key": "ssh-ed25519 AAAA"}
        )

    def test_create_deploy_key(self, connector, project):
        connector.create_deploy_key(1, "ci", "ssh-rsa AAAA", can_push=True)
        project.keys.create.assert_called_once_with({"title": "ci", "key": "ssh-rsa AAAA", "can_push": True})

    def test_create_ssh_key_requires_key(self, connector, mock_gl):
        with pytest.raises(ValueError, match="key"):
            connector.create_ssh_key(3, "laptop", "  ")


class TestHookOperations:
    """Tests for hook processors"""

    def test_add_default_project_hook(self, connector, project):
        connector.add_default_project_hook(1, "https://ci.example.com/hook")
        project.hooks.create.assert_called_once_with({"url": "https://ci.example.com/hook"})

    def test_add_project_hook_with_events(self, connector, project):
        connector.add_project_hook(1, "https://ci.example.com/hook", push_events=True, issues_events=False)
        project.hooks.create.assert_called_once_with(
            {"url": "https://ci.example.com/hook", "push_events": True, "issues_events": False}
        )

    def test_edit_project_hook(self, connector, project):
        hook = project.hooks.get.return_value

        result = connector.edit_project_hook(1, 2, "https://new.example.com")

        assert result is hook
        assert hook.url == "https://new.example.com"
        hook.save.assert_called_once()

    def test_system_hooks(self, connector, mock_gl):
        mock_gl.hooks.list.return_value = []

        assert connector.get_system_hooks() == []
        connector.add_system_hook("https://audit.example.com")
        connector.delete_system_hook(11)

        mock_gl.hooks.create.assert_called_once_with({"url": "https://audit.example.com"})
        mock_gl.hooks.delete.assert_called_once_with(11)


class TestIssueOperations:
    """Tests for issue, label and milestone processors"""

    def test_create_issue_wraps_assignee(self, connector, project):
        connector.create_issue(1, "Bug", assignee_id=4, labels="bug,ui")
        project.issues.create.assert_called_once_with({"title": "Bug", "assignee_ids": [4], "labels": "bug,ui"})

    def test_edit_issue_close(self, connector, project):
        issue = project.issues.get.return_value

        connector.edit_issue(1, 2, title="New title", action="close")

        assert issue.title == "New title"
        assert issue.state_event == "close"
        issue.save.assert_called_once()

    def test_edit_issue_unknown_action(self, connector, project):
        with pytest.raises(ValueError, match="Unknown issue action"):
            connector.edit_issue(1, 2, action="delete")
        project.issues.get.assert_not_called()

    def test_create_issue_note(self, connector, project):
        connector.create_issue_note(1, 2, "Looks good")
        project.issues.get.return_value.notes.create.assert_called_once_with({"body": "Looks good"})

    def test_update_label(self, connector, project):
        label = project.labels.get.return_value

        connector.update_label(1, "bug", new_name="defect", new_color="#ff0000")

        project.labels.get.assert_called_once_with("bug")
        assert label.new_name == "defect"
        assert label.color == "#ff0000"
        label.save.assert_called_once()

    def test_create_milestone_formats_due_date(self, connector, project):
        connector.create_milestone(1, "v1.0", due_date="2025-06-30T00:00:00Z")
        project.milestones.create.assert_called_once_with({"title": "v1.0", "due_date": "2025-06-30"})

    def test_update_milestone_state(self, connector, project):
        milestone = project.milestones.get.return_value

        connector.update_milestone(1, 3, state_event="close")

        assert milestone.state_event == "close"
        milestone.save.assert_called_once()


class TestMergeRequestOperations:
    """Tests for merge request processors"""

    def test_get_merge_requests_page(self, connector, project):
        connector.get_merge_requests(1, page=2, per_page=50)
        project.mergerequests.list.assert_called_once_with(page=2, per_page=50)

    def test_get_open_merge_requests(self, connector, project):
        project.mergerequests.list.return_value = []

        assert connector.get_open_merge_requests(1) == []
        project.mergerequests.list.assert_called_once_with(state="opened", get_all=True)

    def test_get_merge_request_commits(self, connector, project):
        mr = project.mergerequests.get.return_value
        mr.commits.return_value = iter(["c1", "c2"])

        assert connector.get_merge_request_commits(1, 5) == ["c1", "c2"]
        project.mergerequests.get.assert_called_once_with(5, lazy=True)

    def test_create_merge_request(self, connector, project):
        connector.create_merge_request(1, "feature", "main", "Add feature")
        project.mergerequests.create.assert_called_once_with(
            {"source_branch": "feature", "target_branch": "main", "title": "Add feature"}
        )

    def test_accept_merge_request(self, connector, project):
        mr = project.mergerequests.get.return_value

        result = connector.accept_merge_request(1, 5, merge_commit_message="Merge it")

        assert result is mr
        mr.merge.assert_called_once_with(merge_commit_message="Merge it")

    def test_update_merge_request_note(self, connector, project):
        note = project.mergerequests.get.return_value.notes.get.return_value

        connector.update_merge_request_note(1, 5, 9, body="edited")

        assert note.body == "edited"
        note.save.assert_called_once()

    def test_get_merge_request_notes_first_page_only(self, connector, project):
        notes = project.mergerequests.get.return_value.notes

        connector.get_merge_request_notes(1, 5)
        connector.get_all_notes(1, 5)

        assert notes.list.call_args_list[0].kwargs == {}
        assert notes.list.call_args_list[1].kwargs == {"get_all": True}


class TestRepositoryOperations:
    """Tests for repository processors"""

    def test_create_branch(self, connector, project):
        connector.create_branch(1, "feature", "main")
        project.branches.create.assert_called_once_with({"branch": "feature", "ref": "main"})

    def test_protect_and_unprotect_branch(self, connector, project):
        connector.protect_branch(1, "main")
        connector.unprotect_branch(1, "main")

        project.protectedbranches.create.assert_called_once_with({"name": "main"})
        project.protectedbranches.delete.assert_called_once_with("main")

    def test_get_last_commits_uses_first_page(self, connector, project):
        project.commits.list.return_value = ["c1"]

        assert connector.get_last_commits(1, branch_or_tag="develop") == ["c1"]
        project.commits.list.assert_called_once_with(ref_name="develop")

    def test_create_commit_status(self, connector, project):
        connector.create_commit_status(1, "abc123", "success", name="ci", target_url="https://ci.example.com/1")

        project.commits.get.assert_called_once_with("abc123", lazy=True)
        project.commits.get.return_value.statuses.create.assert_called_once_with(
            {"state": "success", "name": "ci", "target_url": "https://ci.example.com/1"}
        )

    def test_get_raw_file_content_defaults_to_default_branch(self, connector, project):
        project.default_branch = "main"
        project.files.raw.return_value = b"hello"

        assert connector.get_raw_file_content(1, "README.md") == b"hello"
        project.files.raw.assert_called_once_with(file_path="README.md", ref="main")

    def test_get_raw_file_content_empty_file(self, connector, project):
        project.files.raw.return_value = b""

        with pytest.raises(NotFoundOrEmptyResult):
            connector.get_raw_file_content(1, "empty.txt", ref="main")

    def test_get_repository_tree(self, connector, project):
        project.repository_tree.return_value = []

        assert connector.get_repository_tree(1, path="src", ref_name="main") == []
        project.repository_tree.assert_called_once_with(get_all=True, path="src", ref="main")

    def test_get_commit_builds_collects_jobs_of_all_pipelines(self, connector, project):
        first, second = MagicMock(), MagicMock()
        first.jobs.list.return_value = ["j1"]
        second.jobs.list.return_value = ["j2", "j3"]
        project.pipelines.list.return_value = [first, second]

        assert connector.get_commit_builds(1, "abc123") == ["j1", "j2", "j3"]
        project.pipelines.list.assert_called_once_with(sha="abc123", get_all=True)

    def test_get_build_artifact(self, connector, project):
        project.jobs.get.return_value.artifacts.return_value = b"PK\x03\x04"

        assert connector.get_build_artifact(1, 77) == b"PK\x03\x04"
        project.jobs.get.assert_called_once_with(77, lazy=True)

    def test_delete_tag(self, connector, project):
        connector.delete_tag(1, "v1.0")
        project.tags.delete.assert_called_once_with("v1.0")


class TestCoerceParams:
    """Tests for converting text parameters by processor signature"""

    def test_string_parameters_keep_text(self):
        result = coerce_params("delete_tag", {"project_id": "7", "tag_name": "1.10"})
        assert result == {"project_id": 7, "tag_name": "1.10"}

    def test_identifiers_that_look_like_numbers_or_booleans(self):
        result = coerce_params("create_branch", {"project_id": "1", "branch_name": "no", "ref": "0123456"})
        assert result == {"project_id": 1, "branch_name": "no", "ref": "0123456"}

    @pytest.mark.parametrize("raw,expected", [("true", True), ("Yes", True), ("0", False), ("off", False)])
    def test_boolean_parameters(self, raw, expected):
        result = coerce_params("create_deploy_key", {"project_id": "1", "title": "t", "key": "k", "can_push": raw})
        assert result["can_push"] is expected

    def test_union_with_text_keeps_text(self):
        result = coerce_params("add_project_member", {"project_id": "1", "user_id": "2", "access_level": "40"})
        assert result == {"project_id": 1, "user_id": 2, "access_level": "40"}

    def test_none_passes_through(self):
        assert coerce_params("create_issue", {"project_id": "1", "title": "x", "assignee_id": None}) == {
            "project_id": 1,
            "title": "x",
            "assignee_id": None,
        }

    @pytest.mark.parametrize(
        "name,params,message",
        [
            ("get_project", {"project_id": "abc"}, "expects int"),
            ("create_deploy_key", {"project_id": "1", "title": "t", "key": "k", "can_push": "maybe"}, "expects a boolean"),
        ],
    )
    def test_unconvertible_values(self, name, params, message):
        with pytest.raises(ValueError, match=message):
            coerce_params(name, params)

    def test_unknown_operation_and_parameters_pass_through(self):
        assert coerce_params("drop_database", {"x": "1"}) == {"x": "1"}
        assert coerce_params("get_project", {"project_id": "1", "bogus": "2"}) == {"project_id": 1, "bogus": "2"}
