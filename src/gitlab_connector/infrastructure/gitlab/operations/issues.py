"""Issue, label and milestone processors"""

import datetime
from typing import Any, List, Optional, Union

from gitlab_connector.infrastructure.gitlab.processor import (
    ProcessorBase,
    apply_changes,
    iso_date,
    payload,
    processor,
)

ISSUE_ACTIONS = {"close": "close", "reopen": "reopen"}


class IssueOperations(ProcessorBase):
    """Issues and their notes, labels, milestones"""

    @processor
    def get_issue(self, project_id: int, issue_iid: int) -> Any:
        self._require(project_id=project_id, issue_iid=issue_iid)
        return self._fetch(
            f"load issue #{issue_iid} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).issues.get(issue_iid),
        )

    @processor
    def get_issues(self, project_id: int) -> List[Any]:
        self._require(project_id=project_id)
        return self._list(
            f"load issues of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).issues.list(get_all=True),
        )

    @processor
    def create_issue(
        self,
        project_id: int,
        title: str,
        description: Optional[str] = None,
        assignee_id: Optional[int] = None,
        milestone_id: Optional[int] = None,
        labels: Optional[str] = None,
    ) -> Any:
        """Create issue

        Args:
            labels: Comma separated label names
        """
        self._require(project_id=project_id, title=title)
        data = payload(
            title=title,
            description=description,
            assignee_ids=[assignee_id] if assignee_id is not None else None,
            milestone_id=milestone_id,
            labels=labels,
        )
        return self._fetch(
            f"create issue in project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).issues.create(data),
        )

    @processor
    def edit_issue(
        self,
        project_id: int,
        issue_iid: int,
        assignee_id: Optional[int] = None,
        milestone_id: Optional[int] = None,
        labels: Optional[str] = None,
        description: Optional[str] = None,
        title: Optional[str] = None,
        action: Optional[str] = None,
    ) -> Any:
        """Edit issue; action is "close" or "reopen" """
        self._require(project_id=project_id, issue_iid=issue_iid)
        state_event = None
        if action is not None:
            state_event = ISSUE_ACTIONS.get(str(action).lower())
            if state_event is None:
                raise ValueError(f"Unknown issue action: {action}")
        issue = self.get_issue(project_id, issue_iid)
        apply_changes(
            issue,
            assignee_ids=[assignee_id] if assignee_id is not None else None,
            milestone_id=milestone_id,
            labels=labels,
            description=description,
            title=title,
            state_event=state_event,
        )
        self._execute(f"update issue #{issue_iid} of project {project_id}", lambda gl: issue.save())
        return issue

    @processor
    def get_issue_notes(self, project_id: int, issue_iid: int) -> List[Any]:
        self._require(project_id=project_id, issue_iid=issue_iid)
        return self._list(
            f"load notes of issue #{issue_iid}",
            lambda gl: gl.projects.get(project_id, lazy=True).issues.get(issue_iid, lazy=True).notes.list(get_all=True),
        )

    @processor
    def create_issue_note(self, project_id: int, issue_iid: int, message: str) -> Any:
        self._require(project_id=project_id, issue_iid=issue_iid, message=message)
        return self._fetch(
            f"create note on issue #{issue_iid}",
            lambda gl: gl.projects.get(project_id, lazy=True)
            .issues.get(issue_iid, lazy=True)
            .notes.create({"body": message}),
        )

    @processor
    def get_labels(self, project_id: int) -> List[Any]:
        self._require(project_id=project_id)
        return self._list(
            f"load labels of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).labels.list(get_all=True),
        )

    @processor
    def create_label(self, project_id: int, label_name: str, color: str) -> Any:
        """Create label; color is "#RRGGBB" or a CSS color name"""
        self._require(project_id=project_id, label_name=label_name, color=color)
        return self._fetch(
            f"create label {label_name} in project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).labels.create({"name": label_name, "color": color}),
        )

    @processor
    def update_label(
        self, project_id: int, old_name: str, new_name: Optional[str] = None, new_color: Optional[str] = None
    ) -> Any:
        self._require(project_id=project_id, old_name=old_name)
        label = self._fetch(
            f"load label {old_name} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).labels.get(old_name),
        )
        apply_changes(label, new_name=new_name, color=new_color)
        self._execute(f"update label {old_name} of project {project_id}", lambda gl: label.save())
        return label

    @processor
    def delete_label(self, project_id: int, label_name: str) -> None:
        self._require(project_id=project_id, label_name=label_name)
        self._execute(
            f"delete label {label_name} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).labels.delete(label_name),
        )

    @processor
    def get_milestones(self, project_id: int) -> List[Any]:
        self._require(project_id=project_id)
        return self._list(
            f"load milestones of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).milestones.list(get_all=True),
        )

    @processor
    def create_milestone(
        self,
        project_id: int,
        title: str,
        description: Optional[str] = None,
        due_date: Union[datetime.date, str, None] = None,
    ) -> Any:
        self._require(project_id=project_id, title=title)
        data = payload(title=title, description=description, due_date=iso_date(due_date))
        return self._fetch(
            f"create milestone {title} in project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).milestones.create(data),
        )

    @processor
    def update_milestone(
        self,
        project_id: int,
        milestone_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        due_date: Union[datetime.date, str, None] = None,
        state_event: Optional[str] = None,
    ) -> Any:
        """Update milestone; state_event is "close" or "activate" """
        self._require(project_id=project_id, milestone_id=milestone_id)
        milestone = self._fetch(
            f"load milestone {milestone_id} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).milestones.get(milestone_id),
        )
        apply_changes(
            milestone,
            title=title,
            description=description,
            due_date=iso_date(due_date),
            state_event=state_event,
        )
        self._execute(f"update milestone {milestone_id} of project {project_id}", lambda gl: milestone.save())
        return milestone
