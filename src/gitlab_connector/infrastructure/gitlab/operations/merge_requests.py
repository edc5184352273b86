"""Merge request processors"""

from typing import Any, Dict, List, Optional

from gitlab_connector.infrastructure.gitlab.processor import (
    ProcessorBase,
    apply_changes,
    payload,
    processor,
)


class MergeRequestOperations(ProcessorBase):
    """Merge requests, their commits, changes and notes"""

    def _merge_request(self, gl: Any, project_id: int, merge_request_iid: int, lazy: bool = True) -> Any:
        return gl.projects.get(project_id, lazy=True).mergerequests.get(merge_request_iid, lazy=lazy)

    @processor
    def get_merge_request(self, project_id: int, merge_request_iid: int) -> Any:
        self._require(project_id=project_id, merge_request_iid=merge_request_iid)
        return self._fetch(
            f"load merge request !{merge_request_iid} of project {project_id}",
            lambda gl: self._merge_request(gl, project_id, merge_request_iid, lazy=False),
        )

    @processor
    def get_merge_requests(self, project_id: int, page: Optional[int] = None, per_page: Optional[int] = None) -> List[Any]:
        """Get one page of merge requests (first page unless given)"""
        self._require(project_id=project_id)
        params = payload(page=page, per_page=per_page)
        return self._list(
            f"load merge requests of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).mergerequests.list(**params),
        )

    @processor
    def get_all_merge_requests(self, project_id: int) -> List[Any]:
        self._require(project_id=project_id)
        return self._list(
            f"load all merge requests of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).mergerequests.list(get_all=True),
        )

    @processor
    def get_open_merge_requests(self, project_id: int) -> List[Any]:
        self._require(project_id=project_id)
        return self._list(
            f"load open merge requests of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).mergerequests.list(state="opened", get_all=True),
        )

    @processor
    def get_merge_request_changes(self, project_id: int, merge_request_iid: int) -> Dict[str, Any]:
        """Get merge request with its file changes (diffs)"""
        self._require(project_id=project_id, merge_request_iid=merge_request_iid)
        return self._fetch(
            f"load changes of merge request !{merge_request_iid}",
            lambda gl: self._merge_request(gl, project_id, merge_request_iid).changes(),
        )

    @processor
    def get_merge_request_commits(self, project_id: int, merge_request_iid: int) -> List[Any]:
        self._require(project_id=project_id, merge_request_iid=merge_request_iid)
        return self._list(
            f"load commits of merge request !{merge_request_iid}",
            lambda gl: self._merge_request(gl, project_id, merge_request_iid).commits(),
        )

    @processor
    def create_merge_request(
        self,
        project_id: int,
        source_branch: str,
        target_branch: str,
        title: str,
        assignee_id: Optional[int] = None,
        description: Optional[str] = None,
        labels: Optional[str] = None,
    ) -> Any:
        self._require(project_id=project_id, source_branch=source_branch, target_branch=target_branch, title=title)
        data = payload(
            source_branch=source_branch,
            target_branch=target_branch,
            title=title,
            assignee_id=assignee_id,
            description=description,
            labels=labels,
        )
        return self._fetch(
            f"create merge request {source_branch} -> {target_branch} in project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).mergerequests.create(data),
        )

    @processor
    def update_merge_request(
        self,
        project_id: int,
        merge_request_iid: int,
        target_branch: Optional[str] = None,
        assignee_id: Optional[int] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
        state_event: Optional[str] = None,
        labels: Optional[str] = None,
    ) -> Any:
        """Update merge request; state_event is "close" or "reopen" """
        self._require(project_id=project_id, merge_request_iid=merge_request_iid)
        mr = self.get_merge_request(project_id, merge_request_iid)
        apply_changes(
            mr,
            target_branch=target_branch,
            assignee_id=assignee_id,
            title=title,
            description=description,
            state_event=state_event,
            labels=labels,
        )
        self._execute(f"update merge request !{merge_request_iid}", lambda gl: mr.save())
        return mr

    @processor
    def accept_merge_request(
        self, project_id: int, merge_request_iid: int, merge_commit_message: Optional[str] = None
    ) -> Any:
        """Merge the merge request"""
        self._require(project_id=project_id, merge_request_iid=merge_request_iid)
        mr = self.get_merge_request(project_id, merge_request_iid)
        self._execute(
            f"accept merge request !{merge_request_iid}",
            lambda gl: mr.merge(merge_commit_message=merge_commit_message),
        )
        return mr

    @processor
    def get_merge_request_notes(self, project_id: int, merge_request_iid: int) -> List[Any]:
        """Get first page of merge request notes"""
        self._require(project_id=project_id, merge_request_iid=merge_request_iid)
        return self._list(
            f"load notes of merge request !{merge_request_iid}",
            lambda gl: self._merge_request(gl, project_id, merge_request_iid).notes.list(),
        )

    @processor
    def get_all_notes(self, project_id: int, merge_request_iid: int) -> List[Any]:
        """Get every note of the merge request"""
        self._require(project_id=project_id, merge_request_iid=merge_request_iid)
        return self._list(
            f"load all notes of merge request !{merge_request_iid}",
            lambda gl: self._merge_request(gl, project_id, merge_request_iid).notes.list(get_all=True),
        )

    @processor
    def get_note(self, project_id: int, merge_request_iid: int, note_id: int) -> Any:
        self._require(project_id=project_id, merge_request_iid=merge_request_iid, note_id=note_id)
        return self._fetch(
            f"load note {note_id} of merge request !{merge_request_iid}",
            lambda gl: self._merge_request(gl, project_id, merge_request_iid).notes.get(note_id),
        )

    @processor
    def create_merge_request_note(self, project_id: int, merge_request_iid: int, message: str) -> Any:
        self._require(project_id=project_id, merge_request_iid=merge_request_iid, message=message)
        return self._fetch(
            f"create note on merge request !{merge_request_iid}",
            lambda gl: self._merge_request(gl, project_id, merge_request_iid).notes.create({"body": message}),
        )

    @processor
    def update_merge_request_note(
        self, project_id: int, merge_request_iid: int, note_id: int, body: Optional[str] = None
    ) -> Any:
        self._require(project_id=project_id, merge_request_iid=merge_request_iid, note_id=note_id)
        note = self.get_note(project_id, merge_request_iid, note_id)
        apply_changes(note, body=body)
        self._execute(f"update note {note_id} of merge request !{merge_request_iid}", lambda gl: note.save())
        return note
