"""Repository processors: branches, tags, commits, files"""

from typing import Any, List, Optional

from gitlab_connector.infrastructure.gitlab.processor import ProcessorBase, payload, processor


class RepositoryOperations(ProcessorBase):
    """Branches, tags, commits, commit statuses and raw repository content"""

    @processor
    def get_branch(self, project_id: int, branch_name: str) -> Any:
        self._require(project_id=project_id, branch_name=branch_name)
        return self._fetch(
            f"load branch {branch_name} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).branches.get(branch_name),
        )

    @processor
    def get_branches(self, project_id: int) -> List[Any]:
        self._require(project_id=project_id)
        return self._list(
            f"load branches of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).branches.list(get_all=True),
        )

    @processor
    def create_branch(self, project_id: int, branch_name: str, ref: str) -> None:
        """Create branch from ref (branch name, tag or commit SHA)"""
        self._require(project_id=project_id, branch_name=branch_name, ref=ref)
        self._execute(
            f"create branch {branch_name} from {ref} in project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).branches.create({"branch": branch_name, "ref": ref}),
        )

    @processor
    def delete_branch(self, project_id: int, branch_name: str) -> None:
        self._require(project_id=project_id, branch_name=branch_name)
        self._execute(
            f"delete branch {branch_name} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).branches.delete(branch_name),
        )

    @processor
    def protect_branch(self, project_id: int, branch_name: str) -> None:
        self._require(project_id=project_id, branch_name=branch_name)
        self._execute(
            f"protect branch {branch_name} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).protectedbranches.create({"name": branch_name}),
        )

    @processor
    def unprotect_branch(self, project_id: int, branch_name: str) -> None:
        self._require(project_id=project_id, branch_name=branch_name)
        self._execute(
            f"unprotect branch {branch_name} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).protectedbranches.delete(branch_name),
        )

    @processor
    def get_tags(self, project_id: int) -> List[Any]:
        self._require(project_id=project_id)
        return self._list(
            f"load tags of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).tags.list(get_all=True),
        )

    @processor
    def delete_tag(self, project_id: int, tag_name: str) -> None:
        self._require(project_id=project_id, tag_name=tag_name)
        self._execute(
            f"delete tag {tag_name} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).tags.delete(tag_name),
        )

    @processor
    def get_commit(self, project_id: int, commit_hash: str) -> Any:
        self._require(project_id=project_id, commit_hash=commit_hash)
        return self._fetch(
            f"load commit {commit_hash} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).commits.get(commit_hash),
        )

    @processor
    def get_all_commits(self, project_id: int, branch_or_tag: Optional[str] = None) -> List[Any]:
        """Get every commit reachable from branch_or_tag (default branch if None)"""
        self._require(project_id=project_id)
        params = payload(ref_name=branch_or_tag)
        return self._list(
            f"load all commits of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).commits.list(get_all=True, **params),
        )

    @processor
    def get_project_commits(
        self,
        project_id: int,
        branch_or_tag: Optional[str] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> List[Any]:
        """Get one page of commits"""
        self._require(project_id=project_id)
        params = payload(ref_name=branch_or_tag, page=page, per_page=per_page)
        return self._list(
            f"load commits of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).commits.list(**params),
        )

    @processor
    def get_last_commits(self, project_id: int, branch_or_tag: Optional[str] = None) -> List[Any]:
        """Get the most recent commits (first page)"""
        return self.get_project_commits(project_id, branch_or_tag=branch_or_tag)

    @processor
    def get_commit_diffs(self, project_id: int, commit_hash: str) -> List[Any]:
        self._require(project_id=project_id, commit_hash=commit_hash)
        return self._list(
            f"load diffs of commit {commit_hash}",
            lambda gl: gl.projects.get(project_id, lazy=True).commits.get(commit_hash, lazy=True).diff(get_all=True),
        )

    @processor
    def get_commit_comments(self, project_id: int, commit_hash: str) -> List[Any]:
        self._require(project_id=project_id, commit_hash=commit_hash)
        return self._list(
            f"load comments of commit {commit_hash}",
            lambda gl: gl.projects.get(project_id, lazy=True)
            .commits.get(commit_hash, lazy=True)
            .comments.list(get_all=True),
        )

    @processor
    def create_commit_comment(
        self,
        project_id: int,
        commit_hash: str,
        note: str,
        path: Optional[str] = None,
        line: Optional[int] = None,
        line_type: Optional[str] = None,
    ) -> Any:
        """Comment on a commit, optionally on a line ("new" or "old") of a file"""
        self._require(project_id=project_id, commit_hash=commit_hash, note=note)
        data = payload(note=note, path=path, line=line, line_type=line_type)
        return self._fetch(
            f"comment on commit {commit_hash}",
            lambda gl: gl.projects.get(project_id, lazy=True)
            .commits.get(commit_hash, lazy=True)
            .comments.create(data),
        )

    @processor
    def get_commit_statuses(
        self,
        project_id: int,
        commit_hash: str,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> List[Any]:
        self._require(project_id=project_id, commit_hash=commit_hash)
        params = payload(page=page, per_page=per_page)
        return self._list(
            f"load statuses of commit {commit_hash}",
            lambda gl: gl.projects.get(project_id, lazy=True)
            .commits.get(commit_hash, lazy=True)
            .statuses.list(**params),
        )

    @processor
    def create_commit_status(
        self,
        project_id: int,
        commit_hash: str,
        state: str,
        ref: Optional[str] = None,
        name: Optional[str] = None,
        target_url: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Any:
        """Set commit status; state is pending, running, success, failed or canceled"""
        self._require(project_id=project_id, commit_hash=commit_hash, state=state)
        data = payload(state=state, ref=ref, name=name, target_url=target_url, description=description)
        return self._fetch(
            f"set status {state} on commit {commit_hash}",
            lambda gl: gl.projects.get(project_id, lazy=True)
            .commits.get(commit_hash, lazy=True)
            .statuses.create(data),
        )

    @processor
    def get_repository_tree(
        self, project_id: int, path: Optional[str] = None, ref_name: Optional[str] = None
    ) -> List[Any]:
        self._require(project_id=project_id)
        params = payload(path=path, ref=ref_name)
        return self._list(
            f"load repository tree of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).repository_tree(get_all=True, **params),
        )

    @processor
    def get_raw_file_content(self, project_id: int, file_path: str, ref: Optional[str] = None) -> bytes:
        """Get raw file content at ref (default branch if None)"""
        self._require(project_id=project_id, file_path=file_path)
        if ref is None:
            project = self._fetch(f"load project {project_id}", lambda gl: gl.projects.get(project_id))
            ref = project.default_branch
        return self._fetch(
            f"load file {file_path}@{ref} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).files.raw(file_path=file_path, ref=ref),
        )

    @processor
    def get_raw_blob_content(self, project_id: int, blob_sha: str) -> bytes:
        self._require(project_id=project_id, blob_sha=blob_sha)
        return self._fetch(
            f"load blob {blob_sha} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).repository_raw_blob(blob_sha),
        )

    @processor
    def get_project_builds(self, project_id: int) -> List[Any]:
        """Get CI jobs of the project"""
        self._require(project_id=project_id)
        return self._list(
            f"load jobs of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).jobs.list(get_all=True),
        )

    @processor
    def get_project_build(self, project_id: int, build_id: int) -> Any:
        self._require(project_id=project_id, build_id=build_id)
        return self._fetch(
            f"load job {build_id} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).jobs.get(build_id),
        )

    @processor
    def get_commit_builds(self, project_id: int, commit_hash: str) -> List[Any]:
        """Get CI jobs of every pipeline that ran for the commit"""
        self._require(project_id=project_id, commit_hash=commit_hash)

        def _jobs(gl):
            project = gl.projects.get(project_id, lazy=True)
            jobs = []
            for pipeline in project.pipelines.list(sha=commit_hash, get_all=True):
                jobs.extend(pipeline.jobs.list(get_all=True))
            return jobs

        return self._list(f"load jobs of commit {commit_hash}", _jobs)

    @processor
    def get_build_artifact(self, project_id: int, build_id: int) -> bytes:
        """Download the artifacts archive of a CI job"""
        self._require(project_id=project_id, build_id=build_id)
        return self._fetch(
            f"download artifacts of job {build_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).jobs.get(build_id, lazy=True).artifacts(),
        )
