"""Project processors"""

from typing import Any, List, Optional, Union

from gitlab_connector.infrastructure.gitlab.processor import (
    ProcessorBase,
    apply_changes,
    payload,
    processor,
    to_access_level,
    visibility,
)


class ProjectOperations(ProcessorBase):
    """Projects, project members and project archives"""

    @processor
    def get_project(self, project_id: int) -> Any:
        """Get project by ID"""
        self._require(project_id=project_id)
        return self._fetch(f"load project {project_id}", lambda gl: gl.projects.get(project_id))

    @processor
    def get_projects(self) -> List[Any]:
        """Get projects the current user is a member of"""
        return self._list("load projects", lambda gl: gl.projects.list(membership=True, get_all=True))

    @processor
    def get_all_projects(self) -> List[Any]:
        """Get all projects visible to the current user (all projects for admins)"""
        return self._list("load all projects", lambda gl: gl.projects.list(get_all=True))

    @processor
    def get_projects_via_sudo(self, user_id: int) -> List[Any]:
        """Get projects of another user, impersonating them with sudo"""
        self._require(user_id=user_id)
        user = self._fetch(f"load user {user_id}", lambda gl: gl.users.get(user_id))
        return self._list(
            f"load projects via sudo as {user.username}",
            lambda gl: gl.projects.list(membership=True, get_all=True, sudo=user.username),
        )

    @processor
    def create_project(
        self,
        project_name: str,
        namespace_id: Optional[int] = None,
        description: Optional[str] = None,
        issues_enabled: Optional[bool] = None,
        merge_requests_enabled: Optional[bool] = None,
        wiki_enabled: Optional[bool] = None,
        snippets_enabled: Optional[bool] = None,
        public: Optional[bool] = None,
        visibility_level: Optional[int] = None,
        import_url: Optional[str] = None,
    ) -> Any:
        """Create project

        Args:
            project_name: Name of the project
            namespace_id: Namespace to create the project in (default: user's namespace)
            public: Legacy flag, maps to visibility "public"/"private"
            visibility_level: Legacy level 0/10/20, takes precedence over public
        """
        self._require(project_name=project_name)
        data = payload(
            name=project_name,
            namespace_id=namespace_id,
            description=description,
            issues_enabled=issues_enabled,
            merge_requests_enabled=merge_requests_enabled,
            wiki_enabled=wiki_enabled,
            snippets_enabled=snippets_enabled,
            visibility=visibility(public, visibility_level),
            import_url=import_url,
        )
        return self._fetch(f"create project {project_name}", lambda gl: gl.projects.create(data))

    @processor
    def create_user_project(
        self,
        user_id: int,
        project_name: str,
        description: Optional[str] = None,
        default_branch: Optional[str] = None,
        issues_enabled: Optional[bool] = None,
        merge_requests_enabled: Optional[bool] = None,
        wiki_enabled: Optional[bool] = None,
        snippets_enabled: Optional[bool] = None,
        public: Optional[bool] = None,
        visibility_level: Optional[int] = None,
        import_url: Optional[str] = None,
    ) -> Any:
        """Create project owned by another user (admin only)"""
        self._require(user_id=user_id, project_name=project_name)
        data = payload(
            name=project_name,
            description=description,
            default_branch=default_branch,
            issues_enabled=issues_enabled,
            merge_requests_enabled=merge_requests_enabled,
            wiki_enabled=wiki_enabled,
            snippets_enabled=snippets_enabled,
            visibility=visibility(public, visibility_level),
            import_url=import_url,
        )
        return self._fetch(
            f"create project {project_name} for user {user_id}",
            lambda gl: gl.users.get(user_id, lazy=True).projects.create(data),
        )

    @processor
    def update_project(
        self,
        project_id: int,
        project_name: Optional[str] = None,
        description: Optional[str] = None,
        issues_enabled: Optional[bool] = None,
        merge_requests_enabled: Optional[bool] = None,
        wiki_enabled: Optional[bool] = None,
        snippets_enabled: Optional[bool] = None,
        public: Optional[bool] = None,
        visibility_level: Optional[int] = None,
    ) -> Any:
        """Update project; unset parameters keep their current value"""
        self._require(project_id=project_id)
        new_visibility = visibility(public, visibility_level)
        project = self.get_project(project_id)
        apply_changes(
            project,
            name=project_name,
            description=description,
            issues_enabled=issues_enabled,
            merge_requests_enabled=merge_requests_enabled,
            wiki_enabled=wiki_enabled,
            snippets_enabled=snippets_enabled,
            visibility=new_visibility,
        )
        self._execute(f"update project {project_id}", lambda gl: project.save())
        return project

    @processor
    def delete_project(self, project_id: int) -> None:
        self._require(project_id=project_id)
        self._execute(f"delete project {project_id}", lambda gl: gl.projects.delete(project_id))

    @processor
    def transfer(self, project_id: int, namespace_id: Union[int, str]) -> None:
        """Transfer project to another namespace"""
        self._require(project_id=project_id, namespace_id=namespace_id)
        self._execute(
            f"transfer project {project_id} to namespace {namespace_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).transfer(namespace_id),
        )

    @processor
    def get_file_archive(self, project_id: int, sha: Optional[str] = None, format: Optional[str] = None) -> bytes:
        """Download repository archive (tar.gz unless format is given)"""
        self._require(project_id=project_id)
        return self._fetch(
            f"download archive of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).repository_archive(sha=sha, format=format),
        )

    @processor
    def get_project_members(self, project_id: int) -> List[Any]:
        self._require(project_id=project_id)
        return self._list(
            f"load members of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).members.list(get_all=True),
        )

    @processor
    def add_project_member(
        self, project_id: int, user_id: int, access_level: Union[int, str, None] = None
    ) -> Any:
        """Add user to project (developer access unless given)"""
        self._require(project_id=project_id, user_id=user_id)
        data = {"user_id": user_id, "access_level": to_access_level(access_level)}
        return self._fetch(
            f"add user {user_id} to project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).members.create(data),
        )

    @processor
    def delete_project_member(self, project_id: int, user_id: int) -> None:
        self._require(project_id=project_id, user_id=user_id)
        self._execute(
            f"remove user {user_id} from project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).members.delete(user_id),
        )

