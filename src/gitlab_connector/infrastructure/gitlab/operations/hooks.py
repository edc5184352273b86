"""Project and system hook processors"""

from typing import Any, List, Optional

from gitlab_connector.infrastructure.gitlab.processor import ProcessorBase, payload, processor


class HookOperations(ProcessorBase):
    """Webhooks on projects and system hooks on the instance"""

    @processor
    def get_project_hook(self, project_id: int, hook_id: int) -> Any:
        self._require(project_id=project_id, hook_id=hook_id)
        return self._fetch(
            f"load hook {hook_id} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).hooks.get(hook_id),
        )

    @processor
    def get_project_hooks(self, project_id: int) -> List[Any]:
        self._require(project_id=project_id)
        return self._list(
            f"load hooks of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).hooks.list(get_all=True),
        )

    @processor
    def add_default_project_hook(self, project_id: int, url: str) -> Any:
        """Add project hook with GitLab's default event settings"""
        self._require(project_id=project_id, url=url)
        return self._fetch(
            f"add hook {url} to project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).hooks.create({"url": url}),
        )

    @processor
    def add_project_hook(
        self,
        project_id: int,
        url: str,
        push_events: Optional[bool] = None,
        issues_events: Optional[bool] = None,
        merge_requests_events: Optional[bool] = None,
        enable_ssl_verification: Optional[bool] = None,
    ) -> Any:
        """Add project hook with explicit event settings"""
        self._require(project_id=project_id, url=url)
        data = payload(
            url=url,
            push_events=push_events,
            issues_events=issues_events,
            merge_requests_events=merge_requests_events,
            enable_ssl_verification=enable_ssl_verification,
        )
        return self._fetch(
            f"add hook {url} to project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).hooks.create(data),
        )

    @processor
    def edit_project_hook(self, project_id: int, hook_id: int, url: str) -> Any:
        """Change the URL of a project hook"""
        self._require(project_id=project_id, hook_id=hook_id, url=url)
        hook = self.get_project_hook(project_id, hook_id)
        hook.url = url
        self._execute(f"update hook {hook_id} of project {project_id}", lambda gl: hook.save())
        return hook

    @processor
    def delete_project_hook(self, project_id: int, hook_id: int) -> None:
        self._require(project_id=project_id, hook_id=hook_id)
        self._execute(
            f"delete hook {hook_id} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).hooks.delete(hook_id),
        )

    @processor
    def get_system_hooks(self) -> List[Any]:
        return self._list("load system hooks", lambda gl: gl.hooks.list(get_all=True))

    @processor
    def add_system_hook(self, url: str) -> Any:
        self._require(url=url)
        return self._fetch(f"add system hook {url}", lambda gl: gl.hooks.create({"url": url}))

    @processor
    def delete_system_hook(self, hook_id: int) -> None:
        self._require(hook_id=hook_id)
        self._execute(f"delete system hook {hook_id}", lambda gl: gl.hooks.delete(hook_id))
