"""User and SSH key processors"""

from typing import Any, List, Optional

from gitlab.v4.objects import CurrentUserManager

from gitlab_connector.infrastructure.gitlab.processor import ProcessorBase, payload, processor


class UserOperations(ProcessorBase):
    """Users, user SSH keys and project deploy keys"""

    @processor
    def get_user(self, user_id: int) -> Any:
        self._require(user_id=user_id)
        return self._fetch(f"load user {user_id}", lambda gl: gl.users.get(user_id))

    @processor
    def get_current_user(self) -> Any:
        """Get the user the session is authenticated as"""

        def _current(gl):
            gl.auth()
            return gl.user

        return self._fetch("load current user", _current)

    @processor
    def get_user_via_sudo(self, username: str) -> Any:
        """Get the current user as seen when impersonating username"""
        self._require(username=username)
        return self._fetch(
            f"load user {username} via sudo",
            lambda gl: CurrentUserManager(gl).get(sudo=username),
        )

    @processor
    def find_users(self, email_or_username: str) -> List[Any]:
        """Search users by e-mail or username"""
        self._require(email_or_username=email_or_username)
        return self._list(
            f"search users matching {email_or_username}",
            lambda gl: gl.users.list(search=email_or_username, get_all=True),
        )

    @processor
    def create_user(
        self,
        email: str,
        password: Optional[str] = None,
        username: Optional[str] = None,
        full_name: Optional[str] = None,
        skype_id: Optional[str] = None,
        linkedin: Optional[str] = None,
        twitter: Optional[str] = None,
        website_url: Optional[str] = None,
        projects_limit: Optional[int] = None,
        extern_uid: Optional[str] = None,
        extern_provider_name: Optional[str] = None,
        bio: Optional[str] = None,
        is_admin: Optional[bool] = None,
        can_create_group: Optional[bool] = None,
        skip_confirmation: Optional[bool] = None,
    ) -> Any:
        """Create user (admin only)

        Without a password GitLab sends a reset link to the e-mail address.
        """
        self._require(email=email)
        data = payload(
            email=email,
            password=password,
            reset_password=True if password is None else None,
            username=username or email.split("@")[0],
            name=full_name or username or email,
            skype=skype_id,
            linkedin=linkedin,
            twitter=twitter,
            website_url=website_url,
            projects_limit=projects_limit,
            extern_uid=extern_uid,
            provider=extern_provider_name,
            bio=bio,
            admin=is_admin,
            can_create_group=can_create_group,
            skip_confirmation=skip_confirmation,
        )
        return self._fetch(f"create user {data['username']}", lambda gl: gl.users.create(data))

    @processor
    def delete_user(self, user_id: int) -> None:
        self._require(user_id=user_id)
        self._execute(f"delete user {user_id}", lambda gl: gl.users.delete(user_id))

    @processor
    def block_user(self, user_id: int) -> None:
        self._require(user_id=user_id)
        self._execute(f"block user {user_id}", lambda gl: gl.users.get(user_id, lazy=True).block())

    @processor
    def unblock_user(self, user_id: int) -> None:
        self._require(user_id=user_id)
        self._execute(f"unblock user {user_id}", lambda gl: gl.users.get(user_id, lazy=True).unblock())

    @processor
    def get_ssh_key(self, key_id: int) -> Any:
        self._require(key_id=key_id)
        return self._fetch(f"load SSH key {key_id}", lambda gl: gl.keys.get(key_id))

    @processor
    def get_ssh_keys(self, user_id: int) -> List[Any]:
        self._require(user_id=user_id)
        return self._list(
            f"load SSH keys of user {user_id}",
            lambda gl: gl.users.get(user_id, lazy=True).keys.list(get_all=True),
        )

    @processor
    def create_ssh_key(self, user_id: int, title: str, key: str) -> Any:
        self._require(user_id=user_id, title=title, key=key)
        return self._fetch(
            f"create SSH key {title} for user {user_id}",
            lambda gl: gl.users.get(user_id, lazy=True).keys.create({"title": title, "key": key}),
        )

    @processor
    def delete_ssh_key(self, user_id: int, key_id: int) -> None:
        self._require(user_id=user_id, key_id=key_id)
        self._execute(
            f"delete SSH key {key_id} of user {user_id}",
            lambda gl: gl.users.get(user_id, lazy=True).keys.delete(key_id),
        )

    @processor
    def get_deploy_keys(self, project_id: int) -> List[Any]:
        self._require(project_id=project_id)
        return self._list(
            f"load deploy keys of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).keys.list(get_all=True),
        )

    @processor
    def create_deploy_key(self, project_id: int, title: str, key: str, can_push: Optional[bool] = None) -> Any:
        self._require(project_id=project_id, title=title, key=key)
        data = payload(title=title, key=key, can_push=can_push)
        return self._fetch(
            f"create deploy key {title} in project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).keys.create(data),
        )

    @processor
    def delete_deploy_key(self, project_id: int, key_id: int) -> None:
        self._require(project_id=project_id, key_id=key_id)
        self._execute(
            f"delete deploy key {key_id} of project {project_id}",
            lambda gl: gl.projects.get(project_id, lazy=True).keys.delete(key_id),
        )
