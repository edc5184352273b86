"""Group processors"""

from typing import Any, List, Optional, Union

from gitlab_connector.infrastructure.gitlab.processor import (
    ProcessorBase,
    payload,
    processor,
    to_access_level,
)


class GroupOperations(ProcessorBase):
    """Groups, group members and namespaces"""

    @processor
    def get_group(self, group_id: int) -> Any:
        self._require(group_id=group_id)
        return self._fetch(f"load group {group_id}", lambda gl: gl.groups.get(group_id))

    @processor
    def get_groups(self) -> List[Any]:
        return self._list("load groups", lambda gl: gl.groups.list(get_all=True))

    @processor
    def create_group(
        self,
        group_name: str,
        path: Optional[str] = None,
        ldap_cn: Optional[str] = None,
        ldap_access: Union[int, str, None] = None,
        sudo_user_id: Optional[int] = None,
    ) -> Any:
        """Create group

        Args:
            group_name: Name of the new group
            path: Group path (defaults to group_name)
            ldap_cn: LDAP common name to sync members from
            ldap_access: Access level granted to LDAP members
            sudo_user_id: Create the group as this user (admin only)
        """
        self._require(group_name=group_name)
        data = payload(
            name=group_name,
            path=path or group_name,
            ldap_cn=ldap_cn,
            ldap_access=to_access_level(ldap_access) if ldap_access is not None else None,
        )
        kwargs = {}
        if sudo_user_id is not None:
            sudo_user = self._fetch(f"load user {sudo_user_id}", lambda gl: gl.users.get(sudo_user_id))
            kwargs["sudo"] = sudo_user.username
        return self._fetch(f"create group {group_name}", lambda gl: gl.groups.create(data, **kwargs))

    @processor
    def create_group_via_sudo(self, group_name: str, path: str, sudo_user_id: int) -> Any:
        """Create group on behalf of another user"""
        self._require(group_name=group_name, path=path, sudo_user_id=sudo_user_id)
        return self.create_group(group_name, path=path, sudo_user_id=sudo_user_id)

    @processor
    def delete_group(self, group_id: int) -> None:
        self._require(group_id=group_id)
        self._execute(f"delete group {group_id}", lambda gl: gl.groups.delete(group_id))

    @processor
    def get_group_members(self, group_id: int) -> List[Any]:
        self._require(group_id=group_id)
        return self._list(
            f"load members of group {group_id}",
            lambda gl: gl.groups.get(group_id, lazy=True).members.list(get_all=True),
        )

    @processor
    def add_group_member(self, group_id: int, user_id: int, access_level: Union[int, str, None] = None) -> Any:
        """Add user to group (developer access unless given)"""
        self._require(group_id=group_id, user_id=user_id)
        data = {"user_id": user_id, "access_level": to_access_level(access_level)}
        return self._fetch(
            f"add user {user_id} to group {group_id}",
            lambda gl: gl.groups.get(group_id, lazy=True).members.create(data),
        )

    @processor
    def delete_group_member(self, group_id: int, user_id: int) -> None:
        self._require(group_id=group_id, user_id=user_id)
        self._execute(
            f"remove user {user_id} from group {group_id}",
            lambda gl: gl.groups.get(group_id, lazy=True).members.delete(user_id),
        )

    @processor
    def get_group_projects(self, group_id: int) -> List[Any]:
        self._require(group_id=group_id)
        return self._list(
            f"load projects of group {group_id}",
            lambda gl: gl.groups.get(group_id, lazy=True).projects.list(get_all=True),
        )

    @processor
    def get_namespace_members(self, namespace_id: int) -> List[Any]:
        """Get members of a group namespace, including inherited ones"""
        self._require(namespace_id=namespace_id)
        return self._list(
            f"load members of namespace {namespace_id}",
            lambda gl: gl.groups.get(namespace_id, lazy=True).members_all.list(get_all=True),
        )
