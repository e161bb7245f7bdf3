"""
Host-facing object model
Immutable users, connections, groups and directories handed to the login host
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Generic, Iterable, Iterator, List, Optional, Sequence, TypeVar, Union

from callback_auth.schemas.record import Record

T = TypeVar("T")

ParameterValues = Union[str, Sequence[str]]


@dataclass(frozen=True)
class Credentials:
    """
    What the host knows about a login attempt.

    Only ``parameters`` is interpreted: it is forwarded to the callback.
    ``username``, ``password`` and ``remote_address`` are carried for the
    host and travel unchanged on the AuthenticatedUser; the password is
    kept out of the repr.
    """
    parameters: Optional[Mapping[str, ParameterValues]] = None
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    remote_address: Optional[str] = None


class ObjectPermission(str, Enum):
    """Permission types grantable on a single object"""
    READ = "read"


@dataclass(frozen=True)
class ObjectPermissionSet:
    """READ access to a fixed set of object identifiers"""
    identifiers: FrozenSet[str] = frozenset()

    def has_permission(self, permission: ObjectPermission, identifier: str) -> bool:
        return permission == ObjectPermission.READ and identifier in self.identifiers

    def get_accessible_objects(self, identifiers: Optional[Iterable[str]] = None) -> FrozenSet[str]:
        if identifiers is None:
            return self.identifiers
        return self.identifiers.intersection(identifiers)


@dataclass(frozen=True)
class ConnectionConfiguration:
    protocol: Optional[str]
    parameters: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class Connection:
    identifier: str
    name: str
    configuration: ConnectionConfiguration
    parent_identifier: Optional[str] = None


@dataclass(frozen=True)
class ConnectionGroup:
    identifier: str
    name: str
    connection_identifiers: FrozenSet[str] = frozenset()
    connection_group_identifiers: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class User:
    identifier: str
    user_permissions: ObjectPermissionSet = ObjectPermissionSet()
    connection_permissions: ObjectPermissionSet = ObjectPermissionSet()
    connection_group_permissions: ObjectPermissionSet = ObjectPermissionSet()


@dataclass(frozen=True)
class AuthenticatedUser:
    """A successful login: the resolved record plus the credentials that produced it"""
    identifier: str
    authentication_provider_id: str
    credentials: Credentials
    record: Record = field(repr=False)


class Directory(Mapping, Generic[T]):
    """Read-only identifier → object lookup"""

    def __init__(self, objects: Optional[Mapping[str, T]] = None):
        self._objects: Mapping[str, T] = MappingProxyType(dict(objects or {}))

    def __getitem__(self, identifier: str) -> T:
        return self._objects[identifier]

    def __iter__(self) -> Iterator[str]:
        return iter(self._objects)

    def __len__(self) -> int:
        return len(self._objects)

    def __repr__(self) -> str:
        return f"Directory({dict(self._objects)!r})"

    def get_identifiers(self) -> FrozenSet[str]:
        return frozenset(self._objects)

    def get_all(self, identifiers: Iterable[str]) -> List[T]:
        """Objects for each known identifier; unknown identifiers are skipped."""
        return [self._objects[i] for i in identifiers if i in self._objects]

    @classmethod
    def of(cls, objects: Iterable[T], key=lambda obj: obj.identifier) -> "Directory[T]":
        contents: Dict[str, T] = {key(obj): obj for obj in objects}
        return cls(contents)
