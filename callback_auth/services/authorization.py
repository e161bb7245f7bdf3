"""
Authorization View
Translates a resolved Record into the user, connections and root group a host can query.

Every function here is a pure function of the Record; nothing is cached and
the Record is never written to.
"""

from types import MappingProxyType
from typing import Any, Dict, FrozenSet

from callback_auth.models import (
    Connection,
    ConnectionConfiguration,
    ConnectionGroup,
    Directory,
    ObjectPermissionSet,
    User,
)
from callback_auth.schemas.record import ConnectionSpec, Record

# Identifier of the single, synthetic group containing every connection
ROOT_CONNECTION_GROUP = "ROOT"


def get_user_identifiers(record: Record) -> FrozenSet[str]:
    # Each user can only see themselves
    return frozenset({record.username})


def get_connection_identifiers(record: Record) -> FrozenSet[str]:
    if record.connections is None:
        return frozenset()
    return frozenset(record.connections)


def get_connection_group_identifiers(record: Record) -> FrozenSet[str]:
    return frozenset({ROOT_CONNECTION_GROUP})


def get_user(record: Record) -> User:
    """The record's own user, with READ access to everything the record makes visible."""
    return User(
        identifier=record.username,
        user_permissions=ObjectPermissionSet(get_user_identifiers(record)),
        connection_permissions=ObjectPermissionSet(get_connection_identifiers(record)),
        connection_group_permissions=ObjectPermissionSet(get_connection_group_identifiers(record)),
    )


def get_user_directory(record: Record) -> Directory[User]:
    return Directory.of([get_user(record)])


def to_connection(identifier: str, spec: ConnectionSpec) -> Connection:
    """Wrap a ConnectionSpec as a Connection named by its identifier, inside the root group."""
    configuration = ConnectionConfiguration(
        protocol=spec.protocol,
        parameters=MappingProxyType(dict(spec.parameters or {})),
    )
    return Connection(
        identifier=identifier,
        name=identifier,
        configuration=configuration,
        parent_identifier=ROOT_CONNECTION_GROUP,
    )


def get_connection_directory(record: Record) -> Directory[Connection]:
    if record.connections is None:
        return Directory()

    contents: Dict[str, Connection] = {
        identifier: to_connection(identifier, spec)
        for identifier, spec in record.connections.items()
    }
    return Directory(contents)


def get_root_connection_group(record: Record) -> ConnectionGroup:
    # Flat model: all connections, no child groups
    return ConnectionGroup(
        identifier=ROOT_CONNECTION_GROUP,
        name=ROOT_CONNECTION_GROUP,
        connection_identifiers=get_connection_identifiers(record),
        connection_group_identifiers=frozenset(),
    )


def get_connection_group_directory(record: Record) -> Directory[ConnectionGroup]:
    return Directory.of([get_root_connection_group(record)])


class AuthorizationView:
    """
    Read-only, per-session view over one Record.

    Accessors re-derive their result on every call. Never build a view from
    an absent Record; that is a failed login.
    """

    def __init__(self, record: Record, authentication_provider: Any = None):
        if record is None:
            raise ValueError("An authorization view requires a resolved record")
        self._record = record
        self._authentication_provider = authentication_provider

    @property
    def record(self) -> Record:
        return self._record

    @property
    def authentication_provider(self) -> Any:
        return self._authentication_provider

    def self_user(self) -> User:
        return get_user(self._record)

    def user_directory(self) -> Directory[User]:
        return get_user_directory(self._record)

    def connection_directory(self) -> Directory[Connection]:
        return get_connection_directory(self._record)

    def connection_group_directory(self) -> Directory[ConnectionGroup]:
        return get_connection_group_directory(self._record)

    def root_connection_group(self) -> ConnectionGroup:
        return get_root_connection_group(self._record)
