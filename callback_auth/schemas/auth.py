"""
Authentication Schemas
Response models describing a successful callback login
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from callback_auth.services.authorization import AuthorizationView


class BaseSchema(BaseModel):
    """Base schema with common configuration"""
    model_config = ConfigDict(from_attributes=True)


class PermissionSummary(BaseSchema):
    """Identifiers the user may READ, per object type"""
    users: List[str] = Field(default_factory=list, description="Readable user identifiers")
    connections: List[str] = Field(default_factory=list, description="Readable connection identifiers")
    connection_groups: List[str] = Field(default_factory=list, description="Readable connection group identifiers")


class ConnectionSummary(BaseSchema):
    """A visible connection; parameters are never echoed back"""
    identifier: str = Field(..., description="Connection identifier")
    name: str = Field(..., description="Display name")
    protocol: Optional[str] = Field(None, description="Remote access protocol")
    parent_identifier: Optional[str] = Field(None, description="Containing connection group")


class ConnectionGroupSummary(BaseSchema):
    identifier: str = Field(..., description="Connection group identifier")
    name: str = Field(..., description="Display name")
    connection_identifiers: List[str] = Field(default_factory=list, description="Member connections")
    connection_group_identifiers: List[str] = Field(default_factory=list, description="Child groups")


class LoginResponse(BaseSchema):
    """Login response schema"""
    username: str = Field(..., description="Authenticated user identifier")
    authentication_provider: str = Field(..., description="Provider that authenticated the user")
    permissions: PermissionSummary = Field(..., description="Visible identifiers")
    connections: List[ConnectionSummary] = Field(default_factory=list, description="Visible connections")
    root_group: ConnectionGroupSummary = Field(..., description="Root connection group")
    message: str = Field("Login successful", description="Success message")

    @classmethod
    def from_view(cls, view: AuthorizationView, provider_identifier: str) -> "LoginResponse":
        user = view.self_user()
        root = view.root_connection_group()
        connections = sorted(view.connection_directory().values(), key=lambda c: c.identifier)

        return cls(
            username=user.identifier,
            authentication_provider=provider_identifier,
            permissions=PermissionSummary(
                users=sorted(user.user_permissions.identifiers),
                connections=sorted(user.connection_permissions.identifiers),
                connection_groups=sorted(user.connection_group_permissions.identifiers),
            ),
            connections=[
                ConnectionSummary(
                    identifier=connection.identifier,
                    name=connection.name,
                    protocol=connection.configuration.protocol,
                    parent_identifier=connection.parent_identifier,
                )
                for connection in connections
            ],
            root_group=ConnectionGroupSummary(
                identifier=root.identifier,
                name=root.name,
                connection_identifiers=sorted(root.connection_identifiers),
                connection_group_identifiers=sorted(root.connection_group_identifiers),
            ),
        )
