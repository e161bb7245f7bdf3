"""
Tests for the authentication provider facade.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from callback_auth.core.exceptions import InvalidCredentialsError
from callback_auth.models import AuthenticatedUser, Credentials
from callback_auth.schemas.record import Record
from callback_auth.services.authorization import ROOT_CONNECTION_GROUP, AuthorizationView
from callback_auth.services.provider import CallbackAuthenticationProvider
from callback_auth.services.resolution import RecordResolver

from conftest import CALLBACK_RECORD, make_client, make_settings


@pytest.fixture
def resolver():
    resolver = MagicMock(spec=RecordResolver)
    resolver.resolve = AsyncMock()
    return resolver


@pytest.fixture
def provider(resolver):
    return CallbackAuthenticationProvider(resolver)


def test_identifier(provider):
    assert provider.identifier == "callback"


@pytest.mark.asyncio
async def test_authenticate_user_wraps_record(provider, resolver):
    record = Record.model_validate(CALLBACK_RECORD)
    resolver.resolve.return_value = record
    credentials = Credentials(parameters={"user": ["alice"]})

    user = await provider.authenticate_user(credentials)

    assert user.identifier == "alice"
    assert user.authentication_provider_id == "callback"
    assert user.credentials is credentials
    assert user.record is record
    resolver.resolve.assert_awaited_once_with(credentials)


@pytest.mark.asyncio
async def test_authenticate_user_without_record_fails(provider, resolver):
    resolver.resolve.return_value = None

    with pytest.raises(InvalidCredentialsError) as exc_info:
        await provider.authenticate_user(Credentials())

    assert str(exc_info.value) == "Invalid login."


@pytest.mark.asyncio
async def test_user_context_is_view_over_record(provider):
    record = Record.model_validate(CALLBACK_RECORD)
    user = AuthenticatedUser("alice", "callback", Credentials(), record)

    view = await provider.get_user_context(user)

    assert isinstance(view, AuthorizationView)
    assert view.record is record
    assert view.authentication_provider is provider
    assert view.root_connection_group().connection_identifiers == {"a", "b"}


@pytest.mark.asyncio
async def test_updates_are_pass_through(provider, resolver):
    record = Record.model_validate(CALLBACK_RECORD)
    user = AuthenticatedUser("alice", "callback", Credentials(), record)
    view = AuthorizationView(record, provider)

    assert await provider.update_authenticated_user(user, Credentials()) is user
    assert await provider.update_user_context(view, user, Credentials()) is view
    resolver.resolve.assert_not_awaited()


@pytest.mark.asyncio
async def test_from_settings_end_to_end(home):
    def handler(request):
        assert request.url.params["user"] == "alice"
        return httpx.Response(200, content=json.dumps(CALLBACK_RECORD).encode())

    async with make_client(handler) as client:
        provider = CallbackAuthenticationProvider.from_settings(make_settings(home), client)
        user = await provider.authenticate_user(Credentials(parameters={"user": ["alice"]}))
        view = await provider.get_user_context(user)

    assert view.self_user().identifier == "alice"
    directory = view.connection_directory()
    assert directory.get_identifiers() == {"a", "b"}
    assert all(c.parent_identifier == ROOT_CONNECTION_GROUP for c in directory.values())


@pytest.mark.asyncio
async def test_concurrent_logins_do_not_share_records(home):
    def handler(request):
        name = request.url.params["user"]
        return httpx.Response(200, content=json.dumps({"username": name}).encode())

    async with make_client(handler) as client:
        provider = CallbackAuthenticationProvider.from_settings(make_settings(home), client)
        users = await asyncio.gather(*[
            provider.authenticate_user(Credentials(parameters={"user": [f"user-{i}"]}))
            for i in range(10)
        ])

    assert [u.identifier for u in users] == [f"user-{i}" for i in range(10)]


@pytest.mark.asyncio
async def test_host_credential_fields_travel_untouched(provider, resolver):
    resolver.resolve.return_value = Record.model_validate(CALLBACK_RECORD)
    credentials = Credentials(
        parameters={"user": ["alice"]},
        username="alice",
        password="s3cret",
        remote_address="10.0.0.5",
    )

    user = await provider.authenticate_user(credentials)

    assert user.credentials.username == "alice"
    assert user.credentials.password == "s3cret"
    assert user.credentials.remote_address == "10.0.0.5"
    assert "s3cret" not in repr(user.credentials)
