"""In-memory collaborators for unit tests of the login workflow."""

import asyncio
import uuid
from dataclasses import replace
from typing import Any

import pytest

from memberdesk.domain.collaborators import (
    IdentityAlreadyExistsError,
    IdentityCredentialsRejectedError,
    IdentityNotFoundError,
    IdentityProvider,
    MemberRecordStore,
    RecordConflictError,
)
from memberdesk.domain.entities import AccountIdentity, AuthSession, MemberRecord


class InMemoryRecordStore(MemberRecordStore):
    """Record store keyed by member number with a uniqueness check on insert.

    Every call yields to the event loop first so concurrent callers interleave.
    """

    def __init__(self) -> None:
        self.records: dict[str, MemberRecord] = {}
        self.insert_calls = 0
        self.find_calls = 0
        self.find_error: Exception | None = None
        self.insert_error: Exception | None = None

    async def find_by_identifier(self, member_number: str) -> MemberRecord | None:
        self.find_calls += 1
        await asyncio.sleep(0)
        if self.find_error is not None:
            raise self.find_error
        record = self.records.get(member_number)
        return replace(record) if record else None

    async def insert(self, record: MemberRecord) -> MemberRecord:
        self.insert_calls += 1
        await asyncio.sleep(0)
        if self.insert_error is not None:
            raise self.insert_error
        if record.member_number in self.records:
            raise RecordConflictError(f"{record.member_number} exists")
        stored = replace(record, id=str(uuid.uuid4()))
        self.records[record.member_number] = stored
        return replace(stored)

    async def link_identity(self, member_number: str, auth_user_id: str) -> None:
        await asyncio.sleep(0)
        record = self.records[member_number]
        if record.auth_user_id is None:
            record.auth_user_id = auth_user_id


class InMemoryIdentityProvider(IdentityProvider):
    """Email/password identities held in a dict.

    Args:
        report_missing_as_rejected: Mimic services that answer a sign-in for an
            unknown email with the same error as a wrong password.
    """

    def __init__(self, report_missing_as_rejected: bool = False) -> None:
        self.identities: dict[str, dict[str, Any]] = {}
        self.report_missing_as_rejected = report_missing_as_rejected
        self.sign_in_calls = 0
        self.sign_up_calls = 0
        self.sign_up_error: Exception | None = None
        self.empty_session = False

    def add_identity(self, email: str, password: str, user_id: str | None = None) -> str:
        user_id = user_id or str(uuid.uuid4())
        self.identities[email] = {"id": user_id, "password": password, "metadata": {}}
        return user_id

    async def sign_in(self, email: str, credential: str) -> AuthSession:
        self.sign_in_calls += 1
        await asyncio.sleep(0)
        identity = self.identities.get(email)
        if identity is None:
            if self.report_missing_as_rejected:
                raise IdentityCredentialsRejectedError("Invalid login credentials")
            raise IdentityNotFoundError(f"No identity for {email}")
        if identity["password"] != credential:
            raise IdentityCredentialsRejectedError("Invalid login credentials")
        return AuthSession(
            access_token="" if self.empty_session else f"token-{identity['id']}",
            refresh_token="refresh",
            expires_in=3600,
            user_id=identity["id"],
            email=email,
        )

    async def sign_up(
        self, email: str, credential: str, metadata: dict[str, Any]
    ) -> AccountIdentity:
        self.sign_up_calls += 1
        await asyncio.sleep(0)
        if self.sign_up_error is not None:
            raise self.sign_up_error
        if email in self.identities:
            raise IdentityAlreadyExistsError("User already registered")
        user_id = self.add_identity(email, credential)
        self.identities[email]["metadata"] = dict(metadata)
        return AccountIdentity(id=user_id, email=email, metadata=dict(metadata))

    async def update_password(self, session: AuthSession, new_credential: str) -> None:
        self.identities[session.email]["password"] = new_credential

    async def update_email(self, session: AuthSession, new_email: str) -> None:
        if new_email in self.identities:
            raise IdentityAlreadyExistsError("Email address already registered")
        self.identities[new_email] = self.identities.pop(session.email)

    async def admin_set_password(self, user_id: str, new_credential: str) -> None:
        for identity in self.identities.values():
            if identity["id"] == user_id:
                identity["password"] = new_credential
                return
        raise IdentityNotFoundError(user_id)


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def identity_provider() -> InMemoryIdentityProvider:
    return InMemoryIdentityProvider()
