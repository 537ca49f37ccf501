"""Member identity reconciliation.

Turns a member number and a credential into an authenticated session. The
member record and the account identity are created lazily, and concurrent
first logins for the same member number converge on a single record.

The workflow is a small state machine with a fixed, acyclic transition table::

    LOOKUP -> CREATE_MEMBER? -> SIGN_IN -> REMEDIATE? -> RETRY_SIGN_IN -> DONE

Each remediation (re-fetch after an insert conflict, sign-up after a failed
sign-in) happens at most once, so every call finishes in a bounded number of
round trips.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable

from memberdesk.core.logging import get_logger
from memberdesk.domain.collaborators import (
    IdentityAlreadyExistsError,
    IdentityCredentialsRejectedError,
    IdentityNotFoundError,
    IdentityProvider,
    IdentityServiceError,
    MemberRecordStore,
    RecordConflictError,
    RecordStoreError,
)
from memberdesk.domain.entities import AuthSession, MemberRecord, MemberStatus
from memberdesk.domain.exceptions import (
    AccountCreationError,
    InvalidCredentialsError,
    MemberLookupError,
    SessionEstablishmentError,
)
from memberdesk.domain.services.credential_policy import (
    CredentialPolicy,
    normalize_member_number,
)

logger = get_logger(__name__)


class ReconciliationState(str, Enum):
    """States of the reconciliation workflow."""

    LOOKUP = "lookup"
    CREATE_MEMBER = "create_member"
    SIGN_IN = "sign_in"
    REMEDIATE = "remediate"
    RETRY_SIGN_IN = "retry_sign_in"
    DONE = "done"


_TRANSITIONS: dict[ReconciliationState, frozenset[ReconciliationState]] = {
    ReconciliationState.LOOKUP: frozenset(
        {ReconciliationState.CREATE_MEMBER, ReconciliationState.SIGN_IN}
    ),
    ReconciliationState.CREATE_MEMBER: frozenset({ReconciliationState.SIGN_IN}),
    ReconciliationState.SIGN_IN: frozenset(
        {ReconciliationState.REMEDIATE, ReconciliationState.DONE}
    ),
    ReconciliationState.REMEDIATE: frozenset({ReconciliationState.RETRY_SIGN_IN}),
    ReconciliationState.RETRY_SIGN_IN: frozenset({ReconciliationState.DONE}),
}


@dataclass
class ReconciliationResult:
    """Outcome of a successful reconciliation.

    Attributes:
        session: The authenticated session.
        member: The member record the session belongs to.
        member_created: True if this call inserted the member record.
        identity_created: True if this call created the account identity.
        path: States visited, ending with DONE.
    """

    session: AuthSession
    member: MemberRecord
    member_created: bool = False
    identity_created: bool = False
    path: list[ReconciliationState] = field(default_factory=list)


@dataclass
class _Attempt:
    """Working state carried between workflow states."""

    member_number: str
    credential: str
    member: MemberRecord | None = None
    email: str | None = None
    session: AuthSession | None = None
    member_created: bool = False
    identity_created: bool = False
    signup_raced: bool = False
    path: list[ReconciliationState] = field(default_factory=list)

    def require_member(self) -> MemberRecord:
        if self.member is None:
            raise RuntimeError(f"No member record resolved for {self.member_number}")
        return self.member

    def require_email(self) -> str:
        if self.email is None:
            raise RuntimeError(f"No identity email resolved for {self.member_number}")
        return self.email

    def require_session(self) -> AuthSession:
        if self.session is None:
            raise RuntimeError(f"No session established for {self.member_number}")
        return self.session


class MemberIdentityReconciler:
    """Reconciles a member number against its account identity.

    The reconciler never touches session bookkeeping, lockout counters or
    audit logs; those belong to its caller.
    """

    def __init__(
        self,
        record_store: MemberRecordStore,
        identity_provider: IdentityProvider,
        credential_policy: CredentialPolicy,
    ) -> None:
        """Initialize the reconciler.

        Args:
            record_store: Store that owns member records.
            identity_provider: Service that owns account identities.
            credential_policy: Derives placeholder emails.
        """
        self.record_store = record_store
        self.identity_provider = identity_provider
        self.credential_policy = credential_policy
        self._handlers: dict[
            ReconciliationState, Callable[[_Attempt], Awaitable[ReconciliationState]]
        ] = {
            ReconciliationState.LOOKUP: self._lookup,
            ReconciliationState.CREATE_MEMBER: self._create_member,
            ReconciliationState.SIGN_IN: self._sign_in,
            ReconciliationState.REMEDIATE: self._remediate,
            ReconciliationState.RETRY_SIGN_IN: self._retry_sign_in,
        }

    async def reconcile(self, identifier: str, credential: str) -> ReconciliationResult:
        """Authenticate a member, creating the record and identity when missing.

        Args:
            identifier: Member number as entered; trimmed and upper-cased here.
            credential: Password as entered.

        Returns:
            ReconciliationResult with the session and the member record.

        Raises:
            ValueError: If the identifier is blank or malformed.
            MemberLookupError: If the record store cannot be read.
            AccountCreationError: If the record or identity cannot be created.
            InvalidCredentialsError: If the credential is rejected.
            SessionEstablishmentError: If sign-in yields no usable session.
            IdentityServiceError: If the identity service fails during sign-in.
        """
        member_number = normalize_member_number(identifier)
        if not credential:
            raise InvalidCredentialsError(f"Empty credential for member {member_number}")

        attempt = _Attempt(member_number=member_number, credential=credential)
        state = ReconciliationState.LOOKUP
        while state is not ReconciliationState.DONE:
            attempt.path.append(state)
            next_state = await self._handlers[state](attempt)
            if next_state not in _TRANSITIONS[state]:
                raise RuntimeError(
                    f"Illegal reconciliation transition {state.value} -> {next_state.value}"
                )
            logger.debug(
                "Reconciliation transition",
                member_number=member_number,
                from_state=state.value,
                to_state=next_state.value,
            )
            state = next_state
        attempt.path.append(ReconciliationState.DONE)

        member = attempt.require_member()
        session = attempt.require_session()
        await self._link_identity(member, session)

        logger.info(
            "Member reconciled",
            member_number=member_number,
            member_created=attempt.member_created,
            identity_created=attempt.identity_created,
            path=[s.value for s in attempt.path],
        )
        return ReconciliationResult(
            session=session,
            member=member,
            member_created=attempt.member_created,
            identity_created=attempt.identity_created,
            path=attempt.path,
        )

    async def _lookup(self, attempt: _Attempt) -> ReconciliationState:
        try:
            member = await self.record_store.find_by_identifier(attempt.member_number)
        except RecordStoreError as e:
            raise MemberLookupError(
                f"Member lookup failed for {attempt.member_number}: {e.message}"
            ) from e

        if member is None:
            return ReconciliationState.CREATE_MEMBER

        self._use_member(attempt, member)
        return ReconciliationState.SIGN_IN

    async def _create_member(self, attempt: _Attempt) -> ReconciliationState:
        email = self.credential_policy.placeholder_email(attempt.member_number)
        record = MemberRecord(
            member_number=attempt.member_number,
            email=email,
            full_name=attempt.member_number,
            verified=True,
            email_verified=True,
            profile_updated=False,
            first_time_login=True,
            status=MemberStatus.ACTIVE.value,
        )
        try:
            created = await self.record_store.insert(record)
        except RecordConflictError:
            # Another request inserted the same member number first.
            logger.info(
                "Member created concurrently, re-fetching",
                member_number=attempt.member_number,
            )
            try:
                existing = await self.record_store.find_by_identifier(attempt.member_number)
            except RecordStoreError as e:
                raise MemberLookupError(
                    f"Re-fetch after conflict failed for {attempt.member_number}: {e.message}"
                ) from e
            if existing is None:
                raise AccountCreationError(
                    f"Member {attempt.member_number} conflicted on insert but cannot be found"
                )
            self._use_member(attempt, existing)
            return ReconciliationState.SIGN_IN
        except RecordStoreError as e:
            raise AccountCreationError(
                f"Failed to create member {attempt.member_number}: {e.message}"
            ) from e

        attempt.member_created = True
        self._use_member(attempt, created)
        logger.info(
            "Member record created",
            member_number=attempt.member_number,
            email=attempt.email,
        )
        return ReconciliationState.SIGN_IN

    async def _sign_in(self, attempt: _Attempt) -> ReconciliationState:
        member = attempt.require_member()
        try:
            session = await self.identity_provider.sign_in(
                attempt.require_email(), attempt.credential
            )
        except IdentityNotFoundError:
            logger.info("No identity for member yet", member_number=attempt.member_number)
            return ReconciliationState.REMEDIATE
        except IdentityCredentialsRejectedError as e:
            if member.has_identity:
                raise InvalidCredentialsError(
                    f"Credential rejected for member {attempt.member_number}"
                ) from e
            # Unlinked record: the rejection may mean the identity was never created.
            logger.info(
                "Sign-in rejected for unlinked member, attempting sign-up",
                member_number=attempt.member_number,
            )
            return ReconciliationState.REMEDIATE

        attempt.session = self._require_usable(session, attempt)
        return ReconciliationState.DONE

    async def _remediate(self, attempt: _Attempt) -> ReconciliationState:
        try:
            await self.identity_provider.sign_up(
                attempt.require_email(),
                attempt.credential,
                {"member_number": attempt.member_number},
            )
        except IdentityAlreadyExistsError:
            attempt.signup_raced = True
            logger.info(
                "Identity already registered, retrying sign-in",
                member_number=attempt.member_number,
            )
            return ReconciliationState.RETRY_SIGN_IN
        except IdentityServiceError as e:
            raise AccountCreationError(
                f"Failed to create identity for member {attempt.member_number}: {e.message}"
            ) from e

        attempt.identity_created = True
        logger.info("Identity created", member_number=attempt.member_number)
        return ReconciliationState.RETRY_SIGN_IN

    async def _retry_sign_in(self, attempt: _Attempt) -> ReconciliationState:
        try:
            session = await self.identity_provider.sign_in(
                attempt.require_email(), attempt.credential
            )
        except (IdentityNotFoundError, IdentityCredentialsRejectedError) as e:
            if attempt.identity_created:
                raise SessionEstablishmentError(
                    f"Sign-in after sign-up failed for member {attempt.member_number}: {e.message}"
                ) from e
            raise InvalidCredentialsError(
                f"Credential rejected for member {attempt.member_number}"
            ) from e

        attempt.session = self._require_usable(session, attempt)
        return ReconciliationState.DONE

    def _use_member(self, attempt: _Attempt, member: MemberRecord) -> None:
        attempt.member = member
        attempt.email = member.email or self.credential_policy.placeholder_email(
            attempt.member_number
        )

    def _require_usable(self, session: AuthSession | None, attempt: _Attempt) -> AuthSession:
        if session is None or not session.is_usable:
            raise SessionEstablishmentError(
                f"No usable session returned for member {attempt.member_number}"
            )
        return session

    async def _link_identity(self, member: MemberRecord, session: AuthSession) -> None:
        if member.auth_user_id == session.user_id:
            return
        if member.auth_user_id is not None:
            logger.warning(
                "Member linked to a different identity, leaving link unchanged",
                member_number=member.member_number,
                linked_user_id=member.auth_user_id,
                session_user_id=session.user_id,
            )
            return
        try:
            await self.record_store.link_identity(member.member_number, session.user_id)
        except RecordStoreError as e:
            # The session is valid; the link is retried on the next login.
            logger.warning(
                "Failed to link identity to member",
                member_number=member.member_number,
                error=e.message,
            )
            return
        member.auth_user_id = session.user_id
