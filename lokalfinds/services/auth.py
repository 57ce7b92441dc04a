"""
Auth session façade.

AuthFacade is the only writer of the SessionStore. Every operation validates
its input locally first, then calls the AuthProvider once; provider failures
surface as AuthProviderError and are never retried.
"""
import asyncio
import logging
import uuid
from typing import Optional, Protocol

from workos import WorkOSClient
from workos.exceptions import (
    BadRequestException,
    EmailVerificationRequiredException,
    NotFoundException,
)

from lokalfinds.api.v1.schemas.auth import AuthUser, SignInResult, UserProfile, UserProfileUpdate
from lokalfinds.core.config import settings
from lokalfinds.core.exceptions import AuthErrorCategory, AuthProviderError, ValidationError
from lokalfinds.core.local_storage import LocalKeyValueStore
from lokalfinds.services.session import Session, SessionStatus, SessionStore, require_member
from lokalfinds.services.validation import (
    validate_email,
    validate_login,
    validate_name,
    validate_signup,
)

logger = logging.getLogger(__name__)

PENDING_SIGNUP_KEY = "pendingSignup"
PENDING_SIGNUP_VALUE = "true"

GUEST_ID_PREFIX = "guest_"


class AuthProvider(Protocol):
    """Identity backend used by AuthFacade."""

    async def sign_in(self, email: str, password: str) -> SignInResult: ...

    async def sign_up(
        self, email: str, password: str, first_name: str, last_name: str
    ) -> SignInResult: ...

    async def sign_in_anonymously(self) -> AuthUser: ...

    async def send_password_reset(self, email: str) -> None: ...

    async def update_profile(
        self, user_id: str, first_name: Optional[str], last_name: Optional[str]
    ) -> UserProfile: ...


def _error_codes(exc: Exception) -> set:
    codes = set()
    code = getattr(exc, "code", None)
    if code:
        codes.add(code)
    for error in getattr(exc, "errors", None) or []:
        if isinstance(error, dict) and error.get("code"):
            codes.add(error["code"])
    return codes


def translate_workos_error(exc: Exception) -> AuthProviderError:
    """
    Map a WorkOS SDK exception to an AuthProviderError category.

    Reference: https://workos.com/docs/reference/errors
    """
    if isinstance(exc, AuthProviderError):
        return exc

    response = getattr(exc, "response", None)
    if getattr(response, "status_code", None) == 429:
        return AuthProviderError(AuthErrorCategory.RATE_LIMITED, cause=exc)

    if isinstance(exc, NotFoundException):
        return AuthProviderError(AuthErrorCategory.UNKNOWN_ACCOUNT, cause=exc)

    codes = _error_codes(exc)
    if "user_not_found" in codes:
        return AuthProviderError(AuthErrorCategory.UNKNOWN_ACCOUNT, cause=exc)
    if "invalid_email" in codes:
        return AuthProviderError(AuthErrorCategory.INVALID_EMAIL, cause=exc)

    if isinstance(exc, EmailVerificationRequiredException):
        return AuthProviderError(
            message="Please verify your email address before signing in", cause=exc
        )
    if isinstance(exc, BadRequestException):
        if "invalid_credentials" in codes:
            return AuthProviderError(
                message="Invalid email or password. Please check your credentials and try again.",
                cause=exc,
            )
        if "email_not_available" in codes:
            return AuthProviderError(
                message="Email address is already registered. Please try logging in.",
                cause=exc,
            )

    return AuthProviderError(AuthErrorCategory.GENERIC, cause=exc)


class WorkOSAuthProvider:
    """
    AuthProvider backed by WorkOS User Management.

    WorkOS has no anonymous sign-in, so guest identities are minted locally
    and never reach the provider.
    """

    def __init__(self, workos_client: Optional[WorkOSClient] = None):
        if workos_client is None:
            workos_client = WorkOSClient(
                api_key=settings.WORKOS_API_KEY, client_id=settings.WORKOS_CLIENT_ID
            )
        self.workos_client = workos_client

    async def _call(self, method, **kwargs):
        # Offload synchronous WorkOS call to thread pool to avoid blocking event loop
        # Reference: https://docs.python.org/3/library/asyncio-task.html#asyncio.to_thread
        try:
            return await asyncio.to_thread(method, **kwargs)
        except Exception as e:
            error = translate_workos_error(e)
            logger.warning(
                f"WorkOS {getattr(method, '__name__', 'call')} failed "
                f"({error.category.value}): {type(e).__name__}: {e}"
            )
            raise error from e

    @staticmethod
    def _to_result(response) -> SignInResult:
        workos_user = response.user
        return SignInResult(
            user=AuthUser(
                id=workos_user.id,
                email=workos_user.email,
                access_token=response.access_token,
                refresh_token=response.refresh_token,
            ),
            profile=UserProfile(
                first_name=workos_user.first_name or "",
                last_name=workos_user.last_name or "",
                email=workos_user.email or "",
            ),
        )

    async def sign_in(self, email: str, password: str) -> SignInResult:
        response = await self._call(
            self.workos_client.user_management.authenticate_with_password,
            email=email,
            password=password,
        )
        logger.info(f"User signed in: {response.user.id}")
        return self._to_result(response)

    async def sign_up(
        self, email: str, password: str, first_name: str, last_name: str
    ) -> SignInResult:
        """
        Create the WorkOS user, then sign in with the same credentials.

        Reference: https://workos.com/docs/reference/user-management/user/create
        """
        workos_user = await self._call(
            self.workos_client.user_management.create_user,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
        )
        logger.info(f"User created: {workos_user.id} ({email})")
        return await self.sign_in(email, password)

    async def sign_in_anonymously(self) -> AuthUser:
        guest = AuthUser(id=f"{GUEST_ID_PREFIX}{uuid.uuid4().hex}", is_anonymous=True)
        logger.info(f"Guest identity minted: {guest.id}")
        return guest

    async def send_password_reset(self, email: str) -> None:
        # WorkOS generates the token and sends the email
        await self._call(
            self.workos_client.user_management.create_password_reset,
            email=email,
        )

    async def update_profile(
        self, user_id: str, first_name: Optional[str], last_name: Optional[str]
    ) -> UserProfile:
        # Reference: https://workos.com/docs/reference/user-management/user/update
        workos_user = await self._call(
            self.workos_client.user_management.update_user,
            user_id=user_id,
            first_name=first_name,
            last_name=last_name,
        )
        return UserProfile(
            first_name=workos_user.first_name or "",
            last_name=workos_user.last_name or "",
            email=workos_user.email or "",
        )


class AuthFacade:
    """
    Session state machine over an AuthProvider.

    SIGNED_OUT -> SIGNING_IN -> SIGNED_IN, SIGNED_OUT -> GUEST,
    GUEST -> SIGNED_OUT (pending-signup flag written first) and
    SIGNED_OUT -> SIGNING_UP -> SIGNED_IN. A failed sign-in or sign-up
    restores the session it started from.
    """

    def __init__(
        self,
        provider: AuthProvider,
        store: SessionStore,
        local_storage: LocalKeyValueStore,
    ):
        self.provider = provider
        self.store = store
        self.local_storage = local_storage

    @property
    def session(self) -> Session:
        return self.store.snapshot

    async def _authenticate(self, transitional: SessionStatus, call) -> Session:
        previous = self.store.snapshot
        self.store._replace(status=transitional, user=None, profile=None)
        try:
            result = await call
        except Exception:
            self.store._replace(
                status=previous.status, user=previous.user, profile=previous.profile
            )
            raise
        return self.store._replace(
            status=SessionStatus.SIGNED_IN, user=result.user, profile=result.profile
        )

    async def login(self, email: str, password: str) -> Session:
        email = validate_login(email, password)
        return await self._authenticate(
            SessionStatus.SIGNING_IN, self.provider.sign_in(email, password)
        )

    async def signup(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        confirm_password: Optional[str] = None,
        accepted_terms: bool = True,
    ) -> Session:
        email, first_name, last_name = validate_signup(
            email, password, first_name, last_name, confirm_password, accepted_terms
        )
        return await self._authenticate(
            SessionStatus.SIGNING_UP,
            self.provider.sign_up(email, password, first_name, last_name),
        )

    async def login_anonymously(self) -> Session:
        user = await self.provider.sign_in_anonymously()
        return self.store._replace(status=SessionStatus.GUEST, user=user, profile=None)

    async def reset_password(self, email: str) -> None:
        email = validate_email(email)
        await self.provider.send_password_reset(email)
        logger.info(f"Password reset requested for {email}")

    async def update_user_profile(self, patch: UserProfileUpdate) -> Session:
        """
        Update the signed-in user's name.

        Raises:
            ValidationError: For guest or signed-out sessions (before any I/O) and
                for empty or malformed names
            AuthProviderError: If the provider rejects the update
        """
        session = self.store.snapshot
        require_member(session, "Please create an account to update your profile")

        first_name = patch.first_name
        last_name = patch.last_name
        if first_name is None and last_name is None:
            raise ValidationError("Nothing to update")
        if first_name is not None:
            first_name = validate_name(first_name, "first_name")
        if last_name is not None:
            last_name = validate_name(last_name, "last_name")

        profile = await self.provider.update_profile(session.user.id, first_name, last_name)
        if not profile.email and session.user.email:
            profile = profile.model_copy(update={"email": session.user.email})
        return self.store._replace(profile=profile)

    async def logout(self) -> Session:
        user_id = self.store.snapshot.user_id
        session = self.store._reset()
        logger.info(f"Signed out {user_id}")
        return session

    async def logout_guest_and_signup(self) -> bool:
        """
        Leave a guest session so the user can create an account.

        The pending-signup flag is persisted before the guest session is torn
        down, so the next login screen can route straight to signup.

        Returns:
            True if the guest session ended, False if the flag could not be written
        """
        if not self.store.snapshot.is_guest:
            raise ValidationError("Only guest sessions can switch to signup", field="session")
        try:
            await self.local_storage.set_item(PENDING_SIGNUP_KEY, PENDING_SIGNUP_VALUE)
        except OSError as e:
            logger.error(f"Error logging out guest: {e}", exc_info=True)
            return False
        await self.logout()
        return True

    async def consume_pending_signup(self) -> bool:
        """Read and clear the pending-signup flag. True at most once per write."""
        value = await self.local_storage.pop_item(PENDING_SIGNUP_KEY)
        return value == PENDING_SIGNUP_VALUE
