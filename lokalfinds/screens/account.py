"""
Account screens: login, signup, password reset and settings.

These screens drive the AuthFacade; their loaded data is the Session (or,
for the login screen, whether a pending signup was waiting).
"""
import logging
from typing import Optional

from lokalfinds.api.v1.schemas.auth import UserProfile, UserProfileUpdate
from lokalfinds.screens.base import Result, Screen
from lokalfinds.services.auth import AuthFacade
from lokalfinds.services.session import Session

logger = logging.getLogger(__name__)

PASSWORD_RESET_SENT = "If an account exists with this email address, a password reset link has been sent."


class LoginScreen(Screen[bool]):
    """
    Loaded data is True when the user left a guest session to sign up, in
    which case the caller routes straight to the signup screen.
    """

    def __init__(self, auth: AuthFacade):
        super().__init__()
        self.auth = auth

    async def _fetch(self) -> bool:
        return await self.auth.consume_pending_signup()

    async def submit(self, email: Optional[str], password: Optional[str]) -> Result:
        return await self._submit(self.auth.login(email, password))

    async def continue_as_guest(self) -> Result:
        return await self._submit(self.auth.login_anonymously())


class SignupScreen(Screen[Session]):
    def __init__(self, auth: AuthFacade):
        super().__init__()
        self.auth = auth

    async def _fetch(self) -> Session:
        return self.auth.session

    async def submit(
        self,
        email: Optional[str],
        password: Optional[str],
        first_name: Optional[str],
        last_name: Optional[str],
        confirm_password: Optional[str] = None,
        accepted_terms: bool = True,
    ) -> Result:
        result = await self._submit(
            self.auth.signup(
                email, password, first_name, last_name, confirm_password, accepted_terms
            )
        )
        if result.ok:
            self._update(data=result.value)
        return result


class ForgotPasswordScreen(Screen[str]):
    """Loaded data is the confirmation message once a reset was requested."""

    def __init__(self, auth: AuthFacade):
        super().__init__()
        self.auth = auth

    async def _fetch(self) -> str:
        return ""

    async def submit(self, email: Optional[str]) -> Result:
        result = await self._submit(self.auth.reset_password(email))
        if result.ok:
            self._update(data=PASSWORD_RESET_SENT)
        return result


class SettingsScreen(Screen[Optional[UserProfile]]):
    """The signed-in user's name. Guests see no profile and cannot save."""

    def __init__(self, auth: AuthFacade):
        super().__init__()
        self.auth = auth

    @property
    def is_guest(self) -> bool:
        return self.auth.session.is_guest

    async def _fetch(self) -> Optional[UserProfile]:
        return self.auth.session.profile

    async def save(self, first_name: Optional[str], last_name: Optional[str]) -> Result:
        # Both names are required on this form; empty strings fail validation
        patch = UserProfileUpdate(first_name=first_name or "", last_name=last_name or "")
        result = await self._submit(self.auth.update_user_profile(patch))
        if result.ok:
            self._update(data=result.value.profile)
        return result

    async def logout(self) -> Result:
        result = await self._submit(self.auth.logout())
        if result.ok:
            self._update(data=None)
        return result

    async def create_account(self) -> Result:
        """Leave the guest session; the login screen then routes to signup."""
        return await self._submit(self.auth.logout_guest_and_signup())
