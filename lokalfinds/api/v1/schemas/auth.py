from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """
    Identity returned by the auth provider.

    Guest identities are flagged with is_anonymous and never carry an email.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Auth provider user ID")
    email: Optional[str] = Field(None, description="User email")
    is_anonymous: bool = Field(False, description="Whether this is a guest identity")
    access_token: Optional[str] = Field(None, description="Access token issued by the provider")
    refresh_token: Optional[str] = Field(None, description="Refresh token issued by the provider")


class UserProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    first_name: str = Field("", description="User first name")
    last_name: str = Field("", description="User last name")
    email: str = Field("", description="User email")

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class UserProfileUpdate(BaseModel):
    """Patch for the signed-in user's profile. Only set fields are written."""
    first_name: Optional[str] = Field(None, max_length=255, description="User first name")
    last_name: Optional[str] = Field(None, max_length=255, description="User last name")


class SignInResult(BaseModel):
    """What the provider returns after a successful sign-in or sign-up."""
    user: AuthUser
    profile: UserProfile = Field(default_factory=UserProfile)
