"""
Credential domain model.

This module defines the Credential entity for alternate Windows
credentials and the SessionCredentials capability used to open sessions.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class Credential(BaseModel):
    """
    Domain model for an alternate Windows account.

    Username may be `DOMAIN\\user`, `user@domain` or a local account name.
    """

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., description="Windows account name")
    password: SecretStr = Field(..., description="Account password")

    @field_validator('username')
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username is not empty."""
        if not v or not v.strip():
            raise ValueError("Username cannot be empty")
        return v.strip()

    def get_password(self) -> str:
        """Get the plain text password."""
        return self.password.get_secret_value()  # pylint: disable=no-member


class SessionCredentials(BaseModel):
    """
    How a remote session authenticates.

    Use `ambient()` to run as the caller's own identity or
    `supplied(credential)` for an explicit account. The secret is passed
    through to the transport unmodified and never rendered.
    """

    model_config = ConfigDict(frozen=True)

    credential: Optional[Credential] = Field(None, description="Explicit account, None for ambient identity")

    @classmethod
    def ambient(cls) -> SessionCredentials:
        return cls(credential=None)

    @classmethod
    def supplied(cls, credential: Credential) -> SessionCredentials:
        return cls(credential=credential)

    @property
    def is_ambient(self) -> bool:
        return self.credential is None

    @property
    def username(self) -> Optional[str]:
        return self.credential.username if self.credential else None

    def auth_pair(self) -> tuple[Optional[str], Optional[str]]:
        """(username, password) tuple as expected by pywinrm."""
        if self.credential is None:
            return (None, None)
        return (self.credential.username, self.credential.get_password())

    def describe(self) -> str:
        return "current user" if self.is_ambient else str(self.username)
