"""Member Schemas — Pydantic request bodies for member create/update.

Invariants:
    - user_login: 1-60 chars of letters, digits, space, _ . - @ (stripped)
    - email must look like an address; roles must be known role names
    - MemberUpdate accepts `username` as an alias of `user_login`
    - Unknown body fields are ignored
"""

from pydantic import AliasChoices, BaseModel, Field, field_validator

from community_rest.core.domain_types import Role

LOGIN_PATTERN = r"^[A-Za-z0-9 _.\-@]+$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def _check_roles(roles: list[str] | None) -> list[str] | None:
    if roles is None:
        return roles
    known = {r.value for r in Role}
    unknown = [r for r in roles if r not in known]
    if unknown:
        raise ValueError(f"unknown role(s): {', '.join(unknown)}")
    return roles


class MemberCreate(BaseModel):
    """Member creation — login, e-mail and password are required."""
    user_login: str = Field(
        min_length=1, max_length=60, pattern=LOGIN_PATTERN,
        validation_alias=AliasChoices("user_login", "username"),
    )
    email: str = Field(max_length=100, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1, max_length=4096)
    name: str | None = Field(None, max_length=250)
    roles: list[str] | None = None
    member_types: list[str] | None = None
    xprofile: dict[str, dict[str, str]] | None = None

    @field_validator("user_login", mode="before")
    @classmethod
    def strip_login(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("roles")
    @classmethod
    def known_roles(cls, v):
        return _check_roles(v)


class MemberUpdate(BaseModel):
    """Member update — every field optional; password is write-only."""
    user_login: str | None = Field(
        None, min_length=1, max_length=60,
        validation_alias=AliasChoices("user_login", "username"),
    )
    email: str | None = Field(None, max_length=100, pattern=EMAIL_PATTERN)
    password: str | None = Field(None, min_length=1, max_length=4096)
    name: str | None = Field(None, max_length=250)
    roles: list[str] | None = None
    member_types: list[str] | None = None
    xprofile: dict[str, dict[str, str]] | None = None

    @field_validator("user_login", mode="before")
    @classmethod
    def strip_login(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("roles")
    @classmethod
    def known_roles(cls, v):
        return _check_roles(v)
