from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProviderConfig(BaseModel):
    """Client registration for one provider. Immutable for the lifetime of a flow."""

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1, repr=False)
    redirect_uri: str
    scope: list[str] = Field(default_factory=list)


class SpotifyConfig(ProviderConfig):
    show_dialog: bool = False


class GoogleConfig(ProviderConfig):
    access_type: str | None = "offline"  # request refresh token
    prompt: str | None = "consent"  # force consent to get refresh token


class TokenResponse(BaseModel):
    """Raw token endpoint payload (RFC 6749 section 5.1)."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(min_length=1)
    token_type: str
    scope: str | list[str] | None = None
    expires_in: int | None = None
    refresh_token: str | None = None


class TokenSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    access_token: str = Field(repr=False)
    token_type: str
    scope: str | list[str] | None = None
    access_token_expires_in: int | None = None
    refresh_token: str | None = Field(default=None, repr=False)

    @classmethod
    def from_response(cls, payload: TokenResponse) -> TokenSet:
        return cls(
            access_token=payload.access_token,
            token_type=payload.token_type,
            scope=payload.scope,
            access_token_expires_in=payload.expires_in,
            refresh_token=payload.refresh_token,
        )


class ProviderUser(BaseModel):
    """External profile: stable id plus the untouched provider payload."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id_to_str(cls, v):
        """Some providers (GitHub, Discord) return numeric ids."""
        if isinstance(v, bool):
            return v
        if isinstance(v, int):
            return str(v)
        return v


class LinkedAuthRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: int | str
    provider_id: str
    provider_user_id: str
    is_new_user: bool = False


class OAuthCallbackResult(LinkedAuthRecord):
    """Link record as returned by the store, plus the profile and tokens it was built from.

    Fields a store adds on its own record subclass are carried over as extras.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    provider_user: ProviderUser
    tokens: TokenSet
