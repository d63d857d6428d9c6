"""
User models for the Training API proxy.
Upstream game-server users, locally stored profiles and the shapes built from them.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class Warn(BaseModel):
    """Warning entry attached to an upstream user."""

    reason: str = Field("", description="Warning reason")
    admin: str = Field("", description="Issuing admin")
    bantime: str = Field("", description="Ban time")


class UpstreamUser(BaseModel):
    """User as returned by the upstream game-server API."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(0, description="Upstream user ID")
    login: str = Field("", description="Login")
    access: int = Field(0, description="Access level")
    moder: int = Field(0, description="Moderator level")
    verify: int = Field(0, description="Verification flag")
    verify_text: str = Field("", alias="verifyText", description="Verification text")
    mute: int = Field(0, description="Mute flag")
    online: int = Field(0, description="Online flag")
    player_id: int = Field(0, alias="playerid", description="In-game player ID")
    reg_date: str = Field("", alias="regdate", description="Registration date")
    last_login: str = Field("", alias="lastlogin", description="Last login date")
    warn: Optional[List[Warn]] = Field(None, description="Warnings")


class UpstreamUserEnvelope(BaseModel):
    """Body of the upstream user-by-name endpoint."""

    data: UpstreamUser = Field(default_factory=UpstreamUser, description="User data")


class LocalUser(BaseModel):
    """Profile stored in the local database."""

    model_config = ConfigDict(from_attributes=True)

    account_id: int = Field(..., description="Account ID, same as the upstream user ID")
    account_name: str = Field("", description="Display name")
    account_names: List[str] = Field(default_factory=list, description="Historical names")
    avatar: str = Field("", description="Avatar")
    background: str = Field("", description="Profile background")
    vip: str = Field("", description="VIP status")
    social_credits: float = Field(0.0, description="Social credits rating")
    kills: int = Field(0, description="Kill count")
    deaths: int = Field(0, description="Death count")
    cop_chase_rating: int = Field(0, description="CopChase rating")
    punishments: List[str] = Field(default_factory=list, description="Punishments")
    verification: str = Field("", description="Account verification")
    achievement: str = Field("", description="Achievement")
    telegram: str = Field("", description="Telegram handle")
    prefix: str = Field("", description="Prefix")
    star: str = Field("", description="Star")
    application_verification: str = Field("", description="Application verification")

    @field_validator("*", mode="before")
    @classmethod
    def null_as_zero_value(cls, v, info: ValidationInfo):
        """Stored NULLs stand for zero values."""
        field = cls.model_fields[info.field_name]
        if v is None and not field.is_required():
            return field.get_default(call_default_factory=True)
        return v


class LongUser(UpstreamUser):
    """Upstream user enriched with the display fields of the local profile."""

    avatar: str = Field("", description="Avatar")
    background: str = Field("", description="Profile background")
    vip: str = Field("", description="VIP status")
    social_credits: float = Field(0.0, description="Social credits rating")
    kills: int = Field(0, description="Kill count")
    deaths: int = Field(0, description="Death count")
    cop_chase_rating: int = Field(0, description="CopChase rating")
    punishments: List[str] = Field(default_factory=list, description="Punishments")
    achievement: str = Field("", description="Achievement")
    telegram: str = Field("", description="Telegram handle")
    prefix: str = Field("", description="Prefix")
    star: str = Field("", description="Star")
    application_verification: str = Field("", description="Application verification")

    @classmethod
    def merge(cls, upstream: UpstreamUser, local: LocalUser) -> "LongUser":
        """Build a LongUser from an upstream user and its local profile."""
        return cls(
            **upstream.model_dump(),
            avatar=local.avatar,
            background=local.background,
            vip=local.vip,
            social_credits=local.social_credits,
            kills=local.kills,
            deaths=local.deaths,
            cop_chase_rating=local.cop_chase_rating,
            punishments=local.punishments,
            achievement=local.achievement,
            telegram=local.telegram,
            prefix=local.prefix,
            star=local.star,
            application_verification=local.application_verification,
        )


class ShortUser(BaseModel):
    """Search result row."""

    id: int = Field(..., description="Account ID")
    login: str = Field(..., description="Account name")
