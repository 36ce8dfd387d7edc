"""Pydantic request/response schemas for op_gateway."""

from pydantic import BaseModel, EmailStr, Field

from src.op_team.domain.models import TeamMember


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ChangePasswordRequest(BaseModel):
    new_password: str = Field(..., min_length=8, max_length=128)


class AuthUser(BaseModel):
    """Session user embedded in login / me responses."""

    id: str
    email: str
    full_name: str
    profile_photo_url: str | None
    seniority_level: str | None
    primary_specialization: str | None
    first_login: bool

    @classmethod
    def from_domain(cls, m: TeamMember) -> "AuthUser":
        return cls(
            id=m.id,
            email=m.email,
            full_name=m.full_name,
            profile_photo_url=m.profile_photo_url,
            seniority_level=m.seniority_level,
            primary_specialization=m.primary_specialization,
            first_login=m.first_login,
        )
