"""Domain models for op_team: pure dataclasses, no business logic."""

from dataclasses import dataclass


@dataclass
class TeamMember:
    id: str
    full_name: str
    email: str
    primary_specialization: str | None
    seniority_level: str | None
    profile_photo_url: str | None
    first_login: bool
    is_active: bool = True


@dataclass
class MemberCredentials:
    """A team member together with the stored bcrypt hash (login path only)."""

    member: TeamMember
    password_hash: str | None
