"""Pydantic schemas for op_team API responses."""

from pydantic import BaseModel

from src.op_team.domain.models import TeamMember


class TeamMemberItem(BaseModel):
    id: str
    full_name: str
    email: str
    primary_specialization: str | None

    @classmethod
    def from_domain(cls, m: TeamMember) -> "TeamMemberItem":
        return cls(
            id=m.id,
            full_name=m.full_name,
            email=m.email,
            primary_specialization=m.primary_specialization,
        )
