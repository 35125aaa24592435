"""User context supplied per query."""

from typing import Annotated

from pydantic import BaseModel, Field

SkillLevel = Annotated[float, Field(ge=0.0, le=1.0)]


class UserContext(BaseModel):
    """Caller-supplied context used only to bias scoring. Never stored by the core.

    Attributes:
        skill_level: Overall skill level in [0, 1]
        domain_skills: Per-type skill levels overriding skill_level, e.g. {"skill": 0.9}
        preferences: Free-form preferences
        constraints: Free-form constraints
    """

    skill_level: SkillLevel | None = None
    domain_skills: dict[str, SkillLevel] = {}
    preferences: dict[str, str] = {}
    constraints: dict[str, str] = {}

    def skill_for(self, artifact_type: str) -> float | None:
        """Skill level for an artifact type, falling back to the overall level."""
        return self.domain_skills.get(artifact_type, self.skill_level)
