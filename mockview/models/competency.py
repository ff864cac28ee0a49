"""
Competency and plan-input models for MockView

The candidate profile and role requirements are produced upstream
(CV / job-description parsing) and consumed here read-only.
"""

from pydantic import BaseModel, Field


class CompetencyArea(BaseModel):
    """A named skill cluster with a relative importance weight."""

    name: str = Field(..., min_length=1, description="Competency name")
    weight: float = Field(
        ..., ge=0, le=1,
        description="Relative importance (0-1), ideally summing to 1 per role"
    )
    skills: list[str] = Field(
        default_factory=list,
        description="Skill tags covered by this competency"
    )


class ExperienceEntry(BaseModel):
    """One position from the candidate's work history."""

    company: str
    role: str
    duration_months: int = Field(default=0, ge=0)
    technologies: list[str] = Field(default_factory=list)


class CandidateProfile(BaseModel):
    """Structured candidate profile (read-only collaborator input)."""

    skills: list[str] = Field(default_factory=list)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    total_years_experience: float = Field(default=0, ge=0)
    seniority: str = "mid"

    def summary_line(self) -> str:
        """Short description of recent roles for prompt context."""
        roles = [f"{e.role} at {e.company}" for e in self.experience[:2]]
        return ", ".join(roles) or "their background"


class RoleRequirements(BaseModel):
    """Structured role requirements (read-only collaborator input)."""

    title: str = "Software Engineer"
    seniority: str = "mid"
    competency_areas: list[CompetencyArea] = Field(default_factory=list)

    def find_competency(self, name: str) -> CompetencyArea | None:
        """Look up a competency area by name."""
        for area in self.competency_areas:
            if area.name == name:
                return area
        return None


class PlanInput(BaseModel):
    """Everything needed to start an interview."""

    profile: CandidateProfile = Field(default_factory=CandidateProfile)
    role: RoleRequirements
