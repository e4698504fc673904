"""
Schema validation for user-supplied data.

Everything that arrives from outside (imported resume JSON, stored blobs,
AI-parsed output, injected signals) passes through these schemas before it
is turned into a model.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import SchemaValidationError
from .models import ExperienceEntry, JobSignal, MasterResume, PersonalInfo, SourceTier


class PersonalInfoSchema(BaseModel):
    name: str = Field(min_length=2)
    role: str = Field(min_length=3)
    location: str = Field(min_length=2)


class ExperienceSchema(BaseModel):
    company: str
    role: str
    period: str
    achievements: List[str]


class MasterResumeSchema(BaseModel):
    """Validated shape of a master resume."""

    model_config = ConfigDict(populate_by_name=True)

    personal_info: PersonalInfoSchema = Field(alias="personalInfo")
    summary: str = Field(min_length=10, max_length=1000)
    core_competencies: List[str] = Field(alias="coreCompetencies", min_length=1)
    experience: List[ExperienceSchema]
    education: str = Field(min_length=5)

    @field_validator("core_competencies")
    @classmethod
    def _validate_competencies(cls, value: List[str]) -> List[str]:
        for item in value:
            if len(item) < 2:
                raise ValueError("each competency must be at least 2 characters")
        return value

    def to_model(self) -> MasterResume:
        return MasterResume(
            personal_info=PersonalInfo(
                name=self.personal_info.name,
                role=self.personal_info.role,
                location=self.personal_info.location,
            ),
            summary=self.summary,
            core_competencies=list(self.core_competencies),
            experience=[
                ExperienceEntry(
                    company=e.company,
                    role=e.role,
                    period=e.period,
                    achievements=list(e.achievements),
                )
                for e in self.experience
            ],
            education=self.education,
        )


class JobInjectionSchema(BaseModel):
    """Validated shape of a manually injected job signal."""

    model_config = ConfigDict(str_strip_whitespace=True)

    company: str = Field(min_length=2, max_length=100)
    title: str = Field(min_length=3, max_length=150)
    location: str = Field(min_length=2, max_length=100)
    highlights: List[str] = Field(min_length=1, max_length=20)
    salary: Optional[int] = Field(default=None, ge=30000, le=500000)
    link: Optional[str] = None
    score: float = Field(default=8.5, ge=0.0, le=10.0)
    legitimacy: float = Field(default=1.0, ge=0.0, le=1.0)
    source_tier: SourceTier = SourceTier.DIRECT

    @field_validator("highlights")
    @classmethod
    def _validate_highlights(cls, value: List[str]) -> List[str]:
        cleaned = [h.strip() for h in value]
        for item in cleaned:
            if len(item) < 2:
                raise ValueError("each skill must be at least 2 characters")
            if len(item) > 50:
                raise ValueError("each skill must not exceed 50 characters")
        return cleaned

    @field_validator("link")
    @classmethod
    def _validate_link(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        if not value.startswith(("http://", "https://")) or "." not in value:
            raise ValueError("invalid job posting URL")
        return value


def _field_errors(error: ValidationError) -> dict[str, list[str]]:
    """Flatten pydantic errors into field -> messages."""
    errors: dict[str, list[str]] = {}
    for item in error.errors():
        loc = item.get("loc") or ("__root__",)
        key = ".".join(str(part) for part in loc)
        errors.setdefault(key, []).append(item.get("msg", "invalid value"))
    return errors


def validate_master_resume(data: Any) -> MasterResume:
    """
    Validate raw data and convert it to a MasterResume.

    Args:
        data: Parsed JSON (expected to be a dict)

    Returns:
        MasterResume model

    Raises:
        SchemaValidationError: If the data does not match the schema
    """
    if not isinstance(data, dict):
        raise SchemaValidationError(
            "Master resume must be a JSON object",
            {"__root__": [f"expected object, got {type(data).__name__}"]},
        )

    try:
        return MasterResumeSchema.model_validate(data).to_model()
    except ValidationError as e:
        raise SchemaValidationError("Master resume validation failed", _field_errors(e)) from e


def validate_job_injection(data: Any, existing: Optional[JobSignal] = None) -> JobSignal:
    """
    Validate an injected signal and build (or update) a JobSignal.

    Args:
        data: Raw form data
        existing: Signal being edited, whose id/status/proof are kept

    Returns:
        JobSignal ready to be saved

    Raises:
        SchemaValidationError: If the data does not match the schema
    """
    if not isinstance(data, dict):
        raise SchemaValidationError(
            "Job signal must be a JSON object",
            {"__root__": [f"expected object, got {type(data).__name__}"]},
        )

    try:
        validated = JobInjectionSchema.model_validate(data)
    except ValidationError as e:
        raise SchemaValidationError("Job signal validation failed", _field_errors(e)) from e

    job = JobSignal(
        title=validated.title,
        company=validated.company,
        location=validated.location,
        score=validated.score,
        legitimacy=validated.legitimacy,
        highlights=validated.highlights,
        is_remote="remote" in validated.location.lower(),
        is_verified=validated.legitimacy >= 0.9,
        source_tier=validated.source_tier,
        base_salary=validated.salary,
        source_url=validated.link or "",
        proof="Manual injection",
    )

    if existing is not None:
        job.id = existing.id
        job.status = existing.status
        job.posted_date = existing.posted_date
        job.submission_date = existing.submission_date
        job.proof = existing.proof or job.proof

    return job
