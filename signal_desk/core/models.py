"""
Core data models for the signal desk.

JSON serialization keeps camelCase keys so stored blobs stay compatible
with the browser dashboard's localStorage format.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid


class JobStatus(Enum):
    """Kanban column of a job signal, in pipeline order."""
    DISCOVERY = "discovery"
    TAILORING = "tailoring"
    SUBMITTED = "submitted"
    SCREENING = "screening"
    INTERVIEW = "interview"
    OFFER = "offer"


class SourceTier(Enum):
    """Trust tier of the source a signal came from."""
    DIRECT = "Tier 1 - Direct"
    PARTNER = "Tier 2 - Partner"
    AGGREGATOR = "Tier 3 - Aggregator"
    ORGANIC = "Tier 4 - Organic"


class OutreachPersona(Enum):
    """Tone used for recruiter outreach."""
    STANDARD = "standard"
    FRONTIER = "frontier"
    INFRASTRUCTURE = "infrastructure"


class EquityType(Enum):
    RSUS = "RSUs"
    OPTIONS = "Options"
    PERFORMANCE_RSUS = "Performance-RSUs"


class AgentId(Enum):
    """Scraper agents that can be run or scheduled."""
    LINKEDIN = "linkedin"
    DICE = "dice"
    GHOST = "ghost"
    GREENHOUSE = "greenhouse"


def _optional_enum(enum_cls, value):
    if value is None or value == "":
        return None
    return enum_cls(value)


@dataclass
class PersonalInfo:
    name: str = ""
    role: str = ""
    location: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "role": self.role, "location": self.location}


@dataclass
class ExperienceEntry:
    """A single position on the master resume."""
    company: str
    role: str
    period: str = ""
    achievements: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "company": self.company,
            "role": self.role,
            "period": self.period,
            "achievements": list(self.achievements),
        }


@dataclass
class MasterResume:
    """The user's canonical profile, used as ground truth for every audit."""
    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    summary: str = ""
    core_competencies: list[str] = field(default_factory=list)
    experience: list[ExperienceEntry] = field(default_factory=list)
    education: str = ""

    @property
    def roles(self) -> list[str]:
        return [entry.role for entry in self.experience]

    @property
    def achievements(self) -> list[str]:
        return [a for entry in self.experience for a in entry.achievements]

    def to_dict(self) -> dict:
        return {
            "personalInfo": self.personal_info.to_dict(),
            "summary": self.summary,
            "coreCompetencies": list(self.core_competencies),
            "experience": [e.to_dict() for e in self.experience],
            "education": self.education,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MasterResume":
        """Build from trusted data. Untrusted input goes through core.schema."""
        info = data.get("personalInfo") or {}
        return cls(
            personal_info=PersonalInfo(
                name=info.get("name", ""),
                role=info.get("role", ""),
                location=info.get("location", ""),
            ),
            summary=data.get("summary", ""),
            core_competencies=list(data.get("coreCompetencies", [])),
            experience=[
                ExperienceEntry(
                    company=e.get("company", ""),
                    role=e.get("role", ""),
                    period=e.get("period", ""),
                    achievements=list(e.get("achievements", [])),
                )
                for e in data.get("experience", [])
            ],
            education=data.get("education", ""),
        )


@dataclass
class JobSignal:
    """A job posting tracked on the desk."""
    id: str = field(default_factory=lambda: f"job-{uuid.uuid4().hex[:12]}")
    title: str = ""
    company: str = ""
    location: str = ""
    score: float = 0.0  # 0-10
    legitimacy: float = 1.0  # 0-1
    highlights: list[str] = field(default_factory=list)
    is_remote: bool = False
    posted_date: str = "Just now"
    is_verified: bool = False
    source_tier: SourceTier = SourceTier.DIRECT
    source_platform: str = ""
    salary_range: str = ""
    status: JobStatus = JobStatus.DISCOVERY
    submission_date: Optional[datetime] = None
    recruiter_name: str = ""
    recruiter_title: str = ""
    persona_hint: Optional[OutreachPersona] = None
    proof: str = ""
    description: str = ""
    source_url: str = ""

    # Compensation
    base_salary: Optional[int] = None
    equity_amount: Optional[int] = None
    equity_type: Optional[EquityType] = None
    sign_on_bonus: Optional[int] = None

    @property
    def total_compensation(self) -> Optional[int]:
        if self.base_salary is None:
            return None
        return self.base_salary + (self.equity_amount or 0) + (self.sign_on_bonus or 0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "score": self.score,
            "legitimacy": self.legitimacy,
            "highlights": list(self.highlights),
            "isRemote": self.is_remote,
            "postedDate": self.posted_date,
            "isVerified": self.is_verified,
            "sourceTier": self.source_tier.value,
            "sourcePlatform": self.source_platform,
            "salaryRange": self.salary_range,
            "status": self.status.value,
            "submissionDate": self.submission_date.isoformat() if self.submission_date else None,
            "recruiterName": self.recruiter_name,
            "recruiterTitle": self.recruiter_title,
            "personaHint": self.persona_hint.value if self.persona_hint else None,
            "proof": self.proof,
            "description": self.description,
            "sourceUrl": self.source_url,
            "baseSalary": self.base_salary,
            "equityAmount": self.equity_amount,
            "equityType": self.equity_type.value if self.equity_type else None,
            "signOnBonus": self.sign_on_bonus,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "JobSignal":
        submission_date = data.get("submissionDate")
        if isinstance(submission_date, str) and submission_date:
            submission_date = datetime.fromisoformat(submission_date.replace("Z", "+00:00"))
        else:
            submission_date = None

        return cls(
            id=data.get("id") or f"job-{uuid.uuid4().hex[:12]}",
            title=data.get("title", ""),
            company=data.get("company", ""),
            location=data.get("location", ""),
            score=float(data.get("score") or 0.0),
            legitimacy=float(data.get("legitimacy") or 0.0),
            highlights=list(data.get("highlights") or []),
            is_remote=bool(data.get("isRemote", False)),
            posted_date=data.get("postedDate") or "Just now",
            is_verified=bool(data.get("isVerified", False)),
            source_tier=SourceTier(data.get("sourceTier") or SourceTier.DIRECT.value),
            source_platform=data.get("sourcePlatform") or "",
            salary_range=data.get("salaryRange") or "",
            status=JobStatus(data.get("status") or JobStatus.DISCOVERY.value),
            submission_date=submission_date,
            recruiter_name=data.get("recruiterName") or "",
            recruiter_title=data.get("recruiterTitle") or "",
            persona_hint=_optional_enum(OutreachPersona, data.get("personaHint")),
            proof=data.get("proof") or "",
            description=data.get("description") or "",
            source_url=data.get("sourceUrl") or "",
            base_salary=data.get("baseSalary"),
            equity_amount=data.get("equityAmount"),
            equity_type=_optional_enum(EquityType, data.get("equityType")),
            sign_on_bonus=data.get("signOnBonus"),
        )


@dataclass
class Schedule:
    """A cron schedule for a scraper agent."""
    agent_id: AgentId
    cron: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> dict:
        return {"id": self.id, "agentId": self.agent_id.value, "cron": self.cron}

    @classmethod
    def from_dict(cls, data: dict) -> "Schedule":
        return cls(id=data["id"], agent_id=AgentId(data["agentId"]), cron=data["cron"])


@dataclass
class AuditReport:
    """Outcome of a hallucination audit."""
    violations: list[str] = field(default_factory=list)
    inventory_size: int = 0
    candidate_token_count: int = 0

    @property
    def passed(self) -> bool:
        return not self.violations

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "violations": list(self.violations),
            "inventory_size": self.inventory_size,
            "candidate_token_count": self.candidate_token_count,
        }


@dataclass
class OptimizationResult:
    """A tailored resume artifact that passed the audit."""
    job_id: str
    candidate: str
    rationale: str = ""
    audit: AuditReport = field(default_factory=AuditReport)
    matched_requirements: list[str] = field(default_factory=list)
    gaps: list[str] = field(default_factory=list)
    source: str = "rules"  # rules, ai
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "job_id": self.job_id,
            "candidate": self.candidate,
            "rationale": self.rationale,
            "audit": self.audit.to_dict(),
            "matched_requirements": self.matched_requirements,
            "gaps": self.gaps,
            "source": self.source,
            "created_at": self.created_at.isoformat(),
        }
