"""Core models, validation, and the integrity audit."""

from .models import (
    MasterResume,
    PersonalInfo,
    ExperienceEntry,
    JobSignal,
    JobStatus,
    SourceTier,
    OutreachPersona,
    AgentId,
    Schedule,
    AuditReport,
    OptimizationResult,
)
from .exceptions import (
    SignalDeskError,
    SchemaValidationError,
    HallucinationError,
    OptimizationError,
    CronError,
    StorageError,
)
from .integrity import tokenize, build_inventory, find_violations, audit, highlight
from .schema import validate_master_resume, validate_job_injection
from .profile_parser import ProfileParser

__all__ = [
    "MasterResume",
    "PersonalInfo",
    "ExperienceEntry",
    "JobSignal",
    "JobStatus",
    "SourceTier",
    "OutreachPersona",
    "AgentId",
    "Schedule",
    "AuditReport",
    "OptimizationResult",
    "SignalDeskError",
    "SchemaValidationError",
    "HallucinationError",
    "OptimizationError",
    "CronError",
    "StorageError",
    "tokenize",
    "build_inventory",
    "find_violations",
    "audit",
    "highlight",
    "validate_master_resume",
    "validate_job_injection",
    "ProfileParser",
]
