"""
Seed data used when no state has been stored yet.
"""

from .models import (
    ExperienceEntry,
    JobSignal,
    JobStatus,
    MasterResume,
    OutreachPersona,
    PersonalInfo,
    SourceTier,
)


def sample_master_resume() -> MasterResume:
    """Return the sample master resume shipped with the desk."""
    return MasterResume(
        personal_info=PersonalInfo(
            name="Alex Architect",
            role="Senior SDET & Test Architect",
            location="San Francisco, CA",
        ),
        summary=(
            "Senior Software Development Engineer in Test with 10+ years of experience "
            "building self-healing automation frameworks and AI-driven quality gates. "
            "Specialized in Python, FastAPI, and LLM evaluation benchmarks."
        ),
        core_competencies=[
            "Python", "FastAPI", "Microservices", "Pytest", "LLM Evaluation", "BLEU",
            "ROUGE", "BERTScore", "Constitutional AI", "CI/CD", "GitHub Actions",
            "Jenkins", "AWS", "Kubernetes", "Locust", "Playwright", "Cypress",
        ],
        experience=[
            ExperienceEntry(
                company="Frontier AI Systems",
                role="Lead Test Architect",
                period="2021 - Present",
                achievements=[
                    "Architected an automated LLM evaluation pipeline reducing manual audit time by 75%.",
                    "Developed custom Pytest plugins for non-deterministic output validation.",
                    "Implemented strict semantic integrity checks for RAG-based systems.",
                ],
            ),
            ExperienceEntry(
                company="InfraScale Tech",
                role="Senior SDET",
                period="2017 - 2021",
                achievements=[
                    "Reduced flaky test incidence by 40% through custom retry-logic.",
                    "Scaled API testing suite to handle 10k+ requests per second.",
                ],
            ),
        ],
        education="M.S. in Computer Science, Stanford University",
    )


def sample_signals() -> list[JobSignal]:
    """Return the sample job signals shown on first launch."""
    return [
        JobSignal(
            id="v10-001",
            title="Senior SDET (AI Safety)",
            company="Anthropic",
            location="SF / Remote",
            score=9.4,
            legitimacy=0.98,
            highlights=["Python", "LLM Evaluation", "Pytest"],
            is_remote=True,
            posted_date="2d ago",
            is_verified=True,
            source_tier=SourceTier.DIRECT,
            status=JobStatus.DISCOVERY,
            persona_hint=OutreachPersona.FRONTIER,
            proof="Verified via Greenhouse API sync.",
            base_salary=210000,
        ),
        JobSignal(
            id="v10-002",
            title="QA Automation Lead",
            company="Stripe",
            location="Remote",
            score=9.2,
            legitimacy=0.99,
            highlights=["Python", "FastAPI", "Playwright"],
            is_remote=True,
            posted_date="1d ago",
            is_verified=True,
            source_tier=SourceTier.DIRECT,
            status=JobStatus.OFFER,
            persona_hint=OutreachPersona.INFRASTRUCTURE,
            proof="Verified via Lever API sync.",
            base_salary=220000,
        ),
        JobSignal(
            id="v10-003",
            title="SDET II",
            company="OpenAI",
            location="SF",
            score=8.8,
            legitimacy=0.95,
            highlights=["Python", "CI/CD", "Kubernetes"],
            is_remote=False,
            posted_date="3d ago",
            is_verified=True,
            source_tier=SourceTier.DIRECT,
            status=JobStatus.TAILORING,
            persona_hint=OutreachPersona.FRONTIER,
            proof="Verified via OpenAI Greenhouse instance.",
            base_salary=195000,
        ),
    ]


INTERVIEW_BRIEFS = {
    "Anthropic": ["Bias Detection Evals", "Non-deterministic Testing", "Safety-First CI/CD"],
    "Stripe": ["Idempotency Testing", "Financial Schema Evolution", "Scale & Latency Metrics"],
    "OpenAI": ["LLM Guardrails", "Evaluation Frameworks", "RAG Validation"],
    "Default": ["Testing Framework Architecture", "Quality Guardrails", "Automation ROI"],
}


OUTREACH_TEMPLATES = [
    {
        "id": "follow-up-stale",
        "title": "Signal Recovery",
        "target": "Recruiter",
        "persona": OutreachPersona.STANDARD,
        "content": (
            "Hi [Name], Following up on my [Job Title] application. "
            "I am still highly interested in [Company]'s mission..."
        ),
    },
    {
        "id": "intro-new",
        "title": "Targeted Introduction",
        "target": "Recruiter",
        "persona": OutreachPersona.FRONTIER,
        "content": (
            "Hi [Name], Your [Job Title] role at [Company] caught my attention. "
            "I've architected LLM evaluation pipelines at Frontier AI..."
        ),
    },
]


def interview_brief(company: str) -> list[str]:
    """Topics to prepare for a company's interview loop."""
    return INTERVIEW_BRIEFS.get(company, INTERVIEW_BRIEFS["Default"])
