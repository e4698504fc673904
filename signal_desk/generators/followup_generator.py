"""
Follow-up Generator - Drafts recruiter outreach for tracked signals.

Drafts come from the outreach templates, or from the language model when one
is configured.
"""

from typing import Optional
import logging

from signal_desk.core.models import JobSignal, MasterResume, OutreachPersona
from signal_desk.core.seed import OUTREACH_TEMPLATES


class FollowUpGenerator:
    """Generates follow-up emails for job signals."""

    PROMPT_TEMPLATE = """Write a short, professional follow-up email to a recruiter.

APPLICANT:
Name: {name}
Role: {role}
Summary: {summary}
Key Skills: {skills}

JOB:
Title: {title}
Company: {company}
Status: {status}
Recruiter: {recruiter}

INSTRUCTIONS:
- Keep it under 150 words.
- Only mention skills and experience listed above.
- Return ONLY the email body, nothing else."""

    def __init__(self, llm_client=None, templates: Optional[list[dict]] = None):
        """
        Initialize the follow-up generator.

        Args:
            llm_client: Optional LLMClient for AI drafting
            templates: Outreach templates (defaults to the built-in set)
        """
        self.llm_client = llm_client
        self.templates = templates if templates is not None else OUTREACH_TEMPLATES
        self.logger = logging.getLogger(self.__class__.__name__)

    def generate(self, resume: MasterResume, job: JobSignal, use_ai: bool = True) -> str:
        """
        Draft a follow-up email.

        Raises:
            OptimizationError: If the model call fails
        """
        if use_ai and self.llm_client is not None:
            self.logger.info(f"Drafting follow-up for {job.company} with model")
            prompt = self.PROMPT_TEMPLATE.format(
                name=resume.personal_info.name,
                role=resume.personal_info.role,
                summary=resume.summary,
                skills=", ".join(resume.core_competencies[:10]),
                title=job.title,
                company=job.company,
                status=job.status.value,
                recruiter=job.recruiter_name or "Hiring Team",
            )
            return self.llm_client.complete(prompt, temperature=0.4).strip()

        template = self.select_template(job)
        self.logger.info(f"Drafting follow-up for {job.company} from template {template['id']}")
        return self.fill_template(template["content"], job)

    def select_template(self, job: JobSignal) -> dict:
        """Pick the template matching the signal's persona, else the standard one."""
        persona = job.persona_hint or OutreachPersona.STANDARD
        for template in self.templates:
            if template["persona"] == persona:
                return template
        for template in self.templates:
            if template["persona"] == OutreachPersona.STANDARD:
                return template
        return self.templates[0]

    def fill_template(self, content: str, job: JobSignal) -> str:
        """Replace [Name], [Job Title] and [Company] placeholders."""
        return (
            content
            .replace("[Name]", job.recruiter_name or "there")
            .replace("[Job Title]", job.title)
            .replace("[Company]", job.company)
        )
