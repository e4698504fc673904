"""
Resume Optimizer - Tailors the master resume to a job signal.

Tailoring runs through a language model when one is configured, or through
a rule-based reordering otherwise. Either way the artifact is audited
against the master resume inventory, and any token that does not appear
in the master resume rejects the artifact.
"""

import json
import logging

from signal_desk.core.exceptions import HallucinationError
from signal_desk.core.integrity import audit, build_inventory, tokenize
from signal_desk.core.models import JobSignal, MasterResume, OptimizationResult
from signal_desk.utils.llm import extract_code_block


class ResumeOptimizer:
    """Generates audited, job-specific resume artifacts."""

    PROMPT_TEMPLATE = """You are tailoring a resume for a specific job.

CONSTRAINTS:
- Tailored content MUST be a subset of the master resume vocabulary.
- Do not introduce any skill, tool, employer, metric, or word that is not in the master resume.
- Reorder and select content so the most relevant experience comes first.
- Return the tailored resume text inside a single fenced code block, followed by a short rationale.

JOB DESCRIPTION:
{job_description}

MASTER_RESUME_JSON:
{master_resume}
"""

    def __init__(self, llm_client=None, temperature: float = 0.2):
        """
        Initialize the optimizer.

        Args:
            llm_client: Optional LLMClient; without one only rule-based tailoring runs
            temperature: Sampling temperature for the model
        """
        self.llm_client = llm_client
        self.temperature = temperature
        self.logger = logging.getLogger(self.__class__.__name__)

    def build_job_description(self, job: JobSignal) -> str:
        """Describe a job signal the way the prompt expects it."""
        description = f"Requires: {', '.join(job.highlights)}. {job.company} infrastructure."
        if job.description:
            description += f"\n\n{job.description[:2000]}"
        return description

    def build_prompt(self, resume: MasterResume, job: JobSignal) -> str:
        return self.PROMPT_TEMPLATE.format(
            job_description=self.build_job_description(job),
            master_resume=json.dumps(resume.to_dict(), indent=2),
        )

    def optimize(
        self,
        resume: MasterResume,
        job: JobSignal,
        use_ai: bool = True,
    ) -> OptimizationResult:
        """
        Produce a tailored resume artifact for a job.

        Args:
            resume: The master resume (ground truth)
            job: Target job signal
            use_ai: Whether to use the language model when available

        Returns:
            OptimizationResult whose audit passed

        Raises:
            HallucinationError: If the artifact uses tokens absent from the master resume
            OptimizationError: If the model call fails
        """
        matched, gaps = self.match_requirements(resume, job)

        if use_ai and self.llm_client is not None:
            self.logger.info(f"Optimizing for {job.title} at {job.company} with model")
            response = self.llm_client.complete(
                self.build_prompt(resume, job),
                temperature=self.temperature,
            )
            candidate, rationale = extract_code_block(response)
            source = "ai"
        else:
            self.logger.info(f"Optimizing for {job.title} at {job.company} with rules")
            candidate = self._tailor_with_rules(resume, job, matched)
            rationale = self._rules_rationale(job, matched, gaps)
            source = "rules"

        report = audit(candidate, resume)
        if not report.passed:
            self.logger.warning(
                f"Rejected artifact for {job.id}: {len(report.violations)} unverified token(s)"
            )
            raise HallucinationError(report.violations, candidate)

        return OptimizationResult(
            job_id=job.id,
            candidate=candidate,
            rationale=rationale,
            audit=report,
            matched_requirements=matched,
            gaps=gaps,
            source=source,
        )

    def match_requirements(
        self,
        resume: MasterResume,
        job: JobSignal,
    ) -> tuple[list[str], list[str]]:
        """
        Split job highlights into those backed by the master resume and gaps.

        A highlight is matched when every one of its tokens is in the inventory.
        """
        inventory = build_inventory(resume)
        matched, gaps = [], []

        for requirement in job.highlights:
            tokens = tokenize(requirement)
            if tokens and tokens <= inventory:
                matched.append(requirement)
            else:
                gaps.append(requirement)

        return matched, gaps

    def _relevance(self, text: str, keywords: set[str]) -> int:
        return len(tokenize(text) & keywords)

    def _tailor_with_rules(
        self,
        resume: MasterResume,
        job: JobSignal,
        matched: list[str],
    ) -> str:
        """Reorder master content by relevance. Only master text is emitted."""
        keywords = set()
        for requirement in job.highlights:
            keywords |= tokenize(requirement)

        competencies = sorted(
            resume.core_competencies,
            key=lambda c: self._relevance(c, keywords),
            reverse=True,
        )
        experience = sorted(
            resume.experience,
            key=lambda e: self._relevance(" ".join([e.role] + e.achievements), keywords),
            reverse=True,
        )

        lines = []
        if competencies:
            lines.append(", ".join(competencies))
            lines.append("")
        if resume.summary:
            lines.append(resume.summary)
            lines.append("")

        for entry in experience:
            lines.append(entry.role)
            achievements = sorted(
                entry.achievements,
                key=lambda a: self._relevance(a, keywords),
                reverse=True,
            )
            for achievement in achievements:
                lines.append(f"- {achievement}")
            lines.append("")

        return "\n".join(lines).strip()

    def _rules_rationale(self, job: JobSignal, matched: list[str], gaps: list[str]) -> str:
        rationale = f"Matched {len(matched)} of {len(job.highlights)} requirements for {job.company}."
        if gaps:
            rationale += f" Gaps: {', '.join(gaps)}."
        return rationale
