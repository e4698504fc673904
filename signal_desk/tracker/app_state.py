"""
Application State - The desk's state container.

Holds the job signals, the master resume, and the current view selection,
and writes every change through to an injected storage backend.
"""

from datetime import datetime, timedelta
from typing import Optional, Union
import logging

from signal_desk.core.exceptions import SignalDeskError, StorageError
from signal_desk.core.models import JobSignal, JobStatus, MasterResume, OptimizationResult
from signal_desk.core.schema import validate_master_resume
from .storage import Storage


TABS = ("dashboard", "kanban", "scrapers", "blueprints")

STORAGE_KEYS = {
    "jobs": "architect_jobs",
    "resume": "architect_resume",
}

STALE_AFTER = timedelta(days=7)


class AppState:
    """Explicit application state persisted through a Storage backend."""

    def __init__(
        self,
        storage: Storage,
        initial_jobs: list[JobSignal],
        initial_resume: MasterResume,
        legitimacy_threshold: float = 0.7,
    ):
        """
        Initialize state, preferring stored values over the initial ones.

        Args:
            storage: Storage backend
            initial_jobs: Signals to use when nothing is stored
            initial_resume: Resume to use when nothing valid is stored
            legitimacy_threshold: Minimum legitimacy for a signal to be shown
        """
        self.storage = storage
        self.legitimacy_threshold = legitimacy_threshold
        self.logger = logging.getLogger(self.__class__.__name__)

        self.jobs: list[JobSignal] = self._load_jobs(initial_jobs)
        self.master_resume: MasterResume = self._load_resume(initial_resume)

        self.active_tab = "dashboard"
        self.selected_job_id = ""
        self.generated_artifact = ""
        self.explanation = ""
        self.last_result: Optional[OptimizationResult] = None
        self.notification: Optional[str] = None
        self.compliance_approved = False

    def _load_jobs(self, initial_jobs: list[JobSignal]) -> list[JobSignal]:
        try:
            stored = self.storage.get(STORAGE_KEYS["jobs"])
        except StorageError as e:
            self.logger.error(f"Stored jobs unreadable, using defaults: {e}")
            return list(initial_jobs)

        if stored is None:
            return list(initial_jobs)
        if not isinstance(stored, list):
            self.logger.error(
                f"Stored jobs are {type(stored).__name__}, expected a list; using defaults"
            )
            return list(initial_jobs)

        jobs = []
        for data in stored:
            if not isinstance(data, dict):
                self.logger.error(f"Skipping malformed stored job: {data!r}")
                continue
            try:
                jobs.append(JobSignal.from_dict(data))
            except (KeyError, TypeError, ValueError) as e:
                self.logger.error(f"Skipping malformed stored job: {e}")
        self.logger.info(f"Loaded {len(jobs)} signals")
        return jobs

    def _load_resume(self, initial_resume: MasterResume) -> MasterResume:
        try:
            stored = self.storage.get(STORAGE_KEYS["resume"])
            if stored is None:
                return initial_resume
            return validate_master_resume(stored)
        except SignalDeskError as e:
            self.logger.error(f"Stored resume rejected, using defaults: {e}")
            return initial_resume

    def _persist_jobs(self) -> None:
        self.storage.set(STORAGE_KEYS["jobs"], [job.to_dict() for job in self.jobs])

    def _persist_resume(self) -> None:
        self.storage.set(STORAGE_KEYS["resume"], self.master_resume.to_dict())

    def save(self) -> None:
        """Write the full state to storage."""
        self._persist_jobs()
        self._persist_resume()

    @property
    def filtered_jobs(self) -> list[JobSignal]:
        """Signals at or above the legitimacy threshold."""
        return [job for job in self.jobs if (job.legitimacy or 0) >= self.legitimacy_threshold]

    @property
    def selected_job(self) -> Optional[JobSignal]:
        """The selected signal, falling back to the first visible one."""
        visible = self.filtered_jobs
        for job in visible:
            if job.id == self.selected_job_id:
                return job
        return visible[0] if visible else None

    def get_job(self, job_id: str) -> Optional[JobSignal]:
        for job in self.jobs:
            if job.id == job_id:
                return job
        return None

    def select_job(self, job_id: str) -> Optional[JobSignal]:
        self.selected_job_id = job_id
        return self.selected_job

    def set_active_tab(self, tab: str) -> None:
        if tab not in TABS:
            raise ValueError(f"Unknown tab: {tab}. Valid tabs: {', '.join(TABS)}")
        self.active_tab = tab

    def save_job(self, job: JobSignal) -> JobSignal:
        """
        Insert or replace a signal. New signals go to the top of the list.

        Returns:
            The saved signal
        """
        for i, existing in enumerate(self.jobs):
            if existing.id == job.id:
                self.jobs[i] = job
                break
        else:
            self.jobs.insert(0, job)

        self.selected_job_id = job.id
        self.notification = "Signal injected successfully."
        self._persist_jobs()
        self.logger.info(f"Saved signal {job.id}: {job.title} at {job.company}")
        return job

    def remove_job(self, job_id: str) -> bool:
        before = len(self.jobs)
        self.jobs = [job for job in self.jobs if job.id != job_id]
        if len(self.jobs) == before:
            return False

        if self.selected_job_id == job_id:
            self.selected_job_id = ""
        self._persist_jobs()
        self.logger.info(f"Removed signal {job_id}")
        return True

    def move_job(
        self,
        job_id: str,
        status: JobStatus,
        now: Optional[datetime] = None,
    ) -> Optional[JobSignal]:
        """
        Move a signal to another Kanban column.

        Returns:
            Updated signal or None if not found
        """
        job = self.get_job(job_id)
        if job is None:
            self.logger.warning(f"Signal not found: {job_id}")
            return None

        old_status = job.status
        job.status = status
        if status == JobStatus.SUBMITTED and old_status != JobStatus.SUBMITTED:
            job.submission_date = now or datetime.now()

        self._persist_jobs()
        self.logger.info(f"Moved {job.company}: {old_status.value} -> {status.value}")
        return job

    def set_master_resume(self, resume: Union[MasterResume, dict]) -> MasterResume:
        """
        Replace the master resume wholesale.

        Raw dicts are schema-validated first.

        Raises:
            SchemaValidationError: If a dict does not match the resume schema
        """
        if not isinstance(resume, MasterResume):
            resume = validate_master_resume(resume)

        self.master_resume = resume
        self.notification = "Master Source Ingested Successfully."
        self._persist_resume()
        self.logger.info(
            f"Master resume replaced ({len(resume.core_competencies)} competencies)"
        )
        return resume

    def kanban_columns(self) -> dict[JobStatus, list[JobSignal]]:
        """Visible signals grouped by status, in pipeline order."""
        columns = {status: [] for status in JobStatus}
        for job in self.filtered_jobs:
            columns[job.status].append(job)
        return columns

    def is_stale(self, job: JobSignal, now: Optional[datetime] = None) -> bool:
        """A submitted signal with no movement for a week needs a follow-up."""
        if job.status != JobStatus.SUBMITTED or job.submission_date is None:
            return False
        now = now or datetime.now()
        submitted = job.submission_date
        if (submitted.tzinfo is None) != (now.tzinfo is None):
            submitted = submitted.replace(tzinfo=None)
            now = now.replace(tzinfo=None)
        return now - submitted >= STALE_AFTER

    def optimize(self, optimizer, use_ai: bool = True) -> OptimizationResult:
        """
        Tailor the master resume for the selected signal.

        The artifact is stored only when it passes the audit. Rejections and
        model failures are recorded in the explanation and re-raised.
        """
        job = self.selected_job
        if job is None:
            raise SignalDeskError("No signal selected")

        self.logger.info(f"Optimizing signal {job.id}")
        self.generated_artifact = ""
        self.explanation = ""
        self.last_result = None
        self.compliance_approved = False

        try:
            result = optimizer.optimize(self.master_resume, job, use_ai=use_ai)
        except SignalDeskError as e:
            self.logger.error(f"Optimization failed: {e}")
            self.explanation = f"System failure: {e}"
            raise

        self.generated_artifact = result.candidate
        self.explanation = result.rationale
        self.last_result = result
        return result

    def approve(self) -> bool:
        """Mark the current artifact as approved. Only audited artifacts qualify."""
        if self.last_result is None or not self.last_result.audit.passed:
            self.compliance_approved = False
            return False
        self.compliance_approved = True
        return True

    def follow_up(self, generator, job: JobSignal, use_ai: bool = True) -> str:
        """Draft a follow-up for a signal and show it in the explanation panel."""
        self.logger.info(f"Generating follow-up for {job.id}")
        try:
            draft = generator.generate(self.master_resume, job, use_ai=use_ai)
        except SignalDeskError as e:
            self.logger.error(f"Follow-up generation failed: {e}")
            self.notification = "Failed to generate follow-up draft."
            raise

        self.explanation = f"FOLLOW-UP DRAFT FOR {job.company.upper()}:\n\n{draft}"
        self.active_tab = "dashboard"
        self.notification = "Follow-up artifact generated."
        return draft

    def statistics(self) -> dict:
        """Summary statistics over all signals."""
        total = len(self.jobs)
        visible = self.filtered_jobs

        by_status = {}
        for status in JobStatus:
            count = len([job for job in self.jobs if job.status == status])
            if count > 0:
                by_status[status.value] = count

        return {
            "total": total,
            "visible": len(visible),
            "quarantined": total - len(visible),
            "by_status": by_status,
            "average_score": sum(job.score for job in self.jobs) / total if total else 0,
            "average_legitimacy": sum(job.legitimacy for job in self.jobs) / total if total else 0,
            "stale": len([job for job in self.jobs if self.is_stale(job)]),
        }
