"""
Dashboard Renderer - Creates static views of the desk state.

Renders one of the desk tabs to a timestamped HTML or markdown file:
- dashboard: signal feed, tailored artifact with hallucination highlights,
  score breakdown and audit trail
- kanban: pipeline columns with stale signals flagged
- scrapers: agents, schedules and the latest simulation logs
- blueprints: the master resume JSON
"""

from datetime import datetime
from html import escape
from pathlib import Path
from typing import Optional
import json
import logging

from signal_desk.core.integrity import build_inventory, highlight
from signal_desk.core.models import JobSignal, JobStatus, MasterResume
from signal_desk.core.seed import interview_brief
from .app_state import TABS, AppState


SCORE_METRICS = [
    ("Keyword Match", 0.25, 2.5),
    ("Experience Fit", 0.3, 3.0),
    ("Platform Mastery", 0.25, 2.5),
    ("Domain Context", 0.2, 2.0),
]


def score_breakdown(score: float) -> list[dict]:
    """
    Split a 0-10 signal score into weighted metrics.

    Returns:
        One dict per metric with label, value and percentage (0-100)
    """
    breakdown = []
    for label, weight, maximum in SCORE_METRICS:
        value = score * weight
        percentage = max(0.0, min(100.0, value / maximum * 100))
        breakdown.append({"label": label, "value": value, "percentage": percentage})
    return breakdown


def master_text(resume: MasterResume) -> str:
    """Plain-text rendering of the master resume used for side-by-side views."""
    lines = [resume.summary, "", ", ".join(resume.core_competencies), ""]
    for entry in resume.experience:
        lines.append(entry.role)
        lines.extend(f"- {a}" for a in entry.achievements)
        lines.append("")
    return "\n".join(lines).strip()


class DashboardRenderer:
    """Renders desk tabs in html or markdown."""

    STATUS_COLORS = {
        JobStatus.DISCOVERY: "#e3f2fd",
        JobStatus.TAILORING: "#e8f5e9",
        JobStatus.SUBMITTED: "#fff9c4",
        JobStatus.SCREENING: "#f3e5f5",
        JobStatus.INTERVIEW: "#e1f5fe",
        JobStatus.OFFER: "#c8e6c9",
    }

    CSS = """
        * { box-sizing: border-box; font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; }
        body { margin: 0; padding: 20px; background: #f5f5f5; color: #333; }
        .container { max-width: 1400px; margin: 0 auto; }
        .panel { background: white; padding: 15px 25px; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); margin-bottom: 20px; }
        .columns { display: flex; gap: 20px; flex-wrap: wrap; }
        .columns > div { flex: 1; min-width: 300px; }
        table { width: 100%; border-collapse: collapse; }
        th { background: #2196f3; color: white; padding: 10px; text-align: left; }
        td { padding: 10px; border-bottom: 1px solid #eee; }
        pre { white-space: pre-wrap; background: #fafafa; padding: 10px; border-radius: 4px; }
        mark.violation { background: #ffcdd2; color: #b71c1c; }
        .bar { height: 8px; background: #eee; border-radius: 4px; overflow: hidden; }
        .fill { height: 100%; background: #2196f3; }
        .card { padding: 8px; margin-bottom: 8px; border-radius: 4px; }
        .stale { border-left: 4px solid #f44336; }
        .selected { background: #e3f2fd; }
    """

    def __init__(self, output_dir: str = "./dashboards"):
        """
        Initialize the renderer.

        Args:
            output_dir: Directory for rendered files
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger(self.__class__.__name__)

    def render(
        self,
        state: AppState,
        tab: Optional[str] = None,
        format: str = "html",
        registry=None,
        scheduler=None,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Render a tab to a file.

        Args:
            state: Desk state to render
            tab: Tab name (defaults to the active tab)
            format: Output format (html, markdown)
            registry: Optional AgentRegistry for the scrapers tab
            scheduler: Optional AgentScheduler for the scrapers tab
            now: Reference time for stale detection

        Returns:
            Path to the rendered file
        """
        tab = tab or state.active_tab
        content = self.render_content(state, tab, format, registry, scheduler, now)
        ext = "html" if format == "html" else "md"

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = self.output_dir / f"{tab}_{timestamp}.{ext}"

        with open(filepath, "w", encoding="utf-8") as f:
            f.write(content)

        self.logger.info(f"Rendered {tab} tab: {filepath}")
        return str(filepath)

    def render_content(
        self,
        state: AppState,
        tab: str,
        format: str = "html",
        registry=None,
        scheduler=None,
        now: Optional[datetime] = None,
    ) -> str:
        """Render a tab to a string."""
        if tab not in TABS:
            raise ValueError(f"Unknown tab: {tab}. Valid tabs: {', '.join(TABS)}")
        if format not in ("html", "markdown"):
            raise ValueError(f"Unsupported format: {format}")

        if format == "markdown":
            sections = {
                "dashboard": lambda: self._dashboard_markdown(state),
                "kanban": lambda: self._kanban_markdown(state, now),
                "scrapers": lambda: self._scrapers_markdown(registry, scheduler),
                "blueprints": lambda: self._blueprints_markdown(state),
            }
            return sections[tab]()

        sections = {
            "dashboard": lambda: self._dashboard_html(state),
            "kanban": lambda: self._kanban_html(state, now),
            "scrapers": lambda: self._scrapers_html(registry, scheduler),
            "blueprints": lambda: self._blueprints_html(state),
        }
        return self._page(tab, sections[tab]())

    def _page(self, tab: str, body: str) -> str:
        nav = " | ".join(
            f"<strong>{t.title()}</strong>" if t == tab else t.title() for t in TABS
        )
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Signal Desk - {tab.title()}</title>
    <style>{self.CSS}</style>
</head>
<body>
    <div class="container">
        <h1>Signal Desk</h1>
        <p>{nav}</p>
        <p>Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}</p>
        {body}
    </div>
</body>
</html>
"""

    def highlight_html(self, text: str, resume: MasterResume) -> str:
        """Escape text and wrap tokens absent from the master resume in <mark>."""
        inventory = build_inventory(resume)
        lines = []
        for segments in highlight(text, inventory):
            parts = []
            for segment in segments:
                if segment.flagged:
                    parts.append(
                        f'<mark class="violation" title="Hallucination risk: not in master resume">'
                        f"{escape(segment.text)}</mark>"
                    )
                else:
                    parts.append(escape(segment.text))
            lines.append("".join(parts))
        return "\n".join(lines)

    def _signal_row(self, job: JobSignal, selected: bool) -> str:
        css = ' class="selected"' if selected else ""
        remote = "Remote" if job.is_remote else escape(job.location)
        return f"""
            <tr{css}>
                <td>{escape(job.company)}</td>
                <td>{escape(job.title)}</td>
                <td>{remote}</td>
                <td>{job.score:.1f}</td>
                <td>{job.legitimacy:.2f}</td>
                <td>{escape(job.source_tier.value)}</td>
                <td>{escape(job.status.value.title())}</td>
            </tr>"""

    def _dashboard_html(self, state: AppState) -> str:
        selected = state.selected_job
        feed = sorted(state.filtered_jobs, key=lambda j: j.score, reverse=True)
        rows = "".join(
            self._signal_row(job, selected is not None and job.id == selected.id) for job in feed
        )

        parts = [f"""
        <div class="panel">
            <h2>Signal Feed ({len(feed)})</h2>
            <table>
                <thead><tr><th>Company</th><th>Title</th><th>Location</th><th>Score</th>
                <th>Legitimacy</th><th>Source</th><th>Status</th></tr></thead>
                <tbody>{rows}</tbody>
            </table>
        </div>"""]

        if selected is None:
            parts.append('<div class="panel"><p>No verified signals.</p></div>')
            return "".join(parts)

        salary = f" | {escape(selected.salary_range)}" if selected.salary_range else ""
        comp = (
            f"\n            <p>Total compensation: ${selected.total_compensation:,}</p>"
            if selected.total_compensation is not None else ""
        )
        parts.append(f"""
        <div class="panel">
            <h2>{escape(selected.title)} at {escape(selected.company)}</h2>
            <p>{escape(selected.location)}{salary} | Posted {escape(selected.posted_date)}</p>
            <p>Proof: {escape(selected.proof) or '-'}</p>{comp}
        </div>""")

        optimized = (
            self.highlight_html(state.generated_artifact, state.master_resume)
            if state.generated_artifact else "<em>No optimized artifact yet.</em>"
        )
        parts.append(f"""
        <div class="panel columns">
            <div><h3>Master Source</h3><pre>{escape(master_text(state.master_resume))}</pre></div>
            <div><h3>Optimized</h3><pre>{optimized}</pre></div>
        </div>""")

        bars = "".join(
            f"""
            <p>{m['label']}: {m['value']:.1f}</p>
            <div class="bar"><div class="fill" style="width: {m['percentage']:.0f}%"></div></div>"""
            for m in score_breakdown(selected.score)
        )
        brief = "".join(f"<li>{escape(topic)}</li>" for topic in interview_brief(selected.company))
        requirements = "".join(f"<li>{escape(h)}</li>" for h in selected.highlights)
        parts.append(f"""
        <div class="panel columns">
            <div><h3>Integrity Index {selected.score:.1f} / 10.0</h3>{bars}</div>
            <div><h3>Interview Brief</h3><ul>{brief}</ul></div>
            <div><h3>Key Requirements</h3><ul>{requirements}</ul></div>
        </div>""")

        parts.append(f"""
        <div class="panel">
            <h3>Audit Trail</h3>
            {self._audit_html(state)}
        </div>""")
        return "".join(parts)

    def _audit_html(self, state: AppState) -> str:
        lines = []
        result = state.last_result
        if result is not None:
            status = "PASSED" if result.audit.passed else "REJECTED"
            lines.append(
                f"<p>Audit {status}: {result.audit.candidate_token_count} tokens checked "
                f"against {result.audit.inventory_size} master tokens ({escape(result.source)}).</p>"
            )
            if result.gaps:
                lines.append(f"<p>Gaps: {escape(', '.join(result.gaps))}</p>")
        if state.compliance_approved:
            lines.append("<p>Compliance approved.</p>")
        if state.explanation:
            lines.append(f"<pre>{escape(state.explanation)}</pre>")
        return "".join(lines) or "<p>No audit activity.</p>"

    def _kanban_html(self, state: AppState, now: Optional[datetime]) -> str:
        columns = []
        for status, jobs in state.kanban_columns().items():
            cards = []
            for job in jobs:
                stale = state.is_stale(job, now)
                css = "card stale" if stale else "card"
                flag = " <strong>STALE: follow up</strong>" if stale else ""
                cards.append(
                    f'<div class="{css}" style="background: {self.STATUS_COLORS[status]}">'
                    f"{escape(job.company)}<br><small>{escape(job.title)}</small>{flag}</div>"
                )
            columns.append(
                f"<div><h3>{status.value.title()} ({len(jobs)})</h3>{''.join(cards)}</div>"
            )
        return f'<div class="panel columns">{"".join(columns)}</div>'

    def _scrapers_html(self, registry, scheduler) -> str:
        parts = []
        if registry is not None:
            rows = "".join(
                f"<tr><td>{escape(agent.name)}</td><td>{agent_id.value}</td>"
                f"<td>{agent.protocol}</td></tr>"
                for agent_id, agent in registry.agents.items()
            )
            parts.append(f"""
        <div class="panel">
            <h2>Agents</h2>
            <table><thead><tr><th>Agent</th><th>ID</th><th>Protocol</th></tr></thead>
            <tbody>{rows}</tbody></table>
        </div>""")

            for agent_id, logs in registry.last_logs.items():
                parts.append(
                    f'<div class="panel"><h3>{agent_id.value} log</h3>'
                    f"<pre>{escape(chr(10).join(logs))}</pre></div>"
                )

        if scheduler is not None:
            rows = "".join(
                f"<tr><td>{escape(s.id)}</td><td>{s.agent_id.value}</td><td>{escape(s.cron)}</td></tr>"
                for s in scheduler.list()
            )
            parts.append(f"""
        <div class="panel">
            <h2>Schedules</h2>
            <table><thead><tr><th>ID</th><th>Agent</th><th>Cron</th></tr></thead>
            <tbody>{rows}</tbody></table>
        </div>""")

        return "".join(parts) or '<div class="panel"><p>No agents configured.</p></div>'

    def _blueprints_html(self, state: AppState) -> str:
        blueprint = json.dumps(state.master_resume.to_dict(), indent=2)
        return f'<div class="panel"><h2>Master Blueprint</h2><pre>{escape(blueprint)}</pre></div>'

    def _dashboard_markdown(self, state: AppState) -> str:
        lines = [
            "# Signal Desk Dashboard",
            "",
            f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            "",
            "| Company | Title | Score | Legitimacy | Status |",
            "|---------|-------|-------|------------|--------|",
        ]
        for job in sorted(state.filtered_jobs, key=lambda j: j.score, reverse=True):
            lines.append(
                f"| {job.company} | {job.title} | {job.score:.1f} | "
                f"{job.legitimacy:.2f} | {job.status.value} |"
            )

        selected = state.selected_job
        if selected is not None:
            lines.extend(["", f"## {selected.title} at {selected.company}", ""])
            if selected.total_compensation is not None:
                lines.extend([f"Total compensation: ${selected.total_compensation:,}", ""])
            for m in score_breakdown(selected.score):
                lines.append(f"- {m['label']}: {m['value']:.1f} ({m['percentage']:.0f}%)")
            lines.extend(["", "### Interview Brief", ""])
            lines.extend(f"- {topic}" for topic in interview_brief(selected.company))
            lines.extend(["", "### Key Requirements", ""])
            lines.extend(f"- {h}" for h in selected.highlights)

        if state.generated_artifact:
            lines.extend(["", "### Optimized Artifact", "", "```", state.generated_artifact, "```"])
        if state.explanation:
            lines.extend(["", "### Audit Trail", "", state.explanation])

        return "\n".join(lines) + "\n"

    def _kanban_markdown(self, state: AppState, now: Optional[datetime]) -> str:
        lines = ["# Signal Desk Kanban", ""]
        for status, jobs in state.kanban_columns().items():
            lines.append(f"## {status.value.title()} ({len(jobs)})")
            lines.append("")
            for job in jobs:
                flag = " **STALE**" if state.is_stale(job, now) else ""
                lines.append(f"- {job.company}: {job.title}{flag}")
            lines.append("")
        return "\n".join(lines)

    def _scrapers_markdown(self, registry, scheduler) -> str:
        lines = ["# Signal Desk Scrapers", ""]
        if registry is not None:
            for agent_id, agent in registry.agents.items():
                lines.append(f"- {agent.name} ({agent_id.value}, {agent.protocol})")
            for agent_id, logs in registry.last_logs.items():
                lines.extend(["", f"## {agent_id.value} log", "", "```", *logs, "```"])
        if scheduler is not None:
            lines.extend(["", "## Schedules", ""])
            lines.extend(f"- {s.agent_id.value}: `{s.cron}` ({s.id})" for s in scheduler.list())
        return "\n".join(lines) + "\n"

    def _blueprints_markdown(self, state: AppState) -> str:
        blueprint = json.dumps(state.master_resume.to_dict(), indent=2)
        return f"# Master Blueprint\n\n```json\n{blueprint}\n```\n"
