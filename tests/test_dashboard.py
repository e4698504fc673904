from datetime import datetime, timedelta
from pathlib import Path

import pytest

from signal_desk.core.models import JobSignal, JobStatus
from signal_desk.integrations.ghost import GhostDetector
from signal_desk.integrations.registry import AgentRegistry
from signal_desk.integrations.scheduler import AgentScheduler
from signal_desk.tracker.dashboard import DashboardRenderer, master_text, score_breakdown


@pytest.fixture
def renderer(tmp_path):
    return DashboardRenderer(output_dir=str(tmp_path / "out"))


def test_score_breakdown_weights():
    breakdown = score_breakdown(9.4)
    assert [m["label"] for m in breakdown] == [
        "Keyword Match", "Experience Fit", "Platform Mastery", "Domain Context",
    ]
    assert breakdown[0]["value"] == pytest.approx(2.35)
    assert breakdown[1]["value"] == pytest.approx(2.82)
    assert all(m["percentage"] == pytest.approx(94.0) for m in breakdown)


def test_score_breakdown_is_clamped():
    assert all(m["percentage"] == 100.0 for m in score_breakdown(12))
    assert all(m["percentage"] == 0.0 for m in score_breakdown(-1))


def test_dashboard_highlights_unverified_tokens(renderer, state):
    state.generated_artifact = "Python guru"
    html = renderer.render_content(state, "dashboard")
    assert '<mark class="violation" title="Hallucination risk: not in master resume">guru</mark>' in html
    assert "<pre>Python <mark" in html
    assert "Senior SDET (AI Safety) at Anthropic" in html
    assert "Bias Detection Evals" in html
    assert "Keyword Match" in html


def test_dashboard_shows_total_compensation(renderer, state):
    state.select_job("v10-001")
    state.selected_job.equity_amount = 40000
    assert "Total compensation: $250,000" in renderer.render_content(state, "dashboard")
    assert "Total compensation: $250,000" in renderer.render_content(state, "dashboard", format="markdown")


def test_dashboard_escapes_user_text(renderer, state):
    state.save_job(JobSignal(
        id="xss", title="SDET", company="<script>alert(1)</script>", score=9.9, legitimacy=1.0,
    ))
    html = renderer.render_content(state, "dashboard")
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html


def test_dashboard_hides_quarantined_signals(renderer, state):
    state.save_job(JobSignal(id="ghost", title="Ninja", company="Shady Corp", legitimacy=0.1))
    html = renderer.render_content(state, "dashboard")
    assert "Shady Corp" not in html


def test_kanban_flags_stale_signals(renderer, state):
    now = datetime(2026, 10, 19, 12, 0)
    state.move_job("v10-003", JobStatus.SUBMITTED, now=now - timedelta(days=10))
    html = renderer.render_content(state, "kanban", now=now)
    assert "Submitted (1)" in html
    assert "STALE: follow up" in html

    markdown = renderer.render_content(state, "kanban", format="markdown", now=now)
    assert "- OpenAI: SDET II **STALE**" in markdown


def test_scrapers_tab(renderer, state, storage):
    registry = AgentRegistry(agents=[GhostDetector()])
    registry.simulate("ghost")
    scheduler = AgentScheduler(storage, known_agents=registry.ids())
    scheduler.add("ghost", "0 9 * * 1")

    html = renderer.render_content(state, "scrapers", registry=registry, scheduler=scheduler)
    assert "Ghost Job Detector" in html
    assert "[ALERT] GHOST_JOB detected" in html
    assert "0 9 * * 1" in html


def test_render_writes_timestamped_file(renderer, state):
    path = Path(renderer.render(state, tab="blueprints", format="markdown"))
    assert path.exists()
    assert path.name.startswith("blueprints_")
    assert path.suffix == ".md"
    assert "Alex Architect" in path.read_text(encoding="utf-8")


def test_render_uses_active_tab(renderer, state):
    state.set_active_tab("kanban")
    path = Path(renderer.render(state))
    assert path.name.startswith("kanban_")
    assert path.suffix == ".html"


def test_render_rejects_unknown_tab_and_format(renderer, state):
    with pytest.raises(ValueError):
        renderer.render_content(state, "settings")
    with pytest.raises(ValueError):
        renderer.render_content(state, "dashboard", format="pdf")


def test_master_text_contains_resume_content(resume):
    text = master_text(resume)
    assert resume.summary in text
    assert "- " + resume.achievements[0] in text
