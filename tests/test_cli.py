import json

import pytest

from signal_desk.cli import main


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "storage": {"data_dir": str(tmp_path / "data")},
        "dashboard": {"output_dir": str(tmp_path / "out")},
    }), encoding="utf-8")
    return str(path)


def run(config_path, *args):
    main(["--config", config_path, *args])


def test_no_command_exits(config_path):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 1


def test_audit_pass(config_path, capsys):
    run(config_path, "audit", "--text", "Python and FastAPI automation")
    assert "Audit passed" in capsys.readouterr().out


def test_audit_rejection_exits_2(config_path, capsys):
    with pytest.raises(SystemExit) as exc:
        run(config_path, "audit", "--text", "Python wizard", "--highlight")
    assert exc.value.code == 2
    out = capsys.readouterr().out
    assert "Python [[wizard]]" in out
    assert "- wizard" in out


def test_optimize_with_rules(config_path, tmp_path, capsys):
    output = tmp_path / "artifact.txt"
    run(config_path, "optimize", "--job-id", "v10-001", "--no-ai", "--approve", "-o", str(output))
    out = capsys.readouterr().out
    assert "Audit passed" in out
    assert "Compliance approved" in out
    assert output.read_text(encoding="utf-8").startswith("LLM Evaluation")


def test_optimize_unknown_job(config_path):
    with pytest.raises(SystemExit) as exc:
        run(config_path, "optimize", "--job-id", "nope", "--no-ai")
    assert exc.value.code == 1


def test_kanban_move_persists(config_path, tmp_path, capsys):
    run(config_path, "kanban", "--move", "v10-001", "submitted")
    assert "Moved Anthropic to 'submitted'" in capsys.readouterr().out

    stored = json.loads((tmp_path / "data" / "architect_jobs.json").read_text(encoding="utf-8"))
    job = next(j for j in stored if j["id"] == "v10-001")
    assert job["status"] == "submitted"
    assert job["submissionDate"]

    run(config_path, "kanban")
    assert "SUBMITTED (1)" in capsys.readouterr().out


def test_kanban_invalid_status(config_path):
    with pytest.raises(SystemExit) as exc:
        run(config_path, "kanban", "--move", "v10-001", "hired")
    assert exc.value.code == 1


def test_signals_inject_and_list(config_path, tmp_path, capsys):
    payload = tmp_path / "signal.json"
    payload.write_text(json.dumps({
        "company": "Acme", "title": "Staff SDET", "location": "Remote", "highlights": ["Python"],
    }), encoding="utf-8")
    run(config_path, "signals", "--inject", str(payload))
    assert "Signal injected successfully." in capsys.readouterr().out

    run(config_path, "signals")
    assert "Staff SDET @ Acme" in capsys.readouterr().out


def test_signals_inject_invalid(config_path, tmp_path, capsys):
    payload = tmp_path / "signal.json"
    payload.write_text(json.dumps({"company": "A", "title": "QA"}), encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        run(config_path, "signals", "--inject", str(payload))
    assert exc.value.code == 1
    assert "Job signal validation failed" in capsys.readouterr().out


def test_agents_schedule_and_list(config_path, capsys):
    run(config_path, "agents", "--schedule", "linkedin", "*/15 * * * *")
    assert "Scheduled linkedin" in capsys.readouterr().out

    run(config_path, "agents", "--list")
    out = capsys.readouterr().out
    assert "Schedules (1)" in out
    assert "*/15 * * * *" in out


def test_agents_bad_cron(config_path, capsys):
    with pytest.raises(SystemExit) as exc:
        run(config_path, "agents", "--schedule", "dice", "every minute")
    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().out


def test_agents_simulate(config_path, capsys):
    run(config_path, "agents", "--simulate", "dice")
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "[SYSTEM] Initializing DICE Agent..."
    assert "[ENGINE] Status 200 OK - Payload received." in out


def test_dashboard_render(config_path, tmp_path, capsys):
    run(config_path, "dashboard", "--tab", "kanban", "--format", "markdown")
    assert "Dashboard generated" in capsys.readouterr().out
    files = list((tmp_path / "out").glob("kanban_*.md"))
    assert len(files) == 1


def test_followup_from_template(config_path, capsys):
    run(config_path, "followup", "--job-id", "v10-002", "--no-ai")
    out = capsys.readouterr().out
    assert out.startswith("FOLLOW-UP DRAFT FOR STRIPE:")


def test_profile_create_sample_and_save(config_path, tmp_path, capsys):
    sample = tmp_path / "resume.json"
    run(config_path, "profile", "--create-sample", "-o", str(sample))
    run(config_path, "profile", "--parse", str(sample), "--save")
    assert "Master Source Ingested Successfully." in capsys.readouterr().out
    assert (tmp_path / "data" / "architect_resume.json").exists()


def test_config_set(config_path, capsys):
    run(config_path, "config", "--set", "dashboard.legitimacy_threshold", "0.5")
    saved = json.loads(open(config_path, encoding="utf-8").read())
    assert saved["dashboard"]["legitimacy_threshold"] == 0.5
