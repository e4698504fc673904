import pytest

from signal_desk.core.exceptions import HallucinationError, OptimizationError
from signal_desk.core.integrity import find_violations
from signal_desk.core.models import JobSignal
from signal_desk.generators.resume_optimizer import ResumeOptimizer


def test_rules_optimization_passes_audit(resume, signals):
    optimizer = ResumeOptimizer()
    for job in signals:
        result = optimizer.optimize(resume, job, use_ai=False)
        assert result.audit.passed
        assert result.source == "rules"
        assert find_violations(result.candidate, resume) == []


def test_rules_optimization_puts_relevant_competencies_first(resume, signals):
    job = signals[1]  # Python, FastAPI, Playwright
    result = ResumeOptimizer().optimize(resume, job, use_ai=False)
    first_line = result.candidate.splitlines()[0]
    assert first_line.split(", ")[:3] == ["Python", "FastAPI", "Playwright"]


def test_rules_optimization_passes_with_unknown_requirements(resume):
    job = JobSignal(id="j1", title="Go Developer", company="Acme", highlights=["Golang", "Terraform"])
    result = ResumeOptimizer().optimize(resume, job, use_ai=False)
    assert result.audit.passed
    assert result.gaps == ["Golang", "Terraform"]
    assert "Gaps: Golang, Terraform" in result.rationale


def test_match_requirements(resume):
    job = JobSignal(highlights=["Python", "LLM Evaluation", "Rust", "CI/CD"])
    matched, gaps = ResumeOptimizer().match_requirements(resume, job)
    assert matched == ["Python", "LLM Evaluation"]
    # "CI/CD" has no tokens above the length threshold
    assert gaps == ["Rust", "CI/CD"]


def test_ai_optimization_extracts_code_block(resume, signals, fake_llm_factory):
    llm = fake_llm_factory(
        "Here is the tailored resume:\n```text\nPython, Pytest, LLM Evaluation\n"
        "Lead Test Architect\n```\nEmphasized evaluation experience."
    )
    result = ResumeOptimizer(llm_client=llm).optimize(resume, signals[0])
    assert result.source == "ai"
    assert result.candidate == "Python, Pytest, LLM Evaluation\nLead Test Architect"
    assert "Emphasized evaluation experience." in result.rationale
    assert "MASTER_RESUME_JSON" in llm.prompts[0]
    assert "Requires: Python, LLM Evaluation, Pytest. Anthropic infrastructure." in llm.prompts[0]


def test_ai_hallucination_is_rejected(resume, signals, fake_llm_factory):
    llm = fake_llm_factory("```\nPython expert with Golang and Terraform\n```")
    with pytest.raises(HallucinationError) as exc:
        ResumeOptimizer(llm_client=llm).optimize(resume, signals[0])
    assert {"golang", "terraform", "expert"} <= set(exc.value.violations)
    assert "Golang" in exc.value.candidate


def test_use_ai_false_skips_model(resume, signals, fake_llm_factory):
    llm = fake_llm_factory("```\nnonsense words\n```")
    result = ResumeOptimizer(llm_client=llm).optimize(resume, signals[0], use_ai=False)
    assert result.source == "rules"
    assert llm.prompts == []


def test_model_failure_propagates_to_state(state, fake_llm_factory):
    llm = fake_llm_factory(error=OptimizationError("Model sync failed. Verify API key and provider status."))
    with pytest.raises(OptimizationError):
        state.optimize(ResumeOptimizer(llm_client=llm))
    assert state.explanation.startswith("System failure: Model sync failed")
    assert state.generated_artifact == ""


def test_state_keeps_only_audited_artifacts(state, fake_llm_factory):
    bad = fake_llm_factory("```\nQuantum blockchain guru\n```")
    with pytest.raises(HallucinationError):
        state.optimize(ResumeOptimizer(llm_client=bad))
    assert state.generated_artifact == ""
    assert "Hallucination detected" in state.explanation
    assert not state.approve()

    result = state.optimize(ResumeOptimizer(), use_ai=False)
    assert state.generated_artifact == result.candidate
    assert state.approve()
    assert state.compliance_approved
