from signal_desk.core.integrity import (
    HighlightSegment,
    MIN_TOKEN_LENGTH,
    audit,
    build_inventory,
    find_violations,
    highlight,
    highlight_line,
    tokenize,
)
from signal_desk.core.models import ExperienceEntry, MasterResume


def test_tokenize_lowercases_and_drops_short_tokens():
    tokens = tokenize("Built QA tooling in Go and Python")
    assert tokens == {"built", "tooling", "and", "python"}
    assert all(len(t) >= MIN_TOKEN_LENGTH for t in tokens)


def test_tokenize_keeps_technical_symbols():
    tokens = tokenize("Shipped node.js, C++ and C# services; CI-CD owner.")
    assert {"node.js", "c++", "ci-cd", "owner", "services"} <= tokens
    # Two-character tokens such as "c#" fall under the threshold
    assert "c#" not in tokens


def test_tokenize_strips_sentence_punctuation():
    assert tokenize("Python.") == tokenize("python") == {"python"}


def test_tokenize_strips_leading_plus_and_hash():
    assert tokenize("+300 #python c++") == {"300", "python", "c++"}


def test_signed_numbers_and_hashtags_match_resume_words():
    resume = MasterResume(summary="Grew revenue 300 percent with python")
    assert find_violations("Grew revenue +300 with #python", resume) == []

    segments = highlight_line("+300 #python", build_inventory(resume))
    assert "".join(s.text for s in segments) == "+300 #python"
    assert not any(s.flagged for s in segments)


def test_tokenize_empty():
    assert tokenize("") == set()
    assert tokenize(None) == set()


def test_inventory_is_case_insensitive_set():
    resume = MasterResume(
        summary="Python python PYTHON FastAPI",
        core_competencies=["FASTAPI", "Pytest"],
    )
    inventory = build_inventory(resume)
    assert inventory == frozenset({"python", "fastapi", "pytest"})


def test_inventory_covers_roles_and_achievements_but_not_companies():
    resume = MasterResume(
        summary="Quality engineer",
        experience=[
            ExperienceEntry(
                company="Initech",
                role="Lead Architect",
                achievements=["Reduced flakiness"],
            )
        ],
        education="Stanford University",
    )
    inventory = build_inventory(resume)
    assert {"lead", "architect", "reduced", "flakiness"} <= inventory
    assert "initech" not in inventory
    assert "stanford" not in inventory


def test_reference_only_text_has_no_violations(resume):
    candidate = " ".join(resume.core_competencies + [resume.summary] + resume.achievements)
    assert find_violations(candidate, resume) == []


def test_invented_token_is_reported(small_resume):
    violations = find_violations("Python and FastAPI expert with Kubernetes skills", small_resume)
    assert "kubernetes" in violations
    assert "python" not in violations
    assert "fastapi" not in violations
    assert violations == sorted(violations)


def test_short_tokens_never_reported(small_resume):
    assert find_violations("Go to QA on K8s", small_resume) == ["k8s"]


def test_empty_resume_rejects_every_token():
    empty = MasterResume()
    assert build_inventory(empty) == frozenset()
    assert find_violations("Python automation expert", empty) == ["automation", "expert", "python"]


def test_audit_is_idempotent(resume):
    candidate = "Architected Rust pipelines on Kubernetes"
    first = audit(candidate, resume)
    second = audit(candidate, resume)
    assert set(first.violations) == set(second.violations) == {"rust", "pipelines"}
    assert not first.passed


def test_audit_report_counts(small_resume):
    report = audit("Python automation", small_resume)
    assert report.passed
    assert report.candidate_token_count == 2
    assert report.inventory_size == len(build_inventory(small_resume))


def test_find_violations_accepts_prebuilt_inventory():
    assert find_violations("Python Rust", {"python"}) == ["rust"]


def test_highlight_segments_rejoin_to_line(small_resume):
    line = "Python expert, Kubernetes-native (K8s)."
    segments = highlight_line(line, build_inventory(small_resume))
    assert "".join(s.text for s in segments) == line
    flagged = [s.text for s in segments if s.flagged]
    assert flagged == ["expert", "Kubernetes-native", "K8s"]


def test_highlight_agrees_with_audit(small_resume):
    text = "Python and FastAPI\nRust guru"
    lines = highlight(text, small_resume)
    assert len(lines) == 2
    flagged = {s.text.lower() for line in lines for s in line if s.flagged}
    assert flagged == set(find_violations(text, small_resume))


def test_highlight_empty_line():
    assert highlight_line("", frozenset()) == [HighlightSegment("")]
