import pytest

from signal_desk.core.exceptions import SchemaValidationError
from signal_desk.core.models import JobStatus, SourceTier
from signal_desk.core.schema import validate_job_injection, validate_master_resume


def _resume_payload(**overrides):
    payload = {
        "personalInfo": {"name": "Sam Tester", "role": "QA Engineer", "location": "Remote"},
        "summary": "Experienced in Python and FastAPI automation",
        "coreCompetencies": ["Python", "FastAPI"],
        "experience": [
            {
                "company": "Initech",
                "role": "SDET",
                "period": "2020 - 2024",
                "achievements": ["Built the regression suite"],
            }
        ],
        "education": "B.S. Computer Science",
    }
    payload.update(overrides)
    return payload


def test_valid_resume_converts_to_model():
    resume = validate_master_resume(_resume_payload())
    assert resume.personal_info.name == "Sam Tester"
    assert resume.core_competencies == ["Python", "FastAPI"]
    assert resume.experience[0].achievements == ["Built the regression suite"]


def test_resume_round_trips_through_to_dict(resume):
    assert validate_master_resume(resume.to_dict()).to_dict() == resume.to_dict()


def test_resume_rejects_non_object():
    with pytest.raises(SchemaValidationError) as exc:
        validate_master_resume(["not", "a", "resume"])
    assert "__root__" in exc.value.errors


def test_resume_reports_field_errors():
    with pytest.raises(SchemaValidationError) as exc:
        validate_master_resume(_resume_payload(summary="short", coreCompetencies=[]))
    assert "summary" in exc.value.errors
    assert "coreCompetencies" in exc.value.errors
    assert "summary" in str(exc.value)


def test_resume_rejects_missing_experience_fields():
    payload = _resume_payload(experience=[{"company": "Initech"}])
    with pytest.raises(SchemaValidationError) as exc:
        validate_master_resume(payload)
    assert any(key.startswith("experience.0") for key in exc.value.errors)


def test_job_injection_builds_signal():
    job = validate_job_injection({
        "company": "  Acme  ",
        "title": "Staff SDET",
        "location": "Remote (US)",
        "highlights": ["Python", " Playwright "],
        "salary": 180000,
        "link": "https://jobs.acme.com/1",
    })
    assert job.company == "Acme"
    assert job.highlights == ["Python", "Playwright"]
    assert job.is_remote
    assert job.is_verified
    assert job.score == 8.5
    assert job.base_salary == 180000
    assert job.source_url == "https://jobs.acme.com/1"
    assert job.source_tier == SourceTier.DIRECT
    assert job.proof == "Manual injection"


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"salary": 1000}, "salary"),
        ({"highlights": []}, "highlights"),
        ({"highlights": ["x"]}, "highlights"),
        ({"link": "ftp://nowhere"}, "link"),
        ({"title": "QA"}, "title"),
    ],
)
def test_job_injection_rejects_invalid_fields(overrides, field):
    data = {"company": "Acme", "title": "Staff SDET", "location": "NYC", "highlights": ["Python"]}
    data.update(overrides)
    with pytest.raises(SchemaValidationError) as exc:
        validate_job_injection(data)
    assert field in exc.value.errors


def test_job_injection_keeps_identity_of_existing(signals):
    existing = signals[1]
    job = validate_job_injection(
        {"company": "Stripe", "title": "QA Automation Lead", "location": "NYC",
         "highlights": ["Python"], "legitimacy": 0.5},
        existing=existing,
    )
    assert job.id == existing.id
    assert job.status == JobStatus.OFFER
    assert job.proof == existing.proof
    assert not job.is_verified
