"""
Profile Parser - Imports a master resume from various sources.
Supports JSON, PDF, DOCX, and plain text resumes, with optional AI parsing.

Every path ends in schema validation, so a resume that reaches the rest of
the system is always well-formed.
"""

import json
import logging
import re
from pathlib import Path
from typing import Optional

from .exceptions import SchemaValidationError
from .models import MasterResume
from .schema import validate_master_resume
from .seed import sample_master_resume


class ProfileParser:
    """Parses master resumes from various document formats."""

    # Used when a resume has no explicit skills section
    SKILL_KEYWORDS = [
        "python", "javascript", "typescript", "java", "c++", "c#", "go", "rust",
        "fastapi", "django", "flask", "react", "node.js", "pytest", "playwright",
        "cypress", "selenium", "locust", "jenkins", "github actions", "ci/cd",
        "aws", "azure", "gcp", "docker", "kubernetes", "terraform", "postgresql",
        "redis", "microservices", "llm evaluation", "machine learning",
    ]

    TITLE_KEYWORDS = [
        "engineer", "developer", "manager", "analyst", "designer", "director",
        "lead", "architect", "consultant", "specialist", "scientist", "sdet",
        "intern", "administrator",
    ]

    SECTION_HEADINGS = {
        "summary": r"(?:professional\s+)?(?:summary|profile|objective|about\s+me)",
        "skills": r"(?:core\s+|technical\s+)?(?:skills|competencies)",
        "experience": r"(?:work\s+|professional\s+)?experience|employment\s+history",
        "education": r"education",
    }

    AI_PARSE_PROMPT = """Extract the resume below into JSON with exactly this shape:
{{"personalInfo": {{"name": "", "role": "", "location": ""}},
 "summary": "",
 "coreCompetencies": [],
 "experience": [{{"company": "", "role": "", "period": "", "achievements": []}}],
 "education": ""}}

Copy wording verbatim from the resume. Do not invent skills or achievements.
Return ONLY the JSON.

RESUME:
{text}
"""

    def __init__(self, llm_client=None):
        """
        Initialize the parser.

        Args:
            llm_client: Optional LLMClient used for AI-assisted parsing
        """
        self.llm_client = llm_client
        self.logger = logging.getLogger(self.__class__.__name__)

    def parse_file(self, file_path: str) -> MasterResume:
        """Parse a file into a validated master resume."""
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        extension = path.suffix.lower()

        if extension == ".json":
            return self._parse_json(path)
        elif extension == ".pdf":
            return self.parse_text(self._read_pdf(path))
        elif extension == ".docx":
            return self.parse_text(self._read_docx(path))
        elif extension in [".txt", ".md"]:
            return self.parse_text(path.read_text(encoding="utf-8"))
        else:
            raise ValueError(f"Unsupported file format: {extension}")

    def _parse_json(self, path: Path) -> MasterResume:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SchemaValidationError(
                f"Invalid JSON in resume file {path}",
                {"__root__": [str(e)]},
            ) from e
        return validate_master_resume(data)

    def _read_pdf(self, path: Path) -> str:
        import pdfplumber

        pages = []
        with pdfplumber.open(path) as pdf:
            for page in pdf.pages:
                pages.append(page.extract_text() or "")
        return "\n".join(pages)

    def _read_docx(self, path: Path) -> str:
        from docx import Document

        doc = Document(str(path))
        return "\n".join(para.text for para in doc.paragraphs)

    def parse_text(self, text: str) -> MasterResume:
        """
        Parse raw resume text.

        Uses the language model when a client is configured, otherwise the
        heuristic section parser.
        """
        if self.llm_client is not None:
            return self.parse_text_with_ai(text)
        return validate_master_resume(self._parse_text_content(text))

    def parse_text_with_ai(self, text: str) -> MasterResume:
        """Ask the model to structure the resume, then validate its output."""
        if self.llm_client is None:
            raise ValueError("AI parsing requires an LLM client")

        raw = self.llm_client.complete(self.AI_PARSE_PROMPT.format(text=text), temperature=0.0)
        cleaned = re.sub(r"```(?:json)?\n?|```", "", raw).strip()

        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            self.logger.error(f"Malformed JSON from model: {cleaned[:200]}")
            raise SchemaValidationError(
                "Malformed data received from AI model",
                {"__root__": [str(e)]},
            ) from e

        return validate_master_resume(data)

    def _split_sections(self, lines: list[str]) -> dict[str, list[str]]:
        """Group lines under the section heading that precedes them."""
        sections: dict[str, list[str]] = {"header": []}
        current = "header"

        for line in lines:
            stripped = line.strip()
            heading = self._match_heading(stripped)
            if heading:
                current = heading
                sections.setdefault(current, [])
                # "Summary: text on the same line"
                remainder = stripped.split(":", 1)[1].strip() if ":" in stripped else ""
                if remainder:
                    sections[current].append(remainder)
                continue
            sections.setdefault(current, []).append(line)

        return sections

    def _match_heading(self, line: str) -> Optional[str]:
        if not line:
            return None
        lowered = line.lower()
        for name, pattern in self.SECTION_HEADINGS.items():
            # A heading is the whole line, optionally followed by ": text"
            if re.match(rf"(?:{pattern})\s*(?::|$)", lowered):
                return name
        return None

    def _parse_text_content(self, text: str) -> dict:
        """Extract resume fields from raw text into wire-format JSON."""
        lines = text.strip().split("\n")
        sections = self._split_sections(lines)
        header = [line.strip() for line in sections.get("header", []) if line.strip()]

        return {
            "personalInfo": {
                "name": self._extract_name(header),
                "role": self._extract_role(header),
                "location": self._extract_location(header),
            },
            "summary": " ".join(
                line.strip() for line in sections.get("summary", []) if line.strip()
            ),
            "coreCompetencies": self._extract_competencies(sections.get("skills", []), text),
            "experience": self._extract_experience(sections.get("experience", [])),
            "education": " ".join(
                line.strip() for line in sections.get("education", []) if line.strip()
            ),
        }

    def _extract_name(self, header: list[str]) -> str:
        for line in header[:5]:
            if line.lower().startswith("name:"):
                return line.split(":", 1)[1].strip()
            if re.search(r"@|\.com|resume|cv", line.lower()):
                continue
            words = line.split()
            if 1 <= len(words) <= 4 and all(w.replace(".", "").isalpha() for w in words):
                return line
        return ""

    def _extract_role(self, header: list[str]) -> str:
        for line in header[:6]:
            if any(keyword in line.lower() for keyword in self.TITLE_KEYWORDS):
                return line.split("|")[0].strip()
        return ""

    def _extract_location(self, header: list[str]) -> str:
        pattern = re.compile(r"\b([A-Z][a-zA-Z .]+,\s*[A-Z]{2})\b|\bRemote\b")
        for line in header[:6]:
            match = pattern.search(line)
            if match:
                return match.group(0).strip()
        return ""

    def _extract_competencies(self, skill_lines: list[str], text: str) -> list[str]:
        competencies = []
        for line in skill_lines:
            line = line.strip().lstrip("•-*– ")
            if not line:
                continue
            # "Languages: Python, Go" -> "Python, Go"
            if ":" in line:
                line = line.split(":", 1)[1]
            for item in re.split(r"\s*[,;|•]\s*", line):
                item = item.strip()
                if len(item) >= 2 and item not in competencies:
                    competencies.append(item)

        if competencies:
            return competencies

        text_lower = text.lower()
        for keyword in self.SKILL_KEYWORDS:
            if re.search(rf"(?<![\w+#]){re.escape(keyword)}(?![\w+#])", text_lower):
                competencies.append(keyword)
        return competencies

    def _extract_experience(self, lines: list[str]) -> list[dict]:
        entries = []
        current = None
        period_pattern = re.compile(
            r"\(?\b((?:\w+\s)?\d{4})\s*[-–]\s*((?:\w+\s)?\d{4}|present|current)\)?",
            re.IGNORECASE,
        )

        for line in lines:
            stripped = line.strip()
            if not stripped:
                continue

            if stripped.startswith(("•", "-", "*", "–")):
                if current is not None:
                    current["achievements"].append(stripped.lstrip("•-*– ").strip())
                continue

            period_match = period_pattern.search(stripped)
            if period_match or any(k in stripped.lower() for k in self.TITLE_KEYWORDS):
                if current is not None:
                    entries.append(current)
                period = period_match.group(0).strip("() ") if period_match else ""
                heading = period_pattern.sub("", stripped).strip(" |,-–")
                role, company = self._split_role_company(heading)
                current = {"company": company, "role": role, "period": period, "achievements": []}
            elif current is not None and not current["company"]:
                current["company"] = stripped
            elif current is not None:
                current["achievements"].append(stripped)

        if current is not None:
            entries.append(current)

        return entries

    def _split_role_company(self, heading: str) -> tuple[str, str]:
        """Split "Role at Company", "Role @ Company" or "Role | Company"."""
        parts = re.split(r"\s+at\s+|\s*[@|]\s*|\s+[-–]\s+|,\s*", heading, maxsplit=1)
        if len(parts) == 2:
            return parts[0].strip(), parts[1].strip()
        return heading.strip(), ""

    def create_sample_resume(self) -> MasterResume:
        """Return the sample master resume."""
        return sample_master_resume()
