"""
Zero-hallucination integrity audit.

Generated resume text may only use vocabulary that already appears in the
master resume. The check is purely syntactic: text is split into tokens,
lowercased, and every candidate token must be present somewhere in the
master resume's token inventory.

The same tokenizer backs the audit and the dashboard highlighter, so a token
is flagged on screen exactly when the audit would reject it.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Union
import re

from .models import AuditReport, MasterResume


# Word characters plus the symbols that show up in technical terms
# (node.js, ci-cd, c++, c#).
TOKEN_PATTERN = re.compile(r"[\w.+#-]+")

# Stripped from the start of a token so "+300" and "#python" reduce to the
# bare word. Only sentence punctuation is stripped from the end, which keeps
# the trailing "+" and "#" of c++ / c#.
LEADING_PUNCTUATION = ".-+#"
TRAILING_PUNCTUATION = ".-"

# Tokens shorter than this are never part of the inventory and never reported.
MIN_TOKEN_LENGTH = 3


@dataclass(frozen=True)
class HighlightSegment:
    """A slice of a rendered line; flagged slices are unknown tokens."""
    text: str
    flagged: bool = False


def _iter_matches(text: str) -> Iterator[tuple[int, int, str]]:
    """Yield (start, end, token) for every token at or above the threshold."""
    for match in TOKEN_PATTERN.finditer(text):
        raw = match.group()
        leading = raw.lstrip(LEADING_PUNCTUATION)
        stripped = leading.rstrip(TRAILING_PUNCTUATION)
        if len(stripped) < MIN_TOKEN_LENGTH:
            continue
        start = match.start() + (len(raw) - len(leading))
        yield start, start + len(stripped), stripped.lower()


def tokenize(text: str) -> set[str]:
    """
    Split text into the set of normalized tokens.

    Args:
        text: Any string

    Returns:
        Set of lowercase tokens of at least MIN_TOKEN_LENGTH characters
    """
    if not text:
        return set()
    return {token for _, _, token in _iter_matches(text)}


def build_corpus(resume: MasterResume) -> str:
    """Concatenate the resume fields that make up the permitted vocabulary."""
    components = [
        resume.summary,
        " ".join(resume.core_competencies),
        " ".join(resume.roles),
        " ".join(resume.achievements),
    ]
    return " ".join(components)


def build_inventory(resume: MasterResume) -> frozenset[str]:
    """
    Build the token inventory for a master resume.

    Rebuilt on every call; nothing is cached.

    Args:
        resume: The master resume

    Returns:
        Frozen set of permitted tokens (empty for an empty resume)
    """
    return frozenset(tokenize(build_corpus(resume)))


def _as_inventory(reference: Union[MasterResume, Iterable[str]]) -> frozenset[str]:
    if isinstance(reference, MasterResume):
        return build_inventory(reference)
    return frozenset(reference)


def find_violations(
    candidate: str,
    reference: Union[MasterResume, Iterable[str]],
) -> list[str]:
    """
    Return candidate tokens that are absent from the reference inventory.

    Args:
        candidate: Generated text to audit
        reference: A master resume or an already-built inventory

    Returns:
        Sorted list of violating tokens; empty means the audit passed
    """
    inventory = _as_inventory(reference)
    return sorted(tokenize(candidate) - inventory)


def audit(candidate: str, resume: MasterResume) -> AuditReport:
    """Audit generated text against a master resume and report the outcome."""
    inventory = build_inventory(resume)
    candidate_tokens = tokenize(candidate)
    return AuditReport(
        violations=sorted(candidate_tokens - inventory),
        inventory_size=len(inventory),
        candidate_token_count=len(candidate_tokens),
    )


def highlight_line(line: str, inventory: frozenset[str]) -> list[HighlightSegment]:
    """
    Split a line into segments, flagging tokens missing from the inventory.

    Joining the segment texts gives back the original line.
    """
    segments = []
    cursor = 0

    for start, end, token in _iter_matches(line):
        if token in inventory:
            continue
        if start > cursor:
            segments.append(HighlightSegment(line[cursor:start]))
        segments.append(HighlightSegment(line[start:end], flagged=True))
        cursor = end

    if cursor < len(line) or not segments:
        segments.append(HighlightSegment(line[cursor:]))

    return segments


def highlight(
    text: str,
    reference: Union[MasterResume, Iterable[str]],
) -> list[list[HighlightSegment]]:
    """Highlight every line of text against a resume or inventory."""
    inventory = _as_inventory(reference)
    return [highlight_line(line, inventory) for line in text.split("\n")]
