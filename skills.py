# skills.py
# This is our central "knowledge base" for skills, section triggers and keyword lists.

# Every phrase is lowercase and is matched as a plain substring of normalized text.
# Normalization strips punctuation, so entries such as node.js, ci/cd and
# problem-solving never match.

from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple

from spacy.lang.en.stop_words import STOP_WORDS


@dataclass(frozen=True)
class SkillsDictionary:
    technical: Tuple[str, ...]
    soft: Tuple[str, ...]
    certifications: Tuple[str, ...]


DEFAULT_SKILLS_DICTIONARY = SkillsDictionary(
    technical=(
        # --- Languages & frameworks ---
        "javascript", "python", "java", "react", "node.js", "sql", "mongodb",
        "aws", "docker", "kubernetes", "git", "html", "css", "typescript",
        "angular", "vue", "express", "django", "flask", "spring", "laravel",
        # --- Data stores & APIs ---
        "postgresql", "mysql", "redis", "elasticsearch", "graphql", "rest",
        # --- Delivery & infrastructure ---
        "microservices", "agile", "scrum", "devops", "ci/cd", "jenkins",
        "terraform", "linux", "bash", "powershell", "azure", "gcp",
    ),
    soft=(
        "leadership", "communication", "teamwork", "problem-solving",
        "analytical", "creative", "adaptable", "detail-oriented",
        "time-management", "project-management", "collaboration",
        "critical-thinking", "decision-making", "negotiation",
    ),
    certifications=(
        "aws certified", "azure certified", "google cloud", "pmp",
        "scrum master", "cissp", "comptia", "cisco", "microsoft certified",
    ),
)

EXPERIENCE_KEYWORDS: Tuple[str, ...] = (
    "years", "experience", "worked", "developed", "managed", "led", "created",
)

EDUCATION_KEYWORDS: Tuple[str, ...] = (
    "degree", "bachelor", "master", "phd", "university", "college", "graduate",
)

# Ordered by precedence: the first tier with a hit is the only one recorded.
DEGREE_TIERS: Tuple[Tuple[str, Tuple[str, ...], int], ...] = (
    ("PhD/Doctorate", ("phd", "doctorate"), 100),
    ("Master's Degree", ("master", "mba"), 90),
    ("Bachelor's Degree", ("bachelor", "degree"), 80),
)

# Canonical resume sections and the words that reveal them.
SECTION_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "contact": ("email", "phone", "address", "linkedin"),
    "summary": ("summary", "objective", "profile"),
    "experience": ("experience", "work", "employment"),
    "education": ("education", "degree", "university"),
    "skills": ("skills", "technologies", "competencies"),
    "projects": ("projects", "portfolio"),
    "achievements": ("achievements", "awards", "accomplishments"),
}

JOB_KEYWORD_STOP_WORDS: FrozenSet[str] = frozenset(STOP_WORDS)
