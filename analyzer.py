"""Rule-based resume analysis engine with enriched insights."""

import logging
import math
import re
from dataclasses import asdict, dataclass, field
from typing import Any, BinaryIO, Callable, Dict, FrozenSet, List, Mapping, Optional

from ai_analyzer import NoOpInsightProvider
from errors import AnalysisFailure, ExtractionError, ResumeAnalyzerError
from parser import EXTRACTORS, extract_text
from skills import (
    DEFAULT_SKILLS_DICTIONARY,
    DEGREE_TIERS,
    EDUCATION_KEYWORDS,
    EXPERIENCE_KEYWORDS,
    JOB_KEYWORD_STOP_WORDS,
    SECTION_KEYWORDS,
    SkillsDictionary,
)

logger = logging.getLogger(__name__)

# --- Constants & Regex helpers -------------------------------------------------

NON_WORD_RE = re.compile(r"[\W_]+")
WHITESPACE_RE = re.compile(r"\s+")
YEARS_RE = re.compile(r"(\d{1,2})\+?\s*(?:years?|yrs?)", re.IGNORECASE)

# (minimum years, score), highest bracket first.
EXPERIENCE_BRACKETS = ((10, 100), (5, 85), (3, 70), (1, 50))
EXPERIENCE_FLOOR_SCORE = 30
EDUCATION_BASE_SCORE = 50

FORMAT_BASE_SCORE = 50
FORMAT_SECTION_BONUS = 5
FORMAT_LENGTH_BONUS = 10
IDEAL_WORD_RANGE = (300, 1000)

SKILLS_BASE_SCORE = 30
TECHNICAL_WEIGHT, TECHNICAL_CAP = 8, 40
SOFT_WEIGHT, SOFT_CAP = 5, 20
CERTIFICATION_WEIGHT, CERTIFICATION_CAP = 10, 30
JOB_MATCH_WEIGHT, JOB_MATCH_CAP = 5, 20

MIN_TEXT_LENGTH = 100
AI_RESUME_PREFIX_CHARS = 2000
AI_JOB_PREFIX_CHARS = 1000


# --- Data model -----------------------------------------------------------------

@dataclass
class SkillsFound:
    technical: List[str] = field(default_factory=list)
    soft: List[str] = field(default_factory=list)
    certifications: List[str] = field(default_factory=list)


@dataclass
class ExperienceSignal:
    years: int = 0
    score: int = EXPERIENCE_FLOOR_SCORE
    keywords: List[str] = field(default_factory=list)


@dataclass
class EducationSignal:
    degrees: List[str] = field(default_factory=list)
    score: int = EDUCATION_BASE_SCORE
    keywords: List[str] = field(default_factory=list)


@dataclass
class FormatSignal:
    score: int = FORMAT_BASE_SCORE
    sections: List[str] = field(default_factory=list)
    word_count: int = 0


@dataclass
class ScoreSet:
    skills: int
    experience: int
    education: int
    format: int
    overall: int


@dataclass
class Insight:
    title: str
    description: str


@dataclass
class KeywordReport:
    found: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)


@dataclass
class Insights:
    strengths: List[Insight] = field(default_factory=list)
    improvements: List[Insight] = field(default_factory=list)
    recommendations: List[Insight] = field(default_factory=list)
    keywords: KeywordReport = field(default_factory=KeywordReport)


@dataclass
class AnalysisResult:
    scores: ScoreSet
    insights: Insights
    skills: SkillsFound
    experience: ExperienceSignal
    education: EducationSignal
    format: FormatSignal
    ai_insights: Optional[Dict[str, Any]] = None

    @property
    def overall_score(self) -> int:
        return self.scores.overall

    def to_dict(self) -> Dict[str, Any]:
        """Render the camelCase payload the frontend consumes."""
        return {
            "overallScore": self.scores.overall,
            "metrics": {
                "skillsMatch": self.scores.skills,
                "experience": self.scores.experience,
                "education": self.scores.education,
                "format": self.scores.format,
            },
            "strengths": [asdict(item) for item in self.insights.strengths],
            "improvements": [asdict(item) for item in self.insights.improvements],
            "keywords": asdict(self.insights.keywords),
            "recommendations": [asdict(item) for item in self.insights.recommendations],
            "aiInsights": self.ai_insights,
            "extractedData": {
                "skills": asdict(self.skills),
                "experience": asdict(self.experience),
                "education": asdict(self.education),
            },
        }


# --- Text normalization ---------------------------------------------------------

def normalize_text(text: Optional[str]) -> str:
    """Lowercase, swap punctuation for spaces and collapse whitespace."""
    if not text:
        return ""
    stripped = NON_WORD_RE.sub(" ", text.lower())
    return WHITESPACE_RE.sub(" ", stripped).strip()


def _clamp_score(value: float) -> int:
    return int(max(0, min(100, value)))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# --- Signal extractors ----------------------------------------------------------

def extract_skills(text: str, dictionary: SkillsDictionary = DEFAULT_SKILLS_DICTIONARY) -> SkillsFound:
    """Collect dictionary phrases that occur in ``text``, in dictionary order.

    Matching is a literal substring test without word boundaries, so ``java``
    is also reported for a resume that only mentions ``javascript``.
    """
    return SkillsFound(
        technical=[skill for skill in dictionary.technical if skill in text],
        soft=[skill for skill in dictionary.soft if skill in text],
        certifications=[cert for cert in dictionary.certifications if cert in text],
    )


def score_experience_years(years: int) -> int:
    for minimum_years, score in EXPERIENCE_BRACKETS:
        if years >= minimum_years:
            return score
    return EXPERIENCE_FLOOR_SCORE


def analyze_experience(text: str) -> ExperienceSignal:
    years = 0
    for match in YEARS_RE.finditer(text):
        years = max(years, int(match.group(1)))

    return ExperienceSignal(
        years=years,
        score=score_experience_years(years),
        keywords=[keyword for keyword in EXPERIENCE_KEYWORDS if keyword in text],
    )


def analyze_education(text: str) -> EducationSignal:
    # Only the highest tier is kept: a resume naming a master's and a bachelor's
    # degree reports the master's alone.
    signal = EducationSignal(
        keywords=[keyword for keyword in EDUCATION_KEYWORDS if keyword in text],
    )
    for label, triggers, score in DEGREE_TIERS:
        if any(trigger in text for trigger in triggers):
            signal.degrees.append(label)
            signal.score = score
            break
    return signal


def analyze_format(raw_text: str) -> FormatSignal:
    """Score structure on the raw extracted text (sections + overall length)."""
    raw_text = raw_text or ""
    lowered = raw_text.lower()
    signal = FormatSignal(word_count=len(raw_text.split()))

    total = FORMAT_BASE_SCORE
    for section, triggers in SECTION_KEYWORDS.items():
        if any(trigger in lowered for trigger in triggers):
            signal.sections.append(section)
            total += FORMAT_SECTION_BONUS

    low, high = IDEAL_WORD_RANGE
    if low <= signal.word_count <= high:
        total += FORMAT_LENGTH_BONUS

    signal.score = min(total, 100)
    return signal


# --- Scoring --------------------------------------------------------------------

def calculate_skills_score(skills: SkillsFound, job_text: str = "") -> int:
    score = SKILLS_BASE_SCORE
    score += min(len(skills.technical) * TECHNICAL_WEIGHT, TECHNICAL_CAP)
    score += min(len(skills.soft) * SOFT_WEIGHT, SOFT_CAP)
    score += min(len(skills.certifications) * CERTIFICATION_WEIGHT, CERTIFICATION_CAP)

    if job_text:
        matching = [skill for skill in skills.technical if skill in job_text]
        score += min(len(matching) * JOB_MATCH_WEIGHT, JOB_MATCH_CAP)

    return _clamp_score(score)


def calculate_scores(
    skills: SkillsFound,
    experience: ExperienceSignal,
    education: EducationSignal,
    format_signal: FormatSignal,
    job_text: str = "",
) -> ScoreSet:
    skills_score = calculate_skills_score(skills, job_text)
    experience_score = _clamp_score(experience.score)
    education_score = _clamp_score(education.score)
    format_score = _clamp_score(format_signal.score)

    mean = (skills_score + experience_score + education_score + format_score) / 4
    return ScoreSet(
        skills=skills_score,
        experience=experience_score,
        education=education_score,
        format=format_score,
        overall=_clamp_score(_round_half_up(mean)),
    )


# --- Insight generation ---------------------------------------------------------

def find_missing_skills(
    skills: SkillsFound,
    job_text: str,
    dictionary: SkillsDictionary = DEFAULT_SKILLS_DICTIONARY,
) -> List[str]:
    """Technical skills the job asks for that the resume does not mention."""
    found = skills.technical + skills.soft + skills.certifications
    return [
        skill
        for skill in dictionary.technical
        if skill in job_text and not any(skill in existing for existing in found)
    ]


def extract_job_keywords(
    job_text: str,
    dictionary: SkillsDictionary = DEFAULT_SKILLS_DICTIONARY,
    stop_words: FrozenSet[str] = JOB_KEYWORD_STOP_WORDS,
) -> List[str]:
    vocabulary = set(dictionary.technical) | set(dictionary.soft)
    keywords: List[str] = []
    seen = set()
    for token in job_text.split():
        word = NON_WORD_RE.sub("", token).lower()
        if len(word) <= 3 or word in stop_words or word in seen:
            continue
        if word in vocabulary:
            seen.add(word)
            keywords.append(word)
    return keywords


def generate_insights(
    text: str,
    job_text: str,
    skills: SkillsFound,
    experience: ExperienceSignal,
    education: EducationSignal,
    dictionary: SkillsDictionary = DEFAULT_SKILLS_DICTIONARY,
    stop_words: FrozenSet[str] = JOB_KEYWORD_STOP_WORDS,
) -> Insights:
    """Turn signals into strengths, improvements and recommendations.

    ``text`` and ``job_text`` are the normalized resume and job description.
    """
    insights = Insights()
    technical_count = len(skills.technical)

    if technical_count > 5:
        insights.strengths.append(
            Insight(
                title="Strong Technical Skills",
                description=(
                    f"Your resume demonstrates proficiency in {technical_count} technical skills "
                    f"including {', '.join(skills.technical[:3])}."
                ),
            )
        )

    if experience.years > 3:
        insights.strengths.append(
            Insight(
                title="Relevant Experience",
                description=f"You have {experience.years}+ years of experience which demonstrates career progression.",
            )
        )

    if education.degrees:
        insights.strengths.append(
            Insight(
                title="Strong Educational Background",
                description=f"Your {', '.join(education.degrees)} provides a solid foundation for your career.",
            )
        )

    if technical_count < 3:
        insights.improvements.append(
            Insight(
                title="Limited Technical Skills",
                description=(
                    "Consider adding more technical skills relevant to your field "
                    "to make your resume more competitive."
                ),
            )
        )

    lowered = text.lower()
    if "achieved" not in lowered and "increased" not in lowered:
        insights.improvements.append(
            Insight(
                title="Missing Quantifiable Achievements",
                description=(
                    "Add specific metrics and numbers to demonstrate your impact "
                    "(e.g., 'Increased performance by 40%')."
                ),
            )
        )

    insights.recommendations.append(
        Insight(
            title="Add a Professional Summary",
            description=(
                "Include a 2-3 line summary at the top highlighting your key strengths "
                "and career objectives."
            ),
        )
    )

    if job_text:
        missing_skills = find_missing_skills(skills, job_text, dictionary)
        if missing_skills:
            insights.recommendations.append(
                Insight(
                    title="Include Job-Specific Skills",
                    description=(
                        "Consider adding these skills mentioned in the job description: "
                        f"{', '.join(missing_skills[:3])}."
                    ),
                )
            )

    found_keywords = skills.technical + skills.soft
    job_keywords = extract_job_keywords(job_text, dictionary, stop_words) if job_text else []
    insights.keywords = KeywordReport(
        found=found_keywords,
        missing=[
            keyword
            for keyword in job_keywords
            if not any(keyword in found for found in found_keywords)
        ],
    )
    return insights


# --- Main analysis entry point -------------------------------------------------

class ResumeAnalyzer:
    """Sequences normalization, signal extraction, scoring and insights."""

    def __init__(
        self,
        dictionary: SkillsDictionary = DEFAULT_SKILLS_DICTIONARY,
        stop_words: FrozenSet[str] = JOB_KEYWORD_STOP_WORDS,
        insight_provider=None,
        extractors: Optional[Mapping[str, Callable[[BinaryIO], str]]] = None,
        min_text_length: int = MIN_TEXT_LENGTH,
    ):
        self.dictionary = dictionary
        self.stop_words = stop_words
        self.insight_provider = insight_provider or NoOpInsightProvider()
        self.extractors = dict(EXTRACTORS if extractors is None else extractors)
        self.min_text_length = min_text_length

    @property
    def supported_mime_types(self) -> FrozenSet[str]:
        return frozenset(self.extractors)

    def extract_text(self, file_handle: BinaryIO, mime_type: str) -> str:
        return extract_text(file_handle, mime_type, self.extractors)

    def analyze_document(
        self,
        file_handle: BinaryIO,
        mime_type: str,
        job_description: str = "",
    ) -> AnalysisResult:
        resume_text = self.extract_text(file_handle, mime_type)
        if len(resume_text.strip()) < self.min_text_length:
            raise ExtractionError("Unable to extract sufficient text from the resume")
        return self.analyze(resume_text, job_description)

    def analyze(self, resume_text: str, job_description: str = "") -> AnalysisResult:
        resume_text = resume_text or ""
        job_description = job_description or ""

        try:
            result = self._run_pipeline(resume_text, job_description)
        except ResumeAnalyzerError:
            raise
        except Exception as exc:
            logger.exception("Resume analysis failed: %s", exc)
            raise AnalysisFailure("Failed to analyze resume") from exc

        result.ai_insights = self._enrich(resume_text, job_description)
        return result

    def _run_pipeline(self, resume_text: str, job_description: str) -> AnalysisResult:
        text = normalize_text(resume_text)
        job_text = normalize_text(job_description)

        skills = extract_skills(text, self.dictionary)
        experience = analyze_experience(text)
        education = analyze_education(text)
        format_signal = analyze_format(resume_text)

        scores = calculate_scores(skills, experience, education, format_signal, job_text)
        insights = generate_insights(
            text, job_text, skills, experience, education, self.dictionary, self.stop_words
        )
        logger.debug(
            "Scored resume: overall=%s skills=%s experience=%s education=%s format=%s",
            scores.overall,
            scores.skills,
            scores.experience,
            scores.education,
            scores.format,
        )
        return AnalysisResult(
            scores=scores,
            insights=insights,
            skills=skills,
            experience=experience,
            education=education,
            format=format_signal,
        )

    def _enrich(self, resume_text: str, job_description: str) -> Optional[Dict[str, Any]]:
        try:
            return self.insight_provider.get_insights(
                resume_text[:AI_RESUME_PREFIX_CHARS],
                job_description[:AI_JOB_PREFIX_CHARS],
            )
        except Exception as exc:
            logger.warning("AI enrichment skipped: %s", exc)
            return None
