import unittest

from analyzer import (
    analyze_education,
    analyze_experience,
    analyze_format,
    extract_skills,
    normalize_text,
    score_experience_years,
)
from skills import DEFAULT_SKILLS_DICTIONARY, SkillsDictionary


def _is_subsequence(items, reference):
    iterator = iter(reference)
    return all(item in iterator for item in items)


class NormalizeTextTests(unittest.TestCase):
    def test_strips_punctuation_and_collapses_whitespace(self):
        self.assertEqual(
            normalize_text("  Hello, World!\n\tFoo_bar   (Baz)  "),
            "hello world foo bar baz",
        )

    def test_empty_and_none_inputs(self):
        self.assertEqual(normalize_text(""), "")
        self.assertEqual(normalize_text(None), "")
        self.assertEqual(normalize_text(" \n\t "), "")

    def test_is_idempotent(self):
        samples = [
            "Node.js / CI/CD -- 5+ yrs",
            "Email: jane.doe@example.com | Phone: (555) 123-4567",
            "already normalized text",
            "",
            "Ünïcode Résumé, naïve café!",
        ]
        for sample in samples:
            once = normalize_text(sample)
            self.assertEqual(normalize_text(once), once)


class ExtractSkillsTests(unittest.TestCase):
    def test_matches_are_substrings_in_dictionary_order(self):
        text = normalize_text(
            "Built React and JavaScript apps on AWS with Docker. Strong leadership and "
            "communication. PMP and AWS Certified."
        )
        found = extract_skills(text)

        self.assertEqual(found.technical, ["javascript", "java", "react", "aws", "docker"])
        self.assertEqual(found.soft, ["leadership", "communication"])
        self.assertEqual(found.certifications, ["aws certified", "pmp"])
        for phrases, reference in (
            (found.technical, DEFAULT_SKILLS_DICTIONARY.technical),
            (found.soft, DEFAULT_SKILLS_DICTIONARY.soft),
            (found.certifications, DEFAULT_SKILLS_DICTIONARY.certifications),
        ):
            self.assertTrue(_is_subsequence(phrases, reference))
            for phrase in phrases:
                self.assertIn(phrase, text)
                self.assertEqual(phrase, phrase.lower())

    def test_punctuated_phrases_never_match_normalized_text(self):
        found = extract_skills(normalize_text("Node.js, CI/CD pipelines, problem-solving"))
        self.assertNotIn("node.js", found.technical)
        self.assertNotIn("ci/cd", found.technical)
        self.assertNotIn("problem-solving", found.soft)

    def test_uses_injected_dictionary(self):
        dictionary = SkillsDictionary(technical=("rust", "go"), soft=("grit",), certifications=())
        found = extract_skills("rust and go with grit", dictionary)
        self.assertEqual(found.technical, ["rust", "go"])
        self.assertEqual(found.soft, ["grit"])
        self.assertEqual(found.certifications, [])

    def test_empty_text_finds_nothing(self):
        found = extract_skills("")
        self.assertEqual((found.technical, found.soft, found.certifications), ([], [], []))


class ExperienceTests(unittest.TestCase):
    def test_takes_maximum_years(self):
        signal = analyze_experience(normalize_text("3 years at Acme, then 12+ yrs consulting"))
        self.assertEqual(signal.years, 12)
        self.assertEqual(signal.score, 100)
        self.assertEqual(signal.keywords, ["years"])

    def test_no_years_mentioned(self):
        signal = analyze_experience(normalize_text("I worked on projects and led a team"))
        self.assertEqual(signal.years, 0)
        self.assertEqual(signal.score, 30)
        self.assertEqual(signal.keywords, ["worked", "led"])

    def test_bracket_table(self):
        expected = {0: 30, 1: 50, 2: 50, 3: 70, 4: 70, 5: 85, 9: 85, 10: 100, 40: 100}
        for years, score in expected.items():
            self.assertEqual(score_experience_years(years), score, years)

    def test_bracket_is_monotonic(self):
        scores = [score_experience_years(years) for years in range(0, 100)]
        self.assertEqual(scores, sorted(scores))


class EducationTests(unittest.TestCase):
    def test_highest_tier_only(self):
        signal = analyze_education(normalize_text("Master of Science; Bachelor of Arts"))
        self.assertEqual(signal.degrees, ["Master's Degree"])
        self.assertEqual(signal.score, 90)
        self.assertEqual(signal.keywords, ["bachelor", "master"])

    def test_doctorate(self):
        signal = analyze_education(normalize_text("PhD in Physics"))
        self.assertEqual(signal.degrees, ["PhD/Doctorate"])
        self.assertEqual(signal.score, 100)

    def test_mba_counts_as_masters(self):
        self.assertEqual(analyze_education("mba finance").degrees, ["Master's Degree"])

    def test_no_degree_keeps_base_score(self):
        signal = analyze_education(normalize_text("Graduate of the University"))
        self.assertEqual(signal.degrees, [])
        self.assertEqual(signal.score, 50)
        self.assertEqual(signal.keywords, ["university", "graduate"])


class FormatTests(unittest.TestCase):
    def test_detects_sections_on_raw_text(self):
        signal = analyze_format("EMAIL: a@b.com\nSKILLS: Python")
        self.assertEqual(signal.sections, ["contact", "skills"])
        self.assertEqual(signal.word_count, 4)
        self.assertEqual(signal.score, 60)

    def test_length_bonus_window(self):
        for count, score in ((299, 50), (300, 60), (1000, 60), (1001, 50)):
            signal = analyze_format(" ".join(["lorem"] * count))
            self.assertEqual(signal.word_count, count)
            self.assertEqual(signal.score, score, count)

    def test_all_sections_and_length(self):
        header = (
            "Email Summary Experience Education Skills Projects Achievements "
        )
        signal = analyze_format(header + " ".join(["lorem"] * 400))
        self.assertEqual(len(signal.sections), 7)
        self.assertEqual(signal.score, 95)

    def test_empty_text(self):
        signal = analyze_format("")
        self.assertEqual(signal.score, 50)
        self.assertEqual(signal.sections, [])
        self.assertEqual(signal.word_count, 0)


if __name__ == "__main__":
    unittest.main()
