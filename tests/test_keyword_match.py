import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.scoring.keyword_match import coerce_keywords, match_keywords  # noqa: E402

ANALYZED_AT = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

RESUME_TEXT = (
    "SUMMARY\n"
    "Frontend engineer who led a team of four building dashboards.\n"
    "SKILLS\n"
    "Python, React, JS, K8s, REST APIs\n"
    "EXPERIENCE\n"
    "- Built internal tools in Python and React for the finance group\n"
    "- Shipped a design system used by six product squads\n"
)


def _by_keyword(result):
    return {item.keyword: item for item in result.matched}


class KeywordMatchTests(unittest.TestCase):
    def test_exact_match_wins_and_records_placement(self):
        result = match_keywords(
            RESUME_TEXT,
            [{"keyword": "Python", "category": "technologies", "importance": "high"}],
            analyzed_at=ANALYZED_AT,
        )
        matched = _by_keyword(result)["Python"]
        self.assertEqual(matched.match_type, "exact")
        self.assertEqual(matched.importance, "high")
        self.assertEqual(matched.placement, "skills_section")
        self.assertIn("Python", matched.context)

    def test_fuzzy_matches_spelling_variants(self):
        result = match_keywords(
            RESUME_TEXT,
            [{"keyword": "React.js"}, {"keyword": "REST API"}],
            analyzed_at=ANALYZED_AT,
        )
        matched = _by_keyword(result)
        self.assertEqual(matched["React.js"].match_type, "fuzzy")
        self.assertEqual(matched["REST API"].match_type, "fuzzy")

    def test_fuzzy_matches_controlled_abbreviations(self):
        result = match_keywords(
            RESUME_TEXT,
            [{"keyword": "JavaScript"}, {"keyword": "Kubernetes"}],
            analyzed_at=ANALYZED_AT,
        )
        matched = _by_keyword(result)
        self.assertEqual(matched["JavaScript"].match_type, "fuzzy")
        self.assertEqual(matched["Kubernetes"].match_type, "fuzzy")

    def test_js_framework_names_do_not_match_plain_words(self):
        text = "Planned the next release with the design team.\nGraph node traversal in Java."
        result = match_keywords(text, ["Next.js", "Node.js"], analyzed_at=ANALYZED_AT)
        self.assertEqual(result.matched, [])
        self.assertEqual([item.keyword for item in result.missing], ["Next.js", "Node.js"])

    def test_js_framework_names_match_other_js_spellings(self):
        text = "SKILLS\nNextJS, NodeJS, TypeScript\n"
        result = match_keywords(text, ["Next.js", "Node.js", "React"], analyzed_at=ANALYZED_AT)
        matched = _by_keyword(result)
        self.assertEqual(matched["Next.js"].match_type, "fuzzy")
        self.assertEqual(matched["Node.js"].match_type, "fuzzy")
        self.assertNotIn("React", matched)

    def test_plain_keyword_matches_js_suffixed_resume_token(self):
        result = match_keywords("Built dashboards in VueJS", ["Vue"], analyzed_at=ANALYZED_AT)
        self.assertEqual(result.matched[0].match_type, "fuzzy")

    def test_semantic_match_uses_concept_taxonomy(self):
        result = match_keywords(RESUME_TEXT, [{"keyword": "Leadership", "category": "soft_skills"}], analyzed_at=ANALYZED_AT)
        matched = _by_keyword(result)["Leadership"]
        self.assertEqual(matched.match_type, "semantic")
        self.assertEqual(matched.placement, "summary")

    def test_unmatched_keyword_is_missing_with_its_importance(self):
        result = match_keywords(RESUME_TEXT, [{"keyword": "Terraform", "importance": "low"}], analyzed_at=ANALYZED_AT)
        self.assertEqual(result.matched, [])
        self.assertEqual(len(result.missing), 1)
        self.assertEqual(result.missing[0].importance, "low")
        self.assertEqual(result.match_rate, 0)

    def test_match_rate_is_rounded_share_of_matched_keywords(self):
        result = match_keywords(
            RESUME_TEXT,
            ["Python", "React", "Terraform"],
            analyzed_at=ANALYZED_AT,
        )
        self.assertEqual(result.match_rate, 67)
        self.assertEqual(result.total_count, 3)

    def test_experience_bullet_placement_from_sections(self):
        sections = {
            "skills": "Python, React",
            "experience": "- Shipped a design system used by six product squads",
        }
        result = match_keywords(RESUME_TEXT, ["design system"], sections=sections, analyzed_at=ANALYZED_AT)
        self.assertEqual(result.matched[0].placement, "experience_bullet")

    def test_malformed_keywords_are_coerced_not_rejected(self):
        keywords = coerce_keywords(
            [
                {"keyword": "Python", "importance": "urgent", "category": 5},
                {"keyword": "python"},
                {"keyword": "   "},
                {"category": "skills"},
                None,
                "Docker",
            ]
        )
        self.assertEqual([item.keyword for item in keywords], ["Python", "Docker"])
        self.assertEqual(keywords[0].importance, "medium")
        self.assertEqual(keywords[0].category, "other")

    def test_context_is_truncated(self):
        long_line = "Python " + "x" * 200
        result = match_keywords(long_line, ["Python"], analyzed_at=ANALYZED_AT)
        self.assertLessEqual(len(result.matched[0].context), 100)

    def test_matching_is_deterministic(self):
        keywords = ["Python", "React.js", "Leadership", "Terraform"]
        first = match_keywords(RESUME_TEXT, keywords, analyzed_at=ANALYZED_AT)
        second = match_keywords(RESUME_TEXT, keywords, analyzed_at=ANALYZED_AT)
        self.assertEqual(first.model_dump(), second.model_dump())

    def test_empty_inputs_produce_empty_analysis(self):
        result = match_keywords("", [], analyzed_at=ANALYZED_AT)
        self.assertEqual(result.total_count, 0)
        self.assertEqual(result.match_rate, 0)
        self.assertEqual(result.analyzed_at, ANALYZED_AT)


if __name__ == "__main__":
    unittest.main()
