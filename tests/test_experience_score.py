import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.scoring import patterns  # noqa: E402
from app.scoring.experience_score import (  # noqa: E402
    calculate_experience_score,
    extract_experience_bullets,
    generate_experience_action_items,
)

QUANTIFIED = (
    "EXPERIENCE\n"
    "- Led a team of 6 engineers to ship 3 features per quarter\n"
    "- Reduced cloud spend by 30% across 12 services\n"
    "- Built ingestion pipelines serving 2000 customers\n"
    "- Automated deploys, saving 10 hours per week\n"
)

WEAK_VERBS = (
    "- Helped the team with release planning\n"
    "- Assisted customers with onboarding calls\n"
    "- Worked on the billing dashboard\n"
    "- Built a reporting API for finance\n"
)


class ExperienceScoreTests(unittest.TestCase):
    def test_quantified_bullets_with_strong_verbs(self):
        result = calculate_experience_score(QUANTIFIED)
        self.assertEqual(result.bullet_count, 4)
        self.assertEqual(result.bullets_with_metrics, 4)
        self.assertEqual(result.strong_verb_count, 4)
        self.assertEqual(result.quantification_score, 100)
        self.assertEqual(result.action_verb_score, 100)
        self.assertEqual(result.keyword_density_score, 0)
        self.assertEqual(result.score, 65)

    def test_weak_verbs_are_penalized(self):
        result = calculate_experience_score(WEAK_VERBS)
        self.assertEqual(result.strong_verb_count, 1)
        self.assertEqual(result.weak_verb_count, 3)
        # 0.25 / 0.4 * 50 = 31.25, minus the capped weak-verb penalty of 20
        self.assertEqual(result.action_verb_score, 11)
        self.assertEqual(result.quantification_score, 0)

    def test_keyword_density_counts_distinct_keywords_per_bullet(self):
        text = (
            "- Built Python and SQL reports for finance\n"
            "- Wrote Python jobs for nightly loads\n"
            "- Designed SQL schemas for billing data\n"
            "- Tuned queries for the support team\n"
        )
        result = calculate_experience_score(text, ["Python", "python", "SQL"])
        self.assertEqual(result.keyword_density_score, 50)

    def test_text_without_bullets_gets_baseline_score(self):
        text = "Python dev\nled 3 teams\nsaved $5000\nSQL, Docker\nboosted 40%\n"
        result = calculate_experience_score(text, ["Python", "Docker", "Kafka"])
        self.assertEqual(result.bullet_count, 0)
        self.assertEqual(result.quantification_score, 30)
        self.assertEqual(result.action_verb_score, 30)
        self.assertEqual(result.keyword_density_score, 40)
        self.assertAlmostEqual(result.score, 34, delta=1)

    def test_short_or_empty_text_scores_zero(self):
        self.assertEqual(calculate_experience_score("Jane Doe").score, 0)
        self.assertEqual(calculate_experience_score(None).score, 0)
        self.assertEqual(calculate_experience_score("", []).bullet_count, 0)

    def test_plain_lines_are_used_when_markers_are_missing(self):
        text = (
            "EXPERIENCE\n"
            "Payments platform rewrite across three regions\n"
            "On-call rotation owner for the billing stack\n"
            "Designed the invoice export service for finance\n"
        )
        bullets = extract_experience_bullets(text)
        self.assertEqual(len(bullets), 3)
        self.assertEqual(bullets[0], "Payments platform rewrite across three regions")

    def test_metric_predicates(self):
        self.assertTrue(patterns.has_metric("Cut latency by 40 percent"))
        self.assertTrue(patterns.has_metric("Grew revenue to $1.2M"))
        self.assertTrue(patterns.has_metric("Served 500+ users"))
        self.assertFalse(patterns.has_metric("Built the billing service"))
        self.assertEqual(patterns.count_metric_signals("40% faster for 200 clients"), 2)

    def test_action_items(self):
        items = generate_experience_action_items(calculate_experience_score(WEAK_VERBS))
        self.assertEqual(
            items,
            [
                "Add metrics to 2 more bullet points (e.g., percentages, dollar amounts, team sizes)",
                "Replace 3 weak verbs (helped, assisted) with stronger alternatives (led, drove, built)",
                "Incorporate more job description keywords into your experience bullets",
                "Add more detailed accomplishments to your experience section",
            ],
        )

    def test_scoring_is_deterministic(self):
        first = calculate_experience_score(QUANTIFIED, ["pipelines"])
        second = calculate_experience_score(QUANTIFIED, ["pipelines"])
        self.assertEqual(first.model_dump(), second.model_dump())


if __name__ == "__main__":
    unittest.main()
