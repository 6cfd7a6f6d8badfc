import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.schemas.analysis import ExtractedKeyword, KeywordAnalysisResult, MatchedKeyword  # noqa: E402
from app.scoring.keyword_score import calculate_keyword_score, generate_keyword_action_items  # noqa: E402

ANALYZED_AT = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def _matched(keyword, match_type="exact", importance="medium"):
    return MatchedKeyword(keyword=keyword, category="technologies", match_type=match_type, importance=importance)


def _missing(keyword, importance="medium"):
    return ExtractedKeyword(keyword=keyword, category="technologies", importance=importance)


def _analysis(matched=(), missing=()):
    return KeywordAnalysisResult(matched=list(matched), missing=list(missing), analyzed_at=ANALYZED_AT)


class KeywordScoreTests(unittest.TestCase):
    def test_all_exact_matches_score_100(self):
        result = calculate_keyword_score(
            _analysis(matched=[_matched("Python"), _matched("SQL", importance="high"), _matched("Git", importance="low")])
        )
        self.assertEqual(result.score, 100)
        self.assertEqual(result.matched_count, 3)
        self.assertEqual(result.total_count, 3)
        self.assertEqual(result.penalty_applied, 0)

    def test_all_semantic_matches_score_about_65(self):
        result = calculate_keyword_score(
            _analysis(matched=[_matched(name, match_type="semantic") for name in ("Leadership", "Teamwork", "Communication")])
        )
        self.assertAlmostEqual(result.score, 65, delta=1)

    def test_single_fuzzy_match_scores_about_85(self):
        result = calculate_keyword_score(_analysis(matched=[_matched("React.js", match_type="fuzzy")]))
        self.assertAlmostEqual(result.score, 85, delta=1)

    def test_no_matches_scores_zero(self):
        result = calculate_keyword_score(_analysis(missing=[_missing("Python"), _missing("Rust", "high")]))
        self.assertEqual(result.score, 0)
        self.assertEqual(result.matched_count, 0)
        self.assertEqual(result.total_count, 2)
        self.assertEqual(result.missing_high_importance, 1)

    def test_zero_keywords_scores_zero_without_error(self):
        result = calculate_keyword_score(_analysis())
        self.assertEqual(result.score, 0)
        self.assertEqual(result.total_count, 0)
        self.assertEqual(calculate_keyword_score(None).score, 0)

    def test_missing_high_costs_more_than_missing_low(self):
        matched = [_matched(name) for name in ("Python", "Django", "SQL", "Docker")]
        missing_high = calculate_keyword_score(_analysis(matched=matched, missing=[_missing("Kafka", "high")]))
        missing_low = calculate_keyword_score(_analysis(matched=matched, missing=[_missing("Kafka", "low")]))
        self.assertLess(missing_high.score, missing_low.score)
        self.assertGreater(missing_high.penalty_applied, 0)
        self.assertEqual(missing_low.penalty_applied, 0)

    def test_penalty_is_floored_at_forty_percent_of_base(self):
        missing = [_missing(f"Tool{index}", "high") for index in range(10)]
        result = calculate_keyword_score(_analysis(matched=[_matched("Python", importance="high")], missing=missing))
        # base = 1 / 11 * 100 = 9.09; the floor keeps 40% of it
        self.assertEqual(result.weighted_match_score, 9)
        self.assertEqual(result.score, 4)
        self.assertEqual(result.penalty_applied, 60)
        self.assertEqual(result.missing_high_importance, 10)

    def test_thirteen_exact_and_two_low_missing_lands_in_calibrated_band(self):
        matched = [_matched(f"Skill{index}") for index in range(13)]
        missing = [_missing("Rust", "low"), _missing("Elixir", "low")]
        result = calculate_keyword_score(_analysis(matched=matched, missing=missing))
        self.assertGreaterEqual(result.score, 75)
        self.assertLessEqual(result.score, 95)

    def test_action_items_prioritize_missing_high_keywords(self):
        analysis = _analysis(
            matched=[_matched("Leadership", match_type="semantic")],
            missing=[_missing("Kubernetes", "high"), _missing("Terraform"), _missing("Jira", "low")],
        )
        items = generate_keyword_action_items(analysis)
        self.assertEqual(
            items,
            [
                "Add critical keywords: Kubernetes",
                "Consider adding: Terraform",
                "Use exact terminology for: Leadership",
            ],
        )

    def test_placement_score_weights_where_keywords_sit(self):
        analysis = _analysis(
            matched=[
                MatchedKeyword(keyword="Python", category="technologies", match_type="exact", placement="skills_section"),
                MatchedKeyword(keyword="SQL", category="technologies", match_type="exact", placement="education"),
            ]
        )
        result = calculate_keyword_score(analysis)
        # (1.0 + 0.80) / 2
        self.assertEqual(result.placement_score, 90)
        self.assertEqual(result.score, 100)

    def test_placement_score_ignores_unknown_placements(self):
        self.assertEqual(calculate_keyword_score(_analysis(matched=[_matched("Python")])).placement_score, 0)

    def test_buried_keywords_get_an_action_item(self):
        analysis = _analysis(
            matched=[
                MatchedKeyword(
                    keyword="Kafka", category="technologies", match_type="exact", placement="experience_paragraph"
                ),
                MatchedKeyword(keyword="Python", category="technologies", match_type="exact", placement="experience_bullet"),
            ]
        )
        self.assertEqual(
            generate_keyword_action_items(analysis),
            ["Feature in your skills or summary section: Kafka"],
        )


if __name__ == "__main__":
    unittest.main()
