import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.schemas.resume import ParsedSections  # noqa: E402
from app.scoring.section_score import (  # noqa: E402
    calculate_section_score,
    count_experience_bullets,
    count_skill_items,
    generate_section_action_items,
)

FULL_SUMMARY = (
    "Backend engineer with six years of experience building Python services, REST APIs and "
    "data pipelines for fintech and healthcare teams, focused on reliability, observability, "
    "automated testing and clear documentation for every system shipped."
)
FULL_EXPERIENCE = "\n".join(
    [
        "Senior Software Engineer, Acme Corp | Jan 2021 - Present",
        "- Built Python microservices handling two million requests per day",
        "- Migrated PostgreSQL workloads to managed clusters with zero downtime",
        "- Containerized legacy services with Docker and deployed them to Kubernetes",
        "- Introduced Terraform modules for repeatable infrastructure provisioning",
        "Software Engineer, Beta Labs | Jun 2018 - Dec 2020",
        "- Developed Django REST APIs consumed by three mobile clients",
        "- Added Redis caching that cut p95 latency by 40 percent",
        "- Automated release pipelines across twelve repositories",
        "- Wrote FastAPI services for internal reporting dashboards",
    ]
)


class SectionScoreTests(unittest.TestCase):
    def test_full_sections_score_100(self):
        result = calculate_section_score(
            {
                "summary": FULL_SUMMARY,
                "skills": "Python, Django, FastAPI, PostgreSQL, Docker, Kubernetes",
                "experience": FULL_EXPERIENCE,
            }
        )
        self.assertGreaterEqual(result.summary_word_count, 30)
        self.assertEqual(result.skills_item_count, 6)
        self.assertEqual(result.experience_bullet_count, 8)
        self.assertEqual(result.score, 100)

    def test_empty_resume_scores_zero(self):
        for parsed in (None, {}, ParsedSections(), {"summary": "   ", "skills": None}):
            result = calculate_section_score(parsed)
            self.assertEqual(result.score, 0)
            self.assertEqual(result.summary_score, 0)
            self.assertEqual(result.skills_item_count, 0)
            self.assertEqual(result.experience_bullet_count, 0)

    def test_scores_are_linear_below_threshold(self):
        summary = " ".join(["word"] * 15)
        result = calculate_section_score({"summary": summary, "skills": "Python\nJava\nSQL"})
        self.assertEqual(result.summary_score, 50)
        self.assertEqual(result.skills_score, 50)
        self.assertEqual(result.experience_score, 0)
        self.assertEqual(result.score, 33)

    def test_skill_counting_tolerates_mixed_formats(self):
        self.assertEqual(count_skill_items("Languages: Python, Java, C++\nTools: Docker, Git, Jira"), 6)
        self.assertEqual(count_skill_items("• Python • Java • SQL • Git"), 4)
        self.assertEqual(count_skill_items("Python, python, PYTHON"), 1)

    def test_experience_list_per_job_is_aggregated(self):
        parsed = ParsedSections.model_validate(
            {
                "experience": [
                    "- Built Python microservices handling two million requests per day",
                    "- Migrated PostgreSQL workloads to managed clusters",
                    "- Wrote FastAPI services for internal reporting dashboards",
                    "- Added Redis caching that cut p95 latency by 40 percent",
                ]
            }
        )
        self.assertEqual(calculate_section_score(parsed).experience_bullet_count, 4)

    def test_unmarked_accomplishment_lines_count_as_bullets(self):
        text = (
            "Developed a reporting pipeline that replaced manual spreadsheets\n"
            "Improved onboarding flow conversion for new enterprise accounts\n"
        )
        self.assertEqual(count_experience_bullets(text), 2)

    def test_scoring_is_deterministic(self):
        parsed = {"summary": FULL_SUMMARY, "skills": "Python, SQL", "experience": FULL_EXPERIENCE}
        self.assertEqual(calculate_section_score(parsed), calculate_section_score(parsed))

    def test_action_items_reflect_shortfalls(self):
        result = calculate_section_score({"skills": "Python, SQL"})
        self.assertEqual(
            generate_section_action_items(result),
            [
                "Add a professional summary (30+ words recommended)",
                "Add 4 more skills to your skills section",
                "Add bullet points to your experience section",
            ],
        )


if __name__ == "__main__":
    unittest.main()
