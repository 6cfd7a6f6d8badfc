import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.scoring.section_ordering import (  # noqa: E402
    RECOMMENDED_ORDER,
    detect_section_order,
    validate_section_order,
)
from app.scoring.structural_suggestions import generate_structural_suggestions  # noqa: E402

COOP_RAW_TEXT = (
    "Alex Chen\n"
    "SUMMARY\n"
    "Motivated student eager to learn and contribute to a dynamic team.\n"
    "EXPERIENCE\n"
    "- Built internal dashboards for the operations team\n"
    "EDUCATION\n"
    "B.Sc. Computer Science, expected 2026\n"
    "PROJECTS\n"
    "- Deployed a containerized Flask app\n"
)
COOP_PARSED = {
    "summary": "Motivated student eager to learn and contribute to a dynamic team.",
    "experience": "- Built internal dashboards for the operations team",
    "education": "B.Sc. Computer Science, expected 2026",
    "projects": "- Deployed a containerized Flask app",
}


def _ids(suggestions):
    return [item.id for item in suggestions]


class StructuralSuggestionTests(unittest.TestCase):
    def test_coop_resume_violating_every_rule_gets_all_four(self):
        suggestions = generate_structural_suggestions(
            "coop",
            COOP_PARSED,
            ["summary", "experience", "education", "projects"],
            raw_resume_text=COOP_RAW_TEXT,
        )
        ids = _ids(suggestions)
        for rule_id in (
            "rule-coop-exp-before-edu",
            "rule-coop-no-skills-at-top",
            "rule-coop-generic-summary",
            "rule-coop-projects-heading",
        ):
            self.assertIn(rule_id, ids)
        self.assertGreaterEqual(len(suggestions), 4)

        priorities = {item.id: item.priority for item in suggestions}
        self.assertEqual(priorities["rule-coop-exp-before-edu"], "high")
        self.assertEqual(priorities["rule-coop-no-skills-at-top"], "critical")
        self.assertEqual(priorities["rule-coop-generic-summary"], "high")
        self.assertEqual(priorities["rule-coop-projects-heading"], "moderate")

    def test_well_structured_coop_resume_has_no_suggestions(self):
        raw_text = (
            "SKILLS\nPython, SQL\n"
            "EDUCATION\nB.Sc. Computer Science\n"
            "PROJECT EXPERIENCE\n- Built a scheduling app\n"
            "EXPERIENCE\n- Tutored first-year students\n"
        )
        parsed = {
            "skills": "Python, SQL",
            "education": "B.Sc. Computer Science",
            "projects": "- Built a scheduling app",
            "experience": "- Tutored first-year students",
        }
        suggestions = generate_structural_suggestions("coop", parsed, None, raw_resume_text=raw_text)
        self.assertEqual(suggestions, [])

    def test_projects_heading_assumed_when_raw_text_missing(self):
        suggestions = generate_structural_suggestions("coop", {"skills": "Python", "projects": "- App"}, ["skills", "projects"])
        self.assertEqual(_ids(suggestions), ["rule-coop-projects-heading"])

    def test_career_changer_rules(self):
        suggestions = generate_structural_suggestions(
            "career_changer",
            {"experience": "- Managed retail store operations", "education": "Data Analytics Certificate"},
            ["experience", "education"],
        )
        self.assertEqual(
            _ids(suggestions),
            ["rule-career-changer-no-summary", "rule-career-changer-edu-below-exp"],
        )
        self.assertEqual(suggestions[0].priority, "critical")
        self.assertEqual(suggestions[1].category, "section_order")

    def test_fulltime_education_before_experience(self):
        suggestions = generate_structural_suggestions(
            "fulltime",
            {"summary": "Engineer", "education": "B.Sc.", "experience": "- Built things"},
            ["summary", "education", "experience"],
        )
        self.assertEqual(_ids(suggestions), ["rule-fulltime-edu-before-exp"])

    def test_unsafe_phrase_inside_paragraph_does_not_trigger(self):
        raw_text = (
            "SUMMARY\n"
            "I started my journey in software after a decade in retail, and learning never stopped.\n"
            "EXPERIENCE\n"
            "- Built reporting tools\n"
        )
        suggestions = generate_structural_suggestions(
            "fulltime",
            {"summary": "I started my journey in software.", "experience": "- Built reporting tools"},
            ["summary", "experience"],
            raw_resume_text=raw_text,
        )
        self.assertNotIn("rule-non-standard-headers", _ids(suggestions))

    def test_unsafe_heading_line_triggers(self):
        raw_text = (
            "SUMMARY\n"
            "Backend engineer.\n"
            "My Journey\n"
            "- Built reporting tools\n"
            "EDUCATION\n"
            "B.Sc. Computer Science\n"
        )
        suggestions = generate_structural_suggestions(
            "fulltime",
            {"summary": "Backend engineer.", "experience": "- Built reporting tools"},
            ["summary", "experience", "education"],
            raw_resume_text=raw_text,
        )
        headers = [item for item in suggestions if item.id == "rule-non-standard-headers"]
        self.assertEqual(len(headers), 1)
        self.assertEqual(headers[0].category, "section_heading")
        self.assertIn("Professional Experience", headers[0].current_state)

    def test_unknown_candidate_type_raises(self):
        with self.assertRaises(ValueError):
            generate_structural_suggestions("executive", {}, [])


class SectionOrderingTests(unittest.TestCase):
    def test_detect_section_order_from_headings(self):
        self.assertEqual(
            detect_section_order(COOP_RAW_TEXT),
            ["summary", "experience", "education", "projects"],
        )
        self.assertEqual(detect_section_order(None), [])

    def test_validate_section_order_reports_violations(self):
        result = validate_section_order(["experience", "education", "skills"], "coop")
        self.assertFalse(result.is_correct_order)
        self.assertEqual(result.recommended_order, list(RECOMMENDED_ORDER["coop"]))
        self.assertEqual(result.violations[0].section, "experience")
        self.assertEqual(result.violations[0].expected_position, 2)

    def test_single_or_unknown_sections_never_violate(self):
        self.assertTrue(validate_section_order(["skills"], "fulltime").is_correct_order)
        self.assertTrue(validate_section_order(["summary", "hobbies", "skills"], "fulltime").is_correct_order)

    def test_unknown_candidate_type_raises(self):
        with self.assertRaises(ValueError):
            validate_section_order(["skills"], "executive")


if __name__ == "__main__":
    unittest.main()
