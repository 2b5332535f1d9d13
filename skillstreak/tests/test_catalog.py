import pytest

from skillstreak.core.errors import NotFoundError
from skillstreak.features.catalog.service import CatalogService, catalog_service
from skillstreak.features.catalog.templates import default_letter_templates
from skillstreak.models.scoring import ExerciseType


class TestCatalogService:
    def test_lists_courses_in_unlock_order(self):
        courses = catalog_service.list_courses()
        assert [c.id for c in courses] == [
            "alphabet_basics",
            "counting_fun",
            "rhythm_master",
            "advanced_tracing",
            "number_mastery",
        ]
        assert [c.required_xp for c in courses] == sorted(c.required_xp for c in courses)

    def test_missing_course(self):
        with pytest.raises(NotFoundError):
            catalog_service.get_course("cooking")

    def test_unlocked_courses(self):
        assert [c.id for c in catalog_service.unlocked_courses(0)] == ["alphabet_basics"]
        assert [c.id for c in catalog_service.unlocked_courses(100)] == [
            "alphabet_basics",
            "counting_fun",
            "rhythm_master",
        ]

    def test_get_exercise(self):
        exercise = catalog_service.get_exercise("trace_a")
        assert exercise.type is ExerciseType.TRACE
        assert exercise.base_xp == 10
        with pytest.raises(NotFoundError):
            catalog_service.get_exercise("trace_z")

    def test_course_to_dict(self):
        payload = catalog_service.get_course("counting_fun").to_dict(total_xp=60)
        assert payload["unlocked"] is True
        assert payload["requiredXP"] == 50
        assert payload["exercises"][0]["baseXP"] == 20


class TestScoringContext:
    def test_trace_context_has_letter_template(self):
        context = catalog_service.scoring_context(catalog_service.get_exercise("trace_b"))
        assert context.template_points == default_letter_templates()["B"]

    def test_count_context_has_answer(self):
        context = catalog_service.scoring_context(catalog_service.get_exercise("count_apples"))
        assert context.correct_count == 5

    def test_rhythm_context_has_beat_grid(self):
        context = catalog_service.scoring_context(catalog_service.get_exercise("rhythm_basic"))
        assert context.bpm == 120
        assert [t.timestamp for t in context.expected_taps] == [0, 500, 1000, 1500]

    def test_injected_answer_key(self):
        catalog = CatalogService(answer_key={"apples": 9}, letter_templates={})
        context = catalog.scoring_context(catalog.get_exercise("count_apples"))
        assert context.correct_count == 9


def test_every_catalog_letter_has_a_template():
    templates = default_letter_templates()
    letters = {
        exercise.data["letter"]
        for course in catalog_service.list_courses()
        for exercise in course.exercises
        if exercise.type is ExerciseType.TRACE
    }
    for letter in letters:
        assert len(templates[letter]) > 2
