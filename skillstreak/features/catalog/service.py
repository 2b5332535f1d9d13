from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from skillstreak.core.errors import NotFoundError
from skillstreak.features.catalog.templates import default_letter_templates
from skillstreak.features.scoring.rhythm import build_expected_taps
from skillstreak.models.course import Course, Exercise
from skillstreak.models.scoring import ExerciseType, Point, ScoringContext


# Ground-truth object counts per counting image
DEFAULT_ANSWER_KEY: Dict[str, int] = {
    "apples": 5,
    "balls": 8,
    "cars": 3,
    "stars": 12,
    "hearts": 7,
    "flowers": 9,
    "birds": 4,
    "fish": 6,
    "mixed": 11,
    "pattern": 16,
}


def _trace(exercise_id: str, letter: str, base_xp: int, description: str) -> Exercise:
    return Exercise(
        id=exercise_id,
        type=ExerciseType.TRACE,
        title=f"Trace Letter {letter}",
        description=description,
        base_xp=base_xp,
        data={"letter": letter},
    )


def _count(exercise_id: str, title: str, image_id: str, base_xp: int, description: str) -> Exercise:
    return Exercise(
        id=exercise_id,
        type=ExerciseType.COUNT,
        title=title,
        description=description,
        base_xp=base_xp,
        data={"imageId": image_id},
    )


def _rhythm(exercise_id: str, title: str, bpm: int, beats: List[int], base_xp: int, description: str) -> Exercise:
    return Exercise(
        id=exercise_id,
        type=ExerciseType.RHYTHM,
        title=title,
        description=description,
        base_xp=base_xp,
        data={"bpm": bpm, "beats": beats},
    )


DEFAULT_COURSES: Tuple[Course, ...] = (
    Course(
        id="alphabet_basics",
        title="Alphabet Basics",
        description="Learn to trace basic letters",
        icon="🔤",
        required_xp=0,
        exercises=(
            _trace("trace_a", "A", 10, "Draw the letter A on the canvas"),
            _trace("trace_b", "B", 15, "Draw the letter B on the canvas"),
            _trace("trace_c", "C", 12, "Draw the letter C on the canvas"),
        ),
    ),
    Course(
        id="counting_fun",
        title="Counting Fun",
        description="Practice counting objects",
        icon="🔢",
        required_xp=50,
        exercises=(
            _count("count_apples", "Count Apples", "apples", 20, "How many apples do you see?"),
            _count("count_balls", "Count Balls", "balls", 25, "How many balls do you see?"),
            _count("count_cars", "Count Cars", "cars", 18, "How many cars do you see?"),
        ),
    ),
    Course(
        id="rhythm_master",
        title="Rhythm Master",
        description="Tap along with the beat",
        icon="🎵",
        required_xp=100,
        exercises=(
            _rhythm("rhythm_basic", "Basic Rhythm", 120, [1, 1, 1, 1], 25, "Tap along with the basic beat"),
            _rhythm("rhythm_medium", "Medium Rhythm", 140, [1, 1, 1, 1], 30, "Tap along with a faster beat"),
            _rhythm("rhythm_advanced", "Advanced Rhythm", 160, [1, 1, 1, 1, 1], 35, "Master the complex rhythm"),
        ),
    ),
    Course(
        id="advanced_tracing",
        title="Advanced Tracing",
        description="Master complex letter formations",
        icon="✍️",
        required_xp=200,
        exercises=(
            _trace("trace_m", "M", 20, "Draw the complex letter M"),
            _trace("trace_w", "W", 20, "Draw the complex letter W"),
            _trace("trace_q", "Q", 22, "Draw the complex letter Q"),
        ),
    ),
    Course(
        id="number_mastery",
        title="Number Mastery",
        description="Advanced counting challenges",
        icon="🔢",
        required_xp=300,
        exercises=(
            _count("count_mixed", "Mixed Objects", "mixed", 30, "Count different types of objects"),
            _count("count_pattern", "Pattern Counting", "pattern", 35, "Count objects in a pattern"),
        ),
    ),
)


class CatalogService:
    """Read-only course/exercise catalog. Resolves trusted scoring data per exercise."""

    def __init__(
        self,
        courses: Iterable[Course] = DEFAULT_COURSES,
        *,
        letter_templates: Optional[Mapping[str, Tuple[Point, ...]]] = None,
        answer_key: Optional[Mapping[str, int]] = None,
    ):
        self._courses: Tuple[Course, ...] = tuple(courses)
        self._exercises: Dict[str, Exercise] = {
            exercise.id: exercise for course in self._courses for exercise in course.exercises
        }
        self.letter_templates: Dict[str, Tuple[Point, ...]] = dict(
            letter_templates if letter_templates is not None else default_letter_templates()
        )
        self.answer_key: Dict[str, int] = dict(answer_key if answer_key is not None else DEFAULT_ANSWER_KEY)

    def list_courses(self) -> List[Course]:
        return list(self._courses)

    def get_course(self, course_id: str) -> Course:
        for course in self._courses:
            if course.id == course_id:
                return course
        raise NotFoundError(f"Course {course_id} not found")

    def unlocked_courses(self, total_xp: int) -> List[Course]:
        return [course for course in self._courses if course.is_unlocked_for(total_xp)]

    def get_exercise(self, exercise_id: str) -> Exercise:
        exercise = self._exercises.get(exercise_id)
        if exercise is None:
            raise NotFoundError(f"Exercise {exercise_id} not found")
        return exercise

    def scoring_context(self, exercise: Exercise) -> ScoringContext:
        """Build the trusted reference data the scorer compares a run against."""
        if exercise.type is ExerciseType.TRACE:
            letter = str(exercise.data.get("letter", "")).upper()
            return ScoringContext(template_points=self.letter_templates.get(letter, ()))
        if exercise.type is ExerciseType.COUNT:
            return ScoringContext(correct_count=self.answer_key.get(exercise.data.get("imageId", "")))
        bpm = exercise.data["bpm"]
        return ScoringContext(
            expected_taps=tuple(build_expected_taps(bpm, exercise.data.get("beats", []))),
            bpm=bpm,
        )


catalog_service = CatalogService()
