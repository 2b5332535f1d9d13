"""Kid-friendly feedback lines keyed by exercise type and accuracy band."""

from typing import Dict, Optional, Tuple

# (excellent >= 90, great >= 70, good >= 50, keep trying)
FEEDBACK_BANDS: Dict[str, Tuple[str, str, str, str]] = {
    "trace": (
        "Excellent! Perfect letter formation!",
        "Great job! Very well done!",
        "Good attempt! Keep practicing!",
        "Keep trying! Focus on smooth strokes.",
    ),
    "count": (
        "Perfect! You counted correctly!",
        "Very close!",
        "Good try!",
        "Keep practicing!",
    ),
    "rhythm": (
        "Perfect rhythm! Excellent timing!",
        "Great rhythm! Very good timing!",
        "Good attempt! Try to match the beat better!",
        "Keep practicing! Focus on the rhythm!",
    ),
}


def feedback_for(exercise_type: str, accuracy: float, *, correct_count: Optional[int] = None, exact: bool = False) -> str:
    """
    Pick the feedback line for an accuracy score.

    Count feedback reveals the correct answer whenever the guess was not exact.
    """
    bands = FEEDBACK_BANDS.get(exercise_type)
    if bands is None:
        return "Keep practicing!"

    if exercise_type == "count":
        if exact:
            return bands[0]
        if accuracy >= 80:
            line = bands[1]
        elif accuracy >= 60:
            line = bands[2]
        else:
            line = bands[3]
        if correct_count is not None:
            return f"{line} The correct answer is {correct_count}"
        return line

    if accuracy >= 90:
        return bands[0]
    if accuracy >= 70:
        return bands[1]
    if accuracy >= 50:
        return bands[2]
    return bands[3]
