from typing import List

from pydantic import BaseModel, ConfigDict


class Exercise(BaseModel):
    model_config = ConfigDict(strict=True)

    name: str
    reps: int
    sets: int


class WorkoutPlan(BaseModel):
    """Workout plan returned by `/workout-plan`."""

    model_config = ConfigDict(strict=True)

    workout_type: str
    duration_minutes: int
    # required by the workout schema, optional for decoding
    description: str = ""
    exercises: List[Exercise]
