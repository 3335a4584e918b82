"""
Plan kinds served by the generation endpoints.

Each kind binds a route to its schema, base prompt, target model, framing
sentence and attempt limit.
"""

from dataclasses import dataclass
from typing import Dict, Type

from pydantic import BaseModel

from salus.meal.models import MealPlan
from salus.settings import BackendSettings
from salus.workout.models import WorkoutPlan

MEAL_FRAMING = "Consider the following request: {user_input}"
WORKOUT_FRAMING = "Consider the following request MAKE SURE YOU ADD A DESCRIPTION: {user_input}"


@dataclass(frozen=True)
class PlanKind:
    name: str
    label: str
    route: str
    schema_name: str
    prompt_name: str
    model: Type[BaseModel]
    framing: str
    max_attempts: int


def build_plan_kinds(settings: BackendSettings) -> Dict[str, PlanKind]:
    return {
        "meal": PlanKind(
            name="meal",
            label="meal plan",
            route="/meal-plan",
            schema_name="meal",
            prompt_name="meal_base_prompt",
            model=MealPlan,
            framing=MEAL_FRAMING,
            max_attempts=settings.meal_plan_max_attempts,
        ),
        "workout": PlanKind(
            name="workout",
            label="workout plan",
            route="/workout-plan",
            schema_name="workout",
            prompt_name="workout_base_prompt",
            model=WorkoutPlan,
            framing=WORKOUT_FRAMING,
            max_attempts=settings.workout_plan_max_attempts,
        ),
    }
