"""
Meal plan structure returned by `/meal-plan`.

Types are strict: a string where an integer is expected fails decoding.
Unknown fields are ignored, missing required fields are decode errors.
"""

from typing import List

from pydantic import BaseModel, ConfigDict


class Macros(BaseModel):
    model_config = ConfigDict(strict=True)

    carbs: int
    protein: int
    fat: int


class Meal(BaseModel):
    model_config = ConfigDict(strict=True)

    meal_type: str
    name: str
    description: str = ""
    calories: int
    macros: Macros
    ingredients: List[str]


class MealPlan(BaseModel):
    model_config = ConfigDict(strict=True)

    meals: List[Meal]
