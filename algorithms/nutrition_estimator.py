from __future__ import annotations

from models import ClientProfile, Macros, MealTemplate, NutritionPlan
from .goals import GoalCategory, goal_tags, primary_goal
from .math_tools import MathTools


class NutritionEstimator:
    """Estimate daily macros and meal templates from a client profile."""

    BMR_BASE: float = 88.362
    BMR_WEIGHT: float = 13.397
    BMR_HEIGHT: float = 4.799
    BMR_AGE: float = 5.677
    ACTIVITY_PER_DAY: float = 0.15

    PROTEIN_PER_KG: dict[GoalCategory, float] = {
        GoalCategory.STRENGTH: 2.2,
        GoalCategory.FAT_LOSS: 2.0,
        GoalCategory.GENERAL: 1.8,
    }
    # (carb share, fat share) of TDEE
    FAT_LOSS_SPLIT = (0.35, 0.35)
    DEFAULT_SPLIT = (0.45, 0.25)

    # name, description, foods, (protein, carbs, fats) shares
    MEALS = (
        ("Breakfast", "High protein start to the day", ("Eggs", "Oats", "Berries"), (0.20, 0.25, 0.20)),
        ("Lunch", "Balanced meal with protein and carbs", ("Chicken", "Rice", "Vegetables"), (0.30, 0.30, 0.25)),
        ("Pre-Workout", "Quick carbs and protein", ("Banana", "Protein Shake"), (0.15, 0.25, 0.10)),
        ("Dinner", "Protein-focused with vegetables", ("Salmon", "Sweet Potato", "Broccoli"), (0.35, 0.20, 0.45)),
    )

    @classmethod
    def bmr(cls, weight: float, height: float, age: float) -> float:
        """Harris-Benedict basal metabolic rate (single formula)."""
        return (
            cls.BMR_BASE
            + cls.BMR_WEIGHT * weight
            + cls.BMR_HEIGHT * height
            - cls.BMR_AGE * age
        )

    @classmethod
    def tdee(cls, weight: float, height: float, age: float, training_frequency: int) -> float:
        return cls.bmr(weight, height, age) * (1 + training_frequency * cls.ACTIVITY_PER_DAY)

    @classmethod
    def macros(cls, profile: ClientProfile) -> Macros:
        weight = float(profile.weight)
        tdee = cls.tdee(weight, float(profile.height), float(profile.age), profile.training_frequency)
        protein = MathTools.round_half_up(weight * cls.PROTEIN_PER_KG[primary_goal(profile.goals)])
        carb_share, fat_share = (
            cls.FAT_LOSS_SPLIT
            if GoalCategory.FAT_LOSS in goal_tags(profile.goals)
            else cls.DEFAULT_SPLIT
        )
        return Macros(
            protein_grams=protein,
            carbs_grams=MathTools.round_half_up(tdee * carb_share / 4),
            fats_grams=MathTools.round_half_up(tdee * fat_share / 9),
            daily_calories=MathTools.round_half_up(tdee),
            protein_calories=protein * 4,
        )

    @classmethod
    def meal_templates(cls, macros: Macros) -> tuple[MealTemplate, ...]:
        meals = []
        for name, description, foods, (p, c, f) in cls.MEALS:
            meals.append(
                MealTemplate(
                    meal_name=name,
                    description=description,
                    foods=foods,
                    protein=MathTools.round_half_up(macros.protein_grams * p),
                    carbs=MathTools.round_half_up(macros.carbs_grams * c),
                    fats=MathTools.round_half_up(macros.fats_grams * f),
                )
            )
        return tuple(meals)

    @staticmethod
    def suggestions(profile: ClientProfile, macros: Macros) -> tuple[str, ...]:
        if GoalCategory.FAT_LOSS in goal_tags(profile.goals):
            energy_line = "Create a caloric deficit of 300-500 calories for sustainable fat loss"
        else:
            energy_line = "Maintain a slight caloric surplus to support muscle growth"
        return (
            f"Aim for {macros.protein_grams}g protein daily for your goals",
            f"Spread protein across {profile.training_frequency} meals throughout the day",
            energy_line,
            "Stay hydrated with at least 3-4 liters of water daily",
            "Time majority of carbs around your training sessions",
        )

    @staticmethod
    def profile_summary(profile: ClientProfile) -> str:
        body_fat = profile.body_fat_percentage
        return (
            f"Weight: {profile.weight} kg, Height: {profile.height} cm, Age: {profile.age}, "
            f"Goal: {profile.goals}, Training Frequency: {profile.training_frequency} days/week, "
            f"Experience Level: {profile.experience}, "
            f"Body Fat: {body_fat if body_fat is not None else 'Unknown'}%"
        )

    @classmethod
    def estimate(cls, profile: ClientProfile) -> NutritionPlan:
        macros = cls.macros(profile)
        return NutritionPlan(
            macros=macros,
            meal_templates=cls.meal_templates(macros),
            suggestions=cls.suggestions(profile, macros),
            profile_summary=cls.profile_summary(profile),
        )
