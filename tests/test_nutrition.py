import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from algorithms import NutritionEstimator
from models import ClientProfile


def profile(**overrides) -> ClientProfile:
    data = dict(
        name="Sam",
        age=30,
        height=180,
        weight=85,
        training_frequency=4,
        goals="Build muscle",
        session_duration=60,
    )
    data.update(overrides)
    return ClientProfile(**data)


class NutritionEstimatorTest(unittest.TestCase):
    def test_reference_profile(self) -> None:
        self.assertAlmostEqual(NutritionEstimator.tdee(85, 180, 30, 4), 3072.9872, places=3)
        macros = NutritionEstimator.estimate(profile()).macros
        self.assertEqual(macros.daily_calories, 3073)
        self.assertEqual(macros.protein_grams, 153)
        self.assertEqual(macros.protein_calories, 612)
        self.assertEqual(macros.carbs_grams, 346)
        self.assertEqual(macros.fats_grams, 85)

    def test_fat_loss_split_and_protein(self) -> None:
        macros = NutritionEstimator.estimate(profile(goals="Fat loss")).macros
        self.assertEqual(macros.protein_grams, 170)
        self.assertEqual(macros.carbs_grams, 269)
        self.assertEqual(macros.fats_grams, 120)

    def test_strength_wins_protein_but_fat_sets_split(self) -> None:
        plan = NutritionEstimator.estimate(profile(goals="Strength and fat loss"))
        self.assertEqual(plan.macros.protein_grams, 187)
        self.assertEqual(plan.macros.carbs_grams, 269)
        self.assertIn(
            "Create a caloric deficit of 300-500 calories for sustainable fat loss",
            plan.suggestions,
        )

    def test_meal_templates(self) -> None:
        plan = NutritionEstimator.estimate(profile())
        meals = [m.to_dict() for m in plan.meal_templates]
        self.assertEqual(
            [m["meal_name"] for m in meals],
            ["Breakfast", "Lunch", "Pre-Workout", "Dinner"],
        )
        self.assertEqual(meals[0]["foods"], ["Eggs", "Oats", "Berries"])
        self.assertEqual(meals[0]["macros"], {"protein": 31, "carbs": 87, "fats": 17})
        self.assertEqual(meals[3]["description"], "Protein-focused with vegetables")

    def test_suggestions(self) -> None:
        plan = NutritionEstimator.estimate(profile())
        self.assertEqual(len(plan.suggestions), 5)
        self.assertEqual(plan.suggestions[0], "Aim for 153g protein daily for your goals")
        self.assertEqual(
            plan.suggestions[1], "Spread protein across 4 meals throughout the day"
        )
        self.assertEqual(
            plan.suggestions[2],
            "Maintain a slight caloric surplus to support muscle growth",
        )

    def test_summary_marks_unknown_body_fat(self) -> None:
        summary = NutritionEstimator.estimate(profile()).profile_summary
        self.assertIn("Body Fat: Unknown%", summary)
        summary = NutritionEstimator.estimate(profile(body_fat_percentage=15)).profile_summary
        self.assertIn("Body Fat: 15%", summary)

    def test_payload_shape(self) -> None:
        data = NutritionEstimator.estimate(profile()).to_dict()
        self.assertEqual(
            set(data["macros"]),
            {"protein_grams", "carbs_grams", "fats_grams", "daily_calories", "protein_calories"},
        )
        self.assertEqual(len(data["meal_templates"]), 4)


if __name__ == "__main__":
    unittest.main()
