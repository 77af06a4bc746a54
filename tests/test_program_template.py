import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from algorithms import ProgramTemplateEngine
from models import ClientProfile


def profile(**overrides) -> ClientProfile:
    data = dict(
        name="Alex",
        training_frequency=4,
        goals="Build muscle",
        session_duration=60,
    )
    data.update(overrides)
    return ClientProfile(**data)


class ProgramTemplateEngineTest(unittest.TestCase):
    def test_split_by_frequency(self) -> None:
        expected = {
            7: ("Push/Pull/Legs", 12),
            6: ("Push/Pull/Legs", 12),
            5: ("Push/Pull/Legs", 12),
            4: ("Upper/Lower", 8),
            3: ("Full Body", 8),
            2: ("Full Body", 8),
            1: ("Full Body", 8),
        }
        for freq, (split, weeks) in expected.items():
            plan = ProgramTemplateEngine.generate(profile(training_frequency=freq))
            self.assertEqual(plan.split_type, split)
            self.assertEqual(plan.duration_weeks, weeks)
            self.assertEqual(len(plan.weeks), weeks)
            self.assertEqual(plan.deload_week, weeks)

    def test_weeks_are_sequential_and_end_with_deload(self) -> None:
        plan = ProgramTemplateEngine.generate(profile(training_frequency=5))
        self.assertEqual([w.week_number for w in plan.weeks], list(range(1, 13)))
        self.assertEqual(plan.weeks[0].focus, "Week 1 - Foundation")
        self.assertEqual(plan.weeks[3].focus, "Week 4 - Foundation")
        self.assertEqual(plan.weeks[4].focus, "Week 5 - Progression")
        self.assertEqual(plan.weeks[-1].focus, "Deload")
        self.assertTrue(plan.weeks[-1].is_deload)
        for week in plan.weeks[:-1]:
            self.assertEqual([e.sets for e in week.exercises], [4, 3])
        self.assertEqual([e.sets for e in plan.weeks[-1].exercises], [2, 2])

    def test_goal_drives_reps_and_rest(self) -> None:
        cases = {
            "Strength": ("3-5", 300, 225),
            "Fat loss": ("12-15", 45, 33),
            "Build muscle": ("8-12", 75, 56),
            "strength and fat loss": ("3-5", 300, 225),
        }
        for goals, (reps, rest, secondary_rest) in cases.items():
            plan = ProgramTemplateEngine.generate(profile(goals=goals))
            primary, secondary = plan.weeks[0].exercises
            self.assertEqual(primary.reps, reps)
            self.assertEqual(secondary.reps, reps)
            self.assertEqual(primary.rest_seconds, rest)
            self.assertEqual(secondary.rest_seconds, secondary_rest)

    def test_prescription_details(self) -> None:
        plan = ProgramTemplateEngine.generate(profile(training_frequency=3))
        primary, secondary = plan.weeks[0].exercises
        self.assertEqual(primary.name, "Barbell Squats")
        self.assertEqual(secondary.name, "Barbell Rows")
        self.assertEqual((primary.tempo, primary.rpe), ("2-1-2", "7-8"))
        self.assertEqual((secondary.tempo, secondary.rpe), ("2-0-2", "6-7"))

    def test_program_name_and_notes(self) -> None:
        plan = ProgramTemplateEngine.generate(profile(goals=" Build muscle , mobility"))
        self.assertEqual(plan.program_name, "Alex's 8-Week Upper/Lower - Build muscle")
        self.assertEqual(
            plan.notes,
            "Periodized Upper/Lower program with 8 weeks. Week 8 is deload week.",
        )
        self.assertEqual(
            plan.progression_strategy,
            "Progressive overload with auto-regulation based on RPE",
        )

    def test_missing_name_and_goal_degrade(self) -> None:
        plan = ProgramTemplateEngine.generate(
            ClientProfile(training_frequency=5, goals="", session_duration=45, name="")
        )
        self.assertEqual(plan.program_name, "Unknown's 12-Week Push/Pull/Legs - General")
        self.assertEqual(plan.weeks[0].exercises[0].reps, "8-12")

    def test_program_data_shape(self) -> None:
        data = ProgramTemplateEngine.generate(profile()).program_data()
        self.assertEqual(
            set(data), {"weeks", "deload_week", "progression_strategy", "notes"}
        )
        self.assertEqual(data["deload_week"], 8)
        self.assertEqual(
            data["weeks"][0]["exercises"][0],
            {
                "name": "Barbell Bench Press",
                "sets": 4,
                "reps": "8-12",
                "tempo": "2-1-2",
                "rest_seconds": 75,
                "rpe": "7-8",
            },
        )

    def test_generation_is_deterministic(self) -> None:
        first = ProgramTemplateEngine.generate(profile())
        second = ProgramTemplateEngine.generate(profile())
        self.assertIsNot(first, second)
        self.assertEqual(first, second)


if __name__ == "__main__":
    unittest.main()
