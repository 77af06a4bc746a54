from __future__ import annotations

from models import SubstituteRequest, SubstituteSuggestion


def _table(muscle_group: str, *rows: tuple[str, str, str, str]) -> tuple[SubstituteSuggestion, ...]:
    return tuple(
        SubstituteSuggestion(name, muscle_group, equipment, difficulty, reason)
        for name, equipment, difficulty, reason in rows
    )


class SubstitutionAdvisor:
    """Suggest alternatives for an exercise from a fixed lookup table.

    Candidates are returned in table order, optionally filtered by the
    equipment the client has access to. The client's injuries are only
    echoed back in :meth:`rationale`; no candidate is excluded on that
    basis.
    """

    MAX_RESULTS = 5
    UNFILTERED_EQUIPMENT = frozenset({"full gym access", "all", "any"})

    ALTERNATIVES: dict[str, tuple[SubstituteSuggestion, ...]] = {
        "quadriceps": _table(
            "Quadriceps",
            ("Leg Press", "Machine", "Beginner", "Lower impact alternative for knee health"),
            ("Bulgarian Split Squat", "Dumbbells", "Intermediate", "Single-leg variation for strength balance"),
            ("Smith Machine Squat", "Barbell", "Intermediate", "Guided movement for form consistency"),
            ("Hack Squat", "Machine", "Intermediate", "Machine-guided for safety"),
            ("Sissy Squat", "Bodyweight", "Advanced", "Advanced quad isolation movement"),
        ),
        "hamstrings": _table(
            "Hamstrings",
            ("Romanian Deadlift", "Barbell", "Intermediate", "Hip hinge movement for hamstring focus"),
            ("Leg Curl Machine", "Machine", "Beginner", "Isolated machine movement"),
            ("Nordic Curl", "Bodyweight", "Advanced", "Advanced eccentric hamstring work"),
            ("Glute-Ham Raise", "Machine", "Advanced", "Specialized hamstring developer"),
            ("Dumbbell Deadlift", "Dumbbells", "Intermediate", "Dumbbell variation for accessibility"),
        ),
        "chest": _table(
            "Chest",
            ("Dumbbell Bench Press", "Dumbbells", "Intermediate", "Greater range of motion than barbell"),
            ("Machine Chest Press", "Machine", "Beginner", "Controlled movement pattern"),
            ("Decline Push-Up", "Bodyweight", "Intermediate", "Increased difficulty for chest emphasis"),
            ("Machine Fly", "Machine", "Beginner", "Isolation movement for chest"),
            ("Push-Up", "Bodyweight", "Beginner", "Fundamental movement option"),
        ),
        "back": _table(
            "Back",
            ("Lat Pulldown", "Machine", "Beginner", "Controlled pulling movement"),
            ("Dumbbell Row", "Dumbbells", "Intermediate", "Single-arm variation for balance"),
            ("Inverted Row", "Bodyweight", "Intermediate", "Bodyweight pulling option"),
            ("Chest-Supported Row", "Barbell", "Intermediate", "Reduces lower back stress"),
            ("Machine Row", "Machine", "Beginner", "Stable rowing motion"),
        ),
    }

    # name, equipment, difficulty, reason; muscle group comes from the request
    GENERIC = (
        ("Machine Exercise", "Machine", "Beginner", "Safe alternative targeting the same muscle group"),
        ("Dumbbells Alternative", "Dumbbells", "Intermediate", "Dumbbell variation for your muscle group"),
        ("Bodyweight Option", "Bodyweight", "Beginner", "Bodyweight exercise for the same muscles"),
    )

    @classmethod
    def candidates(cls, muscle_group: str) -> list[SubstituteSuggestion]:
        table = cls.ALTERNATIVES.get((muscle_group or "").strip().lower())
        if table is not None:
            return list(table)
        return list(_table(muscle_group, *cls.GENERIC))

    @classmethod
    def filter_by_equipment(
        cls, candidates: list[SubstituteSuggestion], equipment: str
    ) -> list[SubstituteSuggestion]:
        wanted = (equipment or "").strip().lower()
        if not wanted or wanted in cls.UNFILTERED_EQUIPMENT:
            return candidates
        return [
            c
            for c in candidates
            if wanted in c.equipment.lower() or c.equipment.lower() in wanted
        ]

    @staticmethod
    def fallback(request: SubstituteRequest) -> SubstituteSuggestion:
        return SubstituteSuggestion(
            name="Alternative Exercise",
            muscle_group=request.muscle_group,
            equipment=request.equipment,
            difficulty="Intermediate",
            reason="Suitable alternative for your equipment and muscle group",
        )

    @classmethod
    def suggest(cls, request: SubstituteRequest) -> list[SubstituteSuggestion]:
        """Return between one and five alternatives for ``request``."""
        found = cls.filter_by_equipment(cls.candidates(request.muscle_group), request.equipment)
        found = found[: cls.MAX_RESULTS]
        if not found:
            return [cls.fallback(request)]
        return found

    @staticmethod
    def rationale(request: SubstituteRequest, experience: str | None = None) -> str:
        """Describe the constraints the suggestions were chosen under."""
        return (
            f'Alternatives for "{request.exercise_name}" ({request.muscle_group}) '
            f"using {request.equipment or 'any equipment'}; "
            f"avoid aggravating {request.injuries or 'no known injuries'}; "
            f"experience level {experience or 'unknown'}."
        )
