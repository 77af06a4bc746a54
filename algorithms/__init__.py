from .math_tools import MathTools
from .goals import GoalCategory, goal_tags, primary_goal, first_goal_token
from .program_template import ProgramTemplateEngine
from .nutrition_estimator import NutritionEstimator
from .readiness_scorer import ReadinessScorer
from .analytics_aggregator import AnalyticsAggregator
from .substitution_advisor import SubstitutionAdvisor

__all__ = [
    "MathTools",
    "GoalCategory",
    "goal_tags",
    "primary_goal",
    "first_goal_token",
    "ProgramTemplateEngine",
    "NutritionEstimator",
    "ReadinessScorer",
    "AnalyticsAggregator",
    "SubstitutionAdvisor",
]
