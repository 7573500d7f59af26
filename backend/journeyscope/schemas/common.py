from __future__ import annotations

from enum import Enum


class BuyingJourneyStage(str, Enum):
    problem_exploration = 'problem_exploration'
    solution_education = 'solution_education'
    solution_comparison = 'solution_comparison'
    solution_evaluation = 'solution_evaluation'
    final_research = 'final_research'


EARLY_STAGES = frozenset({BuyingJourneyStage.problem_exploration.value, BuyingJourneyStage.solution_education.value})
POSITION_STAGES = frozenset({BuyingJourneyStage.solution_comparison.value, BuyingJourneyStage.final_research.value})
EVALUATION_STAGE = BuyingJourneyStage.solution_evaluation.value

STAGE_LABELS = {
    BuyingJourneyStage.problem_exploration.value: 'Problem Exploration',
    BuyingJourneyStage.solution_education.value: 'Solution Education',
    BuyingJourneyStage.solution_comparison.value: 'Solution Comparison',
    BuyingJourneyStage.solution_evaluation.value: 'Solution Evaluation',
    BuyingJourneyStage.final_research.value: 'User Feedback',
}


class SegmentType(str, Enum):
    batch = 'BATCH'
    week = 'WEEK'
    month = 'MONTH'


class TimePeriod(str, Enum):
    weekly = 'weekly'
    monthly = 'monthly'


class WizardStep(str, Enum):
    company = 'company'
    products = 'products'
    competitors = 'competitors'
    icps = 'icps'
    personas = 'personas'
    review = 'review'
    done = 'done'


WIZARD_STEP_ORDER = [
    WizardStep.company,
    WizardStep.products,
    WizardStep.competitors,
    WizardStep.icps,
    WizardStep.personas,
    WizardStep.review,
    WizardStep.done,
]
