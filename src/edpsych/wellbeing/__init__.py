"""
Wellbeing Module

Emotional pattern recognition and regulation strategy recommendations.
"""

from .patterns import ANALYSIS_TYPES, analyze_patterns, time_of_day
from .strategies import STRATEGIES_BY_ID, STRATEGY_CATALOGUE, StrategyRecommender, catalogue_summary

__all__ = [
    "ANALYSIS_TYPES",
    "analyze_patterns",
    "time_of_day",
    "STRATEGIES_BY_ID",
    "STRATEGY_CATALOGUE",
    "StrategyRecommender",
    "catalogue_summary",
]
