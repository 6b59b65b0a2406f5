from manavault.analysis.hypergeometric import (
    cards_seen,
    hypergeometric_pmf,
    prob_at_least,
    prob_at_least_one,
)
from manavault.analysis.mana import analyze, classify_status, grade_for_score, threshold_for_pips
from manavault.analysis.mana_cost import ManaCostParseError, count_pips, parse_mana_cost

__all__ = [
    "ManaCostParseError",
    "analyze",
    "cards_seen",
    "classify_status",
    "count_pips",
    "grade_for_score",
    "hypergeometric_pmf",
    "parse_mana_cost",
    "prob_at_least",
    "prob_at_least_one",
    "threshold_for_pips",
]
