"""
Hypergeometric draw probabilities.

Closed-form probabilities for drawing from a library without replacement.
Binomials are computed exactly with integer arithmetic.
"""

from math import comb


def cards_seen(turn: int, starting_hand_size: int = 7, on_play: bool = True) -> int:
    """
    Number of cards seen by the given turn.

    On the play there is no draw on turn 1, so turn t sees
    hand + (t - 1) cards. On the draw every turn includes a draw.
    """
    seen = starting_hand_size + (turn - 1)
    if not on_play:
        seen += 1
    return max(0, seen)


def hypergeometric_pmf(population: int, successes: int, draws: int, k: int) -> float:
    """P(X = k) when drawing `draws` cards from `population` with `successes` hits."""
    if draws < 0 or draws > population:
        return 0.0
    if k < 0 or k > draws or k > successes or draws - k > population - successes:
        return 0.0
    return comb(successes, k) * comb(population - successes, draws - k) / comb(population, draws)


def prob_at_least(population: int, successes: int, draws: int, k: int) -> float:
    """P(X >= k), the upper tail of the hypergeometric distribution."""
    if k <= 0:
        return 1.0
    draws = min(draws, population)
    successes = max(0, min(successes, population))
    return sum(hypergeometric_pmf(population, successes, draws, i) for i in range(k, draws + 1))


def prob_at_least_one(population: int, successes: int, draws: int) -> float:
    """
    P(X >= 1) = 1 - C(N - K, n) / C(N, n).

    Args:
        population: Library size N
        successes: Matching cards K (clamped to [0, N])
        draws: Cards seen n (clamped to [0, N])

    Returns:
        Probability of seeing at least one matching card
    """
    if population <= 0:
        return 0.0
    draws = max(0, min(draws, population))
    successes = max(0, min(successes, population))
    # comb() returns 0 when draws > population - successes: a hit is guaranteed
    return 1.0 - comb(population - successes, draws) / comb(population, draws)
