"""Node health scoring for a single query."""
from typing import Optional


def calculate_score(latency_ms: Optional[int], success: bool) -> int:
    """
    Calculate node health score (0-100) from one query outcome.

    Args:
        latency_ms: Round-trip time of the query (None if it never completed)
        success: Whether the node answered with a result

    Returns:
        Health score from 0 to 100
    """
    base_score = 100

    # Latency penalty
    if latency_ms is not None and latency_ms > 200:
        latency_penalty = min(30, (latency_ms - 200) / 50)
    else:
        latency_penalty = 0

    error_penalty = 0 if success else 75

    final_score = max(0, base_score - latency_penalty - error_penalty)

    return int(final_score)


def score_to_status(score: int) -> str:
    """Convert score to status string."""
    if score > 80:
        return "healthy"
    elif score > 50:
        return "degraded"
    else:
        return "unhealthy"
