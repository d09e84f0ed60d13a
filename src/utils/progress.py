"""
Progress analytics helpers for dashboards and instructor reporting.

Provides:
- Attempt aggregates (by tag, by difficulty, by day, by learner)
- Mastery summary statistics and banding

Attempt rows are the `attempts` records joined with their item
(`item: {tags, difficulty}`) and author profile (`user: {full_name}`).
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Tuple

UNKNOWN_USER = "Unknown User"


def percent(part: int, whole: int) -> int:
    """Integer percentage rounded half-up (0 when `whole` is 0)."""
    if whole <= 0:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))


def _tally(counts: Dict, key, correct: bool) -> None:
    entry = counts.setdefault(key, {"correct": 0, "total": 0})
    entry["total"] += 1
    if correct:
        entry["correct"] += 1


def performance_by_tag(attempts: Iterable[Dict], limit: int = 10) -> List[Dict]:
    """
    Accuracy per tag, most-attempted tags first.

    Example:
        >>> performance_by_tag([{"correct": True, "item": {"tags": ["algebra"]}}])
        [{'tag': 'algebra', 'accuracy': 100, 'attempts': 1}]
    """
    counts: Dict[str, Dict[str, int]] = {}
    for attempt in attempts:
        item = attempt.get("item") or {}
        for tag in item.get("tags") or []:
            _tally(counts, tag, bool(attempt.get("correct")))

    rows = [
        {"tag": tag, "accuracy": percent(c["correct"], c["total"]), "attempts": c["total"]}
        for tag, c in counts.items()
    ]
    rows.sort(key=lambda r: r["attempts"], reverse=True)
    return rows[:limit]


def difficulty_distribution(
    attempts: Iterable[Dict], default_difficulty: int = 3
) -> List[Dict]:
    """Attempt counts per item difficulty, ascending. Unknown difficulty counts as the default."""
    counts: Dict[int, int] = {}
    for attempt in attempts:
        item = attempt.get("item") or {}
        difficulty = item.get("difficulty") or default_difficulty
        counts[difficulty] = counts.get(difficulty, 0) + 1
    return [{"difficulty": d, "count": n} for d, n in sorted(counts.items())]


def recent_activity(
    attempts: Iterable[Dict], days: int = 7, today: Optional[date] = None
) -> List[Dict]:
    """
    Daily attempt volume and accuracy for the last `days` days (oldest first).

    Days are UTC calendar days matched against the ISO `created_at` prefix.
    """
    attempts = list(attempts)
    today = today or datetime.now(timezone.utc).date()

    activity = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        prefix = day.isoformat()
        day_attempts = [a for a in attempts if (a.get("created_at") or "").startswith(prefix)]
        day_correct = sum(1 for a in day_attempts if a.get("correct"))
        activity.append(
            {
                "date": f"{day:%b} {day.day}",
                "attempts": len(day_attempts),
                "accuracy": percent(day_correct, len(day_attempts)),
            }
        )
    return activity


def top_performers(attempts: Iterable[Dict], limit: int = 10) -> List[Dict]:
    """Learners ranked by accuracy (ties keep first-seen order)."""
    counts: Dict[str, Dict[str, int]] = {}
    names: Dict[str, str] = {}
    for attempt in attempts:
        user_id = attempt.get("user_id")
        names[user_id] = (attempt.get("user") or {}).get("full_name") or UNKNOWN_USER
        _tally(counts, user_id, bool(attempt.get("correct")))

    rows = [
        {
            "name": names[user_id],
            "accuracy": percent(c["correct"], c["total"]),
            "attempts": c["total"],
        }
        for user_id, c in counts.items()
    ]
    rows.sort(key=lambda r: r["accuracy"], reverse=True)
    return rows[:limit]


def attempt_totals(attempts: List[Dict], profiles: List[Dict]) -> Dict[str, int]:
    """Headline numbers: attempts, students with a profile, average accuracy."""
    correct = sum(1 for a in attempts if a.get("correct"))
    return {
        "total_attempts": len(attempts),
        "total_students": len(profiles),
        "average_accuracy": percent(correct, len(attempts)),
    }


def mastery_summary(mastery: Dict[str, float]) -> Dict[str, float]:
    """
    Summary statistics for per-tag mastery scores in [0, 1].

    Returns:
        Dict with mean, median, min, max, std_dev and count
    """
    if not mastery:
        return {"mean": 0.0, "median": 0.0, "min": 0.0, "max": 0.0, "std_dev": 0.0, "count": 0}

    values = sorted(mastery.values())
    n = len(values)
    mean_val = sum(values) / n
    if n % 2 == 1:
        median_val = values[n // 2]
    else:
        median_val = (values[n // 2 - 1] + values[n // 2]) / 2.0
    std_dev = math.sqrt(sum((v - mean_val) ** 2 for v in values) / n)

    return {
        "mean": round(mean_val, 3),
        "median": round(median_val, 3),
        "min": round(values[0], 3),
        "max": round(values[-1], 3),
        "std_dev": round(std_dev, 3),
        "count": n,
    }


def mastery_by_category(
    mastery: Dict[str, float],
    thresholds: Dict[str, Tuple[float, float]],
) -> Dict[str, List[str]]:
    """
    Group tags into mastery bands.

    Bands are half-open `[low, high)`; a score equal to the top band's
    upper bound belongs to the top band.
    """
    categories: Dict[str, List[str]] = {name: [] for name in thresholds}
    top_band, (_, top_high) = max(thresholds.items(), key=lambda kv: kv[1][1])

    for tag, score in mastery.items():
        if score >= top_high:
            categories[top_band].append(tag)
            continue
        for name, (low, high) in thresholds.items():
            if low <= score < high:
                categories[name].append(tag)
                break
    return categories
