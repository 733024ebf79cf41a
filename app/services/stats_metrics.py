"""Derived ratios over a user's raw counts.

Every denominator carries a +1 so a user without history scores 0 rather
than dividing by zero. hater_score and hated_score are heuristics and are
deliberately left unclamped; hated_score goes negative when a user owns more
bans than they share.
"""


def compute_reliability(ready_turn_phases: int, active_turn_phases: int, missed_turn_phases: int) -> float:
    return (ready_turn_phases + active_turn_phases) / (
        ready_turn_phases + active_turn_phases + missed_turn_phases + 1
    )


def compute_quickness(ready_turn_phases: int, active_turn_phases: int, missed_turn_phases: int) -> float:
    return ready_turn_phases / (ready_turn_phases + active_turn_phases + missed_turn_phases + 1)


def compute_hater_score(owned_ban_count: int, started_games: int) -> float:
    return owned_ban_count / (started_games + 1)


def compute_hated_score(shared_ban_count: int, owned_ban_count: int, started_games: int) -> float:
    return (shared_ban_count - owned_ban_count) / (started_games + 1)


def compute_derived_metrics(counts: dict[str, int]) -> dict[str, float]:
    ready = counts["ready_turn_phases"]
    active = counts["active_turn_phases"]
    missed = counts["missed_turn_phases"]

    return {
        "reliability": compute_reliability(ready, active, missed),
        "quickness": compute_quickness(ready, active, missed),
        "hater_score": compute_hater_score(counts["owned_ban_count"], counts["started_games"]),
        "hated_score": compute_hated_score(
            counts["shared_ban_count"],
            counts["owned_ban_count"],
            counts["started_games"],
        ),
    }
