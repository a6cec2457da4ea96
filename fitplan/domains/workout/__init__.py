from fitplan.domains.workout.services.planning import (
    edit_day_plan,
    generate_single_day,
    generate_week,
    iter_week,
    stream_week_ndjson,
)

__all__ = [
    "edit_day_plan",
    "generate_single_day",
    "generate_week",
    "iter_week",
    "stream_week_ndjson",
]
