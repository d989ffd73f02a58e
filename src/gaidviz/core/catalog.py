"""Field catalog for the GAID survey dataset.

Single source of truth for the demographic (grouping) fields, the measure
fields and their labels, canonical category orders and value domains. Used by
the aggregator, the data loader, the view state and the control panel.
"""

from __future__ import annotations

from gaidviz.core.errors import InvalidArgument

# Measures whose per-record value is a 0/1 indicator (reported as percent).
PROPORTION_PREFIX = "feeling_pre_"

DEMOGRAPHIC_LABELS: dict[str, str] = {
    "country": "Country",
    "AI_tech": "AI Technology",
    "gender": "Gender",
    "age": "Age Group",
    "education": "Education Level",
}

DEMOGRAPHIC_FIELDS: tuple[str, ...] = tuple(DEMOGRAPHIC_LABELS)

# Fields without an entry here are ordered lexicographically.
CATEGORY_ORDERS: dict[str, tuple[str, ...]] = {
    "gender": ("Female", "Male", "Diverse", "Prefer not to say"),
    "age": ("<25", "25-34", "35-44", "45-54", ">55", "Prefer not to say"),
    "education": ("No university degree", "Bachelor", "Master and above", "Prefer not to say"),
}

# group title -> {field: label}; order is the menu order
MEASURE_GROUPS: dict[str, dict[str, str]] = {
    "AI Attitudes": {
        "AIAS_mean_pre": "AI Attitude Score (overall average)",
        "AIAS_life_pre": "Belief that AI will improve life",
        "AIAS_work_pre": "Belief that AI will improve work",
        "AIAS_futureuse_pre": "Intention to use AI in the future",
        "AIAS_positive_pre": "Belief that AI is positive for humanity",
    },
    "AI Interest": {
        "AI_interest_mean": "Interest in AI (overall average)",
        "AI_interest_curiosity": "Following AI with curiosity",
        "AI_interest_general": "General interest in AI",
        "AI_interest_read": "Interest in reading about AI",
        "AI_interest_watchlisten": "Interest in watching/listening about AI",
    },
    "Feelings about AI": {
        "feeling_pre_hopeful": "Feeling Hopeful about AI",
        "feeling_pre_confident": "Feeling Confident about AI",
        "feeling_pre_excited": "Feeling Excited about AI",
        "feeling_pre_relaxed": "Feeling Relaxed about AI",
        "feeling_pre_afraid": "Feeling Afraid about AI",
        "feeling_pre_angry": "Feeling Angry about AI",
        "feeling_pre_nervous": "Feeling Nervous about AI",
        "feeling_pre_frustrated": "Feeling Frustrated about AI",
        "feeling_pre_none of the above": "None of the listed feelings",
        "feeling_pre_Idontknow": "Unsure about feelings",
    },
}

MEASURE_LABELS: dict[str, str] = {
    field: label for group in MEASURE_GROUPS.values() for field, label in group.items()
}

MEASURE_FIELDS: tuple[str, ...] = tuple(MEASURE_LABELS)
PROPORTION_FIELDS: tuple[str, ...] = tuple(f for f in MEASURE_FIELDS if f.startswith(PROPORTION_PREFIX))
SCORE_FIELDS: tuple[str, ...] = tuple(f for f in MEASURE_FIELDS if not f.startswith(PROPORTION_PREFIX))

ALL_FIELDS: tuple[str, ...] = DEMOGRAPHIC_FIELDS + MEASURE_FIELDS

SCORE_DOMAIN: tuple[float, float] = (1.0, 5.0)
PROPORTION_DOMAIN: tuple[float, float] = (0.0, 100.0)
SCORE_TICKS: tuple[float, ...] = (1, 2, 3, 4, 5)
PROPORTION_TICKS: tuple[float, ...] = (0, 25, 50, 75, 100)

DEFAULT_MEASURE = "AIAS_mean_pre"
DEFAULT_X_FIELD = "country"
DEFAULT_Y_FIELD = "AI_tech"


def is_proportion(measure: str) -> bool:
    """True if measure belongs to the proportion (feeling) family."""
    return measure.startswith(PROPORTION_PREFIX)


def validate_measure(field: str) -> str:
    """Return field unchanged, or raise InvalidArgument if it is not a catalog measure."""
    if field not in MEASURE_LABELS:
        raise InvalidArgument(f"Unknown measure field {field!r}")
    return field


def validate_demographic(field: str) -> str:
    """Return field unchanged, or raise InvalidArgument if it is not a catalog demographic."""
    if field not in DEMOGRAPHIC_LABELS:
        raise InvalidArgument(f"Unknown demographic field {field!r}")
    return field


def measure_label(field: str) -> str:
    return MEASURE_LABELS[validate_measure(field)]


def demographic_label(field: str) -> str:
    return DEMOGRAPHIC_LABELS[validate_demographic(field)]


def measure_domain(field: str) -> tuple[float, float]:
    """Value domain of the aggregated statistic: (0, 100) for proportions, (1, 5) for scores."""
    validate_measure(field)
    return PROPORTION_DOMAIN if is_proportion(field) else SCORE_DOMAIN


def axis_ticks(field: str) -> list[float]:
    validate_measure(field)
    return list(PROPORTION_TICKS if is_proportion(field) else SCORE_TICKS)


def value_axis_title(field: str) -> str:
    """Axis title for the aggregated statistic of field."""
    return "Percentage (%)" if is_proportion(validate_measure(field)) else "Average Score"


def measure_options() -> dict[str, dict[str, str]]:
    """Grouped {group title: {field: label}} options for the measure selector."""
    return {title: dict(fields) for title, fields in MEASURE_GROUPS.items()}
