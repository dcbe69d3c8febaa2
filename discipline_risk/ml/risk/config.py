from datetime import timedelta
from types import MappingProxyType

# Consequence type recorded for a DAEP (extended alternative placement)
EXTENDED_PLACEMENT = "daep"

SEVERITY_WEIGHT = MappingProxyType({"minor": 1, "moderate": 2, "serious": 3, "severe": 4})
HIGH_SEVERITY = frozenset({"serious", "severe"})

# School year anchor (month, day)
SCHOOL_YEAR_START = (8, 1)

DAY = timedelta(hours=24)

# (label, max points)
FACTOR_PLACEMENTS = ("Prior DAEP Placements", 30)
FACTOR_TREND = ("Offense Severity Trend", 20)
FACTOR_FREQUENCY = ("Recent Incident Frequency", 20)
FACTOR_SCHOOL_YEAR = ("School Year Incidents", 10)
FACTOR_EFFECTIVENESS = ("Intervention Effectiveness", 15)
FACTOR_COVERAGE = ("Intervention Coverage Gaps", 5)

# placement count -> points
PLACEMENT_POINTS = ((2, 30), (1, 15))

TREND_TOLERANCE = 0.25
TREND_POINTS = MappingProxyType({"escalating": 20, "stable": 8, "de-escalating": 0})

# (window days, min incidents, points), first match wins
FREQUENCY_RULES = (
    (30, 3, 20),
    (30, 2, 15),
    (60, 3, 12),
    (90, 1, 5),
)

# (min incidents, points)
SCHOOL_YEAR_RULES = ((6, 10), (4, 6), (2, 3))

NOT_RATED = "not_rated"
INEFFECTIVE = "ineffective"
NOTHING_TRIED_POINTS = 12
UNRATED_POINTS = 3
# (min ineffective share, points)
INEFFECTIVE_RULES = ((0.5, 15), (0.25, 10))
MOSTLY_EFFECTIVE_POINTS = 3

COVERAGE_GAP_POINTS = 5

# Inclusive upper bound of each score band
RISK_LEVELS = (
    (33, "Low"),
    (66, "Medium"),
    (100, "High"),
)
