"""Weight tracking analytics.

Pure functions over a snapshot of weight entries and the active goal:

- Ingestion: flexible date parsing, normalization and derived fields
- Statistics: progress, pace, BMI and best day/week
- Trend, moving averages, consistency, volatility and time-of-day patterns
- Anomaly and change-point detection, logging streaks
- Goal-date projection under several weekly paces
"""

from __future__ import annotations

from weightdash.tracking.anomalies import (
    AnomalyDetection,
    ChangePointInsight,
    detect_anomalies,
    detect_change_point,
)
from weightdash.tracking.clock import Clock, FixedClock, SystemClock
from weightdash.tracking.consistency import (
    ConsistencyStats,
    TimeOfDayStats,
    VolatilityStats,
    WeeklyDelta,
    calculate_consistency_stats,
    calculate_time_of_day_stats,
    calculate_volatility_stats,
    calculate_weekly_deltas,
)
from weightdash.tracking.dates import (
    normalize_recorded_at,
    parse_date_flexible,
    sort_entries,
    to_iso_date,
)
from weightdash.tracking.derive import (
    derive_entries,
    normalize_entries,
    normalize_target_data,
)
from weightdash.tracking.diagnostics import (
    CollectingDiagnostics,
    DiagnosticsSink,
    DroppedRecord,
    LoggingDiagnostics,
)
from weightdash.tracking.errors import (
    EmptyInputError,
    ImportSchemaError,
    WeightdashError,
)
from weightdash.tracking.models import (
    DEFAULT_TARGET,
    BMICategory,
    TargetData,
    WeightEntry,
)
from weightdash.tracking.moving_average import (
    MovingAverageData,
    calculate_moving_averages,
)
from weightdash.tracking.patterns import (
    PatternInsight,
    WeeklySummary,
    generate_insights,
    generate_weekly_summary,
    identify_patterns,
)
from weightdash.tracking.periods import (
    ComparisonMetric,
    DateRangeFilter,
    compare_performance,
    filter_by_date_range,
    get_date_range_presets,
)
from weightdash.tracking.projection import (
    PredictiveAnalysis,
    generate_predictive_analysis,
)
from weightdash.tracking.statistics import (
    BMI_CATEGORIES,
    Statistics,
    calculate_bmi,
    calculate_statistics,
    get_bmi_category,
    get_bmi_color,
)
from weightdash.tracking.status import SyncStatusRegistry
from weightdash.tracking.streaks import calculate_entry_streak
from weightdash.tracking.trend import TrendAnalysis, analyze_trend

__all__ = [
    "AnomalyDetection",
    "BMICategory",
    "BMI_CATEGORIES",
    "ChangePointInsight",
    "Clock",
    "CollectingDiagnostics",
    "ComparisonMetric",
    "ConsistencyStats",
    "DEFAULT_TARGET",
    "DateRangeFilter",
    "DiagnosticsSink",
    "DroppedRecord",
    "EmptyInputError",
    "FixedClock",
    "ImportSchemaError",
    "LoggingDiagnostics",
    "MovingAverageData",
    "PatternInsight",
    "PredictiveAnalysis",
    "Statistics",
    "SyncStatusRegistry",
    "SystemClock",
    "TargetData",
    "TimeOfDayStats",
    "TrendAnalysis",
    "VolatilityStats",
    "WeeklyDelta",
    "WeeklySummary",
    "WeightEntry",
    "WeightdashError",
    "analyze_trend",
    "calculate_bmi",
    "calculate_consistency_stats",
    "calculate_entry_streak",
    "calculate_moving_averages",
    "calculate_statistics",
    "calculate_time_of_day_stats",
    "calculate_volatility_stats",
    "calculate_weekly_deltas",
    "compare_performance",
    "derive_entries",
    "detect_anomalies",
    "detect_change_point",
    "filter_by_date_range",
    "generate_insights",
    "generate_predictive_analysis",
    "generate_weekly_summary",
    "get_bmi_category",
    "get_bmi_color",
    "get_date_range_presets",
    "identify_patterns",
    "normalize_entries",
    "normalize_recorded_at",
    "normalize_target_data",
    "parse_date_flexible",
    "sort_entries",
    "to_iso_date",
]
