"""Prometheus metrics for the bylaw data pipeline.

All custom metrics use the 'quiethours_' prefix to avoid conflicts
with other applications in a shared observability stack.
"""

from prometheus_client import Counter, Gauge, Info

APP_INFO = Info(
    "quiethours_app",
    "Quiet Hours data pipeline info"
)
APP_INFO.info({"version": "1.0.0", "name": "quiethours"})

DATASET_RECORDS = Gauge(
    "quiethours_dataset_records",
    "Number of records in the last loaded dataset",
    ["topic", "source"],  # source: json, csv
)

DATASET_LOADS_TOTAL = Counter(
    "quiethours_dataset_loads_total",
    "Dataset load attempts by outcome",
    ["topic", "status"],  # status: loaded, failed
)

VALIDATION_ISSUES = Gauge(
    "quiethours_validation_issues",
    "Consistency issues found by the last data validation run",
    ["topic"],
)
