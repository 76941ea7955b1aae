from prometheus_client import Counter, Histogram, Gauge, REGISTRY


# we check if they are already registered to avoid errors during hot reloads or test runs
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        # Try to create it
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        # If it already exists, retrieve it from the registry
        return REGISTRY._names_to_collectors[name]


REQUESTS_TOTAL = get_or_create_metric(
    "planner_requests_total",
    "Total requests",
    Counter,
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = get_or_create_metric(
    "planner_request_latency_seconds",
    "Request latency",
    Histogram,
    labelnames=["endpoint"],
)

TASKS_EXTRACTED_TOTAL = get_or_create_metric(
    "planner_tasks_extracted_total",
    "Total tasks extracted from free text",
    Counter,
    labelnames=["source"],
)

TASKS_SCHEDULED_TOTAL = get_or_create_metric(
    "planner_tasks_scheduled_total",
    "Total task placements by strategy",
    Counter,
    labelnames=["strategy"],
)

EXTRACTION_FALLBACK_TOTAL = get_or_create_metric(
    "planner_extraction_fallback_total",
    "Extractions answered by the local parser",
    Counter,
)

TASKS_GAUGE = get_or_create_metric(
    "planner_tasks_current", "Tasks currently in the collection", Gauge
)


def record_placements(placements) -> None:
    for p in placements:
        TASKS_SCHEDULED_TOTAL.labels(strategy=p.strategy).inc()
