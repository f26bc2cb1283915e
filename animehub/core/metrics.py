from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, generate_latest

registry = CollectorRegistry(auto_describe=True)

GALLERY_MUTATIONS_TOTAL = Counter(
    "animehub_gallery_mutations_total",
    "Gallery write operations partitioned by operation and outcome.",
    ["operation", "outcome"],
    registry=registry,
)

ACCESSORY_RESOLUTIONS_TOTAL = Counter(
    "animehub_accessory_resolutions_total",
    "Accessory lookups, labeled by whether an existing record was reused.",
    ["result"],
    registry=registry,
)

LORE_REFERENCES_CLEARED_TOTAL = Counter(
    "animehub_lore_references_cleared_total",
    "Character profiles whose greatest feat was reset to the sentinel.",
    registry=registry,
)

MATURITY_GATE_DENIALS_TOTAL = Counter(
    "animehub_maturity_gate_denials_total",
    "Gallery reads hidden from non-adult requesters.",
    ["surface"],
    registry=registry,
)


def record_gallery_mutation(operation: str, succeeded: bool) -> None:
    outcome = "success" if succeeded else "noop"
    GALLERY_MUTATIONS_TOTAL.labels(operation=operation, outcome=outcome).inc()


def record_accessory_resolution(reused: bool) -> None:
    ACCESSORY_RESOLUTIONS_TOTAL.labels(result="reused" if reused else "created").inc()


def record_lore_references_cleared(count: int) -> None:
    if count > 0:
        LORE_REFERENCES_CLEARED_TOTAL.inc(count)


def record_maturity_denial(surface: str, count: int = 1) -> None:
    if count > 0:
        MATURITY_GATE_DENIALS_TOTAL.labels(surface=surface).inc(count)


def get_metrics_payload() -> bytes:
    return generate_latest(registry)
