from pydantic import BaseModel


class TimingMetricStats(BaseModel):
    count: int
    avg_s: float
    max_s: float


class DeliveryFlowCounters(BaseModel):
    created: int = 0
    assigned: int = 0
    completed: int = 0

    @classmethod
    def from_counters(cls, counters: dict[str, int]) -> "DeliveryFlowCounters":
        return cls(
            created=counters.get("deliveries_created_total", 0),
            assigned=counters.get("deliveries_assigned_total", 0),
            completed=counters.get("deliveries_completed_total", 0),
        )


class MetricsResponse(BaseModel):
    counters: dict[str, int]
    timings: dict[str, TimingMetricStats]
    deliveries: DeliveryFlowCounters
