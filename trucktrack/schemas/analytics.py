from datetime import datetime
from typing import Literal

from pydantic import BaseModel

TimeRange = Literal["week", "month", "quarter", "year"]


class DeliveryStats(BaseModel):
    total: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0
    cancelled: int = 0


class DateBucket(DeliveryStats):
    date: str


class StatusSlice(BaseModel):
    name: str
    value: int


class DriverPerformance(BaseModel):
    driver_id: str
    name: str
    completed: int
    in_progress: int
    total: int
    rating: float


class AnalyticsResponse(BaseModel):
    time_range: TimeRange
    start_date: datetime
    stats: DeliveryStats
    by_date: list[DateBucket]
    by_status: list[StatusSlice]
    driver_performance: list[DriverPerformance]
