# vapi_dialer/schemas/calls.py
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Literal, Optional, Union, get_args

from pydantic import BaseModel, ConfigDict, Field


# Statuses Vapi reports for a phone call. "scheduled" only appears when the
# call was created with a schedulePlan.
CallStatus = Literal[
    "queued",
    "ringing",
    "in-progress",
    "forwarding",
    "ended",
    "failed",
    "scheduled",
]

KNOWN_STATUSES = frozenset(get_args(CallStatus))
STATUS_FAILED = "failed"
STATUS_SCHEDULED = "scheduled"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso_utc(value: datetime) -> str:
    """
    Render a datetime the way Vapi expects it: ISO-8601, UTC, millisecond
    precision, "Z" suffix. Naive datetimes are taken to be UTC already.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CallRequest(BaseModel):
    """One outbound call to place. Built per destination, never stored."""

    model_config = ConfigDict(frozen=True)

    assistant_id: str
    destination_number: str
    scheduled_at: Optional[datetime] = None

    def to_vapi_payload(self, phone_number_id: str) -> dict:
        payload: dict = {
            "assistantId": self.assistant_id,
            "customer": {
                "number": self.destination_number,
                "numberE164CheckEnabled": False,
            },
            "phoneNumberId": phone_number_id,
        }
        if self.scheduled_at is not None:
            payload["schedulePlan"] = {"earliestAt": to_iso_utc(self.scheduled_at)}
        return payload


class CallResult(BaseModel):
    """
    Outcome of a single call attempt.

    Exactly one of call_id / error is set. The failure path always has
    status="failed" and no call_id.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    number: str
    call_id: Optional[str] = Field(default=None, alias="callId")
    # Taken verbatim from Vapi; normally one of CallStatus.
    status: Optional[str] = None
    error: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now)
    scheduled_at: Optional[datetime] = Field(default=None, alias="scheduledAt")

    @property
    def succeeded(self) -> bool:
        return self.call_id is not None and self.error is None

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BulkDispatchOutcome(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    results: List[CallResult]
    total_calls: int = Field(alias="totalCalls")
    successful_calls: int = Field(alias="successfulCalls")
    failed_calls: int = Field(alias="failedCalls")
    scheduled_calls: Optional[int] = Field(default=None, alias="scheduledCalls")

    @classmethod
    def from_results(
        cls, results: List[CallResult], *, scheduled: bool = False
    ) -> "BulkDispatchOutcome":
        """
        Derive the counters from the results.

        A result is successful when it has a call id and no error; every
        other result counts as failed, so successful + failed == total.
        Scheduled calls carry a call id and count as successful too.
        """
        successful = sum(1 for r in results if r.succeeded)
        scheduled_count = None
        if scheduled:
            scheduled_count = sum(1 for r in results if r.status == STATUS_SCHEDULED)
        return cls(
            results=list(results),
            total_calls=len(results),
            successful_calls=successful,
            failed_calls=len(results) - successful,
            scheduled_calls=scheduled_count,
        )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class ImmediateMode:
    """Place calls one after another, waiting delay_ms between attempts."""

    delay_ms: int


@dataclass(frozen=True)
class ScheduledMode:
    """
    Place calls back-to-back, asking Vapi to start call i at
    base_time + i * interval_ms. base_time defaults to "now".
    """

    interval_ms: int
    base_time: Optional[datetime] = None


DispatchMode = Union[ImmediateMode, ScheduledMode]


class MakeCallsRequest(BaseModel):
    """
    Inbound body of POST /api/make-calls.

    Required fields are optional here so that missing values are reported
    by the dispatcher as a 400 with our own error shape.
    """

    model_config = ConfigDict(populate_by_name=True)

    assistant_id: Optional[str] = Field(default=None, alias="assistantId")
    phone_numbers: Optional[List[str]] = Field(default=None, alias="phoneNumbers")
    delay: Optional[int] = Field(default=None, ge=0)
    schedule_from: Optional[datetime] = Field(default=None, alias="scheduleFrom")
    use_scheduling: bool = Field(default=False, alias="useScheduling")

    def to_mode(self, default_delay_ms: int) -> DispatchMode:
        delay_ms = self.delay if self.delay is not None else default_delay_ms
        if self.use_scheduling:
            return ScheduledMode(interval_ms=delay_ms, base_time=self.schedule_from)
        return ImmediateMode(delay_ms=delay_ms)
