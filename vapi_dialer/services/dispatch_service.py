# vapi_dialer/services/dispatch_service.py

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta
from typing import Callable, Sequence

from vapi_dialer.schemas.calls import (
    BulkDispatchOutcome,
    CallResult,
    DispatchMode,
    ScheduledMode,
    utc_now,
)
from vapi_dialer.services.call_service import place_call
from vapi_dialer.services.vapi_client import VapiClient

logger = logging.getLogger(__name__)


class DispatchValidationError(ValueError):
    """Bad dispatch input; reported before any call is placed."""


def _validate(
    assistant_id: str | None,
    phone_numbers: Sequence[str] | None,
    mode: DispatchMode,
) -> None:
    if not assistant_id or not phone_numbers:
        raise DispatchValidationError(
            "Missing required fields: assistantId and phoneNumbers are required"
        )
    if isinstance(mode, ScheduledMode):
        if mode.interval_ms < 0:
            raise DispatchValidationError("interval must be a non-negative number of milliseconds")
    elif mode.delay_ms < 0:
        raise DispatchValidationError("delay must be a non-negative number of milliseconds")


def dispatch_calls(
    vapi_client: VapiClient,
    *,
    assistant_id: str | None,
    phone_numbers: Sequence[str] | None,
    mode: DispatchMode,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], datetime] = utc_now,
) -> BulkDispatchOutcome:
    """
    Call every number in order, one at a time.

    Immediate mode waits `delay_ms` between consecutive attempts (not after
    the last one). Scheduled mode places the calls back-to-back and gives
    the i-th attempted number a start time of base_time + i * interval_ms.

    Blank entries are skipped and not counted. A failing number never stops
    the run; only bad input or missing gateway config do, and both are
    raised before anything is sent.
    """
    _validate(assistant_id, phone_numbers, mode)
    vapi_client.ensure_configured(require_phone_number=True)
    phone_number_id = vapi_client.phone_number_id

    scheduled = isinstance(mode, ScheduledMode)
    base_time = None
    if scheduled:
        base_time = mode.base_time or clock()

    numbers = [raw.strip() for raw in phone_numbers]
    total = len(numbers)
    logger.info(
        "[BULK CALLING] Starting %s calls for %d numbers",
        "scheduled" if scheduled else "immediate",
        total,
    )

    results: list[CallResult] = []
    for idx, number in enumerate(numbers, start=1):
        if not number:
            logger.info("[SKIP] Empty phone number at index %d", idx - 1)
            continue

        if results and not scheduled:
            logger.info("[DELAY] Waiting %dms before next call", mode.delay_ms)
            sleep(mode.delay_ms / 1000)

        scheduled_at = None
        if scheduled:
            scheduled_at = base_time + timedelta(milliseconds=len(results) * mode.interval_ms)

        logger.info("[%d/%d] Calling %s", idx, total, number)
        result = place_call(
            vapi_client,
            assistant_id=assistant_id,
            destination_number=number,
            phone_number_id=phone_number_id,
            scheduled_at=scheduled_at,
        )
        results.append(result)

        if result.succeeded:
            logger.info("[%d/%d] Result: %s", idx, total, result.call_id)
        else:
            logger.info("[%d/%d] Result: error %s", idx, total, result.error)

    outcome = BulkDispatchOutcome.from_results(results, scheduled=scheduled)
    logger.info(
        "[COMPLETE] Total: %d, Success: %d, Failed: %d",
        outcome.total_calls,
        outcome.successful_calls,
        outcome.failed_calls,
    )
    return outcome
