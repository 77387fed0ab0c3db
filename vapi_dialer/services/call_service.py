# vapi_dialer/services/call_service.py
import logging
from datetime import datetime
from typing import Optional

import requests
from pydantic import ValidationError

from vapi_dialer.schemas.calls import (
    KNOWN_STATUSES,
    STATUS_FAILED,
    CallRequest,
    CallResult,
    utc_now,
)
from vapi_dialer.services.vapi_client import VapiAPIError, VapiClient

logger = logging.getLogger(__name__)


def _failed(number: str, message: str) -> CallResult:
    return CallResult(
        number=number,
        status=STATUS_FAILED,
        error=message,
        timestamp=utc_now(),
    )


def place_call(
    vapi_client: VapiClient,
    assistant_id: str,
    destination_number: str,
    phone_number_id: str,
    scheduled_at: Optional[datetime] = None,
) -> CallResult:
    """
    Place one outbound call via Vapi and turn whatever happens into a CallResult.

    - No retries: exactly one request per invocation.
    - Never raises for gateway problems (network errors, non-2xx, bad body);
      those come back as status="failed" with `error` set and no call id.
    """
    call = CallRequest(
        assistant_id=assistant_id,
        destination_number=destination_number,
        scheduled_at=scheduled_at,
    )

    try:
        data = vapi_client.create_phone_call(call, phone_number_id=phone_number_id)
    except VapiAPIError as exc:
        logger.warning("Call to %s rejected by Vapi: %s", destination_number, exc)
        return _failed(destination_number, str(exc))
    except requests.RequestException as exc:
        logger.warning("Call to %s failed to reach Vapi: %s", destination_number, exc)
        return _failed(destination_number, f"Network error: {exc}")

    call_id = data.get("id")
    if not call_id:
        logger.warning("Vapi response for %s has no call id: %s", destination_number, data)
        return _failed(destination_number, "Malformed Vapi response: missing call id")

    status = data.get("status")
    if status is not None and status not in KNOWN_STATUSES:
        logger.info("Vapi reported unfamiliar status %r for call %s", status, call_id)

    # Prefer the time Vapi confirmed over the one we asked for.
    plan = data.get("schedulePlan")
    confirmed = plan.get("earliestAt") if isinstance(plan, dict) else None
    confirmed = confirmed or scheduled_at

    try:
        result = CallResult(
            number=destination_number,
            call_id=str(call_id),
            status=status,
            timestamp=utc_now(),
            scheduled_at=confirmed,
        )
    except ValidationError as exc:
        logger.warning("Could not read Vapi response for %s: %s", destination_number, exc)
        return _failed(destination_number, f"Malformed Vapi response: {exc}")

    logger.info("Call to %s created: %s (%s)", destination_number, result.call_id, status)
    return result
