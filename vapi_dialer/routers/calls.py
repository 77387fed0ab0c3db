# vapi_dialer/routers/calls.py
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from vapi_dialer.config import Settings, get_settings
from vapi_dialer.schemas.calls import MakeCallsRequest
from vapi_dialer.services.dispatch_service import DispatchValidationError, dispatch_calls
from vapi_dialer.services.vapi_client import GatewayConfigError, VapiClient, get_vapi_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["calls"])


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


@router.post("/make-calls")
def make_calls(
    payload: MakeCallsRequest,
    vapi_client: VapiClient = Depends(get_vapi_client),
    settings: Settings = Depends(get_settings),
):
    """
    Call a list of numbers with the chosen assistant, one at a time.

    - useScheduling=false: wait `delay` ms between calls
    - useScheduling=true: place all calls now, each scheduled `delay` ms
      after the previous one, starting at `scheduleFrom` (or now)

    Returns the full outcome, or a single error and no partial results.
    """
    try:
        outcome = dispatch_calls(
            vapi_client,
            assistant_id=payload.assistant_id,
            phone_numbers=payload.phone_numbers,
            mode=payload.to_mode(settings.DEFAULT_CALL_DELAY_MS),
        )
    except DispatchValidationError as exc:
        return error_response(str(exc), 400)
    except GatewayConfigError as exc:
        logger.error("Bulk calling not configured: %s", exc)
        return error_response(str(exc), 500)
    except Exception as exc:
        logger.exception("[ERROR] Bulk calling failed")
        return error_response(str(exc) or "Failed to process calls", 500)

    return {"success": True, **outcome.to_wire()}
