# vapi_dialer/routers/assistants.py
import logging

import requests
from fastapi import APIRouter, Depends

from vapi_dialer.routers.calls import error_response
from vapi_dialer.services.vapi_client import (
    GatewayConfigError,
    VapiAPIError,
    VapiClient,
    get_vapi_client,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["assistants"])


@router.get("/assistants")
def list_assistants(vapi_client: VapiClient = Depends(get_vapi_client)):
    """
    Assistants configured at Vapi, passed through as-is for the picker.
    """
    try:
        vapi_client.ensure_configured(require_phone_number=False)
        assistants = vapi_client.list_assistants()
    except (GatewayConfigError, VapiAPIError, requests.RequestException) as exc:
        logger.error("Error fetching assistants: %s", exc)
        return error_response(str(exc) or "Failed to fetch assistants", 500)

    return {
        "success": True,
        "assistants": assistants,
        "count": len(assistants),
    }
