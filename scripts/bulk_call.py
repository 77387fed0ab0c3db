# scripts/bulk_call.py
"""
Run a bulk dispatch from the command line, without the dashboard.

Uses the same VapiClient + dispatcher as POST /api/make-calls and reads
VAPI_* settings from the environment / .env.

Examples:
    python scripts/bulk_call.py --list-assistants
    python scripts/bulk_call.py --assistant-id asst_123 +15551230001 +15551230002
    python scripts/bulk_call.py --assistant-id asst_123 --numbers-file leads.txt --schedule
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime

import requests

from vapi_dialer.config import get_settings
from vapi_dialer.logging_config import configure_logging
from vapi_dialer.schemas.calls import ImmediateMode, ScheduledMode
from vapi_dialer.services.dispatch_service import DispatchValidationError, dispatch_calls
from vapi_dialer.services.vapi_client import GatewayConfigError, VapiAPIError, get_vapi_client


def _read_numbers(args: argparse.Namespace) -> list[str]:
    numbers = list(args.numbers)
    if args.numbers_file:
        with open(args.numbers_file, encoding="utf-8") as fh:
            numbers.extend(fh.read().splitlines())
    return numbers


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Place Vapi calls one after another")
    parser.add_argument("numbers", nargs="*", help="Phone numbers to call")
    parser.add_argument("--assistant-id", help="Vapi assistant to use")
    parser.add_argument("--numbers-file", help="File with one phone number per line")
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=settings.DEFAULT_CALL_DELAY_MS,
        help="Wait between calls (or schedule interval with --schedule)",
    )
    parser.add_argument(
        "--schedule",
        action="store_true",
        help="Let Vapi start the calls at staggered times instead of waiting locally",
    )
    parser.add_argument(
        "--schedule-from",
        type=datetime.fromisoformat,
        default=None,
        help="ISO timestamp of the first scheduled call (default: now)",
    )
    parser.add_argument(
        "--list-assistants",
        action="store_true",
        help="Print the assistants configured at Vapi and exit",
    )
    args = parser.parse_args(argv)

    configure_logging()
    vapi_client = get_vapi_client()

    if args.list_assistants:
        try:
            vapi_client.ensure_configured(require_phone_number=False)
            assistants = vapi_client.list_assistants()
        except (GatewayConfigError, VapiAPIError, requests.RequestException) as exc:
            print(f"[bulk_call] {exc}", file=sys.stderr)
            return 1
        for assistant in assistants:
            print(f"{assistant.get('id')}\t{assistant.get('name', '')}")
        return 0

    if args.schedule:
        mode = ScheduledMode(interval_ms=args.delay_ms, base_time=args.schedule_from)
    else:
        mode = ImmediateMode(delay_ms=args.delay_ms)

    try:
        outcome = dispatch_calls(
            vapi_client,
            assistant_id=args.assistant_id,
            phone_numbers=_read_numbers(args),
            mode=mode,
        )
    except (DispatchValidationError, GatewayConfigError) as exc:
        print(f"[bulk_call] {exc}", file=sys.stderr)
        return 2

    print(json.dumps(outcome.to_wire(), indent=2))
    return 0 if outcome.failed_calls == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
