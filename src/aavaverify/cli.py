"""
AAVA Address Verification — Interactive CLI
===========================================
Thin wrapper around the aavaverify library.

Usage:
    aavaverify                      # interactive validation
    aavaverify 28.6139 77.2090      # single DIGIPIN lookup

Settings are read from environment variables (see aavaverify.config).
With AAVA_DEMO_MODE=true nothing is sent over the network.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional

from aavaverify import grid
from aavaverify.audit import InMemoryAuditLog
from aavaverify.client import BackendClient
from aavaverify.config import Settings
from aavaverify.exceptions import (
    AavaError,
    ApplicationError,
    InvalidCoordinate,
)
from aavaverify.matcher import AddressMatcher
from aavaverify.models import AddressParts, ConsentRecord, ValidationRequest
from aavaverify.service import Mode, ValidationService

_BANNER = """\
╔══════════════════════════════════════╗
║     AAVA Address Verification        ║
║  Address + Location → DIGIPIN check  ║
╚══════════════════════════════════════╝
Type 'q' at the first prompt to quit.
"""

_FIELDS = (
    ("house_no", "House / block:   "),
    ("street", "Street:          "),
    ("area", "Area / locality: "),
    ("district", "District / city: "),
    ("pincode", "PIN code:        "),
    ("landmark", "Landmark:        "),
)


class _Quit(Exception):
    pass


def _prompt(label: str) -> str:
    try:
        return input(label).strip()
    except (EOFError, KeyboardInterrupt):
        raise _Quit() from None


def _read_address(matcher: AddressMatcher) -> AddressParts:
    values: dict[str, str] = {}
    for name, label in _FIELDS:
        raw = _prompt(label)
        if name == "house_no" and raw.lower() in ("q", "quit", "exit"):
            raise _Quit()
        values[name] = raw
        parts = AddressParts(**values)
        if parts.filled_count():
            print(f"  → {matcher.predict_normalized_address(parts)}")
    return AddressParts(**values)


async def _ensure_consent(
    service: ValidationService, user_id: str, consent: Optional[ConsentRecord]
) -> ConsentRecord:
    if consent is not None and consent.is_active():
        return consent
    print("  ⏳ Requesting consent …", end="", flush=True)
    consent = await service.request_consent(user_id)
    print(f"\r  ✓ Consent {consent.consent_id} granted")
    return consent


async def _run_interactive(service: ValidationService, user_id: str) -> None:
    print(_BANNER)
    matcher = AddressMatcher()
    consent: Optional[ConsentRecord] = None

    while True:
        print()
        # -- Address ----------------------------------------------------
        try:
            parts = _read_address(matcher)
            if not parts.has_minimum_address():
                print("  ✗ Please provide at least street, area, or district.")
                continue

            # -- Location -----------------------------------------------
            coordinate = grid.parse_coordinate(
                _prompt("Latitude:        "), _prompt("Longitude:       ")
            )
        except _Quit:
            print("\nBye!")
            break
        except InvalidCoordinate:
            print("  ✗ Please enter valid coordinates.")
            continue

        # -- Validate ---------------------------------------------------
        try:
            consent = await _ensure_consent(service, user_id, consent)
            print("  ⏳ Validating …", end="", flush=True)
            result = await service.validate_address(
                ValidationRequest(
                    user_id=user_id,
                    consent_id=consent.consent_id,
                    address_parts=parts,
                    coordinate=coordinate,
                ),
                consent=consent,
            )
        except AavaError as exc:
            print(f"\r  ✗ Error: {exc}")
            continue

        # -- Display ----------------------------------------------------
        verdict = "VALID" if result.is_valid else "NOT VALID"
        source = " (offline)" if result.offline else ""
        confidence = f"{result.confidence_score:.0%}"
        print(f"\r  {'✓' if result.is_valid else '✗'} {verdict}{source}")
        print()
        print(f"  ┌──────────────────────────────────────────────────────┐")
        print(f"  │  Address           {result.normalized_address or '':<35}│")
        print(f"  │  DIGIPIN           {result.digipin:<35}│")
        print(f"  │  Confidence        {confidence:<35}│")
        print(f"  │  Request           {result.request_id[:35]:<35}│")
        for check in result.checks:
            mark = "✓" if check.passed else "✗"
            print(f"  │  {mark} {check.name:<51}│")
        print(f"  └──────────────────────────────────────────────────────┘")


def _build_service(settings: Settings) -> tuple[ValidationService, Optional[BackendClient]]:
    if settings.mode is Mode.OFFLINE:
        return ValidationService(mode=Mode.OFFLINE, audit=InMemoryAuditLog()), None
    client = BackendClient(settings.api_base_url, timeout=settings.timeout)
    service = ValidationService(primary=client, audit=InMemoryAuditLog())
    return service, client


async def _main(argv: list[str], settings: Settings) -> int:
    service, client = _build_service(settings)
    try:
        if len(argv) == 2:
            # Single-shot mode
            try:
                coordinate = grid.parse_coordinate(argv[0], argv[1])
                result = await service.generate_digipin(coordinate, settings.user_id)
            except InvalidCoordinate as exc:
                print(f"Invalid coordinate: {exc.latitude}, {exc.longitude}", file=sys.stderr)
                return 1
            except ApplicationError as exc:
                print(f"Backend error: {exc.message}", file=sys.stderr)
                return 2
            for key, val in result.to_dict().items():
                print(f"{key:>20}: {val}")
        else:
            await _run_interactive(service, settings.user_id)
        return 0
    finally:
        if client is not None:
            await client.close()


def main() -> None:
    """Entry point — supports both CLI args and interactive mode."""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    sys.exit(asyncio.run(_main(sys.argv[1:], settings)))


if __name__ == "__main__":
    main()
