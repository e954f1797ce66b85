#!/usr/bin/env python3
"""
schema-sentinel: contract compliance and drift detection CLI.

Usage:
    schema-sentinel drift-check [--report-dir DIR] [--wsdl-url URL] [--message-schema-url URL]
    schema-sentinel validate-soap envelope.xml --operation CreateOrder [--direction input]
    schema-sentinel validate-message order-created-event event.json
    schema-sentinel list-operations
    schema-sentinel skeleton CreateOrder [--direction output]

Exit codes: 0 success, 1 drift or validation failure, 2 usage/configuration error.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .core.config import LOG_LEVELS, Settings, get_settings
from .core.errors import SentinelError
from .core.logging import setup_logging
from .core.resources import FileResourceReader, HttpFetcher
from .services.drift_detector import DriftDetector, default_checks
from .services.report import exit_code, format_summary, write_report
from .services.schema_registry import SchemaRegistry
from .services.soap_envelope import build_envelope
from .services.soap_validator import SoapBodyValidator
from .services.wsdl_model import WsdlModel, load_model_file

logger = logging.getLogger("schema_sentinel.cli")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _load_wsdl(settings: Settings) -> WsdlModel:
    return load_model_file(settings.wsdl_path, FileResourceReader(settings.contracts_root))


def cmd_drift_check(
    settings: Settings,
    report_dir: Optional[str] = None,
    wsdl_url: Optional[str] = None,
    message_schema_url: Optional[str] = None,
) -> int:
    """
    Run the standard drift checks, persist the report and print the summary.
    Returns 1 when any check drifted, 0 otherwise.
    """
    checks = default_checks(settings)
    overrides = {"wsdl": wsdl_url, "message": message_schema_url}
    checks = [
        c.model_copy(update={"live_url": overrides[c.family]}) if overrides[c.family] else c
        for c in checks
    ]

    reader = FileResourceReader(settings.contracts_root)
    with HttpFetcher(timeout_seconds=settings.fetch_timeout_seconds) as fetcher:
        detector = DriftDetector(reader, fetcher)
        report = detector.run(checks)

    write_report(report, report_dir or Path(settings.contracts_root) / settings.report_dir)
    print(format_summary(report))

    code = exit_code(report)
    if code:
        print("ERROR: schema drift detected, review the report above", file=sys.stderr)
    else:
        print("OK: no schema drift detected")
    return code


def cmd_validate_soap(
    settings: Settings,
    envelope_path: Path,
    operation: str,
    direction: str,
    strict: bool,
) -> int:
    """Validate a SOAP envelope file against an operation of the stored WSDL."""
    model = _load_wsdl(settings)
    validator = SoapBodyValidator(model, strict=strict or settings.strict_soap)
    result = validator.validate_body(envelope_path.read_bytes(), operation, direction)
    print(result.model_dump_json(indent=2))
    return EXIT_OK if result.valid else EXIT_FAILED


def cmd_validate_message(settings: Settings, schema_id: str, payload_path: Path) -> int:
    """Validate a JSON payload file against a stored message schema."""
    registry = SchemaRegistry(FileResourceReader(settings.contracts_root))
    registry.load_all(settings.message_schemas_dir)
    try:
        payload = json.loads(payload_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print(f"ERROR: {payload_path} is not valid JSON: {e}", file=sys.stderr)
        return EXIT_USAGE
    result = registry.validate(schema_id, payload)
    print(result.model_dump_json(indent=2, exclude_none=True))
    return EXIT_OK if result.valid else EXIT_FAILED


def cmd_list_operations(settings: Settings) -> int:
    model = _load_wsdl(settings)
    for op in sorted(model.get_operations(), key=lambda o: o.name):
        required = [f.name for f in op.input_fields if f.required]
        print(f"{op.name}\t{op.action_identifier}\trequired={','.join(required)}")
    return EXIT_OK


def cmd_skeleton(settings: Settings, operation: str, direction: str) -> int:
    model = _load_wsdl(settings)
    descriptor = model.get_operation(operation)
    if descriptor is None:
        print(f"ERROR: operation not found: {operation}", file=sys.stderr)
        return EXIT_USAGE
    print(build_envelope(descriptor, direction))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schema-sentinel",
        description="schema-sentinel: contract compliance and drift detection",
    )
    parser.add_argument(
        "--log-level", default=None, type=str.upper, choices=LOG_LEVELS,
        help="Override SENTINEL_LOG_LEVEL",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    drift = sub.add_parser("drift-check", help="Compare stored baselines with live schemas")
    drift.add_argument("--report-dir", default=None, help="Report output directory")
    drift.add_argument("--wsdl-url", default=None, help="Live WSDL URL (overrides settings)")
    drift.add_argument(
        "--message-schema-url", default=None,
        help="Live message schema URL (overrides settings)",
    )

    soap = sub.add_parser("validate-soap", help="Validate a SOAP envelope against the WSDL")
    soap.add_argument("envelope", type=Path)
    soap.add_argument("--operation", required=True)
    soap.add_argument("--direction", default="input", choices=["input", "output"])
    soap.add_argument(
        "--strict", action="store_true",
        help="Fail on unexpected elements instead of reporting them",
    )

    message = sub.add_parser("validate-message", help="Validate a JSON message against a schema")
    message.add_argument("schema_id")
    message.add_argument("payload", type=Path)

    sub.add_parser("list-operations", help="List operations of the stored WSDL")

    skeleton = sub.add_parser("skeleton", help="Print a sample SOAP envelope for an operation")
    skeleton.add_argument("operation")
    skeleton.add_argument("--direction", default="input", choices=["input", "output"])

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"ERROR: invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(args.log_level or settings.log_level)

    try:
        if args.command == "drift-check":
            return cmd_drift_check(
                settings,
                report_dir=args.report_dir,
                wsdl_url=args.wsdl_url,
                message_schema_url=args.message_schema_url,
            )
        if args.command == "validate-soap":
            return cmd_validate_soap(
                settings, args.envelope, args.operation, args.direction, args.strict
            )
        if args.command == "validate-message":
            return cmd_validate_message(settings, args.schema_id, args.payload)
        if args.command == "list-operations":
            return cmd_list_operations(settings)
        if args.command == "skeleton":
            return cmd_skeleton(settings, args.operation, args.direction)
    except (SentinelError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        return EXIT_USAGE
    return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
