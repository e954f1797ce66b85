"""
Drift Detector.

Compares a stored schema baseline with a live fetch of the same schema and
reports what changed. Both sides are reduced to the same structural
projection before diffing:
- WSDL family: the set of operation names (via the WSDL model builder)
- message family: the set of required top-level field names

Policies per check (DriftCheck):
- policy='symmetric' flags removals and additions; 'breaking' flags only
  removals and reports additions as advisory details
- on_unreachable='drift' treats a failed fetch as drift; 'advisory' records it
  and leaves the check clean. WSDL checks default to 'drift', message checks
  to 'advisory'.

Every per-check failure is turned into a detail entry; one failing check
never aborts the others.

Usage:
    with HttpFetcher(timeout_seconds=30) as fetcher:
        detector = DriftDetector(FileResourceReader("."), fetcher)
        report = detector.run(default_checks(get_settings()))
"""

import json
import logging
from datetime import datetime
from typing import Any, Iterable, Optional

from ..core.config import Settings
from ..core.errors import NetworkError, ParseError, SentinelError
from ..core.resources import Fetcher, ResourceReader
from ..schemas.drift import DriftCheck, DriftReport, DriftResult
from .report import build_report
from .schema_registry import SchemaRegistry
from .wsdl_model import load_model

logger = logging.getLogger(__name__)


# Detail templates per family
_WSDL_MESSAGES = {
    "kind": "WSDL",
    "removed": "Operation REMOVED from live WSDL: {}",
    "added": "New operation in live WSDL: {}",
    "match": "All operations match",
}
_MESSAGE_MESSAGES = {
    "kind": "message schema",
    "removed": "Required field removed from live schema: {}",
    "added": "New required field in live schema: {}",
    "match": "Message schemas match",
}


def _required_fields(schema: Any, origin: str) -> set[str]:
    if not isinstance(schema, dict):
        raise ParseError(f"{origin} schema must be a JSON object")
    required = schema.get("required") or []
    if not isinstance(required, list) or not all(isinstance(f, str) for f in required):
        raise ParseError(f"{origin} schema 'required' must be an array of strings")
    return set(required)


class DriftDetector:
    """
    Runs drift checks using injected read and fetch capabilities.

    The detector keeps no state between checks. Message baselines are
    compiled into a throwaway SchemaRegistry per check, so no shared registry
    is modified by a drift run.
    """

    def __init__(
        self,
        reader: ResourceReader,
        fetcher: Fetcher,
    ) -> None:
        self.reader = reader
        self.fetcher = fetcher

    # -------------------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------------------

    def _project_wsdl(self, document: bytes) -> set[str]:
        return load_model(document).operation_names()

    def _project_local_message(self, check: DriftCheck, document: bytes) -> set[str]:
        registry = SchemaRegistry(self.reader)
        schema_id = registry.load_schema(
            document, schema_id=check.name, source_path=self.reader.resolve(check.baseline_path)
        )
        return _required_fields(registry.get_schema(schema_id), "Local")

    def _project_live_message(self, document: bytes) -> set[str]:
        try:
            schema = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ParseError(f"Live schema is not valid JSON: {e}") from e
        return _required_fields(schema, "Live")

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def check_drift(self, check: DriftCheck) -> DriftResult:
        """
        Run one drift check.

        Args:
            check: The schema family, baseline and live endpoint to compare

        Returns:
            DriftResult: drifted flag plus human-readable details
        """
        messages = _WSDL_MESSAGES if check.family == "wsdl" else _MESSAGE_MESSAGES
        details: list[str] = []

        if not self.reader.exists(check.baseline_path):
            logger.warning(f"{check.name}: local baseline not found at {check.baseline_path}")
            return DriftResult(
                schema_name=check.name,
                drifted=True,
                details=[f"Local baseline not found: {check.baseline_path}"],
            )

        if not check.live_url:
            logger.info(f"{check.name}: no live endpoint configured, skipping")
            return DriftResult(
                schema_name=check.name,
                drifted=False,
                details=[f"No live endpoint configured for {check.name}, skipping live fetch"],
            )

        try:
            local_document = self.reader.read_bytes(check.baseline_path)
            if check.family == "wsdl":
                local_names = self._project_wsdl(local_document)
            else:
                local_names = self._project_local_message(check, local_document)

            live_document = self.fetcher.fetch(check.live_url)
            if check.family == "wsdl":
                live_names = self._project_wsdl(live_document)
            else:
                live_names = self._project_live_message(live_document)
        except NetworkError as e:
            return self._unreachable(check, messages["kind"], e)
        except SentinelError as e:
            logger.error(f"{check.name}: check failed: {e}")
            return DriftResult(
                schema_name=check.name,
                drifted=True,
                details=[f"Error checking {check.name}: {e}"],
            )
        except Exception as e:
            # Reader/fetcher implementations may raise anything; never abort the run
            logger.exception(f"{check.name}: unexpected error during check")
            return DriftResult(
                schema_name=check.name,
                drifted=True,
                details=[f"Error checking {check.name}: {e}"],
            )

        removed = sorted(local_names - live_names)
        added = sorted(live_names - local_names)

        details.extend(messages["removed"].format(name) for name in removed)
        details.extend(messages["added"].format(name) for name in added)

        drifted = bool(removed) or (bool(added) and check.policy == "symmetric")
        if not removed and not added:
            details.append(messages["match"])
        elif added and check.policy == "breaking":
            details.append("Additions are backward compatible under the 'breaking' policy")

        if drifted:
            logger.warning(f"{check.name}: drift detected ({len(removed)} removed, {len(added)} added)")
        else:
            logger.info(f"{check.name}: no drift")
        return DriftResult(schema_name=check.name, drifted=drifted, details=details)

    def _unreachable(self, check: DriftCheck, kind: str, error: NetworkError) -> DriftResult:
        if check.unreachable_policy == "drift":
            logger.warning(f"{check.name}: live fetch failed: {error}")
            return DriftResult(
                schema_name=check.name,
                drifted=True,
                details=[f"Failed to fetch live {kind}: {error}"],
            )
        logger.info(f"{check.name}: live {kind} unavailable: {error}")
        return DriftResult(
            schema_name=check.name,
            drifted=False,
            details=[f"Live {kind} not exposed by endpoint ({error}), manual check required"],
        )

    def run(self, checks: Iterable[DriftCheck], now: Optional[datetime] = None) -> DriftReport:
        """Run every check in order and aggregate the results into a report."""
        results = [self.check_drift(check) for check in checks]
        return build_report(results, now=now)


def default_checks(settings: Settings) -> list[DriftCheck]:
    """
    The standard checks: the order-service WSDL and the order-created message schema.

    Live URLs are None when the corresponding base URL is not configured,
    which turns the check into a skipped (clean) check.
    """
    return [
        DriftCheck(
            name="App2 WSDL (order-service.wsdl)",
            family="wsdl",
            baseline_path=settings.wsdl_path,
            live_url=settings.live_wsdl_url,
            policy=settings.drift_policy,
        ),
        DriftCheck(
            name="Integration Layer Message Schemas",
            family="message",
            baseline_path=settings.order_created_schema,
            live_url=settings.live_message_schema_url,
            policy=settings.drift_policy,
        ),
    ]
