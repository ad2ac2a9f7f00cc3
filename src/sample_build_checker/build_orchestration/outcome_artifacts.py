"""Per-unit outcome artifacts shared between build workers and aggregation."""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from sample_build_checker.build_strategies import StrategyKind
from sample_build_checker.unit_discovery import BuildUnit

from .unit_outcomes import BuildOutcome, FailureReason, OutcomeStatus

_DIGEST_LENGTH = 12


def artifact_path(results_dir: Path, unit: BuildUnit) -> Path:
    """Return the artifact file for ``unit`` inside ``results_dir``.

    The readable prefix flattens the unit path; the digest keeps paths such as
    ``a/b__c`` and ``a__b/c`` apart.
    """
    readable = unit.path.strip("/").replace("/", "__") or "root"
    digest = hashlib.sha1(unit.path.encode("utf-8")).hexdigest()[:_DIGEST_LENGTH]
    return results_dir / f"{readable}-{digest}.json"


def write_outcome_artifact(outcome: BuildOutcome, results_dir: Path) -> Path:
    """Persist one outcome so a later stage can aggregate it."""
    results_dir.mkdir(parents=True, exist_ok=True)
    destination = artifact_path(results_dir, outcome.unit)
    payload = {
        "unit": outcome.unit.path,
        "status": outcome.status.value,
        "strategy": outcome.strategy.value if outcome.strategy else None,
        "failure_reason": outcome.failure_reason.value if outcome.failure_reason else None,
        "diagnostics": outcome.diagnostics,
        "note": outcome.note,
    }
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=results_dir,
        prefix=f".{destination.stem}.",
        suffix=".tmp",
        delete=False,
    ) as staging:
        json.dump(payload, staging, ensure_ascii=False, indent=2)
    try:
        os.replace(staging.name, destination)
    except OSError:
        Path(staging.name).unlink(missing_ok=True)
        raise
    return destination


def read_outcome_artifacts(
    units: Sequence[BuildUnit], results_dir: Path
) -> tuple[BuildOutcome, ...]:
    """Load one outcome per unit, in unit order.

    Units without a readable artifact are reported as failures so that a lost
    worker result can never count as a success.
    """
    return tuple(_read_single_artifact(unit, results_dir) for unit in units)


def _read_single_artifact(unit: BuildUnit, results_dir: Path) -> BuildOutcome:
    path = artifact_path(results_dir, unit)
    if not path.is_file():
        return BuildOutcome.failure(
            unit,
            FailureReason.MISSING_RESULT,
            note=f"No recorded outcome at {path}",
        )
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        return _outcome_from_payload(unit, payload)
    except (OSError, ValueError, KeyError, TypeError) as exc:
        return BuildOutcome.failure(
            unit,
            FailureReason.MISSING_RESULT,
            note=f"Unreadable outcome artifact {path}: {exc}",
        )


def _outcome_from_payload(unit: BuildUnit, payload: dict[str, Any]) -> BuildOutcome:
    if payload["unit"] != unit.path:
        raise ValueError(f"artifact belongs to {payload['unit']!r}")
    strategy = payload.get("strategy")
    failure_reason = payload.get("failure_reason")
    return BuildOutcome(
        unit=unit,
        status=OutcomeStatus(payload["status"]),
        strategy=StrategyKind(strategy) if strategy else None,
        failure_reason=FailureReason(failure_reason) if failure_reason else None,
        diagnostics=payload.get("diagnostics"),
        note=payload.get("note"),
    )
