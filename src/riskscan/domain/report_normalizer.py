"""Turn untrusted classifier output into a canonical, scored report.

The classifier is an external model, so every field of its output is treated
as optional and possibly wrongly typed. ``normalize_report`` is total: for any
input, including ``{}``, ``None`` or a list, it returns a schema-valid
``NormalizedReport``. Scoring is deterministic and depends only on the clamped
per-tactic values, never on scores the model claims for itself.
"""

from __future__ import annotations

import math
import sys
from typing import Any

from riskscan.domain.models import NormalizedReport, Receipt, TacticResult
from riskscan.domain.taxonomy import (
    MAX_EXAMPLES_PER_TACTIC,
    MAX_QUOTE_LENGTH,
    MAX_RECEIPTS,
    OTHER_TACTIC_ID,
    TACTIC_IDS,
    tactic_weight,
)

DEFAULT_CONFIDENCE = 0.85
DEFAULT_SEVERITY = 3.0
RISK_LABELS = ("low", "medium", "high")
LOW_RISK_CEILING = 34
HIGH_RISK_FLOOR = 67

_ROUNDING_EPSILON = 1e-9


def normalize_report(raw: object) -> NormalizedReport:
    data = raw if isinstance(raw, dict) else {}

    tactics = [
        _normalize_tactic(entry)
        for entry in _as_list(data.get("tactics"))
        if isinstance(entry, dict)
    ]
    if not tactics:
        tactics = [_synthetic_tactic()]
    # sorted() is stable, so equal scores keep model order.
    tactics = sorted(tactics, key=lambda tactic: -tactic.score)
    _assign_contributions(tactics)

    risk_score = weighted_risk_score(tactics)
    return NormalizedReport(
        risk_score=risk_score,
        risk_label=_upstream_label(data.get("risk_label")) or risk_label(risk_score),
        confidence=_clamp_float(data.get("confidence"), 0.0, 1.0, DEFAULT_CONFIDENCE),
        tactics=tactics,
        receipts=_normalize_receipts(data.get("receipts")),
        kpis=dict(data["kpis"]) if isinstance(data.get("kpis"), dict) else {},
        narrative=_non_empty_text(data.get("narrative"))
        or _non_empty_text(data.get("summary")),
    )


def tactic_score(likelihood: float, severity: float, frequency: float) -> int:
    """Score one tactic on 0..100; likelihood carries the most weight."""

    value = (
        40.0 * likelihood
        + 35.0 * ((severity - 1.0) / 4.0)
        + 25.0 * min(1.0, frequency / 5.0)
    )
    return int(_round_half_up(value))


def weighted_risk_score(tactics: list[TacticResult]) -> int:
    if not tactics:
        return 0
    weighted = 0.0
    total_weight = 0.0
    for tactic in tactics:
        weight = tactic_weight(tactic.id)
        weighted += (tactic.score / 100.0) * weight
        total_weight += weight
    if total_weight <= 0:
        return 0
    return int(_round_half_up(100.0 * weighted / total_weight))


def risk_label(risk_score: int) -> str:
    if risk_score < LOW_RISK_CEILING:
        return "low"
    if risk_score < HIGH_RISK_FLOOR:
        return "medium"
    return "high"


def resolve_tactic_id(value: object) -> str:
    """Map a model-supplied id or name onto the taxonomy, else ``other``."""

    if not isinstance(value, str):
        return OTHER_TACTIC_ID
    candidate = value.strip().lower().replace("_", "-").replace(" ", "-")
    if candidate in TACTIC_IDS:
        return candidate
    return OTHER_TACTIC_ID


def _normalize_tactic(entry: dict[str, Any]) -> TacticResult:
    raw_id = entry.get("id")
    if not isinstance(raw_id, str) or not raw_id.strip():
        raw_id = entry.get("name")
    tactic_id = resolve_tactic_id(raw_id)

    provided_examples = _collect_examples(entry)
    likelihood = _clamp_float(entry.get("likelihood"), 0.0, 1.0, 0.0)
    severity = _clamp_float(entry.get("severity"), 1.0, 5.0, DEFAULT_SEVERITY)
    frequency = _clamp_float(
        entry.get("frequency"), 0.0, 5.0, float(min(len(provided_examples), 5))
    )

    return TacticResult(
        id=tactic_id,
        name=_non_empty_text(entry.get("name")) or tactic_id.title(),
        likelihood=likelihood,
        severity=severity,
        frequency=frequency,
        examples=provided_examples[:MAX_EXAMPLES_PER_TACTIC],
        score=tactic_score(likelihood, severity, frequency),
    )


def _synthetic_tactic() -> TacticResult:
    return TacticResult(
        id=OTHER_TACTIC_ID,
        name=OTHER_TACTIC_ID.title(),
        likelihood=0.0,
        severity=1.0,
        frequency=0.0,
        examples=[],
        score=0,
    )


def _assign_contributions(tactics: list[TacticResult]) -> None:
    weighted = [tactic.score * tactic_weight(tactic.id) for tactic in tactics]
    total = sum(weighted)
    for tactic, value in zip(tactics, weighted):
        if total <= 0:
            tactic.contribution_pct = 0.0
        else:
            tactic.contribution_pct = _round_half_up(1000.0 * value / total) / 10.0


def _collect_examples(entry: dict[str, Any]) -> list[str]:
    examples = [
        _truncate(item) for item in _as_list(entry.get("examples")) if isinstance(item, str)
    ]
    if "examples" not in entry:
        for instance in _as_list(entry.get("instances")):
            if isinstance(instance, dict) and isinstance(instance.get("quote"), str):
                examples.append(_truncate(instance["quote"]))
    return [example for example in examples if example]


def _normalize_receipts(value: object) -> list[Receipt]:
    entries: list[object]
    if isinstance(value, dict):
        entries = _as_list(value.get("highlights"))
    else:
        entries = _as_list(value)

    receipts: list[Receipt] = []
    for entry in entries:
        if len(receipts) >= MAX_RECEIPTS:
            break
        if not isinstance(entry, dict):
            continue
        quote = entry.get("quote")
        if not isinstance(quote, str) or not quote.strip():
            continue
        receipts.append(
            Receipt(
                quote=_truncate(quote),
                category=_non_empty_text(entry.get("category"))
                or _non_empty_text(entry.get("tactic")),
                source=_source_text(entry),
                severity=_clamp_int(entry.get("severity"), 1, 5, None),
            )
        )
    return receipts


def _source_text(entry: dict[str, Any]) -> str | None:
    for key in ("source", "speaker"):
        text = _non_empty_text(entry.get(key))
        if text:
            return text
    return None


def _upstream_label(value: object) -> str | None:
    # Only the three known labels are trusted; anything else is recomputed.
    if not isinstance(value, str):
        return None
    label = value.strip().lower()
    return label if label in RISK_LABELS else None


def _as_number(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        try:
            number = float(value)
        except OverflowError:
            # Out of float range; saturate so clamping still applies.
            number = math.copysign(sys.float_info.max, value)
    elif isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def _clamp_float(value: object, low: float, high: float, default: float) -> float:
    number = _as_number(value)
    if number is None:
        return default
    return min(high, max(low, number))


def _clamp_int(value: object, low: int, high: int, default: int | None) -> int | None:
    number = _as_number(value)
    if number is None:
        return default
    return int(min(high, max(low, _round_half_up(number))))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5 + _ROUNDING_EPSILON)


def _as_list(value: object) -> list[object]:
    return list(value) if isinstance(value, list) else []


def _non_empty_text(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _truncate(text: str) -> str:
    return text.strip()[:MAX_QUOTE_LENGTH]
