"""JSON (de)serialization for WorkoutPlan objects.

The wire format mirrors the plan files users upload:

    {"session": "Push day",
     "blocks": [{"exercise": "Bench", "sets": 4, "reps": 8,
                 "tempo": {"eccentric": 3, "pause": 1, "concentric": 1},
                 "rest": 120, "order": "ecc-pause-con",
                 "concentricKeyword": "push"}]}

Conversion functions are pure; only ``load_plan_file`` / ``save_plan_file``
touch the filesystem.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from tempo_engine.exceptions import PlanLoadError, PlanValidationError
from tempo_engine.models.enums import ConcentricKeyword, PhaseOrder
from tempo_engine.models.plan import Tempo, WorkoutBlock, WorkoutPlan

logger = logging.getLogger(__name__)

# PhaseOrder <-> wire key mapping.
_PHASE_ORDER_KEYS = {
    PhaseOrder.ECC_PAUSE_CON: "ecc-pause-con",
    PhaseOrder.CON_PAUSE_ECC: "con-pause-ecc",
}
_PHASE_ORDER_BY_KEY = {v: k for k, v in _PHASE_ORDER_KEYS.items()}

_KEYWORD_KEYS = {
    ConcentricKeyword.PUSH: "push",
    ConcentricKeyword.PULL: "pull",
}
_KEYWORD_BY_KEY = {v: k for k, v in _KEYWORD_KEYS.items()}

_REQUIRED_BLOCK_FIELDS = ("exercise", "sets", "reps", "tempo", "rest")
_TEMPO_FIELDS = ("eccentric", "pause", "concentric")


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def from_plan_json(data: Any) -> WorkoutPlan:
    """Build a validated WorkoutPlan from a decoded JSON structure.

    Raises:
        PlanValidationError: on any structural or configuration error.
    """
    if not isinstance(data, dict):
        raise PlanValidationError("plan must be a JSON object")
    session = data.get("session")
    if not session or not isinstance(session, str):
        raise PlanValidationError("plan is missing a 'session' name", field="session")
    blocks = data.get("blocks")
    if not isinstance(blocks, list):
        raise PlanValidationError("'blocks' must be a list", field="blocks")
    if not blocks:
        raise PlanValidationError("'blocks' must contain at least one block", field="blocks")

    parsed = tuple(_convert_block(raw, i) for i, raw in enumerate(blocks, start=1))
    return WorkoutPlan(session=session, blocks=parsed)


def _convert_block(raw: Any, index: int) -> WorkoutBlock:
    where = f"block {index}"
    if not isinstance(raw, dict):
        raise PlanValidationError(f"{where} must be an object", field=f"blocks[{index}]")

    missing = [name for name in _REQUIRED_BLOCK_FIELDS if name not in raw]
    if missing:
        raise PlanValidationError(
            f"{where} is missing {', '.join(missing)}", field=f"blocks[{index}].{missing[0]}"
        )

    order_key = raw.get("order", _PHASE_ORDER_KEYS[PhaseOrder.ECC_PAUSE_CON])
    if not isinstance(order_key, str) or order_key not in _PHASE_ORDER_BY_KEY:
        raise PlanValidationError(
            f"{where} has unknown order {order_key!r}", field=f"blocks[{index}].order"
        )
    keyword_key = raw.get("concentricKeyword", _KEYWORD_KEYS[ConcentricKeyword.PUSH])
    if not isinstance(keyword_key, str) or keyword_key not in _KEYWORD_BY_KEY:
        raise PlanValidationError(
            f"{where} has unknown concentricKeyword {keyword_key!r}",
            field=f"blocks[{index}].concentricKeyword",
        )

    try:
        return WorkoutBlock(
            exercise=raw["exercise"],
            sets=raw["sets"],
            reps=raw["reps"],
            tempo=_convert_tempo(raw["tempo"]),
            rest=raw["rest"],
            order=_PHASE_ORDER_BY_KEY[order_key],
            concentric_keyword=_KEYWORD_BY_KEY[keyword_key],
        )
    except PlanValidationError as exc:
        raise PlanValidationError(f"{where}: {exc}", field=f"blocks[{index}].{exc.field}") from exc


def _convert_tempo(raw: Any) -> Tempo:
    if not isinstance(raw, dict):
        raise PlanValidationError("tempo must be an object", field="tempo")
    missing = [name for name in _TEMPO_FIELDS if name not in raw]
    if missing:
        raise PlanValidationError(f"tempo is missing {', '.join(missing)}", field="tempo")
    return Tempo(
        eccentric=raw["eccentric"],
        pause=raw["pause"],
        concentric=raw["concentric"],
    )


def loads_plan(text: str | bytes) -> WorkoutPlan:
    """Parse a JSON document into a WorkoutPlan."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise PlanLoadError(f"Plan is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise PlanLoadError("Plan is nested too deeply to parse") from exc
    return from_plan_json(data)


def load_plan_file(path: Path | str) -> WorkoutPlan:
    """Read and validate a plan file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as exc:
        raise PlanLoadError(f"Plan file {path} is not UTF-8 text: {exc}") from exc
    except OSError as exc:
        raise PlanLoadError(f"Cannot read plan file {path}: {exc}") from exc
    plan = loads_plan(text)
    logger.info("Loaded plan %r (%d blocks) from %s", plan.session, len(plan), path)
    return plan


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def to_plan_json(plan: WorkoutPlan) -> dict:
    """Convert a WorkoutPlan to its JSON-compatible dict."""
    return {
        "session": plan.session,
        "blocks": [_block_to_json(b) for b in plan.blocks],
    }


def _block_to_json(block: WorkoutBlock) -> dict:
    return {
        "exercise": block.exercise,
        "sets": block.sets,
        "reps": block.reps,
        "tempo": {
            "eccentric": block.tempo.eccentric,
            "pause": block.tempo.pause,
            "concentric": block.tempo.concentric,
        },
        "rest": block.rest,
        "order": _PHASE_ORDER_KEYS[block.order],
        "concentricKeyword": _KEYWORD_KEYS[block.concentric_keyword],
    }


def to_plan_json_string(plan: WorkoutPlan, indent: int = 2) -> str:
    return json.dumps(to_plan_json(plan), indent=indent)


def save_plan_file(plan: WorkoutPlan, path: Path | str) -> Path:
    """Write *plan* as JSON, creating parent directories. Returns the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(to_plan_json_string(plan))
    logger.info("Saved plan %r to %s", plan.session, path)
    return path
