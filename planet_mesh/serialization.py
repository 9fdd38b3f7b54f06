"""
Request/response shapes for crossing a process or network boundary.

Request:  {"seed": str, "width": num, "height": num, "space": num, "chaos": num}
Response: [{"center": [x, y], "polygon": [[x, y], ...], "elevation": num}, ...]
"""

from dataclasses import asdict
from typing import Any, Dict, List, Mapping

from .core.cells import Cell, Mesh
from .core.exceptions import InvalidOptions
from .core.pipeline import GenerationOptions

OPTION_FIELDS = ("seed", "width", "height", "space", "chaos")


def options_from_payload(payload: Mapping[str, Any]) -> GenerationOptions:
    """
    Decode a generation request.

    Only checks the shape of the payload (keys and types); value ranges are
    checked by validate_options when the pipeline runs.

    Raises:
        InvalidOptions: not a mapping, missing or unknown keys, wrong types
    """
    if not isinstance(payload, Mapping):
        raise InvalidOptions(f"Request must be an object, got {type(payload).__name__}")

    missing = [name for name in OPTION_FIELDS if name not in payload]
    if missing:
        raise InvalidOptions(f"Missing fields: {', '.join(missing)}", field=missing[0])

    unknown = sorted(set(payload) - set(OPTION_FIELDS))
    if unknown:
        raise InvalidOptions(f"Unknown fields: {', '.join(unknown)}", field=unknown[0])

    if not isinstance(payload["seed"], str):
        raise InvalidOptions("seed must be a string", field="seed")

    numbers = {}
    for name in OPTION_FIELDS[1:]:
        value = payload[name]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidOptions(f"{name} must be a number", field=name)
        numbers[name] = float(value)

    return GenerationOptions(seed=payload["seed"], **numbers)


def options_to_payload(options: GenerationOptions) -> Dict[str, Any]:
    """Encode generation options as a request payload."""
    return asdict(options)


def cell_to_payload(cell: Cell) -> Dict[str, Any]:
    """Encode one cell."""
    return {
        "center": [cell.center[0], cell.center[1]],
        "polygon": [[x, y] for x, y in cell.polygon],
        "elevation": cell.elevation,
    }


def mesh_to_payload(mesh: Mesh) -> List[Dict[str, Any]]:
    """Encode a mesh as an ordered list of cells."""
    return [cell_to_payload(cell) for cell in mesh]
