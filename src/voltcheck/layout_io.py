"""
Reading and writing layout files.

A layout file is JSON holding one blueprint, its rooms and its devices.
All coordinates are inches::

    {
      "blueprint": {"id": "bp-1", "name": "Level 1", "scale": 1.0, "width": 480, "height": 360},
      "rooms": [{"id": "r1", "name": "Office", "type": "office",
                 "x": 0, "y": 0, "width": 240, "height": 180}],
      "devices": [{"id": "d1", "type": "smoke-detector", "system": "fire",
                   "x": 10, "y": 10, "name": "SD-1", "rotation": 0, "properties": {}}]
    }
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Union

from .compliance.models import Blueprint, Device, DeviceType, Room, RoomType, SystemType
from .exceptions import LayoutFormatError, LayoutNotFoundError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_layout(path: PathLike) -> Blueprint:
    """Load a blueprint with its rooms and devices from a JSON layout file.

    Raises:
        LayoutNotFoundError: If the file does not exist
        LayoutFormatError: If the file is not a valid layout
    """
    path = Path(path)
    if not path.exists():
        raise LayoutNotFoundError(
            f"Layout file not found: {path}",
            context={"file": str(path)},
            suggestions=["Check the path", "Export the layout from the editor first"],
        )

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise LayoutFormatError(
            f"Layout is not valid UTF-8 (byte {e.start})",
            file_path=path,
            suggestions=["Save the layout as UTF-8 JSON"],
        ) from e
    except OSError as e:
        raise LayoutFormatError(
            f"Cannot read layout file: {e.strerror or e}",
            file_path=path,
        ) from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LayoutFormatError(
            f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
            file_path=path,
        ) from e

    blueprint = parse_layout(data, source=path)
    logger.debug(
        "Loaded %s: %d rooms, %d devices", path, len(blueprint.rooms), len(blueprint.devices)
    )
    return blueprint


def parse_layout(data: Any, source: PathLike | None = None) -> Blueprint:
    """Build a :class:`Blueprint` from decoded layout JSON."""
    if not isinstance(data, dict):
        raise LayoutFormatError("Layout must be a JSON object", file_path=source)

    bp_data = data.get("blueprint") or {}
    if not isinstance(bp_data, dict):
        raise LayoutFormatError("'blueprint' must be an object", file_path=source)

    rooms_data = _require_list(data, "rooms", source)
    devices_data = _require_list(data, "devices", source)

    rooms = [_parse_room(item, i, source) for i, item in enumerate(rooms_data)]
    devices = [_parse_device(item, i, source) for i, item in enumerate(devices_data)]

    seen: set[str] = set()
    for device in devices:
        if device.id in seen:
            raise LayoutFormatError(
                f"Duplicate device id '{device.id}'",
                file_path=source,
                suggestions=["Device ids must be unique within a layout"],
            )
        seen.add(device.id)

    return Blueprint(
        id=str(bp_data.get("id", "")),
        name=str(bp_data.get("name", "")),
        scale=_number(bp_data, "scale", source, "blueprint", default=1.0),
        width=_number(bp_data, "width", source, "blueprint", default=0.0),
        height=_number(bp_data, "height", source, "blueprint", default=0.0),
        rooms=rooms,
        devices=devices,
    )


def _require_list(data: dict, key: str, source: PathLike | None) -> list:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise LayoutFormatError(f"'{key}' must be a list", file_path=source)
    return value


def _number(
    item: dict,
    key: str,
    source: PathLike | None,
    where: str,
    default: float | None = None,
) -> float:
    if key not in item:
        if default is not None:
            return default
        raise LayoutFormatError(
            f"{where} is missing '{key}'",
            file_path=source,
            suggestions=["Coordinates and sizes are numbers in inches"],
        )
    value = item[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LayoutFormatError(
            f"{where} has non-numeric '{key}': {value!r}",
            file_path=source,
        )
    try:
        number = float(value)
    except OverflowError:
        number = math.inf
    if not math.isfinite(number):
        raise LayoutFormatError(
            f"{where} has non-finite '{key}': {value!r}",
            file_path=source,
            suggestions=["NaN and Infinity are not valid positions or sizes"],
        )
    return number


def _parse_room(item: Any, index: int, source: PathLike | None) -> Room:
    if not isinstance(item, dict):
        raise LayoutFormatError(f"Room #{index} must be an object", file_path=source)
    if "id" not in item:
        raise LayoutFormatError(f"Room #{index} is missing 'id'", file_path=source)

    where = f"Room '{item['id']}'"
    return Room(
        id=str(item["id"]),
        name=str(item.get("name", "")),
        x=_number(item, "x", source, where),
        y=_number(item, "y", source, where),
        width=_number(item, "width", source, where),
        height=_number(item, "height", source, where),
        type=RoomType.from_string(str(item.get("type", "other"))),
    )


def _parse_device(item: Any, index: int, source: PathLike | None) -> Device:
    if not isinstance(item, dict):
        raise LayoutFormatError(f"Device #{index} must be an object", file_path=source)
    for key in ("id", "type", "system"):
        if key not in item:
            raise LayoutFormatError(f"Device #{index} is missing '{key}'", file_path=source)

    device_id = str(item["id"])
    where = f"Device '{device_id}'"

    system = SystemType.from_string(str(item["system"]))
    if system is None:
        raise LayoutFormatError(
            f"{where} has unknown system '{item['system']}'",
            file_path=source,
            context={"device": device_id},
            suggestions=[f"Use one of: {', '.join(s.value for s in SystemType)}"],
        )

    raw_type = str(item["type"])
    device_type = DeviceType.from_string(raw_type)
    if device_type is None:
        logger.debug("%s has unrecognized type %r; spacing rules will skip it", where, raw_type)

    properties = item.get("properties") or {}
    if not isinstance(properties, dict):
        raise LayoutFormatError(f"{where} 'properties' must be an object", file_path=source)

    return Device(
        id=device_id,
        device_type=device_type or raw_type,
        system=system,
        x=_number(item, "x", source, where),
        y=_number(item, "y", source, where),
        rotation=_number(item, "rotation", source, where, default=0.0),
        name=str(item.get("name", "")),
        properties=dict(properties),
    )


def layout_to_dict(blueprint: Blueprint) -> dict[str, Any]:
    """Serialize a blueprint and its layout to the layout file structure."""
    return {
        "blueprint": {
            "id": blueprint.id,
            "name": blueprint.name,
            "scale": blueprint.scale,
            "width": blueprint.width,
            "height": blueprint.height,
        },
        "rooms": [
            {
                "id": room.id,
                "name": room.name,
                "type": room.type.value,
                "x": room.x,
                "y": room.y,
                "width": room.width,
                "height": room.height,
            }
            for room in blueprint.rooms
        ],
        "devices": [
            {
                "id": device.id,
                "type": device.type_name,
                "system": device.system.value,
                "x": device.x,
                "y": device.y,
                "name": device.name,
                "rotation": device.rotation,
                "properties": device.properties,
            }
            for device in blueprint.devices
        ],
    }


def save_layout(blueprint: Blueprint, path: PathLike) -> Path:
    """Write a blueprint layout as JSON. Attached conflicts are not written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(layout_to_dict(blueprint), indent=2) + "\n", encoding="utf-8")
    logger.debug("Saved %d devices to %s", len(blueprint.devices), path)
    return path
