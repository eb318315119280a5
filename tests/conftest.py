"""Pytest fixtures for voltcheck tests."""

import json
from pathlib import Path

import pytest

from voltcheck.compliance import Device, DeviceType, Room, RoomType, SystemType

# Blueprint used by the CLI and layout file tests: one 20ft x 15ft office.
OFFICE = {"id": "r1", "name": "Office", "type": "office", "x": 0, "y": 0, "width": 240, "height": 180}


def layout_dict(devices: list[dict], rooms: list[dict] | None = None) -> dict:
    return {
        "blueprint": {"id": "bp-1", "name": "Level 1", "scale": 1.0, "width": 480, "height": 360},
        "rooms": [OFFICE] if rooms is None else rooms,
        "devices": devices,
    }


def smoke(device_id: str, x: float, y: float, **extra) -> dict:
    return {"id": device_id, "type": "smoke-detector", "system": "fire", "x": x, "y": y, **extra}


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch):
    """Keep user and project config files and the units env var out of tests."""
    (tmp_path / ".git").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("voltcheck.config.USER_CONFIG_PATH", tmp_path / "no-user-config.toml")
    monkeypatch.delenv("VOLTCHECK_UNITS", raising=False)


@pytest.fixture
def make_device():
    """Factory for devices; smoke detectors in the fire system by default."""

    def _make(
        device_id: str,
        x: float,
        y: float,
        device_type=DeviceType.SMOKE_DETECTOR,
        system: SystemType = SystemType.FIRE,
        **kwargs,
    ) -> Device:
        return Device(id=device_id, device_type=device_type, system=system, x=x, y=y, **kwargs)

    return _make


@pytest.fixture
def office() -> Room:
    """Room at (0, 0), 240in x 180in."""
    return Room(id="r1", name="Office", x=0, y=0, width=240, height=180, type=RoomType.OFFICE)


def _write(path: Path, data: dict) -> Path:
    path.write_text(json.dumps(data, indent=2))
    return path


@pytest.fixture
def clean_layout(tmp_path: Path) -> Path:
    """Two detectors well inside the office."""
    return _write(
        tmp_path / "clean.json",
        layout_dict([smoke("sd-1", 60, 90, name="SD-1"), smoke("sd-2", 180, 90, name="SD-2")]),
    )


@pytest.fixture
def corner_layout(tmp_path: Path) -> Path:
    """Detectors 2in off opposite corners: one wall conflict each."""
    return _write(
        tmp_path / "corners.json",
        layout_dict([smoke("sd-1", 2, 2), smoke("sd-2", 238, 178)]),
    )


@pytest.fixture
def wall_layout(tmp_path: Path) -> Path:
    """One detector 1in off the left wall, one well inside."""
    return _write(
        tmp_path / "wall.json",
        layout_dict([smoke("sd-1", 1, 90), smoke("sd-2", 120, 90)]),
    )
