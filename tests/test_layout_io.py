"""Tests for layout file reading and writing."""

import json

import pytest

from voltcheck.compliance import DeviceType, RoomType, SystemType
from voltcheck.exceptions import LayoutFormatError, LayoutNotFoundError
from voltcheck.layout_io import layout_to_dict, load_layout, parse_layout, save_layout

LAYOUT = {
    "blueprint": {"id": "bp-1", "name": "Level 1", "scale": 0.5, "width": 480, "height": 360},
    "rooms": [
        {"id": "r1", "name": "Office", "type": "office", "x": 0, "y": 0, "width": 240, "height": 180},
        {"id": "r2", "name": "Lab", "type": "laboratory", "x": 240, "y": 0, "width": 240, "height": 180},
    ],
    "devices": [
        {
            "id": "sd-1",
            "type": "smoke-detector",
            "system": "fire",
            "x": 60,
            "y": 90.5,
            "name": "SD-1",
            "rotation": 90,
            "properties": {"zone": 2},
        },
        {"id": "cam-1", "type": "camera", "system": "cctv", "x": 300, "y": 20},
        {"id": "bd-1", "type": "beam-detector", "system": "fire", "x": 400, "y": 90},
    ],
}


def _device(**overrides):
    return {"id": "d1", "type": "strobe", "system": "fire", "x": 10, "y": 10, **overrides}


class TestLoadLayout:
    def test_load(self, tmp_path):
        path = tmp_path / "level1.json"
        path.write_text(json.dumps(LAYOUT))
        blueprint = load_layout(path)

        assert blueprint.id == "bp-1"
        assert blueprint.name == "Level 1"
        assert blueprint.scale == 0.5
        assert [r.id for r in blueprint.rooms] == ["r1", "r2"]
        assert blueprint.rooms[0].type == RoomType.OFFICE
        assert blueprint.rooms[1].type == RoomType.OTHER

        sd = blueprint.devices[0]
        assert sd.device_type == DeviceType.SMOKE_DETECTOR
        assert sd.system == SystemType.FIRE
        assert (sd.x, sd.y) == (60, 90.5)
        assert sd.name == "SD-1"
        assert sd.rotation == 90
        assert sd.properties == {"zone": 2}

        cam = blueprint.devices[1]
        assert cam.system == SystemType.CCTV
        assert cam.name == ""
        assert cam.rotation == 0

    def test_unknown_type_kept_raw(self):
        device = parse_layout(LAYOUT).devices[2]
        assert device.device_type == "beam-detector"
        assert device.type_name == "beam-detector"

    def test_missing_file(self, tmp_path):
        with pytest.raises(LayoutNotFoundError, match="not found"):
            load_layout(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(LayoutFormatError, match="Invalid JSON") as exc_info:
            load_layout(path)
        assert exc_info.value.context["file"] == str(path)

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"blueprint": {"name": "\xff\xfe"}, "rooms": [], "devices": []}')
        with pytest.raises(LayoutFormatError, match="not valid UTF-8") as exc_info:
            load_layout(path)
        assert exc_info.value.context["file"] == str(path)

    def test_directory(self, tmp_path):
        with pytest.raises(LayoutFormatError, match="Cannot read layout file"):
            load_layout(tmp_path)

    def test_empty_layout(self):
        blueprint = parse_layout({})
        assert blueprint.rooms == []
        assert blueprint.devices == []


class TestParseErrors:
    def test_not_an_object(self):
        with pytest.raises(LayoutFormatError, match="JSON object"):
            parse_layout([])

    def test_devices_not_a_list(self):
        with pytest.raises(LayoutFormatError, match="'devices' must be a list"):
            parse_layout({"devices": {}})

    def test_unknown_system(self):
        with pytest.raises(LayoutFormatError, match="unknown system 'hvac'"):
            parse_layout({"devices": [_device(system="hvac")]})

    def test_missing_field(self):
        device = _device()
        del device["type"]
        with pytest.raises(LayoutFormatError, match="missing 'type'"):
            parse_layout({"devices": [device]})

    def test_missing_coordinate(self):
        device = _device()
        del device["y"]
        with pytest.raises(LayoutFormatError, match="missing 'y'"):
            parse_layout({"devices": [device]})

    def test_non_numeric_coordinate(self):
        with pytest.raises(LayoutFormatError, match="non-numeric 'x'"):
            parse_layout({"devices": [_device(x="10in")]})

    def test_bool_is_not_a_coordinate(self):
        with pytest.raises(LayoutFormatError, match="non-numeric 'x'"):
            parse_layout({"devices": [_device(x=True)]})

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity", "1e999"])
    def test_non_finite_coordinate(self, tmp_path, literal):
        path = tmp_path / "level1.json"
        path.write_text(
            '{"devices": [{"id": "d1", "type": "strobe", "system": "fire", "x": %s, "y": 1}]}'
            % literal
        )
        with pytest.raises(LayoutFormatError, match="non-finite 'x'"):
            load_layout(path)

    def test_huge_integer_size(self):
        room = {"id": "r1", "name": "Office", "x": 0, "y": 0, "width": 10**400, "height": 10}
        with pytest.raises(LayoutFormatError, match="non-finite 'width'"):
            parse_layout({"rooms": [room]})

    def test_duplicate_ids(self):
        with pytest.raises(LayoutFormatError, match="Duplicate device id 'd1'"):
            parse_layout({"devices": [_device(), _device(x=50)]})

    def test_room_missing_size(self):
        room = {"id": "r1", "name": "Office", "x": 0, "y": 0, "width": 10}
        with pytest.raises(LayoutFormatError, match="Room 'r1' is missing 'height'"):
            parse_layout({"rooms": [room]})


class TestSaveLayout:
    def test_save_then_load(self, tmp_path):
        original = parse_layout(LAYOUT)
        path = save_layout(original, tmp_path / "out" / "level1.json")

        assert path.exists()
        reloaded = load_layout(path)
        assert layout_to_dict(reloaded) == layout_to_dict(original)

    def test_conflicts_not_written(self):
        blueprint = parse_layout(LAYOUT)
        data = layout_to_dict(blueprint)
        assert "conflicts" not in data["devices"][0]
        assert data["rooms"][1]["type"] == "other"
        assert data["devices"][2]["type"] == "beam-detector"
