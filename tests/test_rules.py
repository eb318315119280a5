"""Tests for the placement rule evaluators."""

import pytest

from voltcheck.compliance import (
    Blueprint,
    ComplianceRules,
    ConflictKind,
    ConflictSeverity,
    Device,
    DeviceType,
    SystemType,
    ValidationContext,
    WallSide,
    check_boundary,
    check_code_spacing,
    check_overlap,
    check_wall_proximity,
)


def context(devices, rooms=(), **kwargs):
    return ValidationContext.build(rooms, devices, **kwargs)


class TestOverlap:
    """Same-system devices inside the overlap radius."""

    def test_no_overlap_beyond_radius(self, make_device):
        a, b = make_device("a", 100, 100), make_device("b", 113, 100)
        ctx = context([a, b])
        assert check_overlap(a, ctx) is None
        assert check_overlap(b, ctx) is None

    def test_exactly_at_radius_is_not_overlap(self, make_device):
        a, b = make_device("a", 100, 100), make_device("b", 112, 100)
        ctx = context([a, b])
        assert check_overlap(a, ctx) is None
        assert check_overlap(b, ctx) is None

    def test_inside_radius_both_directions(self, make_device):
        a, b = make_device("a", 100, 100), make_device("b", 111.9, 100)
        ctx = context([a, b])

        conflict_a = check_overlap(a, ctx)
        conflict_b = check_overlap(b, ctx)
        assert conflict_a is not None and conflict_b is not None
        assert conflict_a.related_device_id == "b"
        assert conflict_b.related_device_id == "a"
        assert conflict_a.id == "conflict-a-overlap-b"
        assert conflict_a.kind == ConflictKind.OVERLAP
        assert conflict_a.severity == ConflictSeverity.ERROR
        assert conflict_a.has_auto_fix is True
        assert conflict_a.actual_distance == pytest.approx(11.9)
        assert conflict_a.required_distance == 12

    def test_first_match_in_input_order(self, make_device):
        # c is closer to a, but b comes first
        a = make_device("a", 100, 100)
        b = make_device("b", 108, 100)
        c = make_device("c", 102, 100)
        conflict = check_overlap(a, context([a, b, c]))
        assert conflict.related_device_id == "b"

    def test_different_systems_never_overlap(self, make_device):
        detector = make_device("sd", 100, 100)
        camera = make_device("cam", 100, 100, DeviceType.CAMERA, SystemType.CCTV)
        ctx = context([detector, camera])
        assert check_overlap(detector, ctx) is None
        assert check_overlap(camera, ctx) is None

    def test_different_types_same_system_overlap(self, make_device):
        detector = make_device("sd", 100, 100)
        strobe = make_device("st", 105, 100, DeviceType.STROBE)
        assert check_overlap(detector, context([detector, strobe])) is not None

    def test_message_uses_names(self, make_device):
        a = make_device("a", 100, 100, name="SD-1")
        b = make_device("b", 106, 100, name="SD-2")
        conflict = check_overlap(a, context([a, b]))
        assert "SD-1 overlaps with SD-2" in conflict.message

    def test_custom_radius(self, make_device):
        a, b = make_device("a", 100, 100), make_device("b", 115, 100)
        rules = ComplianceRules(overlap_radius=18)
        assert check_overlap(a, context([a, b], rules=rules)) is not None

    def test_alone(self, make_device):
        a = make_device("a", 100, 100)
        assert check_overlap(a, context([a])) is None


class TestCodeSpacing:
    """NFPA 72 spacing between same-type fire devices."""

    def test_nearest_neighbor_relation(self, make_device):
        # 0ft, 40ft and 80ft along a corridor; smoke detector limit is 30ft
        d0 = make_device("d0", 0, 0)
        d40 = make_device("d40", 480, 0)
        d80 = make_device("d80", 960, 0)
        ctx = context([d0, d40, d80])

        conflict = check_code_spacing(d80, ctx)
        assert conflict is not None
        assert conflict.related_device_id == "d40"
        assert conflict.kind == ConflictKind.CODE_SPACING
        assert conflict.severity == ConflictSeverity.WARNING
        assert conflict.has_auto_fix is False
        assert conflict.actual_distance == pytest.approx(480)
        assert conflict.required_distance == pytest.approx(360)
        assert "40.0ft" in conflict.message
        assert "30ft" in conflict.message

        assert check_code_spacing(d0, ctx).related_device_id == "d40"

    def test_equidistant_goes_to_first(self, make_device):
        d0 = make_device("d0", 0, 0)
        d40 = make_device("d40", 480, 0)
        d80 = make_device("d80", 960, 0)
        conflict = check_code_spacing(d40, context([d0, d40, d80]))
        assert conflict.related_device_id == "d0"

    def test_within_limit(self, make_device):
        a, b = make_device("a", 0, 0), make_device("b", 300, 0)
        assert check_code_spacing(a, context([a, b])) is None

    def test_exactly_at_limit(self, make_device):
        a, b = make_device("a", 0, 0), make_device("b", 360, 0)
        assert check_code_spacing(a, context([a, b])) is None

    def test_single_device(self, make_device):
        a = make_device("a", 0, 0)
        assert check_code_spacing(a, context([a])) is None

    def test_only_same_type_counts(self, make_device):
        far = make_device("far", 0, 0)
        heat = make_device("heat", 10, 0, DeviceType.HEAT_DETECTOR)
        other = make_device("other", 480, 0)
        conflict = check_code_spacing(other, context([far, heat, other]))
        assert conflict.related_device_id == "far"

    def test_per_type_limits(self, make_device):
        # 20ft apart: fine for smoke (30ft), too far for CO (15ft)
        smoke_a, smoke_b = make_device("s1", 0, 0), make_device("s2", 240, 0)
        co_a = make_device("c1", 0, 100, DeviceType.CO_DETECTOR)
        co_b = make_device("c2", 240, 100, DeviceType.CO_DETECTOR)
        ctx = context([smoke_a, smoke_b, co_a, co_b])
        assert check_code_spacing(smoke_a, ctx) is None
        assert check_code_spacing(co_a, ctx) is not None

    def test_non_fire_devices_skipped(self, make_device):
        a = make_device("a", 0, 0, DeviceType.CAMERA, SystemType.CCTV)
        b = make_device("b", 5000, 0, DeviceType.CAMERA, SystemType.CCTV)
        assert check_code_spacing(a, context([a, b])) is None

    def test_unknown_type_skipped(self, make_device):
        a = make_device("a", 0, 0, "beam-detector")
        b = make_device("b", 5000, 0, "beam-detector")
        assert check_code_spacing(a, context([a, b])) is None

    def test_string_typed_devices(self):
        a = Device(id="a", device_type="smoke-detector", system="fire", x=0, y=0)
        b = Device(id="b", device_type="Smoke_Detector", system="FIRE", x=960, y=0)
        conflict = check_code_spacing(a, context([a, b]))
        assert conflict is not None
        assert conflict.related_device_id == "b"

    def test_unmeasurable_peer_ignored(self, make_device):
        a, lost = make_device("a", 0, 0), make_device("lost", float("nan"), 0)
        near = make_device("near", 300, 0)
        assert check_code_spacing(a, context([a, lost, near])) is None
        assert check_code_spacing(a, context([a, lost])) is None

    def test_zero_spacing_disables_type(self, make_device):
        a, b = make_device("a", 0, 0), make_device("b", 5000, 0)
        rules = ComplianceRules(spacing_ft={DeviceType.SMOKE_DETECTOR: 0})
        assert check_code_spacing(a, context([a, b], rules=rules)) is None

    def test_grid_index_same_answer(self, make_device):
        devices = [make_device(f"d{i}", i * 400.0, 0) for i in range(6)]
        plain = context(devices)
        indexed = context(devices, use_grid=True, cell_size=100)
        for device in devices:
            assert check_code_spacing(device, plain) == check_code_spacing(device, indexed)


class TestWallProximity:
    def test_too_close_to_left_wall(self, make_device, office):
        device = make_device("d1", 3, 90)
        conflict = check_wall_proximity(device, context([device], [office]))
        assert conflict is not None
        assert conflict.wall == WallSide.LEFT
        assert conflict.actual_distance == pytest.approx(3)
        assert conflict.required_distance == 4
        assert conflict.severity == ConflictSeverity.ERROR
        assert conflict.has_auto_fix is True
        assert "left wall of Office" in conflict.message

    def test_tie_break_left_over_top(self, make_device, office):
        device = make_device("d1", 3, 3)
        conflict = check_wall_proximity(device, context([device], [office]))
        assert conflict.wall == WallSide.LEFT

    def test_exactly_at_minimum(self, make_device, office):
        device = make_device("d1", 4, 90)
        assert check_wall_proximity(device, context([device], [office])) is None

    def test_on_the_wall(self, make_device, office):
        device = make_device("d1", 120, 180)
        conflict = check_wall_proximity(device, context([device], [office]))
        assert conflict.wall == WallSide.BOTTOM
        assert conflict.actual_distance == 0

    def test_outside_all_rooms(self, make_device, office):
        device = make_device("d1", 300, 90)
        assert check_wall_proximity(device, context([device], [office])) is None


class TestBoundary:
    def test_outside_all_rooms(self, make_device, office):
        device = make_device("d1", 300, 90)
        conflict = check_boundary(device, context([device], [office]))
        assert conflict is not None
        assert conflict.kind == ConflictKind.OUTSIDE_BOUNDARY
        assert conflict.id == "conflict-d1-outside-boundary"
        assert conflict.severity == ConflictSeverity.ERROR
        assert conflict.has_auto_fix is False

    def test_inside(self, make_device, office):
        device = make_device("d1", 120, 90)
        assert check_boundary(device, context([device], [office])) is None

    def test_no_rooms(self, make_device):
        device = make_device("d1", 0, 0)
        assert check_boundary(device, context([device])) is not None

    def test_message_names_blueprint(self, make_device, office):
        device = make_device("d1", 300, 90)
        blueprint = Blueprint(id="bp", name="Level 2")
        conflict = check_boundary(device, context([device], [office], blueprint=blueprint))
        assert "Level 2" in conflict.message
        assert "(300.0, 90.0)" in conflict.message


class TestDevice:
    def test_string_type_and_system_parsed(self):
        device = Device(id="d1", device_type="heat_detector", system=" Access ", x=0, y=0)
        assert device.device_type == DeviceType.HEAT_DETECTOR
        assert device.system == SystemType.ACCESS

    def test_unknown_type_kept_raw(self):
        device = Device(id="d1", device_type="beam-detector", system=SystemType.FIRE, x=0, y=0)
        assert device.device_type == "beam-detector"
        assert device.type_name == "beam-detector"

    def test_unknown_system(self):
        with pytest.raises(ValueError, match="Unknown system 'hvac'"):
            Device(id="d1", device_type=DeviceType.HORN, system="hvac", x=0, y=0)
