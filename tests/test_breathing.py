"""Tests for core/breathing.py — session state machine."""

import pytest

from core.breathing import (
    BreathingSessionController,
    background_color,
    marker_glyph,
    resolve_durations,
)
from core.models import BreathingPreset, Phase, PhaseDurations, VisualPosition


EXPECTED_POSITION = {
    Phase.INHALE: VisualPosition.RIGHT,
    Phase.HOLD: VisualPosition.BOTTOM,
    Phase.EXHALE: VisualPosition.LEFT,
}


def assert_consistent(controller):
    state = controller.state
    if state.is_running:
        assert state.visual_position == EXPECTED_POSITION[state.current_phase]
    else:
        assert state.visual_position == VisualPosition.START
    assert 0 <= state.seconds_remaining <= controller.durations.duration(state.current_phase)


def test_initial_state_is_idle():
    c = BreathingSessionController()
    assert c.state.is_running is False
    assert c.state.current_phase == Phase.INHALE
    assert c.state.seconds_remaining == 4
    assert c.state.visual_position == VisualPosition.START


def test_classic_walkthrough():
    c = BreathingSessionController(BreathingPreset.CLASSIC)
    c.start()
    assert c.state.visual_position == VisualPosition.RIGHT

    for _ in range(4):
        c.tick()
    assert c.state.current_phase == Phase.HOLD
    assert c.state.seconds_remaining == 7

    for _ in range(7):
        c.tick()
    assert c.state.current_phase == Phase.EXHALE
    assert c.state.seconds_remaining == 8

    for _ in range(8):
        c.tick()
    assert c.state.is_running is False
    assert c.state.current_phase == Phase.INHALE
    assert c.state.seconds_remaining == 4


@pytest.mark.parametrize("triple", [(1, 1, 1), (3, 4, 5), (5, 10, 10), (10, 15, 15), (2, 1, 7)])
def test_full_cycle_returns_to_idle(triple):
    c = BreathingSessionController(PhaseDurations(*triple))
    c.start()
    phases_seen = [c.state.current_phase]
    for _ in range(sum(triple)):
        assert c.state.is_running
        c.tick()
        assert_consistent(c)
        if c.state.is_running and c.state.current_phase != phases_seen[-1]:
            phases_seen.append(c.state.current_phase)
    assert phases_seen == [Phase.INHALE, Phase.HOLD, Phase.EXHALE]
    assert c.state.is_running is False
    assert c.state.seconds_remaining == triple[0]


def test_tick_when_idle_is_noop():
    c = BreathingSessionController()
    before = c.state
    assert c.tick() == before


def test_start_when_running_is_noop():
    c = BreathingSessionController()
    c.start()
    c.tick()
    state = c.state
    assert c.start() == state
    assert c.state.seconds_remaining == 3


def test_stop_is_idempotent():
    c = BreathingSessionController(BreathingPreset.DEEP)
    c.start()
    for _ in range(6):
        c.tick()
    once = c.stop()
    twice = c.stop()
    assert once == twice
    assert twice.is_running is False
    assert twice.current_phase == Phase.INHALE
    assert twice.seconds_remaining == 5
    assert twice.visual_position == VisualPosition.START


def test_configure_rejected_while_running():
    c = BreathingSessionController(BreathingPreset.CLASSIC)
    c.start()
    assert c.configure(BreathingPreset.FAST) is False
    assert c.durations == PhaseDurations(4, 7, 8)
    assert c.preset == BreathingPreset.CLASSIC
    assert c.state.is_running is True


def test_configure_when_idle_resets_countdown():
    c = BreathingSessionController()
    assert c.configure(BreathingPreset.FAST) is True
    assert c.durations.as_tuple() == (3, 4, 5)
    assert c.state.seconds_remaining == 3


def test_configure_custom_clamps_out_of_range():
    c = BreathingSessionController()
    assert c.configure(PhaseDurations(20, 30, 40)) is True
    assert c.preset == BreathingPreset.CUSTOM
    assert c.durations.as_tuple() == (10, 15, 15)


def test_custom_preset_reuses_last_custom_triple():
    c = BreathingSessionController(PhaseDurations(2, 3, 4))
    c.configure(BreathingPreset.CLASSIC)
    c.configure(BreathingPreset.CUSTOM)
    assert c.durations.as_tuple() == (2, 3, 4)


def test_resolve_durations_presets():
    assert resolve_durations(BreathingPreset.CLASSIC)[1].as_tuple() == (4, 7, 8)
    assert resolve_durations(BreathingPreset.FAST)[1].as_tuple() == (3, 4, 5)
    assert resolve_durations(BreathingPreset.DEEP)[1].as_tuple() == (5, 10, 10)
    preset, durations = resolve_durations(BreathingPreset.CUSTOM)
    assert preset == BreathingPreset.CUSTOM
    assert durations.as_tuple() == (4, 7, 8)


def test_display_hints_follow_phase():
    c = BreathingSessionController(PhaseDurations(1, 1, 1))
    assert background_color(c.state) == "blue"
    assert marker_glyph(c.state) == "🧘"
    c.start()
    assert background_color(c.state) == "blue"
    c.tick()
    assert background_color(c.state) == "purple"
    c.tick()
    assert background_color(c.state) == "pink"


def test_snapshot_contents():
    c = BreathingSessionController(BreathingPreset.FAST)
    c.start()
    snap = c.snapshot()
    assert snap["isRunning"] is True
    assert snap["currentPhase"] == "inhale"
    assert snap["visualPosition"] == "right"
    assert snap["phaseLabel"] == "INHALE"
    assert snap["preset"] == "fast"
    assert snap["durations"] == {"inhale": 3, "hold": 4, "exhale": 5}
