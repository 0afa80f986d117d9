"""Tests for training presets, tempo notation and spoken phrases."""

from __future__ import annotations

import dataclasses

import pytest

from tempo_engine import announcements
from tempo_engine.exceptions import PlanValidationError
from tempo_engine.models.enums import ConcentricKeyword, Phase, PhaseOrder
from tempo_engine.models.plan import Tempo
from tempo_engine.presets import (
    DEFAULT_BLOCK,
    PRESETS,
    apply_preset,
    format_tempo,
    parse_tempo,
    single_block_plan,
)


class TestPresets:
    def test_known_presets(self) -> None:
        assert set(PRESETS) == {"Strength", "Hypertrophy", "Endurance"}

    def test_apply_strength(self) -> None:
        block = apply_preset(DEFAULT_BLOCK, "Strength")
        assert (block.sets, block.reps, block.rest) == (5, 5, 180)
        assert block.tempo == Tempo(3, 1, 1)
        assert block.exercise == DEFAULT_BLOCK.exercise

    def test_apply_keeps_order_and_keyword(self) -> None:
        pull = dataclasses.replace(
            DEFAULT_BLOCK, order=PhaseOrder.CON_PAUSE_ECC, concentric_keyword=ConcentricKeyword.PULL,
        )
        block = apply_preset(pull, "Endurance")
        assert block.order == PhaseOrder.CON_PAUSE_ECC
        assert block.concentric_keyword == ConcentricKeyword.PULL
        assert block.tempo == Tempo(2, 0, 2)

    def test_unknown_preset(self) -> None:
        with pytest.raises(KeyError):
            apply_preset(DEFAULT_BLOCK, "Powerlifting")

    def test_single_block_plan(self) -> None:
        plan = single_block_plan(DEFAULT_BLOCK)
        assert plan.session == "Custom Workout"
        assert plan.blocks == (DEFAULT_BLOCK,)


class TestTempoNotation:
    def test_parse(self) -> None:
        assert parse_tempo(" 4-1-1 ") == Tempo(4, 1, 1)
        assert parse_tempo("3 - 0 - 2") == Tempo(3, 0, 2)

    @pytest.mark.parametrize("text", ["4-1", "4-1-1-1", "a-b-c", "4--1-1", "-1-1-1", "", "4-²-1", "٣-1-1"])
    def test_parse_rejects_malformed(self, text) -> None:
        with pytest.raises(PlanValidationError) as exc_info:
            parse_tempo(text)
        assert exc_info.value.field == "tempo"

    def test_format(self) -> None:
        assert format_tempo(Tempo(4, 1, 1)) == "4-1-1"


class TestAnnouncements:
    def test_set_announcement_plural(self) -> None:
        assert announcements.set_announcement(2, 10, 5) == "Set 2, 10 reps. Starting in 5 seconds"

    def test_set_announcement_singular(self) -> None:
        assert announcements.set_announcement(1, 1, 1) == "Set 1, 1 rep. Starting in 1 second"

    def test_phase_words(self) -> None:
        assert announcements.phase_announcement(Phase.ECCENTRIC, ConcentricKeyword.PUSH) is None
        assert announcements.phase_announcement(Phase.PAUSE, ConcentricKeyword.PUSH) == "pause"
        assert announcements.phase_announcement(Phase.CONCENTRIC, ConcentricKeyword.PUSH) == "push"
        assert announcements.phase_announcement(Phase.CONCENTRIC, ConcentricKeyword.PULL) == "pull"

    def test_block_announcement(self) -> None:
        assert announcements.block_announcement("Squat", 2, 3) == "Next: Squat, block 2 of 3"
