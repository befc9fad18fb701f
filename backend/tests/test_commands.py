"""Tests for the playback command model."""

import pytest

from marquee.core.commands import (
    ActionSequence,
    DeepLinkCommand,
    KeypressAction,
    LaunchAction,
    RokuKey,
    TypeAction,
    WaitAction,
)


class TestRokuKey:
    def test_values_are_ecp_names(self) -> None:
        assert RokuKey.SELECT.value == "Select"
        assert RokuKey.PLAY.value == "Play"
        assert RokuKey.INSTANT_REPLAY.value == "InstantReplay"
        assert RokuKey.BACKSPACE.value == "Backspace"

    def test_all_remote_keys_present(self) -> None:
        assert {k.value for k in RokuKey} == {
            "Home", "Up", "Down", "Left", "Right", "Select", "Back", "Backspace",
            "Play", "Pause", "Rev", "Fwd", "InstantReplay", "Info", "Search",
        }


class TestActions:
    def test_action_discriminators(self) -> None:
        assert LaunchAction(channel_id="12").type == "launch"
        assert KeypressAction(key=RokuKey.HOME).type == "keypress"
        assert TypeAction(text="abc").type == "type"
        assert WaitAction(milliseconds=0).type == "wait"

    def test_keypress_defaults_to_single_press(self) -> None:
        assert KeypressAction(key=RokuKey.SELECT).count == 1

    def test_keypress_count_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            KeypressAction(key=RokuKey.SELECT, count=0)

    def test_wait_must_be_non_negative(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            WaitAction(milliseconds=-5)

    def test_launch_params_default_empty(self) -> None:
        assert LaunchAction(channel_id="12").params == ""


class TestCommands:
    def test_deep_link(self) -> None:
        command = DeepLinkCommand(channel_id="44191", params="Command=PlayNow&ItemIds=541")
        assert command.type == "deep_link"

    def test_sequence_requires_actions(self) -> None:
        with pytest.raises(ValueError, match="at least one action"):
            ActionSequence(actions=())

    def test_sequence_requires_launch(self) -> None:
        with pytest.raises(ValueError, match="launch action"):
            ActionSequence(actions=(WaitAction(milliseconds=100), KeypressAction(key=RokuKey.SELECT)))

    def test_sequence_with_launch(self) -> None:
        command = ActionSequence(actions=(LaunchAction(channel_id="12"),))
        assert command.type == "action_sequence"
        assert len(command.actions) == 1
