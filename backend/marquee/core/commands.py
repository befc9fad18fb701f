"""Roku playback commands and the remote-control actions they are made of.

A channel plugin turns a media reference into one of two command shapes:

- DeepLinkCommand: a single ECP launch request starts playback.
- ActionSequence: an ordered script of launch, wait, keypress and type steps.

The executor only looks at these shapes, never at which channel built them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

# --- Remote keys ---


class RokuKey(str, Enum):
    """Named Roku remote keys, valued with their ECP names."""

    HOME = "Home"
    UP = "Up"
    DOWN = "Down"
    LEFT = "Left"
    RIGHT = "Right"
    SELECT = "Select"
    BACK = "Back"
    BACKSPACE = "Backspace"
    PLAY = "Play"
    PAUSE = "Pause"
    REV = "Rev"
    FWD = "Fwd"
    INSTANT_REPLAY = "InstantReplay"
    INFO = "Info"
    SEARCH = "Search"


# --- Actions ---


@dataclass(frozen=True)
class LaunchAction:
    """Action to launch a Roku channel with deep link params."""

    channel_id: str
    params: str = ""
    type: Literal["launch"] = "launch"


@dataclass(frozen=True)
class KeypressAction:
    """Action to press a remote key one or more times."""

    key: RokuKey
    count: int = 1
    type: Literal["keypress"] = "keypress"

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError(f"Keypress count must be at least 1, got {self.count}")


@dataclass(frozen=True)
class TypeAction:
    """Action to type literal text one character at a time."""

    text: str
    type: Literal["type"] = "type"


@dataclass(frozen=True)
class WaitAction:
    """Action to wait before next step."""

    milliseconds: int
    type: Literal["wait"] = "wait"

    def __post_init__(self) -> None:
        if self.milliseconds < 0:
            raise ValueError(f"Wait duration must be non-negative, got {self.milliseconds}")


Action = LaunchAction | KeypressAction | TypeAction | WaitAction


# --- Commands ---


@dataclass(frozen=True)
class DeepLinkCommand:
    """A single launch request is enough to start playback."""

    channel_id: str
    params: str = ""
    type: Literal["deep_link"] = "deep_link"


@dataclass(frozen=True)
class ActionSequence:
    """A sequence of actions to play content on Roku."""

    actions: tuple[Action, ...]
    type: Literal["action_sequence"] = "action_sequence"

    def __post_init__(self) -> None:
        if not self.actions:
            raise ValueError("An action sequence needs at least one action")
        if not any(isinstance(action, LaunchAction) for action in self.actions):
            raise ValueError("An action sequence must include a launch action")


PlaybackCommand = DeepLinkCommand | ActionSequence
