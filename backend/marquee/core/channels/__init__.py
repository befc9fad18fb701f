# Roku channel plugins

from .base import DEFAULT_LAUNCH_WAIT_MS, ChannelPlugin
from .emby import EMBY_CHANNEL_ID, EmbyChannel, EmbySearchError
from .registry import ChannelRegistry, UnknownChannelError, build_registry
from .streaming import (
    APPLE_TV_PLUS,
    DISNEY_PLUS,
    HBO_MAX,
    HULU,
    NETFLIX,
    PRIME_VIDEO,
    PRIME_VIDEO_MARKER,
    STREAMING_CHANNELS,
    StreamingChannel,
    build_launch_sequence,
)

__all__ = [
    "APPLE_TV_PLUS",
    "DEFAULT_LAUNCH_WAIT_MS",
    "DISNEY_PLUS",
    "EMBY_CHANNEL_ID",
    "HBO_MAX",
    "HULU",
    "NETFLIX",
    "PRIME_VIDEO",
    "PRIME_VIDEO_MARKER",
    "STREAMING_CHANNELS",
    "ChannelPlugin",
    "ChannelRegistry",
    "EmbyChannel",
    "EmbySearchError",
    "StreamingChannel",
    "UnknownChannelError",
    "build_launch_sequence",
    "build_registry",
]
