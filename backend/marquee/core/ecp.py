"""Roku External Control Protocol (ECP) executor.

Carries out a PlaybackCommand against one Roku over HTTP:

- DeepLinkCommand  -> POST /launch/{channelId}?{params}
- ActionSequence   -> each action in order (launch, keypress, type, wait)

Steps run strictly in order because each one depends on the screen left by
the previous step. The first failing step aborts the rest; nothing is
retried or rolled back, since repeating a keypress on a stateful device is
not safe.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import assert_never
from urllib.parse import quote

import httpx

from .commands import (
    Action,
    ActionSequence,
    DeepLinkCommand,
    KeypressAction,
    LaunchAction,
    PlaybackCommand,
    TypeAction,
    WaitAction,
)

logger = logging.getLogger("marquee.ecp")

ROKU_ECP_PORT = 8060

# Delay between remote keypresses so the device drains its input buffer.
KEYPRESS_DELAY_MS = 100

# Delay between literal characters when typing text.
CHAR_DELAY_MS = 50

DEFAULT_REQUEST_TIMEOUT = 10.0


class CommandExecutionError(Exception):
    """A playback command failed part-way through.

    Attributes:
        step: 1-based index of the failing step within the command.
        action: The action (or deep link) that failed.
        status_code: HTTP status from the device, None for transport errors.
    """

    def __init__(
        self,
        message: str,
        step: int | None = None,
        action: Action | DeepLinkCommand | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.step = step
        self.action = action
        self.status_code = status_code


def resolve_device_base(
    device: str | None,
    devices: Mapping[str, str] | None = None,
    default_ip: str | None = None,
) -> str:
    """Resolve a device name, host/IP, or URL into an ECP base URL.

    Examples:
        resolve_device_base("living_room", {"living_room": "10.0.0.5"}) -> "http://10.0.0.5:8060"
        resolve_device_base("10.0.0.7") -> "http://10.0.0.7:8060"
        resolve_device_base("http://roku.lan:8060/") -> "http://roku.lan:8060"
    """
    target = device or default_ip
    if not target:
        raise ValueError("No Roku device given and no default device configured")
    if devices and target in devices:
        target = devices[target]
    if target.startswith(("http://", "https://")):
        return target.rstrip("/")
    if ":" in target:
        return f"http://{target}"
    return f"http://{target}:{ROKU_ECP_PORT}"


def literal_keycode(char: str) -> str | None:
    """Map a character to its ECP literal keypress code, or None if unsupported.

    Letters of any script are upper-cased and percent-encoded as UTF-8, so
    "é" becomes "Lit_%C3%89". A letter whose upper case is more than one
    character (e.g. "ß") is sent unchanged.
    """
    if char == " ":
        return "Lit_%20"
    if char.isalpha():
        upper = char.upper()
        return f"Lit_{quote(upper if len(upper) == 1 else char)}"
    if char.isascii() and char.isdigit():
        return f"Lit_{char}"
    return None


class EcpExecutor:
    """Executes playback commands against a Roku's ECP endpoint."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        keypress_delay_ms: int = KEYPRESS_DELAY_MS,
        char_delay_ms: int = CHAR_DELAY_MS,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.http_client = http_client
        self.keypress_delay_ms = keypress_delay_ms
        self.char_delay_ms = char_delay_ms
        self.timeout = timeout
        self._sleep = sleep

    async def execute(self, command: PlaybackCommand, device_base: str) -> None:
        """Execute a deep link or action sequence.

        Raises:
            CommandExecutionError: On the first non-2xx response or transport error.
        """
        if isinstance(command, DeepLinkCommand):
            logger.debug("Executing deep link: channel=%s params=%s", command.channel_id, command.params)
            await self._post(_launch_url(device_base, command.channel_id, command.params), 1, command)
        elif isinstance(command, ActionSequence):
            await self.execute_actions(command.actions, device_base)
        else:
            assert_never(command)

    async def execute_actions(self, actions: Sequence[Action], device_base: str) -> None:
        """Execute raw actions in order, stopping at the first failure."""
        logger.debug("Executing action sequence with %d steps", len(actions))
        for index, action in enumerate(actions, 1):
            logger.debug("Action %d/%d: %s", index, len(actions), action)
            await self._run_action(action, index, device_base)

    async def device_info(self, device_base: str) -> str:
        """Probe the device identity (raw XML body of /query/device-info)."""
        try:
            response = await self.http_client.get(f"{device_base}/query/device-info", timeout=self.timeout)
        except httpx.RequestError as e:
            raise CommandExecutionError(f"Roku connection failed: {e}") from e
        if not 200 <= response.status_code < 300:
            raise CommandExecutionError(
                f"Roku returned status {response.status_code}.", status_code=response.status_code
            )
        return response.text

    async def _run_action(self, action: Action, step: int, device_base: str) -> None:
        if isinstance(action, LaunchAction):
            await self._post(_launch_url(device_base, action.channel_id, action.params), step, action)
        elif isinstance(action, KeypressAction):
            for _ in range(action.count):
                await self._post(f"{device_base}/keypress/{action.key.value}", step, action)
                await self._sleep(self.keypress_delay_ms / 1000)
        elif isinstance(action, TypeAction):
            for char in action.text:
                code = literal_keycode(char)
                if code is None:
                    logger.warning("Unsupported character for typing: %r", char)
                    continue
                await self._post(f"{device_base}/keypress/{code}", step, action)
                await self._sleep(self.char_delay_ms / 1000)
        elif isinstance(action, WaitAction):
            await self._sleep(action.milliseconds / 1000)
        else:
            assert_never(action)

    async def _post(self, url: str, step: int, action: Action | DeepLinkCommand) -> None:
        try:
            response = await self.http_client.post(url, timeout=self.timeout)
        except httpx.RequestError as e:
            logger.error("ECP request to %s failed at step %d: %s", url, step, e)
            raise CommandExecutionError(
                f"Step {step} ({action.type}) failed: Roku connection failed: {e}",
                step=step,
                action=action,
            ) from e

        if not 200 <= response.status_code < 300:
            logger.error("ECP request failed: %s, response code: %s", url, response.status_code)
            raise CommandExecutionError(
                f"Step {step} ({action.type}) failed: Roku returned status {response.status_code}.",
                step=step,
                action=action,
                status_code=response.status_code,
            )
        logger.debug("ECP request successful: %s", url)


def _launch_url(device_base: str, channel_id: str, params: str) -> str:
    url = f"{device_base}/launch/{channel_id}"
    return f"{url}?{params}" if params else url
