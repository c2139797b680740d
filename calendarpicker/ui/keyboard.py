"""Keyboard input: key codes, key events and a raw terminal reader."""

import asyncio
import logging
import sys
from collections.abc import Awaitable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

logger = logging.getLogger(__name__)


class KeyCode(Enum):
    """Key codes understood by the calendar."""

    LEFT_ARROW = "left"
    RIGHT_ARROW = "right"
    UP_ARROW = "up"
    DOWN_ARROW = "down"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    ENTER = "enter"
    SPACE = "space"
    ESCAPE = "escape"
    CHARACTER = "character"
    UNKNOWN = "unknown"

    @classmethod
    def from_key_name(cls, name: str) -> "KeyCode":
        """Map a DOM-style ``KeyboardEvent.key`` name to a KeyCode.

        Example:
            >>> KeyCode.from_key_name("PageDown")
            <KeyCode.PAGE_DOWN: 'page_down'>
        """
        if name in _KEY_NAMES:
            return _KEY_NAMES[name]
        if len(name) == 1 and name.isprintable():
            return cls.CHARACTER
        return cls.UNKNOWN


_KEY_NAMES = {
    "ArrowLeft": KeyCode.LEFT_ARROW,
    "ArrowRight": KeyCode.RIGHT_ARROW,
    "ArrowUp": KeyCode.UP_ARROW,
    "ArrowDown": KeyCode.DOWN_ARROW,
    "Home": KeyCode.HOME,
    "End": KeyCode.END,
    "PageUp": KeyCode.PAGE_UP,
    "PageDown": KeyCode.PAGE_DOWN,
    "Enter": KeyCode.ENTER,
    " ": KeyCode.SPACE,
    "Spacebar": KeyCode.SPACE,
    "Escape": KeyCode.ESCAPE,
    "Esc": KeyCode.ESCAPE,
}


@dataclass(frozen=True)
class KeyEvent:
    """One key press: a code, the Shift modifier and, for plain characters, the character."""

    code: KeyCode
    shift: bool = False
    char: Optional[str] = None

    @classmethod
    def from_key_name(cls, name: str, shift: bool = False) -> "KeyEvent":
        code = KeyCode.from_key_name(name)
        return cls(code, shift, name if code is KeyCode.CHARACTER else None)


UNKNOWN_KEY = KeyEvent(KeyCode.UNKNOWN)

KeyEventCallback = Union[Callable[[KeyEvent], None], Callable[[KeyEvent], Awaitable[None]]]

# CSI final bytes (after "ESC[" and optional "1;<mod>") for cursor keys
_CSI_LETTERS = {
    "A": KeyCode.UP_ARROW,
    "B": KeyCode.DOWN_ARROW,
    "C": KeyCode.RIGHT_ARROW,
    "D": KeyCode.LEFT_ARROW,
    "H": KeyCode.HOME,
    "F": KeyCode.END,
}

# "ESC[<n>~" editing keys
_CSI_TILDE = {
    "1": KeyCode.HOME,
    "7": KeyCode.HOME,
    "4": KeyCode.END,
    "8": KeyCode.END,
    "5": KeyCode.PAGE_UP,
    "6": KeyCode.PAGE_DOWN,
}

# xterm modifier parameter values that include Shift
_SHIFT_MODIFIERS = {"2", "4", "6", "8"}

_FALLBACK_WORDS = {
    "left": KeyEvent(KeyCode.LEFT_ARROW),
    "right": KeyEvent(KeyCode.RIGHT_ARROW),
    "up": KeyEvent(KeyCode.UP_ARROW),
    "down": KeyEvent(KeyCode.DOWN_ARROW),
    "home": KeyEvent(KeyCode.HOME),
    "end": KeyEvent(KeyCode.END),
    "pgup": KeyEvent(KeyCode.PAGE_UP),
    "pgdn": KeyEvent(KeyCode.PAGE_DOWN),
    "shift+pgup": KeyEvent(KeyCode.PAGE_UP, shift=True),
    "shift+pgdn": KeyEvent(KeyCode.PAGE_DOWN, shift=True),
    "enter": KeyEvent(KeyCode.ENTER),
    "space": KeyEvent(KeyCode.SPACE),
    "esc": KeyEvent(KeyCode.ESCAPE),
    "escape": KeyEvent(KeyCode.ESCAPE),
    "exit": KeyEvent(KeyCode.ESCAPE),
}

# msvcrt scan codes following a b"\xe0" or b"\x00" prefix
_WINDOWS_SCAN_CODES = {
    "H": KeyCode.UP_ARROW,
    "P": KeyCode.DOWN_ARROW,
    "M": KeyCode.RIGHT_ARROW,
    "K": KeyCode.LEFT_ARROW,
    "G": KeyCode.HOME,
    "O": KeyCode.END,
    "I": KeyCode.PAGE_UP,
    "Q": KeyCode.PAGE_DOWN,
}


def parse_escape_sequence(sequence: str) -> KeyEvent:
    """Parse a terminal escape sequence without its leading ``ESC``.

    Args:
        sequence: e.g. ``"[A"``, ``"[1;2D"``, ``"[5~"``, ``"[6;2~"`` or ``"OH"``

    Returns:
        The matching KeyEvent, or an UNKNOWN event
    """
    if sequence.startswith("O") and len(sequence) == 2:
        code = _CSI_LETTERS.get(sequence[1])
        return KeyEvent(code) if code else UNKNOWN_KEY

    if not sequence.startswith("["):
        return UNKNOWN_KEY

    body = sequence[1:]
    if not body:
        return UNKNOWN_KEY

    if body.endswith("~"):
        params = body[:-1].split(";")
        code = _CSI_TILDE.get(params[0])
        shift = len(params) > 1 and params[1] in _SHIFT_MODIFIERS
        return KeyEvent(code, shift) if code else UNKNOWN_KEY

    code = _CSI_LETTERS.get(body[-1])
    if code is None:
        return UNKNOWN_KEY
    params = body[:-1].split(";")
    shift = len(params) > 1 and params[1] in _SHIFT_MODIFIERS
    return KeyEvent(code, shift)


class KeyboardHandler:
    """Reads raw terminal input and turns it into KeyEvents."""

    def __init__(self) -> None:
        """Initialize keyboard handler."""
        self._running = False
        self._event_callback: Optional[KeyEventCallback] = None

        # Platform-specific setup
        self._setup_platform_input()

        logger.debug("Keyboard handler initialized")

    def _setup_platform_input(self) -> None:
        """Set up platform-specific keyboard input handling."""
        self._fallback_mode = False
        self._old_settings: Optional[list[Any]] = None

        try:
            if sys.platform == "win32":
                import msvcrt  # noqa: PLC0415

                self._getch = msvcrt.getwch
                self._kbhit = msvcrt.kbhit
            else:

                def _getch() -> str:
                    """Read a single character in raw mode."""
                    return sys.stdin.read(1)

                def _kbhit() -> bool:
                    """Check for available input using select."""
                    import select  # noqa: PLC0415

                    return select.select([sys.stdin], [], [], 0) == ([sys.stdin], [], [])

                self._getch = _getch
                self._kbhit = _kbhit

        except ImportError as e:
            logger.warning(f"Could not import platform-specific keyboard modules: {e}")
            self._setup_fallback_input()

    def _setup_terminal(self) -> None:
        """Set up terminal for raw input mode on Unix systems."""
        if sys.platform == "win32" or self._fallback_mode:
            return
        try:
            import termios  # noqa: PLC0415

            fd = sys.stdin.fileno()
            self._old_settings = termios.tcgetattr(fd)

            new_settings = termios.tcgetattr(fd)
            new_settings[3] &= ~(termios.ICANON | termios.ECHO)
            new_settings[6][termios.VMIN] = 0  # Don't wait for characters
            new_settings[6][termios.VTIME] = 1  # Wait 0.1 seconds for input

            termios.tcsetattr(fd, termios.TCSAFLUSH, new_settings)
            logger.debug("Terminal set to raw input mode with timeout")

        except Exception as e:
            logger.warning(f"Could not set terminal to raw mode: {e}")
            self._setup_fallback_input()

    def _setup_fallback_input(self) -> None:
        """Setup fallback input method if raw mode fails."""
        logger.info("Using fallback input method - press Enter after each key")
        self._fallback_mode = True

        def _getch_fallback() -> str:
            try:
                return input("Key (left/right/up/down/pgup/pgdn/enter/esc or a letter): ").strip()
            except EOFError:
                return "esc"

        def _kbhit_fallback() -> bool:
            return True  # Always ready in fallback mode

        self._getch = _getch_fallback
        self._kbhit = _kbhit_fallback

    def _restore_terminal(self) -> None:
        """Restore terminal settings on Unix systems."""
        if sys.platform != "win32" and self._old_settings:
            try:
                import termios  # noqa: PLC0415

                fd = sys.stdin.fileno()
                termios.tcsetattr(fd, termios.TCSADRAIN, self._old_settings)

                logger.debug("Terminal settings restored")
            except Exception as e:
                logger.warning(f"Could not restore terminal settings: {e}")

    def parse_key_data(self, key_data: str) -> KeyEvent:
        """Parse raw key data into a KeyEvent.

        Args:
            key_data: Raw key data from input

        Returns:
            Corresponding KeyEvent (UNKNOWN code if unrecognised)
        """
        if not key_data:
            return UNKNOWN_KEY

        if self._fallback_mode:
            return self._parse_fallback_mode(key_data)
        if len(key_data) == 1:
            return self._parse_single_char(key_data)
        if key_data.startswith("\x1b"):
            return parse_escape_sequence(key_data[1:])
        if sys.platform == "win32":
            return self._parse_windows_sequence(key_data)

        return UNKNOWN_KEY

    def _parse_fallback_mode(self, key_data: str) -> KeyEvent:
        """Parse a typed word (or single character) in fallback mode."""
        word = key_data.strip().lower()
        if word in _FALLBACK_WORDS:
            return _FALLBACK_WORDS[word]
        if len(key_data) == 1:
            return self._parse_single_char(key_data)
        if len(word) == 1:
            return KeyEvent(KeyCode.CHARACTER, char=word)
        return UNKNOWN_KEY

    def _parse_single_char(self, key_data: str) -> KeyEvent:
        """Parse a single character input."""
        char_mappings = {
            " ": KeyCode.SPACE,
            "\x1b": KeyCode.ESCAPE,
            "\r": KeyCode.ENTER,
            "\n": KeyCode.ENTER,
        }
        if key_data in char_mappings:
            return KeyEvent(char_mappings[key_data])
        if key_data.isprintable():
            return KeyEvent(KeyCode.CHARACTER, char=key_data)
        return UNKNOWN_KEY

    def _parse_windows_sequence(self, key_data: str) -> KeyEvent:
        """Parse a two-character msvcrt sequence (prefix plus scan code)."""
        if len(key_data) == 2 and key_data[0] in ("\xe0", "\x00"):
            code = _WINDOWS_SCAN_CODES.get(key_data[1])
            if code is not None:
                return KeyEvent(code)
        return UNKNOWN_KEY

    def set_event_handler(self, callback: KeyEventCallback) -> None:
        """Register the callback receiving every recognised KeyEvent."""
        self._event_callback = callback
        logger.debug("Registered key event handler")

    async def start_listening(self) -> None:
        """Start listening for keyboard input."""
        if self._running:
            logger.warning("Keyboard handler already running")
            return

        self._running = True
        self._setup_terminal()

        logger.info("Started keyboard input listening")
        logger.debug(f"Platform: {sys.platform}")

        try:
            await self._input_loop()
        finally:
            self._restore_terminal()
            self._running = False
            logger.info("Stopped keyboard input listening")

    def stop_listening(self) -> None:
        """Stop listening for keyboard input."""
        self._running = False
        logger.debug("Keyboard handler stop requested")

    async def _input_loop(self) -> None:
        """Main input loop for capturing keystrokes."""
        while self._running:
            try:
                if self._fallback_mode:
                    if self._kbhit():
                        key_data = self._getch()
                        if key_data:
                            await self.handle_key_input(key_data)
                    await asyncio.sleep(0.1)
                    continue

                if sys.platform == "win32":
                    if not self._kbhit():
                        await asyncio.sleep(0.05)
                        continue
                    key_data = self._getch()
                    if key_data in ("\xe0", "\x00"):
                        key_data += self._getch()
                elif self._kbhit():
                    key_data = await self._read_key_sequence()
                else:
                    await asyncio.sleep(0.05)
                    continue

                if key_data:
                    await self.handle_key_input(key_data)

            except KeyboardInterrupt:
                logger.info("Keyboard interrupt received")
                break
            except Exception:
                logger.exception("Error in keyboard input loop")
                await asyncio.sleep(0.1)

    async def _read_key_sequence(self) -> str:
        """Read a complete key sequence, handling escape sequences properly."""
        try:
            key_data = self._getch()

            if key_data == "\x1b":
                sequence = key_data

                # With VTIME=1, _getch() returns "" once the sequence is exhausted
                while len(sequence) < 8:
                    next_char = self._getch()
                    if not next_char:
                        break
                    sequence += next_char
                    # Sequences end with a letter or "~" after the "[" / "O" introducer
                    if len(sequence) > 2 and (next_char.isalpha() or next_char == "~"):
                        break

                logger.debug(f"Read escape sequence: {sequence!r}")
                return str(sequence)
            return str(key_data)

        except Exception as e:
            logger.debug(f"Error reading key sequence: {e}")
            return ""

    async def handle_key_input(self, key_data: str) -> None:
        """Parse raw key data and dispatch the resulting KeyEvent.

        Args:
            key_data: Raw key data
        """
        try:
            event = self.parse_key_data(key_data)
            logger.debug(f"Received key_data={key_data!r}, parsed as={event}")

            if event.code is KeyCode.UNKNOWN:
                logger.debug(f"Unknown key sequence: {key_data!r}")
                return

            if self._event_callback is None:
                return

            result = self._event_callback(event)
            if asyncio.iscoroutine(result):
                await result

        except Exception:
            logger.exception("Error handling key input")

    @property
    def is_running(self) -> bool:
        """Check if keyboard handler is currently running."""
        return self._running
