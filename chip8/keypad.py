"""Hex keypad state for the CHIP-8 interpreter."""

from typing import Optional

from .errors import InvalidKey

NUM_KEYS = 16


class Keypad:
    """Pressed/released state of keys 0x0-0xF, set by the host."""

    def __init__(self):
        self._keys: list[bool] = [False] * NUM_KEYS

    def _check_key(self, key: int) -> None:
        if key < 0 or key >= NUM_KEYS:
            raise InvalidKey(f"Key index out of range: {key}")

    def set(self, key: int, pressed: bool) -> None:
        self._check_key(key)
        self._keys[key] = bool(pressed)

    def is_pressed(self, key: int) -> bool:
        return self._keys[key & 0xF]

    def first_pressed(self) -> Optional[int]:
        """Lowest-numbered pressed key, or None."""
        for key, pressed in enumerate(self._keys):
            if pressed:
                return key
        return None

    def snapshot(self) -> list[bool]:
        return list(self._keys)

    def reset(self) -> None:
        self._keys = [False] * NUM_KEYS
