"""Hex keypad state for the CHIP-8 interpreter."""

from typing import Iterable, Optional

NUM_KEYS = 16


class Keypad:
    """Sixteen key states written by the host and read by the interpreter."""

    def __init__(self):
        self._keys: list[bool] = [False] * NUM_KEYS

    def _check_key(self, key: int) -> None:
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key out of range: {key}")

    def press(self, key: int) -> None:
        self._check_key(key)
        self._keys[key] = True

    def release(self, key: int) -> None:
        self._check_key(key)
        self._keys[key] = False

    def set_state(self, key: int, pressed: bool) -> None:
        self._check_key(key)
        self._keys[key] = bool(pressed)

    def update(self, states: Iterable[bool]) -> None:
        """Overwrite all sixteen key states at once."""
        states = [bool(s) for s in states]
        if len(states) != NUM_KEYS:
            raise ValueError(f"Expected {NUM_KEYS} key states, got {len(states)}")
        self._keys = states

    def is_pressed(self, key: int) -> bool:
        """Check a key; only the low nibble of `key` is used."""
        return self._keys[key & 0x0F]

    def first_pressed(self) -> Optional[int]:
        """Return the lowest pressed key, or None."""
        for key, pressed in enumerate(self._keys):
            if pressed:
                return key
        return None

    def reset(self) -> None:
        self._keys = [False] * NUM_KEYS

    def snapshot(self) -> list[bool]:
        return list(self._keys)
