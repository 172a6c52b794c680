"""Monochrome framebuffer for the CHIP-8 interpreter."""

WIDTH = 64
HEIGHT = 32
SPRITE_WIDTH = 8


class Framebuffer:
    """64x32 one-bit pixels stored row-major, one byte per pixel."""

    def __init__(self, width: int = WIDTH, height: int = HEIGHT):
        self.width = width
        self.height = height
        self._pixels = bytearray(width * height)
        self.dirty: bool = False

    def clear(self) -> None:
        """Turn every pixel off."""
        self._pixels = bytearray(self.width * self.height)
        self.dirty = True

    def reset(self) -> None:
        """Blank the screen without requesting a redraw."""
        self._pixels = bytearray(self.width * self.height)
        self.dirty = False

    def get_pixel(self, x: int, y: int) -> int:
        return self._pixels[y * self.width + x]

    def draw_sprite(self, x: int, y: int, sprite: bytes) -> bool:
        """XOR a sprite onto the screen, wrapping at the edges.

        Each byte of `sprite` is one row, most significant bit leftmost.
        Returns True if any lit pixel was turned off.
        """
        origin_x = x % self.width
        origin_y = y % self.height
        collision = False
        for row, bits in enumerate(sprite):
            py = (origin_y + row) % self.height
            for col in range(SPRITE_WIDTH):
                if not bits & (0x80 >> col):
                    continue
                idx = py * self.width + (origin_x + col) % self.width
                if self._pixels[idx]:
                    collision = True
                self._pixels[idx] ^= 1
        self.dirty = True
        return collision

    def clear_dirty(self) -> None:
        """Acknowledge a redraw."""
        self.dirty = False

    def rows(self, on: str = "#", off: str = ".") -> list[str]:
        """Render the screen as one string per row."""
        return [
            "".join(
                on if self._pixels[y * self.width + x] else off
                for x in range(self.width)
            )
            for y in range(self.height)
        ]

    def snapshot(self) -> bytes:
        """Return a copy of the pixel array."""
        return bytes(self._pixels)
