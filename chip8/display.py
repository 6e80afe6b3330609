"""Monochrome framebuffer for the CHIP-8 interpreter."""

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
SPRITE_WIDTH = 8


class Display:
    """64x32 grid of on/off pixels."""

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT):
        self.width = width
        self.height = height
        self._pixels: list[list[bool]] = [[False] * width for _ in range(height)]

    def clear(self) -> None:
        """Turn every pixel off."""
        self._pixels = [[False] * self.width for _ in range(self.height)]

    def pixel(self, x: int, y: int) -> bool:
        return self._pixels[y][x]

    def draw_sprite(self, x: int, y: int, sprite: bytes, wrap: bool = False) -> bool:
        """XOR an 8-pixel-wide sprite onto the screen at (x, y).

        The origin wraps to the screen size. Pixels past the right or bottom
        edge are clipped unless wrap is set.

        Returns:
            True if any lit pixel was turned off
        """
        x0 = x % self.width
        y0 = y % self.height
        collision = False

        for row, bits in enumerate(sprite):
            py = y0 + row
            if py >= self.height:
                if not wrap:
                    break
                py %= self.height

            for col in range(SPRITE_WIDTH):
                if not bits & (0x80 >> col):
                    continue
                px = x0 + col
                if px >= self.width:
                    if not wrap:
                        break
                    px %= self.width

                if self._pixels[py][px]:
                    collision = True
                self._pixels[py][px] = not self._pixels[py][px]

        return collision

    def snapshot(self) -> tuple[tuple[bool, ...], ...]:
        """Return an immutable copy of the framebuffer, row by row."""
        return tuple(tuple(row) for row in self._pixels)

    def to_text(self, on: str = "#", off: str = ".") -> list[str]:
        """Render each row as a string."""
        return ["".join(on if lit else off for lit in row) for row in self._pixels]
