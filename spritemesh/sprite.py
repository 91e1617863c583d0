from dataclasses import dataclass
from typing import Tuple

from .errors import InvalidConfigurationError


@dataclass(frozen=True)
class SpriteMetrics:
    """
    What the host knows about a sprite's texture.

    Attributes:
        texture_width, texture_height: full texture size in pixels
        texel_rect: (x, y, width, height) of the sprite on the texture, in
            pixels, origin at the bottom-left
        pixels_per_unit: texture pixels per world unit
        bounds: (min_x, min_y, max_x, max_y) physical bounds of the sprite in
            mesh-local (un-rotated) space
    """
    texture_width: float
    texture_height: float
    texel_rect: Tuple[float, float, float, float]
    pixels_per_unit: float
    bounds: Tuple[float, float, float, float]

    @classmethod
    def from_texture(cls, texture_size, texel_rect=None, pixels_per_unit=100.0, pivot=(0.5, 0.5)):
        """Derives local physical bounds from the texel rect, placing ``pivot`` at the origin."""
        tex_w, tex_h = texture_size
        if texel_rect is None:
            texel_rect = (0, 0, tex_w, tex_h)
        if pixels_per_unit <= 0:
            raise InvalidConfigurationError('sprite_metrics', f"pixels_per_unit must be positive, got {pixels_per_unit}")
        width = texel_rect[2] / pixels_per_unit
        height = texel_rect[3] / pixels_per_unit
        min_x = -pivot[0] * width
        min_y = -pivot[1] * height
        return cls(
            texture_width=tex_w,
            texture_height=tex_h,
            texel_rect=tuple(texel_rect),
            pixels_per_unit=pixels_per_unit,
            bounds=(min_x, min_y, min_x + width, min_y + height),
        )

    @property
    def bounds_min(self):
        return self.bounds[0], self.bounds[1]

    @property
    def physical_size(self):
        return self.bounds[2] - self.bounds[0], self.bounds[3] - self.bounds[1]

    @property
    def bounds_center(self):
        return (self.bounds[0] + self.bounds[2]) / 2, (self.bounds[1] + self.bounds[3]) / 2
