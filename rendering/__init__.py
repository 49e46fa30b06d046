"""Window layout and image window hosting."""

from .cascade_layout import center_position, plan_positions

__all__ = ['center_position', 'plan_positions']
