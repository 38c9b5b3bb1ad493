"""Day/night color scheme."""

from enum import Enum
from typing import Dict, Optional

DARK_RGB = "10, 10, 20"
LIGHT_RGB = "255, 255, 255"


class Theme(str, Enum):
    DAY = "day"
    NIGHT = "night"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Theme":
        """Anything other than ``night`` is the day theme."""
        if value is not None and str(value).strip().lower() == cls.NIGHT.value:
            return cls.NIGHT
        return cls.DAY


def preferred_theme(prefers_dark: bool) -> Theme:
    return Theme.NIGHT if prefers_dark else Theme.DAY


def css_variables(theme: Theme) -> Dict[str, str]:
    """CSS custom properties for ``theme``; night swaps the two colors."""
    if theme is Theme.NIGHT:
        return {"--color-dark": LIGHT_RGB, "--color-light": DARK_RGB}
    return {"--color-dark": DARK_RGB, "--color-light": LIGHT_RGB}
