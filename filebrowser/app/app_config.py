"""App components."""

from pydantic import BaseModel, Field

from ..common.diagnostics import Diagnostics
from ..prefs.store import PreferenceStore
from .browser_controller import BrowserController
from .launcher import open_with_default_app


def _default_presets() -> dict[str, str]:
    return {
        "All files": "*",
        "Scripts": "*.py",
        "Images": "*.png;*.jpg;*.jpeg;*.gif",
    }


class AppConfig(BaseModel):
    """User-editable app configuration."""

    pattern_presets: dict[str, str] = Field(
        default_factory=_default_presets, description="Quick pattern buttons, label to pattern string."
    )
    path_display_width: int = Field(default=50, ge=8, description="Longest directory path shown in the header.")


def build_controller(store: PreferenceStore, diagnostics: Diagnostics | None = None) -> BrowserController:
    """Build the browser controller."""
    return BrowserController(store=store, diagnostics=diagnostics, launcher=open_with_default_app)
