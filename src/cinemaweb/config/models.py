"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, cinemaweb.toml only contains
overrides. A fresh checkout needs only ``[data] source``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- cinemaweb.toml sections ---


class DataConfig(BaseModel):
    """[data] section."""

    model_config = {"frozen": True}

    source: str | None = None
    timeout: float = 10.0


class ViewportConfig(BaseModel):
    """[viewport] section."""

    model_config = {"frozen": True}

    width: float = 960.0
    height: float = 600.0

    @property
    def center(self) -> tuple[float, float]:
        return self.width / 2, self.height / 2


class LayoutConfig(BaseModel):
    """[layout] section: force parameters and energy schedule."""

    model_config = {"frozen": True}

    link_distance: float = 100.0
    charge_strength: float = -300.0
    charge_distance_max: float | None = None
    collision_radius: float = 30.0
    alpha_min: float = Field(default=0.001, gt=0.0, lt=1.0)
    alpha_decay: float | None = Field(default=None, ge=0.0, le=1.0)
    velocity_decay: float = Field(default=0.4, ge=0.0, le=1.0)
    restart_alpha: float = 1.0
    resize_alpha: float = 0.3
    drag_alpha_target: float = 0.3
    max_ticks: int = Field(default=1000, gt=0)
    seed: int | None = None


class CinemaConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    data: DataConfig = Field(default_factory=DataConfig)
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
