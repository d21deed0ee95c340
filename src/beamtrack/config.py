"""Configuration management using Pydantic settings."""

import math

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GuidanceSettings(BaseSettings):
    """Tuning constants for the tracker, solver, and engagement loop.

    Loaded from ``BEAMTRACK_*`` environment variables, but normally built
    directly and handed to the components that need it so tests can vary
    each constant independently.
    """

    model_config = SettingsConfigDict(
        env_prefix="BEAMTRACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Simulation clock
    ticks_per_second: float = Field(60.0, gt=0)

    # Weapons
    projectile_speed: float = Field(1000.0, gt=0)  # m/s
    blast_radius: float = Field(20.0, gt=0)        # munition self-destruct distance
    launch_missiles: bool = True
    gun_index: int = 0
    missile_index: int = 1

    # Tracker
    staleness_ticks: int = Field(30, ge=1)
    gate_radius: float = Field(50.0, gt=0)         # gate side length, meters

    # Designation / engagement
    sticky_ticks: int = Field(1, ge=0)
    radar_timeout_ticks: int = Field(30, ge=0)
    engage_range: float = Field(10_000.0, gt=0)
    fire_range: float = Field(1000.0, gt=0)
    close_range: float = Field(500.0, gt=0)

    # Airframe
    max_forward_acceleration: float = Field(60.0, gt=0)
    aim_offset: float = 1.333333  # gun sits this far behind the hull center

    # Sensor sweeps
    search_beam_width: float = math.pi / 4.0
    long_range_beam_width: float = math.pi / 8.0
    min_focus_beam_width: float = 0.01
    sensor_min_range: float = 25.0
    search_max_range: float = 10_000.0
    long_range_max_range: float = 1_000_000.0

    # Munition pursuit
    missile_turn_gain: float = 10.0
    missile_thrust_gain: float = 100.0

    @model_validator(mode="after")
    def _tracks_expire_before_radar_timeout(self) -> "GuidanceSettings":
        # The radar timeout only counts once the track table is empty
        if self.staleness_ticks > self.radar_timeout_ticks:
            raise ValueError(
                f"staleness_ticks ({self.staleness_ticks}) must not exceed "
                f"radar_timeout_ticks ({self.radar_timeout_ticks})"
            )
        return self

    @property
    def tick_seconds(self) -> float:
        return 1.0 / self.ticks_per_second


def get_settings(**overrides) -> GuidanceSettings:
    """Build a settings object, applying keyword overrides on top of env."""
    return GuidanceSettings(**overrides)
