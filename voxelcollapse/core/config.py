"""Generation settings for voxelcollapse.

Settings are frozen Pydantic models, usually loaded from YAML. Structural
validation happens when a model is built; checks that need the tile catalog
(unknown ids, start outside the grid, ...) happen in check_config(), which
the solver calls before creating any state.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .catalog import TileCatalog
from .errors import ConfigError
from .types import Coord


class StartPolicy(Enum):
    """Where the frontier is seeded."""

    CENTER = "center"  # (W // 2, 0, D // 2)
    EXPLICIT = "explicit"  # GeneratorConfig.start_coord


class BoundaryConfig(BaseModel):
    """Forced-tile region along the grid edges."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    tile_id: str | None = None
    x_edges: bool = True
    z_edges: bool = True
    y_bottom: bool = False
    y_top: bool = False
    thickness: int = 1


class UsageLimit(BaseModel):
    """Maximum number of placements of one tile per run."""

    model_config = ConfigDict(frozen=True)

    tile_id: str
    max_count: int = Field(ge=0)
    description: str = ""


class PacingConfig(BaseModel):
    """Advisory pacing for drivers that animate generation."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    delay: float = Field(default=0.1, ge=0)
    batch_size: int = Field(default=1, ge=1)  # steps between suspensions


class GeneratorConfig(BaseModel):
    """Everything a generation run needs besides the catalog."""

    model_config = ConfigDict(frozen=True)

    width: int = 10
    height: int = 10
    depth: int = 5

    start: StartPolicy = StartPolicy.CENTER
    start_coord: Coord | None = None

    boundary: BoundaryConfig = Field(default_factory=BoundaryConfig)

    enforce_limits: bool = True
    limits: tuple[UsageLimit, ...] = ()

    fallback_tile_id: str | None = None  # None = first catalog tile
    pacing: PacingConfig = Field(default_factory=PacingConfig)
    seed: int | None = None

    @property
    def dimensions(self) -> tuple[int, int, int]:
        return (self.width, self.height, self.depth)

    @property
    def total_cells(self) -> int:
        return self.width * self.height * self.depth

    @property
    def start_coordinate(self) -> Coord:
        """The coordinate the frontier is seeded with."""
        if self.start == StartPolicy.EXPLICIT:
            if self.start_coord is None:
                raise ConfigError("Explicit start policy requires start_coord")
            return self.start_coord
        return Coord(self.width // 2, 0, self.depth // 2)

    def fallback_tile(self, catalog: TileCatalog) -> str:
        """Tile used when a cell's candidate domain comes up empty."""
        if self.fallback_tile_id is not None:
            return self.fallback_tile_id
        return catalog.first.id

    def usage_caps(self, catalog: TileCatalog) -> dict[str, int]:
        """Effective caps: each tile's own max_count, overridden by limits."""
        caps = {tile.id: tile.max_count for tile in catalog if tile.max_count is not None}
        for limit in self.limits:
            caps[limit.tile_id] = limit.max_count
        return caps

    def limit_descriptions(self) -> dict[str, str]:
        return {limit.tile_id: limit.description for limit in self.limits if limit.description}

    def with_seed(self, seed: int | None) -> GeneratorConfig:
        """Return a copy with a different seed."""
        return self.model_copy(update={"seed": seed})


def check_config(config: GeneratorConfig, catalog: TileCatalog) -> None:
    """Validate settings against a catalog.

    Raises:
        ConfigError: On the first problem found
    """
    if len(catalog) == 0:
        raise ConfigError("Tile catalog is empty")

    if config.width <= 0 or config.height <= 0 or config.depth <= 0:
        raise ConfigError(
            f"Grid dimensions must be positive, got {config.width}x{config.height}x{config.depth}"
        )

    start = config.start_coordinate
    if not start.in_bounds(*config.dimensions):
        raise ConfigError(f"Start coordinate {start} is outside the grid")

    caps = config.usage_caps(catalog)

    fallback = config.fallback_tile(catalog)
    if fallback not in catalog:
        raise ConfigError(f"Fallback tile '{fallback}' is not in the catalog")
    if config.enforce_limits and fallback in caps:
        raise ConfigError(f"Fallback tile '{fallback}' must not have a usage cap")

    for limit in config.limits:
        if limit.tile_id not in catalog:
            raise ConfigError(f"Usage limit names unknown tile '{limit.tile_id}'")

    boundary = config.boundary
    if boundary.thickness < 0:
        raise ConfigError(f"Boundary thickness must be >= 0, got {boundary.thickness}")
    if boundary.enabled and boundary.tile_id is not None:
        if boundary.tile_id not in catalog:
            raise ConfigError(f"Boundary tile '{boundary.tile_id}' is not in the catalog")
        if config.enforce_limits and boundary.tile_id in caps:
            raise ConfigError(f"Boundary tile '{boundary.tile_id}' must not have a usage cap")


def config_from_dict(data: dict | None) -> GeneratorConfig:
    """Build a GeneratorConfig from parsed YAML/JSON data."""
    try:
        return GeneratorConfig.model_validate(data or {})
    except ValidationError as e:
        raise ConfigError(str(e)) from e


def load_config(path: Path | str) -> GeneratorConfig:
    """Load generator settings from a YAML file."""
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return config_from_dict(data)
