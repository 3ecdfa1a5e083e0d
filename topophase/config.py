# -*- coding: utf-8 -*-
"""
Processing Configuration - Options of a topographic phase removal run.

``TopoPhaseRemovalConfig`` holds the user-facing parameters and validates
them on construction, so configuration mistakes surface before the first
tile is processed. Configurations can be built directly, from a plain
mapping, or from a YAML file::

    orbit_degree: 3
    dem_name: SRTM 3Sec
    dem_directory: /data/srtm
    tile_extension_percent: "100"
    output_elevation: true
    geoid_path: /data/geoids/egm96-15.pgm

Dependencies
------------
PyYAML

Author
------
geoint.org

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-18

Modified
--------
2026-10-18
"""

# Standard library
import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

# Third-party
import yaml

# topophase internal
from topophase.exceptions import ConfigurationError


@dataclass(frozen=True)
class TopoPhaseRemovalConfig:
    """Parameters of topographic phase removal.

    Parameters
    ----------
    orbit_degree : int
        Orbit interpolation polynomial degree, in ``(1, 10]``. Default 3.
    dem_name : str
        Built-in tiled DEM, used when no external file is set.
        Default ``'SRTM 3Sec'``.
    dem_directory : str, optional
        Root directory of the built-in DEM's tiles.
    external_dem_file : str, optional
        Path of an external DEM file; takes precedence over ``dem_name``.
    external_dem_no_data_value : float
        No-data value of the external DEM. Default 0.
    tile_extension_percent : str
        Integer percentage, as text, by which the height range and the
        range-sampling window are extended. Default ``'100'``.
    topo_phase_band_name : str
        Base name of the synthesized phase band. Default ``'topo_phase'``.
    output_elevation : bool
        Also write the radar-coded elevation per pair. Default False.
    geoid_path : str, optional
        EGM96 geoid grid (``.pgm``). When set, DEM heights are converted
        from mean sea level to heights above the WGS-84 ellipsoid.

    Raises
    ------
    ConfigurationError
        If any value is out of range or malformed.
    """

    orbit_degree: int = 3
    dem_name: str = 'SRTM 3Sec'
    dem_directory: Optional[str] = None
    external_dem_file: Optional[str] = None
    external_dem_no_data_value: float = 0.0
    tile_extension_percent: str = '100'
    topo_phase_band_name: str = 'topo_phase'
    output_elevation: bool = False
    geoid_path: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.orbit_degree, bool) \
                or not isinstance(self.orbit_degree, int) \
                or not 1 < self.orbit_degree <= 10:
            raise ConfigurationError(
                f"orbit_degree must be an integer in (1, 10], "
                f"got {self.orbit_degree!r}"
            )
        if not self.topo_phase_band_name:
            raise ConfigurationError("topo_phase_band_name must not be empty")
        if not self.external_dem_file and not self.dem_name:
            raise ConfigurationError(
                "Either dem_name or external_dem_file must be set"
            )
        try:
            float(self.external_dem_no_data_value)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"external_dem_no_data_value must be numeric, "
                f"got {self.external_dem_no_data_value!r}"
            ) from None
        # Validates the percentage eagerly.
        self.extension_percent

    @property
    def extension_percent(self) -> int:
        """``tile_extension_percent`` parsed as a non-negative integer."""
        try:
            pct = int(str(self.tile_extension_percent).strip())
        except ValueError:
            raise ConfigurationError(
                f"tile_extension_percent must be an integer, "
                f"got {self.tile_extension_percent!r}"
            ) from None
        if pct < 0:
            raise ConfigurationError(
                f"tile_extension_percent must be >= 0, got {pct}"
            )
        return pct

    @property
    def extension_factor(self) -> float:
        """``1 + extension_percent / 100``."""
        return 1.0 + self.extension_percent / 100.0

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> 'TopoPhaseRemovalConfig':
        """Build a configuration from a mapping, rejecting unknown keys."""
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration key(s): {', '.join(unknown)}"
            )
        return cls(**dict(values))

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'TopoPhaseRemovalConfig':
        """Load a configuration from a YAML file.

        Raises
        ------
        ConfigurationError
            If the file is not a YAML mapping or holds invalid values.
        """
        with open(path, 'r') as f:
            try:
                values = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Cannot parse configuration {path}: {e}"
                ) from e
        if values is None:
            values = {}
        if not isinstance(values, Mapping):
            raise ConfigurationError(
                f"Configuration {path} must be a mapping, "
                f"got {type(values).__name__}"
            )
        return cls.from_dict(values)
