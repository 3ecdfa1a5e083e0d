# -*- coding: utf-8 -*-
"""
Configuration Tests - Validation and loading of processing options.

Dependencies
------------
pytest
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

import pytest

from topophase.config import TopoPhaseRemovalConfig
from topophase.exceptions import ConfigurationError, ValidationError


# ---------------------------------------------------------------------------
# Construction and validation
# ---------------------------------------------------------------------------

class TestTopoPhaseRemovalConfig:
    """Test defaults and eager validation."""

    def test_defaults(self):
        """Test default option values."""
        config = TopoPhaseRemovalConfig()
        assert config.orbit_degree == 3
        assert config.dem_name == 'SRTM 3Sec'
        assert config.external_dem_file is None
        assert config.external_dem_no_data_value == 0.0
        assert config.tile_extension_percent == '100'
        assert config.topo_phase_band_name == 'topo_phase'
        assert config.output_elevation is False
        assert config.geoid_path is None

    def test_extension_factor(self):
        """Test the percentage maps to a multiplicative factor."""
        assert TopoPhaseRemovalConfig().extension_factor == 2.0
        config = TopoPhaseRemovalConfig(tile_extension_percent=' 25 ')
        assert config.extension_percent == 25
        assert config.extension_factor == pytest.approx(1.25)
        assert TopoPhaseRemovalConfig(
            tile_extension_percent='0').extension_factor == 1.0

    @pytest.mark.parametrize('degree', [0, 1, 11, 2.5, '3'])
    def test_bad_orbit_degree(self, degree):
        """Test degrees outside (1, 10] or of the wrong type are rejected."""
        with pytest.raises(ConfigurationError, match="orbit_degree"):
            TopoPhaseRemovalConfig(orbit_degree=degree)

    def test_bool_orbit_degree(self):
        """Test booleans are not accepted as integers."""
        with pytest.raises(ConfigurationError):
            TopoPhaseRemovalConfig(orbit_degree=True)

    def test_degree_bounds(self):
        """Test both ends of the degree range."""
        assert TopoPhaseRemovalConfig(orbit_degree=2).orbit_degree == 2
        assert TopoPhaseRemovalConfig(orbit_degree=10).orbit_degree == 10

    @pytest.mark.parametrize('pct', ['abc', '1.5', ''])
    def test_unparsable_percent(self, pct):
        """Test non-integer percentages fail at construction."""
        with pytest.raises(ConfigurationError, match="must be an integer"):
            TopoPhaseRemovalConfig(tile_extension_percent=pct)

    def test_negative_percent(self):
        """Test negative percentages are rejected."""
        with pytest.raises(ConfigurationError, match=">= 0"):
            TopoPhaseRemovalConfig(tile_extension_percent='-5')

    def test_empty_band_name(self):
        """Test an empty phase band name is rejected."""
        with pytest.raises(ConfigurationError, match="topo_phase_band_name"):
            TopoPhaseRemovalConfig(topo_phase_band_name='')

    def test_no_dem_source(self):
        """Test a DEM name or external file is required."""
        with pytest.raises(ConfigurationError, match="dem_name"):
            TopoPhaseRemovalConfig(dem_name='')

    def test_external_file_without_name(self):
        """Test an external file stands in for a DEM name."""
        config = TopoPhaseRemovalConfig(dem_name='',
                                        external_dem_file='/data/dem.tif')
        assert config.external_dem_file == '/data/dem.tif'

    def test_non_numeric_no_data(self):
        """Test the external no-data value must be numeric."""
        with pytest.raises(ConfigurationError, match="numeric"):
            TopoPhaseRemovalConfig(external_dem_no_data_value='none')

    def test_is_validation_error(self):
        """Test configuration errors are validation errors."""
        with pytest.raises(ValidationError):
            TopoPhaseRemovalConfig(orbit_degree=42)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

class TestConfigLoading:
    """Test mapping and YAML loaders."""

    def test_from_dict(self):
        """Test known keys are applied."""
        config = TopoPhaseRemovalConfig.from_dict(
            {'orbit_degree': 4, 'output_elevation': True}
        )
        assert config.orbit_degree == 4
        assert config.output_elevation is True

    def test_from_dict_unknown_key(self):
        """Test misspelled keys are reported."""
        with pytest.raises(ConfigurationError, match="orbit_degre\\b"):
            TopoPhaseRemovalConfig.from_dict({'orbit_degre': 4})

    def test_from_yaml(self, tmp_path):
        """Test loading a YAML document."""
        path = tmp_path / 'topo.yaml'
        path.write_text(
            "dem_name: SRTM 1Sec HGT\n"
            "dem_directory: /data/srtm1\n"
            "tile_extension_percent: 50\n"
            "topo_phase_band_name: tp\n"
            "geoid_path: /data/geoids/egm96-15.pgm\n"
        )
        config = TopoPhaseRemovalConfig.from_yaml(path)
        assert config.dem_name == 'SRTM 1Sec HGT'
        assert config.dem_directory == '/data/srtm1'
        assert config.extension_percent == 50
        assert config.topo_phase_band_name == 'tp'
        assert config.geoid_path == '/data/geoids/egm96-15.pgm'

    def test_from_yaml_empty(self, tmp_path):
        """Test an empty document yields the defaults."""
        path = tmp_path / 'empty.yaml'
        path.write_text("")
        assert TopoPhaseRemovalConfig.from_yaml(path) \
            == TopoPhaseRemovalConfig()

    def test_from_yaml_not_mapping(self, tmp_path):
        """Test a list document is rejected."""
        path = tmp_path / 'list.yaml'
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            TopoPhaseRemovalConfig.from_yaml(path)

    def test_from_yaml_malformed(self, tmp_path):
        """Test YAML syntax errors become configuration errors."""
        path = tmp_path / 'bad.yaml'
        path.write_text("dem_name: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Cannot parse"):
            TopoPhaseRemovalConfig.from_yaml(path)

    def test_from_yaml_invalid_value(self, tmp_path):
        """Test values are validated after loading."""
        path = tmp_path / 'degree.yaml'
        path.write_text("orbit_degree: 12\n")
        with pytest.raises(ConfigurationError, match="orbit_degree"):
            TopoPhaseRemovalConfig.from_yaml(path)
