import numpy as np
import pytest

from shoalsim.environment import (DepthField, DepthFieldConfig,
                                  DepthFieldGenerator, Rect)
from shoalsim.errors import ConfigurationError
from shoalsim.noise import NoiseSampler
from shoalsim.vessels import VesselProfile


def _generate(**overrides):
    params = dict(width=32, height=24, worldScale=1.0, noiseScale=0.1,
                  octaves=4, persistence=0.5, lacunarity=2.0, maxDepth=50.0,
                  minDepth=0.0, seed=3)
    params.update(overrides)
    return DepthFieldGenerator().generate(**params)


def _ramp():
    # 4 columns x 3 rows, depth == flat index
    return DepthField(np.arange(12.0), width=4, height=3, worldScale=2.0,
                      origin=(10.0, 20.0))


#--- Generation ----------------------------------------------------------------

def test_generate_is_deterministic():
    a = _generate(seed=42)
    b = _generate(seed=42)
    assert np.array_equal(a.depths, b.depths)


def test_seed_changes_field():
    assert not np.array_equal(_generate(seed=1).depths,
                              _generate(seed=2).depths)


@pytest.mark.parametrize("octaves", [1, 2, 3, 5, 8])
@pytest.mark.parametrize("persistence", [0.25, 0.5, 1.0])
def test_depths_stay_in_range(octaves, persistence):
    field = _generate(octaves=octaves, persistence=persistence,
                      minDepth=5.0, maxDepth=60.0)
    assert field.depths.shape == (32 * 24,)
    assert float(field.depths.min()) >= 5.0
    assert float(field.depths.max()) <= 60.0


@pytest.mark.parametrize("octaves", [1, 4, 10])
def test_normalized_noise_in_unit_interval(octaves):
    config = DepthFieldConfig(mapWidth=40, mapHeight=30, octaves=octaves,
                              noiseScale=0.07, seed=5)
    n = DepthFieldGenerator().normalizedNoise(config)
    assert n.shape == (30, 40)
    assert float(n.min()) >= 0.0
    assert float(n.max()) <= 1.0


def test_single_octave_equals_raw_sample():
    config = DepthFieldConfig(mapWidth=4, mapHeight=4, noiseScale=0.1,
                              octaves=1, minDepth=0.0, maxDepth=100.0, seed=0)
    generator = DepthFieldGenerator()
    x, y = np.meshgrid(np.arange(4.0), np.arange(4.0))
    raw = NoiseSampler(seed=0)(x * 0.1, y * 0.1)

    assert np.allclose(generator.normalizedNoise(config), raw)

    field = generator.generateFromConfig(config)
    assert field.width == 4 and field.height == 4
    assert np.allclose(field.grid, raw * 100.0)
    assert float(field.depths.min()) >= 0.0
    assert float(field.depths.max()) <= 100.0


def test_higher_noise_is_deeper():
    config = DepthFieldConfig(mapWidth=16, mapHeight=16, noiseScale=0.13,
                              minDepth=2.0, maxDepth=12.0, seed=1)
    generator = DepthFieldGenerator()
    n = generator.normalizedNoise(config)
    field = generator.generateFromConfig(config)
    deepest = np.unravel_index(np.argmax(n), n.shape)
    shallowest = np.unravel_index(np.argmin(n), n.shape)
    assert field.grid[deepest] == field.depths.max()
    assert field.grid[shallowest] == field.depths.min()


def test_generated_field_keeps_config_and_range():
    field = _generate(minDepth=1.0, maxDepth=9.0, seed=8)
    assert field.config.seed == 8
    assert field.minDepth == 1.0
    assert field.maxDepth == 9.0


@pytest.mark.parametrize("overrides", [
    dict(width=0),
    dict(height=-3),
    dict(width=2.5),
    dict(worldScale=0.0),
    dict(noiseScale=0.0),
    dict(noiseScale=float('nan')),
    dict(octaves=0),
    dict(persistence=0.0),
    dict(persistence=1.5),
    dict(lacunarity=1.0),
    dict(maxDepth=0.0),
    dict(minDepth=-1.0),
    dict(minDepth=50.0, maxDepth=50.0),
    dict(seed=-1),
])
def test_invalid_parameters_raise(overrides):
    with pytest.raises(ConfigurationError):
        _generate(**overrides)


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        DepthFieldConfig(octaves=0)


def test_config_from_dict():
    config = DepthFieldConfig.fromDict({'mapWidth': 8, 'seed': 3})
    assert config.mapWidth == 8 and config.seed == 3
    assert config.mapHeight == 512
    with pytest.raises(ConfigurationError):
        DepthFieldConfig.fromDict({'mapWidht': 8})


def test_amplitude_sum():
    config = DepthFieldConfig(octaves=3, persistence=0.5)
    assert config.amplitudeSum == pytest.approx(1.75)


#--- Point queries -------------------------------------------------------------

def test_depth_at_nearest_cell():
    field = _ramp()
    assert field.depthAt((10.0, 20.0)) == 0.0
    assert field.depthAt((13.9, 20.0)) == 1.0
    assert field.depthAt((10.0, 22.5)) == 4.0
    assert field.depthAt((17.0, 25.0)) == 11.0
    assert field(13.0, 23.0) == 5.0


def test_depth_at_clamps_outside():
    field = _ramp()
    assert field.depthAt((-100.0, -100.0)) == 0.0
    assert field.depthAt((1e9, 1e9)) == 11.0
    assert field.depthAt((1e9, -1e9)) == 3.0
    assert field.depthAt((float('inf'), float('inf'))) == 11.0
    assert field.depthAt((float('nan'), float('nan'))) == 0.0


def test_xy2index():
    field = _ramp()
    assert field.xy2Index(10.0, 20.0) == (0, 0)
    assert field.xy2Index(15.5, 23.9) == (1, 2)
    assert field.xy2Index(-5.0, 99.0) == (2, 0)


def test_depth_at_interpolated():
    field = _ramp()
    # Cell centre returns the cell value
    assert field.depthAt((11.0, 21.0), interpolate=True) == pytest.approx(0.0)
    # Halfway between the centres of (0, 0) and (0, 1)
    assert field.depthAt((12.0, 21.0), interpolate=True) == pytest.approx(0.5)
    # Halfway between rows 0 and 1 in column 0
    assert field.depthAt((11.0, 22.0), interpolate=True) == pytest.approx(2.0)
    # Outside clamps to the corner centre
    assert field.depthAt((100.0, 100.0), interpolate=True) == pytest.approx(11.0)


def test_sample_points_matches_depth_at():
    field = _generate(worldScale=2.0)
    rng = np.random.default_rng(2)
    x = rng.uniform(-10, 80, 50)
    y = rng.uniform(-10, 60, 50)
    batch = field.sample_points(x, y)
    assert np.array_equal(batch, [field.depthAt((a, b)) for a, b in zip(x, y)])


#--- Region queries ------------------------------------------------------------

def test_region_depths_view():
    field = _ramp()
    region = field.regionDepths(Rect(col=1, row=1, width=2, height=2))
    assert region.shape == (2, 2)
    assert np.array_equal(region, [[5.0, 6.0], [9.0, 10.0]])


def test_region_depths_is_read_only():
    field = _ramp()
    region = field.regionDepths(Rect(0, 0, 2, 2))
    with pytest.raises(ValueError):
        region[0, 0] = 99.0
    with pytest.raises(ValueError):
        field.depths[0] = 99.0
    with pytest.raises(ValueError):
        field.grid[1, 1] = 99.0
    assert field.depthAt((10.0, 20.0)) == 0.0


def test_region_depths_clipped_to_grid():
    field = _ramp()
    assert field.regionDepths(Rect(-2, -2, 4, 3)).shape == (1, 2)
    assert field.regionDepths(Rect(3, 2, 10, 10)).shape == (1, 1)
    assert field.regionDepths(Rect(10, 10, 2, 2)).size == 0
    assert field.regionDepths(Rect(1, 1, 0, 2)).size == 0


def test_sample_region_inclusive():
    field = _ramp()
    region = field.sample_region((10.0, 14.0), (20.0, 22.0))
    assert np.array_equal(region, [[0.0, 1.0, 2.0], [4.0, 5.0, 6.0]])


#--- Construction --------------------------------------------------------------

def test_grid_layout_is_row_major():
    field = _ramp()
    assert field.grid.shape == (3, 4)
    assert field.grid[2, 1] == field.depths[2 * 4 + 1]


def test_extent():
    assert _ramp().extent == (10.0, 18.0, 20.0, 26.0)


@pytest.mark.parametrize("depths, kwargs", [
    (np.zeros(11), {}),
    (np.array([1.0, np.nan, 2.0, 3.0]), {'width': 2, 'height': 2}),
    (np.array([1.0, 2.0, 3.0, 40.0]),
     {'width': 2, 'height': 2, 'maxDepth': 10.0}),
])
def test_invalid_depth_field(depths, kwargs):
    args = dict(width=4, height=3)
    args.update(kwargs)
    with pytest.raises(ConfigurationError):
        DepthField(depths, **args)


def test_input_buffer_is_copied():
    data = np.arange(6.0)
    field = DepthField(data, width=3, height=2)
    data[0] = 50.0
    assert field.depthAt((0.5, 0.5)) == 0.0


#--- Regeneration --------------------------------------------------------------

def test_regenerate_leaves_original_unchanged():
    field = _generate(seed=1)
    before = field.depths.copy()
    newField = field.regenerate(seed=2)
    assert newField is not field
    assert newField.config.seed == 2
    assert field.config.seed == 1
    assert np.array_equal(field.depths, before)
    assert not np.array_equal(newField.depths, before)


def test_regenerate_same_config_reproduces():
    field = _generate(seed=4)
    assert np.array_equal(field.regenerate().depths, field.depths)


def test_regenerate_rejects_unknown_and_invalid():
    field = _generate()
    with pytest.raises(ConfigurationError):
        field.regenerate(colour='blue')
    with pytest.raises(ConfigurationError):
        field.regenerate(octaves=0)


def test_regenerate_without_config():
    with pytest.raises(ConfigurationError):
        DepthField.uniform(4, 4, depth=3.0).regenerate(seed=1)


#--- Vessel checks -------------------------------------------------------------

def test_navigation_checks():
    profile = VesselProfile(draft=1.5, safetyMargin=2.0)
    shallow = DepthField.uniform(8, 8, depth=2.0)
    deep = DepthField.uniform(8, 8, depth=10.0)
    assert shallow.isBeached((1.0, 1.0), profile)
    assert not shallow.canNavigate((1.0, 1.0), profile)
    assert shallow.clearanceAt((1.0, 1.0), profile) == pytest.approx(-1.5)
    assert not deep.isBeached((1.0, 1.0), profile)
    assert deep.canNavigate((1.0, 1.0), profile)
    assert deep.clearanceAt((1.0, 1.0), profile) == pytest.approx(6.5)


@pytest.mark.parametrize("origin", [(1.0,), 5.0, (1.0, 2.0, 3.0), None])
def test_malformed_origin_raises(origin):
    with pytest.raises(ConfigurationError):
        DepthField(np.zeros(4), width=2, height=2, origin=origin)
