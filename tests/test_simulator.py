import logging

import numpy as np
import pytest

from shoalsim import logger
from shoalsim.environment import DepthField, DepthFieldGenerator
from shoalsim.errors import ConfigurationError
from shoalsim.motion import MotionController, MotionEvent
from shoalsim.simulator import ScriptedInput, Simulation
from shoalsim.vessels import getBoatTypeByName


def _field(seed=1):
    return DepthFieldGenerator().generate(
        width=32, height=32, worldScale=1.0, noiseScale=0.08, octaves=3,
        persistence=0.5, lacunarity=2.0, maxDepth=20.0, seed=seed)


def _sim(field=None, **kwargs):
    field = DepthField.uniform(32, 32, 10.0) if (field is None) else field
    kwargs.setdefault('logging', 'none')
    return Simulation(field, **kwargs)


#--- ScriptedInput -------------------------------------------------------------

def test_scripted_input_replays_and_stops():
    source = ScriptedInput([(1, 0), (0, 1)])
    assert np.array_equal(source(0), [1.0, 0.0])
    assert np.array_equal(source(1), [0.0, 1.0])
    assert np.array_equal(source(2), [0.0, 0.0])


def test_scripted_input_repeat_last():
    source = ScriptedInput([(1, 0), (0, -1)], repeatLast=True)
    assert np.array_equal(source(10), [0.0, -1.0])
    assert np.array_equal(ScriptedInput([], repeatLast=True)(0), [0.0, 0.0])


#--- Simulation ----------------------------------------------------------------

def test_invalid_sample_time():
    with pytest.raises(ConfigurationError):
        _sim(sampleTime=0.0)
    with pytest.raises(ConfigurationError):
        _sim(sampleTime=float('nan'))


def test_invalid_logging_setting():
    with pytest.raises(ConfigurationError):
        _sim(logging='loud')


def test_add_vessel_binds_shared_field():
    sim = _sim()
    boat = sim.addVessel(MotionController(profile=getBoatTypeByName('Sailboat')))
    assert boat.depthField is sim.depthField
    assert sim.nVeh == 1


def test_run_history_shape_and_rows():
    sim = _sim(sampleTime=0.1)
    sim.addVessel(MotionController(acceleration=1000.0, position=(4.0, 4.0)),
                  ScriptedInput([(1, 0)], repeatLast=True))
    sim.addVessel(MotionController(position=(10.0, 10.0)))
    data = sim.run(10)

    assert data.shape == (2, 11, 5)
    assert np.array_equal(data[0, 0], [4.0, 4.0, 0.0, 0.0, 0.0])
    assert np.allclose(data[0, 1], [4.5, 4.0, 5.0, 0.0, 0.0])
    assert np.allclose(data[0, -1, :2], [9.0, 4.0])
    # Second vessel has no input and stays put
    assert np.array_equal(data[1, :, :2], np.tile([10.0, 10.0], (11, 1)))
    assert sim.tick == 10
    assert sim.clock == pytest.approx(1.0)


def test_run_zero_steps():
    sim = _sim()
    sim.addVessel(MotionController(position=(1.0, 2.0)))
    data = sim.run(0)
    assert data.shape == (1, 1, 5)
    with pytest.raises(ConfigurationError):
        sim.run(-1)


def test_runs_are_reproducible():
    def once():
        sim = _sim(_field(seed=5), sampleTime=0.05)
        sim.addVessel(MotionController(profile=getBoatTypeByName('Cargo Ship'),
                                       position=(16.0, 16.0)),
                      ScriptedInput([(1, 1)] * 20 + [(-1, 0)] * 20))
        return sim.run(60)

    assert np.array_equal(once(), once())


def test_grounded_column_tracks_state():
    sim = _sim(DepthField.uniform(8, 8, 2.0), sampleTime=0.1)
    sim.addVessel(MotionController(profile=getBoatTypeByName('Sailboat'),
                                   position=(4.0, 4.0)))
    events = sim.step()
    assert events == [MotionEvent.GROUNDED]
    data = sim.run(3)
    assert np.array_equal(data[0, :, 4], [1.0, 1.0, 1.0, 1.0])


def test_step_updates_log_time():
    sim = _sim(sampleTime=0.5)
    for _ in range(3):
        sim.step()
    assert logger.simTime == '1.00'
    record = logger.customRecordFactory('x', logging.INFO, __file__, 1, 'msg',
                                        None, None)
    assert record.simTime == '1.00'


#--- Collaborators -------------------------------------------------------------

def test_renderer_called_after_each_step():
    seen = []
    sim = _sim(renderer=lambda s: seen.append(s.tick))
    sim.addVessel(MotionController())
    sim.run(4)
    assert seen == [1, 2, 3, 4]


def test_failing_renderer_is_contained(caplog):
    def broken(sim):
        raise RuntimeError("no display")

    sim = _sim(renderer=broken, sampleTime=0.1)
    sim.addVessel(MotionController(acceleration=1000.0),
                  ScriptedInput([(1, 0)], repeatLast=True))
    with caplog.at_level(logging.ERROR, logger='sim'):
        data = sim.run(3)
    assert np.allclose(data[0, -1, :2], [1.5, 0.0])
    assert sum(r.levelno == logging.ERROR for r in caplog.records) == 3


def test_failing_input_source_gives_zero_input(caplog):
    def broken(tick):
        raise IOError("controller unplugged")

    sim = _sim(sampleTime=0.1)
    boat = sim.addVessel(MotionController(), broken)
    with caplog.at_level(logging.ERROR, logger='sim'):
        sim.step()
    assert boat.speed() == 0.0
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_malformed_input_gives_zero_input():
    sim = _sim(sampleTime=0.1)
    boat = sim.addVessel(MotionController(), lambda tick: (float('nan'), 1.0))
    sim.addVessel(MotionController(), lambda tick: 1.0)
    sim.step()
    assert boat.speed() == 0.0


#--- Regeneration --------------------------------------------------------------

def test_regenerate_rebinds_vessels():
    sim = _sim(_field(seed=1))
    old = sim.depthField
    before = old.depths.copy()
    boats = [sim.addVessel(MotionController(position=(i, i))) for i in range(3)]

    newField = sim.regenerate(seed=2)

    assert sim.depthField is newField
    assert newField is not old
    assert all(b.depthField is newField for b in boats)
    assert np.array_equal(old.depths, before)
    assert newField.config.seed == 2


def test_regenerate_uniform_field_fails():
    sim = _sim()
    with pytest.raises(ConfigurationError):
        sim.regenerate(seed=3)


def test_snapshot():
    sim = _sim()
    sim.addVessel(MotionController(position=(2.0, 3.0)))
    assert np.array_equal(sim.snapshot(), [[2.0, 3.0, 0.0, 0.0, 0.0]])
    assert 'Vessels' in str(sim)
