import matplotlib
matplotlib.use('Agg')

import matplotlib.pyplot as plt
import numpy as np

from shoalsim import display
from shoalsim.environment import DepthField
from shoalsim.motion import MotionController
from shoalsim.simulator import ScriptedInput, Simulation


def _ramp():
    return DepthField(np.array([0.0, 5.0, 10.0, 10.0]), width=2, height=2)


def test_depth_image_white_to_blue():
    image = display.depthImage(_ramp())
    assert image.shape == (2, 2, 4)
    assert np.allclose(image[0, 0], [1.0, 1.0, 1.0, 1.0])
    assert np.allclose(image[0, 1], [0.5, 0.5, 1.0, 1.0])
    assert np.allclose(image[1, 1], [0.0, 0.0, 1.0, 1.0])
    assert float(image.min()) >= 0.0 and float(image.max()) <= 1.0


def test_depth_image_flat_field_is_shallow():
    image = display.depthImage(DepthField.uniform(3, 2, 7.0))
    assert image.shape == (2, 3, 4)
    assert np.allclose(image, 1.0)


def test_display2d_with_tracks():
    field = DepthField.uniform(16, 16, 10.0)
    sim = Simulation(field, sampleTime=0.1, logging='none')
    sim.addVessel(MotionController(position=(2.0, 2.0)),
                  ScriptedInput([(1, 1)], repeatLast=True))
    data = sim.run(20)

    fig = display.display2D(field, data, show=False)
    assert len(fig.axes) == 1
    plt.close(fig)

    fig = display.display2D(_ramp(), data[0, :, :2], dispType='contour',
                            show=False)
    assert len(fig.axes) == 2
    plt.close(fig)


def test_plot_tracks():
    data = np.zeros((2, 11, 5))
    data[0, :, 2] = np.linspace(0, 5, 11)
    data[1, 5:, 4] = 1.0
    fig = display.plotTracks(data, 0.1, figNo=7, show=False)
    assert len(fig.axes) == 2
    plt.close(fig)
