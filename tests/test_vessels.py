import dataclasses

import pytest

from shoalsim.errors import ConfigurationError
from shoalsim.vessels import (BOAT_TYPES, VesselProfile, getBoatTypeByIndex,
                              getBoatTypeByName)


def test_required_clearance():
    assert VesselProfile(draft=1.5, safetyMargin=2.0).requiredClearance() == 3.5
    assert VesselProfile(draft=0.0, safetyMargin=0.0).requiredClearance() == 0.0


def test_default_safety_margin():
    assert VesselProfile(draft=4.0).safetyMargin == 2.0


@pytest.mark.parametrize("draft, margin", [
    (-0.1, 2.0),
    (1.0, -2.0),
    (float('nan'), 2.0),
    (1.0, float('inf')),
    ('deep', 2.0),
])
def test_invalid_profile(draft, margin):
    with pytest.raises(ConfigurationError):
        VesselProfile(draft=draft, safetyMargin=margin)


def test_profile_is_immutable():
    profile = VesselProfile(draft=2.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        profile.draft = 3.0


def test_from_dict():
    profile = VesselProfile.fromDict({'draft': 2.5, 'name': 'Barge'})
    assert profile.requiredClearance() == 4.5
    with pytest.raises(ConfigurationError):
        VesselProfile.fromDict({'draft': 1.0, 'beam': 3.0})
    with pytest.raises(ConfigurationError):
        VesselProfile.fromDict({'safetyMargin': 1.0})


def test_presets():
    names = [b.name for b in BOAT_TYPES]
    assert names == ['Sailboat', 'Motorboat', 'Cargo Ship', 'Submarine']
    assert getBoatTypeByName('Cargo Ship').requiredClearance() == 15.0
    assert getBoatTypeByName('Motorboat').requiredClearance() == pytest.approx(2.3)
    assert getBoatTypeByIndex(0) is getBoatTypeByName('Sailboat')
    assert getBoatTypeByIndex(3).draft == 8.0


def test_preset_lookup_misses():
    assert getBoatTypeByName('Canoe') is None
    assert getBoatTypeByIndex(4) is None
    assert getBoatTypeByIndex(-1) is None


def test_str_mentions_clearance():
    assert '3.5' in str(getBoatTypeByName('Sailboat'))
