import numpy as np
import pytest

from app.models.models import Landmark, SwarmConfig


@pytest.fixture
def rastrigin_config():
    return SwarmConfig(
        particle_count=30,
        inertia_weight=0.5,
        cognitive_weight=2.0,
        social_weight=2.0,
        max_velocity=2.0,
        max_position=100.0,
        seed=7,
    )


@pytest.fixture
def landmark_config():
    return SwarmConfig(
        particle_count=20,
        max_velocity=10.0,
        max_position=400.0,
        objective="landmarks",
        landmarks=[Landmark(x=300.0, y=300.0)],
        seed=11,
    )


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


class FixedRandom:
    """Stands in for a numpy Generator with fixed r1 / r2 draws."""

    def __init__(self, r1, r2):
        self.values = np.array([r1, r2])

    def random(self, size):
        assert size == 2
        return self.values.copy()


@pytest.fixture
def fixed_random():
    return FixedRandom
