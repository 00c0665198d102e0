"""Pytest configuration for rayviz tests.

Shared fixtures: a seeded random generator and a few stock materials.
"""

import numpy as np
import pytest

from rayviz.typings.material import Material, MaterialType


@pytest.fixture
def rng():
    """Seeded generator so stochastic branches are reproducible."""
    return np.random.default_rng(42)


@pytest.fixture
def diffuse_red():
    return Material(color=(0.8, 0.1, 0.1), specular=0.0, shininess=0.0)


@pytest.fixture
def mirror():
    return Material(color=(0.9, 0.9, 0.9), reflectivity=1.0, roughness=0.0, kind=MaterialType.METAL)


@pytest.fixture
def glass():
    return Material(color=(1.0, 1.0, 1.0), ior=1.5, kind=MaterialType.DIELECTRIC)
