"""
Shared fixtures for ANOVA tests.

Textbook datasets with known decompositions, plus random balanced tensors
for structural checks. Tensors use the canonical layout: axis 0 holds
replicates, then one axis per factor (least significant first).
"""

import numpy as np
import pytest


# =====================================================================
# Textbook fixtures
# =====================================================================


@pytest.fixture
def oneway_groups():
    """4 groups x 5 replicates. Factor SS 4684.9975, Error SS 137.46."""
    return [
        [60.8, 57.0, 65.0, 58.6, 61.7],
        [68.7, 67.7, 74.9, 66.3, 69.8],
        [102.6, 102.1, 100.2, 96.5, 100.4],
        [87.9, 84.2, 83.1, 85.7, 90.3],
    ]


@pytest.fixture
def oneway_tensor(oneway_groups):
    """Canonical (5 replicates, 4 groups) tensor."""
    return np.array(oneway_groups).T


@pytest.fixture
def twoway_no_replication():
    """3 x 4 design, one observation per cell (rows declared first)."""
    return np.array([
        [123.0, 138.0, 110.0, 151.0],
        [145.0, 165.0, 140.0, 167.0],
        [156.0, 176.0, 185.0, 175.0],
    ])


@pytest.fixture
def twoway_cells():
    """2 x 2 design with 5 replicates per cell, keyed by (row, column)."""
    return {
        (0, 0): [16.5, 18.4, 12.7, 14.0, 12.8],
        (0, 1): [14.5, 11.0, 10.8, 14.3, 10.0],
        (1, 0): [39.1, 26.2, 21.3, 35.8, 40.2],
        (1, 1): [32.0, 23.8, 28.8, 25.0, 29.3],
    }


@pytest.fixture
def twoway_replicated(twoway_cells):
    """Canonical (5, 2, 2) tensor of twoway_cells."""
    tensor = np.empty((5, 2, 2))
    for (i, j), values in twoway_cells.items():
        tensor[:, i, j] = values
    return tensor


# =====================================================================
# Random balanced designs
# =====================================================================


@pytest.fixture
def threeway_tensor():
    """(3 replicates, 4 x 3 x 2) tensor with distinct factor effects."""
    rng = np.random.default_rng(7)
    shape = (3, 4, 3, 2)
    effect_0 = np.array([0.0, 0.5, 1.0, 1.5])[:, None, None]
    effect_1 = np.array([0.0, 2.0, -1.0])[None, :, None]
    effect_2 = np.array([0.0, 3.0])[None, None, :]
    return 10.0 + effect_0 + effect_1 + effect_2 + rng.normal(0.0, 1.0, shape)


@pytest.fixture
def nested_tensor():
    """(2 replicates, 3 samples within 2 plots within 4 treatments)."""
    rng = np.random.default_rng(11)
    treatment = np.array([0.0, 1.0, 2.0, 4.0])[None, None, None, :]
    plot = rng.normal(0.0, 1.0, (1, 1, 2, 4))
    sample = rng.normal(0.0, 0.5, (1, 3, 2, 4))
    return 20.0 + treatment + plot + sample + rng.normal(0.0, 0.3, (2, 3, 2, 4))


@pytest.fixture
def repeated_measures_tensor():
    """One observation per cell: 4 conditions x 6 subjects."""
    rng = np.random.default_rng(3)
    subject = rng.normal(0.0, 2.0, (1, 1, 6))
    condition = np.array([0.0, 1.0, 1.5, 3.0])[None, :, None]
    return 50.0 + subject + condition + rng.normal(0.0, 0.5, (1, 4, 6))
