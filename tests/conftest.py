"""
Shared fixtures for the test suite.
"""

import logging

import pytest

from preimage_fractals.core.complex_number import ComplexValue


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep library log output out of the test report."""
    logging.getLogger("preimage_fractals").setLevel(logging.WARNING)
    yield


@pytest.fixture
def some_numbers():
    return [
        ComplexValue(1.2, 0.4),
        ComplexValue(0.7, -1.6),
        ComplexValue(2.35, 7.02),
        ComplexValue(-0.008, -1.002),
        ComplexValue(-45.008, -100.002),
    ]


@pytest.fixture
def some_small_numbers():
    return [
        ComplexValue(1.2, 0.4),
        ComplexValue(0.7, -1.6),
        ComplexValue(2.3, 7),
        ComplexValue(6.3, -5),
        ComplexValue(-0.8, -1.25),
    ]
