import random

import pytest


@pytest.fixture
def sid_data() -> dict:
    """Return raw data for a departure as found in an airport file."""
    return {
        'icao': 'OFFSH9',
        'name': 'Offshore Nine',
        'rwy': {
            '25L': ['A1'],
            '25R': [['^A2', 'A30+'], 'A1'],
        },
        'body': ['C1'],
        'exitPoints': {
            'NORTH': ['B1', 'B2'],
            'SOUTH': [['@B3', 'S250-'], 'B4'],
            'WEST': ['B5#270'],
        },
        'draw': [
            ['A1', 'C1', 'B1', 'B2*'],
            ['A2', 'C1', 'B3', 'B4*'],
        ],
    }


@pytest.fixture
def star_data() -> dict:
    """Return raw data for an arrival as found in an airport file."""
    return {
        'icao': 'KEPEC3',
        'name': 'Kepec Three',
        'entryPoints': {
            'DAG': ['DAG', 'MISEN'],
            'TNP': ['TNP', 'JOTNU'],
        },
        'body': [['CLARR', 'A130|S250'], 'SKEBR', 'KEPEC'],
        'rwy': {
            '19L': ['IPUMY', ['NIPZO', 'A80+']],
            '25R': ['IPUMY'],
        },
        'draw': [
            ['DAG', 'MISEN', 'CLARR', 'SKEBR', 'KEPEC*'],
            ['TNP', 'JOTNU', 'CLARR'],
        ],
    }


@pytest.fixture
def airport_data(sid_data, star_data) -> dict:
    """Return the procedure sections of an airport file."""
    return {
        'sids': {'OFFSH9': sid_data},
        'stars': {'KEPEC3': star_data},
    }


@pytest.fixture
def rng() -> random.Random:
    """Return a seeded random source for reproducible draws."""
    return random.Random(1234)
