import json
import sys
import os
import pytest

# Add src/python to the path so tests can import modules directly
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src', 'python'))

from models import Pad  # noqa: E402
from library_injector import PlatformPaths  # noqa: E402

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), 'fixtures')


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def resistor_result():
    with open(os.path.join(FIXTURES_DIR, 'C25804.json')) as f:
        return json.load(f)["result"]


@pytest.fixture
def resistor_record_path():
    return os.path.join(FIXTURES_DIR, 'C25804.json')


@pytest.fixture
def smd_pads():
    """Two 0.6 x 0.6 mm rectangular SMD pads, 1.6 mm apart."""
    return [Pad(shape="RECT", x=-3.15, y=0, width=2.3622, height=2.3622, number="1"),
            Pad(shape="RECT", x=3.15, y=0, width=2.3622, height=2.3622, number="2")]


@pytest.fixture
def fake_paths(tmp_path):
    """Linux-style platform paths rooted in a temporary home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return PlatformPaths(home=str(home), system="linux")


@pytest.fixture
def tmp_library(tmp_path):
    """Create a temporary library root for testing."""
    lib_root = tmp_path / 'jlc'
    lib_root.mkdir()
    return lib_root


