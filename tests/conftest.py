"""Test configuration and fixtures."""
import pytest

from app import create_app
from autoleveller.dialects import get_dialect
from autoleveller.models import AutolevelSettings, GlobalVariableSlots, Point, SubroutineNumbers, Workarea
from autoleveller.probe_grid import plan_probe_grid
from autoleveller.utils.unique_codes import UniqueCodes


class TestConfig:
    """Test configuration."""
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    AL_METRIC = True
    AL_METRIC_OUTPUT = True
    AL_SOFTWARE = 'linuxcnc'
    AL_X = 10.0
    AL_Y = 10.0
    AL_ZWORK = -0.1
    AL_ZSAFE = 2.0
    AL_PROBEFEED = 50.0
    AL_PROBE_ON = ''
    AL_PROBE_OFF = ''
    AL_QUANTIZATION_ERROR = 0.0


@pytest.fixture
def app():
    """Create and configure a test application instance."""
    app = create_app(TestConfig)
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def metric_settings():
    """Metric in, metric out: option values are written unchanged."""
    return AutolevelSettings(
        probe_spacing_x=10.0,
        probe_spacing_y=10.0,
        working_depth=-0.1,
        safe_height=2.0,
        probe_feed=50.0,
        metric=True,
        metric_output=True,
    )


@pytest.fixture
def small_grid():
    """3 x 2 grid, 10 units apart, starting at the origin."""
    return plan_probe_grid(Workarea(Point(0.0, 0.0), Point(20.0, 10.0)), 10.0, 10.0)


@pytest.fixture
def slots():
    """Global variable slots drawn from a fresh allocator (100..108)."""
    return GlobalVariableSlots.reserve(UniqueCodes(100))


@pytest.fixture
def subroutines():
    """Subroutine numbers drawn from a fresh allocator (1..3)."""
    return SubroutineNumbers.reserve(UniqueCodes(1))


@pytest.fixture
def linuxcnc():
    return get_dialect('linuxcnc')


@pytest.fixture
def mach3():
    return get_dialect('mach3')


@pytest.fixture
def mach4():
    return get_dialect('mach4')


@pytest.fixture
def custom():
    return get_dialect('custom', 'G38.3', 5063, 'G10 L20 P1 Z0')
