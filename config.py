import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default=False):
    return os.environ.get(name, str(default)).strip().lower() in ('1', 'true', 'yes', 'on')


def _env_float(name, default=None):
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    return float(value)


class Config:
    """Application configuration."""

    # Flask core
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key-change-in-production')

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Largest request body accepted by the API (toolpaths can be big)
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 16 * 1024 * 1024))

    # Autoleveller defaults, in inches unless AL_METRIC is set (quantization error included)
    AL_METRIC = _env_bool('AL_METRIC')
    AL_METRIC_OUTPUT = _env_bool('AL_METRIC_OUTPUT')
    AL_SOFTWARE = os.environ.get('AL_SOFTWARE', 'linuxcnc')
    AL_X = _env_float('AL_X', 0.5)
    AL_Y = _env_float('AL_Y', 0.5)
    AL_ZWORK = _env_float('AL_ZWORK', -0.002)
    AL_ZSAFE = _env_float('AL_ZSAFE', 0.1)
    AL_ZPROBE = _env_float('AL_ZPROBE')            # None means same as AL_ZSAFE
    AL_ZFAIL = _env_float('AL_ZFAIL')              # None means the fixed fail depth
    AL_PROBEFEED = _env_float('AL_PROBEFEED', 2.0)
    AL_2NDPROBEFEED = _env_float('AL_2NDPROBEFEED')
    AL_PROBE_ON = os.environ.get('AL_PROBE_ON', '(MSG, Attach the probe tool)@M0 ( Temporary machine stop. )')
    AL_PROBE_OFF = os.environ.get('AL_PROBE_OFF', '(MSG, Detach the probe tool)@M0 ( Temporary machine stop. )')
    AL_PROBECODE = os.environ.get('AL_PROBECODE', 'G31')
    AL_PROBEVAR = int(os.environ.get('AL_PROBEVAR', 2002))
    AL_SETZZERO = os.environ.get('AL_SETZZERO', 'G92 Z0')
    AL_QUANTIZATION_ERROR = _env_float('AL_QUANTIZATION_ERROR', 0.0001)
