"""
Configuration and logging setup for the trajectory engine
"""
import os
import logging


class Config:
    DEBUG = False
    TESTING = False
    LOG_LEVEL = os.environ.get('WELLPATH_LOG_LEVEL', 'INFO')

    # Dogleg severity, build and turn rates are reported per this course length
    DLS_COURSE_LENGTH_M = 30.0
    # Below this dogleg (rad) the ratio factor degenerates to 1
    MIN_DOGLEG_RAD = 1e-6

    # Plan variance projection
    DEFAULT_PROJECTION_MD = 30.0
    MIN_PROJECTION_MD = 10.0
    INTERPOLATION_TOLERANCE_M = 0.001


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.environ.get('WELLPATH_LOG_LEVEL', 'DEBUG')


class TestingConfig(Config):
    TESTING = True


class ProductionConfig(Config):
    pass


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': ProductionConfig
}


def get_config(name=None):
    """Return the config class for name, falling back to WELLPATH_ENV and then the default"""
    name = name or os.environ.get('WELLPATH_ENV', 'default')
    return config.get(name, config['default'])


def configure_logging(level=None):
    """Configure root logging the same way for scripts and notebooks"""
    level = level or get_config().LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level)
    return level
