r"""@package symfunc.settings

Global configuration of the expression system.

The settings are stored as class attributes of Settings, which may be changed
directly, via configure(), or read from one or more INI style configuration
files using load_settings(). Only the ``[symfunc]`` section of such files is
considered, e.g.:

~~~
[symfunc]
epsilon = 1e-5
dps = 40
simplify_taylor_derivatives = no
~~~

Later files override settings of earlier ones. Missing files are silently
skipped, so that a project wide file may be accompanied by an optional user
specific one.
"""

from configparser import ConfigParser
import logging

from mpmath import mp


__all__ = [
    "Settings",
    "configure",
    "load_settings",
]


logger = logging.getLogger(__name__)


class Settings(object):
    """Global settings for the expression system."""
    ## Step width of the central finite difference used when an expression
    ## cannot be differentiated symbolically.
    epsilon = '1e-6'
    ## Decimal places used by evaluators running in `mpmath` mode.
    dps = 30
    ## Whether the derivatives cached by Taylor expansions get simplified.
    simplify_taylor_derivatives = True

    @classmethod
    def default_epsilon(cls):
        r"""The configured epsilon as an `mpmath` real."""
        return mp.mpf(cls.epsilon)


def configure(**settings):
    r"""Change one or more settings.

    Unknown setting names raise an `AttributeError` to catch typos early.
    """
    for key, value in settings.items():
        if key.startswith('_') or not hasattr(Settings, key):
            raise AttributeError("Unknown setting: %s" % key)
        setattr(Settings, key, value)


def load_settings(*filenames, section='symfunc'):
    r"""Read settings from configuration files.

    @return List of files that were actually read.
    """
    config = ConfigParser()
    read = config.read(filenames)
    if not config.has_section(section):
        return read
    if config.has_option(section, 'epsilon'):
        Settings.epsilon = config.get(section, 'epsilon')
    if config.has_option(section, 'dps'):
        Settings.dps = config.getint(section, 'dps')
    if config.has_option(section, 'simplify_taylor_derivatives'):
        Settings.simplify_taylor_derivatives = config.getboolean(
            section, 'simplify_taylor_derivatives'
        )
    logger.info("Settings loaded from: %s", ", ".join(read))
    return read
