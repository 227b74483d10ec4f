# SPDX-License-Identifier: AGPL-3.0-or-later
# pylint: disable=missing-module-docstring, cyclic-import
from __future__ import annotations

import sys
import os
from os.path import dirname, abspath

import logging

import searchengines.settings_loader
from searchengines.settings_defaults import apply_schema

searchengines_dir = abspath(dirname(__file__))
searchengines_parent_dir = abspath(dirname(dirname(__file__)))

settings: dict = {}
debug = False
logger = logging.getLogger('searchengines')

LOG_FORMAT_DEBUG = '%(levelname)-7s %(name)-30.30s: %(message)s'
LOG_FORMAT_PROD = '%(asctime)-15s %(name)s: %(levelname)s: %(message)s'
LOG_LEVEL_PROD = logging.WARNING

_unset = object()


def init_settings():
    """Initialize global ``settings`` and setup the logging."""

    global settings, debug  # pylint: disable=global-variable-not-assigned, global-statement

    cfg, msg = searchengines.settings_loader.load_settings(load_user_settings=True)
    cfg = apply_schema(cfg)

    settings.clear()
    settings.update(cfg)

    debug = get_setting("general.debug")
    if debug:
        _logging_config_debug()
    else:
        logging.basicConfig(level=LOG_LEVEL_PROD, format=LOG_FORMAT_PROD)
        logging.root.setLevel(level=LOG_LEVEL_PROD)
        logging.getLogger('werkzeug').setLevel(level=LOG_LEVEL_PROD)
    logger.info(msg)


def get_setting(name: str, default=_unset):
    """Returns the value to which ``name`` point.  If there is no such name in the
    settings and the ``default`` is unset, a :py:obj:`KeyError` is raised.

    .. code:: python

       get_setting("search.default_engine")

    """
    value = settings
    for a in name.split('.'):
        if isinstance(value, dict):
            value = value.get(a, _unset)
        else:
            value = _unset

        if value is _unset:
            if default is _unset:
                raise KeyError(name)
            value = default
            break

    return value


def _is_color_terminal():
    if os.getenv('TERM') in ('dumb', 'unknown'):
        return False
    return sys.stdout.isatty()


def _logging_config_debug():
    log_level = os.environ.get('SEARCHENGINES_DEBUG_LOG_LEVEL', 'DEBUG')
    if _is_color_terminal():
        logging.basicConfig(level=log_level, format='\x1b[36m' + LOG_FORMAT_DEBUG + '\x1b[0m')
    else:
        logging.basicConfig(level=log_level, format=LOG_FORMAT_DEBUG)
    logging.root.setLevel(level=log_level)


init_settings()
