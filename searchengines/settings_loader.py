# SPDX-License-Identifier: AGPL-3.0-or-later
"""Implementations for loading configurations from YAML files.  This essentially
includes the configuration of the (:ref:`engine catalog <settings engines>`).

The default settings are read from the ``settings.yml`` shipped in this package.
The user settings are read from the file named by the environment variable
``SEARCHENGINES_SETTINGS_PATH``.  When the user settings contain::

    use_default_settings: true

the user settings are merged into the default settings, otherwise the user
settings replace the default settings.
"""

from __future__ import annotations

import typing
import os
from os import environ
from pathlib import Path

import yaml

from searchengines.exceptions import SearchEnginesSettingsException

searchengines_dir = Path(__file__).parent
DEFAULT_SETTINGS_FILE = searchengines_dir / "settings.yml"


def load_yaml(file_name: str | Path) -> dict[str, typing.Any]:
    """Load YAML config from a file."""
    try:
        with open(file_name, 'r', encoding='utf-8') as settings_yaml:
            return yaml.safe_load(settings_yaml) or {}
    except IOError as e:
        raise SearchEnginesSettingsException(e, str(file_name)) from e
    except yaml.YAMLError as e:
        raise SearchEnginesSettingsException(e, str(file_name)) from e


def get_user_settings_path() -> Path | None:
    """Returns the path of the user settings file or ``None`` if there is no
    ``SEARCHENGINES_SETTINGS_PATH`` in the environment."""

    name = environ.get('SEARCHENGINES_SETTINGS_PATH')
    if not name:
        return None
    path = Path(name)
    if not path.is_file():
        raise EnvironmentError(f"file {path} referenced by $SEARCHENGINES_SETTINGS_PATH does not exist")
    return path


def update_dict(default_dict: dict, user_dict: dict) -> dict:
    for k, v in user_dict.items():
        if isinstance(v, dict):
            default_dict[k] = update_dict(default_dict.get(k, {}), v)
        else:
            default_dict[k] = v
    return default_dict


def update_settings(default_settings: dict, user_settings: dict) -> dict:
    # the engine catalog is not merged, a user catalog replaces the default one
    user_engines = user_settings.pop('engines', None)
    update_dict(default_settings, user_settings)
    if user_engines is not None:
        default_settings['engines'] = user_engines
    return default_settings


def is_use_default_settings(user_settings: dict) -> bool:
    use_default_settings = user_settings.pop('use_default_settings', False)
    if use_default_settings is True:
        return True
    if use_default_settings is False:
        return False
    raise ValueError('Invalid value for use_default_settings')


def apply_environ(cfg: dict) -> dict:
    """Settings that are overwritten by the environment."""
    value = os.getenv('SEARCHENGINES_DEBUG')
    if value is not None:
        cfg.setdefault('general', {})['debug'] = value.lower() in ('1', 'true')
    return cfg


def load_settings(load_user_settings: bool = True) -> tuple[dict, str]:
    """Function for loading the settings of the application.  Returns a tuple of
    the settings and a message describing where they have been loaded from."""

    default_settings = load_yaml(DEFAULT_SETTINGS_FILE)
    user_settings_path = get_user_settings_path()

    if user_settings_path is None or not load_user_settings:
        return (
            apply_environ(default_settings),
            f'load the default settings from {DEFAULT_SETTINGS_FILE}',
        )

    user_settings = load_yaml(user_settings_path)
    if is_use_default_settings(user_settings):
        update_settings(default_settings, user_settings)
        return (
            apply_environ(default_settings),
            f'merge the default settings ( {DEFAULT_SETTINGS_FILE} ) and the user settings ( {user_settings_path} )',
        )

    return (apply_environ(user_settings), f'load the user settings from {user_settings_path}')
