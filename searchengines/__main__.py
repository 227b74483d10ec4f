# SPDX-License-Identifier: AGPL-3.0-or-later
"""Command line of the engine registry::

   $ python -m searchengines --help

"""

from searchengines.cli import CLI

CLI()
