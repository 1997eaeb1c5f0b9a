"""JsonSmith: desktop JSON authoring with heuristic error diagnosis."""

from jsonsmith.core.constants import APP_VERSION

__version__ = APP_VERSION
