############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# __init__.py: Application package initialization
#
############################################################

"""Xarwiz CMS application package."""

from backend import __version__

__all__ = ["__version__"]
