############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# __init__.py: Root package initialization and version definition
#
############################################################

"""Xarwiz CMS - blog and site content backend."""

__version__ = "1.2.0"
