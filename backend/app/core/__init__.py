############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# __init__.py: Core domain rules package
#
############################################################

"""Core domain rules for Xarwiz CMS."""
