############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# __init__.py: Services package
#
############################################################

"""Business workflows for Xarwiz CMS."""
