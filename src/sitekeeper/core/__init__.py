"""
SiteKeeper Core
Configuration and logging shared by every component.
"""
