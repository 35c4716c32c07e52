"""
ipbatch - batch IP geolocation lookups against the IPinfo API.

This package resolves one or more IP addresses to geolocation and ownership
metadata and renders the results as JSON or CSV.
"""

__version__ = "0.1.0"
__author__ = "ipbatch"
__license__ = "Apache License 2.0"
