"""
Staging settings.
Production-like, with verbose tenancy logging.
"""
from .production import *

LOGGING['loggers']['apps']['level'] = 'DEBUG'
