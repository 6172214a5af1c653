"""
Production settings.
"""
from .base import *

DEBUG = False

# Explicitly disable APPEND_SLASH to prevent 301 redirects
APPEND_SLASH = False

# -------------------------
# Security settings
# -------------------------
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
SESSION_COOKIE_SECURE = True
SESSION_COOKIE_HTTPONLY = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'
SECURE_HSTS_SECONDS = 31536000  # 1 year
SECURE_HSTS_INCLUDE_SUBDOMAINS = True

# -------------------------
# Logging
# -------------------------
LOGGING["root"]["level"] = "INFO"
LOGGING["handlers"]["console"]["formatter"] = "json"
