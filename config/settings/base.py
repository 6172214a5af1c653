"""
Base Django settings for the Business Tenancy Service.
Session-based, role-scoped multi-tenancy on top of Django REST Framework.
"""
import os
from pathlib import Path
from typing import List

import environ
from pydantic import BaseModel, Field

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Initialize environment variables
env = environ.Env(
    DEBUG=(bool, False),
    SECRET_KEY=(str, ''),
    ALLOWED_HOSTS=(list, []),
)

# Read .env file if it exists
environ.Env.read_env(os.path.join(BASE_DIR, '.env'))


class DatabaseConfig(BaseModel):
    """Database configuration."""
    url: str = Field(default="", description="Database URL")
    engine: str = Field(default="django.db.backends.postgresql")
    name: str = ""
    user: str = ""
    password: str = ""
    host: str = ""
    port: str = "5432"
    conn_max_age: int = Field(default=600, description="Connection pool max age")
    options: dict = Field(default_factory=dict)


class TenancyConfig(BaseModel):
    """Business (tenant) context and role configuration."""
    # Session keys
    session_key: str = Field(default="current_business_id", description="Session key holding the current business id")
    intended_url_key: str = Field(default="url.intended", description="Session key for the post-creation redirect")

    # Role names
    super_admin_role: str = "super-admin"
    owner_role: str = "owner"
    business_admin_role: str = "admin"
    platform_admin_role: str = "admin"
    default_member_role: str = "manager"
    global_roles: List[str] = Field(default_factory=lambda: ["super-admin", "admin", "manager"])
    platform_dashboard_roles: List[str] = Field(default_factory=lambda: ["super-admin", "admin", "manager"])

    # Paths used by the context middleware
    landing_path: str = "/dashboard"
    create_path: str = "/businesses/create"
    list_path: str = "/businesses"
    route_kwarg: str = Field(default="business_id", description="URL kwarg naming the route's business")


class AppSettings:
    """Application settings loaded from environment."""
    def __init__(self):
        # Django core
        self.secret_key = env('SECRET_KEY', default='django-insecure-change-me-in-production')
        self.debug = env.bool('DEBUG', default=False)
        self.allowed_hosts = env.list('ALLOWED_HOSTS', default=[])

        # Server
        self.api_port = int(os.getenv('PORT', os.getenv('API_PORT', '8080')))

        # Database
        self.database = DatabaseConfig(
            url=env('DATABASE_URL', default=''),
            name=env('DB_NAME', default=''),
            user=env('DB_USER', default=''),
            password=env('DB_PASSWORD', default=''),
            host=env('DB_HOST', default=''),
            port=env('DB_PORT', default='5432'),
        )

        # Tenancy
        self.tenancy = TenancyConfig(
            session_key=env('TENANCY_SESSION_KEY', default='current_business_id'),
            super_admin_role=env('TENANCY_SUPER_ADMIN_ROLE', default='super-admin'),
            platform_admin_role=env('TENANCY_PLATFORM_ADMIN_ROLE', default='admin'),
            default_member_role=env('TENANCY_DEFAULT_MEMBER_ROLE', default='manager'),
            landing_path=env('TENANCY_LANDING_PATH', default='/dashboard'),
            create_path=env('TENANCY_CREATE_PATH', default='/businesses/create'),
            list_path=env('TENANCY_LIST_PATH', default='/businesses'),
        )

        # Logging
        self.log_level = env('LOG_LEVEL', default='INFO')


# Load settings from environment
_settings = AppSettings()

# Django settings
SECRET_KEY = _settings.secret_key
DEBUG = _settings.debug
ALLOWED_HOSTS = _settings.allowed_hosts or ['*']

# Application definition
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third-party
    'rest_framework',
    'corsheaders',

    # Local apps
    'apps.core',
    'apps.businesses',
    'apps.administration',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    # corsheaders MUST be early to handle OPTIONS before URL routing
    'corsheaders.middleware.CorsMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',

    # Custom middleware
    'apps.core.middleware.trace.TraceMiddleware',
    # Tenant context assignment MUST run before the context match
    'apps.core.middleware.tenant.SetTenantContextMiddleware',
    'apps.core.middleware.tenant.EnsureBusinessContextMatchMiddleware',
]

ROOT_URLCONF = 'config.urls'

# Disable APPEND_SLASH to prevent 301 redirects on API endpoints
APPEND_SLASH = False

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
                'apps.core.context_processors.tenancy',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'

# Database
if _settings.database.url:
    import dj_database_url
    DATABASES = {
        'default': dj_database_url.parse(_settings.database.url, conn_max_age=_settings.database.conn_max_age)
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': _settings.database.engine,
            'NAME': _settings.database.name,
            'USER': _settings.database.user,
            'PASSWORD': _settings.database.password,
            'HOST': _settings.database.host,
            'PORT': _settings.database.port,
            'OPTIONS': _settings.database.options,
            'CONN_MAX_AGE': _settings.database.conn_max_age,
        }
    }

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator',
    },
]

# Sessions hold the current business id as a plain int
SESSION_SERIALIZER = 'django.contrib.sessions.serializers.JSONSerializer'
MESSAGE_STORAGE = 'django.contrib.messages.storage.session.SessionStorage'

LOGIN_URL = '/admin/login/'

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# Default primary key field type
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# REST Framework
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework.authentication.SessionAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
        'rest_framework.parsers.FormParser',
    ],
}

# CORS - the frontend sends the session cookie cross-origin in development
CORS_ALLOWED_ORIGINS = env.list('CORS_ALLOWED_ORIGINS', default=[
    'http://localhost:5173',  # Vite dev server
    'http://127.0.0.1:5173',
])
CORS_ALLOW_CREDENTIALS = True

# Logging
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'json': {
            '()': 'pythonjsonlogger.jsonlogger.JsonFormatter',
            'format': '%(asctime)s %(name)s %(levelname)s %(trace_id)s %(message)s %(pathname)s %(lineno)d',
        },
        'verbose': {
            'format': '{levelname} {asctime} {module} {trace_id} {message}',
            'style': '{',
        },
    },
    'filters': {
        'trace_id': {
            '()': 'apps.core.middleware.trace.TraceIdFilter',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'json' if not DEBUG else 'verbose',
            'filters': ['trace_id'],
        },
    },
    'root': {
        'handlers': ['console'],
        'level': _settings.log_level,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'apps': {
            'handlers': ['console'],
            'level': _settings.log_level,
            'propagate': False,
        },
    },
}

# Export settings for use in other modules
APP_SETTINGS = _settings
