from .settings import *  # noqa: F401,F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

FLUTTERWAVE_SECRET_KEY = 'FLWSECK_TEST-secret'
FLUTTERWAVE_BASE_URL = 'https://api.flutterwave.test'
SITE_URL = 'http://testserver'
INTERNAL_API_TOKEN = ''
