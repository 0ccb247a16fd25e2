# Logging events & response error codes
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
STORE_UNAVAILABLE = 'STORE_UNAVAILABLE'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
