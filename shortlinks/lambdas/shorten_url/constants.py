# Logging events & response error codes
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_TARGET_URL = 'MISSING_TARGET_URL'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
STORE_UNAVAILABLE = 'STORE_UNAVAILABLE'
UNRESOLVABLE_CONFLICT = 'UNRESOLVABLE_CONFLICT'
SHORT_CODE_COLLISION = 'SHORT_CODE_COLLISION'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'

# Seconds a client should wait before retrying after an unresolvable conflict
CONFLICT_RETRY_AFTER = 1
