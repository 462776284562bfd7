# Log event / error codes
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_LINK_NOT_FOUND = 'SHORT_LINK_NOT_FOUND'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
PAGE_REDIRECT_SUCCESS = 'PAGE_REDIRECT_SUCCESS'
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
INVALID_TTL = 'INVALID_TTL'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'
LINK_CREATED = 'LINK_CREATED'
LINK_DELETED = 'LINK_DELETED'
