# Log event names
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
INVALID_SHORTCODE = 'INVALID_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
STORE_UNAVAILABLE = 'STORE_UNAVAILABLE'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
