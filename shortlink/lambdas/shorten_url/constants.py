# Log event names
INVALID_REQUEST_BODY = 'INVALID_REQUEST_BODY'
SHORTEN_REJECTED = 'SHORTEN_REJECTED'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
IDEMPOTENT_REPLAY = 'IDEMPOTENT_REPLAY'
IDEMPOTENCY_CACHE_UNAVAILABLE = 'IDEMPOTENCY_CACHE_UNAVAILABLE'
IDEMPOTENCY_KEY_REUSED = 'IDEMPOTENCY_KEY_REUSED'

IDEMPOTENCY_HEADER = 'idempotency-key'
