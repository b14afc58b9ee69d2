# Logging event / error codes of the shorten_url lambda
INVALID_JSON = 'INVALID_JSON'
SHORT_LINK_CREATED = 'SHORT_LINK_CREATED'
SHORT_LINK_REJECTED = 'SHORT_LINK_REJECTED'
