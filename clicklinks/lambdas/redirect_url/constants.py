# Logging event / error codes of the redirect_url lambda
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
REDIRECT_REJECTED = 'REDIRECT_REJECTED'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
