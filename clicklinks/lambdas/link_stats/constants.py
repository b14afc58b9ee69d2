# Logging event / error codes of the link_stats lambda
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
STATS_REJECTED = 'STATS_REJECTED'
STATS_SUCCESS = 'STATS_SUCCESS'
