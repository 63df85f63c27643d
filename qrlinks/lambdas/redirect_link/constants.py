# Log event codes
MISSING_SLUG = 'MISSING_SLUG'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
REDIRECT_FAILED = 'REDIRECT_FAILED'
CLICK_PENDING = 'CLICK_PENDING'
