# Log event codes
MISSING_SLUG = 'MISSING_SLUG'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
VIEW_SUCCESS = 'VIEW_SUCCESS'
