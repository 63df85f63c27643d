# Log event codes
UNAUTHORIZED = 'UNAUTHORIZED'
LINKS_LISTED = 'LINKS_LISTED'
LINK_FETCHED = 'LINK_FETCHED'
LINK_CREATED = 'LINK_CREATED'
LINK_UPDATED = 'LINK_UPDATED'
LINK_DELETED = 'LINK_DELETED'
LINK_REQUEST_REJECTED = 'LINK_REQUEST_REJECTED'
METHOD_NOT_ALLOWED = 'METHOD_NOT_ALLOWED'
