# Log event codes
AUTH_STATUS = 'AUTH_STATUS'
SESSION_VERIFIED = 'SESSION_VERIFIED'
SETUP_SUCCESS = 'SETUP_SUCCESS'
LOGIN_SUCCESS = 'LOGIN_SUCCESS'
LOGOUT_SUCCESS = 'LOGOUT_SUCCESS'
AUTH_REQUEST_REJECTED = 'AUTH_REQUEST_REJECTED'
INVALID_ACTION = 'INVALID_ACTION'
