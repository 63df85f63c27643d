from qrlinks.services.credentials import AuthStatus, CredentialManager
from qrlinks.services.link_registry import LinkRegistry, to_response
from qrlinks.services.rate_limiter import FailedAttempt, LoginRateLimiter, RateLimitDecision
from qrlinks.services.redirect_resolver import RedirectResolver, RedirectTarget


__all__ = [
    'AuthStatus',
    'CredentialManager',
    'LinkRegistry',
    'to_response',
    'FailedAttempt',
    'LoginRateLimiter',
    'RateLimitDecision',
    'RedirectResolver',
    'RedirectTarget',
]
