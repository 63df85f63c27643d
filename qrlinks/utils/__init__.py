from qrlinks.utils.config import app_env, app_name, app_prefix, load_config, store_config
from qrlinks.utils.helpers import (
    base_url,
    get_short_url,
    get_header,
    query_parameter,
    path_parameter,
    client_ip,
    parse_json_body,
    require_environment,
    guarantee_500_response,
)
from qrlinks.utils.logging import initialize_logging
from qrlinks.utils.runtime import running_locally


__all__ = [
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'store_config',
    'base_url',
    'get_short_url',
    'get_header',
    'query_parameter',
    'path_parameter',
    'client_ip',
    'parse_json_body',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
    'running_locally',
]
