"""
Service context for log records.

Identifies which process wrote a line when several API workers and the
expiry sweeper share one log stream.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'popcorn-api')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    return f'{service_name}@{deploy_env}:{os.getpid()}'
