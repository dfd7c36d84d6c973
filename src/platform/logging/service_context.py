"""Which deployment emitted a log line: `<service>/<version>@<env>:<instance>`."""

import os
from functools import lru_cache

from src.platform.config.core_setting import settings


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'ticketing-core')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    # Container hostname in ECS/k8s, pid when running locally
    instance_id = os.getenv('HOSTNAME') or str(os.getpid())
    return f'{service_name}/{settings.VERSION}@{deploy_env}:{instance_id[:12]}'
