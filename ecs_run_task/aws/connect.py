"""
AWS client stack.

All boto clients are created through the ``ClientFactory``, which sets the user agent of the
action and caches clients per region.
"""
import logging
import threading
from functools import lru_cache
from typing import Optional

from boto3.session import Session
from botocore.client import BaseClient
from botocore.config import Config

from ecs_run_task.constants import USER_AGENT

LOG = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"


class ClientFactory:
    """
    Factory to build the AWS clients.

    Boto client creation is resource intensive. This class caches all Boto
    clients it creates and must be used instead of directly using boto lib.
    """

    def __init__(self, session: Session = None, config: Config = None):
        """
        :param session: Session to be used for client creation. Will create a new session if not provided.
        :param config: Config used as default for client creation.
        """
        self._config: Config = config or Config(user_agent_extra=USER_AGENT)
        self._session: Session = session or Session()
        self._create_client_lock = threading.RLock()

    def get_client(
        self,
        service_name: str,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        config: Optional[Config] = None,
    ) -> BaseClient:
        """
        Build and return a client targeting AWS. Credentials and region are resolved by the botocore
        session (environment variables, ``~/.aws/credentials``, ``~/.aws/config``, instance role).

        :param service_name: Service to build the client for, eg. `ecs`
        :param region_name: Name of the AWS region to be associated with the client
            If set to None, loads from botocore session.
        :param endpoint_url: Full endpoint URL to be used by the client.
            Defaults to appropriate AWS endpoint.
        :param config: Boto config for advanced use.
        """
        if config is None:
            config = self._config
        else:
            config = self._config.merge(config)

        return self._get_client(
            service_name=service_name,
            region_name=region_name or self.get_region(),
            endpoint_url=endpoint_url,
            config=config,
        )

    @lru_cache(maxsize=32)
    def _get_client(
        self,
        service_name: str,
        region_name: str,
        endpoint_url: Optional[str],
        config: Config,
    ) -> BaseClient:
        with self._create_client_lock:
            return self._session.client(
                service_name=service_name,
                region_name=region_name,
                endpoint_url=endpoint_url,
                config=config,
            )

    def get_region(self) -> str:
        """
        Return the AWS region name as set in the Boto session, falling back to us-east-1.
        """
        return self._session.region_name or DEFAULT_REGION


def client_region(client: BaseClient) -> str:
    """Returns the region a client was created for, used to build console links."""
    return client.meta.region_name or DEFAULT_REGION


connect_to = ClientFactory()
