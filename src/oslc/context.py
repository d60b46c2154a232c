from argparse import Namespace
from dataclasses import dataclass
from importlib.metadata import version, PackageNotFoundError
from typing import Dict, Any

from oslc.client import Endpoint, Client
from oslc.client.auth import get_authenticator, DEFAULT_MAX_LOGIN_ATTEMPTS
from oslc.domains import Domain, get_domain
from oslc.exceptions import ConfigError
from oslc.server import OSLCServer
from oslc.utils import strtobool


def get_version() -> str:
    try:
        return version('oslc-client')
    except PackageNotFoundError:
        return 'unknown'


@dataclass
class OSLCContext:
    """Lazily builds the objects needed to talk to the OSLC server described
    by the `SERVER` section of a configuration mapping."""
    config: Dict[str, Any] = None
    args: Namespace = None
    _endpoint: Endpoint = None
    _client: Client = None
    _server: OSLCServer = None

    @property
    def version(self):
        return get_version()

    @property
    def server_config(self) -> Dict[str, Any]:
        return (self.config or {}).get('SERVER', {})

    @property
    def endpoint(self) -> Endpoint:
        if self._endpoint is None:
            try:
                self._endpoint = Endpoint(url=self.server_config['URL'])
            except KeyError as e:
                raise ConfigError(f"Missing configuration key {e} in section 'SERVER'")

        return self._endpoint

    @property
    def domain(self) -> Domain:
        try:
            return get_domain(self.server_config['DOMAIN'])
        except KeyError as e:
            raise ConfigError(f"Missing configuration key {e} in section 'SERVER'")

    @property
    def client(self) -> Client:
        if self._client is None:
            server_config = self.server_config
            try:
                timeout = server_config.get('TIMEOUT')
                self._client = Client(
                    endpoint=self.endpoint,
                    username=server_config.get('USERNAME'),
                    password=server_config.get('PASSWORD'),
                    auth=get_authenticator(server_config),
                    server_cert=server_config.get('SERVER_CERT'),
                    verify=strtobool(server_config.get('VERIFY_SSL', True)),
                    ua_string=f'oslc-client/{self.version}',
                    timeout=float(timeout) if timeout is not None else None,
                    max_login_attempts=int(server_config.get('MAX_LOGIN_ATTEMPTS', DEFAULT_MAX_LOGIN_ATTEMPTS)),
                )
            except ValueError as e:
                raise ConfigError(f"Invalid configuration value in section 'SERVER': {e}")

        return self._client

    @property
    def server(self) -> OSLCServer:
        if self._server is None:
            self._server = OSLCServer(
                server_url=self.endpoint,
                domain=self.domain,
                client=self.client,
            )
        return self._server

    @property
    def default_project(self) -> str:
        try:
            return self.server_config['PROJECT']
        except KeyError as e:
            raise ConfigError(f"Missing configuration key {e} in section 'SERVER'")
