"""
Clash controller client
Thin wrapper around the external-controller REST API of a clash core
"""

import requests
from typing import Optional, Dict, Any

from .exceptions import ClashAPIError

DEFAULT_USER_AGENT = 'clash.meta'


class ClashUtil:
    """
    Client for the clash external controller

    Usage:
        api = ClashUtil(
            controller_api='http://127.0.0.1:9090',
            secret='your-secret'
        )

        # Switch proxy mode
        api.config_patch({'mode': 'rule'})
    """

    def __init__(
        self,
        controller_api: str,
        secret: Optional[str] = None,
        timeout: int = 5,
        user_agent: str = DEFAULT_USER_AGENT
    ):
        if '://' not in controller_api:
            controller_api = f'http://{controller_api}'
        self.controller_api = controller_api.rstrip('/')
        self.secret = secret
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers['User-Agent'] = user_agent

        if secret:
            self.session.headers['Authorization'] = f'Bearer {secret}'

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict] = None,
        json: Optional[Dict] = None
    ) -> Any:
        """Make HTTP request to the controller"""
        url = f'{self.controller_api}{path}'

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                timeout=self.timeout
            )
            response.raise_for_status()

            if response.status_code == 204:
                return None

            try:
                return response.json()
            except ValueError:
                return response.text

        except requests.Timeout:
            raise TimeoutError(f'Request to {url} timed out after {self.timeout}s')
        except requests.HTTPError as e:
            raise ClashAPIError(
                f'{method} {path} failed: {e}',
                status_code=e.response.status_code if e.response is not None else None,
            )
        except requests.RequestException as e:
            raise ClashAPIError(f'{method} {path} failed: {e}')

    def version(self) -> str:
        """Get the core version string, e.g. 'Mihomo Meta v1.18.1'"""
        data = self._request('GET', '/version')
        if isinstance(data, dict):
            version = data.get('version', '')
            if data.get('meta'):
                return f'Meta {version}'.strip()
            return version
        return str(data)

    def config_get(self) -> Dict[str, Any]:
        """Get the running configuration (mode, tun, ports, ...)"""
        data = self._request('GET', '/configs')
        return data if isinstance(data, dict) else {}

    def config_reload(self, path: str) -> None:
        """Ask the core to reload its configuration from a file

        Args:
            path: Absolute path of the config file the core should load
        """
        self._request('PUT', '/configs', params={'force': 'true'}, json={'path': path})

    def config_patch(self, payload: Dict[str, Any]) -> None:
        """Patch fields of the running configuration

        Args:
            payload: Fields to change, e.g. {'mode': 'global'}
        """
        self._request('PATCH', '/configs', json=payload)

    def download(self, url: str, timeout: Optional[int] = None) -> bytes:
        """Download a remote profile or provider file

        Args:
            url: Subscription or provider URL
            timeout: Override for the client timeout

        Returns:
            Raw response body
        """
        timeout = timeout or self.timeout
        try:
            response = requests.get(
                url,
                headers={'User-Agent': self.session.headers['User-Agent']},
                timeout=timeout,
            )
            response.raise_for_status()
        except requests.Timeout:
            raise TimeoutError(f'Download of {url} timed out after {timeout}s')
        except requests.HTTPError as e:
            raise ClashAPIError(
                f'Download of {url} failed: {e}',
                status_code=e.response.status_code if e.response is not None else None,
            )
        except requests.RequestException as e:
            raise ClashAPIError(f'Download of {url} failed: {e}')
        return response.content
