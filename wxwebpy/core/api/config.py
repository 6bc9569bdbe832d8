"""
Client configuration.

Dataclasses for the HTTP layer (proxy, TLS, timeouts, pool limits), the
sync retry policy and the login handshake. ClientConfig bundles them and
turns them into aiohttp keyword arguments.
"""
import logging
import ssl
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Union
from urllib.parse import quote, urlsplit, urlunsplit

import aiohttp


DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)
DEFAULT_REFERER = 'https://wx.qq.com/'


@dataclass
class ProxyConfig:
    """HTTP(S) proxy, optionally with basic auth credentials."""
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def to_aiohttp_proxy(self) -> Optional[str]:
        """Proxy URL with the credentials folded in, or None without a URL."""
        if not self.url:
            return None
        if not (self.username and self.password):
            return self.url

        parts = urlsplit(self.url)
        credentials = f"{quote(self.username, safe='')}:{quote(self.password, safe='')}"
        return urlunsplit(parts._replace(netloc=f"{credentials}@{parts.netloc}"))


@dataclass
class SSLConfig:
    """TLS verification settings."""
    verify: bool = True
    ca_file: Optional[str] = None
    check_hostname: bool = True

    def create_ssl_context(self) -> Union[ssl.SSLContext, bool]:
        """Build the context for TCPConnector; False turns verification off."""
        if not self.verify:
            return False
        context = ssl.create_default_context(cafile=self.ca_file)
        context.check_hostname = self.check_hostname
        return context


@dataclass
class TimeoutConfig:
    """
    Socket timeouts in seconds.

    Check login and sync check are long polls that the server holds open
    for about 25 seconds, so sock_read has to stay above that. total is
    unset by default so large uploads are not cut off.
    """
    connect: float = 15.0
    sock_connect: float = 15.0
    sock_read: float = 40.0
    total: Optional[float] = None

    def to_aiohttp_timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read,
            sock_connect=self.sock_connect
        )


@dataclass
class RetryConfig:
    """
    Backoff for transport failures during sync polling.

    Attempt n waits base_delay * exponential_base ** n seconds, capped at
    max_delay.
    """
    max_retries: int = 4
    base_delay: float = 1.0
    max_delay: float = 16.0
    exponential_base: float = 2.0

    def calculate_delay(self, attempt: int) -> float:
        return min(self.base_delay * self.exponential_base ** attempt, self.max_delay)


@dataclass
class HandshakeConfig:
    """
    Login handshake configuration.

    Attributes:
        check_interval: Seconds between check-login polls
        max_check_attempts: Polls per QR code before giving up (None = until expiry)
        max_login_attempts: QR codes to try when one expires
        sync_interval: Seconds between sync checks
        device_id: Fixed device id (random when not set)
    """
    check_interval: float = 1.0
    max_check_attempts: Optional[int] = None
    max_login_attempts: int = 1
    sync_interval: float = 0.0
    device_id: Optional[str] = None


@dataclass
class ClientConfig:
    """
    Complete client configuration.

    Attributes:
        user_agent: Browser user agent the web endpoints expect
        referer: Referer header sent with every request
        extra_headers: Headers added last (they override the two above)
        log_level: Level for wxwebpy loggers while logging is unconfigured
        limit: Total connection pool size
        limit_per_host: Connections per host (sync check holds one open)
    """
    user_agent: str = DEFAULT_USER_AGENT
    referer: str = DEFAULT_REFERER
    extra_headers: Dict[str, str] = field(default_factory=dict)

    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    handshake: HandshakeConfig = field(default_factory=HandshakeConfig)

    log_level: int = logging.INFO
    limit: int = 100
    limit_per_host: int = 10

    @classmethod
    def default(cls) -> 'ClientConfig':
        return cls()

    @classmethod
    def with_proxy(cls, proxy_url: str, **kwargs) -> 'ClientConfig':
        """Configuration that routes every request through proxy_url."""
        return cls(proxy=ProxyConfig(url=proxy_url), **kwargs)

    @classmethod
    def insecure(cls, **kwargs) -> 'ClientConfig':
        """Configuration without certificate verification (debugging proxies)."""
        return cls(ssl=SSLConfig(verify=False, check_hostname=False), **kwargs)

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for aiohttp.TCPConnector."""
        return dict(
            limit=self.limit,
            limit_per_host=self.limit_per_host,
            ssl=self.ssl.create_ssl_context()
        )

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for aiohttp.ClientSession."""
        headers = {'User-Agent': self.user_agent, 'Referer': self.referer}
        headers.update(self.extra_headers)
        return dict(headers=headers, timeout=self.timeout.to_aiohttp_timeout())
