from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests
from requests.exceptions import ConnectionError, ReadTimeout

log = logging.getLogger(__name__)


@dataclass
class HTTPClient:
    user_agent: str
    timeout_s: float = 10.0
    tries: int = 2
    backoff_s: float = 0.5
    headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.s = requests.Session()
        self.s.headers.update(
            {
                "User-Agent": self.user_agent,
                "Accept": "application/json, application/geo+json;q=0.9, */*;q=0.8",
                **self.headers,
            }
        )

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None, timeout_s: Optional[float] = None) -> Any:
        """GET *url* and decode JSON.

        Connect/read timeouts are retried with exponential backoff; HTTP error
        statuses raise ``requests.HTTPError`` immediately.
        """
        timeout = timeout_s if timeout_s is not None else self.timeout_s
        last_err: Optional[Exception] = None
        for attempt in range(self.tries):
            try:
                r = self.s.get(url, params=params, timeout=timeout)
                r.raise_for_status()
                return r.json()
            except (ReadTimeout, ConnectionError) as e:
                last_err = e
                if attempt < self.tries - 1:
                    log.debug("GET %s failed (%s), retry %d/%d", url, type(e).__name__, attempt + 1, self.tries - 1)
                    time.sleep(self.backoff_s * (2**attempt))
        raise last_err if last_err else RuntimeError("HTTP get_json failed")
