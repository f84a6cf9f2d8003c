from __future__ import annotations
import json
import logging
import os
import re
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests

from .queries import build_operation


logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\{(?:context\.headers\[['\"]([^'\"]+)['\"]\]|env\.([A-Za-z0-9_]+))\}")

# Upstream response headers passed back to the client
FORWARDED_RESPONSE_HEADERS = ("X-Magento-Cache-Id",)

_SESSIONS: Dict[str, requests.Session] = {}
_SESSIONS_LOCK = threading.Lock()


class SourceError(requests.HTTPError):
    """GraphQL-level error returned by an upstream source."""


@dataclass
class SourceConfig:
    name: str
    endpoint: str
    prefix: str
    operation_headers: Dict[str, str] = field(default_factory=dict)
    timeout: float = 30.0
    max_retries: int = 3


def build_session(cfg: SourceConfig) -> requests.Session:
    s = requests.Session()
    s.headers.update(
        {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": "citisignal-mesh/1.0",
        }
    )
    return s


def get_session(cfg: SourceConfig) -> requests.Session:
    """One pooled session per upstream for the life of the process."""
    with _SESSIONS_LOCK:
        session = _SESSIONS.get(cfg.name)
        if session is None:
            session = _SESSIONS[cfg.name] = build_session(cfg)
        return session


def close_sessions() -> None:
    with _SESSIONS_LOCK:
        for session in _SESSIONS.values():
            session.close()
        _SESSIONS.clear()


def parse_retry_after(value: Optional[str], default: float) -> float:
    # Retry-After may also be an HTTP date; those fall back to the backoff
    try:
        return max(float(value), 0.0) if value is not None else default
    except ValueError:
        return default


def graphql(
    session: requests.Session,
    cfg: SourceConfig,
    query: str,
    variables: Dict,
    headers: Optional[Dict[str, str]] = None,
    response_headers: Optional[Dict[str, str]] = None,
) -> Dict:
    backoff = 1.0
    payload = {"query": query, "variables": variables}
    attempts = 0
    while True:
        resp = session.post(cfg.endpoint, data=json.dumps(payload), headers=headers, timeout=cfg.timeout)
        if resp.status_code == 429 and attempts < cfg.max_retries:
            attempts += 1
            retry_after = parse_retry_after(resp.headers.get("Retry-After"), backoff)
            logger.info(f"{cfg.name}: rate limited, retrying in {retry_after}s")
            time.sleep(retry_after)
            backoff = min(backoff * 2, 10.0)
            continue
        resp.raise_for_status()
        if response_headers is not None:
            for name in FORWARDED_RESPONSE_HEADERS:
                if name in resp.headers:
                    response_headers[name] = resp.headers[name]
        data = resp.json()
        if data.get("errors"):
            raise SourceError(f"GraphQL error: {data['errors']}")
        return data


def interpolate_headers(
    templates: Mapping[str, str],
    request_headers: Mapping[str, str],
    env: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """Resolve mesh header placeholders; headers with a missing value are dropped."""
    env = os.environ if env is None else env
    lowered = {k.lower(): v for k, v in request_headers.items()}
    out: Dict[str, str] = {}
    for name, template in templates.items():
        missing = False

        def _sub(m: re.Match) -> str:
            nonlocal missing
            header, var = m.group(1), m.group(2)
            value = lowered.get(header.lower()) if header else env.get(var)
            if not value:
                missing = True
                return ""
            return value

        value = PLACEHOLDER_RE.sub(_sub, template)
        if not missing and value:
            out[name] = value
    return out


def prefix_typenames(data: Any, prefix: str) -> Any:
    if isinstance(data, list):
        return [prefix_typenames(v, prefix) for v in data]
    if isinstance(data, dict):
        out = {}
        for k, v in data.items():
            if k == "__typename" and isinstance(v, str) and not v.startswith(prefix):
                out[k] = prefix + v
            else:
                out[k] = prefix_typenames(v, prefix)
        return out
    return data


class SourceClient:
    """Root-field calls against one upstream source."""

    def __init__(
        self,
        cfg: SourceConfig,
        request_headers: Optional[Mapping[str, str]] = None,
        session: Optional[requests.Session] = None,
        response_headers: Optional[Dict[str, str]] = None,
    ):
        self.cfg = cfg
        self.request_headers = dict(request_headers or {})
        self.session = session or get_session(cfg)
        self.response_headers = response_headers if response_headers is not None else {}

    def query(self, field_name: str, args: Optional[Dict] = None, selection_set: Optional[str] = None) -> Any:
        return self._execute("query", field_name, args, selection_set)

    def mutate(self, field_name: str, args: Optional[Dict] = None, selection_set: Optional[str] = None) -> Any:
        return self._execute("mutation", field_name, args, selection_set)

    def _execute(self, operation: str, field_name: str, args: Optional[Dict], selection_set: Optional[str]) -> Any:
        variables = {k: v for k, v in (args or {}).items() if v is not None}
        document = build_operation(operation, f"{self.cfg.prefix}{field_name}", field_name, variables, selection_set)
        headers = interpolate_headers(self.cfg.operation_headers, self.request_headers)
        logger.debug(f"{self.cfg.name}: {operation} {field_name} vars={list(variables)}")
        data = graphql(self.session, self.cfg, document, variables, headers, self.response_headers)
        result = (data.get("data") or {}).get(field_name)
        return prefix_typenames(result, self.cfg.prefix)


@dataclass
class MeshContext:
    headers: Dict[str, str]
    commerce: SourceClient
    catalog: SourceClient
    search: SourceClient
    response_headers: Dict[str, str] = field(default_factory=dict)

    @property
    def cart_id(self) -> Optional[str]:
        return self.headers.get("x-cart-id") or None


def create_context(headers: Mapping[str, str], config) -> MeshContext:
    lowered = {k.lower(): v for k, v in (headers or {}).items()}
    forwarded: Dict[str, str] = {}
    return MeshContext(
        headers=lowered,
        commerce=SourceClient(config.commerce, lowered, response_headers=forwarded),
        catalog=SourceClient(config.catalog, lowered, response_headers=forwarded),
        search=SourceClient(config.search, lowered, response_headers=forwarded),
        response_headers=forwarded,
    )


def gather(*calls: Callable[[], Any]) -> List[Any]:
    """Run calls in parallel; results keep call order and the earliest failure propagates."""
    if not calls:
        return []
    pool = ThreadPoolExecutor(max_workers=len(calls))
    try:
        futures = [pool.submit(call) for call in calls]
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        for future in futures:
            if future in done and future.exception() is not None:
                raise future.exception()
        return [f.result() for f in futures]
    finally:
        # Stragglers after a failure finish in the background
        pool.shutdown(wait=False, cancel_futures=True)
