from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv

from .sources import SourceConfig


PROJECT_ROOT = Path(__file__).resolve().parents[2]

DEFAULT_TIMEOUT = 30.0

_CATALOG_CONTEXT_HEADERS = {
    "Content-Type": "application/json",
    "Magento-Environment-Id": "{context.headers['magento-environment-id']}",
    "Magento-Website-Code": "{context.headers['magento-website-code']}",
    "Magento-Store-View-Code": "{context.headers['magento-store-view-code']}",
    "Magento-Store-Code": "{context.headers['magento-store-code']}",
    "Magento-Customer-Group": "{context.headers['magento-customer-group']}",
}

# Same layout as the hosted mesh configuration; build.py writes it to mesh.json
MESH_CONFIG: Dict = {
    "meshConfig": {
        "sources": [
            {
                "name": "CommerceGraphQL",
                "handler": {
                    "graphql": {
                        "endpoint": "{env.ADOBE_COMMERCE_GRAPHQL_ENDPOINT}",
                        "operationHeaders": {
                            "Content-Type": "application/json",
                            "Store": "{context.headers['store']}",
                        },
                    }
                },
                "transforms": [{"prefix": {"value": "Commerce_", "includeRootOperations": True}}],
            },
            {
                "name": "CatalogServiceSandbox",
                "handler": {
                    "graphql": {
                        "endpoint": "{env.ADOBE_SANDBOX_CATALOG_SERVICE_ENDPOINT}",
                        "operationHeaders": {
                            **_CATALOG_CONTEXT_HEADERS,
                            "X-Api-Key": "{context.headers['x-api-key']}",
                            "Authorization": "{context.headers['Authorization']}",
                        },
                        "schemaHeaders": {"x-api-key": "{env.ADOBE_CATALOG_API_KEY}"},
                    }
                },
                "transforms": [{"prefix": {"value": "Catalog_", "includeRootOperations": True}}],
                "responseConfig": {"headers": ["X-Magento-Cache-Id"]},
            },
            {
                "name": "LiveSearchSandbox",
                "handler": {
                    "graphql": {
                        "endpoint": "{env.ADOBE_SANDBOX_CATALOG_SERVICE_ENDPOINT}",
                        "operationHeaders": {**_CATALOG_CONTEXT_HEADERS, "X-Api-Key": "search_gql"},
                        "schemaHeaders": {
                            "x-api-key": "{env.ADOBE_CATALOG_API_KEY}",
                            "Magento-Environment-Id": "{env.ADOBE_COMMERCE_ENVIRONMENT_ID}",
                            "Magento-Website-Code": "{env.ADOBE_COMMERCE_WEBSITE_CODE}",
                            "Magento-Store-View-Code": "{env.ADOBE_COMMERCE_STORE_VIEW_CODE}",
                            "Magento-Store-Code": "{env.ADOBE_COMMERCE_STORE_CODE}",
                            "X-Api-Key": "search_gql",
                        },
                    }
                },
                "transforms": [{"prefix": {"value": "Search_", "includeRootOperations": True}}],
            },
        ],
        "transforms": [
            {
                "filterSchema": {
                    "mode": "wrap",
                    "filters": ["Query.{Citisignal_*, Catalog_productSearch}", "Type.!Mutation"],
                }
            }
        ],
        "additionalResolvers": [],
        "responseConfig": {
            "CORS": {
                "credentials": True,
                "exposedHeaders": ["Content-Range", "X-Content-Range", "X-Magento-Cache-Id"],
                "maxAge": 60480,
                "methods": ["GET", "POST"],
                "origin": "*",
            }
        },
    }
}

SOURCE_KEYS = {
    "commerce": "CommerceGraphQL",
    "catalog": "CatalogServiceSandbox",
    "search": "LiveSearchSandbox",
}


class MeshConfigError(ValueError):
    """Required configuration is missing."""


@dataclass
class MeshConfig:
    commerce: SourceConfig
    catalog: SourceConfig
    search: SourceConfig
    log_level: str = "WARNING"


def cors_settings() -> Dict:
    return MESH_CONFIG["meshConfig"]["responseConfig"]["CORS"]


def load_env(env_file: Optional[str] = None) -> None:
    # Project root and CWD first, then an explicit file on top
    load_dotenv(PROJECT_ROOT / ".env")
    load_dotenv(Path.cwd() / ".env")
    if env_file:
        load_dotenv(env_file, override=True)


def _source_entry(name: str) -> Dict:
    for source in MESH_CONFIG["meshConfig"]["sources"]:
        if source["name"] == name:
            return source
    raise MeshConfigError(f"Unknown source: {name}")


def resolve_env_placeholder(value: str, env: Mapping[str, str]) -> str:
    if value.startswith("{env.") and value.endswith("}"):
        return env.get(value[len("{env."):-1], "")
    return value


def _source_config(key: str, env: Mapping[str, str], timeout: float) -> SourceConfig:
    source = _source_entry(SOURCE_KEYS[key])
    handler = source["handler"]["graphql"]
    endpoint = resolve_env_placeholder(handler["endpoint"], env)
    if not endpoint:
        raise MeshConfigError(f"Missing endpoint for {source['name']}: set {handler['endpoint'][5:-1]}")
    return SourceConfig(
        name=source["name"],
        endpoint=endpoint,
        prefix=source["transforms"][0]["prefix"]["value"],
        operation_headers=dict(handler.get("operationHeaders") or {}),
        timeout=timeout,
    )


def load_config(env: Optional[Mapping[str, str]] = None) -> MeshConfig:
    env = os.environ if env is None else env
    try:
        timeout = float(env.get("MESH_UPSTREAM_TIMEOUT") or DEFAULT_TIMEOUT)
    except ValueError:
        raise MeshConfigError(f"MESH_UPSTREAM_TIMEOUT must be a number, got {env.get('MESH_UPSTREAM_TIMEOUT')!r}")
    return MeshConfig(
        commerce=_source_config("commerce", env, timeout),
        catalog=_source_config("catalog", env, timeout),
        search=_source_config("search", env, timeout),
        log_level=(env.get("LOG_LEVEL") or "WARNING").upper(),
    )
