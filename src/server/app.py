from __future__ import annotations
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from citisignal_mesh.config import MeshConfig, MeshConfigError, cors_settings, load_config, load_env
from citisignal_mesh.schema import execute, operation_type, result_to_dict
from citisignal_mesh.sources import close_sessions, create_context


logger = logging.getLogger(__name__)

load_env()

_CORS = cors_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    close_sessions()


app = FastAPI(title="Citisignal API Mesh", version="1.0.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[_CORS["origin"]] if isinstance(_CORS["origin"], str) else list(_CORS["origin"]),
    allow_credentials=_CORS["credentials"],
    allow_methods=list(_CORS["methods"]),
    allow_headers=["*"],
    expose_headers=list(_CORS["exposedHeaders"]),
    max_age=_CORS["maxAge"],
)

_CONFIG: Optional[MeshConfig] = None


def get_config() -> MeshConfig:
    # Loaded on first request so the app imports without upstream env set
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_config()
        logging.getLogger("citisignal_mesh").setLevel(_CONFIG.log_level)
    return _CONFIG


class GraphQLRequest(BaseModel):
    query: Optional[str] = None
    variables: Optional[Dict[str, Any]] = None
    operationName: Optional[str] = None


def run_operation(request: Request, response: Response, body: GraphQLRequest) -> Dict:
    if not body.query:
        raise HTTPException(status_code=400, detail="Must provide query string.")
    try:
        config = get_config()
    except MeshConfigError as e:
        raise HTTPException(status_code=503, detail=str(e))
    context = create_context(dict(request.headers), config)
    result = execute(body.query, context, body.variables, body.operationName)
    response.headers.update(context.response_headers)
    if result.errors:
        logger.info(f"{body.operationName or 'anonymous'}: {len(result.errors)} error(s)")
    return result_to_dict(result)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/graphql")
def graphql_post(body: GraphQLRequest, request: Request, response: Response) -> Dict:
    return run_operation(request, response, body)


@app.get("/graphql")
def graphql_get(
    request: Request,
    response: Response,
    query: Optional[str] = None,
    variables: Optional[str] = None,
    operationName: Optional[str] = None,
) -> Dict:
    try:
        parsed = json.loads(variables) if variables else None
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail=f"Variables are invalid JSON: {e}")
    kind = operation_type(query, operationName) if query else None
    if kind and kind != "query":
        raise HTTPException(
            status_code=405,
            detail=f"Can only perform a {kind} operation from a POST request.",
            headers={"Allow": "POST"},
        )
    return run_operation(request, response, GraphQLRequest(query=query, variables=parsed, operationName=operationName))
