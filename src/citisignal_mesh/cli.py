from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .config import PROJECT_ROOT, MeshConfigError, load_config, load_env
from .deploy import DeployError, deploy


def setup_logging(verbose: int) -> None:
    level = getattr(logging, os.getenv("LOG_LEVEL", "WARNING").upper(), logging.WARNING)
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")


def parse_headers(values: Optional[List[str]]) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    for raw in values or []:
        if ":" not in raw:
            raise ValueError(f"Header must look like Name:Value, got {raw!r}")
        name, value = raw.split(":", 1)
        headers[name.strip()] = value.strip()
    return headers


def read_query(value: str) -> str:
    if value.startswith("@"):
        return Path(value[1:]).read_text(encoding="utf-8")
    return value


def cmd_build(args) -> int:
    from .build import build_all

    written = build_all(Path(args.root), Path(args.out) if args.out else None, force=args.force)
    print(f"Bundled {len(written)} resolvers; mesh.json in {args.root}")
    return 0


def cmd_deploy(args) -> int:
    ok = deploy(Path(args.root), prod=args.prod, force=args.force, skip_cache=args.skip_cache)
    print("Mesh deployed" if ok else "Mesh deployment failed; check aio api-mesh:status")
    return 0 if ok else 1


def cmd_serve(args) -> int:
    import uvicorn

    uvicorn.run("server.app:app", host=args.host, port=args.port, log_level="info" if args.verbose else "warning")
    return 0


def cmd_query(args) -> int:
    from .schema import execute, result_to_dict
    from .sources import close_sessions, create_context

    config = load_config()
    variables = json.loads(args.variables) if args.variables else None
    context = create_context(parse_headers(args.header), config)
    try:
        result = execute(read_query(args.query), context, variables, args.operation_name)
    finally:
        close_sessions()
    print(json.dumps(result_to_dict(result), indent=2))
    return 1 if result.errors else 0


def main(argv: Optional[List[str]] = None) -> int:
    # Early parse to pick up --env-file so env-driven defaults see it
    env_only = argparse.ArgumentParser(add_help=False)
    env_only.add_argument("--env-file", default="")
    early_args, _ = env_only.parse_known_args(argv)
    load_env(early_args.env_file or None)

    parser = argparse.ArgumentParser(description="Citisignal API Mesh gateway.", parents=[env_only])
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v, -vv)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_build = sub.add_parser("build", help="Generate mesh.json and standalone resolver bundles")
    p_build.add_argument("--force", action="store_true", help="Rebuild even if no changes were detected")
    p_build.add_argument("--root", default=str(PROJECT_ROOT), help="Directory receiving mesh.json")
    p_build.add_argument("--out", default="", help="Bundle output directory (default: <root>/build/resolvers)")
    p_build.set_defaults(func=cmd_build)

    p_deploy = sub.add_parser("deploy", help="Update the hosted mesh with aio and wait for provisioning")
    p_deploy.add_argument("--prod", action="store_true", help="Deploy to the production workspace")
    p_deploy.add_argument("--force", action="store_true", help="Deploy even if nothing changed since the last deploy")
    p_deploy.add_argument("--skip-cache", action="store_true", help="Skip the mesh cache purge")
    p_deploy.add_argument("--root", default=str(PROJECT_ROOT), help="Directory holding mesh.json")
    p_deploy.set_defaults(func=cmd_deploy)

    p_serve = sub.add_parser("serve", help="Run the gateway over HTTP")
    p_serve.add_argument("--host", default=os.getenv("MESH_HOST", "127.0.0.1"))
    p_serve.add_argument("--port", type=int, default=int(os.getenv("MESH_PORT", "4000")))
    p_serve.set_defaults(func=cmd_serve)

    p_query = sub.add_parser("query", help="Execute a GraphQL document locally and print the JSON result")
    p_query.add_argument("query", help="GraphQL document, or @path to read it from a file")
    p_query.add_argument("--variables", default="", help="Variables as a JSON object")
    p_query.add_argument("--operation-name", default=None)
    p_query.add_argument("--header", action="append", help="Request header Name:Value (repeatable)")
    p_query.set_defaults(func=cmd_query)

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        return args.func(args)
    except (MeshConfigError, DeployError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
