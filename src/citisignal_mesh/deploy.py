"""Push mesh.json to the hosted mesh with the ``aio`` CLI and wait for provisioning.

Deploys are skipped when mesh.json and the bundles are unchanged since the
last successful deploy to the same environment.
"""

from __future__ import annotations
import hashlib
import logging
import subprocess
import time
from pathlib import Path
from typing import Callable, List, Optional

from .build import DEFAULT_BUNDLE_DIR, MESH_FILE_NAME, build_all
from .config import PROJECT_ROOT


logger = logging.getLogger(__name__)

POLL_INTERVAL = 30.0
POLL_TIMEOUT = 10 * 60.0
INITIAL_DELAY = 5.0
STATUS_TIMEOUT = 15.0
IGNORED_NOISE = ("deprecationwarning", "update available", "timeoutnanwarning")


class DeployError(RuntimeError):
    pass


def deploy_hash_file(prod: bool) -> str:
    return ".mesh-deploy-hash-prod" if prod else ".mesh-deploy-hash"


def get_deploy_hash(root: Path, bundle_dir: Path) -> str:
    digest = hashlib.md5()
    mesh = root / MESH_FILE_NAME
    if mesh.exists():
        digest.update(mesh.read_bytes())
    if bundle_dir.exists():
        for path in sorted(bundle_dir.glob("*.py")):
            digest.update(path.read_bytes())
    return digest.hexdigest()


def get_stored_deploy_hash(root: Path, prod: bool) -> Optional[str]:
    path = root / deploy_hash_file(prod)
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8").strip()


def check_mesh_status(output: str) -> str:
    """Classify ``aio api-mesh:status`` output as success, failed, provisioning or unknown."""
    if "Mesh provisioned successfully" in output:
        return "success"
    lower = output.lower()
    if ("failed" in lower or "error" in lower) and not any(noise in lower for noise in IGNORED_NOISE):
        return "failed"
    if "provisioning" in lower or "Wait a few minutes" in output:
        return "provisioning"
    return "unknown"


def run_aio(args: List[str], timeout: Optional[float] = None) -> str:
    # aio asks for confirmation on update; answer it up front
    proc = subprocess.run(
        ["aio", *args],
        input="y\n",
        capture_output=True,
        text=True,
        timeout=timeout,
    )
    output = (proc.stdout or "") + (proc.stderr or "")
    if proc.returncode != 0:
        raise DeployError(f"aio {' '.join(args)} exited with {proc.returncode}: {output.strip()}")
    return output


def purge_cache(prod: bool, runner: Callable[..., str] = run_aio) -> None:
    try:
        runner(["api-mesh:cache:purge", "-a", "-c"] + (["--prod"] if prod else []))
    except (DeployError, OSError) as e:
        logger.warning(f"Cache purge failed, proceeding with mesh update anyway: {e}")


def update_mesh(root: Path, prod: bool, runner: Callable[..., str] = run_aio) -> str:
    output = runner(["api-mesh:update", str(root / MESH_FILE_NAME)] + (["--prod"] if prod else []))
    if "error:" in output.lower():
        raise DeployError(f"Mesh update failed: {output.strip()}")
    return output


def poll_status(
    prod: bool,
    runner: Callable[..., str] = run_aio,
    sleep: Callable[[float], None] = time.sleep,
    interval: float = POLL_INTERVAL,
    timeout: float = POLL_TIMEOUT,
) -> bool:
    """Poll until provisioned; a timeout counts as success so the deploy is not blocked."""
    attempts = max(int(-(-timeout // interval)), 1)
    sleep(INITIAL_DELAY)
    for attempt in range(1, attempts + 1):
        if attempt > 1:
            sleep(interval)
        try:
            output = runner(["api-mesh:status"] + (["--prod"] if prod else []), timeout=STATUS_TIMEOUT)
        except (DeployError, subprocess.TimeoutExpired) as e:
            logger.debug(f"Status check {attempt}/{attempts} failed: {e}")
            continue
        status = check_mesh_status(output)
        logger.info(f"Mesh status ({attempt}/{attempts}): {status}")
        if status == "success":
            return True
        if status == "failed":
            return False
    logger.warning("Mesh status polling timed out; check the status manually")
    return True


def deploy(
    root: Path = PROJECT_ROOT,
    prod: bool = False,
    force: bool = False,
    skip_cache: bool = False,
    runner: Callable[..., str] = run_aio,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Returns False when the hosted mesh reported a failed provisioning."""
    root = Path(root)
    environment = "production" if prod else "staging"
    if not (root / MESH_FILE_NAME).exists():
        logger.warning("mesh.json not found, building first")
        build_all(root)

    current = get_deploy_hash(root, root / DEFAULT_BUNDLE_DIR)
    if not force and current == get_stored_deploy_hash(root, prod):
        logger.info(f"No changes since the last {environment} deployment, skipping")
        return True

    if not skip_cache:
        purge_cache(prod, runner)
    logger.info(f"Updating mesh configuration in {environment}")
    update_mesh(root, prod, runner)

    if not poll_status(prod, runner, sleep):
        logger.error(f"Mesh deployment to {environment} failed")
        return False
    (root / deploy_hash_file(prod)).write_text(current, encoding="utf-8")
    logger.info(f"Mesh deployed to {environment}")
    return True
