"""Build artefacts for the hosted mesh.

- ``mesh.json``: the mesh configuration with the schema SDL attached, only
  regenerated when its sources changed (md5 kept in ``.mesh-build-hash``).
- One standalone module per resolver: the hosting platform loads each
  resolver file on its own, so the utility definitions a resolver uses are
  copied into it. Dependencies are found with regular expressions over the
  source text, the same way for every module, with no import machinery.
"""

from __future__ import annotations
import copy
import hashlib
import json
import logging
import os
import pprint
import re
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from .config import MESH_CONFIG, PROJECT_ROOT
from .mapping import FACET_MAPPINGS


logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
RESOLVERS_DIR = PACKAGE_DIR / "resolvers"
SCHEMA_FILE = PACKAGE_DIR / "schema.graphql"
HASH_FILE_NAME = ".mesh-build-hash"
MESH_FILE_NAME = "mesh.json"
DEFAULT_BUNDLE_DIR = "build/resolvers"

# Utility modules in dependency order; bundles keep this order
UTILITY_MODULES = [
    "normalize",
    "mapping",
    "prices",
    "attributes",
    "images",
    "filters",
    "facets",
    "transform",
    "cart",
    "navigation",
    "queries",
    "sources",
]

MESH_SOURCE_FILES = ["config.py", "schema.graphql", "facet_mappings.json"]

TOP_LEVEL_RE = re.compile(
    r"^(?:@\w|def (?P<def>\w+)|class (?P<class>\w+)|(?P<assign>[A-Za-z_]\w*)\s*(?::[^=]+)?=(?!=))"
)
IDENTIFIER_RE = re.compile(r"\b[A-Za-z_]\w*\b")
RELATIVE_IMPORT_RE = re.compile(r"^from \.+[\w.]* import (?:\([^)]*\)|[^\n]*)\n", re.MULTILINE)
ABSOLUTE_IMPORT_RE = re.compile(r"^(?:import [^\n]+|from (?!\.)[\w.]+ import (?:\([^)]*\)|[^\n]*))\n", re.MULTILINE)
FUTURE_IMPORT = "from __future__ import annotations"


# ---------------------------------------------------------------------------
# mesh.json
# ---------------------------------------------------------------------------

def get_mesh_source_hash(bundle_dir: str = DEFAULT_BUNDLE_DIR) -> str:
    digest = hashlib.md5(bundle_dir.encode("utf-8"))
    for name in MESH_SOURCE_FILES:
        path = PACKAGE_DIR / name
        if path.exists():
            digest.update(path.read_bytes())
    for path in sorted(RESOLVERS_DIR.glob("*.py")):
        digest.update(path.read_bytes())
    return digest.hexdigest()


def get_stored_mesh_hash(root: Path) -> Optional[str]:
    path = root / HASH_FILE_NAME
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8").strip()


def resolver_module_paths() -> List[Path]:
    return sorted(p for p in RESOLVERS_DIR.glob("*.py") if p.name != "__init__.py")


def build_mesh_document(bundle_dir: str = DEFAULT_BUNDLE_DIR) -> Dict:
    document = copy.deepcopy(MESH_CONFIG)
    mesh = document["meshConfig"]
    mesh["additionalTypeDefs"] = SCHEMA_FILE.read_text(encoding="utf-8")
    mesh["additionalResolvers"] = [f"./{bundle_dir}/{p.name}" for p in resolver_module_paths()]
    return document


def generate_mesh_config(root: Path = PROJECT_ROOT, force: bool = False, bundle_dir: str = DEFAULT_BUNDLE_DIR) -> bool:
    """Write mesh.json when the mesh sources changed; returns whether it was written."""
    root = Path(root)
    current = get_mesh_source_hash(bundle_dir)
    if not force and current == get_stored_mesh_hash(root):
        logger.info("No changes detected in mesh configuration, skipping mesh.json")
        return False

    out = root / MESH_FILE_NAME
    out.write_text(json.dumps(build_mesh_document(bundle_dir), indent=2), encoding="utf-8")
    # Read back so a broken document fails the build, not the deploy
    json.loads(out.read_text(encoding="utf-8"))
    (root / HASH_FILE_NAME).write_text(current, encoding="utf-8")
    logger.info(f"Mesh configuration generated ({out})")
    return True


# ---------------------------------------------------------------------------
# Resolver bundling
# ---------------------------------------------------------------------------

def split_definitions(source: str) -> List[Tuple[str, str]]:
    """Top-level (name, block) pairs in source order; imports and docstrings are skipped."""
    blocks: List[Tuple[str, str]] = []
    current_name: Optional[str] = None
    current: List[str] = []
    pending_decorators: List[str] = []

    def flush():
        if current_name and current:
            blocks.append((current_name, "".join(current).rstrip() + "\n"))

    in_string = False
    for line in source.splitlines(keepends=True):
        starts_block = not in_string and line[:1] not in ("", " ", "\t", "\n", "#", ")", "]", "}")
        if line.count('"""') % 2:
            in_string = not in_string

        if not starts_block:
            if current_name:
                current.append(line)
            continue

        if line.startswith("@"):
            flush()
            current_name, current = None, []
            pending_decorators.append(line)
            continue
        flush()
        m = TOP_LEVEL_RE.match(line)
        if m and (m.group("def") or m.group("class") or m.group("assign")):
            current_name = m.group("def") or m.group("class") or m.group("assign")
            current = pending_decorators + [line]
        else:
            current_name, current = None, []
        pending_decorators = []
    flush()
    return blocks


def module_imports(source: str) -> List[str]:
    return [m.group(0).rstrip("\n") for m in ABSOLUTE_IMPORT_RE.finditer(source) if not m.group(0).startswith(FUTURE_IMPORT)]


def load_utility_definitions() -> Tuple[Dict[str, Tuple[int, str, str]], Dict[str, List[str]]]:
    """name -> (order, module, block) over all utility modules, plus each module's imports."""
    definitions: Dict[str, Tuple[int, str, str]] = {}
    imports: Dict[str, List[str]] = {}
    order = 0
    for module in UTILITY_MODULES:
        source = (PACKAGE_DIR / f"{module}.py").read_text(encoding="utf-8")
        imports[module] = module_imports(source)
        for name, block in split_definitions(source):
            if name == "FACET_MAPPINGS":
                block = f"FACET_MAPPINGS = {pprint.pformat(FACET_MAPPINGS, width=100, sort_dicts=False)}\n"
            definitions[name] = (order, module, block)
            order += 1
    return definitions, imports


def referenced_names(text: str, known: Dict) -> Set[str]:
    return {name for name in IDENTIFIER_RE.findall(text) if name in known}


def resolve_dependencies(text: str, definitions: Dict[str, Tuple[int, str, str]]) -> Set[str]:
    # Names the text defines itself shadow the utility ones
    own = {name for name, _ in split_definitions(text)}
    needed: Set[str] = set()
    queue = list(referenced_names(text, definitions) - own)
    while queue:
        name = queue.pop()
        if name in needed:
            continue
        needed.add(name)
        block = definitions[name][2]
        queue.extend(referenced_names(block, definitions) - needed - {name})
    return needed


def strip_module_imports(source: str) -> str:
    source = RELATIVE_IMPORT_RE.sub("", source)
    source = ABSOLUTE_IMPORT_RE.sub("", source)
    return source.replace(FUTURE_IMPORT + "\n", "")


def bundle_resolver(path: Path) -> str:
    path = Path(path)
    source = path.read_text(encoding="utf-8")
    definitions, imports = load_utility_definitions()

    body = strip_module_imports(source).strip() + "\n"
    needed = resolve_dependencies(body, definitions)
    ordered = sorted(needed, key=lambda n: definitions[n][0])

    import_lines: List[str] = []
    for line in module_imports(source):
        if line not in import_lines:
            import_lines.append(line)
    for module in UTILITY_MODULES:
        if any(definitions[n][1] == module for n in ordered):
            for line in imports[module]:
                if line not in import_lines:
                    import_lines.append(line)

    parts = [
        f"# Generated from {path.name} by citisignal-mesh build. Do not edit.",
        FUTURE_IMPORT,
        "\n".join(import_lines),
        "",
        "\n\n".join(definitions[n][2].rstrip() for n in ordered),
        "",
        body,
    ]
    logger.debug(f"{path.name}: inlined {len(ordered)} definitions")
    return "\n".join(parts)


def build_all(root: Path = PROJECT_ROOT, out_dir: Optional[Path] = None, force: bool = False) -> List[Path]:
    root = Path(root)
    out_dir = Path(out_dir) if out_dir else root / DEFAULT_BUNDLE_DIR
    # mesh.json references bundles relative to the project root
    bundle_dir = Path(os.path.relpath(out_dir.resolve(), root.resolve())).as_posix()
    generate_mesh_config(root, force, bundle_dir)

    out_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for path in resolver_module_paths():
        target = out_dir / path.name
        target.write_text(bundle_resolver(path), encoding="utf-8")
        written.append(target)
    logger.info(f"Bundled {len(written)} resolvers into {out_dir}")
    return written
