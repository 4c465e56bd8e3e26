"""Library injector — manages KiCad library registration and directory structure.

Layout under a library root (by default KiCad's per-version user directory,
~/Documents/KiCad/<version>):

    symbols/JLC-<Category>.kicad_sym     one library per category
    footprints/JLC.pretty/               shared footprint library
    3dmodels/JLC.3dshapes/               3D models, via ${JLC_3DMODELS}
"""

import json
import logging
import os
import re
import sys
from dataclasses import dataclass, field

from category_router import (
    all_categories, footprint_dir_name, footprint_library_name, library_filename,
    library_name, models_dir_name,
)
from library_mutator import append_entry, read_library, write_library
from models import LibraryCategory, RegistrationResult, TableUpdateResult
from symbol_generator import library_header

logger = logging.getLogger(__name__)

# Newest first
KICAD_VERSIONS = ("9.0", "8.0")
DEFAULT_KICAD_VERSION = KICAD_VERSIONS[0]

LIB_TABLE_VERSION = 7
MODELS_ENV_VAR = "JLC_3DMODELS"


@dataclass
class PlatformPaths:
    """Where KiCad keeps things on one machine; inject a fake home in tests."""
    home: str
    system: str = field(default=sys.platform)
    appdata: str | None = None

    @classmethod
    def current(cls) -> "PlatformPaths":
        return cls(home=os.path.expanduser("~"), system=sys.platform,
                   appdata=os.environ.get("APPDATA"))

    def config_dir(self, version: str = DEFAULT_KICAD_VERSION) -> str:
        """Global config directory holding sym-lib-table and fp-lib-table."""
        if self.system == "darwin":
            base = os.path.join(self.home, "Library", "Preferences", "kicad")
        elif self.system == "win32":
            appdata = self.appdata or os.path.join(self.home, "AppData", "Roaming")
            base = os.path.join(appdata, "kicad")
        else:  # Linux
            base = os.path.join(self.home, ".config", "kicad")
        return os.path.join(base, version)

    def documents_root(self) -> str:
        return os.path.join(self.home, "Documents", "KiCad")

    def user_dir(self, version: str = DEFAULT_KICAD_VERSION) -> str:
        return os.path.join(self.documents_root(), version)


def detect_kicad_version(paths: PlatformPaths) -> str:
    """Newest known version with a user directory, else the newest known version."""
    for version in KICAD_VERSIONS:
        if os.path.isdir(paths.user_dir(version)):
            return version
    return DEFAULT_KICAD_VERSION


# ── Library root layout ──────────────────────────────────────────────────────

def symbols_dir(root: str) -> str:
    return os.path.join(root, "symbols")


def symbol_library_path(root: str, category: LibraryCategory) -> str:
    return os.path.join(symbols_dir(root), library_filename(category))


def footprint_dir(root: str) -> str:
    return os.path.join(root, "footprints", footprint_dir_name())


def models_dir(root: str) -> str:
    return os.path.join(root, "3dmodels", models_dir_name())


def empty_symbol_library() -> str:
    return library_header() + ")\n"


def ensure_library_dirs(root: str) -> list[str]:
    """Create the library directory structure; returns the directories created."""
    created = []
    for path in (symbols_dir(root), footprint_dir(root), models_dir(root)):
        if not os.path.isdir(path):
            os.makedirs(path, exist_ok=True)
            created.append(path)
    return created


def ensure_library_stubs(root: str) -> tuple[list[str], list[str]]:
    """Create directories plus an empty library for every category.

    Returns (symbol files created, directories created).
    """
    directories = ensure_library_dirs(root)
    symbols = []
    for category in all_categories():
        path = symbol_library_path(root, category)
        if not os.path.exists(path):
            write_library(path, empty_symbol_library())
            symbols.append(path)
    return symbols, directories


# ── lib-tables ───────────────────────────────────────────────────────────────

def lib_table_has_entry(content: str, lib_name: str) -> bool:
    """Check if a lib-table already contains an entry for the given library."""
    return re.search(rf'\(name\s+"{re.escape(lib_name)}"\)', content) is not None


def lib_table_row(lib_name: str, uri: str, descr: str) -> str:
    return (f'  (lib (name "{lib_name}")(type "KiCad")(uri "{uri}")'
            f'(options "")(descr "{descr}"))\n')


def _table_header(kind: str) -> str:
    return f"({kind}_lib_table\n  (version {LIB_TABLE_VERSION})\n"


def ensure_lib_table(table_path: str, kind: str,
                     rows: list[tuple[str, str, str]]) -> TableUpdateResult:
    """Make sure every (name, uri, descr) row is in the table at `table_path`.

    A missing table is created with all rows; an existing one only gets
    the rows it lacks. Existing rows are never rewritten.
    """
    result = TableUpdateResult(path=table_path)
    content = read_library(table_path)

    if content is None or not content.strip():
        content = _table_header(kind) + "".join(lib_table_row(*row) for row in rows) + ")\n"
        write_library(table_path, content)
        result.created = True
        result.rows_added = len(rows)
        logger.info("Created %s with %d libraries", table_path, len(rows))
        return result

    for name, uri, descr in rows:
        if lib_table_has_entry(content, name):
            continue
        content = append_entry(content, lib_table_row(name, uri, descr))
        result.rows_added += 1

    if result.rows_added:
        write_library(table_path, content)
        result.modified = True
        logger.info("Added %d libraries to %s", result.rows_added, table_path)
    return result


def symbol_table_rows(root: str) -> list[tuple[str, str, str]]:
    return [(library_name(category), symbol_library_path(root, category),
             f"JLC {category.value} Library")
            for category in all_categories()]


def footprint_table_rows(root: str) -> list[tuple[str, str, str]]:
    return [(footprint_library_name(), footprint_dir(root), "JLC Footprint Library")]


def ensure_sym_lib_table(root: str, config_dir: str) -> TableUpdateResult:
    return ensure_lib_table(os.path.join(config_dir, "sym-lib-table"), "sym",
                            symbol_table_rows(root))


def ensure_fp_lib_table(root: str, config_dir: str) -> TableUpdateResult:
    return ensure_lib_table(os.path.join(config_dir, "fp-lib-table"), "fp",
                            footprint_table_rows(root))


def setup_environment_variable(root: str, config_dir: str,
                               var_name: str = MODELS_ENV_VAR) -> bool:
    """Set the 3D models path variable in kicad_common.json.

    Handles the case where "environment.vars" is null. Returns True when
    the file was changed.
    """
    common_path = os.path.join(config_dir, "kicad_common.json")
    target = models_dir(root)

    if os.path.exists(common_path):
        with open(common_path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    else:
        config = {}

    # Navigate to environment.vars, handling null
    env = config.get("environment")
    if not isinstance(env, dict):
        env = config["environment"] = {}
    if not isinstance(env.get("vars"), dict):
        env["vars"] = {}

    if env["vars"].get(var_name) == target:
        return False
    env["vars"][var_name] = target
    write_library(common_path, json.dumps(config, indent=2) + "\n")
    logger.info("Set %s=%s in %s", var_name, target, common_path)
    return True


# ── Registration ─────────────────────────────────────────────────────────────

def register_global_libraries(paths: PlatformPaths | None = None,
                              version: str | None = None,
                              library_root: str | None = None) -> RegistrationResult:
    """Idempotently register all JLC libraries with KiCad.

    Each step records its own failure in `errors` and the remaining steps
    still run; `success` is True only when every step completed.
    """
    paths = paths or PlatformPaths.current()
    version = version or detect_kicad_version(paths)
    root = library_root or paths.user_dir(version)
    config_dir = paths.config_dir(version)
    result = RegistrationResult(success=False, version=version)

    try:
        symbols, directories = ensure_library_stubs(root)
        result.symbols_created.extend(symbols)
        result.directories_created.extend(directories)
    except Exception as e:
        logger.warning("Creating library stubs failed: %s", e)
        result.errors.append(f"Library stubs: {e}")

    try:
        if not os.path.isdir(footprint_dir(root)):
            os.makedirs(footprint_dir(root), exist_ok=True)
            result.directories_created.append(footprint_dir(root))
    except Exception as e:
        logger.warning("Creating footprint directory failed: %s", e)
        result.errors.append(f"Footprint directory: {e}")

    try:
        result.sym_lib_table = ensure_sym_lib_table(root, config_dir)
    except Exception as e:
        logger.warning("Updating sym-lib-table failed: %s", e)
        result.errors.append(f"sym-lib-table: {e}")

    try:
        result.fp_lib_table = ensure_fp_lib_table(root, config_dir)
    except Exception as e:
        logger.warning("Updating fp-lib-table failed: %s", e)
        result.errors.append(f"fp-lib-table: {e}")

    try:
        setup_environment_variable(root, config_dir)
    except Exception as e:
        logger.warning("Setting %s failed: %s", MODELS_ENV_VAR, e)
        result.errors.append(f"{MODELS_ENV_VAR}: {e}")

    result.success = not result.errors
    return result
