"""Application configuration.

RoutingConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path

from autoroute.errors import ConfigurationError

# 10 MB, shared by the body parsers and the upload parser
DEFAULT_SIZE_LIMIT = 10_485_760

# Searched under main_module_dir when routes_dirs is empty
DEFAULT_ROUTES_DIRS = ("routes", "route", "controllers", "controller")


@dataclass(frozen=True, slots=True)
class RoutingConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RoutingConfig(routes_dirs=("api",), use_class_names_as_routes=True)
    """

    # Discovery
    routes_dirs: tuple[str | Path, ...] = ()
    main_module_dir: str | Path = "."
    disable_routes: bool = False

    # URL prefix applied to every discovered route ("" or "/" means none)
    root: str = ""

    # Route naming
    use_class_names_as_routes: bool = False

    # Default verbs for methods without an http decorator (mutually exclusive)
    all_methods_routes_all_by_default: bool = False
    all_methods_routes_hidden_by_default: bool = False

    # Body handling
    disable_body_parser: bool = False
    disable_file_upload: bool = False
    body_parser_limit: int = DEFAULT_SIZE_LIMIT

    # Responses
    disable_no_cache_header: bool = False

    # Diagnostics
    log_routes: bool = False
    debug: bool = False

    def __post_init__(self) -> None:
        if self.all_methods_routes_all_by_default and self.all_methods_routes_hidden_by_default:
            msg = (
                "Both all_methods_routes_all_by_default and "
                "all_methods_routes_hidden_by_default are set to True"
            )
            raise ConfigurationError(msg)

    @property
    def effective_body_parser_limit(self) -> int:
        """The body parser limit, falling back to the default when not positive."""
        if self.body_parser_limit <= 0:
            return DEFAULT_SIZE_LIMIT
        return self.body_parser_limit

    @property
    def normalized_root(self) -> str:
        """``root`` with a leading slash and no trailing slash, or ``""``."""
        root = self.root
        if not root or root == "/":
            return ""
        root = root.removesuffix("/")
        if not root.startswith("/"):
            root = "/" + root
        return root

    def resolve_routes_dirs(self) -> list[Path]:
        """Return the routes directories that actually exist.

        Uses the explicit ``routes_dirs`` when given, otherwise the
        conventional names under ``main_module_dir``. Missing directories
        are dropped silently; ``disable_routes`` yields none.
        """
        if self.disable_routes:
            return []
        if self.routes_dirs:
            candidates = [Path(d) for d in self.routes_dirs]
        else:
            base = Path(self.main_module_dir)
            candidates = [base / name for name in DEFAULT_ROUTES_DIRS]
        return [d for d in candidates if d.is_dir()]
