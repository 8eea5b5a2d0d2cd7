"""
Static pattern tables for filegate.

Default exclude globs for directory scans, default sensitive-file globs for
path validation, and the set of extensions that are never read as text.
These tables are module-level constants and are never mutated at runtime.
"""

from pathlib import PurePath

# Patterns excluded from every directory scan, in addition to caller excludes
DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    # Dependency directories
    "node_modules/**",
    "vendor/**",
    "bower_components/**",
    # Build outputs
    "dist/**",
    "build/**",
    "out/**",
    ".next/**",
    ".nuxt/**",
    ".output/**",
    # Test coverage
    "coverage/**",
    ".nyc_output/**",
    # Cache directories
    ".cache/**",
    ".parcel-cache/**",
    ".turbo/**",
    "__pycache__/**",
    # Lock files
    "*.lock",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    # Minified/bundled output
    "*.min.js",
    "*.min.css",
    "*.bundle.js",
    "*.chunk.js",
    # Source maps
    "*.map",
    "*.js.map",
    "*.css.map",
    # Version control
    ".git/**",
    ".svn/**",
    ".hg/**",
    # IDE configuration
    ".idea/**",
    ".vscode/**",
    "*.code-workspace",
    # Logs
    "*.log",
    "logs/**",
    # Temporary files
    "tmp/**",
    "temp/**",
    ".tmp/**",
)

# Sensitive patterns that are ALWAYS checked regardless of user config.
# User-supplied patterns extend this list, they never replace it.
DEFAULT_SENSITIVE_PATTERNS: tuple[str, ...] = (
    # Environment files
    ".env",
    ".env.*",
    "**/.env",
    "**/.env.*",
    # SSH and key material
    ".ssh/**",
    "**/.ssh/**",
    "*.pem",
    "*.key",
    "*.pfx",
    "*.p12",
    "**/id_rsa",
    "**/id_rsa.*",
    "**/id_ed25519",
    "**/id_ed25519.*",
    "**/id_dsa",
    "**/id_dsa.*",
    # Credentials and secrets
    "**/credentials*",
    "**/secrets*",
    "**/secret.*",
    "**/*password*",
    "**/*token*",
    # Git credentials
    "**/.git/config",
    "**/.gitconfig",
    # Local databases
    "*.sqlite",
    "*.sqlite3",
    "*.db",
    # Shell history
    "**/.bash_history",
    "**/.zsh_history",
    "**/.node_repl_history",
    # Cloud provider credentials
    "**/.aws/**",
    "**/.azure/**",
    "**/.gcloud/**",
    # Compose files often embed secrets
    "**/docker-compose*.yml",
    "**/docker-compose*.yaml",
)

# Extensions that are never loaded as text
BINARY_EXTENSIONS: frozenset[str] = frozenset([
    # Images
    ".png", ".jpg", ".jpeg", ".gif", ".webp", ".ico", ".bmp", ".svg", ".tiff", ".avif",
    # Audio
    ".mp3", ".wav", ".ogg", ".flac", ".aac", ".m4a", ".wma",
    # Video
    ".mp4", ".avi", ".mov", ".mkv", ".wmv", ".flv", ".webm", ".m4v",
    # Archives
    ".zip", ".tar", ".gz", ".rar", ".7z", ".bz2", ".xz",
    # Executables and libraries
    ".exe", ".dll", ".so", ".dylib", ".bin", ".app", ".msi",
    # Binary documents
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".odt", ".ods", ".odp",
    # Fonts
    ".woff", ".woff2", ".ttf", ".eot", ".otf",
    # Databases
    ".db", ".sqlite", ".sqlite3", ".mdb",
    # Compiled artifacts
    ".class", ".jar", ".pyc", ".pyo", ".o", ".obj", ".a", ".lib",
    ".icns", ".cur",
])


def is_binary_file(path: str | PurePath) -> bool:
    """Check if a path has a registered binary extension (case-insensitive)."""
    name = str(path).replace("\\", "/").rsplit("/", 1)[-1]
    return PurePath(name).suffix.lower() in BINARY_EXTENSIONS


def binary_exclude_patterns() -> list[str]:
    """Return one exclude glob per binary extension, sorted for stable output."""
    return [f"**/*{ext}" for ext in sorted(BINARY_EXTENSIONS)]
