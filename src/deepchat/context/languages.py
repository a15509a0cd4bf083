"""Extension tables used when scanning a directory for context files."""

# Extensions never loaded as text
BINARY_EXTENSIONS = frozenset({
    ".exe", ".dll", ".so", ".dylib", ".bin", ".obj", ".o",
    ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".ico", ".svg",
    ".mp3", ".mp4", ".wav", ".avi", ".mov", ".mkv",
    ".zip", ".tar", ".gz", ".rar", ".7z",
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
    ".pdb", ".mdf", ".ldf",
})

# Matched as plain substrings of the lowercased full path, not as path segments
EXCLUDED_PATH_PARTS = (
    "node_modules",
    "bin",
    "obj",
    "debug",
    "release",
    ".git",
    ".vs",
    ".idea",
    "packages",
    "dist",
    "build",
)

LANGUAGE_BY_EXTENSION = {
    ".cs": "csharp",
    ".py": "python",
    ".js": "javascript",
    ".ts": "typescript",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".java": "java",
    ".cpp": "cpp",
    ".cxx": "cpp",
    ".cc": "cpp",
    ".c": "c",
    ".h": "c",
    ".hpp": "cpp",
    ".php": "php",
    ".rb": "ruby",
    ".go": "go",
    ".rs": "rust",
    ".swift": "swift",
    ".kt": "kotlin",
    ".kts": "kotlin",
    ".json": "json",
    ".xml": "xml",
    ".sql": "sql",
    ".sh": "bash",
    ".bash": "bash",
    ".ps1": "powershell",
    ".md": "markdown",
    ".yml": "yaml",
    ".yaml": "yaml",
}

DEFAULT_LANGUAGE = "text"


def language_for_extension(extension: str) -> str:
    """Map a file extension (with leading dot) to a language tag."""
    return LANGUAGE_BY_EXTENSION.get(extension.lower(), DEFAULT_LANGUAGE)


def is_binary_extension(extension: str) -> bool:
    return extension.lower() in BINARY_EXTENSIONS


def is_excluded_path(path: str) -> bool:
    lowered = path.lower()
    return any(part in lowered for part in EXCLUDED_PATH_PARTS)


def normalize_extensions(raw: str | None) -> set[str]:
    """Parse a comma-separated extension list such as "py, .cs,JS".

    Returns lowercased extensions with a leading dot; empty means all files.
    """
    extensions: set[str] = set()
    if not raw:
        return extensions
    for item in raw.split(","):
        ext = item.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        extensions.add(ext)
    return extensions
