"""Static file-type table shared by the classifier and rendering clients.

Read-only process-wide data; ``FILE_TYPES`` is a mapping proxy so it cannot
be mutated at runtime.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from repograph.graph.models import FileTypeInfo


def _t(label: str, color: str, hdr: tuple[float, float, float], category: str) -> FileTypeInfo:
    return FileTypeInfo(label=label, color=color, hdr_color=hdr, category=category)


_COMPONENT = ("#00E89C", (0.0, 2.0, 1.2))
_LOGIC = ("#0ABF80", (0.04, 1.6, 1.0))
_STYLE = ("#FF5C87", (2.2, 0.5, 0.8))
_CONFIG = ("#FFB444", (2.2, 1.5, 0.4))
_DOCS = ("#9171F8", (1.0, 0.6, 2.0))
_MUTED = ("#888888", (0.6, 0.6, 0.6))

FILE_TYPES: Mapping[str, FileTypeInfo] = MappingProxyType({
    "tsx": _t("TypeScript React", *_COMPONENT, "component"),
    "jsx": _t("JavaScript React", *_COMPONENT, "component"),
    "ts": _t("TypeScript", *_LOGIC, "logic"),
    "js": _t("JavaScript", *_LOGIC, "logic"),
    "mjs": _t("ES Module", *_LOGIC, "logic"),
    "cjs": _t("CommonJS", *_LOGIC, "logic"),
    "mts": _t("TS Module", *_LOGIC, "logic"),
    "cts": _t("TS CommonJS", *_LOGIC, "logic"),
    "css": _t("CSS", *_STYLE, "style"),
    "scss": _t("SCSS", *_STYLE, "style"),
    "less": _t("Less", *_STYLE, "style"),
    "json": _t("JSON", *_CONFIG, "config"),
    "yaml": _t("YAML", *_CONFIG, "config"),
    "yml": _t("YAML", *_CONFIG, "config"),
    "toml": _t("TOML", *_CONFIG, "config"),
    "xml": _t("XML", *_CONFIG, "config"),
    "md": _t("Markdown", *_DOCS, "docs"),
    "mdx": _t("MDX", *_DOCS, "docs"),
    "txt": _t("Text", "#999999", (0.8, 0.8, 1.0), "docs"),
    "py": _t("Python", "#3776AB", (0.4, 0.9, 1.8), "logic"),
    "rs": _t("Rust", "#CE422B", (2.0, 0.5, 0.3), "logic"),
    "go": _t("Go", "#00ADD8", (0.0, 1.5, 2.0), "logic"),
    "java": _t("Java", "#ED8B00", (2.0, 1.0, 0.0), "logic"),
    "rb": _t("Ruby", "#CC342D", (2.0, 0.3, 0.3), "logic"),
    "php": _t("PHP", "#777BB4", (1.0, 1.0, 1.8), "logic"),
    "swift": _t("Swift", "#F05138", (2.2, 0.4, 0.3), "logic"),
    "kt": _t("Kotlin", "#7F52FF", (1.0, 0.5, 2.2), "logic"),
    "vue": _t("Vue", "#42B883", (0.4, 1.8, 1.0), "component"),
    "svelte": _t("Svelte", "#FF3E00", (2.2, 0.3, 0.0), "component"),
    "html": _t("HTML", "#E34F26", (2.0, 0.4, 0.2), "markup"),
    "svg": _t("SVG", "#FFB13B", (2.2, 1.5, 0.3), "asset"),
    "sql": _t("SQL", "#336791", (0.4, 0.6, 1.5), "data"),
    "graphql": _t("GraphQL", "#E10098", (2.0, 0.0, 1.2), "data"),
    "prisma": _t("Prisma", "#2D3748", (0.4, 0.5, 0.6), "data"),
    "sh": _t("Shell", "#89E051", (1.0, 2.0, 0.5), "script"),
    "dockerfile": _t("Dockerfile", "#2496ED", (0.3, 1.2, 2.0), "config"),
    "env": _t("Environment", *_MUTED, "config"),
    "lock": _t("Lock File", *_MUTED, "config"),
    "gitignore": _t("Gitignore", *_MUTED, "config"),
    "editorconfig": _t("EditorConfig", *_MUTED, "config"),
    "npmignore": _t("npmignore", *_MUTED, "config"),
})

DEFAULT_FILE_TYPE = _t("File", "#7B8794", (0.6, 0.8, 1.2), "other")

# Extensionless names that map to a fixed tag
_SPECIAL_NAMES = {
    "dockerfile": "dockerfile",
    ".gitignore": "gitignore",
    ".editorconfig": "editorconfig",
    ".npmignore": "npmignore",
    "license": "txt",
    "licence": "txt",
    "makefile": "sh",
}

_DECLARATION_SUFFIXES = (".d.ts", ".d.mts", ".d.cts")


def get_file_name(path: str) -> str:
    """Return the last segment of a slash-separated *path*."""
    return path.rsplit("/", 1)[-1] or path


def get_extension(path: str) -> str:
    """Return the lower-cased file-type tag for *path*.

    >>> get_extension("a/b/Dockerfile")
    'dockerfile'
    >>> get_extension(".env.local")
    'env'
    >>> get_extension("x.d.ts")
    'ts'
    >>> get_extension("noext")
    ''
    """
    name = path.rsplit("/", 1)[-1]
    lower = name.lower()
    if lower in _SPECIAL_NAMES:
        return _SPECIAL_NAMES[lower]
    if lower.startswith(".env"):
        return "env"
    if lower.endswith(_DECLARATION_SUFFIXES):
        return "ts"
    dot = name.rfind(".")
    if dot <= 0:
        return ""
    return name[dot + 1:].lower()
