from __future__ import annotations

CODE_EXTENSIONS = (
    ".cs",
    ".js",
    ".ts",
    ".tsx",
    ".jsx",
    ".py",
    ".java",
    ".go",
)


def is_code_file(file_name: str) -> bool:
    return any(file_name.endswith(ext) for ext in CODE_EXTENSIONS)


def filter_code_changes(changes: list) -> list:
    """Keep changes that touch a source file and are not deletions."""
    return [c for c in changes if is_code_file(c.path) and c.change_type != "delete"]
