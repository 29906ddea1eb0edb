import difflib
from pathlib import Path

LANGUAGE_IDS = {
    ".cs": "csharp",
    ".csx": "csharp",
    ".java": "java",
}


def get_language_id(path: str | Path) -> str:
    path = Path(path)
    return LANGUAGE_IDS.get(path.suffix, "plaintext")


def read_file_content(path: str | Path) -> str:
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def write_file_content(path: str | Path, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def unified_diff(before: str, after: str, path: str) -> str:
    lines = difflib.unified_diff(
        before.splitlines(keepends=True),
        after.splitlines(keepends=True),
        fromfile=f"a/{path}",
        tofile=f"b/{path}",
    )
    return "".join(lines)
