"""Combine the C sources of a git repository into a single header file.

The repository is cloned into a scratch directory, every ``.c`` file is
appended to ``<name>_combined.h`` with its ``#include`` lines dropped, and
the clone is removed again.
"""
from __future__ import annotations

import argparse
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, TextIO

from .config import TEMP_DIR
from .schemas import ConversionResult

STANDARD_INCLUDES = ["stdio.h", "stdlib.h", "string.h", "stdint.h"]


@dataclass
class SourceCounts:
    c: int = 0
    headers: int = 0


def extract_repo_name(git_url: str) -> Optional[str]:
    """Return the repository name of ``git_url``, or None if it has no ``/``.

    ``https://github.com/user/project.git`` gives ``project``.
    """
    last_slash = git_url.rfind("/")
    if last_slash == -1:
        return None
    name_start = last_slash + 1
    dot_git = git_url.find(".git", name_start)
    if dot_git != -1:
        return git_url[name_start:dot_git]
    return git_url[name_start:]


def is_c_file(filename: str) -> bool:
    return Path(filename).suffix == ".c"


def is_header_file(filename: str) -> bool:
    return Path(filename).suffix == ".h"


def walk_files(root: Path) -> Iterator[Path]:
    # Sorted so the combined header is stable across filesystems.
    for entry in sorted(root.iterdir()):
        if entry.is_dir() and not entry.is_symlink():
            yield from walk_files(entry)
        elif entry.is_file():
            yield entry


def scan_directory(dir_path: Path) -> SourceCounts:
    counts = SourceCounts()
    for path in walk_files(Path(dir_path)):
        if is_c_file(path.name):
            counts.c += 1
        elif is_header_file(path.name):
            counts.headers += 1
    return counts


def append_c_file(path: Path, out: TextIO) -> None:
    out.write(f"// === File: {path} ===\n")
    with open(path, encoding="utf-8", errors="replace") as source:
        for line in source.read().split("\n"):
            if not line.strip().startswith("#include"):
                out.write(line + "\n")
    out.write("\n")


def create_header_only_file(repo_dir: Path, repo_name: str, output_dir: Path) -> str:
    filename = f"{repo_name}_combined.h"
    guard = f"{repo_name.upper()}_COMBINED_H"

    with open(Path(output_dir) / filename, "w", encoding="utf-8") as out:
        out.write(f"#ifndef {guard}\n")
        out.write(f"#define {guard}\n\n")
        out.write("// Auto-generated header-only file from C project\n")
        out.write(f"// Repository: {repo_name}\n\n")
        for include in STANDARD_INCLUDES:
            out.write(f"#include <{include}>\n")
        out.write("\n")

        for path in walk_files(Path(repo_dir)):
            if is_c_file(path.name):
                append_c_file(path, out)

        out.write(f"#endif // {guard}\n")

    return filename


def clone_repository(git_url: str, dest: Path) -> bool:
    try:
        proc = subprocess.run(
            ["git", "clone", "--", git_url, str(dest)],
            capture_output=True,
            check=False,
        )
    except FileNotFoundError:
        return False
    return proc.returncode == 0


def is_safe_repo_name(name: Optional[str]) -> bool:
    # The name becomes a directory under the output dir that is removed later.
    return bool(name) and name not in (".", "..") and "\\" not in name


def convert_git_repository(git_url: str, output_dir: Path = Path(TEMP_DIR)) -> ConversionResult:
    repo_name = extract_repo_name(git_url)
    if not is_safe_repo_name(repo_name):
        return ConversionResult(success=False, error="Invalid repository URL")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    repo_dir = output_dir / repo_name
    if repo_dir.exists():
        shutil.rmtree(repo_dir)

    try:
        if not clone_repository(git_url, repo_dir):
            return ConversionResult(success=False, error="Failed to clone repository")

        counts = scan_directory(repo_dir)
        if counts.c == 0:
            return ConversionResult(success=False, error="No C files found in repository")

        filename = create_header_only_file(repo_dir, repo_name, output_dir)
    finally:
        shutil.rmtree(repo_dir, ignore_errors=True)

    return ConversionResult(
        success=True,
        repository=repo_name,
        c_files_count=counts.c,
        header_files_count=counts.headers,
        filename=filename,
    )


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="gigaheader-convert",
        description="Combine the C sources of a git repository into one header.",
    )
    parser.add_argument("git_url")
    parser.add_argument("--output-dir", type=Path, default=Path(TEMP_DIR))
    args = parser.parse_args(argv)

    result = convert_git_repository(args.git_url, args.output_dir)
    print(result.to_json())
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
