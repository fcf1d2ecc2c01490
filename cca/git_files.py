"""
Changed-file selection from a Git working tree.

Handles:
- Repository detection using subprocess (no GitPython dependency)
- Tracked changes relative to a revision
- Untracked, non-ignored files

Returns C# sources only, sorted, as absolute paths.
"""

import subprocess
from pathlib import Path
from typing import List, Tuple

SOURCE_SUFFIX = ".cs"


class GitWorkTree:
    """Lists files changed in a Git working tree."""

    def __init__(self, repo_path: str):
        self.repo_path = Path(repo_path).resolve()

        code, stdout, _ = self._run_git(["rev-parse", "--show-toplevel"], check=False)
        if code != 0:
            raise ValueError(f"Not a Git repository: {repo_path}")
        self.top_level = Path(stdout.strip()).resolve()

    def _run_git(self, args: List[str], check: bool = True) -> Tuple[int, str, str]:
        result = subprocess.run(
            ["git"] + args,
            cwd=self.repo_path,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
        if check and result.returncode != 0:
            raise RuntimeError(
                f"Git command failed: {' '.join(args)}\n{result.stderr}"
            )
        return result.returncode, result.stdout, result.stderr

    def changed_files(self, since: str = "HEAD") -> List[Path]:
        """
        Files changed relative to `since`, plus untracked files.

        Deleted files are excluded.
        """
        _, diff_out, _ = self._run_git(
            ["diff", "--name-only", "--diff-filter=d", since, "--"]
        )
        _, untracked_out, _ = self._run_git(
            ["ls-files", "--others", "--exclude-standard"]
        )

        names = set(diff_out.splitlines())
        # ls-files is relative to cwd, diff to the top level
        paths = {self.top_level / name for name in names if name}
        paths |= {
            (self.repo_path / name).resolve()
            for name in untracked_out.splitlines()
            if name
        }

        return sorted(p for p in paths if p.suffix == SOURCE_SUFFIX and p.is_file())


def changed_files(repo_path: str, since: str = "HEAD") -> List[Path]:
    return GitWorkTree(repo_path).changed_files(since)
