"""Git operations module.

Usage:
    from scopepub.git import Repository

    repo = Repository(Path("/path/to/workspace"))
    if repo.is_work_tree():
        repo.restore("packages")
"""

from scopepub.git.repository import (
    GitError,
    GitStatus,
    Repository,
    StatusEntry,
)

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]
