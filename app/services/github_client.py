"""
GitHub API client for the review pipeline.

Thin async wrapper around PyGithub. PyGithub is synchronous, so every call is
pushed to the default thread pool with ``asyncio.to_thread``; callers can fan
several of them out with ``asyncio.gather``.
"""

import asyncio
from typing import List

from github import Auth, Github
from github.PullRequest import PullRequest
from github.Repository import Repository

from app.models.file_change import FileContent, RemoteFile
from app.utils.logging import get_logger

logger = get_logger(__name__)


class GitHubClientError(Exception):
    """Raised when GitHub returns something the client cannot use."""
    pass


class GitHubClient:
    """
    Wraps the GitHub REST operations used by the review pipeline:

    - list the files changed by a pull request
    - get pull request metadata
    - get file content at a ref
    - create a pull request review
    - create an issue comment on the pull request
    """

    def __init__(self, token: str, github: Github | None = None):
        """
        Initialize the client.

        Args:
            token: GitHub token with pull request read/write access
            github: Preconfigured PyGithub instance (tests)
        """
        self._github = github or Github(auth=Auth.Token(token))

    def _repository(self, owner: str, repo: str) -> Repository:
        # lazy=True avoids a GET /repos call; the repository is only a path prefix here
        return self._github.get_repo(f"{owner}/{repo}", lazy=True)

    def _pull_request(self, owner: str, repo: str, number: int) -> PullRequest:
        return self._repository(owner, repo).get_pull(number)

    async def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequest:
        """Fetch pull request metadata (head SHA, state, ...)."""
        return await asyncio.to_thread(self._pull_request, owner, repo, number)

    async def list_pull_request_files(self, owner: str, repo: str, number: int) -> List[RemoteFile]:
        """
        List the files changed by a pull request, in GitHub's order.

        Returns:
            One RemoteFile per listed file
        """
        def _list() -> List[RemoteFile]:
            pull_request = self._pull_request(owner, repo, number)
            return [
                RemoteFile(
                    filename=f.filename,
                    status=f.status,
                    additions=f.additions,
                    deletions=f.deletions,
                    changes=f.changes,
                    patch=f.patch,
                )
                for f in pull_request.get_files()
            ]

        files = await asyncio.to_thread(_list)
        logger.debug(f"Listed {len(files)} files for {owner}/{repo}#{number}")
        return files

    async def get_file_content(self, owner: str, repo: str, path: str, ref: str) -> FileContent:
        """
        Fetch a file at ``ref`` without decoding it.

        Raises:
            GitHubClientError: If ``path`` is a directory
            github.GithubException: On API errors
        """
        def _get() -> FileContent:
            contents = self._repository(owner, repo).get_contents(path, ref=ref)
            if isinstance(contents, list):
                raise GitHubClientError(f"{path} is a directory at {ref}")
            return FileContent(
                path=contents.path,
                encoding=contents.encoding or "base64",
                content=contents.content or "",
            )

        return await asyncio.to_thread(_get)

    async def create_review(self, owner: str, repo: str, number: int, body: str, event: str) -> None:
        """Create a pull request review with the given event (APPROVE, REQUEST_CHANGES, COMMENT)."""
        def _create() -> None:
            self._pull_request(owner, repo, number).create_review(body=body, event=event)

        await asyncio.to_thread(_create)

    async def create_issue_comment(self, owner: str, repo: str, number: int, body: str) -> None:
        """Post a comment on the pull request conversation."""
        def _create() -> None:
            self._repository(owner, repo).get_issue(number).create_comment(body)

        await asyncio.to_thread(_create)

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self._github.close()
