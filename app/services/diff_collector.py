"""
Diff Collector component.

Retrieves the changed files of a pull request from GitHub, keeps the
reviewable source files and fetches their full content at the PR head.
"""

import asyncio
import base64
from typing import List, Optional

from app.models.file_change import ChangedFile, FileContent, FileStatus, RemoteFile
from app.services.github_client import GitHubClient
from app.utils.logging import get_logger

logger = get_logger(__name__)


CODE_EXTENSIONS = (
    '.js', '.ts', '.jsx', '.tsx', '.py', '.java', '.cpp', '.c', '.cs',
    '.php', '.rb', '.go', '.rs', '.swift', '.kt', '.scala', '.sh',
    '.sql', '.html', '.css', '.scss', '.less', '.vue', '.svelte',
)

LANGUAGES = {
    'js': 'JavaScript',
    'ts': 'TypeScript',
    'jsx': 'React JSX',
    'tsx': 'React TSX',
    'py': 'Python',
    'java': 'Java',
    'cpp': 'C++',
    'c': 'C',
    'cs': 'C#',
    'php': 'PHP',
    'rb': 'Ruby',
    'go': 'Go',
    'rs': 'Rust',
    'swift': 'Swift',
    'kt': 'Kotlin',
    'scala': 'Scala',
    'sh': 'Shell',
    'sql': 'SQL',
    'html': 'HTML',
    'css': 'CSS',
}

# Only these statuses have content worth fetching at the head commit
CONTENT_STATUSES = {FileStatus.ADDED, FileStatus.MODIFIED}


def is_code_file(filename: str) -> bool:
    """Check if a file has a reviewable source/markup extension."""
    return filename.lower().endswith(CODE_EXTENSIONS)


def get_language(filename: str) -> str:
    """Map a filename to a language label, 'Unknown' when unmapped."""
    extension = filename.rsplit('.', 1)[-1].lower()
    return LANGUAGES.get(extension, 'Unknown')


def decode_content(content: FileContent) -> str:
    """
    Decode file content from the API transport encoding.

    Raises:
        ValueError: If the encoding is unsupported or the data is not UTF-8
    """
    if content.encoding != "base64":
        raise ValueError(f"Unsupported content encoding: {content.encoding}")
    return base64.b64decode(content.content).decode('utf-8')


class DiffCollector:
    """
    Collects reviewable file changes for a pull request.

    Files are filtered to non-removed code files below ``max_changes``
    changed lines. Content for added/modified files is fetched concurrently;
    a failed fetch degrades that file to patch-only instead of failing the run.
    """

    def __init__(self, github_client: GitHubClient, max_changes: int = 1000):
        self.github_client = github_client
        self.max_changes = max_changes

    def filter_files(self, files: List[RemoteFile]) -> List[RemoteFile]:
        """Keep non-removed code files under the size ceiling, preserving order."""
        return [
            f for f in files
            if f.status != FileStatus.REMOVED.value
            and is_code_file(f.filename)
            and f.changes < self.max_changes
        ]

    async def collect(self, owner: str, repo: str, number: int) -> List[ChangedFile]:
        """
        Collect changed files with content for a pull request.

        Args:
            owner: Repository owner login
            repo: Repository name
            number: Pull request number

        Returns:
            ChangedFile records in GitHub's listing order

        Raises:
            Exception: Whatever the file listing or PR metadata call raised
        """
        try:
            files = await self.github_client.list_pull_request_files(owner, repo, number)
            relevant = self.filter_files(files)

            pull_request = await self.github_client.get_pull_request(owner, repo, number)
            head_sha = pull_request.head.sha
        except Exception as e:
            logger.error(f"Error fetching PR diff for {owner}/{repo}#{number}: {e}")
            raise

        logger.info(
            f"Reviewing {len(relevant)} of {len(files)} changed files",
            extra={"owner": owner, "repo": repo, "pr_number": number}
        )

        results = await asyncio.gather(
            *(self._process_file(owner, repo, f, head_sha) for f in relevant),
            return_exceptions=True,
        )

        collected: List[ChangedFile] = []
        for remote, result in zip(relevant, results):
            if isinstance(result, BaseException):
                logger.error(f"Error processing file {remote.filename}: {result}")
                continue
            collected.append(result)

        return collected

    async def _process_file(
        self,
        owner: str,
        repo: str,
        remote: RemoteFile,
        head_sha: str
    ) -> ChangedFile:
        status = FileStatus(remote.status)

        content = None
        if status in CONTENT_STATUSES:
            content = await self._fetch_content(owner, repo, remote.filename, head_sha)

        return ChangedFile(
            filename=remote.filename,
            status=status,
            additions=remote.additions,
            deletions=remote.deletions,
            changes=remote.changes,
            patch=remote.patch,
            content=content,
            language=get_language(remote.filename),
        )

    async def _fetch_content(self, owner: str, repo: str, path: str, ref: str) -> Optional[str]:
        try:
            encoded = await self.github_client.get_file_content(owner, repo, path, ref)
            return decode_content(encoded)
        except Exception as e:
            logger.warning(f"Could not fetch full content for {path}, using patch only: {e}")
            return None
