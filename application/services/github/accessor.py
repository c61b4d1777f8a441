"""
Directory and file access pinned to the dedicated CMS branch.
"""

import logging
from typing import List

from application.services.github.api.client import GitHubAPIError
from application.services.github.api.contents import ContentsOperations, FileInfo
from application.services.github.api.errors import translate_github_error
from application.services.github.api.git_data import GitDataOperations
from application.services.github.models.types import (
    DirectoryEntry,
    EntryType,
    FileContent,
    RepositoryRef,
)
from common.exception.errors import (
    NotEncodableError,
    PathIsDirectoryError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def decode_text(raw: bytes, path: str) -> str:
    """Decode file bytes as UTF-8 text.

    Raises:
        NotEncodableError: For invalid UTF-8 or content holding NUL bytes
    """
    if b"\x00" in raw:
        raise NotEncodableError(f"File '{path}' is binary")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise NotEncodableError(f"File '{path}' is not UTF-8 text") from e


class ContentAccessor:
    """Reads directories and files of one repository at the tip of one branch."""

    def __init__(
        self,
        contents: ContentsOperations,
        git_data: GitDataOperations,
        repo: RepositoryRef,
        branch: str,
    ):
        self.contents = contents
        self.git_data = git_data
        self.repo = repo
        self.branch = branch

    async def _get(self, path: str):
        try:
            return await self.contents.get_contents(self.repo, path, ref=self.branch)
        except GitHubAPIError as e:
            raise translate_github_error(e, f"Reading '{path or '/'}'") from e

    async def list_directory(self, path: str) -> List[DirectoryEntry]:
        """
        List one level of a directory.

        Entries other than files and directories (symlinks, submodules) are
        left out.

        Raises:
            NotFoundError: If the path does not exist on the branch
            ValidationError: If the path is a file
        """
        result = await self._get(path)
        if isinstance(result, FileInfo):
            raise ValidationError(f"Path '{path}' is not a directory", field="path")

        entries = []
        for item in result:
            if item.is_file:
                entry_type = EntryType.FILE
            elif item.is_directory:
                entry_type = EntryType.DIR
            else:
                logger.debug(f"Skipping {item.type} entry {item.path}")
                continue
            entries.append(
                DirectoryEntry(
                    name=item.name,
                    path=item.path,
                    type=entry_type,
                    size=item.size,
                    sha=item.sha,
                )
            )
        return entries

    async def read_file(self, path: str) -> FileContent:
        """
        Fetch one file's text and blob SHA.

        Raises:
            NotFoundError: If the path does not exist on the branch
            PathIsDirectoryError: If the path is a directory
            NotEncodableError: If the content is not UTF-8 text
        """
        result = await self._get(path)
        if isinstance(result, list) or result.is_directory:
            raise PathIsDirectoryError(f"Path '{path}' is a directory", field="path")
        if not result.is_file:
            raise ValidationError(f"Path '{path}' is not a regular file", field="path")

        raw = result.get_raw_content()
        if raw is None:
            # Files over 1 MB come back without inline content
            logger.info(f"Fetching {path} ({result.size} bytes) through the blob API")
            try:
                raw = await self.git_data.get_blob(self.repo, result.sha)
            except GitHubAPIError as e:
                raise translate_github_error(e, f"Reading blob of '{path}'") from e

        return FileContent(path=result.path or path, content=decode_text(raw, path), sha=result.sha)
