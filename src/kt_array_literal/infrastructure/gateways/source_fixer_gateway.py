"""Source Fixer Gateway - writes rewritten Kotlin source back to disk."""

import logging

from kt_array_literal.domain.protocols import FileSystemProtocol, FixerGatewayProtocol

logger = logging.getLogger(__name__)


class SourceFixerGateway(FixerGatewayProtocol):
    """Gateway for persisting rewritten source. Only writes when the text changed."""

    def __init__(self, filesystem: FileSystemProtocol) -> None:
        self._filesystem = filesystem

    def apply_fixes(self, file_path: str, new_text: str) -> bool:
        """
        Write new_text to file_path if it differs from the current content.

        Returns:
            True if the file was modified, False otherwise
        """
        original = self._filesystem.read_text(file_path)
        if original == new_text:
            return False
        self._filesystem.write_text(file_path, new_text)
        logger.info("Rewrote %s", file_path)
        return True
