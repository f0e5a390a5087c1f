"""Document handle over a plain-text outline file.

Responsibilities:
- Load the outline text from its backing file on demand.
- Provide the single in-place splice primitive.
- Flush the mutated text back to the backing file.
"""

from __future__ import annotations

from pathlib import Path

from ..errors import DocumentUnavailable


class OrgDocument:
    """Explicit, caller-owned handle to one outline document."""

    def __init__(self, path: Path, text: str) -> None:
        """Initialize a handle with its backing path and current text."""

        self.path = path
        self.text = text

    @classmethod
    def open(cls, path: Path) -> OrgDocument:
        """Read the backing file and return a fresh document handle.

        Raises:
            DocumentUnavailable: If the file is missing, unreadable or not UTF-8.
        """

        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise DocumentUnavailable(
                operation="open",
                detail=f"Reading list file not found: `{path}`.",
                hint="Create the file or point `--file` at an existing outline.",
            ) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentUnavailable(
                operation="open",
                detail=f"Failed to read reading list file `{path}`: {exc}",
                hint="Verify file permissions and UTF-8 encoding.",
            ) from exc
        return cls(path, text)

    def splice(self, position: int, text: str, length: int = 0) -> None:
        """Insert `text` at `position`, shifting everything after it.

        A non-zero `length` first removes that many characters at `position`,
        which is how an existing drawer line is overwritten.
        """

        if position < 0 or length < 0 or position + length > len(self.text):
            raise ValueError(
                f"Splice range {position}+{length} is outside document of length "
                f"{len(self.text)}."
            )
        self.text = self.text[:position] + text + self.text[position + length :]

    def flush(self) -> None:
        """Write the current text back to the backing file.

        Raises:
            DocumentUnavailable: If the file cannot be written.
        """

        try:
            self.path.write_text(self.text, encoding="utf-8")
        except OSError as exc:
            raise DocumentUnavailable(
                operation="flush",
                detail=f"Failed to write reading list file `{self.path}`: {exc}",
                hint="Verify file permissions and free disk space.",
            ) from exc
