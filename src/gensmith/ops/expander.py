"""Driver expanding template files into concrete modules."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from ..config import Settings
from ..engine import compute_output_name, render_source, transform
from ..placeholders import GensmithError, MappingTable, PlaceholderMatcher
from ..sources import parse_source, read_source, resolve_sources, write_output

logger = logging.getLogger(__name__)


@dataclass
class ExpansionResult:
    """Result of expanding one template file."""

    source: Path
    output: Path
    text: str
    replaced: dict[str, str] = field(default_factory=dict)
    removed: list[str] = field(default_factory=list)
    written: bool = False


class Expander:
    """
    Expands templates with a fixed mapping table.

    Files are processed one at a time: parse, transform, render, write. The
    first error stops the run; files already written are left in place.
    """

    def __init__(
        self,
        table: MappingTable,
        settings: Optional[Settings] = None,
        matcher: Optional[PlaceholderMatcher] = None,
    ):
        """
        Initialize the expander.

        Args:
            table: Mapping table shared by every file of the run
            settings: Output location and naming options (defaults if not provided)
            matcher: Placeholder matcher (built from settings if not provided)
        """
        self.table = table
        self.settings = settings or Settings()
        self.matcher = matcher or PlaceholderMatcher(self.settings.placeholder_pattern)

    def run(self, targets: Sequence[str]) -> list[ExpansionResult]:
        """
        Expand every template named by targets.

        Args:
            targets: Files, directories or package names (current directory if empty)

        Returns:
            One ExpansionResult per template file, in processing order

        Raises:
            GensmithError: On the first failure
        """
        results = []
        for target in targets or ["."]:
            try:
                files = resolve_sources(target)
            except GensmithError as e:
                logger.error(f"{target}: {e}")
                raise

            for path in files:
                try:
                    results.append(self.expand_file(path))
                except GensmithError as e:
                    logger.error(f"{path}: {e}")
                    raise

        return results

    def expand_file(self, path: Path) -> ExpansionResult:
        """Expand a single template file."""
        path = Path(path)
        source = read_source(path)
        tree = parse_source(path, source)
        result = transform(tree, self.table, self.matcher)

        name = compute_output_name(
            path,
            result.record,
            self.table.keys,
            aliases=self.table.capitalized,
            test_suffix=self.settings.test_suffix,
        )
        output = self.settings.output_dir / name
        text = render_source(source, result, self.table, self.matcher)

        expansion = ExpansionResult(
            source=path,
            output=output,
            text=text,
            replaced=dict(result.record.replacements),
            removed=result.removed,
        )

        if output.resolve() == path.resolve():
            logger.warning(f"{path}: no placeholders replaced, not overwriting the template")
        elif self.settings.dry_run:
            logger.info(f"Dry run: would write {output}")
        else:
            write_output(output, text)
            expansion.written = True

        return expansion
