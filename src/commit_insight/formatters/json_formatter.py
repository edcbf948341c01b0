"""JSON formatter and file exporter for Commit Insight."""

import json
from pathlib import Path
from typing import Union

from ..exceptions import ExportError
from ..logging_config import get_logger
from ..stats.models import AnalysisResult
from .base import BaseFormatter

logger = get_logger(__name__)


class JsonFormatter(BaseFormatter):
    """Render the analysis result as JSON."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def render(self, result: AnalysisResult) -> None:
        print(self.format(result))

    def format(self, result: AnalysisResult) -> str:
        return json.dumps(result.to_dict(), indent=self.indent, ensure_ascii=False)

    def export(self, result: AnalysisResult, path: Union[str, Path]) -> Path:
        """Write the JSON document to ``path`` and return the resolved path.

        Raises:
            ExportError: If the file cannot be written
        """
        target = Path(path)
        try:
            target.write_text(self.format(result) + "\n", encoding="utf-8")
        except OSError as e:
            raise ExportError(target, e.strerror or str(e))
        logger.debug("Exported %d commits to %s", result.total_commits, target)
        return target.resolve()
