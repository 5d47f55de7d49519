"""Filesystem store for runs and their results."""

import json
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from pagesift.core.interfaces import RunStore
from pagesift.core.models import ExtractionMode, ResultRecord


class FilesystemRunStore(RunStore):
    """Store runs as JSON files under an output directory.

    Each run gets its own directory holding ``run.json`` (metadata) and
    ``results.json`` (result rows).
    """

    RUN_FILENAME = "run.json"
    RESULTS_FILENAME = "results.json"

    def __init__(self, output_dir: Path) -> None:
        self._output_dir = Path(output_dir)

    def run_dir(self, run_id: str) -> Path:
        return self._output_dir / run_id

    async def create_run(self, url: str, mode: ExtractionMode) -> str:
        """Create the run directory and its metadata file.

        Args:
            url: Target URL.
            mode: Extraction mode.

        Returns:
            New run identifier.
        """
        run_id = uuid.uuid4().hex
        run_dir = self.run_dir(run_id)
        run_dir.mkdir(parents=True, exist_ok=True)

        self._write_json(
            run_dir / self.RUN_FILENAME,
            {
                "id": run_id,
                "url": url,
                "mode": mode.value,
                "status": "running",
                "results_count": 0,
                "created_at": datetime.utcnow().isoformat(),
                "completed_at": None,
            },
        )
        self._write_json(run_dir / self.RESULTS_FILENAME, [])
        return run_id

    async def append_results(
        self, run_id: str, records: list[ResultRecord]
    ) -> None:
        """Append result rows to the run's results file.

        Args:
            run_id: Run identifier.
            records: Records to store.
        """
        if not records:
            return

        results_path = self.run_dir(run_id) / self.RESULTS_FILENAME
        rows = self._read_json(results_path) or []
        created_at = datetime.utcnow().isoformat()
        for record in records:
            row = record.to_dict()
            row["session_id"] = run_id
            row["created_at"] = created_at
            rows.append(row)
        self._write_json(results_path, rows)

    async def close_run(
        self, run_id: str, status: str, result_count: int
    ) -> None:
        """Record the terminal status of a run.

        Args:
            run_id: Run identifier.
            status: completed, failed or stopped.
            result_count: Number of records produced.
        """
        run_path = self.run_dir(run_id) / self.RUN_FILENAME
        metadata = self._read_json(run_path)
        if metadata is None:
            raise FileNotFoundError(f"Unknown run: {run_id}")

        metadata["status"] = status
        metadata["results_count"] = result_count
        metadata["completed_at"] = datetime.utcnow().isoformat()
        self._write_json(run_path, metadata)

    async def load_run(self, run_id: str) -> Optional[dict[str, Any]]:
        """Load run metadata, or None if the run does not exist."""
        return self._read_json(self.run_dir(run_id) / self.RUN_FILENAME)

    async def load_results(self, run_id: str) -> list[dict[str, Any]]:
        return self._read_json(self.run_dir(run_id) / self.RESULTS_FILENAME) or []

    def _read_json(self, path: Path) -> Any:
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            print(f"Warning: Could not read {path}: {e}")
            return None

    def _write_json(self, path: Path, data: Any) -> None:
        path.write_text(
            json.dumps(data, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )


def export_results(records: list[ResultRecord], path: Path) -> Path:
    """Write records to a file.

    A ``.json`` suffix produces a list of result rows; any other suffix
    produces plain text with one record per line.

    Args:
        records: Records to export.
        path: Target file.

    Returns:
        The path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() == ".json":
        content = json.dumps(
            [record.to_dict() for record in records],
            indent=2,
            ensure_ascii=False,
        )
    else:
        content = "\n".join(record.display() for record in records)

    path.write_text(content, encoding="utf-8")
    return path
