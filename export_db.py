"""Dump every case stored in the project's SQLite database to disk.

Writes `dental-cases.json`, `dental-cases.csv` and `dental-report.txt` into
the target directory. It reuses the same `DATABASE_DIR` behavior as the
application via `utils.database_init.AsyncDatabaseInitializer`.

Run: set the `DATABASE_DIR` environment variable and run
      `python export_db.py [output_dir]` (defaults to `./exports`).
"""
import argparse
import asyncio
import logging
import os
from pathlib import Path
from typing import Dict

import aiofiles
from dotenv import load_dotenv

from dal.case_dal import CaseDAL
from services.case_export import DEFAULT_LAB_NAME, to_csv, to_json, to_report
from utils.database_init import AsyncDatabaseInitializer

LOGGER = logging.getLogger("export_db")


async def _write_text(path: Path, content: str) -> None:
    """Write `content` to `path` as UTF-8."""
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(content)


async def export_all(output_dir: Path, lab_name: str = DEFAULT_LAB_NAME) -> Dict[str, Path]:
    """Export the current collection in every format.

    Args:
        output_dir: Directory to write into; created if missing.
        lab_name: Title prefix for the text report.

    Returns:
        Mapping of format name to the written file path.
    """
    cases = await CaseDAL(AsyncDatabaseInitializer(reset=False)).list_all()
    output_dir.mkdir(parents=True, exist_ok=True)

    outputs = {
        "json": (output_dir / "dental-cases.json", to_json(cases)),
        "csv": (output_dir / "dental-cases.csv", to_csv(cases)),
        "report": (output_dir / "dental-report.txt", to_report(cases, lab_name=lab_name)),
    }
    await asyncio.gather(*(_write_text(path, content) for path, content in outputs.values()))
    LOGGER.info("Exported %d cases to %s", len(cases), output_dir)
    return {name: path for name, (path, _) in outputs.items()}


async def main() -> None:
    """Parse arguments and export the database."""
    parser = argparse.ArgumentParser(description="Export dental lab cases to JSON, CSV and a text report.")
    parser.add_argument("output_dir", nargs="?", default="exports", help="Directory to write exports into.")
    args = parser.parse_args()

    written = await export_all(Path(args.output_dir), os.getenv("LAB_NAME") or DEFAULT_LAB_NAME)
    for name, path in written.items():
        print(f"{name}: {path}")


if __name__ == "__main__":
    load_dotenv()
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
