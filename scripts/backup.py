"""Backup the data document."""

from __future__ import annotations

import shutil
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import load_settings


def main() -> None:
    settings = load_settings()
    data_file = Path(settings.DATA_FILE)
    if not data_file.exists():
        raise SystemExit(f"Nothing to back up: {data_file} does not exist")

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"{data_file.stem}_{ts}{data_file.suffix}"
    shutil.copy2(data_file, out_file)
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
