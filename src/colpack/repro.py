# repro.py
from __future__ import annotations

import hashlib
import json
import platform
import sys
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from .layout import PageSetting


def _file_digest(path: Path) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1 << 16), b""):
            h.update(chunk)
    return h.hexdigest()


def dump_config(cfg: Any, setting: PageSetting, out_dir: Path, *,
                extra: Dict[str, Any] | None = None) -> Path:
    """Write config_dump.json: the CFG, the page setting the packer actually ran
    with, and the input file's sha256 so a layout can be re-run and compared."""
    out_dir.mkdir(parents=True, exist_ok=True)

    input_path = Path(cfg.INPUT_TXT)
    payload = {
        "cfg": asdict(cfg),
        "page_setting": asdict(setting),
        "input": {
            "path": str(input_path.resolve()),
            "sha256": _file_digest(input_path),
            "bytes": input_path.stat().st_size,
        },
        "meta": {
            "timestamp": datetime.now().isoformat(timespec="seconds"),
            "python": sys.version.split()[0],
            "platform": platform.platform(),
            **(extra or {}),
        },
    }

    path = out_dir / "config_dump.json"
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return path
