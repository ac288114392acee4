from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml

from .lib.paths import is_yaml
from .pipeline import Outcome, PipelineResult


def build_report(result: PipelineResult, *, aborted_at: str | None = None) -> Dict[str, Any]:
    return {
        "aborted_at": aborted_at,
        "counts": {o.value: result.count(o) for o in Outcome},
        "steps": [r.to_dict() for r in result.results],
    }


def save_report(path: str, report: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    if is_yaml(p):
        p.write_text(yaml.safe_dump(report, sort_keys=False), encoding="utf-8")
    else:
        p.write_text(json.dumps(report, indent=2, sort_keys=True) + "\n", encoding="utf-8")
