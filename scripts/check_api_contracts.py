# This file checks the search API OpenAPI contract against the committed snapshot.
# Removed paths, query parameters, or schema fields fail the run unless the API version path changed.
# ruff: noqa: E402

from __future__ import annotations

import argparse
import json
import sys
from datetime import UTC, datetime
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from provider_search.api.api_config import get_api_config
from provider_search.api.app import app
from provider_search.api.schema_versions import detect_breaking_schema_changes

DEFAULT_SNAPSHOT_PATH = Path("reports/contract_checks/latest_contract_snapshot.json")
DEFAULT_REPORT_PATH = Path("reports/contract_checks/contract_diff_report.md")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare the OpenAPI contract with the last snapshot.")
    parser.add_argument("--snapshot", type=Path, default=DEFAULT_SNAPSHOT_PATH)
    parser.add_argument("--report", type=Path, default=DEFAULT_REPORT_PATH)
    return parser.parse_args()


def _openapi_snapshot() -> dict[str, object]:
    config = get_api_config()
    openapi_schema = app.openapi()
    return {
        "api_version_path": config.api_version_path,
        "schema_version": config.schema_version,
        "generated_at": datetime.now(tz=UTC).isoformat(),
        "paths": openapi_schema.get("paths", {}),
        "components": openapi_schema.get("components", {}),
    }


def _render_report(
    *,
    previous: dict[str, object] | None,
    current: dict[str, object],
    findings: list[str],
) -> str:
    lines = [
        "# Search API Contract Report",
        "",
        f"Generated at: {current['generated_at']}",
        f"API version path: `{current['api_version_path']}`",
        f"Schema version: `{current['schema_version']}`",
        "",
    ]
    if previous is None:
        lines.append("Baseline snapshot created; nothing to compare yet.")
    elif findings:
        lines.append("## Breaking changes")
        lines.append("")
        lines.extend(f"- {item}" for item in findings)
    else:
        lines.append("No breaking differences were detected.")
    return "\n".join(lines) + "\n"


def main() -> int:
    args = _parse_args()
    args.snapshot.parent.mkdir(parents=True, exist_ok=True)
    args.report.parent.mkdir(parents=True, exist_ok=True)

    current = _openapi_snapshot()
    previous: dict[str, object] | None = None
    if args.snapshot.exists():
        previous = json.loads(args.snapshot.read_text(encoding="utf-8"))

    findings: list[str] = []
    if previous is not None:
        findings = detect_breaking_schema_changes(
            previous_snapshot=previous,
            current_snapshot=current,
        )

    args.report.write_text(
        _render_report(previous=previous, current=current, findings=findings),
        encoding="utf-8",
    )
    args.snapshot.write_text(json.dumps(current, indent=2, sort_keys=True), encoding="utf-8")

    if previous is None:
        print(f"Baseline snapshot written to {args.snapshot}.")
        return 0

    version_bumped = previous.get("api_version_path") != current["api_version_path"]
    if findings and not version_bumped:
        print("Breaking contract changes detected without API path version bump:")
        for item in findings:
            print(f"- {item}")
        return 1

    print("Breaking changes accompanied by a version bump." if findings else "Contract unchanged.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
