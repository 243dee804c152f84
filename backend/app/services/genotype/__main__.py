from __future__ import annotations

import json
import sys
from pathlib import Path

from .parser import GenotypeParseError, parse_genotype_export


def main(argv: list[str]) -> int:
    if len(argv) < 2 or "--help" in argv:
        print("Usage: python -m app.services.genotype <path-to-export.txt> [--diet KEY]")
        return 0

    path = Path(argv[1])
    if not path.exists():
        print(f"File not found: {path}")
        return 2

    diet = None
    if "--diet" in argv:
        try:
            diet = argv[argv.index("--diet") + 1]
        except IndexError:
            print("Error: --diet requires a diet key")
            return 2

    try:
        parsed = parse_genotype_export(path)
    except GenotypeParseError as e:
        print(f"Error: {e}")
        return 2

    # Imported late so --help works without building the engine
    from app.services.lipidgenomics.diet_engine import UnknownDietError
    from app.services.pipeline.analysis_pipeline import build_profile

    try:
        report = build_profile(parsed.genotypes, active_diet=diet)
    except UnknownDietError as e:
        print(f"Error: {e}")
        return 2

    payload = {
        "parse_metrics": parsed.metrics,
        "report": report.model_dump(mode="json"),
    }
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
