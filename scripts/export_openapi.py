from __future__ import annotations

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi import FastAPI  # noqa: E402
from instructormatch.api.main import app as api_app  # noqa: E402


def export_openapi(app: FastAPI, destination: Path) -> None:
    """Write the OpenAPI document for the marketplace API."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(json.dumps(app.openapi(), indent=2))


def main() -> None:
    output = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("docs/api/openapi.json")
    export_openapi(api_app, output)
    print(f"OpenAPI schema written to {output}")


if __name__ == "__main__":
    main()
