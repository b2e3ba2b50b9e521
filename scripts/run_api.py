#!/usr/bin/env python
"""
Serve the quantity tier shipping API with uvicorn.

Usage:
    python scripts/run_api.py [--host 127.0.0.1] [--port 8000] [--no-reload]

The settings file defaults to data/shipping_settings.json; point
SHIPPING_TIERS_SETTINGS_FILE elsewhere to serve another configuration.
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path


def build_env(src_path: Path) -> dict:
    """Environment with the package source ahead of any existing PYTHONPATH."""
    env = os.environ.copy()
    existing = env.get("PYTHONPATH")
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(src_path), existing) if p)
    return env


def main():
    parser = argparse.ArgumentParser(description="Run the shipping tiers API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--no-reload", dest="reload", action="store_false",
                        help="Disable auto-reload on source changes")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent
    cmd = [
        sys.executable, "-m", "uvicorn", "shipping_tiers.api.main:app",
        "--host", args.host, "--port", str(args.port),
    ]
    if args.reload:
        cmd.append("--reload")

    print(f"Serving shipping tiers API on http://{args.host}:{args.port}")
    try:
        result = subprocess.run(cmd, cwd=str(project_root), env=build_env(project_root / "src"))
    except KeyboardInterrupt:
        print("\nAPI stopped.")
        return

    if result.returncode != 0:
        print(f"\n❌ uvicorn exited with code {result.returncode}")
        sys.exit(result.returncode)


if __name__ == "__main__":
    main()
