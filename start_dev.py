"""Run the StoreIt backend with auto-reload for local development.

Usage:
    python start_dev.py [--port 8000]

Uses backend/.venv when present, otherwise the current interpreter.
Appwrite settings are read from .env (STOREIT_APPWRITE_*). Run from the
repository root; Ctrl+C stops the server.
"""

from __future__ import annotations

import argparse
import os
import signal
import subprocess
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
BACKEND_DIR = ROOT_DIR / "backend"

BACKEND_VENV = BACKEND_DIR / (
    ".venv\\Scripts\\python.exe" if os.name == "nt" else ".venv/bin/python"
)

REQUIRED_ENV = (
    "STOREIT_APPWRITE_PROJECT_ID",
    "STOREIT_APPWRITE_API_KEY",
    "STOREIT_APPWRITE_DATABASE_ID",
    "STOREIT_APPWRITE_USERS_COLLECTION_ID",
    "STOREIT_APPWRITE_FILES_COLLECTION_ID",
    "STOREIT_APPWRITE_BUCKET_ID",
)

if os.name == "nt":
    os.system("")  # enable VT100 on Windows 10+

CYAN = "\033[36m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
RESET = "\033[0m"


def log(level: str, msg: str) -> None:
    colors = {"info": CYAN, "start": GREEN, "warn": YELLOW, "error": RED}
    print(f"{colors.get(level, '')}[{level}]{RESET} {msg}")


def resolve_backend_python() -> str:
    if BACKEND_VENV.exists():
        return str(BACKEND_VENV)
    log("info", "No venv found, using current Python")
    return sys.executable


def check_dependencies(python: str) -> bool:
    """Verify the web stack is importable."""
    result = subprocess.run(
        [python, "-c", "import fastapi, uvicorn, httpx, pydantic_settings"],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        log("error", "Missing dependencies. Run:")
        log("error", f"  cd {ROOT_DIR} && pip install -e '.[dev]'")
        return False
    return True


def warn_missing_config() -> None:
    """Point out Appwrite settings found neither in the env nor in .env."""
    env_text = ""
    for env_file in (ROOT_DIR / ".env", BACKEND_DIR / ".env"):
        if env_file.exists():
            env_text += env_file.read_text(encoding="utf-8")
    missing = [name for name in REQUIRED_ENV if name not in os.environ and name not in env_text]
    for name in missing:
        log("warn", f"{name} is not set, Appwrite calls will fail")


def stop(proc: subprocess.Popen) -> None:
    if proc.poll() is not None:
        return
    log("info", "stopping backend")
    try:
        if os.name == "nt":
            proc.send_signal(signal.CTRL_BREAK_EVENT)
        else:
            os.killpg(os.getpgid(proc.pid), signal.SIGTERM)
        proc.wait(timeout=10)
    except ProcessLookupError:
        pass
    except subprocess.TimeoutExpired:
        proc.kill()


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    python = resolve_backend_python()
    log("info", f"Python: {python}")
    if not check_dependencies(python):
        return 1
    warn_missing_config()

    os.environ.setdefault("STOREIT_DEBUG", "true")
    os.environ.setdefault("STOREIT_LOG_LEVEL", "INFO")
    os.environ.setdefault("STOREIT_ENVIRONMENT", "development")

    cmd = [
        python, "-m", "uvicorn", "app.main:app",
        "--reload", "--host", args.host, "--port", str(args.port),
    ]
    log("start", " ".join(cmd))
    if os.name == "nt":
        proc = subprocess.Popen(cmd, cwd=BACKEND_DIR, creationflags=subprocess.CREATE_NEW_PROCESS_GROUP)
    else:
        proc = subprocess.Popen(cmd, cwd=BACKEND_DIR, start_new_session=True)

    log("info", f"  API:     http://localhost:{args.port}/api")
    log("info", f"  Docs:    http://localhost:{args.port}/docs")
    log("info", "Press Ctrl+C to stop")

    try:
        return proc.wait() or 0
    except KeyboardInterrupt:
        print()
        log("info", "Ctrl+C received, shutting down...")
        return 0
    finally:
        stop(proc)


if __name__ == "__main__":
    raise SystemExit(main())
