""" calc_mcp.py
    A driver program to start/stop a detached calculator MCP server or run a client.

    USAGE: calc-mcp --mode server|client|stop-server [--host HOST] [--port PORT]
           [--transport TRANSPORT] [--debug]
    Parameters:
        --mode: "server" to start a detached server, "client" to run a client,
                "stop-server" to stop a detached server.
        --host: Hostname or IP address (default from CALC_MCP_HOST or 127.0.0.1)
        --port: TCP port number (default from CALC_MCP_PORT or 8085)
        --transport: MCP transport (default from CALC_MCP_TRANSPORT or http).
                     stdio only runs in the foreground (--debug).
        --debug: Run the server in this process instead of detaching it.
"""

import sys
import os
import shutil
import argparse
import asyncio
import subprocess
import signal
import logging
from pathlib import Path
from .utils.logging_config import setup_logging
from .utils.settings import TRANSPORTS, Settings
from .mcp_servers import calculator_server
from .mcp_servers.calculator_server import port_type
from .mcp_clients.calculator_client import CalculatorClient

logger = logging.getLogger(__name__)

SERVER_MODULE = "calculator_mcp.mcp_servers.calculator_server"

# -----------------------------
# Paths (PID & LOG live under ./cache)
# -----------------------------
CACHE_DIR = Path.cwd() / "cache"
PID_FILE = CACHE_DIR / "calc_mcp.pid"
LOG_FILE = CACHE_DIR / "calc_mcp.log"

_IS_WINDOWS = os.name == "nt"


# On Windows, we want to use pythonw.exe to avoid a console window popping up.
def _pythonw_exe():
    """ Return the path to pythonw.exe if on Windows, else sys.executable. """
    exe = sys.executable
    if exe.lower().endswith("python.exe"):
        candidate = exe[:-10] + "pythonw.exe"
        if os.path.exists(candidate):
            return candidate
    return shutil.which("pythonw.exe") or exe


def _describe(transport: str, host: str, port: int) -> str:
    if transport == "stdio":
        return "stdio"
    return f"{transport} on http://{host}:{port}"


# ---- Background launcher (detached subprocess) ----
def start_server(host: str, port: int, debug: bool, transport: str = "http",
                 pid_file: Path = PID_FILE, log_file: Path = LOG_FILE):
    """ Launch the calculator server as a detached process, or in the
        foreground of this process when `debug` is set. Both paths serve
        the same `transport`.
    """
    if debug:
        calculator_server.launch_server(host, port, transport)
        return

    if transport == "stdio":
        # A detached child has no client on its stdin.
        logger.error("❌ The stdio transport cannot run detached; use --debug.")
        raise SystemExit("❌ The stdio transport cannot run detached; use --debug.")

    cmd = [
        _pythonw_exe(),
        "-m",
        SERVER_MODULE,
        "--host", host,
        "--port", str(port),
        "--transport", transport,
    ]

    kwargs: dict = {}
    if _IS_WINDOWS:
        kwargs["creationflags"] = subprocess.DETACHED_PROCESS
        # No close_fds on Windows because of the redirected std handles.
    else:
        kwargs["start_new_session"] = True
        kwargs["close_fds"] = True

    log_file.parent.mkdir(parents=True, exist_ok=True)
    pid_file.parent.mkdir(parents=True, exist_ok=True)

    # The server keeps running after this script exits.
    with open(log_file, "a",
              buffering=1,
              encoding="utf-8",
              errors="replace") as log_fh:
        # pylint: disable=consider-using-with
        proc = subprocess.Popen(
            cmd,
            stdout=log_fh,
            stderr=log_fh,
            stdin=subprocess.DEVNULL,
            **kwargs,
        )

    pid_file.write_text(str(proc.pid), encoding="utf-8")
    logger.info("✅ Server started (detached), %s.", _describe(transport, host, port))
    logger.info("ℹ    PID: %i.", proc.pid)
    logger.info("ℹ    Log: %s.", log_file)


def read_pid(pid_file: Path = PID_FILE) -> int:
    """ Return the PID recorded in `pid_file`, or 0 when there is none. """
    if not pid_file.exists():
        return 0
    try:
        pid = int(pid_file.read_text(encoding="utf-8").strip() or "0")
    except ValueError:
        return 0
    return max(pid, 0)


def stop_server(pid_file: Path = PID_FILE) -> bool:
    """ Stop a previously started detached server using the PID file.
        Returns True when a stop signal was sent.
    """
    pid = read_pid(pid_file)
    if pid <= 0:
        logger.error("🛑 No PID file found; server may not be running.")
        return False

    try:
        if _IS_WINDOWS:
            # taskkill terminates the process tree reliably on Windows
            subprocess.run(["taskkill", "/PID", str(pid), "/T", "/F"],
                           check=True, capture_output=True, text=True)
        else:
            os.kill(pid, signal.SIGTERM)
        logger.info("ℹ Sent stop signal to PID %i.", pid)
    except (ProcessLookupError, subprocess.CalledProcessError) as e:
        pid_file.unlink(missing_ok=True)
        logger.error("🛑 Could not stop process %i: %s", pid, e)
        raise SystemExit(f"🛑 Could not stop process {pid}.  Error = {e}") from e

    pid_file.unlink(missing_ok=True)
    return True


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run the calculator MCP server or client."
    )
    parser.add_argument("--mode",
        choices=["server", "client", "stop-server"],
        type=str.lower,
        required=True,
        help="Run as server, client, or stop-server."
    )
    parser.add_argument("--host", type=str, default=settings.host,
                        help=f"Host name or IP address (default {settings.host}).")
    parser.add_argument("--port", type=port_type, default=settings.port,
                        help=f"TCP port to bind/connect (default {settings.port}).")
    parser.add_argument("--transport", choices=TRANSPORTS, type=str.lower,
                        default=settings.transport,
                        help=f"MCP transport for the server (default {settings.transport}).")
    parser.add_argument("--debug", action="store_true",
                        help="Run the server in this process instead of "
                        "as a separate detached process.")
    return parser


def main(argv=None):
    """ Main entry point: parse arguments and start/stop server or run client. """
    settings = Settings.from_env()
    args = build_parser(settings).parse_args(argv)
    # stdout carries the protocol when serving stdio in the foreground
    foreground_stdio = args.mode == "server" and args.debug and args.transport == "stdio"
    setup_logging(level=settings.log_level,
                  stream=sys.stderr if foreground_stdio else None)

    if args.mode == "server":
        start_server(args.host, args.port, args.debug, args.transport)

    elif args.mode == "stop-server":
        stop_server()

    elif args.mode == "client":
        client = CalculatorClient(args.host, args.port)
        asyncio.run(client.run())


if __name__ == "__main__":
    main()
