# run.py
"""
Dev launcher for the webhook server.
Uses watchfiles.run_process to restart on code / template changes.
"""
import sys


HOST = "127.0.0.1"
PORT = 8000


def _server():
    """Worker function — runs in each spawned subprocess."""
    import uvicorn

    uvicorn.run(
        "orderbot.main:app",
        host=HOST,
        port=PORT,
        reload=False,       # watchfiles handles restarts, not uvicorn
        log_level="info",
    )


if __name__ == "__main__":
    # Hot-reload: watchfiles watches orderbot/ and respawns _server() on changes
    if "--no-reload" in sys.argv:
        _server()
    else:
        from watchfiles import run_process
        print("🔄  Hot-reload active — watching orderbot/")
        print(f"📡  Server → http://{HOST}:{PORT}")
        run_process(
            "orderbot",
            target=_server,
            watch_filter=lambda _, p: p.endswith(".py") or p.endswith(".yaml"),
        )
