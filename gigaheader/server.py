import sys

from .config import PORT
from .daemon import start, stop
from .errors import BindError
from .main import app


def run(port: int = PORT) -> int:
    try:
        handle = start(port, app)
    except BindError as exc:
        print(exc, file=sys.stderr)
        return 1

    print(f"Test server running on port {port}")
    print(f"Open http://localhost:{port} in your browser", flush=True)

    # Any line on stdin, or EOF, stops the server.
    sys.stdin.readline()

    stop(handle)
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
