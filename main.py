import argparse

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env file before importing the app
load_dotenv()

from app.main import app  # noqa: E402,F401


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the matching API and Socket.IO server.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--no-reload", dest="reload", action="store_false", help="Disable auto-reload.")
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    uvicorn.run("main:app", host=args.host, port=args.port, reload=args.reload)
