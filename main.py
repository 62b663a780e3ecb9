import uvicorn
import os
import sys
import traceback
from pathlib import Path

from dotenv import load_dotenv

# Load .env before reading PORT/HOST/ENVIRONMENT
env_path = Path(__file__).resolve().parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def run() -> None:
    """
    Entry point for MiniSocial.
    Starts the web app on a single worker; the session is process-wide.
    """
    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "127.0.0.1")
    environment = os.getenv("ENVIRONMENT", "development").lower()

    print(f"Starting MiniSocial on http://{host}:{port} ({environment})")
    print("Press CTRL+C to stop the server")

    try:
        uvicorn.run(
            "web.main:create_app",
            factory=True,
            host=host,
            port=port,
            reload=environment == "development",
            log_level="info" if environment == "production" else "debug",
        )
    except KeyboardInterrupt:
        print("\n\nShutdown complete.")
        sys.exit(0)
    except Exception as e:
        print(f"\nFatal error: {e}", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
