"""Local development entry point.

Usage:
    python run.py

Serves on all interfaces so an ngrok tunnel (the app's HOST) can reach it.
"""

import os

from dotenv import load_dotenv

load_dotenv()  # Load .env before anything else

from ordervideo import create_app

app = create_app()

if __name__ == "__main__":
    port = int(os.environ.get("PORT", "3000"))
    app.run(debug=app.debug, host="0.0.0.0", port=port)
