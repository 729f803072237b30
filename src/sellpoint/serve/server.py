"""Launch the FastAPI service with uvicorn."""
from __future__ import annotations
import os

import uvicorn

def main() -> None:
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3000"))
    uvicorn.run("sellpoint.serve.fastapi_app:app", host=host, port=port)

if __name__ == "__main__":
    main()
