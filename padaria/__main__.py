# padaria/__main__.py
# Uso: python -m padaria

import uvicorn

from .core.config import settings

if __name__ == "__main__":
    uvicorn.run("padaria.main:app", host="0.0.0.0", port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
