import os

import uvicorn

from vocabquiz.app import create_app
from vocabquiz.config import settings

app = create_app()


def run():
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run("vocabquiz.main:app", host="0.0.0.0", port=port, reload=settings.DEBUG)


if __name__ == "__main__":
    run()
