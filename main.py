import uvicorn

from tableside.logs import setup_logging
from tableside.web import app

if __name__ == '__main__':
    setup_logging()
    uvicorn.run(app, host="0.0.0.0")
