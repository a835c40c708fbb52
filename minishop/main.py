# minishop/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from minishop.api import create_app
from minishop.data.database import Base, engine, init_db
from minishop.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info("Initializing database")
    try:
        init_db(engine)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    logger.info(f"Tables ready: {sorted(Base.metadata.tables)}")
    yield


app = create_app(lifespan=lifespan)

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
