# app/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.routers import health, orders
from app.data.database import build_engine, build_session_factory, init_db
from app.services.payment_client import PaymentClient
from app.services.product_client import ProductClient
from app.utils.settings import DATABASE_URL, INTERNAL_SERVICE_SECRET, PORT, SERVICE_NAME
from app.utils.logging import get_logger

logger = get_logger(__name__)


def create_app(
    database_url: str | None = None,
    product_client: ProductClient | None = None,
    payment_client: PaymentClient | None = None,
    internal_secret: str | None = None,
) -> FastAPI:
    """
    Zasoby dlugozyjace (engine, klienci HTTP) powstaja raz w lifespan
    i sa zwalniane przy shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = build_engine(database_url or DATABASE_URL)
        try:
            init_db(engine)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create tables: {e}")
            engine.dispose()
            raise

        app.state.engine = engine
        app.state.session_factory = build_session_factory(engine)
        app.state.product_client = product_client or ProductClient()
        app.state.payment_client = payment_client or PaymentClient()
        app.state.internal_secret = INTERNAL_SERVICE_SECRET if internal_secret is None else internal_secret
        logger.info(f"{SERVICE_NAME} started")

        yield

        app.state.product_client.close()
        app.state.payment_client.close()
        engine.dispose()
        logger.info(f"{SERVICE_NAME} stopped")

    app = FastAPI(
        title="Orders Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(orders.router)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error on {request.method} {request.url.path}: {exc!r}")
        return JSONResponse(status_code=503, content={"detail": "Database unavailable"})

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
