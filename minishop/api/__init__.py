# minishop/api/__init__.py
from fastapi import FastAPI
from minishop.api.routers import health, products, carts, orders


def create_app(**kwargs) -> FastAPI:
    app = FastAPI(title="minishop", version="1.0.0", **kwargs)

    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app
