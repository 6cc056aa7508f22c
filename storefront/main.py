# storefront/main.py
from fastapi import FastAPI
import uvicorn

from . import pages
from .logging_config import configure_logging

configure_logging()

app = FastAPI(
    title="Storefront checkout",
    description="🛒 Shipping address form that hands the buyer over to PayPal",
    version="1.0.0",
)

# ✅ Роутеры
app.include_router(pages.router)

if __name__ == "__main__":
    uvicorn.run("storefront.main:app", host="0.0.0.0", port=3000, reload=True)
