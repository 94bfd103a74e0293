# product_service/main.py
from typing import List

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

app = FastAPI(title="Product Service (dev mock)")


PRODUCTS = {
    1: {"id": 1, "name": "Keyboard", "price": 199.99},
    2: {"id": 2, "name": "Mouse", "price": 49.50},
    3: {"id": 3, "name": "Monitor", "price": 899.00},
}


class ValidateIn(BaseModel):
    ids: List[int]


@app.get("/products/{product_id}")
def get_product(product_id: int):
    product = PRODUCTS.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@app.post("/products/validate")
def validate_products(payload: ValidateIn):
    ids = set(payload.ids)
    missing = sorted(ids - set(PRODUCTS))
    if missing:
        raise HTTPException(status_code=400, detail=f"Products not found: {missing}")
    return [PRODUCTS[i] for i in sorted(ids)]
