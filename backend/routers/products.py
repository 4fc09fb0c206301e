"""
Products Router - Product catalogue cards
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field, field_validator

from filtering import filter_products
from models import ProductRecord, new_id
from routers.common import not_found, require_confirmation
from workbench import Workbench, get_workbench

router = APIRouter(prefix="/api/v1/products", tags=["Products"])


class ProductPayload(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    owner: str = ""
    health: int = 100
    active_tickets: int = 0
    icon: str = "Package"

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v


@router.get("")
async def list_products(search: Optional[str] = None, wb: Workbench = Depends(get_workbench)):
    view = wb.list_view("products")
    view.update(search)
    products = filter_products(wb.products, view.query)
    return {"total": len(products), "items": [p.to_dict() for p in products], "view": view.to_dict()}


@router.get("/{product_id}")
async def get_product(product_id: str, wb: Workbench = Depends(get_workbench)):
    product = wb.products.get(product_id)
    if not product:
        raise not_found("Product")
    return product.to_dict()


@router.post("", status_code=201)
async def create_product(body: ProductPayload, wb: Workbench = Depends(get_workbench)):
    product = wb.products.upsert(ProductRecord(id=new_id("p"), **body.model_dump()))
    return product.to_dict()


@router.put("/{product_id}")
async def upsert_product(
    product_id: str,
    body: ProductPayload,
    response: Response,
    wb: Workbench = Depends(get_workbench),
):
    created = product_id not in wb.products
    product = wb.products.upsert(ProductRecord(id=product_id, **body.model_dump()))
    if created:
        response.status_code = 201
    return product.to_dict()


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    confirm: bool = False,
    wb: Workbench = Depends(get_workbench),
):
    # Tickets and versions naming the product keep their values
    require_confirmation(confirm, "product")
    deleted = wb.products.delete(product_id)
    return {"status": "deleted" if deleted else "absent", "id": product_id, "deleted": deleted}
