# minishop/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from minishop.api.security import get_current_user, require_roles
from minishop.data.database import get_db
from minishop.domain import roles
from minishop.domain.errors import ConflictError, NotFoundError
from minishop.domain.schemas import ApiResponse, ProductCreate, ProductOut, ProductUpdate
from minishop.services.product_service import ProductService

router = APIRouter(prefix="/api/v1/products", tags=["products"])

catalog_managers = require_roles(roles.ADMIN, roles.PRODUCT_MANAGER)


def get_service(db: Session):
    return ProductService(db)


@router.get("", response_model=ApiResponse[List[ProductOut]], dependencies=[Depends(get_current_user)])
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str | None = None,
    filter: str | None = Query(None, description="Category name"),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    products, pagination = svc.list_products(page, limit, search, filter)
    return ApiResponse(data=products, pagination=pagination)


@router.get("/{product_id}", response_model=ApiResponse[ProductOut], dependencies=[Depends(get_current_user)])
def get_product(product_id: str, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return ApiResponse(data=svc.get_product(product_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "",
    response_model=ApiResponse[ProductOut],
    status_code=201,
    dependencies=[Depends(catalog_managers)],
)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return ApiResponse(data=svc.create_product(payload))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.patch("/{product_id}", response_model=ApiResponse[ProductOut], dependencies=[Depends(catalog_managers)])
def update_product(product_id: str, payload: ProductUpdate, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return ApiResponse(data=svc.update_product(product_id, payload))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/{product_id}", status_code=204, dependencies=[Depends(catalog_managers)])
def delete_product(product_id: str, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.delete_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return Response(status_code=204)
