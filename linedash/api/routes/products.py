from fastapi import APIRouter, status

from linedash.api.deps import LineServiceDep
from linedash.models import ProductCreate, ProductPublic

router = APIRouter(prefix="/products", tags=["products"])


@router.post(
    "/",
    summary="Create product",
    response_model=ProductPublic,
    status_code=status.HTTP_201_CREATED,
)
def create_product(service: LineServiceDep, product_in: ProductCreate):
    return service.create_product(product_in)


@router.get("/", summary="List products", response_model=list[ProductPublic])
def list_products(service: LineServiceDep):
    return service.list_products()
