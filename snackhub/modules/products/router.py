from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from typing import Optional

from snackhub.common.forms import parse_form
from snackhub.dependencies.dbDependecies import db_dependency
from snackhub.modules.access.permissions import PRODUCT_MANAGEMENT_ROLES
from snackhub.modules.auth.dependencies import require_role
from snackhub.modules.files.service import ImageStorage, get_image_storage
from snackhub.modules.products.service import ProductService
from snackhub.modules.products.schemas import ProductCreate, ProductUpdate, ProductOut, ProductList
from snackhub.modules.users.schemas import MessageResponse

product_router = APIRouter(tags=["Products"])


def _product_form(
    product_name: str = Form(None, alias="productName"),
    price: str = Form(None),
    quantity: str = Form(None),
) -> dict:
    return {"product_name": product_name, "price": price, "quantity": quantity}


@product_router.get("/loadProducts", response_model=ProductList)
def load_products(db: db_dependency):
    """Public catalogue listing used by the POS and dashboard."""
    return ProductService(db).get_all_products()


@product_router.post(
    "/storeProduct",
    response_model=ProductOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_role(PRODUCT_MANAGEMENT_ROLES))]
)
def store_product(
    db: db_dependency,
    form: dict = Depends(_product_form),
    product_image: Optional[UploadFile] = File(None, alias="productImage"),
    storage: ImageStorage = Depends(get_image_storage),
):
    product_data = parse_form(ProductCreate, form)
    return ProductService(db, storage).create_product(product_data, product_image)


@product_router.put(
    "/updateProduct/{product_id}",
    response_model=ProductOut,
    dependencies=[Depends(require_role(PRODUCT_MANAGEMENT_ROLES))]
)
def update_product(
    product_id: int,
    db: db_dependency,
    form: dict = Depends(_product_form),
    product_image: Optional[UploadFile] = File(None, alias="productImage"),
    storage: ImageStorage = Depends(get_image_storage),
):
    update_data = parse_form(ProductUpdate, form)
    return ProductService(db, storage).update_product(product_id, update_data, product_image)


@product_router.delete(
    "/deleteProduct/{product_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_role(PRODUCT_MANAGEMENT_ROLES))]
)
def delete_product(product_id: int, db: db_dependency, storage: ImageStorage = Depends(get_image_storage)):
    return ProductService(db, storage).delete_product(product_id)
