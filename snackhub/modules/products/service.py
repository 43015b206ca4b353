from sqlalchemy.orm import Session
from fastapi import HTTPException, UploadFile, status
from typing import Dict, Any, Optional
import logging

from snackhub.modules.files.service import ImageStorage
from snackhub.modules.orders.models import OrderItem
from snackhub.modules.products.models import Product
from snackhub.modules.products.schemas import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

IMAGE_FOLDER = "products"


class ProductService:
    """Product catalogue management"""

    def __init__(self, db: Session, storage: Optional[ImageStorage] = None):
        self.db = db
        self.storage = storage

    def get_all_products(self) -> Dict[str, Any]:
        products = self.db.query(Product).order_by(Product.product_id).all()
        return {"products": products}

    def get_product_by_id(self, product_id: int) -> Product:
        product = self.db.query(Product).filter(Product.product_id == product_id).first()
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found"
            )
        return product

    def _store_image(self, image: Optional[UploadFile]) -> Optional[str]:
        if image is None or not image.filename:
            return None
        if self.storage is None:
            raise RuntimeError("Image storage is not configured")
        return self.storage.save_image(IMAGE_FOLDER, image)

    def _discard_image(self, key: Optional[str]):
        if key and self.storage is not None:
            self.storage.delete(key)

    def create_product(self, product_data: ProductCreate, image: Optional[UploadFile] = None) -> Product:
        image_key = self._store_image(image)
        try:
            product = Product(
                product_name=product_data.product_name,
                price=product_data.price,
                quantity=product_data.quantity,
                product_picture=image_key
            )
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
            logger.info(f"Product created: {product.product_name} ({product.product_id})")
            return product

        except Exception:
            self.db.rollback()
            self._discard_image(image_key)
            logger.exception("Error creating product")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creating product"
            )

    def update_product(self, product_id: int, update_data: ProductUpdate,
                       image: Optional[UploadFile] = None) -> Product:
        """
        Update name, price, stock count and image.

        Price changes never touch existing order items, which keep the price
        frozen at sale time.
        """
        product = self.get_product_by_id(product_id)
        image_key = self._store_image(image)
        old_image = product.product_picture
        try:
            product.product_name = update_data.product_name
            product.price = update_data.price
            product.quantity = update_data.quantity
            if image_key:
                product.product_picture = image_key

            self.db.commit()
            self.db.refresh(product)

        except Exception:
            self.db.rollback()
            self._discard_image(image_key)
            logger.exception(f"Error updating product {product_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error updating product"
            )

        if image_key and old_image:
            self._discard_image(old_image)
        return product

    def delete_product(self, product_id: int) -> Dict[str, str]:
        """Delete a product that has never been sold."""
        product = self.get_product_by_id(product_id)

        sold = self.db.query(OrderItem).filter(OrderItem.product_id == product_id).count()
        if sold > 0:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Cannot delete product because it appears in existing orders"
            )

        image_key = product.product_picture
        try:
            self.db.delete(product)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception(f"Error deleting product {product_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error deleting product"
            )

        self._discard_image(image_key)
        logger.info(f"Product deleted: {product_id}")
        return {"message": "Product deleted successfully"}
