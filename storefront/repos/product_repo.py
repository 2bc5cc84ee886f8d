# storefront/repos/product_repo.py
from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_products(
        self,
        in_stock_only: bool = False,
        category_id: int | None = None,
        search: str | None = None,
        limit: int | None = None,
    ) -> list[ProductModel]:
        stmt = select(ProductModel).order_by(ProductModel.created_at.desc(), ProductModel.id.desc())

        if in_stock_only:
            stmt = stmt.where(ProductModel.in_stock.is_(True))
        if category_id is not None:
            stmt = stmt.where(ProductModel.category_id == category_id)
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(ProductModel.name).like(pattern),
                    func.lower(ProductModel.description).like(pattern),
                )
            )
        if limit:
            stmt = stmt.limit(limit)

        return list(self.db.execute(stmt).scalars().all())

    def count(self, in_stock_only: bool = False) -> int:
        stmt = select(func.count(ProductModel.id))
        if in_stock_only:
            stmt = stmt.where(ProductModel.in_stock.is_(True))
        return self.db.execute(stmt).scalar_one()

    def save(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, product: ProductModel):
        self.db.delete(product)
        self.db.commit()
