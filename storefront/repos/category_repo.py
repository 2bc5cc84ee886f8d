# storefront/repos/category_repo.py
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel


class CategoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_by_name(self, name: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.name == name)
        ).scalar_one_or_none()

    def list_categories(self, newest_first: bool = False) -> list[CategoryModel]:
        order = CategoryModel.created_at.desc() if newest_first else CategoryModel.created_at.asc()
        return list(self.db.execute(select(CategoryModel).order_by(order, CategoryModel.id)).scalars().all())

    def product_counts(self) -> dict[int, int]:
        rows = self.db.execute(
            select(ProductModel.category_id, func.count(ProductModel.id))
            .where(ProductModel.category_id.is_not(None))
            .group_by(ProductModel.category_id)
        ).all()
        return {category_id: count for category_id, count in rows}

    def count(self) -> int:
        return self.db.execute(select(func.count(CategoryModel.id))).scalar_one()

    def save(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def delete(self, category: CategoryModel):
        self.db.delete(category)
        self.db.commit()
