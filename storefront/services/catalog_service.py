# storefront/services/catalog_service.py
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.schemas import CategoryOut
from storefront.repos.category_repo import CategoryRepo
from storefront.repos.product_repo import ProductRepo

FEATURED_LIMIT = 6


class CatalogService:
    """Odczyty katalogu dla sklepu (tylko query)."""

    def __init__(self, db: Session):
        self.products = ProductRepo(db)
        self.categories = CategoryRepo(db)

    def list_products(
        self,
        category_id: int | None = None,
        search: str | None = None,
        limit: int | None = None,
    ) -> list[ProductModel]:
        return self.products.list_products(
            in_stock_only=True,
            category_id=category_id,
            search=search.strip() if search else None,
            limit=limit,
        )

    def featured_products(self) -> list[ProductModel]:
        return self.products.list_products(in_stock_only=True, limit=FEATURED_LIMIT)

    def get_product(self, product_id: int) -> ProductModel:
        product = self.products.get_product(product_id)
        if not product:
            raise LookupError("Produkt nie istnieje")
        return product

    def list_categories(self, newest_first: bool = False) -> list[CategoryOut]:
        counts = self.categories.product_counts()
        result = []
        for category in self.categories.list_categories(newest_first=newest_first):
            out = CategoryOut.model_validate(category)
            out.items_count = counts.get(category.id, 0)
            result.append(out)
        return result
