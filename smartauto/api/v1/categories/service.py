from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from smartauto.api.v1.categories.schemas import CreateCategoryRequest, UpdateCategoryRequest
from smartauto.core.exceptions import AppException
from smartauto.models.category import Category


class CategoryService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_category_by_name(self, name: str) -> Optional[Category]:
        result = await self.db.execute(select(Category).where(Category.name == name))
        return result.scalar_one_or_none()

    async def get_category_by_id(self, category_id: int) -> Category:
        category = await self.db.get(Category, category_id)
        if not category:
            AppException().raise_404("Category not found")
        return category

    async def get_all_categories(self, offset: int = 0, limit: int = 10) -> Tuple[List[Category], int]:
        total = (await self.db.execute(select(func.count()).select_from(Category))).scalar() or 0
        result = await self.db.execute(select(Category).order_by(Category.id).offset(offset).limit(limit))
        return list(result.scalars().all()), total

    async def create_category(self, data: CreateCategoryRequest) -> Category:
        if await self.get_category_by_name(data.name):
            AppException().raise_400(f"Category {data.name} already exists")

        category = Category(name=data.name, description=data.description)
        self.db.add(category)
        await self.db.commit()
        await self.db.refresh(category)
        return category

    async def update_category(self, category_id: int, data: UpdateCategoryRequest) -> Category:
        category = await self.get_category_by_id(category_id)

        if data.name and data.name != category.name:
            if await self.get_category_by_name(data.name):
                AppException().raise_400(f"Category {data.name} already exists")

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(category, field, value)

        self.db.add(category)
        await self.db.commit()
        await self.db.refresh(category)
        return category

    async def delete_category(self, category_id: int) -> None:
        category = await self.get_category_by_id(category_id)
        # Join rows go with it
        await self.db.delete(category)
        await self.db.commit()
