from fastapi import HTTPException
import logging
from typing import Dict
from datetime import datetime, timezone
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.menus.models import MenuPackage, MenuItem, AdditionalItem, MenuType
from venuedesk.modules.menus.repository import MenuRepository
from venuedesk.modules.menus.schemas import (
    MenuPackageCreate, MenuPackageUpdate,
    MenuItemCreate, MenuItemUpdate,
    AdditionalItemCreate, AdditionalItemUpdate,
)


class MenuService:
    def __init__(self,
                 menu_repo: MenuRepository,
                 audit_service: AuditService
                 ):
        self.menu_repo = menu_repo
        self.audit_service = audit_service

    # Packages

    async def list_packages(self):
        return await self.menu_repo.find_packages()

    async def get_package(self, package_id: str):
        package = await self.menu_repo.find_package_by_id(package_id)
        if not package:
            raise HTTPException(status_code=404, detail="Menu package not found")
        return package

    async def create_package(self, data: MenuPackageCreate, current_user: Dict):
        package = MenuPackage(**data.model_dump())
        doc = package.model_dump()
        await self.menu_repo.add_package(doc)
        doc.pop("_id", None)
        await self.audit_service.log_business_action(
            current_user, "menu_package_created", "settings", package.id, {"name": package.name},
        )
        return doc

    async def update_package(self, package_id: str, data: MenuPackageUpdate, current_user: Dict):
        update_data = data.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="Nothing to update")
        update_data["updated_at"] = datetime.now(timezone.utc)

        package = await self.menu_repo.update_package(package_id, update_data)
        if not package:
            raise HTTPException(status_code=404, detail="Menu package not found")
        await self.audit_service.log_business_action(
            current_user, "menu_package_updated", "settings", package_id,
            {"fields": sorted(k for k in update_data if k != "updated_at")},
        )
        return package

    async def delete_package(self, package_id: str, current_user: Dict):
        if not await self.menu_repo.delete_package(package_id):
            raise HTTPException(status_code=404, detail="Menu package not found")
        removed = await self.menu_repo.delete_items_for_package(package_id)
        logging.info(f"Menu package {package_id} deleted along with {removed} items")
        await self.audit_service.log_business_action(
            current_user, "menu_package_deleted", "settings", package_id, {"items_removed": removed},
        )
        return {"message": "Menu package deleted successfully"}

    # Package items

    async def list_items(self, package_id: str = None):
        return await self.menu_repo.find_items(package_id)

    async def get_item(self, item_id: str):
        item = await self.menu_repo.find_item_by_id(item_id)
        if not item:
            raise HTTPException(status_code=404, detail="Menu item not found")
        return item

    async def create_item(self, data: MenuItemCreate, current_user: Dict):
        package = await self.menu_repo.find_package_by_id(data.package_id)
        if not package:
            raise HTTPException(status_code=404, detail="Menu package not found")
        if package.get("type") == MenuType.veg.value and not data.is_veg:
            raise HTTPException(status_code=400, detail="Cannot add non-veg item to a veg package")

        item = MenuItem(**data.model_dump())
        doc = item.model_dump()
        await self.menu_repo.add_item(doc)
        doc.pop("_id", None)
        return doc

    async def update_item(self, item_id: str, data: MenuItemUpdate, current_user: Dict):
        update_data = data.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="Nothing to update")

        existing = await self.get_item(item_id)
        if update_data.get("is_veg") is False:
            package = await self.menu_repo.find_package_by_id(existing["package_id"])
            if package and package.get("type") == MenuType.veg.value:
                raise HTTPException(status_code=400, detail="Cannot add non-veg item to a veg package")

        return await self.menu_repo.update_item(item_id, update_data)

    async def delete_item(self, item_id: str, current_user: Dict):
        if not await self.menu_repo.delete_item(item_id):
            raise HTTPException(status_code=404, detail="Menu item not found")
        return {"message": "Menu item deleted successfully"}

    # Additional items

    async def list_additional_items(self, active_only: bool = False):
        return await self.menu_repo.find_additional_items(active_only)

    async def get_additional_item(self, item_id: str):
        item = await self.menu_repo.find_additional_item_by_id(item_id)
        if not item:
            raise HTTPException(status_code=404, detail="Additional item not found")
        return item

    async def create_additional_item(self, data: AdditionalItemCreate, current_user: Dict):
        item = AdditionalItem(**data.model_dump())
        doc = item.model_dump()
        await self.menu_repo.add_additional_item(doc)
        doc.pop("_id", None)
        await self.audit_service.log_business_action(
            current_user, "additional_item_created", "settings", item.id, {"name": item.name},
        )
        return doc

    async def update_additional_item(self, item_id: str, data: AdditionalItemUpdate, current_user: Dict):
        update_data = data.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="Nothing to update")
        item = await self.menu_repo.update_additional_item(item_id, update_data)
        if not item:
            raise HTTPException(status_code=404, detail="Additional item not found")
        return item

    async def delete_additional_item(self, item_id: str, current_user: Dict):
        if not await self.menu_repo.delete_additional_item(item_id):
            raise HTTPException(status_code=404, detail="Additional item not found")
        return {"message": "Additional item deleted successfully"}
