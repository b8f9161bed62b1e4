from fastapi import APIRouter, Depends
from typing import Dict, Optional
from venuedesk.modules.auth.rbac import require_permission
from venuedesk.modules.auth.utility import get_current_user
from venuedesk.modules.menus.dependencies import get_menu_service
from venuedesk.modules.menus.schemas import (
    MenuPackageCreate, MenuPackageUpdate,
    MenuItemCreate, MenuItemUpdate,
    AdditionalItemCreate, AdditionalItemUpdate,
)
from venuedesk.modules.menus.service import MenuService

menu_router = APIRouter(prefix="/menus", tags=["Menus"])

@menu_router.get("/packages")
async def list_packages(
    current_user: Dict = Depends(get_current_user),
    menu_service: MenuService = Depends(get_menu_service),
    ):
    return await menu_service.list_packages()

@menu_router.get("/packages/{package_id}")
async def get_package(
    package_id: str,
    current_user: Dict = Depends(get_current_user),
    menu_service: MenuService = Depends(get_menu_service),
    ):
    return await menu_service.get_package(package_id)

@menu_router.post("/packages", status_code=201)
async def create_package(
    data: MenuPackageCreate,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    menu_service: MenuService = Depends(get_menu_service),
    ):
    return await menu_service.create_package(data, current_user)

@menu_router.patch("/packages/{package_id}")
async def update_package(
    package_id: str,
    data: MenuPackageUpdate,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    menu_service: MenuService = Depends(get_menu_service),
    ):
    return await menu_service.update_package(package_id, data, current_user)

@menu_router.delete("/packages/{package_id}")
async def delete_package(
    package_id: str,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    menu_service: MenuService = Depends(get_menu_service),
    ):
    return await menu_service.delete_package(package_id, current_user)

@menu_router.get("/items")
async def list_items(
    package_id: Optional[str] = None,
    current_user: Dict = Depends(get_current_user),
    menu_service: MenuService = Depends(get_menu_service),
    ):
    return await menu_service.list_items(package_id)

@menu_router.get("/items/{item_id}")
async def get_item(
    item_id: str,
    current_user: Dict = Depends(get_current_user),
    menu_service: MenuService = Depends(get_menu_service),
    ):
    return await menu_service.get_item(item_id)

@menu_router.post("/items", status_code=201)
async def create_item(
    data: MenuItemCreate,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    menu_service: MenuService = Depends(get_menu_service),
    ):
    return await menu_service.create_item(data, current_user)

@menu_router.patch("/items/{item_id}")
async def update_item(
    item_id: str,
    data: MenuItemUpdate,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    menu_service: MenuService = Depends(get_menu_service),
    ):
    return await menu_service.update_item(item_id, data, current_user)

@menu_router.delete("/items/{item_id}")
async def delete_item(
    item_id: str,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    menu_service: MenuService = Depends(get_menu_service),
    ):
    return await menu_service.delete_item(item_id, current_user)

@menu_router.get("/additional-items")
async def list_additional_items(
    active_only: bool = False,
    current_user: Dict = Depends(get_current_user),
    menu_service: MenuService = Depends(get_menu_service),
    ):
    return await menu_service.list_additional_items(active_only)

@menu_router.get("/additional-items/{item_id}")
async def get_additional_item(
    item_id: str,
    current_user: Dict = Depends(get_current_user),
    menu_service: MenuService = Depends(get_menu_service),
    ):
    return await menu_service.get_additional_item(item_id)

@menu_router.post("/additional-items", status_code=201)
async def create_additional_item(
    data: AdditionalItemCreate,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    menu_service: MenuService = Depends(get_menu_service),
    ):
    return await menu_service.create_additional_item(data, current_user)

@menu_router.patch("/additional-items/{item_id}")
async def update_additional_item(
    item_id: str,
    data: AdditionalItemUpdate,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    menu_service: MenuService = Depends(get_menu_service),
    ):
    return await menu_service.update_additional_item(item_id, data, current_user)

@menu_router.delete("/additional-items/{item_id}")
async def delete_additional_item(
    item_id: str,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    menu_service: MenuService = Depends(get_menu_service),
    ):
    return await menu_service.delete_additional_item(item_id, current_user)
