from lendify.models.item import Item
from lendify.repositories.item_repo import ItemRepo


class ItemService:
    @staticmethod
    def list_items():
        return ItemRepo.list_all()

    @staticmethod
    def get_item(item_id: int):
        item = ItemRepo.get(item_id)
        if not item:
            raise LookupError("Item not found")
        return item

    @staticmethod
    def create_item(data: dict):
        name = (data.get("name") or "").strip()
        category = (data.get("category") or "").strip()
        if not name or not category:
            raise ValueError("name and category are required")

        stock = data.get("stock", 0)
        # initial stock is the provisioning baseline: no coercion, no truncation
        if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
            raise ValueError("stock must be a non-negative integer")

        item = Item(
            name=name,
            category=category,
            location=(data.get("location") or "").strip() or None,
            stock=stock,
            status=Item.status_for(stock),
        )
        return ItemRepo.create(item)

    @staticmethod
    def update_item(item_id: int, data: dict):
        """Metadata only. Stock changes go through LedgerService.restock."""
        if "stock" in data or "status" in data:
            raise ValueError("stock and status cannot be edited directly, use restock")

        item = ItemService.get_item(item_id)
        for k in ["name", "category"]:
            if k in data:
                value = (data[k] or "").strip()
                if not value:
                    raise ValueError(f"{k} cannot be empty")
                setattr(item, k, value)
        if "location" in data:
            item.location = (data["location"] or "").strip() or None

        ItemRepo.update()
        return item

    @staticmethod
    def delete_item(item_id: int):
        item = ItemService.get_item(item_id)
        # borrow history must keep pointing at a real item
        if ItemRepo.has_records(item_id):
            raise ValueError("Item has borrow history and cannot be deleted")
        ItemRepo.delete(item)
