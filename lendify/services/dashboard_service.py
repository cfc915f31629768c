from sqlalchemy import func

from lendify.extensions import db
from lendify.models.item import Item, STATUS_OUT_OF_STOCK
from lendify.repositories.borrow_record_repo import BorrowRecordRepo
from lendify.repositories.item_repo import ItemRepo


class DashboardService:
    @staticmethod
    def summary():
        # display only: not linearizable with in-flight ledger operations
        total_items = Item.query.count()
        total_stock = db.session.query(func.coalesce(func.sum(Item.stock), 0)).scalar() or 0
        out_of_stock = Item.query.filter_by(status=STATUS_OUT_OF_STOCK).count()
        categories = [
            {"category": category, "count": int(count)}
            for category, count in ItemRepo.category_counts()
        ]

        return {
            "total_items": int(total_items),
            "total_stock": int(total_stock),
            "total_borrowed": int(BorrowRecordRepo.count_borrowed()),
            "out_of_stock": int(out_of_stock),
            "total_categories": len(categories),
            "categories": categories,
        }
