from sqlalchemy import func

from lendify.models.item import Item
from lendify.models.borrow_record import BorrowRecord
from lendify.extensions import db


class ItemRepo:
    @staticmethod
    def list_all():
        return Item.query.order_by(Item.name.asc()).all()

    @staticmethod
    def get(item_id: int):
        return db.session.get(Item, item_id)

    @staticmethod
    def get_for_update(item_id: int):
        """
        SELECT ... FOR UPDATE on one item row. The lock is held until the
        surrounding unit of work commits or rolls back.
        populate_existing: an item already in the session must be re-read under the lock.
        """
        stmt = (
            db.select(Item)
            .where(Item.id == item_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return db.session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def lock_many(item_ids):
        # ascending id order so concurrent batches never wait on each other in a cycle
        stmt = (
            db.select(Item)
            .where(Item.id.in_(sorted(set(item_ids))))
            .order_by(Item.id.asc())
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return db.session.execute(stmt).scalars().all()

    @staticmethod
    def has_records(item_id: int) -> bool:
        return BorrowRecord.query.filter_by(item_id=item_id).first() is not None

    @staticmethod
    def category_counts():
        return (
            db.session.query(Item.category, func.count(Item.id))
            .group_by(Item.category)
            .order_by(Item.category.asc())
            .all()
        )

    @staticmethod
    def create(item: Item):
        db.session.add(item)
        db.session.commit()
        return item

    @staticmethod
    def update():
        db.session.commit()

    @staticmethod
    def delete(item: Item):
        db.session.delete(item)
        db.session.commit()
