from datetime import datetime
from lendify.extensions import db

STATUS_AVAILABLE = "Available"
STATUS_OUT_OF_STOCK = "Out of Stock"


class Item(db.Model):
    __tablename__ = "items"
    __table_args__ = (
        db.CheckConstraint("stock >= 0", name="ck_items_stock_non_negative"),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False, index=True)
    category = db.Column(db.String(100), nullable=False, index=True)
    location = db.Column(db.String(200), nullable=True)

    stock = db.Column(db.Integer, nullable=False, default=0)
    # derived from stock, see apply_stock_delta
    status = db.Column(db.String(20), nullable=False, default=STATUS_OUT_OF_STOCK)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    @staticmethod
    def status_for(stock: int) -> str:
        return STATUS_AVAILABLE if stock > 0 else STATUS_OUT_OF_STOCK

    def apply_stock_delta(self, delta: int):
        """
        The only place stock changes. Caller must hold the row lock.
        Status is recomputed in the same step so the two never drift apart.
        """
        new_stock = self.stock + delta
        if new_stock < 0:
            raise ValueError(f"stock of item {self.id} would drop to {new_stock}")
        self.stock = new_stock
        self.status = Item.status_for(new_stock)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "stock": self.stock,
            "location": self.location,
            "status": self.status,
        }
