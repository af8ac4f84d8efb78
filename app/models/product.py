# app/models/product.py
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Product(Base):
    """
    Model pentru produse (tabel `products`).

    Note:
    - `id` e generat de DB la insert (autoincrement/identity) și nu se mai schimbă.
    - Toate celelalte coloane sunt opționale; nu există validări la nivel DB.
    - `price` e NUMERIC fără precizie fixă; moneda nu e stocată.
    - În JSON `image_url` apare ca `imageUrl` (vezi app/schemas/product.py).
    """
    __tablename__ = "products"
    __table_args__ = (
        # SQLite: AUTOINCREMENT ca id-urile șterse să nu fie refolosite
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)  # implicit: integer + PK
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str | None] = mapped_column(String, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    price: Mapped[Decimal | None] = mapped_column(Numeric, nullable=True)

    def __repr__(self) -> str:
        # scurtează numele în repr pentru loguri mai curate
        name_preview = (self.name[:32] + "…") if self.name and len(self.name) > 33 else self.name
        return f"<Product id={self.id!r} name={name_preview!r} price={self.price!r}>"
