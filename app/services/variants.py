"""
Генерация вариантов товара из его опций.
"""

from itertools import product as cartesian
from typing import Dict, List, Optional, Sequence, Tuple

from app.db.models import ProductOption, ProductVariant


def generate_variants(
    options: Sequence[ProductOption],
    base_price: float,
    base_stock: int,
    existing: Optional[Sequence[ProductVariant]] = None,
) -> List[ProductVariant]:
    """
    Построить все комбинации значений опций.

    Комбинации идут в порядке объявления опций и значений внутри опции.
    Данные существующего варианта (цена, артикул, остаток, изображения)
    сохраняются, если его optionValues совпадает с комбинацией целиком.
    Новые комбинации получают базовую цену и остаток товара.

    Args:
        options: Опции товара
        base_price: Базовая цена товара
        base_stock: Базовый остаток товара
        existing: Ранее сохраненные варианты

    Returns:
        List[ProductVariant]: Варианты; пустой список, если опций нет
            или какая-то опция неполная
    """
    if not options or any(not opt["name"] or not opt["values"] for opt in options):
        return []

    known: Dict[Tuple[str, ...], ProductVariant] = {
        tuple(v["optionValues"]): v for v in (existing or [])
    }

    variants: List[ProductVariant] = []
    for combo in cartesian(*(opt["values"] for opt in options)):
        previous = known.get(combo)
        if previous is not None:
            variants.append(
                {
                    "optionValues": list(combo),
                    "price": previous.get("price", base_price),
                    "sku": previous.get("sku", ""),
                    "stock": previous.get("stock", base_stock),
                    "images": previous.get("images", []),
                }
            )
        else:
            variants.append(
                {
                    "optionValues": list(combo),
                    "price": base_price,
                    "sku": "",
                    "stock": base_stock,
                    "images": [],
                }
            )
    return variants
