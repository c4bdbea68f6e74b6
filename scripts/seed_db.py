#!/usr/bin/env python3
"""
Скрипт для заполнения базы тестовыми категориями и товарами.
"""

import argparse
import sys
from pathlib import Path

# Добавляем путь к модулю app
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import settings
from app.db.database import MongoPool
from app.services.maintenance_service import SeedRefused, clear_database, seed_database


def main() -> int:
    parser = argparse.ArgumentParser(description="Заполнение базы тестовыми данными")
    parser.add_argument("--reset", action="store_true", help="Очистить базу перед заполнением")
    args = parser.parse_args()

    print("🌱 Заполнение базы тестовыми данными...")
    print("=" * 50)
    pool = MongoPool(settings)
    try:
        if args.reset:
            clear_database(pool.db)
            print("🧹 База очищена")
        slugs = seed_database(pool.db)
    except SeedRefused as e:
        print(f"⚠️ {e}. Используйте --reset для очистки.")
        return 1
    finally:
        pool.close()

    print(f"✅ Создано товаров: {len(slugs)}")
    for slug in slugs:
        print(f"  - {slug}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
