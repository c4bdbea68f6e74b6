#!/usr/bin/env python3
"""
Скрипт для инициализации индексов базы данных
"""

import argparse
import sys
from pathlib import Path

# Добавляем путь к модулю app
sys.path.insert(0, str(Path(__file__).parent))

from app.core.config import settings
from app.db.database import MongoPool
from app.db.indexes import IndexManager


def init_database(drop: bool = False) -> bool:
    """Создает все индексы в базе данных."""
    print("🗄️ Инициализация индексов...")
    pool = MongoPool(settings)

    try:
        manager = IndexManager(pool.db)
        if drop:
            manager.drop_all()
            print("🧹 Старые индексы удалены")

        report = manager.create_all()
        print(f"📋 Создано индексов: {len(report.created)}")
        for name in report.created:
            print(f"  - {name}")
        for name, error in report.failed.items():
            print(f"❌ {name}: {error}")

        if manager.has_product_text_index():
            print("✅ Текстовый индекс товаров активен")
        else:
            print("⚠️ Текстовый индекс товаров не создан, поиск будет работать через regex")
        return report.ok
    finally:
        pool.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Создание индексов MongoDB")
    parser.add_argument("--drop", action="store_true", help="Удалить индексы перед созданием")
    args = parser.parse_args()

    success = init_database(drop=args.drop)
    if not success:
        sys.exit(1)
