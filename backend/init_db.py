"""
Скрипт инициализации базы данных
Создаёт таблицы и добавляет начальные данные
Запуск (из папки backend): python init_db.py
"""
import sys
sys.path.insert(0, '.')

from salon.database import engine, init_db, SessionLocal
from salon.seed import ensure_salon, seed_services
from salon.services.schedule import ScheduleService


def init_data():
    """Салон, расписание и услуги"""
    db = SessionLocal()
    try:
        salon = ensure_salon(db)
        print(f"Салон: {salon.salon_name} (id={salon.id})")

        ScheduleService(db, salon).init_default_schedule()
        print("Расписание: Пн-Пт 09:00-17:00, Сб 10:00-14:00, Вс выходной")

        added = seed_services(db, salon)
        if added:
            print(f"Добавлено {added} услуг!")
        else:
            print("Услуги уже существуют, пропускаем...")
    finally:
        db.close()


if __name__ == "__main__":
    # Создаём все таблицы
    print("Создание таблиц...")
    init_db(engine)
    print("Таблицы созданы!")

    init_data()
    print("\nИнициализация завершена!")
    print("Теперь можно запустить сервер: python -m uvicorn salon.main:app --reload")
