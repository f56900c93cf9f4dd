import uuid

from sqlalchemy.orm import declarative_base
from sqlalchemy import event

# Общий Base для всех моделей
Base = declarative_base()


@event.listens_for(Base, "before_insert", propagate=True)
def assign_random_id(mapper, connection, target):
    # у профиля id приходит от auth-провайдера, остальным генерируем сами
    if getattr(target, "id", None) is None:
        target.id = str(uuid.uuid4())
