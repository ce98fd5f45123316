# catalog_service/seed.py

"""
Loads the sample catalog into the database, replacing whatever is there.

Usage: python -m catalog_service.seed
"""
import logging
import sys
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from . import config
from .db import Database
from .repository import ProductRepository
from .schemas import NewProduct

logger = logging.getLogger(__name__)

SAMPLE_PRODUCTS: List[NewProduct] = [
    NewProduct(
        title="iPhone 15 Pro",
        description="O mais avançado iPhone com chip A17 Pro, câmera profissional e tela Super Retina XDR de 6,1 polegadas. Disponível em titânio natural.",
        price=Decimal("7999.99"),
    ),
    NewProduct(
        title="MacBook Air M2",
        description="Notebook ultrafino com chip M2, tela Liquid Retina de 13,6 polegadas, bateria que dura o dia todo e design em alumínio reciclado.",
        price=Decimal("12999.00"),
    ),
    NewProduct(
        title="Samsung Galaxy S24 Ultra",
        description="Smartphone premium com S Pen integrada, câmera de 200MP, tela Dynamic AMOLED 2X de 6,8 polegadas e 5G ultrarrápido.",
        price=Decimal("8499.99"),
    ),
    NewProduct(
        title="Sony PlayStation 5",
        description="Console de videogame de última geração com SSD ultrarrápido, Ray Tracing em tempo real e áudio 3D imersivo.",
        price=Decimal("4199.90"),
    ),
    NewProduct(
        title="Nintendo Switch OLED",
        description="Console híbrido com tela OLED vibrante de 7 polegadas, áudio aprimorado e base com porta LAN integrada.",
        price=Decimal("2499.99"),
    ),
    NewProduct(
        title="AirPods Pro (2ª geração)",
        description="Fones de ouvido com cancelamento ativo de ruído, áudio espacial personalizado e case de carregamento MagSafe.",
        price=Decimal("2299.00"),
    ),
    NewProduct(
        title="Dell XPS 13",
        description="Ultrabook premium com processador Intel Core i7, tela InfinityEdge 13,4 polegadas e construção em fibra de carbono.",
        price=Decimal("9899.99"),
    ),
    NewProduct(
        title='iPad Pro 12.9"',
        description="Tablet profissional com chip M2, tela Liquid Retina XDR, suporte ao Apple Pencil e Magic Keyboard.",
        price=Decimal("13499.00"),
    ),
]


def seed(db: Session) -> int:
    """Deletes every product, inserts the samples and returns how many were created."""
    repository = ProductRepository(db)
    removed = repository.delete_all()
    logger.info(f"Removed {removed} existing products.")
    for product in SAMPLE_PRODUCTS:
        repository.create(product)
    logger.info(f"Seed finished, {len(SAMPLE_PRODUCTS)} products created.")
    return len(SAMPLE_PRODUCTS)


def main() -> int:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    database = Database(config.DATABASE_URL)
    database.open()
    try:
        database.create_tables()
        db = database.session()
        try:
            seed(db)
        finally:
            db.close()
    except Exception as e:
        logger.error(f"Seed failed: {e}", exc_info=True)
        return 1
    finally:
        database.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
