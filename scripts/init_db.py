"""Creates the data directory and an empty products table."""
import logging

import pandas as pd

from catalog.config import settings, configure_logging
from catalog.database import db
from catalog.models.product import Product

logger = logging.getLogger("catalog.scripts.init_db")


def main() -> None:
    configure_logging()
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    path = db.file_path("products")
    if path.exists():
        logger.info("%s already exists", path)
        return
    columns = list(Product().to_dict().keys())
    df = pd.DataFrame(columns=columns)
    if path.suffix.lower() == ".xlsx":
        df.to_excel(path, index=False)
    else:
        df.to_csv(path, index=False)
    logger.info("Created %s", path)


if __name__ == "__main__":
    main()
