from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the product CSV importer.

Built by ``pharma_import.config.loader`` from the YAML file after schema
validation; every section except ``database`` is optional and falls back to
the defaults below.
"""


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class TableConfig:
    """Table names of the product store."""
    products: str = "products"
    categories: str = "categories"


@dataclass(frozen=True)
class ProductDefaults:
    """Fixed values written with every imported product.

    These fields are not part of the CSV; they only make a freshly inserted
    product usable at the POS.
    """
    unit: str = "ชิ้น"
    min_stock_level: int = 10  # reorder threshold
    product_type: str = "finished_goods"
    stock_tracking_type: str = "tracked"
    is_active: bool = True


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for the import process."""
    database: DatabaseConfig
    tables: TableConfig = field(default_factory=TableConfig)
    defaults: ProductDefaults = field(default_factory=ProductDefaults)
    error_log_dir: str = "./logs"
